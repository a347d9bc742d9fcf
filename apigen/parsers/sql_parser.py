"""
SQL schema parser.

Turns a DDL script into a SqlSchema:

1. Stored functions/procedures ($$-quoted bodies) are extracted by regex and
   removed from the text, since their bodies are not DDL.
2. The remaining text is split into statements with sqlparse.
3. CREATE TABLE / CREATE INDEX / ALTER TABLE statements are parsed with the
   textX grammar in grammar/sql_ddl.tx; CREATE EXTENSION and COMMENT ON are
   handled with small regexes; anything else is skipped.

A statement that fails to parse is recorded in schema.parse_errors and parsing
continues with the next one.
"""

import re
from pathlib import Path
from typing import List, Optional

import sqlparse
from textx import TextXSemanticError, TextXSyntaxError

from apigen.api.gen_logging import get_logger
from apigen.exceptions import SqlParseError
from apigen.language import parse_statement
from apigen.model.schema import (
    ForeignKeyAction,
    IndexType,
    ParameterMode,
    SqlColumn,
    SqlForeignKey,
    SqlFunction,
    SqlIndex,
    SqlParameter,
    SqlSchema,
    SqlTable,
)
from apigen.model.sql_types import is_serial_type, map_sql_type, normalize_sql_type

logger = get_logger(__name__)


_FUNCTION_HEAD = re.compile(
    r"CREATE\s+(?:OR\s+REPLACE\s+)?(FUNCTION|PROCEDURE)\s+([\w.\"]+)\s*\(",
    re.IGNORECASE,
)
_FUNCTION_TAIL = re.compile(
    r"\s*(?:RETURNS\s+(?P<returns>.+?))?\s*(?:LANGUAGE\s+(?P<lang>\w+)\s*)?"
    r"AS\s*(?P<tag>\$\w*\$)(?P<body>.*?)(?P=tag)(?:\s*LANGUAGE\s+(?P<lang_after>\w+))?",
    re.IGNORECASE | re.DOTALL,
)

_CREATE_TABLE = re.compile(
    r"^CREATE\s+(?:(?:GLOBAL|LOCAL)\s+)?(?:(?:TEMP|TEMPORARY|UNLOGGED)\s+)?TABLE\b", re.I
)
_CREATE_INDEX = re.compile(r"^CREATE\s+(?:UNIQUE\s+)?(?:(?:NON)?CLUSTERED\s+)?INDEX\b", re.I)
_ALTER_TABLE = re.compile(r"^ALTER\s+TABLE\b", re.I)
_CREATE_EXTENSION = re.compile(
    r"^CREATE\s+EXTENSION\s+(?:IF\s+NOT\s+EXISTS\s+)?\"?([\w-]+)\"?", re.I
)
_COMMENT_ON = re.compile(
    r"^COMMENT\s+ON\s+(TABLE|COLUMN)\s+([\w.\"]+)\s+IS\s+'((?:[^']|'')*)'", re.I | re.S
)

_PRECISION_TYPES = {"DECIMAL", "NUMERIC", "NUMBER", "FLOAT", "DOUBLE PRECISION", "REAL"}


class SqlSchemaParser:
    """Parse SQL DDL text into a SqlSchema."""

    def parse_file(self, path) -> SqlSchema:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SqlParseError(f"Cannot read SQL file {path}: {e}") from e
        return self.parse(content, str(path))

    def parse_string(self, content: str) -> SqlSchema:
        return self.parse(content, "inline-sql")

    def parse(self, content: str, source_name: str = "schema.sql") -> SqlSchema:
        if content is None or not content.strip():
            raise SqlParseError("SQL content is empty")

        schema = SqlSchema(name=Path(source_name).stem or "schema", source_file=source_name)

        content = self._extract_functions(content, schema)

        for raw in sqlparse.split(content):
            statement = sqlparse.format(raw, strip_comments=True).strip().rstrip(";").strip()
            if statement:
                self._parse_statement(statement, schema)

        logger.debug(
            f"[PARSE] {source_name}: {len(schema.tables)} tables, "
            f"{len(schema.functions)} functions, {len(schema.parse_errors)} errors"
        )
        return schema

    # ------------------------------------------------------------------
    # Functions and procedures

    def _extract_functions(self, content: str, schema: SqlSchema) -> str:
        """Record every $$-bodied function and return the text without them."""
        pieces = []
        position = 0
        for head in _FUNCTION_HEAD.finditer(content):
            if head.start() < position:
                continue
            params_end = _find_closing_paren(content, head.end() - 1)
            if params_end is None:
                continue
            tail = _FUNCTION_TAIL.match(content, params_end + 1)
            if tail is None:
                continue

            params_text = content[head.end():params_end]
            schema.functions.append(SqlFunction(
                name=head.group(2).replace('"', "").split(".")[-1],
                function_type=head.group(1).upper(),
                parameters=_parse_parameters(params_text),
                return_type=(tail.group("returns") or "").strip() or None,
                language=(tail.group("lang") or tail.group("lang_after") or "sql").lower(),
                body=tail.group("body").strip(),
            ))
            pieces.append(content[position:head.start()])
            position = tail.end()
        pieces.append(content[position:])
        return "".join(pieces)

    # ------------------------------------------------------------------
    # Statement dispatch

    def _parse_statement(self, statement: str, schema: SqlSchema):
        if _CREATE_TABLE.match(statement):
            self._parse_ddl(statement, "CREATE TABLE", schema, self._handle_create_table)
        elif _CREATE_INDEX.match(statement):
            self._parse_ddl(statement, "CREATE INDEX", schema, self._handle_create_index)
        elif _ALTER_TABLE.match(statement):
            self._parse_ddl(statement, "ALTER TABLE", schema, self._handle_alter_table)
        elif _CREATE_EXTENSION.match(statement):
            schema.extensions.append(_CREATE_EXTENSION.match(statement).group(1))
        elif _COMMENT_ON.match(statement):
            self._handle_comment(_COMMENT_ON.match(statement), schema)
        else:
            logger.debug(f"[SKIP] {statement[:60]}")

    def _parse_ddl(self, statement, kind, schema, handler):
        try:
            node = parse_statement(statement)
        except (TextXSyntaxError, TextXSemanticError) as e:
            schema.parse_errors.append(f"Could not parse {kind}: {statement[:50]} ({e})")
            logger.warning(f"[WARN] Could not parse {kind}: {statement[:50]}")
            return
        handler(node, schema)

    # ------------------------------------------------------------------
    # CREATE TABLE

    def _handle_create_table(self, node, schema: SqlSchema):
        schema_name, table_name = _split_qualified(node.name)
        table = SqlTable(name=table_name, schema=schema_name)

        for element in node.elements:
            if element.__class__.__name__ == "ColumnDef":
                self._add_column(table, element)
        for element in node.elements:
            if element.__class__.__name__ == "TableConstraint":
                self._apply_table_constraint(table, element)

        schema.tables.append(table)

    def _add_column(self, table: SqlTable, coldef):
        sql_type = _render_type(coldef.type)
        column = SqlColumn(
            name=coldef.name,
            sql_type=sql_type,
            logical_type=map_sql_type(sql_type),
            auto_increment=is_serial_type(coldef.type.name),
        )
        _apply_type_args(column, coldef.type)

        pending_constraint_name = None
        for constraint in coldef.constraints:
            if constraint.constraintName:
                pending_constraint_name = constraint.constraintName
            elif constraint.notNull:
                column.nullable = False
            elif constraint.explicitNull:
                column.nullable = True
            elif constraint.primaryKey:
                column.primary_key = True
                column.nullable = False
                if column.name not in table.primary_key_columns:
                    table.primary_key_columns.append(column.name)
            elif constraint.unique:
                column.unique = True
            elif constraint.autoIncrement or constraint.identity:
                column.auto_increment = True
            elif constraint.generated is not None:
                if constraint.generated.identity:
                    column.auto_increment = True
            elif constraint.default:
                column.default_value = constraint.default
            elif constraint.references is not None:
                table.foreign_keys.append(
                    _build_foreign_key(column.name, constraint.references, pending_constraint_name)
                )
                pending_constraint_name = None
            elif constraint.check:
                column.check = constraint.check
                table.check_constraints.append(constraint.check)
            elif constraint.comment:
                column.comment = constraint.comment

        table.columns.append(column)
        return column

    def _apply_table_constraint(self, table: SqlTable, constraint):
        if constraint.primaryKey is not None:
            names = [c.name for c in constraint.primaryKey.columns]
            for column in table.columns:
                column.primary_key = False
            table.primary_key_columns = []
            for name in names:
                column = table.get_column(name)
                if column is not None:
                    column.primary_key = True
                    column.nullable = False
                    name = column.name
                table.primary_key_columns.append(name)

        elif constraint.unique is not None:
            names = [c.name for c in constraint.unique.columns]
            table.unique_constraints.append(",".join(names))
            if len(names) == 1:
                column = table.get_column(names[0])
                if column is not None:
                    column.unique = True

        elif constraint.foreignKey is not None:
            fk_def = constraint.foreignKey
            referenced = list(fk_def.references.columns) or ["id"] * len(fk_def.columns)
            for column_name, referenced_column in zip(fk_def.columns, referenced):
                fk = _build_foreign_key(column_name, fk_def.references, constraint.name or fk_def.name)
                fk.referenced_column = referenced_column
                table.foreign_keys.append(fk)

        elif constraint.check is not None:
            table.check_constraints.append(constraint.check.expression)

        elif constraint.index is not None:
            index_def = constraint.index
            columns = [c.name for c in index_def.columns]
            table.indexes.append(SqlIndex(
                name=constraint.name or index_def.name or f"idx_{table.name}_{'_'.join(columns)}",
                table_name=table.name,
                columns=columns,
                unique=False,
                index_type=IndexType.parse(index_def.method.name if index_def.method else None),
            ))

    # ------------------------------------------------------------------
    # CREATE INDEX

    def _handle_create_index(self, node, schema: SqlSchema):
        _, table_name = _split_qualified(node.table)
        columns = [c.name for c in node.columns]
        index_name = _split_qualified(node.name)[1] if node.name else (
            f"idx_{table_name}_{'_'.join(columns)}"
        )
        index = SqlIndex(
            name=index_name,
            table_name=table_name,
            columns=columns,
            unique=bool(node.unique),
            index_type=IndexType.parse(node.method.name if node.method else None),
        )
        schema.standalone_indexes.append(index)
        table = schema.get_table(table_name)
        if table is not None:
            table.indexes.append(index)

    # ------------------------------------------------------------------
    # ALTER TABLE

    def _handle_alter_table(self, node, schema: SqlSchema):
        _, table_name = _split_qualified(node.table)
        table = schema.get_table(table_name)
        if table is None:
            schema.parse_errors.append(f"ALTER references unknown table: {table_name}")
            return

        for action in node.actions:
            kind = action.__class__.__name__
            if kind == "AddConstraintAction":
                self._apply_table_constraint(table, action.constraint)
            elif kind == "AddColumnAction":
                self._add_column(table, action.column)
            else:
                logger.debug(f"[SKIP] ALTER TABLE {table_name} {action.text.strip()[:40]}")

    # ------------------------------------------------------------------
    # COMMENT ON

    def _handle_comment(self, match, schema: SqlSchema):
        target_kind = match.group(1).upper()
        parts = match.group(2).replace('"', "").split(".")
        text = match.group(3).replace("''", "'")

        if target_kind == "TABLE":
            table = schema.get_table(parts[-1])
            if table is not None:
                table.comment = text
            return

        if len(parts) < 2:
            return
        table = schema.get_table(parts[-2])
        column = table.get_column(parts[-1]) if table is not None else None
        if column is not None:
            column.comment = text


# ------------------------------------------------------------------------------
# Helpers

def _split_qualified(qualified: str):
    """'public.users' -> ('public', 'users'); 'users' -> (None, 'users')."""
    if "." in qualified:
        schema_name, _, name = qualified.rpartition(".")
        return schema_name, name
    return None, qualified


def _render_type(data_type) -> str:
    sql_type = data_type.name
    if data_type.args:
        sql_type += f"({','.join(data_type.args)})"
    if data_type.timeZone:
        sql_type += " " + " ".join(data_type.timeZone.upper().split())
    if data_type.array:
        sql_type += "[]"
    return sql_type


def _apply_type_args(column: SqlColumn, data_type):
    numeric = [a for a in data_type.args if a.isdigit()]
    quoted = [a for a in data_type.args if a.startswith("'")]

    if quoted:
        column.enum_values = [a[1:-1].replace("''", "'") for a in quoted]
        return
    if len(numeric) >= 2:
        column.precision = int(numeric[0])
        column.scale = int(numeric[1])
    elif len(numeric) == 1:
        if normalize_sql_type(data_type.name) in _PRECISION_TYPES:
            column.precision = int(numeric[0])
        else:
            column.length = int(numeric[0])


def _build_foreign_key(column_name: str, references, constraint_name: Optional[str]) -> SqlForeignKey:
    _, referenced_table = _split_qualified(references.table)
    fk = SqlForeignKey(
        column_name=column_name,
        referenced_table=referenced_table,
        referenced_column=references.columns[0] if references.columns else "id",
        name=constraint_name or None,
    )
    for action in references.actions:
        if action.event.lower() == "delete":
            fk.on_delete = ForeignKeyAction.parse(action.action)
        else:
            fk.on_update = ForeignKeyAction.parse(action.action)
    return fk


def _find_closing_paren(text: str, open_index: int) -> Optional[int]:
    depth = 0
    for i in range(open_index, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    return None


def _split_top_level(text: str) -> List[str]:
    parts, depth, current = [], 0, []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def _parse_parameters(params_text: str) -> List[SqlParameter]:
    parameters = []
    for i, raw in enumerate(_split_top_level(params_text)):
        definition = re.split(r"\s+DEFAULT\s+|\s*=\s*", raw, maxsplit=1, flags=re.I)[0]
        tokens = definition.split()
        mode = ParameterMode.IN
        if tokens and tokens[0].upper() in ParameterMode.__members__:
            mode = ParameterMode[tokens[0].upper()]
            tokens = tokens[1:]
        if not tokens:
            continue
        if len(tokens) == 1:
            name, sql_type = f"param{i + 1}", tokens[0]
        else:
            name, sql_type = tokens[0], " ".join(tokens[1:])
        parameters.append(SqlParameter(
            name=name,
            sql_type=sql_type,
            logical_type=map_sql_type(sql_type),
            mode=mode,
        ))
    return parameters
