"""
SQL migration generator.

Re-emits the parsed schema as one initial migration script: extensions, tables
in foreign-key dependency order, indexes, FKs that had to be deferred because
of reference cycles, and stored functions.
"""

from typing import Dict, List

from apigen.api.gen_logging import get_logger
from apigen.api.graph import build_schema_graph
from apigen.model.sql_types import is_serial_type

logger = get_logger(__name__)


def column_ddl(column) -> str:
    parts = [column.name, column.sql_type]
    if column.auto_increment and not is_serial_type(column.sql_type):
        parts.append("GENERATED BY DEFAULT AS IDENTITY")
    if not column.nullable or column.primary_key:
        parts.append("NOT NULL")
    if column.unique and not column.primary_key:
        parts.append("UNIQUE")
    if column.default_value is not None:
        parts.append(f"DEFAULT {column.default_value}")
    if column.check:
        parts.append(f"CHECK {column.check}")
    return " ".join(parts)


def _fk_context(table, fk) -> Dict:
    return {
        "table": table.name,
        "name": fk.name or f"fk_{table.name}_{fk.column_name}",
        "column": fk.column_name,
        "ref_table": fk.referenced_table,
        "ref_column": fk.referenced_column,
        "on_delete": fk.on_delete.value,
        "on_update": fk.on_update.value,
    }


def build_table_contexts(schema) -> List[Dict]:
    """Tables in creation order, with inline and deferred FKs separated."""
    graph = build_schema_graph(schema)
    deferred = {id(fk) for _, fk in graph.deferred_foreign_keys()}

    contexts = []
    for table in graph.creation_order():
        inline_fks = [_fk_context(table, fk) for fk in table.foreign_keys if id(fk) not in deferred]
        indexed = {tuple(c.lower() for c in i.columns) for i in table.indexes}
        index_names = {i.name.lower() for i in table.indexes}
        fk_indexes = []
        for fk in table.foreign_keys:
            name = f"idx_{table.name}_{fk.column_name}"
            if (fk.column_name.lower(),) in indexed or name.lower() in index_names:
                continue
            if table.primary_key_columns[:1] == [fk.column_name]:
                continue
            fk_indexes.append({"name": name, "column": fk.column_name})
        contexts.append({
            "name": table.name,
            "entity": table.entity_name,
            "comment": table.comment,
            "is_junction": table.is_junction_table,
            "columns": [
                {
                    "name": c.name,
                    "ddl": column_ddl(c),
                    "logical": c.logical_type,
                    "sql_type": c.sql_type,
                    "nullable": c.nullable and not c.primary_key,
                    "primary_key": c.primary_key,
                    "unique": c.unique,
                    "auto_increment": c.auto_increment,
                    "default": c.default_value,
                    "length": c.length,
                    "precision": c.precision,
                    "scale": c.scale,
                    "comment": c.comment,
                }
                for c in table.columns
            ],
            "primary_key": list(table.primary_key_columns),
            "foreign_keys": inline_fks,
            "fk_indexes": fk_indexes,
            "definitions": _table_definitions(table, inline_fks),
            "indexes": [
                {"name": i.name, "columns": i.columns, "unique": i.unique,
                 "type": i.index_type.value}
                for i in table.indexes
            ],
        })
    return contexts


def deferred_fk_contexts(schema) -> List[Dict]:
    graph = build_schema_graph(schema)
    return [_fk_context(table, fk) for table, fk in graph.deferred_foreign_keys()]


def generate_migration_sql(schema, env) -> str:
    tables = build_table_contexts(schema)
    deferred = deferred_fk_contexts(schema)
    if deferred:
        logger.info(f"  [INFO] {len(deferred)} foreign key(s) deferred to break reference cycles")
    return env.get_template("migration.sql.jinja").render(
        schema_name=schema.name,
        extensions=schema.extensions,
        tables=tables,
        deferred_foreign_keys=deferred,
        functions=schema.functions,
    )


def _table_definitions(table, inline_fks) -> List[str]:
    """Column and constraint lines of a CREATE TABLE body."""
    lines = [column_ddl(c) for c in table.columns]
    if table.primary_key_columns:
        lines.append(f"PRIMARY KEY ({', '.join(table.primary_key_columns)})")
    for unique in table.unique_constraints:
        columns = unique.split(",")
        if len(columns) > 1:
            lines.append(f"UNIQUE ({', '.join(columns)})")
    column_checks = {c.check for c in table.columns if c.check}
    for check in table.check_constraints:
        if check not in column_checks:
            lines.append(f"CHECK {check}")
    for fk in inline_fks:
        line = (f"CONSTRAINT {fk['name']} FOREIGN KEY ({fk['column']}) "
                f"REFERENCES {fk['ref_table']}({fk['ref_column']})")
        if fk["on_delete"] != "NO ACTION":
            line += f" ON DELETE {fk['on_delete']}"
        if fk["on_update"] != "NO ACTION":
            line += f" ON UPDATE {fk['on_update']}"
        lines.append(line)
    return lines
