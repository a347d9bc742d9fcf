"""
OpenAPI 3.x to SqlSchema transformer.

Transforms the component schemas of an OpenAPI document into tables so the
same generators can run from an API contract instead of DDL.

Key mappings:
- components.schemas.<Name> -> table (snake_case, pluralized)
- property -> column (type/format -> SQL type, required -> NOT NULL)
- property $ref -> <property>_id BIGINT + foreign key
- two schemas holding arrays of $ref to each other -> junction table
- request/response/dto style schemas and error/paging helpers are skipped
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from apigen.api.gen_logging import get_logger
from apigen.api.utils.naming import to_plural, to_snake_case
from apigen.exceptions import OpenApiParseError
from apigen.model.schema import SqlColumn, SqlForeignKey, SqlSchema, SqlTable

logger = get_logger(__name__)


EXCLUDED_SCHEMAS = {
    "Error", "ErrorResponse", "ValidationError", "ApiResponse",
    "PageRequest", "PageResponse", "Pageable", "Sort", "Link", "Links",
}
EXCLUDED_SUFFIXES = ("request", "response", "dto", "input", "output", "payload")

MAX_VARCHAR_LENGTH = 65535


class OpenAPIDocument:
    """Wraps an OpenAPI document and resolves local $ref pointers."""

    def __init__(self, spec: Dict[str, Any]):
        self.spec = spec
        self._ref_cache: Dict[str, Any] = {}

    def resolve_ref(self, ref: str) -> Dict[str, Any]:
        """Resolve a $ref pointer to its actual schema."""
        if ref in self._ref_cache:
            return self._ref_cache[ref]

        if not ref.startswith("#/"):
            raise OpenApiParseError(f"External refs not supported: {ref}")

        result = self.spec
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(result, dict) or part not in result:
                raise OpenApiParseError(f"Unresolvable $ref: {ref}")
            result = result[part]

        self._ref_cache[ref] = result
        return result

    def resolve_schema(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        """Resolve a schema, following $ref chains and merging allOf parts."""
        seen = set()
        while "$ref" in schema:
            ref = schema["$ref"]
            if ref in seen:
                raise OpenApiParseError(f"Circular $ref: {ref}")
            seen.add(ref)
            schema = self.resolve_ref(ref)

        if "allOf" in schema:
            merged: Dict[str, Any] = {"type": "object", "properties": {}, "required": []}
            for part in schema["allOf"]:
                part = self.resolve_schema(part)
                merged["properties"].update(part.get("properties", {}))
                merged["required"].extend(part.get("required", []))
            merged["properties"].update(schema.get("properties", {}))
            merged["required"].extend(schema.get("required", []))
            return merged
        return schema

    def get_schemas(self) -> Dict[str, Dict[str, Any]]:
        return (self.spec.get("components") or {}).get("schemas") or {}

    def get_info(self) -> Dict[str, Any]:
        return self.spec.get("info") or {}


def ref_name(ref: str) -> str:
    """'#/components/schemas/User' -> 'User'."""
    return ref.rsplit("/", 1)[-1]


def table_name_for(schema_name: str) -> str:
    return to_plural(to_snake_case(schema_name))


class SchemaConverter:
    """Converts OpenAPI property schemas to SQL column types."""

    # (type, format) -> SQL type; format None is the type's fallback
    SQL_TYPE_MAP = {
        ("string", "date"): "DATE",
        ("string", "date-time"): "TIMESTAMP",
        ("string", "time"): "TIME",
        ("string", "uuid"): "UUID",
        ("string", "email"): "VARCHAR(320)",
        ("string", "uri"): "VARCHAR(2048)",
        ("string", "url"): "VARCHAR(2048)",
        ("string", "byte"): "BYTEA",
        ("string", "binary"): "BYTEA",
        ("integer", "int64"): "BIGINT",
        ("integer", None): "INTEGER",
        ("number", "float"): "REAL",
        ("number", "double"): "DOUBLE PRECISION",
        ("number", None): "DECIMAL(19,4)",
        ("boolean", None): "BOOLEAN",
        ("array", None): "JSONB",
        ("object", None): "JSONB",
    }

    LOGICAL_TYPE_MAP = {
        ("string", "date"): "LocalDate",
        ("string", "date-time"): "LocalDateTime",
        ("string", "time"): "LocalTime",
        ("string", "uuid"): "UUID",
        ("string", "byte"): "byte[]",
        ("string", "binary"): "byte[]",
        ("string", None): "String",
        ("integer", "int64"): "Long",
        ("integer", None): "Integer",
        ("number", "float"): "Float",
        ("number", "double"): "Double",
        ("number", None): "BigDecimal",
        ("boolean", None): "Boolean",
        ("array", None): "String",
        ("object", None): "String",
    }

    def __init__(self, document: OpenAPIDocument):
        self.document = document

    def sql_type(self, prop: Dict[str, Any]) -> str:
        kind, fmt = schema_type(prop)[0], prop.get("format")
        if (kind, fmt) in self.SQL_TYPE_MAP:
            return self.SQL_TYPE_MAP[(kind, fmt)]
        if kind == "string":
            max_length = prop.get("maxLength")
            if max_length is None:
                return "VARCHAR(255)"
            if max_length > MAX_VARCHAR_LENGTH:
                return "TEXT"
            return f"VARCHAR({max_length})"
        return self.SQL_TYPE_MAP.get((kind, None), "VARCHAR(255)")

    def logical_type(self, prop: Dict[str, Any]) -> str:
        kind, fmt = schema_type(prop)[0], prop.get("format")
        if (kind, fmt) in self.LOGICAL_TYPE_MAP:
            return self.LOGICAL_TYPE_MAP[(kind, fmt)]
        return self.LOGICAL_TYPE_MAP.get((kind, None), "String")

    def build_column(self, name: str, prop: Dict[str, Any], required: bool) -> SqlColumn:
        sql_type = self.sql_type(prop)
        length, precision, scale = extract_length(sql_type), *extract_precision_scale(sql_type)
        default = prop.get("default")
        return SqlColumn(
            name=to_snake_case(name),
            sql_type=sql_type,
            logical_type=self.logical_type(prop),
            nullable=not required or schema_type(prop)[1],
            unique=bool(prop.get("uniqueItems", False)),
            length=length,
            precision=precision,
            scale=scale,
            default_value=_sql_literal(default) if default is not None else None,
            enum_values=[str(v) for v in prop.get("enum", [])],
            comment=prop.get("description"),
        )


def schema_type(prop: Dict[str, Any]) -> Tuple[str, bool]:
    """
    Return the (type, nullable) pair of a property schema.

    OpenAPI 3.1 spells optional values as a type list such as
    `["string", "null"]`; 3.0 uses `nullable: true`.
    """
    kind = prop.get("type", "string")
    nullable = bool(prop.get("nullable", False))
    if isinstance(kind, list):
        nullable = nullable or "null" in kind
        kind = next((k for k in kind if k != "null"), "string")
    return kind, nullable


def extract_length(sql_type: str) -> Optional[int]:
    """'VARCHAR(320)' -> 320."""
    if sql_type.startswith(("VARCHAR(", "CHAR(")):
        return int(sql_type[sql_type.index("(") + 1:-1])
    return None


def extract_precision_scale(sql_type: str) -> Tuple[Optional[int], Optional[int]]:
    """'DECIMAL(19,4)' -> (19, 4)."""
    if sql_type.startswith(("DECIMAL(", "NUMERIC(")):
        args = sql_type[sql_type.index("(") + 1:-1].split(",")
        precision = int(args[0])
        scale = int(args[1]) if len(args) > 1 else 0
        return precision, scale
    return None, None


def _sql_literal(value) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list)):
        return "'" + json.dumps(value).replace("'", "''") + "'"
    return "'" + str(value).replace("'", "''") + "'"


def is_excluded_schema(name: str) -> bool:
    if name in EXCLUDED_SCHEMAS:
        return True
    return name.lower().endswith(EXCLUDED_SUFFIXES)


class OpenApiSchemaTransformer:
    """Build a SqlSchema from a parsed OpenAPI document."""

    def __init__(self, spec: Dict[str, Any]):
        self.document = OpenAPIDocument(spec)
        self.converter = SchemaConverter(self.document)

    def transform(self, source_name: str = "openapi") -> SqlSchema:
        info = self.document.get_info()
        schema = SqlSchema(name=info.get("title") or "OpenAPI Schema", source_file=source_name)

        entities = self._entity_schemas()
        for name, definition in entities.items():
            try:
                schema.tables.append(self._build_table(name, definition, entities))
            except OpenApiParseError as e:
                schema.parse_errors.append(f"Failed to convert schema '{name}': {e}")
                logger.warning(f"[WARN] Skipping schema '{name}': {e}")

        for junction in self._build_junction_tables(entities):
            schema.tables.append(junction)

        logger.debug(f"[PARSE] {source_name}: {len(schema.tables)} tables from components.schemas")
        return schema

    def _entity_schemas(self) -> Dict[str, Dict[str, Any]]:
        entities = {}
        for name, definition in self.document.get_schemas().items():
            if is_excluded_schema(name):
                logger.debug(f"[SKIP] schema {name} (excluded)")
                continue
            resolved = self.document.resolve_schema(definition or {})
            if not resolved.get("properties"):
                logger.debug(f"[SKIP] schema {name} (no properties)")
                continue
            entities[name] = resolved
        return entities

    def _build_table(self, name: str, definition: Dict[str, Any], entities) -> SqlTable:
        table = SqlTable(name=table_name_for(name), comment=definition.get("description"))
        required = set(definition.get("required", []))

        for prop_name, raw_prop in definition.get("properties", {}).items():
            if prop_name == "id":
                table.columns.append(self._id_column(self.document.resolve_schema(raw_prop)))
                table.primary_key_columns.append("id")
                continue

            if "$ref" in raw_prop:
                target = ref_name(raw_prop["$ref"])
                if target not in entities:
                    raw_prop = self.document.resolve_schema(raw_prop)
                else:
                    column_name = f"{to_snake_case(prop_name)}_id"
                    table.columns.append(SqlColumn(
                        name=column_name,
                        sql_type="BIGINT",
                        logical_type="Long",
                        nullable=prop_name not in required,
                    ))
                    table.foreign_keys.append(SqlForeignKey(
                        column_name=column_name,
                        referenced_table=table_name_for(target),
                        referenced_column="id",
                    ))
                    continue

            if schema_type(raw_prop)[0] == "array" and "$ref" in (raw_prop.get("items") or {}):
                continue

            prop = self.document.resolve_schema(raw_prop)
            table.columns.append(
                self.converter.build_column(prop_name, prop, prop_name in required)
            )

        if not table.primary_key_columns:
            table.columns.insert(0, SqlColumn(
                name="id",
                sql_type="BIGSERIAL",
                logical_type="Long",
                nullable=False,
                primary_key=True,
                auto_increment=True,
            ))
            table.primary_key_columns.append("id")
        return table

    def _id_column(self, prop: Dict[str, Any]) -> SqlColumn:
        if prop.get("format") == "uuid":
            return SqlColumn(name="id", sql_type="UUID", logical_type="UUID",
                             nullable=False, primary_key=True)
        return SqlColumn(name="id", sql_type="BIGSERIAL", logical_type="Long",
                         nullable=False, primary_key=True, auto_increment=True)

    def _build_junction_tables(self, entities) -> List[SqlTable]:
        links = {}
        for name, definition in entities.items():
            targets = set()
            for prop in definition.get("properties", {}).values():
                items = prop.get("items") or {}
                if schema_type(prop)[0] == "array" and "$ref" in items:
                    targets.add(ref_name(items["$ref"]))
            links[name] = targets

        junctions, seen = [], set()
        for name, targets in links.items():
            for target in sorted(targets):
                if target == name or name not in links.get(target, set()):
                    continue
                first, second = sorted((to_snake_case(name), to_snake_case(target)))
                key = (first, second)
                if key in seen:
                    continue
                seen.add(key)
                junctions.append(_junction_table(first, second))
        return junctions


def _junction_table(first: str, second: str) -> SqlTable:
    table = SqlTable(name=f"{first}_{second}")
    for side in (first, second):
        column = f"{side}_id"
        table.columns.append(SqlColumn(
            name=column, sql_type="BIGINT", logical_type="Long",
            nullable=False, primary_key=True,
        ))
        table.primary_key_columns.append(column)
        table.foreign_keys.append(SqlForeignKey(
            column_name=column,
            referenced_table=to_plural(side),
            referenced_column="id",
        ))
    return table


# ------------------------------------------------------------------------------
# Loading

def load_openapi_spec(text: str) -> Dict[str, Any]:
    """Parse YAML or JSON text into a document, validating the top level."""
    if text is None or not text.strip():
        raise OpenApiParseError("OpenAPI content is empty")
    try:
        if text.lstrip().startswith("{"):
            spec = json.loads(text)
        else:
            spec = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise OpenApiParseError(f"Failed to parse OpenAPI document: {e}") from e

    if not isinstance(spec, dict):
        raise OpenApiParseError("OpenAPI document must be a mapping")
    if "openapi" not in spec and "swagger" not in spec:
        raise OpenApiParseError("Not an OpenAPI document (missing 'openapi' version)")
    return spec


class OpenApiParser:
    """Entry point mirroring SqlSchemaParser: text/file in, SqlSchema out."""

    def parse(self, text: str, source_name: str = "openapi") -> SqlSchema:
        return OpenApiSchemaTransformer(load_openapi_spec(text)).transform(source_name)

    def parse_file(self, path) -> SqlSchema:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise OpenApiParseError(f"Cannot read OpenAPI file {path}: {e}") from e
        return self.parse(text, str(path))
