"""
SQL type name -> logical type.

Logical types are a small language-neutral vocabulary (Integer, Long, String,
LocalDateTime, ...) that every target's type mapper translates further.
"""

import re

_SQL_TO_LOGICAL = {
    "INTEGER": "Integer", "INT": "Integer", "INT4": "Integer",
    "SERIAL": "Integer", "SERIAL4": "Integer", "MEDIUMINT": "Integer",
    "BIGINT": "Long", "INT8": "Long", "BIGSERIAL": "Long", "SERIAL8": "Long",
    "SMALLINT": "Short", "INT2": "Short", "SMALLSERIAL": "Short", "SERIAL2": "Short",
    "TINYINT": "Byte",
    "DECIMAL": "BigDecimal", "NUMERIC": "BigDecimal", "NUMBER": "BigDecimal",
    "MONEY": "BigDecimal",
    "REAL": "Float", "FLOAT4": "Float",
    "DOUBLE": "Double", "FLOAT8": "Double", "DOUBLE PRECISION": "Double",
    "FLOAT": "Double",
    "BOOLEAN": "Boolean", "BOOL": "Boolean", "BIT": "Boolean",
    "DATE": "LocalDate",
    "TIME": "LocalTime", "TIMETZ": "LocalTime",
    "TIME WITH TIME ZONE": "LocalTime", "TIME WITHOUT TIME ZONE": "LocalTime",
    "TIMESTAMP": "LocalDateTime", "TIMESTAMPTZ": "LocalDateTime",
    "TIMESTAMP WITH TIME ZONE": "LocalDateTime",
    "TIMESTAMP WITHOUT TIME ZONE": "LocalDateTime",
    "DATETIME": "LocalDateTime", "DATETIME2": "LocalDateTime",
    "UUID": "UUID", "UNIQUEIDENTIFIER": "UUID",
    "BYTEA": "byte[]", "BLOB": "byte[]", "BINARY": "byte[]", "VARBINARY": "byte[]",
    "LONGBLOB": "byte[]", "MEDIUMBLOB": "byte[]",
    "INTERVAL": "Duration",
    "ARRAY": "List<Object>",
}

_STRING_TYPES = {
    "VARCHAR", "CHARACTER VARYING", "NVARCHAR", "TEXT", "CHAR", "CHARACTER",
    "NCHAR", "CLOB", "NCLOB", "JSON", "JSONB", "INET", "CIDR", "MACADDR",
    "POINT", "LINE", "LSEG", "BOX", "PATH", "POLYGON", "CIRCLE", "GEOMETRY",
    "GEOGRAPHY", "ENUM", "MEDIUMTEXT", "LONGTEXT", "TINYTEXT", "CITEXT", "XML",
}

SERIAL_TYPES = {"SERIAL", "SERIAL2", "SERIAL4", "SERIAL8", "BIGSERIAL", "SMALLSERIAL"}


def normalize_sql_type(sql_type: str) -> str:
    """Upper-case, strip arguments, collapse whitespace: 'varchar (20)' -> 'VARCHAR'."""
    base = re.sub(r"\(.*\)", "", sql_type or "")
    return re.sub(r"\s+", " ", base).strip().upper()


def map_sql_type(sql_type: str) -> str:
    """Map a SQL column type to its logical type, 'Object' when unknown."""
    normalized = normalize_sql_type(sql_type)
    if normalized.endswith("[]"):
        element = map_sql_type(normalized[:-2])
        return f"List<{element}>"
    if normalized in _SQL_TO_LOGICAL:
        return _SQL_TO_LOGICAL[normalized]
    if normalized in _STRING_TYPES:
        return "String"
    if normalized.startswith(("TIMESTAMP", "DATETIME")):
        return "LocalDateTime"
    return "Object"


def is_serial_type(sql_type: str) -> bool:
    return normalize_sql_type(sql_type) in SERIAL_TYPES
