"""
Schema loading entry points.

build_schema() picks the SQL parser or the OpenAPI transformer from the file
extension (or an explicit format) and returns a SqlSchema either way.
"""

from pathlib import Path

from apigen.exceptions import ApiGenError
from apigen.parsers import SqlSchemaParser
from apigen.transformers import OpenApiParser

SQL_SUFFIXES = {".sql", ".ddl"}
OPENAPI_SUFFIXES = {".yaml", ".yml", ".json"}


def detect_format(path) -> str:
    suffix = Path(path).suffix.lower()
    if suffix in SQL_SUFFIXES:
        return "sql"
    if suffix in OPENAPI_SUFFIXES:
        return "openapi"
    raise ApiGenError(
        f"Cannot infer input format from '{suffix or path}'; use --format sql|openapi"
    )


def build_schema(path, fmt: str = None):
    """Parse a schema file (SQL DDL or OpenAPI) into a SqlSchema."""
    fmt = fmt or detect_format(path)
    if fmt == "sql":
        return SqlSchemaParser().parse_file(path)
    if fmt == "openapi":
        return OpenApiParser().parse_file(path)
    raise ApiGenError(f"Unknown input format '{fmt}'")


def build_schema_str(text: str, fmt: str = "sql"):
    """Parse schema text; fmt is 'sql' or 'openapi'."""
    if fmt == "sql":
        return SqlSchemaParser().parse_string(text)
    if fmt == "openapi":
        return OpenApiParser().parse(text, "inline-openapi")
    raise ApiGenError(f"Unknown input format '{fmt}'")
