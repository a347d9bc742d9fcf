"""
In-memory schema model shared by the SQL parser, the OpenAPI transformer and
all code generators.
"""

from apigen.model.schema import (
    ForeignKeyAction,
    IndexType,
    ManyToManyRelation,
    ParameterMode,
    RelationType,
    SqlColumn,
    SqlForeignKey,
    SqlFunction,
    SqlIndex,
    SqlParameter,
    SqlSchema,
    SqlTable,
    TableRelationship,
)
from apigen.model.sql_types import map_sql_type

__all__ = [
    "ForeignKeyAction",
    "IndexType",
    "ManyToManyRelation",
    "ParameterMode",
    "RelationType",
    "SqlColumn",
    "SqlForeignKey",
    "SqlFunction",
    "SqlIndex",
    "SqlParameter",
    "SqlSchema",
    "SqlTable",
    "TableRelationship",
    "map_sql_type",
]
