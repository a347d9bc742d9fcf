"""Table dependency graph (creation order, FK cycles)."""

from .schema_graph import SchemaGraph, build_schema_graph

__all__ = [
    "SchemaGraph",
    "build_schema_graph",
]
