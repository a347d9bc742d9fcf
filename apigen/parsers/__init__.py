from apigen.parsers.sql_parser import SqlSchemaParser

__all__ = ["SqlSchemaParser"]
