"""
Processors module for apigen.

TextX object processors that normalize terminals (identifiers, type names,
default values) while a DDL statement is being parsed.
"""

from apigen.processors.object_processors import (
    get_obj_processors,
    ident_obj_processor,
    qualified_name_obj_processor,
    type_name_obj_processor,
    default_value_obj_processor,
)

__all__ = [
    "get_obj_processors",
    "ident_obj_processor",
    "qualified_name_obj_processor",
    "type_name_obj_processor",
    "default_value_obj_processor",
]
