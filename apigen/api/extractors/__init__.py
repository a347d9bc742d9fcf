"""Template context extraction and per-language type mapping."""

from .entity_extractor import build_entity_context, build_function_contexts, entity_names
from .type_mapper import TypeMapper, split_list_type

__all__ = [
    "build_entity_context",
    "build_function_contexts",
    "entity_names",
    "TypeMapper",
    "split_list_type",
]
