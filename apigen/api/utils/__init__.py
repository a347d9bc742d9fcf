"""Utility functions for the generators."""

from .naming import (
    to_pascal_case,
    to_camel_case,
    to_snake_case,
    to_kebab_case,
    to_plural,
    to_singular,
    to_property_name,
    capitalize,
    resource_path,
    is_audit_field,
    is_foreign_key_column,
)

__all__ = [
    "to_pascal_case",
    "to_camel_case",
    "to_snake_case",
    "to_kebab_case",
    "to_plural",
    "to_singular",
    "to_property_name",
    "capitalize",
    "resource_path",
    "is_audit_field",
    "is_foreign_key_column",
]
