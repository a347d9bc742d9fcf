"""
Validation module for apigen.

- schema_validators: structural checks on a parsed schema (keys, references,
  entity name collisions)
- config_validators: checks that a project configuration fits a target
"""

from apigen.validation.schema_validators import (
    verify_primary_keys,
    verify_foreign_keys,
    verify_unique_entity_names,
    validate_schema,
)

from apigen.validation.config_validators import (
    verify_project_config,
)

__all__ = [
    "verify_primary_keys",
    "verify_foreign_keys",
    "verify_unique_entity_names",
    "validate_schema",
    "verify_project_config",
]
