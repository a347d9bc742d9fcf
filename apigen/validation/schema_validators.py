"""
Schema-level validation.

Each verifier returns a list of issue strings instead of raising, so the CLI
can report everything wrong with a schema in one pass.
"""

from collections import defaultdict


def verify_primary_keys(schema):
    issues = []
    for table in schema.tables:
        if not table.primary_key_columns:
            issues.append(f"Table '{table.name}' has no primary key")
    return issues


def verify_foreign_keys(schema):
    issues = []
    for table in schema.tables:
        for fk in table.foreign_keys:
            target = schema.get_table(fk.referenced_table)
            if target is None:
                issues.append(
                    f"Foreign key in '{table.name}' references non-existent table "
                    f"'{fk.referenced_table}'"
                )
                continue
            if not table.has_column(fk.column_name):
                issues.append(
                    f"Foreign key in '{table.name}' uses unknown column '{fk.column_name}'"
                )
            if not target.has_column(fk.referenced_column):
                issues.append(
                    f"Foreign key in '{table.name}' references unknown column "
                    f"'{fk.referenced_table}.{fk.referenced_column}'"
                )
    return issues


def verify_unique_entity_names(schema):
    """Two tables like 'user' and 'users' would both generate 'User'."""
    by_entity = defaultdict(list)
    for table in schema.entity_tables:
        by_entity[table.entity_name].append(table.name)

    issues = []
    for entity_name, table_names in by_entity.items():
        if len(table_names) > 1:
            issues.append(
                f"Multiple tables would generate entity name '{entity_name}': "
                f"{', '.join(table_names)}"
            )
    return issues


def validate_schema(schema):
    """Run every schema verifier; an empty list means the schema is usable."""
    return (
        verify_primary_keys(schema)
        + verify_foreign_keys(schema)
        + verify_unique_entity_names(schema)
    )
