"""
Identifier case conversion and pluralization helpers.

Every generator derives class, file, variable and route names through these
functions so that all targets agree on what an entity is called.
"""

import re

from pluralizer import Pluralizer

pluralizer = Pluralizer()

_AUDIT_FIELDS = {
    "id", "estado", "activo",
    "created_at", "updated_at", "created_by", "updated_by",
    "deleted_at", "deleted_by",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_pascal_case(value: str) -> str:
    """'user_profile' / 'user-profile' / 'userProfile' -> 'UserProfile'."""
    if not value:
        return value
    parts = to_snake_case(value).split("_")
    return "".join(p[:1].upper() + p[1:].lower() for p in parts if p)


def to_camel_case(value: str) -> str:
    """'user_profile' -> 'userProfile'."""
    pascal = to_pascal_case(value)
    if not pascal:
        return pascal
    return pascal[:1].lower() + pascal[1:]


def to_snake_case(value: str) -> str:
    """'UserProfile' / 'userProfile' / 'user-profile' -> 'user_profile'."""
    if not value:
        return value
    value = value.replace("-", "_").replace(" ", "_")
    value = _CAMEL_BOUNDARY.sub("_", value)
    return re.sub(r"_+", "_", value).lower()


def to_kebab_case(value: str) -> str:
    return to_snake_case(value).replace("_", "-")


def capitalize(value: str) -> str:
    if not value:
        return value
    return value[:1].upper() + value[1:]


def to_plural(word: str) -> str:
    """
    Heuristic English plural used for table names.

    consonant + y -> ies, s/x/z/ch/sh -> es, otherwise s.
    """
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def to_singular(word: str) -> str:
    """Naive inverse of to_plural, used to derive entity names from table names."""
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("ies") and len(lower) > 3:
        return word[:-3] + "y"
    if lower.endswith("sses"):
        return word[:-2]
    if lower.endswith(("xes", "ches", "shes")):
        return word[:-2]
    if lower.endswith(("uses", "ases", "ises", "oses")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return word[:-1]
    return word


def resource_path(entity_name: str) -> str:
    """REST collection segment for an entity: 'OrderItem' -> 'order-items'."""
    snake = to_snake_case(entity_name)
    head, _, last = snake.rpartition("_")
    plural_last = pluralizer.pluralize(last)
    return to_kebab_case(f"{head}_{plural_last}" if head else plural_last)


def to_property_name(column_name: str) -> str:
    """FK column to relation property: 'author_id' -> 'author'."""
    name = column_name
    if name.lower().endswith("_id") and len(name) > 3:
        name = name[:-3]
    return to_camel_case(name)


def is_audit_field(column_name: str) -> bool:
    return column_name.lower() in _AUDIT_FIELDS


def is_foreign_key_column(column_name: str) -> bool:
    lower = column_name.lower()
    return lower.endswith("_id") and lower != "id"
