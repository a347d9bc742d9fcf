"""
TextX object processors for the SQL DDL grammar.

Processors registered for match rules replace the matched text, so by the
time the parser walks the model, identifiers are unquoted, qualified names are
plain dotted strings and type names are upper-cased.
"""

import re


_QUOTES = {'"': '"', "`": "`", "[": "]"}


def ident_obj_processor(ident):
    """Strip "double", `backtick` and [bracket] quoting from an identifier."""
    if len(ident) >= 2 and ident[0] in _QUOTES and ident[-1] == _QUOTES[ident[0]]:
        return ident[1:-1]
    return ident


def qualified_name_obj_processor(qname):
    """Collapse QualifiedName parts into 'schema.table'."""
    return ".".join(qname.parts)


def type_name_obj_processor(type_name):
    return re.sub(r"\s+", " ", type_name).strip().upper()


def default_value_obj_processor(value):
    """
    Drop PostgreSQL casts ('active'::character varying -> 'active') and one
    level of wrapping parentheses.
    """
    value = re.sub(r"::[A-Za-z_]+(\s+varying)?$", "", value.strip())
    if value.startswith("(") and value.endswith(")") and value.count("(") == 1:
        value = value[1:-1].strip()
    return value


def get_obj_processors():
    """Return object processor configuration for the metamodel."""
    return {
        "Ident": ident_obj_processor,
        "QualifiedName": qualified_name_obj_processor,
        "TypeName": type_name_obj_processor,
        "DefaultValue": default_value_obj_processor,
    }
