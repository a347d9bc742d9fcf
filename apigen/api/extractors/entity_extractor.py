"""
Template context extraction.

Turns SqlTable objects into plain dicts that Jinja templates consume. All
naming decisions (class, variable, route, relation property names) are made
here once, so the per-target templates only pick the form they need.
"""

from typing import Dict, List, Optional

from apigen.api.gen_logging import get_logger
from apigen.api.extractors.type_mapper import split_list_type
from apigen.api.utils.naming import (
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    to_property_name,
    to_snake_case,
    resource_path,
)
from apigen.api.utils.relationships import (
    find_inverse_relationships,
    find_many_to_many_relations,
)
from apigen.features import Feature
from apigen.model.schema import BASE_COLUMNS, RelationType

logger = get_logger(__name__)


_NUMERIC = {"Integer", "Long", "Short", "Byte", "BigDecimal", "Float", "Double"}
_TEMPORAL = {"LocalDate", "LocalTime", "LocalDateTime"}
_CASE = {
    "camel": to_camel_case,
    "pascal": to_pascal_case,
    "snake": to_snake_case,
}


def entity_names(table) -> Dict[str, str]:
    """Every spelling of a table's entity name used by the templates."""
    name = table.entity_name
    snake = to_snake_case(name)
    plural_snake = to_plural(snake)
    return {
        "table": table.name,
        "name": name,
        "variable": to_camel_case(name),
        "snake": snake,
        "kebab": to_kebab_case(name),
        "plural": to_pascal_case(plural_snake),
        "plural_variable": to_camel_case(plural_snake),
        "plural_snake": plural_snake,
        "resource": resource_path(name),
        "module": table.module_name,
    }


def build_field(column, mapper, field_case: str = "camel") -> Dict:
    logical = column.logical_type
    base_logical = split_list_type(logical) or logical
    return {
        "column": column.name,
        "name": mapper.safe_name(_CASE[field_case](column.name)),
        "camel": to_camel_case(column.name),
        "snake": to_snake_case(column.name),
        "pascal": to_pascal_case(column.name),
        "label": to_snake_case(column.name).replace("_", " "),
        "type": mapper.map_column(column),
        "base_type": mapper.map(logical),
        "logical": logical,
        "sql_type": column.sql_type,
        "nullable": column.nullable and not column.primary_key,
        "required": not column.nullable and column.default_value is None
                    and not column.auto_increment,
        "unique": column.unique,
        "auto_increment": column.auto_increment,
        "length": column.length,
        "precision": column.precision,
        "scale": column.scale,
        "enum_values": list(column.enum_values),
        "default": column.default_value,
        "comment": column.comment,
        "sample": mapper.sample_value(logical),
        "is_list": base_logical != logical,
        "is_string": logical == "String",
        "is_numeric": logical in _NUMERIC,
        "is_temporal": logical in _TEMPORAL,
        "is_boolean": logical == "Boolean",
    }


def _id_field(table, mapper, field_case: str) -> Optional[Dict]:
    pk = table.primary_key
    if pk is None:
        return None
    field = build_field(pk, mapper, field_case)
    field["type"] = mapper.map(pk.logical_type)
    return field


def _audit_info(table) -> Dict:
    return {
        "extends_base": table.extends_base,
        "created_at": table.has_column("created_at"),
        "updated_at": table.has_column("updated_at"),
        "created_by": table.has_column("created_by"),
        "updated_by": table.has_column("updated_by"),
        "version": table.has_column("version"),
        "status": "estado" if table.has_column("estado") else None,
        "soft_delete_column": next(
            (c for c in ("deleted_at", "fecha_eliminacion") if table.has_column(c)), None
        ),
    }


def build_entity_context(table, schema, mapper, features, field_case: str = "camel") -> Optional[Dict]:
    """
    Build the template context for one entity table.

    Returns None for tables without a single-column primary key; those cannot
    be exposed through id-based CRUD endpoints.
    """
    id_field = _id_field(table, mapper, field_case)
    if id_field is None:
        logger.warning(f"[WARN] Skipping table '{table.name}': no single-column primary key")
        return None

    ctx = entity_names(table)
    many_to_one_enabled = Feature.MANY_TO_ONE in features
    one_to_many_enabled = Feature.ONE_TO_MANY in features
    many_to_many_enabled = Feature.MANY_TO_MANY in features

    fk_columns = {fk.column_name.lower(): fk for fk in table.foreign_keys}
    fields, foreign_keys, many_to_one = [], [], []
    for column in table.columns:
        if column.primary_key:
            continue
        field = build_field(column, mapper, field_case)
        fk = fk_columns.get(column.name.lower())
        target = schema.get_table(fk.referenced_table) if fk else None
        if target is None or target.is_junction_table:
            if column.name.lower() not in BASE_COLUMNS:
                fields.append(field)
            continue

        field["references"] = {"table": target.name, "column": fk.referenced_column}
        field["relation"] = None
        foreign_keys.append(field)
        if many_to_one_enabled:
            property_name = to_property_name(column.name)
            one_to_one = fk.infer_relation_type(table, target) == RelationType.ONE_TO_ONE
            inverse = None
            if (one_to_many_enabled and target is not table and not one_to_one
                    and not table.is_audit_table):
                inverse = _one_to_many_relation(target, table, column.name, schema, mapper, field_case)
            field["relation"] = relation = {
                "field": field,
                "property": mapper.safe_name(_CASE[field_case](to_snake_case(property_name))),
                "property_camel": property_name,
                "property_pascal": to_pascal_case(to_snake_case(property_name)),
                "property_snake": to_snake_case(property_name),
                "column": column.name,
                "nullable": column.nullable,
                "one_to_one": one_to_one,
                "on_delete": fk.on_delete.value,
                "target": entity_names(target),
                "target_id_type": _target_id_type(target, mapper),
                "target_id_field": _target_id_field(target, mapper, field_case),
                "inverse_property": inverse["property"] if inverse else None,
            }
            many_to_one.append(relation)

    one_to_many = []
    if one_to_many_enabled:
        for relationship in find_inverse_relationships(table, schema):
            source = relationship.source_table
            if source is table or source.is_audit_table:
                continue
            if relationship.relation_type == RelationType.ONE_TO_ONE:
                continue
            one_to_many.append(_one_to_many_relation(
                table, source, relationship.foreign_key.column_name, schema, mapper, field_case
            ))

    many_to_many = []
    if many_to_many_enabled:
        for relation in find_many_to_many_relations(table, schema):
            names = entity_names(relation.target_table)
            many_to_many.append({
                "property": mapper.safe_name(_CASE[field_case](names["plural_snake"])),
                "property_camel": names["plural_variable"],
                "property_pascal": names["plural"],
                "property_snake": names["plural_snake"],
                "junction_table": relation.junction_table.name,
                "join_column": relation.join_column,
                "inverse_join_column": relation.inverse_join_column,
                "target": names,
                "target_id_type": _target_id_type(relation.target_table, mapper),
                "target_id_field": _target_id_field(relation.target_table, mapper, field_case),
                "inverse_property": mapper.safe_name(_CASE[field_case](entity_names(table)["plural_snake"])),
            })

    logical_types = [c.logical_type for c in table.columns]
    ctx.update({
        "comment": table.comment,
        "id": id_field,
        "fields": fields,
        "foreign_keys": foreign_keys,
        "all_fields": [id_field] + fields + foreign_keys,
        "many_to_one": many_to_one,
        "one_to_many": one_to_many,
        "many_to_many": many_to_many,
        "unique_fields": [f for f in fields if f["unique"]],
        "filter_fields": [f for f in fields if f["is_string"] or f["is_boolean"]
                          or f["enum_values"]],
        "audit": _audit_info(table),
        "imports": mapper.imports_for(logical_types),
        "indexes": [
            {"name": i.name, "columns": i.columns, "unique": i.unique, "type": i.index_type.value}
            for i in table.indexes
        ],
    })
    return ctx


def _one_to_many_relation(table, source, fk_column, schema, mapper, field_case: str) -> Dict:
    """The collection on `table` holding the `source` rows whose `fk_column` points at it."""
    mapped_by = to_property_name(fk_column)
    names = entity_names(source)
    property_snake = names["plural_snake"]
    if sum(1 for r in find_inverse_relationships(table, schema) if r.source_table is source) > 1:
        property_snake = f"{to_snake_case(mapped_by)}_{names['plural_snake']}"
    return {
        "property": mapper.safe_name(_CASE[field_case](property_snake)),
        "property_camel": to_camel_case(property_snake),
        "property_pascal": to_pascal_case(property_snake),
        "property_snake": property_snake,
        "mapped_by": mapped_by,
        "mapped_by_column": fk_column,
        "target": names,
    }


def _target_id_type(target, mapper) -> str:
    pk = target.primary_key
    return mapper.map(pk.logical_type if pk is not None else "Long")


def _target_id_field(target, mapper, field_case: str) -> str:
    pk = target.primary_key
    return mapper.safe_name(_CASE[field_case](pk.name if pk is not None else "id"))


def build_function_contexts(functions, mapper, field_case: str = "camel") -> List[Dict]:
    """Stored procedure/function signatures mapped to target types."""
    contexts = []
    for function in functions:
        params = []
        for parameter in function.input_parameters:
            params.append({
                "name": mapper.safe_name(_CASE[field_case](parameter.name)),
                "sql_name": parameter.name,
                "type": mapper.map(parameter.logical_type),
                "mode": parameter.mode.value,
            })
        contexts.append({
            "name": function.name,
            "method": to_camel_case(function.name),
            "params": params,
            "return_type": function.return_type,
            "is_procedure": function.is_procedure,
            "language": function.language,
        })
    return contexts
