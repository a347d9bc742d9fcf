"""
Relationship helpers derived from foreign keys.

Tables never store their relationships; generators ask these helpers for the
outgoing (many-to-one), incoming (one-to-many) and junction (many-to-many)
links of each entity table.
"""

from collections import OrderedDict
from typing import Dict, List

from apigen.model.schema import ManyToManyRelation, TableRelationship


def build_relationships_by_table(schema) -> Dict[str, List[TableRelationship]]:
    """Outgoing relationships keyed by source table name."""
    by_table: Dict[str, List[TableRelationship]] = OrderedDict(
        (t.name, []) for t in schema.tables
    )
    for relationship in schema.all_relationships:
        by_table[relationship.source_table.name].append(relationship)
    return by_table


def find_inverse_relationships(table, schema) -> List[TableRelationship]:
    """Relationships pointing at `table` from non-junction tables."""
    return [
        r for r in schema.all_relationships
        if r.target_table is table and not r.source_table.is_junction_table
    ]


def find_many_to_many_relations(table, schema) -> List[ManyToManyRelation]:
    """Many-to-many links of `table` through the schema's junction tables."""
    relations = []
    for junction in schema.junction_tables:
        this_fk = other_fk = None
        for fk in junction.foreign_keys:
            if this_fk is None and fk.referenced_table.lower() == table.name.lower():
                this_fk = fk
            else:
                other_fk = fk
        if this_fk is None or other_fk is None:
            continue
        other_table = schema.get_table(other_fk.referenced_table)
        if other_table is None:
            continue
        relations.append(ManyToManyRelation(
            junction_table=junction,
            join_column=this_fk.column_name,
            inverse_join_column=other_fk.column_name,
            target_table=other_table,
        ))
    return relations


def relationships_for_table(table, schema) -> List[TableRelationship]:
    """Outgoing relationships of a single table."""
    return build_relationships_by_table(schema).get(table.name, [])
