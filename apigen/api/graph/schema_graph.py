"""
Foreign-key dependency graph for a SqlSchema, built with NetworkX.

Nodes are table names; an edge A -> B means B references A, so a topological
order creates referenced tables first. Foreign keys that close a cycle cannot
be created inline; they are reported as deferred and emitted as
ALTER TABLE ... ADD CONSTRAINT after every table exists.
"""

from typing import Dict, List, Tuple

import networkx as nx

from apigen.api.gen_logging import get_logger

logger = get_logger(__name__)


class SchemaGraph:
    """Table dependency graph with cycle detection and creation ordering."""

    def __init__(self, schema):
        self.schema = schema
        self.graph = nx.DiGraph()
        self._order: Dict[str, int] = {}
        self._deferred = None
        self._build_graph()

    def _build_graph(self):
        for position, table in enumerate(self.schema.tables):
            key = table.name.lower()
            self._order[key] = position
            self.graph.add_node(key, table=table)

        for table in self.schema.tables:
            for fk in table.foreign_keys:
                target = self.schema.get_table(fk.referenced_table)
                if target is None or target is table:
                    continue
                source_key, target_key = table.name.lower(), target.name.lower()
                if self.graph.has_edge(target_key, source_key):
                    self.graph[target_key][source_key]["fks"].append(fk)
                else:
                    self.graph.add_edge(target_key, source_key, fks=[fk])

    def detect_cycles(self) -> List[List[str]]:
        """Return every elementary FK cycle (empty when the schema is acyclic)."""
        try:
            return list(nx.simple_cycles(self.graph))
        except nx.NetworkXNoCycle:
            return []

    def has_cycles(self) -> bool:
        return not nx.is_directed_acyclic_graph(self.graph)

    def deferred_foreign_keys(self) -> List[Tuple[object, object]]:
        """
        (table, fk) pairs removed to make the graph acyclic. Edges are cut
        greedily, one per remaining cycle, preferring edges into later tables.
        """
        if self._deferred is not None:
            return self._deferred

        dag = self.graph.copy()
        deferred = []
        while True:
            try:
                cycle = nx.find_cycle(dag)
            except nx.NetworkXNoCycle:
                break
            source, target = max(cycle, key=lambda edge: self._order[edge[1]])[:2]
            table = dag.nodes[target]["table"]
            for fk in dag[source][target]["fks"]:
                deferred.append((table, fk))
            dag.remove_edge(source, target)
            logger.debug(f"[GRAPH] Deferring FK {target} -> {source} (cycle)")

        self._deferred = deferred
        self._dag = dag
        return deferred

    def creation_order(self) -> List[object]:
        """Tables ordered so every inline FK points at an earlier table."""
        self.deferred_foreign_keys()
        keys = nx.lexicographical_topological_sort(self._dag, key=lambda k: self._order[k])
        return [self.graph.nodes[k]["table"] for k in keys]

    def dependents_of(self, table_name: str) -> List[str]:
        """Names of tables holding a FK to table_name."""
        key = table_name.lower()
        if key not in self.graph:
            return []
        return [self.graph.nodes[k]["table"].name for k in self.graph.successors(key)]


def build_schema_graph(schema) -> SchemaGraph:
    return SchemaGraph(schema)
