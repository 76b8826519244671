from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

import networkx as nx

from pg_batch_import.errors import SinkFailure
from pg_batch_import.schema.models import TypedValue


class NetworkxGraphSink:
    """
    GraphSink backed by a NetworkX MultiDiGraph.

    Node ids are consecutive integers starting at `start_id`; relationship
    ids are consecutive integers starting at 0 and double as edge keys.
    Each node and edge keeps its properties (unwrapped Python values) under
    a `properties` attribute so property names never clash with the
    relationship `type` attribute.

    Example:
        sink = NetworkxGraphSink()
        n = sink.create_node()
        sink.set_node_property(n, "name", TypedValue(TypeTag.TEXT, "a"))
    """

    def __init__(self, start_id: int = 0, graph: Optional[nx.MultiDiGraph] = None):
        self.graph = graph if graph is not None else nx.MultiDiGraph()
        self._next_node = start_id
        self._next_rel = 0
        # rel id -> (start, end)
        self._endpoints: Dict[int, Tuple[int, int]] = {}

    # ------------------------------------------------------------
    # GraphSink
    # ------------------------------------------------------------

    def create_node(self) -> int:
        node_id = self._next_node
        self._next_node += 1
        self.graph.add_node(node_id, properties={})
        return node_id

    def set_node_property(self, node_id: int, name: str, value: TypedValue) -> None:
        if node_id not in self.graph:
            raise SinkFailure(f"no node with id {node_id}")
        self.graph.nodes[node_id]["properties"][name] = value.value

    def create_relationship(self, start: int, end: int, type_label: str) -> int:
        for nid in (start, end):
            if nid not in self.graph:
                raise SinkFailure(f"no node with id {nid}")
        rel_id = self._next_rel
        self._next_rel += 1
        self.graph.add_edge(start, end, key=rel_id, type=type_label, properties={})
        self._endpoints[rel_id] = (start, end)
        return rel_id

    def set_relationship_property(self, rel_id: int, name: str, value: TypedValue) -> None:
        if rel_id not in self._endpoints:
            raise SinkFailure(f"no relationship with id {rel_id}")
        start, end = self._endpoints[rel_id]
        self.graph.edges[start, end, rel_id]["properties"][name] = value.value

    # ------------------------------------------------------------
    # Read-back helpers
    # ------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def relationship_count(self) -> int:
        return self.graph.number_of_edges()

    def get_node(self, node_id: int) -> Dict[str, Any]:
        """Return the property dict of a node; KeyError if it does not exist."""
        if node_id not in self.graph:
            raise KeyError(f"node {node_id} not found")
        return self.graph.nodes[node_id]["properties"]

    def get_relationship(self, rel_id: int) -> Dict[str, Any]:
        """
        Return a relationship as a dict with `id`, `start`, `end`, `type`
        and `properties`; KeyError if it does not exist.
        """
        if rel_id not in self._endpoints:
            raise KeyError(f"relationship {rel_id} not found")
        start, end = self._endpoints[rel_id]
        data = self.graph.edges[start, end, rel_id]
        return {
            "id": rel_id,
            "start": start,
            "end": end,
            "type": data["type"],
            "properties": data["properties"],
        }

    def relationships_from(self, node_id: int, type_label: Optional[str] = None) -> List[Dict[str, Any]]:
        """Outgoing relationships of a node, optionally filtered by type."""
        if node_id not in self.graph:
            raise KeyError(f"node {node_id} not found")
        out = []
        for _, _, key, data in self.graph.out_edges(node_id, keys=True, data=True):
            if type_label is None or data["type"] == type_label:
                out.append(self.get_relationship(key))
        return out

    def iter_relationships(self) -> Iterator[Dict[str, Any]]:
        for rel_id in sorted(self._endpoints):
            yield self.get_relationship(rel_id)

    def to_node_link(self) -> Dict[str, Any]:
        """JSON-serialisable node-link representation of the graph."""
        return nx.node_link_data(self.graph, edges="edges")
