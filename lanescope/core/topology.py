"""
Topology Engine
===============

Structural diagnostics of a lane graph.

SCOPE:
======
This engine reports STRUCTURE, it never changes geometry.

ALLOWED:
- Graph construction from vertex adjacency
- Dangling reference detection (edges the scaling engine skips)
- Weakly connected components
- Reachability from entry vertices

The scaling output is identical whether or not diagnostics are run.
"""

from __future__ import annotations
from typing import List, Set, Tuple
from dataclasses import dataclass
import networkx as nx

from ..contracts.lane import Lane


@dataclass(frozen=True)
class TopologyMetrics:
    """Immutable structural metrics for one lane."""
    node_count: int
    edge_count: int
    dangling_edge_count: int
    component_count: int
    entry_vertex_ids: Tuple[int, ...]
    unreachable_vertex_ids: Tuple[int, ...]

    @property
    def is_connected(self) -> bool:
        return self.component_count <= 1

    @property
    def is_clean(self) -> bool:
        """No dangling edges and every vertex reachable from an entry."""
        return self.dangling_edge_count == 0 and not self.unreachable_vertex_ids


class LaneTopology:
    """
    Directed graph view of a lane.

    Wraps NetworkX; nodes are vertex ids, arcs are resolved adjacency edges.
    """

    def __init__(self, lane: Lane):
        self._lane = lane
        self._graph = nx.DiGraph()
        self._dangling: List[Tuple[int, int]] = []
        self._build()

    def _build(self) -> None:
        known = {v.id for v in self._lane.vertices}

        for vertex in self._lane.vertices:
            self._graph.add_node(vertex.id, name=vertex.name)

        for vertex in self._lane.vertices:
            for edge in vertex.adjacent:
                if edge.adjacent_vertex not in known:
                    self._dangling.append((vertex.id, edge.adjacent_vertex))
                    continue
                self._graph.add_edge(
                    vertex.id,
                    edge.adjacent_vertex,
                    bends=len(edge.interior_path)
                )

    @property
    def graph(self) -> nx.DiGraph:
        return self._graph

    def dangling_edges(self) -> List[Tuple[int, int]]:
        """(source_id, target_id) pairs whose target is not in the lane."""
        return list(self._dangling)

    def get_connected_components(self) -> List[Set[int]]:
        if not self._graph:
            return []
        return [set(c) for c in nx.weakly_connected_components(self._graph)]

    def entry_vertex_ids(self) -> List[int]:
        return [v.id for v in self._lane.vertices if v.is_entry]

    def unreachable_from_entries(self) -> List[int]:
        """
        Vertices no entry vertex can reach, in lane order.

        A lane without entry vertices reports nothing: reachability is
        undefined, not failed.
        """
        entries = self.entry_vertex_ids()
        if not entries:
            return []

        reached: Set[int] = set()
        for entry in entries:
            reached.add(entry)
            reached |= nx.descendants(self._graph, entry)

        return [v.id for v in self._lane.vertices if v.id not in reached]

    def compute_metrics(self) -> TopologyMetrics:
        return TopologyMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            dangling_edge_count=len(self._dangling),
            component_count=len(self.get_connected_components()),
            entry_vertex_ids=tuple(self.entry_vertex_ids()),
            unreachable_vertex_ids=tuple(self.unreachable_from_entries()),
        )
