"""
System graph backed by rustworkx.

Holds the layout-ready projection of a subtree:
- The bimap between string node IDs and rustworkx integer indices.
- Typed GraphNode and GraphEdge payloads.
- Edge admission only when both endpoints are present.
"""

from collections import defaultdict
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import rustworkx as rx

from .types import EdgeKind, GraphEdge, GraphNode, Position, Tier


class SystemGraph:
    """
    Directed multigraph of systems (nodes) and structural/interface edges.

    Duplicate interfaces and self loops are legal in the data model, so the
    graph is a multigraph and keeps every edge.
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=True)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}
        self._nodes_by_tier: Dict[Tier, Set[str]] = defaultdict(set)

    def add_node(self, node: GraphNode) -> None:
        """Add or replace a node."""
        if node.id in self._id_to_idx:
            idx = self._id_to_idx[node.id]
            previous: GraphNode = self._graph[idx]
            self._nodes_by_tier[previous.tier].discard(node.id)
            self._graph[idx] = node
        else:
            idx = self._graph.add_node(node)
            self._id_to_idx[node.id] = idx
            self._idx_to_id[idx] = node.id

        self._nodes_by_tier[node.tier].add(node.id)

    def add_edge(self, edge: GraphEdge) -> bool:
        """
        Add an edge between two existing nodes.

        Returns False (and adds nothing) when either endpoint is missing.
        """
        if edge.source not in self._id_to_idx or edge.target not in self._id_to_idx:
            return False

        u_idx = self._id_to_idx[edge.source]
        v_idx = self._id_to_idx[edge.target]
        self._graph.add_edge(u_idx, v_idx, edge)
        return True

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return None
        return self._graph[idx]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._id_to_idx

    def has_edge(self, source_id: str, target_id: str) -> bool:
        if source_id not in self._id_to_idx or target_id not in self._id_to_idx:
            return False
        return self._graph.has_edge(self._id_to_idx[source_id], self._id_to_idx[target_id])

    def get_nodes_by_tier(self, tier: Tier) -> List[GraphNode]:
        return [self.get_node(node_id) for node_id in sorted(self._nodes_by_tier.get(tier, set()))]

    def set_positions(self, positions: Dict[str, Tuple[float, float]]) -> None:
        """Apply positions computed by a layout oracle; unknown ids are ignored."""
        for node_id, (x, y) in positions.items():
            idx = self._id_to_idx.get(node_id)
            if idx is None:
                continue
            node: GraphNode = self._graph[idx]
            self._graph[idx] = node.model_copy(update={"position": Position(x=x, y=y)})

    def structural_pairs(self) -> List[Tuple[str, str]]:
        """(source, target) pairs of structural edges, for layout oracles."""
        return [(e.source, e.target) for e in self.iter_edges() if e.kind == EdgeKind.STRUCTURAL]

    def iter_nodes(self) -> Iterator[GraphNode]:
        return iter(self._graph.nodes())

    def iter_edges(self) -> Iterator[GraphEdge]:
        return iter(self._graph.edges())

    @property
    def nodes(self) -> List[GraphNode]:
        return list(self._graph.nodes())

    @property
    def edges(self) -> List[GraphEdge]:
        return list(self._graph.edges())

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, Any]:
        node_counts = {tier.value: len(ids) for tier, ids in self._nodes_by_tier.items()}
        edge_counts: Dict[str, int] = defaultdict(int)
        for edge in self.iter_edges():
            edge_counts[edge.kind.value] += 1

        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "nodes_by_tier": node_counts,
            "edges_by_kind": dict(edge_counts),
            "backend": "rustworkx",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.model_dump(mode="json") for node in self.iter_nodes()],
            "edges": [edge.model_dump(mode="json") for edge in self.iter_edges()],
            "stats": self.get_stats(),
        }
