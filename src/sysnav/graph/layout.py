"""
Layout oracles for the system graph.

A layout oracle only sees the structural graph: node ids with their tier and
(source, target) pairs. HierarchicalLayout layers nodes by topological
generation and places the layers with networkx's multipartite layout.
circular_layout is the fallback used when no oracle is available.
"""

import math
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Tuple

import networkx as nx

from ..core.exceptions import SysnavError
from ..core.types import LayoutNode

Positions = Dict[str, Tuple[float, float]]

DEFAULT_CENTER = (250.0, 250.0)
DEFAULT_RADIUS = 200.0


class LayoutError(SysnavError):
    """Raised when an oracle cannot lay out the given graph."""


class LayoutEngine(ABC):
    """Computes node positions from the structural graph alone."""

    @abstractmethod
    def compute(self, nodes: Sequence[LayoutNode], edges: Sequence[Tuple[str, str]]) -> Positions:
        """Return a position for every node id."""


class HierarchicalLayout(LayoutEngine):
    """
    Directed-graph layering: each node sits on the layer given by its
    topological generation, so parents are always above their children.
    """

    def __init__(self, scale: float = 300.0, center: Tuple[float, float] = DEFAULT_CENTER):
        self.scale = scale
        self.center = center

    def compute(self, nodes: Sequence[LayoutNode], edges: Sequence[Tuple[str, str]]) -> Positions:
        if not nodes:
            return {}

        g = nx.DiGraph()
        g.add_nodes_from(node.id for node in nodes)
        g.add_edges_from((s, t) for s, t in edges if g.has_node(s) and g.has_node(t))

        if not nx.is_directed_acyclic_graph(g):
            raise LayoutError("Structural graph contains a cycle")

        for layer, generation in enumerate(nx.topological_generations(g)):
            for node_id in generation:
                g.nodes[node_id]["layer"] = layer

        if g.number_of_nodes() == 1:
            only = next(iter(g.nodes))
            return {only: self.center}

        raw = nx.multipartite_layout(g, subset_key="layer", align="horizontal", scale=self.scale)
        cx, cy = self.center
        return {node_id: (cx + float(x), cy + float(y)) for node_id, (x, y) in raw.items()}


def circular_layout(
    root_id: str,
    nodes: List[LayoutNode],
    center: Tuple[float, float] = DEFAULT_CENTER,
    radius: float = DEFAULT_RADIUS,
) -> Positions:
    """Root at the centre, every other node evenly spaced on a circle."""
    cx, cy = center
    positions: Positions = {root_id: center}
    others = [n for n in nodes if n.id != root_id]
    if not others:
        return positions

    step = (2 * math.pi) / len(others)
    for index, node in enumerate(others):
        angle = index * step
        positions[node.id] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))
    return positions
