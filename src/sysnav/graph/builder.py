"""
Graph Builder.

Turns a resolved subtree and its interfaces into a SystemGraph:

- one node per system (root, children, grandchildren), styled by tier
- one structural edge per parent -> child link (dashed grey)
- one interface edge per interface whose endpoints are both nodes
  (directional = thick solid with arrow, bidirectional = thin dashed)

Positions come from a layout oracle; the builder only provides a circular
fallback when no oracle is configured or the oracle fails.
"""

import logging
from typing import Any, Dict, List, Optional

from ..analysis.descendants import DescendantSet
from ..core.graph import SystemGraph
from ..core.types import EdgeKind, GraphEdge, GraphNode, Interface, LayoutNode, System, Tier
from .layout import HierarchicalLayout, LayoutEngine, Positions, circular_layout

TIER_STYLES: Dict[Tier, Dict[str, Any]] = {
    Tier.CURRENT: {
        "background": "#3ECF8E",
        "color": "white",
        "border": "1px solid #107969",
        "borderRadius": "8px",
        "padding": "10px",
        "width": 180,
    },
    Tier.CHILD: {
        "background": "#0070f3",
        "color": "white",
        "border": "1px solid #0050a3",
        "borderRadius": "8px",
        "padding": "10px",
        "width": 150,
    },
    Tier.GRANDCHILD: {
        "background": "#8b5cf6",
        "color": "white",
        "border": "1px solid #6d28d9",
        "borderRadius": "8px",
        "padding": "8px",
        "width": 130,
    },
}

STRUCTURAL_EDGE_STYLE = {"stroke": "#999", "strokeWidth": 1, "strokeDasharray": "5,5"}
DIRECTIONAL_EDGE_STYLE = {"stroke": "#333", "strokeWidth": 2}
BIDIRECTIONAL_EDGE_STYLE = {"stroke": "#333", "strokeWidth": 1, "strokeDasharray": "2,2"}

_DEFAULT_LAYOUT = object()


def structural_edge_id(system_id: str) -> str:
    return f"e-parent-{system_id}"


def interface_edge_id(interface_id: str) -> str:
    return f"e-{interface_id}"


class GraphBuilder:
    """
    Builds layout-ready graphs for a root system.

    Pass layout=None to always use the circular fallback.
    """

    def __init__(self, layout: Any = _DEFAULT_LAYOUT, logger: Optional[logging.Logger] = None):
        self.layout: Optional[LayoutEngine] = HierarchicalLayout() if layout is _DEFAULT_LAYOUT else layout
        self.log = logger or logging.getLogger(__name__)

    def build(
        self,
        root: System,
        descendants: DescendantSet,
        interfaces: List[Interface],
    ) -> SystemGraph:
        graph = SystemGraph()

        graph.add_node(self._node(root, Tier.CURRENT))
        children = self._add_tier(graph, descendants.children, Tier.CHILD)
        grandchildren = self._add_tier(graph, descendants.grandchildren, Tier.GRANDCHILD)

        for child in children:
            graph.add_edge(self._structural_edge(root.id, child.id))
        for grandchild in grandchildren:
            if not graph.add_edge(self._structural_edge(grandchild.parent_id, grandchild.id)):
                self.log.warning("Grandchild %s has no resolved parent", grandchild.id)

        excluded = 0
        for interface in interfaces:
            if not graph.add_edge(self._interface_edge(interface)):
                excluded += 1
        if excluded:
            self.log.debug("Excluded %d interfaces with unresolved endpoints", excluded)

        graph.set_positions(self._positions(root.id, graph))
        self.log.debug("Graph built: %s", graph.get_stats())
        return graph

    def _add_tier(self, graph: SystemGraph, systems: List[System], tier: Tier) -> List[System]:
        """Add systems as nodes of one tier; ids already placed keep their first tier."""
        added = []
        for system in systems:
            if graph.has_node(system.id):
                self.log.warning("System %s already placed, skipping as %s (cyclic tree?)", system.id, tier.value)
                continue
            graph.add_node(self._node(system, tier))
            added.append(system)
        return added

    @staticmethod
    def _node(system: System, tier: Tier) -> GraphNode:
        return GraphNode(
            id=system.id,
            label=system.name,
            category=system.category,
            tier=tier,
            style=dict(TIER_STYLES[tier]),
        )

    @staticmethod
    def _structural_edge(parent_id: Optional[str], child_id: str) -> GraphEdge:
        return GraphEdge(
            id=structural_edge_id(child_id),
            source=parent_id or "",
            target=child_id,
            kind=EdgeKind.STRUCTURAL,
            style=dict(STRUCTURAL_EDGE_STYLE),
        )

    @staticmethod
    def _interface_edge(interface: Interface) -> GraphEdge:
        directional = interface.is_directional
        return GraphEdge(
            id=interface_edge_id(interface.id),
            source=interface.system1_id,
            target=interface.system2_id,
            kind=EdgeKind.INTERFACE,
            label=interface.connection,
            directional=directional,
            animated=directional,
            style=dict(DIRECTIONAL_EDGE_STYLE if directional else BIDIRECTIONAL_EDGE_STYLE),
        )

    def _positions(self, root_id: str, graph: SystemGraph) -> Positions:
        nodes = [LayoutNode(id=n.id, tier=n.tier) for n in graph.iter_nodes()]

        if self.layout is not None:
            try:
                return self.layout.compute(nodes, graph.structural_pairs())
            except Exception as e:
                self.log.warning("Layout oracle failed, using circular fallback: %s", e)

        return circular_layout(root_id, nodes)
