"""Graph construction, layout and HTML export."""

from .builder import GraphBuilder
from .layout import HierarchicalLayout, LayoutEngine, LayoutError, circular_layout
from .visualize import generate_html, write_html

__all__ = [
    "GraphBuilder",
    "HierarchicalLayout",
    "LayoutEngine",
    "LayoutError",
    "circular_layout",
    "generate_html",
    "write_html",
]
