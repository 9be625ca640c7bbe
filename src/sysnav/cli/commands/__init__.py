"""CLI command implementations, one module per command or command group."""

from . import demo, graph, history, interfaces, systems, tree
from .initialize import init

__all__ = ["demo", "graph", "history", "interfaces", "systems", "tree", "init"]
