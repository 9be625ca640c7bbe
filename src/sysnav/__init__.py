"""
sysnav - Systems and Interfaces Navigator.

sysnav browses a hierarchical model of systems (a tree via parent_id) and
the typed interfaces connecting them, as kept in a hosted relational store.

Key Components:
- store: Entity store contract with REST and in-memory backends
- analysis: Descendant resolution, interface classification, revision diffs
- graph: Layout-ready node/edge graph construction and HTML export
- services: Audited mutations through the store's RPC surface
- navigation: Current root, breadcrumbs and stale-result protection

Usage:
    from sysnav.store import MemoryEntityStore
    from sysnav.navigation import Navigator

    navigator = Navigator(MemoryEntityStore(), root_id, "Root System")
    view = navigator.load()
"""

__version__ = "0.1.0"

from .core.types import (
    EnrichedInterface,
    EntityType,
    Interface,
    Operation,
    Revision,
    System,
    Tier,
)

__all__ = [
    "__version__",
    "System",
    "Interface",
    "EnrichedInterface",
    "Revision",
    "EntityType",
    "Operation",
    "Tier",
]
