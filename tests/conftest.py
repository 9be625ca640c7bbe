"""
Shared fixtures.

The scenario tree used throughout:

    R (root)
    ├── C1
    │   └── G1
    └── C2

plus X, a top-level system outside R's subtree, and three interfaces:
(R, C1), (C1, G1) and (C2, X).
"""

import pytest

from sysnav.store import INTERFACES, SYSTEMS, MemoryEntityStore


@pytest.fixture
def memory_store():
    """An empty in-memory store."""
    return MemoryEntityStore(user="tester")


@pytest.fixture
def scenario_store(memory_store):
    """The R{C1{G1}, C2} tree with an external X, seeded into memory."""
    memory_store.seed(SYSTEMS, [
        {"id": "R", "name": "Root", "category": "Enterprise", "parent_id": None},
        {"id": "C1", "name": "Child One", "category": "Platform", "parent_id": "R"},
        {"id": "C2", "name": "Child Two", "category": "Platform", "parent_id": "R"},
        {"id": "G1", "name": "Grandchild", "category": "Service", "parent_id": "C1"},
        {"id": "X", "name": "External", "category": "Partner", "parent_id": None},
    ])
    memory_store.seed(INTERFACES, [
        {"id": "i-r-c1", "system1_id": "R", "system2_id": "C1", "connection": "REST", "directional": 1},
        {"id": "i-c1-g1", "system1_id": "C1", "system2_id": "G1", "connection": "Queue", "directional": 0},
        {"id": "i-c2-x", "system1_id": "C2", "system2_id": "X", "connection": "SFTP", "directional": 1},
    ])
    return memory_store
