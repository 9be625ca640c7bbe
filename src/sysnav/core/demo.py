"""
Demo Manager - Seeds a sample system tree.

Populates an in-memory store with a small but complete landscape: a root
with children and grandchildren, a system deeper than two levels and an
unrelated top-level partner, wired together by interfaces that land in
every classification group. Used by `sysnav demo` and the memory backend.
"""

import logging
import uuid
from typing import Dict, List, Optional, Tuple

from ..config import DEFAULT_ROOT_ID, DEFAULT_ROOT_NAME
from ..store.base import INTERFACES, SYSTEMS

logger = logging.getLogger(__name__)

_NAMESPACE = uuid.UUID("6f1c1f8e-4a57-4b1e-9a55-0d4c2f6f0a11")


def demo_id(name: str) -> str:
    """Stable id for a demo row, so repeated runs produce the same tree."""
    return str(uuid.uuid5(_NAMESPACE, name))


class DemoManager:
    """
    Manages the creation of the demo dataset.
    """

    # (name, category, parent name); None parent means top-level
    DEMO_SYSTEMS: List[Tuple[str, str, Optional[str]]] = [
        ("Payments", "Platform", DEFAULT_ROOT_NAME),
        ("Identity", "Platform", DEFAULT_ROOT_NAME),
        ("Storefront", "Application", DEFAULT_ROOT_NAME),
        ("Ledger", "Service", "Payments"),
        ("Card Gateway", "Service", "Payments"),
        ("Auth API", "Service", "Identity"),
        ("Ledger Archive", "Storage", "Ledger"),
        ("Bank Partner", "External", None),
    ]

    # (system1, system2, connection, directional)
    DEMO_INTERFACES: List[Tuple[str, str, str, int]] = [
        (DEFAULT_ROOT_NAME, "Bank Partner", "Settlement files", 1),
        ("Storefront", "Payments", "REST /checkout", 1),
        ("Payments", "Identity", "Token validation", 0),
        ("Card Gateway", "Bank Partner", "ISO 8583", 1),
        ("Ledger", "Ledger Archive", "Nightly export", 1),
        ("Auth API", "Storefront", "OIDC", 0),
    ]

    def __init__(self, store):
        self.store = store

    def _ids(self) -> Dict[str, str]:
        ids = {DEFAULT_ROOT_NAME: DEFAULT_ROOT_ID}
        for name, _, _ in self.DEMO_SYSTEMS:
            ids[name] = demo_id(name)
        return ids

    def provision(self) -> str:
        """Seed the store and return the root system id."""
        ids = self._ids()

        rows = [{"id": DEFAULT_ROOT_ID, "name": DEFAULT_ROOT_NAME, "category": "Enterprise", "parent_id": None}]
        for name, category, parent in self.DEMO_SYSTEMS:
            rows.append({
                "id": ids[name],
                "name": name,
                "category": category,
                "parent_id": ids[parent] if parent else None,
            })
        self.store.seed(SYSTEMS, rows)

        self.store.seed(INTERFACES, [
            {
                "id": demo_id(f"{a}->{b}"),
                "system1_id": ids[a],
                "system2_id": ids[b],
                "connection": connection,
                "directional": directional,
            }
            for a, b, connection, directional in self.DEMO_INTERFACES
        ])

        logger.debug("Seeded demo store with %d systems", len(rows))
        return DEFAULT_ROOT_ID
