"""
Descendant Resolution.

Walks exactly two tiers below a root system: its children, then the
children of each child. A failed fetch degrades that branch to empty
without aborting the others.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..core.types import System, parse_systems
from ..store.base import SYSTEMS, EntityStore


@dataclass
class DescendantSet:
    """Children (depth 1) and grandchildren (depth 2) of a root."""
    children: List[System] = field(default_factory=list)
    grandchildren: List[System] = field(default_factory=list)

    def child_ids(self) -> Set[str]:
        return {s.id for s in self.children}

    def grandchild_ids(self) -> Set[str]:
        return {s.id for s in self.grandchildren}

    def all_ids(self, root_id: str) -> Set[str]:
        """{root} plus every resolved descendant id."""
        return {root_id} | self.child_ids() | self.grandchild_ids()

    @property
    def members(self) -> List[System]:
        return [*self.children, *self.grandchildren]

    def is_empty(self) -> bool:
        return not self.children and not self.grandchildren


class DescendantResolver:
    """
    Resolves the two-tier descendant set of a root system.

    This is a fixed-depth walk, so a corrupted tree (a child pointing back to
    an ancestor) cannot make it loop.
    """

    def __init__(self, store: EntityStore, logger: Optional[logging.Logger] = None):
        self.store = store
        self.log = logger or logging.getLogger(__name__)

    def resolve(self, root_id: str) -> DescendantSet:
        self.log.debug("Fetching descendants of %s", root_id)

        children = self._fetch_children(root_id, depth=1)
        if children is None:
            return DescendantSet()
        self.log.debug("Direct children fetched: %d", len(children))

        grandchildren: List[System] = []
        for child in children:
            found = self._fetch_children(child.id, depth=2)
            if found is None:
                continue
            grandchildren.extend(found)

        self.log.debug("Grandchildren fetched: %d", len(grandchildren))
        return DescendantSet(children=children, grandchildren=grandchildren)

    def _fetch_children(self, parent_id: str, depth: int) -> Optional[List[System]]:
        """Children of parent_id tagged with depth, or None if the fetch failed."""
        result = self.store.select(SYSTEMS, {"parent_id": parent_id})
        if result.is_err():
            self.log.error("Error fetching children of %s: %s", parent_id, result.error)
            return None
        return parse_systems(result.unwrap(), depth=depth)
