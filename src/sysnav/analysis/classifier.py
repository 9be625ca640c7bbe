"""
Interface Classification.

Fetches every interface touching a resolved subtree and partitions them by
the tier they touch, in priority order:

1. Either endpoint is the root             -> direct
2. Else either endpoint is a child         -> children
3. Else (grandchild-only, or grandchild to
   external system)                        -> grandchildren

Also derives the list of systems offered when creating or editing an
interface: the subtree plus every external system already connected to it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.types import EnrichedInterface, Interface, InterfaceGroup, System
from ..store.base import INTERFACES, SYSTEMS, EntityStore
from .descendants import DescendantSet

CURRENT_SYSTEM_PLACEHOLDER = "Current System"


@dataclass
class ClassifiedInterfaces:
    """Interfaces grouped by the highest tier they touch."""
    direct: List[EnrichedInterface] = field(default_factory=list)
    children: List[EnrichedInterface] = field(default_factory=list)
    grandchildren: List[EnrichedInterface] = field(default_factory=list)

    def group(self, group: InterfaceGroup) -> List[EnrichedInterface]:
        return getattr(self, group.value)

    def all(self) -> List[EnrichedInterface]:
        return [*self.direct, *self.children, *self.grandchildren]

    def counts(self) -> Dict[str, int]:
        return {g.value: len(self.group(g)) for g in InterfaceGroup}


def classify_interface(interface: Interface, root_id: str, child_ids: set) -> InterfaceGroup:
    """Apply the priority rule to a single interface."""
    if interface.touches(root_id):
        return InterfaceGroup.DIRECT
    if interface.touches_any(child_ids):
        return InterfaceGroup.CHILDREN
    return InterfaceGroup.GRANDCHILDREN


class InterfaceClassifier:
    """
    Fetches, enriches and classifies the interfaces of a subtree.

    Enrichment does two point lookups per interface (one per endpoint).
    Lookups are memoized for the duration of a single fetch.
    """

    def __init__(self, store: EntityStore, logger: Optional[logging.Logger] = None):
        self.store = store
        self.log = logger or logging.getLogger(__name__)

    def fetch(self, root_id: str, descendants: DescendantSet) -> List[EnrichedInterface]:
        """Every interface with an endpoint in the subtree, endpoints attached."""
        all_ids = sorted(descendants.all_ids(root_id))
        self.log.debug("Fetching interfaces for %d systems", len(all_ids))

        result = self.store.select_any(INTERFACES, ("system1_id", "system2_id"), all_ids)
        if result.is_err():
            self.log.error("Error fetching interfaces: %s", result.error)
            return []

        rows = result.unwrap()
        self.log.debug("Interfaces fetched: %d", len(rows))

        cache: Dict[str, Optional[System]] = {}
        enriched = []
        for row in rows:
            interface = Interface.model_validate(row)
            enriched.append(EnrichedInterface(
                **interface.model_dump(),
                system1=self._lookup(interface.system1_id, cache),
                system2=self._lookup(interface.system2_id, cache),
            ))
        return enriched

    def _lookup(self, system_id: str, cache: Dict[str, Optional[System]]) -> Optional[System]:
        """Fetch one endpoint; a miss or error degrades to None."""
        if system_id in cache:
            return cache[system_id]

        result = self.store.get(SYSTEMS, system_id)
        if result.is_err():
            self.log.warning("Endpoint system %s unavailable: %s", system_id, result.error)
            system = None
        else:
            system = System.model_validate(result.unwrap())
        cache[system_id] = system
        return system

    def classify(
        self,
        root_id: str,
        descendants: DescendantSet,
        interfaces: Optional[List[EnrichedInterface]] = None,
    ) -> ClassifiedInterfaces:
        """
        Partition interfaces into direct / children / grandchildren.

        When interfaces is None they are fetched first. Every interface lands
        in exactly one group.
        """
        if interfaces is None:
            interfaces = self.fetch(root_id, descendants)

        child_ids = descendants.child_ids()
        classified = ClassifiedInterfaces()
        for interface in interfaces:
            group = classify_interface(interface, root_id, child_ids)
            classified.group(group).append(interface)

        self.log.debug("Classified interfaces: %s", classified.counts())
        return classified

    def available_systems(
        self,
        root_id: str,
        descendants: DescendantSet,
        interfaces: List[EnrichedInterface],
        root: Optional[System] = None,
    ) -> List[System]:
        """
        Systems selectable as interface endpoints, deduplicated by id.

        Order: root, children, grandchildren, then external systems already
        connected to the subtree.
        """
        current = root or self._resolve_root(root_id, interfaces)

        seen = {current.id}
        available = [current]
        for system in descendants.members:
            if system.id not in seen:
                seen.add(system.id)
                available.append(system)

        for interface in interfaces:
            for endpoint in (interface.system1, interface.system2):
                if endpoint is not None and endpoint.id not in seen:
                    seen.add(endpoint.id)
                    available.append(endpoint)

        return available

    def _resolve_root(self, root_id: str, interfaces: List[EnrichedInterface]) -> System:
        """Root record from the store, else from interface endpoints, else a placeholder."""
        result = self.store.get(SYSTEMS, root_id)
        if result.is_ok():
            return System.model_validate(result.unwrap()).at_depth(0)

        self.log.warning("Root system %s unavailable: %s", root_id, result.error)
        for interface in interfaces:
            for endpoint in (interface.system1, interface.system2):
                if endpoint is not None and endpoint.id == root_id:
                    return endpoint.at_depth(0)

        return System(id=root_id, name=CURRENT_SYSTEM_PLACEHOLDER, category="", depth=0)
