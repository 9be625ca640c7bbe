"""
Navigation state.

Tracks the currently selected root system and its breadcrumb path, and
assembles the full subtree view (descendants, classified interfaces,
selectable systems, graph) for it.

Loading is guarded by a generation counter: if the root changes while a
load is in flight, the finished result belongs to a root that is no longer
current and is discarded instead of overwriting the newer state.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .analysis.classifier import CURRENT_SYSTEM_PLACEHOLDER, ClassifiedInterfaces, InterfaceClassifier
from .analysis.descendants import DescendantResolver, DescendantSet
from .config import DEFAULT_ROOT_ID, DEFAULT_ROOT_NAME
from .core.graph import SystemGraph
from .core.types import System
from .graph.builder import GraphBuilder
from .services.systems import SystemService
from .store.base import EntityStore


@dataclass(frozen=True)
class Breadcrumb:
    id: str
    name: str


class NavigationPath:
    """
    Breadcrumbs from the configured root to the current system.

    Visiting a system already on the path trims everything after it;
    visiting a new system appends it.
    """

    def __init__(self, root_id: str, root_name: str):
        self._items: List[Breadcrumb] = [Breadcrumb(root_id, root_name)]

    def visit(self, system_id: str, name: str) -> None:
        for index, item in enumerate(self._items):
            if item.id == system_id:
                del self._items[index + 1:]
                return
        self._items.append(Breadcrumb(system_id, name))

    @property
    def current(self) -> Breadcrumb:
        return self._items[-1]

    @property
    def items(self) -> List[Breadcrumb]:
        return list(self._items)

    def __iter__(self) -> Iterator[Breadcrumb]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __str__(self) -> str:
        return " > ".join(item.name for item in self._items)


@dataclass
class SubtreeView:
    """Everything derived for one root; recomputed on every load."""
    root: System
    descendants: DescendantSet
    interfaces: ClassifiedInterfaces
    available_systems: List[System]
    graph: SystemGraph


class Navigator:
    """
    Holds the current root and produces its SubtreeView.

    Usage:
        navigator = Navigator(store, root_id, "Root System")
        view = navigator.load()
        navigator.navigate(child.id, child.name)
        view = navigator.load()
    """

    def __init__(
        self,
        store: EntityStore,
        root_id: str = DEFAULT_ROOT_ID,
        root_name: str = DEFAULT_ROOT_NAME,
        builder: Optional[GraphBuilder] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.log = logger or logging.getLogger(__name__)
        self.path = NavigationPath(root_id, root_name)
        self.resolver = DescendantResolver(store, logger=self.log)
        self.classifier = InterfaceClassifier(store, logger=self.log)
        self.systems = SystemService(store, logger=self.log)
        self.builder = builder or GraphBuilder(logger=self.log)

        self._lock = threading.Lock()
        self._generation = 0
        self._view: Optional[SubtreeView] = None

    @property
    def current_id(self) -> str:
        return self.path.current.id

    @property
    def view(self) -> Optional[SubtreeView]:
        return self._view

    @property
    def generation(self) -> int:
        return self._generation

    def navigate(self, system_id: str, name: str) -> None:
        """Select a new root; any in-flight load becomes stale."""
        with self._lock:
            self.path.visit(system_id, name)
            self._generation += 1
            self._view = None
        self.log.debug("Navigated to %s (%s)", name, system_id)

    def load(self) -> Optional[SubtreeView]:
        """
        Build the view for the current root and commit it.

        Returns None when the root changed before the load finished.
        """
        with self._lock:
            generation = self._generation
            root_id = self.current_id
            root_name = self.path.current.name

        view = self._build_view(root_id, root_name)

        with self._lock:
            if generation != self._generation:
                self.log.debug("Discarding stale view for %s", root_id)
                return None
            self._view = view
        return view

    def refresh(self) -> Optional[SubtreeView]:
        return self.load()

    def go_to_parent(self) -> Optional[System]:
        """Navigate to the parent of the current root, if it has one."""
        current = self.systems.get(self.current_id)
        parent = self.systems.get_parent(current) if current else None
        if parent is None:
            return None
        self.navigate(parent.id, parent.name)
        return parent

    def _build_view(self, root_id: str, root_name: str) -> SubtreeView:
        descendants = self.resolver.resolve(root_id)
        interfaces = self.classifier.fetch(root_id, descendants)
        classified = self.classifier.classify(root_id, descendants, interfaces)
        available = self.classifier.available_systems(root_id, descendants, interfaces)

        root = available[0]
        if root.name == CURRENT_SYSTEM_PLACEHOLDER:
            root = root.model_copy(update={"name": root_name})
            available[0] = root

        graph = self.builder.build(root, descendants, interfaces)
        return SubtreeView(
            root=root,
            descendants=descendants,
            interfaces=classified,
            available_systems=available,
            graph=graph,
        )
