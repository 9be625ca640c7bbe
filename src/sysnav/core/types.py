"""
Core type definitions for sysnav.

Row models mirror the three store tables (systems, interfaces, revisions).
Graph models describe the layout-ready projection built from them.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_SYSTEM_NAME = "Unknown"


class EntityType(StrEnum):
    """Kinds of entity tracked in the revision log."""
    SYSTEM = "system"
    INTERFACE = "interface"


class Operation(StrEnum):
    """Mutation recorded by a revision row."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Tier(StrEnum):
    """Position of a system relative to the chosen root."""
    CURRENT = "current"
    CHILD = "child"
    GRANDCHILD = "grandchild"


class InterfaceGroup(StrEnum):
    """Buckets an interface can be classified into."""
    DIRECT = "direct"
    CHILDREN = "children"
    GRANDCHILDREN = "grandchildren"


class EdgeKind(StrEnum):
    """Structural (parent to child) or relationship (interface) edge."""
    STRUCTURAL = "structural"
    INTERFACE = "interface"


class System(BaseModel):
    """
    A node of the system tree.

    depth is never stored; it is attached at query time relative to the
    chosen root (root=0, children=1, grandchildren=2).
    """
    id: str
    name: str
    category: str = ""
    parent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    depth: Optional[int] = None

    model_config = ConfigDict(extra="ignore")

    def at_depth(self, depth: int) -> "System":
        return self.model_copy(update={"depth": depth})

    def to_row(self) -> Dict[str, Any]:
        """Serialize to a store row (without the ephemeral depth)."""
        return self.model_dump(mode="json", exclude={"depth"})


class Interface(BaseModel):
    """
    A typed connection between two systems.

    Order matters only for directional semantics (system1 -> system2).
    """
    id: str
    system1_id: str
    system2_id: str
    connection: str
    directional: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def is_directional(self) -> bool:
        return self.directional == 1

    def touches(self, system_id: str) -> bool:
        return system_id in (self.system1_id, self.system2_id)

    def touches_any(self, system_ids: set) -> bool:
        return self.system1_id in system_ids or self.system2_id in system_ids

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", include=set(Interface.model_fields))


class EnrichedInterface(Interface):
    """An interface together with the full records of both endpoints."""
    system1: Optional[System] = None
    system2: Optional[System] = None

    def endpoint_name(self, which: int) -> str:
        system = self.system1 if which == 1 else self.system2
        return system.name if system else UNKNOWN_SYSTEM_NAME


class Revision(BaseModel):
    """
    Append-only audit row, one per mutation.

    previous_data/new_data are full snapshots of the row, not deltas.
    operation stays a plain string so unknown values pass through.
    """
    id: str
    entity_type: EntityType
    entity_id: str
    operation: str
    previous_data: Optional[Any] = None
    new_data: Optional[Any] = None
    created_by: str = "anonymous"
    created_at: datetime

    model_config = ConfigDict(extra="ignore")


class Position(BaseModel):
    x: float
    y: float


class GraphNode(BaseModel):
    """A system placed in the graph, tagged with its visual tier."""
    id: str
    label: str
    category: str = ""
    tier: Tier
    style: Dict[str, Any] = Field(default_factory=dict)
    position: Position = Field(default_factory=lambda: Position(x=0.0, y=0.0))

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, GraphNode):
            return self.id == other.id
        return False


class GraphEdge(BaseModel):
    """A structural or interface edge between two graph nodes."""
    id: str
    source: str
    target: str
    kind: EdgeKind
    label: str = ""
    directional: bool = False
    animated: bool = False
    style: Dict[str, Any] = Field(default_factory=dict)


class LayoutNode(BaseModel):
    """What a layout oracle is allowed to see of a node."""
    id: str
    tier: Tier


def parse_systems(rows: List[Dict[str, Any]], depth: Optional[int] = None) -> List[System]:
    """Validate store rows into System models, optionally tagging depth."""
    systems = [System.model_validate(row) for row in rows]
    if depth is not None:
        systems = [s.at_depth(depth) for s in systems]
    return systems
