"""
Entity store contract.

The store owns persistence of systems, interfaces and revisions. Reads
return Ok/Err results; writes and RPCs raise StoreError.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core.exceptions import StoreError
from ..core.result import Result

SYSTEMS = "systems"
INTERFACES = "interfaces"
REVISIONS = "revisions"

TABLES = (SYSTEMS, INTERFACES, REVISIONS)

Row = Dict[str, Any]

# Audited mutations exposed by the store, name -> accepted parameters
RPC_SIGNATURES: Dict[str, tuple] = {
    "create_system_with_history": ("system_name", "system_category", "system_parent_id"),
    "update_system_with_history": ("system_id", "system_name", "system_category"),
    "delete_system_with_history": ("system_id",),
    "create_interface_with_history": (
        "interface_system1_id", "interface_system2_id",
        "interface_connection", "interface_directional",
    ),
    "update_interface_with_history": (
        "interface_id", "interface_system1_id", "interface_system2_id",
        "interface_connection", "interface_directional",
    ),
    "delete_interface_with_history": ("interface_id",),
    "restore_revision": ("revision_id",),
}


def check_rpc_params(name: str, params: Mapping[str, Any]) -> None:
    """Reject unknown RPC names and unexpected parameter names."""
    if name not in RPC_SIGNATURES:
        raise StoreError(f"Unknown function '{name}'", status_code=404)
    unexpected = set(params) - set(RPC_SIGNATURES[name])
    if unexpected:
        raise StoreError(
            f"Function '{name}' does not accept {sorted(unexpected)}", status_code=400
        )


class EntityStore(ABC):
    """
    Abstract row store with an RPC surface.

    Filters are equality matches; a list/tuple/set value means membership.
    """

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Result[List[Row], StoreError]:
        """Fetch rows matching all filters."""

    @abstractmethod
    def select_any(
        self, table: str, columns: Sequence[str], values: Sequence[str]
    ) -> Result[List[Row], StoreError]:
        """Fetch rows where any of the columns holds one of the values."""

    @abstractmethod
    def get(self, table: str, row_id: str) -> Result[Row, StoreError]:
        """Fetch exactly one row by id; Err(RowNotFoundError) if absent."""

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insert a row directly (legacy, unaudited)."""

    @abstractmethod
    def update(self, table: str, row_id: str, values: Row) -> Row:
        """Update a row directly (legacy, unaudited)."""

    @abstractmethod
    def delete(self, table: str, row_id: str) -> None:
        """Delete a row directly (legacy, unaudited)."""

    @abstractmethod
    def rpc(self, name: str, params: Mapping[str, Any]) -> Any:
        """Call an audited stored procedure; all-or-nothing."""
