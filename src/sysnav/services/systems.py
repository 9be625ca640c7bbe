"""
System Service.

Reads and audited mutations for rows of the systems table.
"""

from typing import Any, Dict, List, Optional

from ..core.exceptions import ValidationError
from ..core.types import System, parse_systems
from ..store.base import SYSTEMS
from .base import RpcService


def _require_text(field_name: str, value: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"System {field_name} must not be blank")
    return str(value).strip()


class SystemService(RpcService):
    """Lookup, listing and create/update/delete of systems."""

    def get(self, system_id: str) -> Optional[System]:
        result = self.store.get(SYSTEMS, system_id)
        if result.is_err():
            self.log.error("Error fetching system %s: %s", system_id, result.error)
            return None
        return System.model_validate(result.unwrap())

    def list_children(self, parent_id: str) -> List[System]:
        """Subsystems of parent_id, newest first; [] if the fetch fails."""
        result = self.store.select(
            SYSTEMS, {"parent_id": parent_id}, order_by="created_at", descending=True
        )
        if result.is_err():
            self.log.error("Error fetching subsystems of %s: %s", parent_id, result.error)
            return []
        return parse_systems(result.unwrap(), depth=1)

    def get_parent(self, system: System) -> Optional[System]:
        if not system.parent_id:
            return None
        return self.get(system.parent_id)

    def create(self, name: str, category: str, parent_id: Optional[str] = None) -> str:
        """Create a system and return its new id."""
        params = {
            "system_name": _require_text("name", name),
            "system_category": _require_text("category", category),
            "system_parent_id": parent_id,
        }
        return self._call("create_system_with_history", params)

    def update(self, system_id: str, name: str, category: str) -> Dict[str, Any]:
        params = {
            "system_id": system_id,
            "system_name": _require_text("name", name),
            "system_category": _require_text("category", category),
        }
        return self._call("update_system_with_history", params)

    def delete(self, system_id: str) -> bool:
        return bool(self._call("delete_system_with_history", {"system_id": system_id}))
