"""Interface Service: lookup and audited create/update/delete of interfaces."""

from typing import Any, Dict, Optional

from ..core.exceptions import ValidationError
from ..core.types import Interface
from ..store.base import INTERFACES
from .base import RpcService


def _check(system1_id: str, system2_id: str, connection: str, directional: int) -> None:
    if not system1_id or not system2_id:
        raise ValidationError("Both endpoint systems are required")
    if not connection or not connection.strip():
        raise ValidationError("Interface connection must not be blank")
    if directional not in (0, 1):
        raise ValidationError(f"directional must be 0 or 1, got {directional!r}")


class InterfaceService(RpcService):
    """Reads and mutations on the interfaces table."""

    def get(self, interface_id: str) -> Optional[Interface]:
        result = self.store.get(INTERFACES, interface_id)
        if result.is_err():
            self.log.error("Error fetching interface %s: %s", interface_id, result.error)
            return None
        return Interface.model_validate(result.unwrap())

    def create(self, system1_id: str, system2_id: str, connection: str, directional: int = 0) -> str:
        _check(system1_id, system2_id, connection, directional)
        return self._call("create_interface_with_history", {
            "interface_system1_id": system1_id,
            "interface_system2_id": system2_id,
            "interface_connection": connection.strip(),
            "interface_directional": directional,
        })

    def update(self, interface_id: str, system1_id: str, system2_id: str,
               connection: str, directional: int) -> Dict[str, Any]:
        _check(system1_id, system2_id, connection, directional)
        return self._call("update_interface_with_history", {
            "interface_id": interface_id,
            "interface_system1_id": system1_id,
            "interface_system2_id": system2_id,
            "interface_connection": connection.strip(),
            "interface_directional": directional,
        })

    def delete(self, interface_id: str) -> bool:
        return bool(self._call("delete_interface_with_history", {"interface_id": interface_id}))
