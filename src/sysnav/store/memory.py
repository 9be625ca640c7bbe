"""
In-memory entity store.

Fast ephemeral storage for tests and the demo. The audited RPCs are
emulated the way the hosted stored procedures behave: each one applies the
mutation and appends a revision row atomically, or changes nothing.
"""

import copy
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..core.exceptions import RowNotFoundError, StoreError
from ..core.result import Err, Ok, Result
from ..core.types import EntityType, Operation
from .base import INTERFACES, REVISIONS, SYSTEMS, TABLES, EntityStore, Row, check_rpc_params

logger = logging.getLogger(__name__)

# (operation, table_or_function, filters_or_params) -> True to fail the call
FailurePredicate = Callable[[str, str, Mapping[str, Any]], bool]

_ENTITY_TABLES = {EntityType.SYSTEM: SYSTEMS, EntityType.INTERFACE: INTERFACES}


def _matches(row: Row, filters: Mapping[str, Any]) -> bool:
    for column, expected in filters.items():
        actual = row.get(column)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class MemoryEntityStore(EntityStore):
    """
    Dict-backed store implementing the full EntityStore contract.

    Attributes:
        user: Recorded as created_by on revision rows.
    """

    def __init__(self, user: str = "anonymous"):
        self.user = user
        self._tables: Dict[str, Dict[str, Row]] = {table: {} for table in TABLES}
        self._failures: List[FailurePredicate] = []
        self._last_ts: Optional[datetime] = None
        self.calls: List[tuple] = []

    # ── Failure injection ────────────────────────────────────────────────────

    def fail_when(self, predicate: FailurePredicate) -> None:
        """Register a predicate; matching calls fail with StoreError."""
        self._failures.append(predicate)

    def clear_failures(self) -> None:
        self._failures.clear()

    def _check_failure(self, operation: str, target: str, args: Mapping[str, Any]) -> Optional[StoreError]:
        self.calls.append((operation, target, dict(args)))
        for predicate in self._failures:
            if predicate(operation, target, args):
                return StoreError(f"Injected failure: {operation} {target}", status_code=503)
        return None

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _now(self) -> str:
        """Strictly increasing timestamps so created_at ordering is total."""
        now = datetime.now(timezone.utc)
        if self._last_ts is not None and now <= self._last_ts:
            now = self._last_ts + timedelta(microseconds=1)
        self._last_ts = now
        return now.isoformat(timespec="microseconds")

    def _table(self, table: str) -> Dict[str, Row]:
        if table not in self._tables:
            raise StoreError(f"Unknown table '{table}'", status_code=404)
        return self._tables[table]

    def seed(self, table: str, rows: Sequence[Row]) -> None:
        """Load fixture rows verbatim, filling ids and timestamps if absent."""
        target = self._table(table)
        for row in rows:
            stored = dict(row)
            stored.setdefault("id", str(uuid.uuid4()))
            if table == REVISIONS:
                stored.setdefault("created_by", self.user)
                stored.setdefault("created_at", self._now())
            else:
                stored.setdefault("created_at", self._now())
                stored.setdefault("updated_at", stored["created_at"])
            target[stored["id"]] = stored

    def rows(self, table: str) -> List[Row]:
        return [dict(row) for row in self._table(table).values()]

    # ── Reads ────────────────────────────────────────────────────────────────

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Result[List[Row], StoreError]:
        failure = self._check_failure("select", table, filters or {})
        if failure:
            return Err(failure)
        try:
            rows = [dict(r) for r in self._table(table).values() if _matches(r, filters or {})]
        except StoreError as e:
            return Err(e)
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by) or ""), reverse=descending)
        return Ok(rows)

    def select_any(
        self, table: str, columns: Sequence[str], values: Sequence[str]
    ) -> Result[List[Row], StoreError]:
        failure = self._check_failure("select_any", table, {c: list(values) for c in columns})
        if failure:
            return Err(failure)
        wanted = set(values)
        try:
            rows = [
                dict(r) for r in self._table(table).values()
                if any(r.get(column) in wanted for column in columns)
            ]
        except StoreError as e:
            return Err(e)
        return Ok(rows)

    def get(self, table: str, row_id: str) -> Result[Row, StoreError]:
        failure = self._check_failure("get", table, {"id": row_id})
        if failure:
            return Err(failure)
        try:
            row = self._table(table).get(row_id)
        except StoreError as e:
            return Err(e)
        if row is None:
            return Err(RowNotFoundError(table, row_id))
        return Ok(dict(row))

    # ── Direct writes ────────────────────────────────────────────────────────

    def insert(self, table: str, row: Row) -> Row:
        failure = self._check_failure("insert", table, row)
        if failure:
            raise failure
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", self._now())
        if table != REVISIONS:
            stored.setdefault("updated_at", stored["created_at"])
        self._table(table)[stored["id"]] = stored
        return dict(stored)

    def update(self, table: str, row_id: str, values: Row) -> Row:
        failure = self._check_failure("update", table, {"id": row_id, **values})
        if failure:
            raise failure
        target = self._table(table)
        if row_id not in target:
            raise RowNotFoundError(table, row_id)
        target[row_id].update(values)
        if table != REVISIONS:
            target[row_id]["updated_at"] = self._now()
        return dict(target[row_id])

    def delete(self, table: str, row_id: str) -> None:
        failure = self._check_failure("delete", table, {"id": row_id})
        if failure:
            raise failure
        self._table(table).pop(row_id, None)

    # ── RPC emulation ────────────────────────────────────────────────────────

    def rpc(self, name: str, params: Mapping[str, Any]) -> Any:
        check_rpc_params(name, params)
        failure = self._check_failure("rpc", name, params)
        if failure:
            raise failure

        handler = getattr(self, f"_rpc_{name}")
        snapshot = copy.deepcopy(self._tables)
        try:
            return handler(**params)
        except Exception:
            self._tables = snapshot
            raise

    def _record(self, entity_type: EntityType, entity_id: str, operation: Operation,
                previous: Optional[Row], new: Optional[Row]) -> None:
        revision = {
            "id": str(uuid.uuid4()),
            "entity_type": entity_type.value,
            "entity_id": entity_id,
            "operation": operation.value,
            "previous_data": copy.deepcopy(previous),
            "new_data": copy.deepcopy(new),
            "created_by": self.user,
            "created_at": self._now(),
        }
        self._tables[REVISIONS][revision["id"]] = revision

    def _require(self, table: str, row_id: Optional[str]) -> Row:
        row = self._tables[table].get(row_id) if row_id else None
        if row is None:
            raise RowNotFoundError(table, str(row_id))
        return row

    def _require_reference(self, table: str, row_id: Optional[str], column: str) -> None:
        if row_id is not None and row_id not in self._tables[table]:
            raise StoreError(
                f"Foreign key violation: {column}={row_id} not present in {table}", status_code=409
            )

    def _insert_system(self, row: Row) -> Row:
        self._require_reference(SYSTEMS, row.get("parent_id"), "parent_id")
        self._tables[SYSTEMS][row["id"]] = row
        self._record(EntityType.SYSTEM, row["id"], Operation.CREATE, None, row)
        return row

    def _insert_interface(self, row: Row) -> Row:
        self._require_reference(SYSTEMS, row.get("system1_id"), "system1_id")
        self._require_reference(SYSTEMS, row.get("system2_id"), "system2_id")
        self._tables[INTERFACES][row["id"]] = row
        self._record(EntityType.INTERFACE, row["id"], Operation.CREATE, None, row)
        return row

    def _remove_system(self, system_id: str) -> None:
        previous = self._require(SYSTEMS, system_id)
        if any(r.get("parent_id") == system_id for r in self._tables[SYSTEMS].values()):
            raise StoreError(
                f"Foreign key violation: system {system_id} still has subsystems", status_code=409
            )
        for iface in list(self._tables[INTERFACES].values()):
            if system_id in (iface["system1_id"], iface["system2_id"]):
                self._remove_interface(iface["id"])
        del self._tables[SYSTEMS][system_id]
        self._record(EntityType.SYSTEM, system_id, Operation.DELETE, previous, None)

    def _remove_interface(self, interface_id: str) -> None:
        previous = self._require(INTERFACES, interface_id)
        del self._tables[INTERFACES][interface_id]
        self._record(EntityType.INTERFACE, interface_id, Operation.DELETE, previous, None)

    def _rpc_create_system_with_history(self, system_name: str, system_category: str,
                                        system_parent_id: Optional[str] = None) -> str:
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "name": system_name,
            "category": system_category,
            "parent_id": system_parent_id,
            "created_at": now,
            "updated_at": now,
        }
        return self._insert_system(row)["id"]

    def _rpc_update_system_with_history(self, system_id: str, system_name: str,
                                        system_category: str) -> Row:
        current = self._require(SYSTEMS, system_id)
        previous = dict(current)
        current.update(name=system_name, category=system_category, updated_at=self._now())
        self._record(EntityType.SYSTEM, system_id, Operation.UPDATE, previous, current)
        return dict(current)

    def _rpc_delete_system_with_history(self, system_id: str) -> bool:
        self._remove_system(system_id)
        return True

    def _rpc_create_interface_with_history(self, interface_system1_id: str, interface_system2_id: str,
                                           interface_connection: str,
                                           interface_directional: Optional[int] = None) -> str:
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "system1_id": interface_system1_id,
            "system2_id": interface_system2_id,
            "connection": interface_connection,
            "directional": interface_directional or 0,
            "created_at": now,
            "updated_at": now,
        }
        return self._insert_interface(row)["id"]

    def _rpc_update_interface_with_history(self, interface_id: str, interface_system1_id: str,
                                           interface_system2_id: str, interface_connection: str,
                                           interface_directional: int) -> Row:
        current = self._require(INTERFACES, interface_id)
        self._require_reference(SYSTEMS, interface_system1_id, "system1_id")
        self._require_reference(SYSTEMS, interface_system2_id, "system2_id")
        previous = dict(current)
        current.update(
            system1_id=interface_system1_id,
            system2_id=interface_system2_id,
            connection=interface_connection,
            directional=interface_directional,
            updated_at=self._now(),
        )
        self._record(EntityType.INTERFACE, interface_id, Operation.UPDATE, previous, current)
        return dict(current)

    def _rpc_delete_interface_with_history(self, interface_id: str) -> bool:
        self._remove_interface(interface_id)
        return True

    def _rpc_restore_revision(self, revision_id: str) -> Row:
        revision = self._require(REVISIONS, revision_id)
        entity_type = EntityType(revision["entity_type"])
        table = _ENTITY_TABLES[entity_type]
        entity_id = revision["entity_id"]
        operation = revision["operation"]

        if operation == Operation.CREATE:
            # Undo a creation by removing the entity again
            if entity_type == EntityType.SYSTEM:
                self._remove_system(entity_id)
            else:
                self._remove_interface(entity_id)
            return {"id": entity_id, "restored": True, "operation": Operation.DELETE.value}

        snapshot = revision.get("previous_data")
        if not isinstance(snapshot, dict):
            raise StoreError(f"Revision {revision_id} has no snapshot to restore", status_code=400)
        restored = dict(snapshot)
        restored["updated_at"] = self._now()

        if operation == Operation.UPDATE:
            current = self._require(table, entity_id)
            previous = dict(current)
            current.clear()
            current.update(restored)
            self._record(entity_type, entity_id, Operation.UPDATE, previous, current)
            return dict(current)

        if operation == Operation.DELETE:
            if entity_id in self._tables[table]:
                raise StoreError(f"{entity_type.value} {entity_id} already exists", status_code=409)
            if entity_type == EntityType.SYSTEM:
                return dict(self._insert_system(restored))
            return dict(self._insert_interface(restored))

        raise StoreError(f"Cannot restore operation '{operation}'", status_code=400)
