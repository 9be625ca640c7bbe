"""
Revision Diff Renderer - Show what a single revision changed.

Identifies:
1. Created entities (whole new snapshot is an addition)
2. Deleted entities (whole previous snapshot is a removal)
3. Updated entities (only the keys whose values differ)

Unknown operations render as an empty diff rather than an error.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.types import Operation, Revision


class _Absent:
    """Marks a key missing from one side of an update."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def _normalize(value: Any) -> Any:
    """Collapse integral floats to ints, as JSON numbers have no int/float split."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


def _canonical(value: Any) -> str:
    """Structural fingerprint; distinguishes true from 1 like JSON does, but not 1 from 1.0."""
    return json.dumps(_normalize(value), sort_keys=True, default=str)


def render_value(value: Any) -> str:
    """One snapshot value as JSON text (`"x"`, `true`, `null`)."""
    return json.dumps(value, default=str)


@dataclass
class FieldChange:
    """One key whose value differs between the two snapshots."""
    key: str
    old_value: Any = ABSENT
    new_value: Any = ABSENT

    @property
    def was_added(self) -> bool:
        return self.old_value is ABSENT

    @property
    def was_removed(self) -> bool:
        return self.new_value is ABSENT

    def __str__(self) -> str:
        parts = []
        if self.old_value is not ABSENT:
            parts.append(f"- {render_value(self.old_value)}")
        if self.new_value is not ABSENT:
            parts.append(f"+ {render_value(self.new_value)}")
        return f"{self.key}: " + " → ".join(parts)


@dataclass
class RenderableDiff:
    """Renderable result of diffing one revision."""
    operation: str
    additions: Optional[Any] = None
    removals: Optional[Any] = None
    changes: List[FieldChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.additions is None and self.removals is None and not self.changes

    def changed_keys(self) -> List[str]:
        return [c.key for c in self.changes]

    def to_lines(self) -> List[str]:
        """Plain-text rendering: '+' for additions, '-' for removals."""
        if self.additions is not None:
            return [f"+ {json.dumps(self.additions, indent=2, default=str)}"]
        if self.removals is not None:
            return [f"- {json.dumps(self.removals, indent=2, default=str)}"]
        return [str(change) for change in self.changes]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "additions": self.additions,
            "removals": self.removals,
            "changes": [
                {
                    "key": c.key,
                    "old_value": None if c.was_added else c.old_value,
                    "new_value": None if c.was_removed else c.new_value,
                    "old_present": not c.was_added,
                    "new_present": not c.was_removed,
                }
                for c in self.changes
            ],
        }


class RevisionDiffRenderer:
    """
    Computes the renderable difference recorded by a revision row.
    """

    def diff(self, revision: Revision) -> RenderableDiff:
        operation = revision.operation

        if operation == Operation.CREATE:
            return RenderableDiff(operation=operation, additions=revision.new_data)

        if operation == Operation.DELETE:
            return RenderableDiff(operation=operation, removals=revision.previous_data)

        if operation == Operation.UPDATE:
            return RenderableDiff(
                operation=operation,
                changes=self.compare(revision.previous_data, revision.new_data),
            )

        return RenderableDiff(operation=operation)

    @staticmethod
    def compare(previous: Optional[Dict[str, Any]], new: Optional[Dict[str, Any]]) -> List[FieldChange]:
        """
        Changed keys between two snapshots, in first-seen key order.

        Values are compared structurally; keys with equal values are omitted.
        """
        previous = previous if isinstance(previous, dict) else {}
        new = new if isinstance(new, dict) else {}

        keys = list(dict.fromkeys([*previous.keys(), *new.keys()]))

        changes = []
        for key in keys:
            old_value = previous.get(key, ABSENT)
            new_value = new.get(key, ABSENT)
            if old_value is ABSENT or new_value is ABSENT:
                changes.append(FieldChange(key=key, old_value=old_value, new_value=new_value))
            elif _canonical(old_value) != _canonical(new_value):
                changes.append(FieldChange(key=key, old_value=old_value, new_value=new_value))
        return changes
