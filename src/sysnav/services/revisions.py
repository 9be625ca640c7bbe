"""
Revision Service.

Reads the append-only revision log for one entity and restores an entity
to the state captured by a revision.
"""

from typing import Any, List

from ..core.types import EntityType, Revision
from ..store.base import REVISIONS
from .base import RpcService


class RevisionService(RpcService):

    def history(self, entity_type: EntityType, entity_id: str) -> List[Revision]:
        """Revisions of one entity, newest first; [] if the fetch fails."""
        self.log.debug("Fetching revision history for %s %s", entity_type, entity_id)
        result = self.store.select(
            REVISIONS,
            {"entity_type": EntityType(entity_type).value, "entity_id": entity_id},
            order_by="created_at",
            descending=True,
        )
        if result.is_err():
            self.log.error("Error fetching revision history: %s", result.error)
            return []

        revisions = [Revision.model_validate(row) for row in result.unwrap()]
        self.log.debug("Revision history fetched: %d", len(revisions))
        return revisions

    def restore(self, revision_id: str) -> Any:
        return self._call("restore_revision", {"revision_id": revision_id})
