"""Shared plumbing for services that call audited store RPCs."""

import logging
from typing import Any, Mapping, Optional

from ..core.exceptions import MutationError, StoreError
from ..store.base import EntityStore


class RpcService:
    """Base for services whose mutations go through store RPCs."""

    def __init__(self, store: EntityStore, logger: Optional[logging.Logger] = None):
        self.store = store
        self.log = logger or logging.getLogger(type(self).__module__)

    def _call(self, name: str, params: Mapping[str, Any]) -> Any:
        """
        Call an RPC, translating store failures into MutationError.

        The RPC is all-or-nothing; nothing local changes when it fails.
        """
        self.log.debug("Calling %s", name)
        try:
            result = self.store.rpc(name, params)
        except StoreError as e:
            self.log.error("Error in %s: %s", name, e)
            raise MutationError(name, e) from e
        self.log.debug("%s succeeded", name)
        return result
