"""Audited mutation services over the store's RPC surface."""

from .interfaces import InterfaceService
from .revisions import RevisionService
from .systems import SystemService

__all__ = ["SystemService", "InterfaceService", "RevisionService"]
