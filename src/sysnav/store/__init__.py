"""
Entity store adapters for sysnav.

Provides pluggable backends for the systems/interfaces/revisions store:
- RestEntityStore: PostgREST wire format over HTTP (hosted store)
- MemoryEntityStore: Fast ephemeral storage for testing and demos
"""

from ..config import Settings
from ..core.exceptions import ConfigError
from .base import INTERFACES, REVISIONS, SYSTEMS, EntityStore
from .memory import MemoryEntityStore
from .rest import RestEntityStore


def create_store(settings: Settings) -> EntityStore:
    """Build the store selected by settings.backend."""
    if settings.backend == "memory":
        return MemoryEntityStore(user=settings.user)

    if not settings.url:
        raise ConfigError(
            "No store URL configured. Set SYSNAV_URL (or SUPABASE_URL) "
            "or run 'sysnav init'."
        )
    return RestEntityStore(settings.url, api_key=settings.api_key, timeout=settings.timeout)


__all__ = [
    "EntityStore",
    "RestEntityStore",
    "MemoryEntityStore",
    "create_store",
    "SYSTEMS",
    "INTERFACES",
    "REVISIONS",
]
