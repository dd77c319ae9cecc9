"""Reference definition stores.

``create_store(settings)`` builds the backend selected by
``DmsSettings.store_backend``:

==========  =====================================================
backend     implementation
==========  =====================================================
memory      :class:`InMemoryDatastreamStore` (process-local)
sqlite      :class:`SqliteDatastreamStore` at ``database_path``
==========  =====================================================
"""

from __future__ import annotations

from dms.core.errors import InvalidConfigError
from dms.core.settings import DmsSettings
from dms.core.stores.memory import InMemoryDatastreamStore
from dms.core.stores.sqlite import SqliteDatastreamStore


def create_store(settings: DmsSettings) -> InMemoryDatastreamStore | SqliteDatastreamStore:
    """Build the definition store configured in *settings*."""
    if settings.store_backend == "memory":
        return InMemoryDatastreamStore()
    if settings.store_backend == "sqlite":
        return SqliteDatastreamStore(settings.database_path)
    raise InvalidConfigError("store_backend", settings.store_backend)


__all__ = [
    "InMemoryDatastreamStore",
    "SqliteDatastreamStore",
    "create_store",
]
