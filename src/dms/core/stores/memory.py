"""In-memory definition store.

Process-local and non-durable; the default backend for development and
tests.  A single lock guards the mapping so the existence check and the
insert in :meth:`InMemoryDatastreamStore.create` are one atomic step.

Tags:
    dms, store, in-memory

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
import threading

from dms.core.errors import DatastreamAlreadyExistsError
from dms.core.models import Datastream


class InMemoryDatastreamStore:
    """Dict-backed :class:`~dms.core.protocols.DatastreamStore`.

    Definitions are deep-copied on the way in and out, so callers can
    never mutate a stored definition.  Enumeration follows insertion
    order.
    """

    def __init__(self) -> None:
        self._datastreams: dict[str, Datastream] = {}
        self._lock = threading.Lock()

    def create(self, name: str, datastream: Datastream) -> None:
        with self._lock:
            if name in self._datastreams:
                raise DatastreamAlreadyExistsError(name)
            self._datastreams[name] = copy.deepcopy(datastream)

    def get(self, name: str) -> Datastream | None:
        with self._lock:
            stored = self._datastreams.get(name)
        return copy.deepcopy(stored) if stored is not None else None

    def list_names(self) -> list[str]:
        with self._lock:
            return list(self._datastreams)

    def delete(self, name: str) -> None:
        # Deleting an unknown name is a no-op
        with self._lock:
            self._datastreams.pop(name, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._datastreams)

    def __repr__(self) -> str:
        return f"InMemoryDatastreamStore(size={len(self)})"
