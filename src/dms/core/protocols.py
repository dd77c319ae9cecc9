"""
Collaborator protocols for the datastream management service.

The ops layer only ever talks to a definition store and a coordinator
through these structural contracts.  Any object with the right shape
works: the reference implementations in :mod:`dms.core.stores` and
:mod:`dms.core.coordinator`, a remote client, or a ``MagicMock`` in
tests.

Architecture:
    ::

        protocols.py
        ├── DatastreamStore  — keyed, create-if-absent definition storage
        ├── Connector        — per-connector-type validation rules
        └── Coordinator      — validate-and-initialize a definition

Guardrails:
    ❌ DON'T: Import concrete stores/coordinators from the ops layer
    ✅ DO: Depend on these protocols and inject implementations via context

Tags:
    protocol, store, coordinator, connector, dms, contracts

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dms.core.models import Datastream


@runtime_checkable
class DatastreamStore(Protocol):
    """Durable keyed storage of datastream definitions.

    ``create`` must be atomic with respect to the uniqueness check: of two
    concurrent creates under the same name exactly one succeeds and the
    other raises :class:`~dms.core.errors.DatastreamAlreadyExistsError`.
    Any other failure surfaces as an exception
    (:class:`~dms.core.errors.StoreError` for the reference stores).
    """

    def create(self, name: str, datastream: Datastream) -> None:
        """Store *datastream* under *name* if no definition exists yet."""
        ...

    def get(self, name: str) -> Datastream | None:
        """Return the definition stored under *name*, ``None`` if absent."""
        ...

    def list_names(self) -> list[str]:
        """Return all stored names in a stable enumeration order."""
        ...

    def delete(self, name: str) -> None:
        """Remove the definition stored under *name*."""
        ...


@runtime_checkable
class Connector(Protocol):
    """Connector-specific validation and initialization rules."""

    def initialize_datastream(self, datastream: Datastream) -> None:
        """Validate *datastream* and fill connector-owned fields.

        Raises :class:`~dms.core.errors.DatastreamValidationError` when the
        definition is not acceptable for this connector.
        """
        ...

    def rollback_datastream(self, datastream: Datastream) -> None:
        """Release whatever :meth:`initialize_datastream` reserved."""
        ...


@runtime_checkable
class Coordinator(Protocol):
    """Validates and completes definitions before they are persisted."""

    def initialize_datastream(self, datastream: Datastream) -> None:
        """Validate *datastream* and mutate it in place.

        Raises :class:`~dms.core.errors.DatastreamValidationError` with a
        human-readable reason when the definition is rejected.
        """
        ...

    def rollback_datastream(self, datastream: Datastream) -> None:
        """Undo the side effects of a successful initialization."""
        ...


__all__ = [
    "DatastreamStore",
    "Connector",
    "Coordinator",
]
