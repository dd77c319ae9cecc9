"""
Reference coordinator: connector registry plus destination assignment.

The coordinator decides whether a shape-valid datastream definition is
acceptable and completes it before it is persisted:

1. Look up the connector registered for ``connector_type`` (unknown
   types are rejected).
2. Let the connector validate the definition.
3. When the caller did not supply a destination connection string,
   assign one from ``destination_template``.
4. Stamp ``createdAtMs`` in metadata if absent.

Rejections raise :class:`~dms.core.errors.DatastreamValidationError`;
anything else that goes wrong is wrapped in
:class:`~dms.core.errors.CoordinatorError`.

Example:
    >>> coordinator = ConnectorCoordinator(
    ...     {"file": SchemeConnector("file", ["file"])},
    ...     destination_template="memory://dms/{connector_type}/{name}",
    ... )
    >>> ds = Datastream(name="orders", connector_type="file",
    ...                 source=DatastreamSource("file:///var/orders.csv"), metadata={})
    >>> coordinator.initialize_datastream(ds)
    >>> ds.destination.connection_string
    'memory://dms/file/orders'

Tags:
    dms, coordinator, connector, validation, initialization

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from urllib.parse import urlparse

from dms.core.errors import CoordinatorError, DatastreamValidationError, DmsError
from dms.core.logging import get_logger
from dms.core.models import (
    CREATED_AT_MS_KEY,
    Datastream,
    DatastreamDestination,
)
from dms.core.protocols import Connector
from dms.core.settings import DmsSettings

logger = get_logger(__name__)


class SchemeConnector:
    """Connector that accepts sources whose URI scheme is in an allow-list."""

    def __init__(self, connector_type: str, schemes: Iterable[str]):
        self.connector_type = connector_type
        self.schemes = frozenset(s.lower() for s in schemes)

    def initialize_datastream(self, datastream: Datastream) -> None:
        connection_string = datastream.source.connection_string if datastream.source else None
        if not connection_string:
            raise DatastreamValidationError(
                f"Source connection string is required for connector '{self.connector_type}'",
                field_name="source.connectionString",
            )
        scheme = urlparse(connection_string).scheme.lower()
        if scheme not in self.schemes:
            raise DatastreamValidationError(
                f"Source scheme '{scheme}' is not supported by connector "
                f"'{self.connector_type}' (expected one of: {', '.join(sorted(self.schemes))})",
                field_name="source.connectionString",
            )

    def rollback_datastream(self, datastream: Datastream) -> None:
        # Nothing is reserved during initialization
        return None

    def __repr__(self) -> str:
        return f"SchemeConnector({self.connector_type!r}, {sorted(self.schemes)!r})"


class ConnectorCoordinator:
    """:class:`~dms.core.protocols.Coordinator` backed by a connector registry.

    Safe for concurrent use once connectors are registered: initialization
    only reads the registry and mutates the definition it is given.
    """

    def __init__(
        self,
        connectors: dict[str, Connector] | None = None,
        *,
        destination_template: str = "memory://dms/{connector_type}/{name}",
        clock: Callable[[], float] = time.time,
    ):
        self._connectors: dict[str, Connector] = dict(connectors or {})
        self._destination_template = destination_template
        self._clock = clock

    @property
    def connector_types(self) -> list[str]:
        return sorted(self._connectors)

    def register_connector(self, connector_type: str, connector: Connector) -> None:
        """Register (or replace) the connector for *connector_type*."""
        self._connectors[connector_type] = connector
        logger.info("connector_registered", connector_type=connector_type)

    def initialize_datastream(self, datastream: Datastream) -> None:
        connector = self._connector_for(datastream)
        try:
            connector.initialize_datastream(datastream)
        except DmsError:
            raise
        except Exception as exc:
            raise CoordinatorError(
                f"Connector '{datastream.connector_type}' failed to initialize datastream",
                cause=exc,
            ).with_context(datastream=datastream.name, connector_type=datastream.connector_type) from exc

        if datastream.metadata is None:
            datastream.metadata = {}

        if not datastream.has_user_managed_destination:
            datastream.destination = self._assign_destination(datastream)
            logger.debug(
                "destination_assigned",
                datastream=datastream.name,
                destination=datastream.destination.connection_string,
            )

        datastream.metadata.setdefault(CREATED_AT_MS_KEY, str(int(self._clock() * 1000)))

    def rollback_datastream(self, datastream: Datastream) -> None:
        connector = self._connectors.get(datastream.connector_type or "")
        if connector is None:
            return
        connector.rollback_datastream(datastream)
        logger.info("datastream_initialization_rolled_back", datastream=datastream.name)

    # -- helpers -----------------------------------------------------------

    def _connector_for(self, datastream: Datastream) -> Connector:
        connector = self._connectors.get(datastream.connector_type or "")
        if connector is None:
            raise DatastreamValidationError(
                f"Unknown connector type '{datastream.connector_type}'",
                field_name="connectorType",
            )
        return connector

    def _assign_destination(self, datastream: Datastream) -> DatastreamDestination:
        try:
            connection_string = self._destination_template.format(
                name=datastream.name,
                connector_type=datastream.connector_type,
            )
        except (KeyError, IndexError, ValueError) as exc:
            raise CoordinatorError(
                f"Invalid destination template {self._destination_template!r}",
                cause=exc,
            ) from exc

        partitions = None
        if datastream.destination is not None:
            partitions = datastream.destination.partitions
        if partitions is None and datastream.source is not None:
            partitions = datastream.source.partitions
        return DatastreamDestination(connection_string=connection_string, partitions=partitions)

    def __repr__(self) -> str:
        return f"ConnectorCoordinator(connectors={self.connector_types!r})"


def create_coordinator(settings: DmsSettings) -> ConnectorCoordinator:
    """Build a coordinator with one :class:`SchemeConnector` per configured type."""
    connectors: dict[str, Connector] = {
        connector_type: SchemeConnector(connector_type, schemes)
        for connector_type, schemes in settings.connectors.items()
    }
    return ConnectorCoordinator(connectors, destination_template=settings.destination_template)


__all__ = [
    "SchemeConnector",
    "ConnectorCoordinator",
    "create_coordinator",
]
