"""Datastream definition models.

Manifesto:
    A datastream definition is the only entity the service manages.  The
    ops layer, the stores and the coordinator all pass the same typed
    object around so that coordinator mutations are visible to the
    persistence step without any copying.

Field names are snake_case in Python and camelCase on the wire
(``connectorType``, ``connectionString``).  :meth:`Datastream.to_dict`
and :meth:`Datastream.from_dict` convert between the two and are what
the stores persist.

Tags:
    dms, models, dataclasses, datastream

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Metadata keys understood by the service
IS_USER_MANAGED_DESTINATION_KEY = "isUserManagedDestination"
CREATED_AT_MS_KEY = "createdAtMs"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@dataclass
class DatastreamSource:
    """Where the data of a datastream originates."""

    connection_string: str | None = None
    partitions: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _endpoint_to_dict(self.connection_string, self.partitions)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DatastreamSource:
        return cls(
            connection_string=data.get("connectionString"),
            partitions=data.get("partitions"),
        )


@dataclass
class DatastreamDestination:
    """Where the data of a datastream is delivered.

    A non-empty ``connection_string`` supplied by the caller marks the
    destination as user managed; otherwise the coordinator assigns one.
    """

    connection_string: str | None = None
    partitions: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _endpoint_to_dict(self.connection_string, self.partitions)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DatastreamDestination:
        return cls(
            connection_string=data.get("connectionString"),
            partitions=data.get("partitions"),
        )


def _endpoint_to_dict(connection_string: str | None, partitions: int | None) -> dict[str, Any]:
    d: dict[str, Any] = {}
    if connection_string is not None:
        d["connectionString"] = connection_string
    if partitions is not None:
        d["partitions"] = partitions
    return d


# ---------------------------------------------------------------------------
# Datastream
# ---------------------------------------------------------------------------


@dataclass
class Datastream:
    """A declarative datastream definition.

    Every attribute is optional at construction time because incoming
    requests are validated by the ops layer, not by the model.
    """

    name: str | None = None
    connector_type: str | None = None
    source: DatastreamSource | None = None
    destination: DatastreamDestination | None = None
    metadata: dict[str, str] | None = None

    @property
    def has_user_managed_destination(self) -> bool:
        """True when the caller supplied a destination connection string."""
        return bool(self.destination and self.destination.connection_string)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase wire representation."""
        d: dict[str, Any] = {}
        if self.name is not None:
            d["name"] = self.name
        if self.connector_type is not None:
            d["connectorType"] = self.connector_type
        if self.source is not None:
            d["source"] = self.source.to_dict()
        if self.destination is not None:
            d["destination"] = self.destination.to_dict()
        if self.metadata is not None:
            d["metadata"] = dict(self.metadata)
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Datastream:
        """Build from the camelCase wire representation."""
        source = data.get("source")
        destination = data.get("destination")
        metadata = data.get("metadata")
        return cls(
            name=data.get("name"),
            connector_type=data.get("connectorType"),
            source=DatastreamSource.from_dict(source) if source is not None else None,
            destination=(
                DatastreamDestination.from_dict(destination) if destination is not None else None
            ),
            metadata={str(k): str(v) for k, v in metadata.items()} if metadata is not None else None,
        )
