"""
Datastream schemas for the API layer.

These mirror :mod:`dms.core.models` as Pydantic models so they get JSON
serialisation and OpenAPI schema generation.  Wire names are camelCase
(``connectorType``, ``connectionString``); snake_case names are accepted
too.

Every field of :class:`DatastreamSchema` is optional on purpose: the ops
layer owns the required-field checks and their order, so a body missing
``name`` yields a 400 from the ops layer rather than a 422 from
Pydantic.

Tags:
    dms, api, schemas, datastream

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dms.core.models import Datastream, DatastreamDestination, DatastreamSource

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DatastreamSourceSchema(BaseModel):
    """Where a datastream's data originates."""

    model_config = _CAMEL

    connection_string: str | None = Field(default=None, description="Source URI, e.g. file:///data/in.csv")
    partitions: int | None = Field(default=None, ge=1, description="Number of source partitions")


class DatastreamDestinationSchema(BaseModel):
    """Where a datastream's data is delivered."""

    model_config = _CAMEL

    connection_string: str | None = Field(
        default=None,
        description="Destination URI; when set, the destination is user managed",
    )
    partitions: int | None = Field(default=None, ge=1, description="Number of destination partitions")


class DatastreamSchema(BaseModel):
    """Datastream definition (request body and response item).

    Example:
        {
            "name": "orders",
            "connectorType": "file",
            "source": {"connectionString": "file:///var/data/orders.csv"},
            "metadata": {"owner": "data-platform"}
        }
    """

    model_config = _CAMEL

    name: str | None = Field(default=None, description="Unique datastream name")
    connector_type: str | None = Field(default=None, description="Connector type, e.g. 'file'")
    source: DatastreamSourceSchema | None = None
    destination: DatastreamDestinationSchema | None = None
    metadata: dict[str, str] | None = Field(default=None, description="Free-form string metadata")

    def to_model(self) -> Datastream:
        """Convert to the ops-layer :class:`~dms.core.models.Datastream`."""
        return Datastream(
            name=self.name,
            connector_type=self.connector_type,
            source=(
                DatastreamSource(self.source.connection_string, self.source.partitions)
                if self.source is not None
                else None
            ),
            destination=(
                DatastreamDestination(self.destination.connection_string, self.destination.partitions)
                if self.destination is not None
                else None
            ),
            metadata=dict(self.metadata) if self.metadata is not None else None,
        )

    @classmethod
    def from_model(cls, datastream: Datastream) -> DatastreamSchema:
        """Build from an ops-layer :class:`~dms.core.models.Datastream`."""
        return cls.model_validate(datastream.to_dict())


class DatastreamCreatedSchema(BaseModel):
    """Payload of a successful create."""

    name: str = Field(description="Name the datastream was stored under")
