"""dms core: the datastream model, collaborator contracts and their
reference implementations.

Architecture::

    models.py        Datastream, DatastreamSource, DatastreamDestination
    errors.py        DmsError hierarchy (validation, conflict, storage …)
    protocols.py     DatastreamStore, Coordinator, Connector contracts
    paging.py        PageSlice + with_paging
    stores/          In-memory and SQLite definition stores
    coordinator.py   Connector-registry coordinator
    settings.py      DmsSettings (pydantic-settings, DMS_ prefix)
    logging.py       structlog configuration
"""

from dms.core.errors import (
    DatastreamAlreadyExistsError,
    DatastreamValidationError,
    DmsError,
    StoreError,
)
from dms.core.models import Datastream, DatastreamDestination, DatastreamSource

__all__ = [
    "Datastream",
    "DatastreamDestination",
    "DatastreamSource",
    "DmsError",
    "DatastreamAlreadyExistsError",
    "DatastreamValidationError",
    "StoreError",
]
