"""SQLite definition store.

Persists each definition as a JSON document keyed by name::

    CREATE TABLE dms_datastreams (
        name            TEXT PRIMARY KEY,
        definition_json TEXT NOT NULL,
        created_at      TEXT NOT NULL
    )

Uniqueness is enforced by the primary key, so concurrent creates under
the same name resolve inside SQLite: the loser gets an
``IntegrityError`` which is surfaced as
:class:`~dms.core.errors.DatastreamAlreadyExistsError`.  Every other
``sqlite3.Error`` becomes a :class:`~dms.core.errors.StoreError`.

Usage::

    store = SqliteDatastreamStore(":memory:")
    store.create("orders", datastream)
    store.get("orders")
    store.close()

Tags:
    dms, store, sqlite, persistence

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
import sqlite3
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dms.core.errors import DatastreamAlreadyExistsError, StoreError
from dms.core.logging import get_logger
from dms.core.models import Datastream

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS dms_datastreams (
    name            TEXT PRIMARY KEY,
    definition_json TEXT NOT NULL,
    created_at      TEXT NOT NULL
)
"""


class SqliteDatastreamStore:
    """SQLite-backed :class:`~dms.core.protocols.DatastreamStore`.

    One connection is shared by all request threads
    (``check_same_thread=False``); a lock serialises statement execution
    on it.  Enumeration order is insertion order (``rowid``).
    """

    TABLE = "dms_datastreams"

    def __init__(self, path: str | Path = ":memory:") -> None:
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._path = str(path)
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        with self._lock:
            self._conn.execute(_SCHEMA)
            self._conn.commit()
        logger.debug("sqlite_store_opened", path=self._path)

    # -- DatastreamStore protocol ------------------------------------------

    def create(self, name: str, datastream: Datastream) -> None:
        payload = json.dumps(datastream.to_dict(), sort_keys=True)
        now = datetime.now(UTC).isoformat()
        try:
            with self._lock:
                self._conn.execute(
                    f"INSERT INTO {self.TABLE} (name, definition_json, created_at) VALUES (?, ?, ?)",
                    (name, payload, now),
                )
                self._conn.commit()
        except sqlite3.IntegrityError as exc:
            raise DatastreamAlreadyExistsError(name, cause=exc) from exc
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to store datastream '{name}'", cause=exc).with_context(
                datastream=name, operation="create"
            ) from exc

    def get(self, name: str) -> Datastream | None:
        row = self._query_one(
            f"SELECT definition_json FROM {self.TABLE} WHERE name = ?",
            (name,),
            operation="get",
        )
        if row is None:
            return None
        return Datastream.from_dict(json.loads(row["definition_json"]))

    def list_names(self) -> list[str]:
        try:
            with self._lock:
                rows = self._conn.execute(f"SELECT name FROM {self.TABLE} ORDER BY rowid").fetchall()
        except sqlite3.Error as exc:
            raise StoreError("Failed to enumerate datastreams", cause=exc).with_context(
                operation="list_names"
            ) from exc
        return [row["name"] for row in rows]

    def delete(self, name: str) -> None:
        try:
            with self._lock:
                self._conn.execute(f"DELETE FROM {self.TABLE} WHERE name = ?", (name,))
                self._conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to delete datastream '{name}'", cause=exc).with_context(
                datastream=name, operation="delete"
            ) from exc

    # -- helpers -----------------------------------------------------------

    def _query_one(self, sql: str, params: tuple, *, operation: str) -> dict[str, Any] | None:
        try:
            with self._lock:
                row = self._conn.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Store {operation} failed", cause=exc).with_context(
                operation=operation
            ) from exc
        return dict(row) if row is not None else None

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __repr__(self) -> str:
        return f"SqliteDatastreamStore({self._path!r})"
