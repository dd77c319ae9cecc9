"""Base settings for the datastream management service.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    Store backend, paging bounds and connector rules are read once at
    startup so a misconfiguration fails fast instead of on the first
    request.

    - **Pydantic validation:** Type-checked at startup
    - **Environment-driven:** ``DMS_`` env vars and ``.env`` files
    - **Sensible defaults:** In-memory store, ``file`` connector

Examples:
    >>> from dms.core.settings import DmsSettings
    >>> DmsSettings(store_backend="sqlite").store_backend
    'sqlite'

    Connectors can be overridden from the environment as JSON::

        DMS_CONNECTORS='{"kafka": ["kafka"], "file": ["file"]}'

Tags:
    settings, configuration, pydantic, environment, dms

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DmsSettings(BaseSettings):
    """Settings shared by the API, the CLI and the reference collaborators.

    Fields
    ──────
    log_level            : Structlog log level
    log_json             : Force JSON (True) / console (False) logs, None = auto
    store_backend        : ``memory`` or ``sqlite``
    database_path        : SQLite file used when ``store_backend == "sqlite"``
    default_page_size    : Page size for list requests without an explicit count
    max_page_size        : Upper bound on the requested page size
    connectors           : Connector type → accepted source URI schemes
    destination_template : Format string for coordinator-assigned destinations
    """

    model_config = SettingsConfigDict(
        env_prefix="DMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Storage ──────────────────────────────────────────────────
    store_backend: Literal["memory", "sqlite"] = "memory"
    database_path: Path = Field(
        default_factory=lambda: Path.home() / ".dms" / "datastreams.db",
        description="SQLite database file for the sqlite store backend",
    )

    # ── Paging ───────────────────────────────────────────────────
    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=1000, ge=1)

    # ── Coordinator ──────────────────────────────────────────────
    connectors: dict[str, list[str]] = Field(
        default_factory=lambda: {"file": ["file"]},
        description="Registered connector types and the source schemes they accept",
    )
    destination_template: str = Field(
        default="memory://dms/{connector_type}/{name}",
        description="Template for destinations assigned by the coordinator",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()
