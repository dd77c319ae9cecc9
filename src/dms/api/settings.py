"""
API-specific settings.

Extends :class:`~dms.core.settings.DmsSettings` with parameters that
govern the REST transport (bind address, prefix, CORS, debug).

All values can be overridden via environment variables prefixed with
``DMS_`` (``DMS_PORT``, ``DMS_API_PREFIX`` …).
"""

from __future__ import annotations

from pydantic import Field

from dms.core.settings import DmsSettings


class DmsAPISettings(DmsSettings):
    """Settings for the datastream management REST API.

    Order of precedence (highest → lowest):
        1. Environment variables (``DMS_API_PREFIX``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port")
    debug: bool = Field(default=False, description="Expose exception detail in 500 responses")

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api/v1", description="URL prefix for all endpoints")
    api_title: str = Field(default="Datastream Management API", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )
