"""
REST API layer for the datastream management service.

Provides a FastAPI application factory with typed endpoints that
delegate to the operations layer (``dms.ops``).  All business logic
lives in ops; this package handles only HTTP transport concerns:
serialisation, error mapping and request context.

Quick start::

    from dms.api import create_app

    app = create_app()  # ready for uvicorn

Tags:
    dms, api, REST, FastAPI, transport-layer

Doc-Types:
    api-reference
"""

from dms.api.app import create_app

__all__ = ["create_app"]
