"""API middleware package.

Cross-cutting concerns (request correlation, error mapping) belong in
middleware so routers stay focused on delegating to ``dms.ops``.
"""
