"""API routers.

Each module exposes ``router`` (or a factory, for health) and delegates
every endpoint to :mod:`dms.ops`.
"""
