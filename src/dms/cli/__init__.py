"""Command-line interface for the datastream management service.

Entry point::

    dms --help
"""

from dms.cli.app import app

__all__ = ["app"]
