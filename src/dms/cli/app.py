"""
Root Typer application for the ``dms`` CLI.

Sub-commands live in their own modules; ops and FastAPI imports are
deferred to the commands that need them.
"""

from __future__ import annotations

import typer
from typer import Typer

from dms.core.logging import configure_logging

app = Typer(
    name="dms",
    help="dms — datastream management service.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from dms import __version__

        typer.echo(f"dms {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level for service logs."),
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """dms CLI — manage datastreams and run the API server."""
    configure_logging(level=log_level, json_format=False)


from dms.cli.datastreams import app as datastreams_app  # noqa: E402
from dms.cli.serve import app as serve_app  # noqa: E402

app.add_typer(datastreams_app, name="datastreams", help="Datastream management.")
app.add_typer(serve_app, name="serve", help="API server.")
