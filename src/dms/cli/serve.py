"""
CLI: ``dms serve`` — start the API server.
"""

from __future__ import annotations

import typer

from dms.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: DMS_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: DMS_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the datastream management REST API server."""
    import uvicorn

    from dms.api.settings import DmsAPISettings

    settings = DmsAPISettings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting dms API[/bold green] on {host}:{port}")
    uvicorn.run(
        "dms.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )
