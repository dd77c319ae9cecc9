"""
CLI: ``dms datastreams`` — create, inspect, list and delete datastreams.
"""

from __future__ import annotations

import json

import typer

from dms.cli.utils import console, err_console, make_context, output_paged, output_result

app = typer.Typer(no_args_is_help=True)


def _parse_metadata(pairs: list[str]) -> dict[str, str] | None:
    if not pairs:
        return None
    metadata: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            err_console.print(f"[bold red]Invalid metadata[/bold red] {pair!r}: expected KEY=VALUE")
            raise typer.Exit(code=2)
        metadata[key] = value
    return metadata


@app.command("create")
def create(
    name: str = typer.Argument(..., help="Unique datastream name"),
    connector_type: str | None = typer.Option(None, "--connector-type", "-c", help="Connector type, e.g. file"),
    source: str | None = typer.Option(None, "--source", "-s", help="Source connection string"),
    source_partitions: int | None = typer.Option(None, "--source-partitions", min=1),
    destination: str | None = typer.Option(
        None, "--destination", help="Destination connection string (makes the destination user managed)"
    ),
    metadata: list[str] = typer.Option([], "--metadata", "-m", help="KEY=VALUE, repeatable"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Create a datastream."""
    from dms.core.models import Datastream, DatastreamDestination, DatastreamSource
    from dms.ops.datastreams import create_datastream as _create

    datastream = Datastream(
        name=name,
        connector_type=connector_type,
        source=DatastreamSource(source, source_partitions) if source else None,
        destination=DatastreamDestination(destination) if destination else None,
        metadata=_parse_metadata(metadata),
    )
    ctx, store = make_context(database)
    try:
        result = _create(ctx, datastream)
    finally:
        store.close()
    if not result.success:
        output_result(result)
    if json_out:
        console.print_json(json.dumps({"name": result.data}))
        return
    console.print(f"[green]✓[/green] Created datastream {result.data}")


@app.command("get")
def get(
    name: str = typer.Argument(..., help="Datastream name"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show one datastream."""
    from dms.ops.datastreams import get_datastream as _get

    ctx, store = make_context(database)
    try:
        result = _get(ctx, name)
    finally:
        store.close()
    if result.success and result.data is None:
        err_console.print(f"[bold red]Error[/bold red] (NOT_FOUND): Datastream '{name}' not found")
        raise typer.Exit(code=1)
    output_result(result, as_json=json_out, title=f"Datastream {name}")


@app.command("list")
def list_(
    start: int = typer.Option(0, "--start", min=0, help="Index of the first datastream"),
    count: int = typer.Option(50, "--count", "-n", min=1, help="Maximum datastreams to show"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List datastreams."""
    from dms.ops.datastreams import list_datastreams as _list
    from dms.ops.requests import ListDatastreamsRequest

    ctx, store = make_context(database)
    try:
        result = _list(ctx, ListDatastreamsRequest(offset=start, limit=count))
    finally:
        store.close()
    output_paged(result, as_json=json_out, title="Datastreams")


@app.command("delete")
def delete(
    name: str = typer.Argument(..., help="Datastream name"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Delete a datastream."""
    from dms.ops.datastreams import delete_datastream as _delete

    if not force and not typer.confirm(f"Delete datastream {name}?"):
        console.print("[dim]Aborted.[/dim]")
        raise typer.Exit(code=0)

    ctx, store = make_context(database)
    try:
        result = _delete(ctx, name)
    finally:
        store.close()
    if not result.success:
        output_result(result)
    console.print(f"[green]✓[/green] Deleted datastream {name}")
