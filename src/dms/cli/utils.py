"""
CLI utility helpers — output formatting and context construction.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from dms.core.coordinator import create_coordinator
from dms.core.settings import DmsSettings
from dms.core.stores import SqliteDatastreamStore
from dms.ops.context import OperationContext
from dms.ops.result import OperationResult, PagedResult

console = Console()
err_console = Console(stderr=True)


# ── Context helper ───────────────────────────────────────────────────────


def make_context(database: str | None = None) -> tuple[OperationContext, SqliteDatastreamStore]:
    """Create an ``OperationContext`` + store pair for CLI commands.

    The CLI always works against the SQLite store, at *database* or
    ``DMS_DATABASE_PATH``, since a process-local store would not outlive
    the command.
    """
    settings = DmsSettings()
    store = SqliteDatastreamStore(database or settings.database_path)
    ctx = OperationContext(
        store=store,
        coordinator=create_coordinator(settings),
        caller="cli",
    )
    return ctx, store


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert a model / dataclass / dict to a plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def _fail(result: OperationResult) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = err.code if err else "ERROR"
    err_console.print(f"[bold red]Error[/bold red] ({code}): {msg}")
    raise typer.Exit(code=1)


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult`` to the terminal."""
    if not result.success:
        _fail(result)

    data = result.data

    if as_json:
        console.print_json(json.dumps(_to_dict(data), default=str))
        return

    _print_dict(_to_dict(data), title=title)


def output_paged(
    result: PagedResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render a ``PagedResult`` to the terminal with pagination info."""
    if not result.success:
        _fail(result)

    items = result.data or []

    if as_json:
        payload = {
            "items": [_to_dict(d) for d in items],
            "total": result.total,
            "limit": result.limit,
            "offset": result.offset,
            "has_more": result.has_more,
        }
        console.print_json(json.dumps(payload, default=str))
        return

    if not items:
        console.print("[dim]No datastreams.[/dim]")
        return

    _print_table(items, title=title)
    console.print(
        f"\n[dim]Showing {len(items)} of {result.total}"
        f" (offset {result.offset})[/dim]"
    )


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list, *, title: str = "") -> None:
    """Render datastreams as a Rich table, one row each."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in ("name", "connectorType", "source", "destination"):
        table.add_column(col, overflow="fold")
    for item in items:
        d = _to_dict(item)
        table.add_row(
            str(d.get("name", "")),
            str(d.get("connectorType", "")),
            str((d.get("source") or {}).get("connectionString", "")),
            str((d.get("destination") or {}).get("connectionString", "")),
        )
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
