"""Simulate events against a screen document from the command line."""

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from screenflow.core.errors import DocumentError, SessionError
from screenflow.document.loader import DocumentLoader
from screenflow.engine.bridge import BufferedToolBridge
from screenflow.engine.results import DispatchResult
from screenflow.engine.session import ScreenSession
from screenflow.observability.logging import setup_logging

app = typer.Typer(help="Run events against a document")
console = Console()


def _parse_json_option(raw: str | None, option: str) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        typer.echo(f"Invalid JSON for {option}: {e}", err=True)
        raise typer.Exit(1)
    if not isinstance(value, dict):
        typer.echo(f"{option} must be a JSON object", err=True)
        raise typer.Exit(1)
    return value


def _result_row(table: Table, result: DispatchResult, screen_after: str | None) -> None:
    status = "[green]ran[/green]" if result.ran else "[yellow]no-op[/yellow]"
    if not result.found:
        status = "[red]not found[/red]"
    table.add_row(
        result.event_id,
        result.screen_id or "-",
        status,
        ", ".join(result.executed) or "-",
        ", ".join(d.code for d in result.diagnostics) or "-",
        screen_after or "-",
    )


@app.callback(invoke_without_command=True)
def simulate(
    document: Path = typer.Argument(..., help="Document file or directory"),
    events: list[str] = typer.Option(
        [], "--event", "-e", help="Event id to trigger (repeatable, in order)"
    ),
    screen: str | None = typer.Option(None, "--screen", "-s", help="Screen to start on"),
    module_state: str | None = typer.Option(
        None, "--module-state", help="Initial module state as a JSON object"
    ),
    voice: bool = typer.Option(False, "--voice", help="Mark triggers as voice-originated"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """Activate a session and trigger events, printing what happened."""
    setup_logging(log_level)
    initial_state = _parse_json_option(module_state, "--module-state")

    try:
        module = DocumentLoader.load(document)
    except DocumentError as e:
        typer.echo(f"Invalid document: {e}", err=True)
        raise typer.Exit(1)

    bridge = BufferedToolBridge()
    session = ScreenSession(module, bridge=bridge, module_state=initial_state)
    try:
        session.activate(screen)
    except SessionError as e:
        typer.echo(f"Cannot start session: {e}", err=True)
        raise typer.Exit(1)

    table = Table(title=f"Simulation of '{module.id}'")
    table.add_column("Event")
    table.add_column("Screen")
    table.add_column("Status")
    table.add_column("Actions")
    table.add_column("Diagnostics")
    table.add_column("Now on")

    source = "voice" if voice else "ui"
    for event_id in events:
        result = session.trigger_event(event_id, source=source)
        _result_row(table, result, session.stack.current)
    console.print(table)

    for call in bridge.calls:
        console.print(f"[cyan]tool call:[/cyan] {call.tool} {json.dumps(call.params)}")
    for signal in session.signals:
        console.print(f"[magenta]signal:[/magenta] {signal.kind} {signal.name or ''}".rstrip())

    snapshot = session.snapshot()
    console.print_json(
        data={
            "screen": snapshot.screen_id,
            "navigationStack": snapshot.navigation_stack,
            "screenState": snapshot.screen_state,
            "moduleState": snapshot.module_state,
            "completed": snapshot.completed,
        },
        default=str,
    )
