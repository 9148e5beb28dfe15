"""Validate command for screen documents."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from screenflow.core.errors import DocumentError
from screenflow.document.loader import DocumentLoader
from screenflow.document.validators import DocumentValidator

app = typer.Typer(help="Validate a screen document")
console = Console()


@app.callback(invoke_without_command=True)
def validate(
    document: Path = typer.Argument(..., help="Document file or directory"),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors"),
) -> None:
    """Load a document and report its structure and any problems."""
    try:
        module = DocumentLoader.load(document)
    except DocumentError as e:
        typer.echo(f"Invalid document: {e}", err=True)
        raise typer.Exit(1)

    warnings = DocumentValidator(module).validate()

    table = Table(title=f"Module '{module.id}'")
    table.add_column("Screen")
    table.add_column("Sections", justify="right")
    table.add_column("Elements", justify="right")
    table.add_column("Screen events", justify="right")
    table.add_column("Element events", justify="right")

    for screen in module.screens:
        table.add_row(
            screen.id,
            str(len(screen.sections)),
            str(sum(len(section.elements) for section in screen.sections)),
            str(len(screen.events)),
            str(len(screen.element_events())),
        )
    console.print(table)

    for message in warnings:
        console.print(f"[yellow]warning:[/yellow] {message}")

    if strict and warnings:
        raise typer.Exit(1)
    typer.echo(f"✓ Document valid: {len(module.screens)} screens")
