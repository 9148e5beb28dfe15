"""Rewrite placeholder deeplinks in a document."""

import json
from pathlib import Path

import typer
import yaml

from screenflow.core.errors import DocumentError
from screenflow.document.loader import DocumentLoader
from screenflow.navigation.deeplinks import rewrite_placeholder_deeplinks

app = typer.Typer(help="Rewrite next/prev placeholder links")


@app.callback(invoke_without_command=True)
def rewrite_links(
    document: Path = typer.Argument(..., help="Document file or directory"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (.yaml or .json); stdout when omitted"
    ),
) -> None:
    """Replace next-screen/prev-screen deeplinks with neighbouring screen ids."""
    try:
        module = DocumentLoader.load(document)
    except DocumentError as e:
        typer.echo(f"Invalid document: {e}", err=True)
        raise typer.Exit(1)

    module.screens = rewrite_placeholder_deeplinks(module.screens)
    data = module.model_dump(by_alias=True, exclude_unset=True, mode="json")

    if output is not None and output.suffix == ".json":
        text = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    if output is None:
        typer.echo(text)
        return

    output.write_text(text, encoding="utf-8")
    typer.echo(f"✓ Wrote {output}")
