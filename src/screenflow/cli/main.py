"""Main CLI entry point for screenflow"""

import typer

from screenflow.__version__ import __version__
from screenflow.cli.commands import links as links_module
from screenflow.cli.commands import server as server_module
from screenflow.cli.commands import simulate as simulate_module
from screenflow.cli.commands import validate as validate_module

app = typer.Typer(
    name="screenflow",
    help="screenflow - Screen interaction engine for voice-plus-screen flows",
    add_completion=False,
)

# Register subcommands
app.add_typer(validate_module.app, name="validate", help="Validate a screen document")
app.add_typer(links_module.app, name="rewrite-links", help="Rewrite next/prev placeholder links")
app.add_typer(simulate_module.app, name="simulate", help="Run events against a document")
app.add_typer(server_module.app, name="server", help="Start the screenflow API server")


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"screenflow version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """screenflow - Screen interaction engine for voice-plus-screen flows"""
    pass


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
