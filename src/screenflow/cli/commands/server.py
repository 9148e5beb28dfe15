"""Server command to start the API."""

import os
from pathlib import Path

import typer
import uvicorn

from screenflow.core.errors import DocumentError
from screenflow.document.loader import DocumentLoader

app = typer.Typer(help="Start the screenflow API server")


@app.callback(invoke_without_command=True)
def start_server(
    document: Path | None = typer.Option(
        None, "--document", "-d", help="Default document for new sessions", exists=True
    ),
    host: str = typer.Option("127.0.0.1", "--host", "-h"),
    port: int = typer.Option(8000, "--port", "-p"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Start the screenflow API server."""

    # 1. Validate the document up front
    if document is not None:
        try:
            DocumentLoader.load(document)
        except DocumentError as e:
            typer.echo(f"Invalid document: {e}", err=True)
            raise typer.Exit(1)

        # 2. The server process picks the document up from the environment
        os.environ["SCREENFLOW_DOCUMENT_PATH"] = str(document.absolute())

    typer.echo(f"Starting screenflow server on http://{host}:{port}")
    if document is not None:
        typer.echo(f"   Document: {document}")

    try:
        uvicorn.run(
            "screenflow.server.api:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info",
        )
    except Exception as e:
        typer.echo(f"Server failed: {e}", err=True)
        raise typer.Exit(1)
