# extension_recommender/cli/commands/model.py

from pathlib import Path

import typer
from rich.console import Console

from ...config import Config
from ...core.encoding import EncodingTable
from ...core.errors import ArtifactLoadError

console = Console()


def install_model(
    path: str = typer.Argument(..., help="Directory containing model.onnx and feature_encoding.json")
):
    """Copy model artifacts into the configuration directory"""
    config = Config()
    model = config.get_section('model')

    # Reject a malformed encoding before it replaces a working one
    try:
        EncodingTable.load(
            Path(path).expanduser() / model['encoding_file'],
            entity_category=model['entity_category']
        )
    except ArtifactLoadError as e:
        console.print(f"[red]✗[/red] {e}", style="bold")
        raise typer.Exit(1)

    try:
        target = config.install_model(path)
    except ValueError as e:
        console.print(f"[red]✗[/red] {e}", style="bold")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Model installed to {target}")
