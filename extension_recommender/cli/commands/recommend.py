# extension_recommender/cli/commands/recommend.py

import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ...config import Config
from ...config.model_config import get_session_operations
from ...core.errors import RecommenderError
from ...core.signals import SessionInputs

console = Console()
err_console = Console(stderr=True)


def recommend(
    previously_installed: Optional[List[str]] = typer.Option(None, "--installed", "-i", help="Installed extension id (repeatable)"),
    opened_file_types: Optional[List[str]] = typer.Option(None, "--opened", "-o", help="Opened file type, e.g. .py (repeatable)"),
    activated_extensions: Optional[List[str]] = typer.Option(None, "--activated", "-a", help="Activated extension id (repeatable)"),
    workspace_dependencies: Optional[List[str]] = typer.Option(None, "--dependency", "-d", help="Workspace dependency (repeatable)"),
    workspace_file_types: Optional[List[str]] = typer.Option(None, "--file-type", "-f", help="Workspace file type (repeatable)"),
    workspace_config_types: Optional[List[str]] = typer.Option(None, "--config-type", "-c", help="Workspace config type, e.g. dockerfile (repeatable)"),
    confidence: Optional[float] = typer.Option(None, "--confidence", "-t", min=0.0, max=1.0, help="Minimum confidence (default from config)"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
):
    """Run the model for the given signals and show the recommendations"""
    err_console.print(
        "[yellow]Note: this CLI is only for diagnosing the model results. "
        "It should not be depended on in any production system.[/yellow]"
    )

    config = Config()
    if confidence is None:
        confidence = config.get('inference', 'confidence_pass')

    inputs = SessionInputs(
        previously_installed=previously_installed,
        opened_file_types=opened_file_types,
        activated_extensions=activated_extensions,
        workspace_dependencies=workspace_dependencies,
        workspace_file_types=workspace_file_types,
        workspace_config_types=workspace_config_types,
    )

    try:
        session = get_session_operations(config)
        results = session.run(inputs, confidence_pass=confidence)
    except RecommenderError as e:
        err_console.print(f"[red]✗[/red] {e}", style="bold")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
        return

    if not results:
        console.print(f"[yellow]No extension above confidence {confidence}[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta", box=None)
    table.add_column("#", justify="right")
    table.add_column("Extension")
    table.add_column("Confidence", justify="right")

    for i, result in enumerate(results, 1):
        table.add_row(str(i), result.extension_id, f"{result.confidence:.3f}")

    console.print(table)
