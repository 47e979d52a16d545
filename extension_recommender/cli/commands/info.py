# extension_recommender/cli/commands/info.py

from rich.console import Console
from rich.table import Table

from ...config import Config
from ...config.model_config import MODEL_VERSION
from ...core.encoding import EncodingTable
from ...core.errors import ArtifactLoadError

console = Console()


def _presence(path) -> str:
    return "[green]✓[/green]" if path.is_file() else "[red]✗ missing[/red]"


def show_info():
    """Show configuration and the layout of the installed encoding table"""
    config = Config()
    model = config.get_section('model')

    console.print("\n[bold]Extension Recommender - Model Info[/bold]")
    console.print(f"[dim]{'─' * 60}[/dim]")

    console.print("\n[bold]Configuration:[/bold]")
    console.print(f"  Config directory: {config.config_dir}")
    console.print(f"  Model directory: {config.model_dir}")
    console.print(f"  Model version: {MODEL_VERSION}")
    console.print(f"  Confidence pass: {config.get('inference', 'confidence_pass')}")

    console.print("\n[bold]Artifacts:[/bold]")
    console.print(f"  {model['model_file']}: {_presence(config.model_path)}")
    console.print(f"  {model['encoding_file']}: {_presence(config.encoding_path)}")

    if not config.encoding_path.is_file():
        console.print()
        return

    try:
        encoding = EncodingTable.load(config.encoding_path, entity_category=model['entity_category'])
    except ArtifactLoadError as e:
        console.print(f"\n[red]✗[/red] {e}")
        console.print()
        return

    console.print("\n[bold]Encoding:[/bold]")
    console.print(f"  Features: {encoding.features_size}")
    console.print(f"  Candidate extensions: {encoding.entity_size}")

    table = Table(show_header=True, header_style="bold magenta", box=None)
    table.add_column("Category")
    table.add_column("Tokens", justify="right")
    table.add_column("Role")

    for name, size in encoding.category_sizes().items():
        role = "[cyan]candidates[/cyan]" if name == encoding.entity_category else "signal"
        table.add_row(name, str(size), role)

    console.print()
    console.print(table)
    console.print()
