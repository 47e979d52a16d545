# extension_recommender/cli/commands/server.py

import os
from typing import Optional

import typer
from rich.console import Console

from ...config import Config

console = Console()


def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default from config)"),
):
    """Serve recommendations over HTTP"""
    # Keep CLI startup fast for the other commands
    from ...server.app import run_server

    config = Config()
    server = config.get_section('server')
    console.print(
        f"Starting server on [bold]{host or server['host']}:{port or server['port']}[/bold]"
    )
    run_server(
        config,
        host=host,
        port=port,
        debug=os.environ.get('EXTENSION_RECOMMENDER_DEBUG') == '1'
    )
