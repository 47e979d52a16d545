# extension_recommender/cli/main.py

import os
from pathlib import Path
from typing import Optional

import typer

from .commands import recommend, info, model, server
from ..config.settings import Config
from ..utils.logging import setup_logging

app = typer.Typer(
    name="extension-recommender",
    help="Diagnose extension recommendations from environment signals",
    add_completion=False
)

app.command(name="recommend")(recommend.recommend)
app.command(name="info")(info.show_info)
app.command(name="install-model")(model.install_model)
app.command(name="serve")(server.serve)


@app.callback()
def callback(
    verbose: bool = typer.Option(
        False,
        "-v",
        "--verbose",
        help="Enable verbose output with debug logging"
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory (default: ~/.extension-recommender)"
    )
):
    """
    Extension Recommender - diagnostic CLI for the recommendation model
    """
    # Commands build their own Config; the environment carries these to them
    if verbose:
        os.environ['EXTENSION_RECOMMENDER_DEBUG'] = '1'
    if config_dir is not None:
        os.environ[Config.HOME_ENV_VAR] = str(config_dir)

    config = Config()
    setup_logging(config.config_dir, debug=verbose)


def main():
    app()


if __name__ == "__main__":
    main()
