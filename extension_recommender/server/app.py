# extension_recommender/server/app.py
import argparse
from typing import Optional

from fastapi import FastAPI
import uvicorn

from .. import __version__
from ..config import Config
from ..core.session import SessionOperations
from ..utils.logging import setup_logging
from .lifecycle import ServerLifecycle, lifespan
from .routes import recommend, admin


def create_app(
    config: Optional[Config] = None,
    session: Optional[SessionOperations] = None
) -> FastAPI:
    """
    Create the API application

    Args:
        config: Configuration to load the model from
        session: Pre-built session operations, used instead of the config's model
    """
    app = FastAPI(
        title="Extension Recommender",
        description="Extension recommendations from environment signals",
        version=__version__,
        lifespan=lifespan
    )
    app.state.lifecycle = ServerLifecycle()
    app.state.config = config
    app.state.session = session

    app.include_router(recommend.router)
    app.include_router(admin.router)

    @app.get("/status")
    async def root_status():
        """Root status endpoint (redirects to admin status)"""
        from fastapi.responses import RedirectResponse
        return RedirectResponse(url="/admin/status")

    return app


def run_server(config: Config, host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the API with uvicorn, host and port defaulting to the config"""
    server = config.get_section('server')
    uvicorn.run(
        create_app(config),
        host=host or server['host'],
        port=port or server['port'],
        log_level='debug' if debug else 'info'
    )


def main():
    """Main entry point for running the server"""
    parser = argparse.ArgumentParser()
    parser.add_argument('--host', type=str, default=None)
    parser.add_argument('--port', type=int, default=None)
    parser.add_argument('--config-dir', type=str, default=None)
    args = parser.parse_args()

    config = Config(args.config_dir)
    setup_logging(config.config_dir)
    run_server(config, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
