# extension_recommender/server/lifecycle.py

import sys
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from ..config import Config
from ..config.model_config import get_session_operations, reset_session_operations
from ..core.session import SessionOperations
from ..utils.logging import get_logger

logger = get_logger('server.lifecycle')


class ServerLifecycle:
    """Manages server startup and shutdown"""

    def __init__(self):
        self.config: Optional[Config] = None
        self.session: Optional[SessionOperations] = None
        self.confidence_pass: float = Config.DEFAULT_CONFIG['inference']['confidence_pass']

    def setup(self, config: Optional[Config] = None, session: Optional[SessionOperations] = None):
        """Load the model artifacts so bad artifacts fail at startup"""
        self.config = config or Config()
        self.confidence_pass = self.config.get(
            'inference', 'confidence_pass', self.confidence_pass
        )
        self.session = session or get_session_operations(self.config)

        logger.info("Loading model artifacts...")
        self.session.load_session()

        logger.info("✓ Server ready")

    def shutdown(self):
        """Cleanup server resources"""
        logger.info("Shutting down server...")

        if self.session:
            self.session.unload()
            self.session = None
        reset_session_operations()

        logger.info("✓ Server shut down")


@asynccontextmanager
async def lifespan(app):
    """FastAPI lifespan context manager"""
    lifecycle: ServerLifecycle = app.state.lifecycle
    try:
        logger.info("Starting server lifecycle")
        lifecycle.setup(
            config=getattr(app.state, 'config', None),
            session=getattr(app.state, 'session', None)
        )
        yield

    except Exception as e:
        error_msg = f"FATAL: Server startup failed during lifespan: {e}"
        logger.error(error_msg, exc_info=True)

        sys.stderr.write(f"\n{'='*60}\n")
        sys.stderr.write(f"{error_msg}\n")
        sys.stderr.write(f"{'='*60}\n")
        sys.stderr.write(traceback.format_exc())
        sys.stderr.flush()

        raise

    finally:
        # Shutdown - always runs even if startup failed
        try:
            lifecycle.shutdown()
        except Exception as e:
            logger.error(f"Error during shutdown: {e}", exc_info=True)
