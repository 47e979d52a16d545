# extension_recommender/server/dependencies.py
from fastapi import HTTPException, Request

from .lifecycle import ServerLifecycle


def get_lifecycle(request: Request) -> ServerLifecycle:
    """Dependency to get the server lifecycle"""
    return request.app.state.lifecycle


def get_session(request: Request):
    """
    Get the loaded session operations.
    Raises HTTP 503 if the model is not loaded.
    """
    lifecycle = get_lifecycle(request)

    if lifecycle.session is None or not lifecycle.session.is_loaded:
        raise HTTPException(status_code=503, detail="Model not loaded")

    return lifecycle.session
