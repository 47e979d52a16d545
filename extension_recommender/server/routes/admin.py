# extension_recommender/server/routes/admin.py
from fastapi import APIRouter, Depends

from ..models import StatusResponse
from ..dependencies import get_lifecycle
from ..lifecycle import ServerLifecycle
from ...config.model_config import MODEL_VERSION

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/status", response_model=StatusResponse)
async def status(lifecycle: ServerLifecycle = Depends(get_lifecycle)):
    """
    Get current server status.

    Returns the encoding table layout of the loaded model.
    """
    session = lifecycle.session

    # No loaded model: report zeros instead of erroring
    if session is None or not session.is_loaded:
        return StatusResponse(
            status="running",
            model_loaded=False,
            model_version=MODEL_VERSION,
            features_size=0,
            entity_size=0,
            categories={},
        )

    table = session.table
    return StatusResponse(
        status="running",
        model_loaded=True,
        model_version=MODEL_VERSION,
        features_size=table.features_size,
        entity_size=table.entity_size,
        categories=table.category_sizes(),
    )
