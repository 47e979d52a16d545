# extension_recommender/server/routes/recommend.py

from fastapi import APIRouter, Depends, HTTPException

from ..models import RecommendRequest, RecommendResponse, RecommendationItem
from ..dependencies import get_lifecycle, get_session
from ..lifecycle import ServerLifecycle
from ...core.errors import ArtifactLoadError, InferenceError
from ...core.session import SessionOperations

router = APIRouter(prefix="/recommend", tags=["recommend"])


# Plain def: FastAPI runs it in the threadpool, the model call blocks
@router.post("", response_model=RecommendResponse)
def recommend(
    request: RecommendRequest,
    session: SessionOperations = Depends(get_session),
    lifecycle: ServerLifecycle = Depends(get_lifecycle)
):
    """
    Recommend extensions for the caller's environment.

    - **previously_installed**: Installed extension ids (never recommended)
    - **opened_file_types**: Opened file extensions, e.g. `.py` or `py`
    - **activated_extensions**, **workspace_dependencies**,
      **workspace_file_types**, **workspace_config_types**: further signals
    - **confidence_pass**: Minimum confidence (0.0-1.0)
    """
    confidence_pass = request.confidence_pass
    if confidence_pass is None:
        confidence_pass = lifecycle.confidence_pass

    try:
        results = session.run(request, confidence_pass=confidence_pass)
    except ArtifactLoadError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except InferenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return RecommendResponse(
        results=[
            RecommendationItem(extension_id=r.extension_id, confidence=r.confidence)
            for r in results
        ],
        confidence_pass=confidence_pass,
    )
