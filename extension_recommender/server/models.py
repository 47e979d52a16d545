# extension_recommender/server/models.py

from pydantic import BaseModel, Field
from typing import Optional, List, Dict

from ..core.signals import SessionInputs


# Request Models
class RecommendRequest(SessionInputs):
    """Environment signals plus the confidence threshold for this call"""
    confidence_pass: Optional[float] = Field(
        None, ge=0.0, le=1.0, alias="confidencePass",
        description="Minimum confidence (defaults to the configured inference.confidence_pass)"
    )


# Response Models
class RecommendationItem(BaseModel):
    extension_id: str
    confidence: float


class RecommendResponse(BaseModel):
    results: List[RecommendationItem]
    confidence_pass: float


class StatusResponse(BaseModel):
    status: str
    model_loaded: bool
    model_version: str
    features_size: int
    entity_size: int
    categories: Dict[str, int]
