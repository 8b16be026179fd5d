"""Recommendation router — planner-backed destination recommendations."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from app.config import settings
from app.exceptions import ValidationError
from app.schemas.recommendation import EvidenceRequest, RecommendationRequest
from app.services.pricing_aggregator import pricing_aggregator
from app.services.recommendation_service import recommendation_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def get_recommendations(req: RecommendationRequest):
    """Run both planner passes with live pricing in between."""
    try:
        return await asyncio.wait_for(
            recommendation_service.recommend(req.answers, req.question_context),
            timeout=settings.recommendation_timeout_seconds,
        )
    except ValidationError as e:
        logger.warning(f"Recommendation rejected: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except asyncio.TimeoutError:
        logger.error("Recommendation run timed out")
        raise HTTPException(status_code=504, detail="Recommendation timed out. Please try again.")
    except Exception as e:
        logger.error(f"Recommendation failed: {e}")
        raise HTTPException(status_code=500, detail=f"Recommendation failed: {str(e)}")


@router.post("/evidence")
async def get_pricing_evidence(req: EvidenceRequest):
    """Price a list of candidate destinations without the planner passes."""
    try:
        evidence = await pricing_aggregator.aggregate(req.candidates)
        return [e.model_dump(mode="json") for e in evidence]
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
