"""
Pickup Matching Router

Ranked driver offers for a pickup request, and match confirmation.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Response
import structlog

from app.config import settings
from app.models.match_schemas import ConfirmMatchRequest, MatchResponse, to_match_response
from app.routers.dependencies import get_confirmation_service, get_matching_engine
from app.services.match_confirmation import MatchConfirmationService
from app.services.matching import MatchConflictError, OfferNotFoundError, RequestNotFoundError
from app.services.matching_engine import MatchingEngine

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/pickup", tags=["pickup"])


@router.get("/requests/{request_id}/matches", response_model=List[MatchResponse])
async def list_pickup_matches(
    request_id: int,
    max_results: int = Query(
        settings.match_default_max_results,
        ge=0,
        le=settings.match_max_results_limit,
        description="Maximum offers to return (0 returns an empty list)"
    ),
    engine: MatchingEngine = Depends(get_matching_engine)
):
    """
    Rank available driver offers for a pickup request.

    Raises:
        404: Request not found
        503: Database not configured
    """
    try:
        results = engine.find_pickup_matches(request_id, max_results)
    except RequestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return [to_match_response(result, rank) for rank, result in enumerate(results, 1)]


@router.put("/match", status_code=204)
async def confirm_pickup_match(
    body: ConfirmMatchRequest,
    service: MatchConfirmationService = Depends(get_confirmation_service)
):
    """
    Confirm a driver for a pickup request.

    Raises:
        404: Request or offer not found
        409: Request already matched, offer unavailable/ineligible, or concurrent confirmation
    """
    try:
        service.confirm_pickup_match(body.request_id, body.offer_id)
    except (RequestNotFoundError, OfferNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MatchConflictError as e:
        raise HTTPException(status_code=409, detail={"reason": e.reason, "message": str(e)})

    logger.info("pickup_match_confirmed",
                request_id=body.request_id,
                offer_id=body.offer_id)
    return Response(status_code=204)
