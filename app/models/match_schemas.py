"""
Pydantic schemas for match listing and match confirmation
"""

from pydantic import BaseModel, Field
from typing import List

from app.services.matching.snapshots import MatchResult


class CompatibilityScoreResponse(BaseModel):
    """
    Factor breakdown for one request/offer pair (each factor 0-100)
    """
    overall_score: float = Field(..., description="Post-bonus score; may exceed 100")
    weighted_score: float = Field(..., description="Pre-bonus weighted sum")
    reputation_score: float
    experience_score: float
    language_score: float
    pricing_score: float
    need_compatibility_score: float = Field(0.0, description="Flight companion only")
    service_area_score: float = Field(0.0, description="Pickup only")
    applied_bonuses: List[str] = Field(default_factory=list)


class MatchResponse(BaseModel):
    """
    One ranked offer for a request
    """
    rank: int
    request_id: int
    offer_id: int
    provider_user_id: int
    compatibility_score: CompatibilityScoreResponse
    recommendation_reason: str


class ConfirmMatchRequest(BaseModel):
    """
    Request body for confirming a match
    """
    request_id: int = Field(..., gt=0, description="Request ID must be greater than 0")
    offer_id: int = Field(..., gt=0, description="Offer ID must be greater than 0")


def to_match_response(result: MatchResult, rank: int) -> MatchResponse:
    score = result.score
    return MatchResponse(
        rank=rank,
        request_id=result.request.id,
        offer_id=result.offer.id,
        provider_user_id=result.offer.user_id,
        compatibility_score=CompatibilityScoreResponse(
            overall_score=round(score.overall_score, 2),
            weighted_score=round(score.weighted_score, 2),
            reputation_score=round(score.reputation_score, 2),
            experience_score=round(score.experience_score, 2),
            language_score=round(score.language_score, 2),
            pricing_score=round(score.pricing_score, 2),
            need_compatibility_score=round(score.need_compatibility_score, 2),
            service_area_score=round(score.service_area_score, 2),
            applied_bonuses=list(score.applied_bonuses),
        ),
        recommendation_reason=result.recommendation_reason,
    )
