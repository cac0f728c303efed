"""
Matching Engine Service Package

Provides candidate filtering, factor scorers, score aggregation with bonus
factors, ranking, and explainability for matching travel assistance requests
to offers.
"""

from app.services.matching.errors import (
    MatchingError,
    RequestNotFoundError,
    OfferNotFoundError,
    MatchConflictError,
)
from app.services.matching.candidate_filter import (
    is_eligible_flight_companion_offer,
    is_eligible_pickup_offer,
    filter_flight_companion_candidates,
    filter_pickup_candidates,
)
from app.services.matching.signals import (
    score_reputation,
    score_flight_companion_experience,
    score_pickup_experience,
    score_language,
    score_special_needs,
    score_service_area,
    score_pricing,
)
from app.services.matching.scoring import (
    FLIGHT_COMPANION_WEIGHTS,
    PICKUP_WEIGHTS,
    FLIGHT_COMPANION_BONUSES,
    PICKUP_BONUSES,
    BonusFactor,
    aggregate_scores,
    apply_bonus_factors,
    score_flight_companion_pair,
    score_pickup_pair,
)
from app.services.matching.ranking import rank_match_results
from app.services.matching.explainability import (
    ExplainabilityBuilder,
    flight_companion_reason,
    pickup_reason,
)

__all__ = [
    # Errors
    "MatchingError",
    "RequestNotFoundError",
    "OfferNotFoundError",
    "MatchConflictError",
    # Candidate filter
    "is_eligible_flight_companion_offer",
    "is_eligible_pickup_offer",
    "filter_flight_companion_candidates",
    "filter_pickup_candidates",
    # Factor scorers
    "score_reputation",
    "score_flight_companion_experience",
    "score_pickup_experience",
    "score_language",
    "score_special_needs",
    "score_service_area",
    "score_pricing",
    # Aggregation and bonuses
    "FLIGHT_COMPANION_WEIGHTS",
    "PICKUP_WEIGHTS",
    "FLIGHT_COMPANION_BONUSES",
    "PICKUP_BONUSES",
    "BonusFactor",
    "aggregate_scores",
    "apply_bonus_factors",
    "score_flight_companion_pair",
    "score_pickup_pair",
    # Ranking
    "rank_match_results",
    # Explainability
    "ExplainabilityBuilder",
    "flight_companion_reason",
    "pickup_reason",
]
