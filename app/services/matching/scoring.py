"""
Score Aggregation and Bonus Factors

Combines the five factor scores into a weighted overall score using a
service-type-specific weight vector, then applies conditional multiplicative
bonuses for business priorities (vulnerable travelers, urgency, capacity fit).

Bonuses are evaluated independently and applied in declaration order. They
are not clamped: a post-bonus overall score can exceed 100.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Sequence, Tuple

import structlog

from app.services.matching.signals import (
    score_flight_companion_experience,
    score_language,
    score_pickup_experience,
    score_pricing,
    score_reputation,
    score_service_area,
    score_special_needs,
)
from app.services.matching.snapshots import (
    CompatibilityScore,
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
    UserReputationProfile,
)

logger = structlog.get_logger(__name__)

# Weight vectors sum to 1.0
FLIGHT_COMPANION_WEIGHTS: Dict[str, float] = {
    "reputation": 0.30,
    "experience": 0.25,
    "language": 0.20,
    "need_compatibility": 0.15,
    "pricing": 0.10,
}

PICKUP_WEIGHTS: Dict[str, float] = {
    "reputation": 0.35,
    "experience": 0.25,
    "service_area": 0.20,
    "language": 0.10,
    "pricing": 0.10,
}

FLIGHT_URGENCY_WINDOW = timedelta(hours=24)
PICKUP_URGENCY_WINDOW = timedelta(hours=6)


@dataclass(frozen=True)
class BonusFactor:
    """A named multiplicative boost applied when its condition holds."""
    name: str
    multiplier: float
    condition: Callable[[object, object, datetime], bool]


def _contains(text, keyword: str) -> bool:
    return bool(text) and keyword in text.lower()


def _is_upcoming_within(moment: datetime, now: datetime, window: timedelta) -> bool:
    remaining = moment - now
    return timedelta(0) < remaining <= window


FLIGHT_COMPANION_BONUSES: Tuple[BonusFactor, ...] = (
    BonusFactor(
        "elderly_traveler", 1.15,
        lambda request, offer, now: _contains(request.traveler_age, "elderly"),
    ),
    BonusFactor(
        "time_sensitive", 1.10,
        lambda request, offer, now: _is_upcoming_within(request.flight_date, now, FLIGHT_URGENCY_WINDOW),
    ),
    BonusFactor(
        "first_time_traveler", 1.08,
        lambda request, offer, now: _contains(request.special_needs, "first time"),
    ),
)

PICKUP_BONUSES: Tuple[BonusFactor, ...] = (
    BonusFactor(
        "large_group", 1.12,
        lambda request, offer, now: (
            request.passenger_count >= 4 and offer.max_passengers >= request.passenger_count
        ),
    ),
    BonusFactor(
        "time_sensitive", 1.10,
        lambda request, offer, now: _is_upcoming_within(request.arrival_at, now, PICKUP_URGENCY_WINDOW),
    ),
    BonusFactor(
        "large_luggage", 1.08,
        lambda request, offer, now: (
            request.has_luggage
            and offer.can_handle_luggage
            and _contains(request.special_requests, "large luggage")
        ),
    ),
)


def aggregate_scores(factor_scores: Dict[str, float], weights: Dict[str, float]) -> float:
    """Weighted sum of factor scores, in weight-vector order."""
    return sum(factor_scores[name] * weight for name, weight in weights.items())


def apply_bonus_factors(
    score: float,
    bonuses: Sequence[BonusFactor],
    request,
    offer,
    now: datetime
) -> Tuple[float, Tuple[str, ...]]:
    """
    Apply each bonus whose condition holds, in order.

    Returns:
        Tuple of (boosted score, names of applied bonuses)
    """
    applied = []
    for bonus in bonuses:
        if bonus.condition(request, offer, now):
            score *= bonus.multiplier
            applied.append(bonus.name)
            logger.debug("bonus_factor_applied",
                         bonus=bonus.name,
                         multiplier=bonus.multiplier,
                         request_id=request.id,
                         offer_id=offer.id)
    return score, tuple(applied)


def score_flight_companion_pair(
    request: FlightCompanionRequest,
    offer: FlightCompanionOffer,
    provider: UserReputationProfile,
    now: datetime
) -> CompatibilityScore:
    factors = {
        "reputation": score_reputation(provider, now),
        "experience": score_flight_companion_experience(offer, now),
        "language": score_language(request.preferred_language, offer.languages),
        "need_compatibility": score_special_needs(request.special_needs, offer.available_services),
        "pricing": score_pricing(request.offered_amount, offer.requested_amount),
    }
    weighted = aggregate_scores(factors, FLIGHT_COMPANION_WEIGHTS)
    overall, applied = apply_bonus_factors(weighted, FLIGHT_COMPANION_BONUSES, request, offer, now)

    return CompatibilityScore(
        reputation_score=factors["reputation"],
        experience_score=factors["experience"],
        language_score=factors["language"],
        pricing_score=factors["pricing"],
        need_compatibility_score=factors["need_compatibility"],
        weighted_score=weighted,
        overall_score=overall,
        applied_bonuses=applied,
    )


def score_pickup_pair(
    request: PickupRequest,
    offer: PickupOffer,
    provider: UserReputationProfile,
    now: datetime
) -> CompatibilityScore:
    factors = {
        "reputation": score_reputation(provider, now),
        "experience": score_pickup_experience(offer),
        "service_area": score_service_area(request.destination_address, offer.service_area),
        "language": score_language(request.preferred_language, offer.languages),
        "pricing": score_pricing(request.offered_amount, offer.base_rate),
    }
    weighted = aggregate_scores(factors, PICKUP_WEIGHTS)
    overall, applied = apply_bonus_factors(weighted, PICKUP_BONUSES, request, offer, now)

    return CompatibilityScore(
        reputation_score=factors["reputation"],
        experience_score=factors["experience"],
        language_score=factors["language"],
        pricing_score=factors["pricing"],
        service_area_score=factors["service_area"],
        weighted_score=weighted,
        overall_score=overall,
        applied_bonuses=applied,
    )
