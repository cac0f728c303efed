"""
Explainability

Two views of why an offer was recommended:

- A human-readable recommendation reason shown to travelers, built from
  ordered clauses that are added only when their threshold is met.
- A JSON-ready scoring breakdown for debugging and weight tuning
  (factor scores, weighted contributions, bonuses applied).
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from app.services.matching.snapshots import (
    CompatibilityScore,
    FlightCompanionOffer,
    PickupOffer,
    PickupRequest,
    UserReputationProfile,
)

FALLBACK_REASON = "Good overall compatibility"

HIGH_REPUTATION = 80
PERFECT_LANGUAGE = 90
STRONG_FIT = 80
GREAT_VALUE = 90


def _stars(rating: Decimal) -> Decimal:
    """One decimal place, halves rounded up (4.85 -> 4.9)."""
    return Decimal(str(rating)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _join_reasons(reasons: List[str]) -> str:
    return ", ".join(reasons) if reasons else FALLBACK_REASON


def flight_companion_reason(
    offer: FlightCompanionOffer,
    provider: UserReputationProfile,
    score: CompatibilityScore
) -> str:
    reasons = []

    if score.reputation_score >= HIGH_REPUTATION:
        reasons.append(f"Highly rated helper ({_stars(provider.rating)}/5.0 stars)")

    if offer.helped_count >= 10:
        reasons.append(f"Experienced companion ({offer.helped_count} trips helped)")

    if score.language_score >= PERFECT_LANGUAGE:
        reasons.append("Perfect language match")

    if score.need_compatibility_score >= STRONG_FIT:
        reasons.append("Excellent match for your specific needs")

    if score.pricing_score >= GREAT_VALUE:
        reasons.append("Great value within your budget")

    if provider.is_verified:
        reasons.append("Verified community member")

    return _join_reasons(reasons)


def pickup_reason(
    request: PickupRequest,
    offer: PickupOffer,
    provider: UserReputationProfile,
    score: CompatibilityScore
) -> str:
    reasons = []

    if score.reputation_score >= HIGH_REPUTATION:
        reasons.append(f"Highly rated driver ({_stars(provider.rating)}/5.0 stars)")

    if offer.total_pickups >= 20:
        reasons.append(f"Experienced driver ({offer.total_pickups} successful pickups)")

    if score.service_area_score >= STRONG_FIT:
        reasons.append("Perfect location match")

    if offer.max_passengers > request.passenger_count:
        reasons.append("Spacious vehicle available")

    if score.pricing_score >= GREAT_VALUE:
        reasons.append("Competitive pricing")

    if provider.is_verified:
        reasons.append("Verified driver")

    return _join_reasons(reasons)


class ExplainabilityBuilder:
    """
    Build JSON-ready scoring breakdowns for match results.

    Mirrors the engine's arithmetic so a reviewer can recompute the overall
    score from the payload alone.
    """

    VERSION = "v1.0"

    @staticmethod
    def build(
        service_type: str,
        score: CompatibilityScore,
        weights: Dict[str, float],
        rank: Optional[int] = None,
    ) -> dict:
        """
        Build the scoring breakdown.

        Args:
            service_type: "flight_companion" or "pickup"
            score: Computed compatibility score
            weights: Weight vector used for aggregation
            rank: 1-based position in the returned list

        Returns:
            Dict with factor scores, weighted contributions and bonuses

        Example:
            >>> payload = ExplainabilityBuilder.build("pickup", score, PICKUP_WEIGHTS, rank=1)
            >>> payload["factors"]["reputation"]["weight"]
            0.35
        """
        factor_values = {
            "reputation": score.reputation_score,
            "experience": score.experience_score,
            "language": score.language_score,
            "need_compatibility": score.need_compatibility_score,
            "service_area": score.service_area_score,
            "pricing": score.pricing_score,
        }

        return {
            "version": ExplainabilityBuilder.VERSION,
            "service_type": service_type,
            "rank": rank,
            "factors": {
                name: {
                    "score": round(factor_values[name], 4),
                    "weight": weight,
                    "weighted_score": round(factor_values[name] * weight, 4),
                }
                for name, weight in weights.items()
            },
            "weighted_score": round(score.weighted_score, 4),
            "bonuses_applied": list(score.applied_bonuses),
            "overall_score": round(score.overall_score, 4),
        }
