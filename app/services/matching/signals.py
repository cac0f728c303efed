"""
Factor Scorer Functions

Five independent scorers, each mapping a request/offer pair (or its
sub-fields) to a 0-100 score:

- Reputation (provider rating, rating count, verification, account age)
- Experience (flight companion and pickup variants)
- Language compatibility
- Need compatibility (flight companion) / service area compatibility (pickup)
- Pricing compatibility

Design decisions:
- Formulas are additive with a cap at 100, not normalized; the literal
  arithmetic is the contract.
- Free-text matching is case-insensitive substring checks over a fixed
  keyword list. No fuzzy matching or NLP.
- Missing inputs degrade to documented neutral values instead of failing.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

import structlog

from app.services.matching.snapshots import (
    FlightCompanionOffer,
    PickupOffer,
    UserReputationProfile,
)

logger = structlog.get_logger(__name__)

MAX_SCORE = 100.0

NEUTRAL_LANGUAGE_SCORE = 50.0
NEUTRAL_SERVICE_AREA_SCORE = 50.0

CHINESE_LANGUAGE_FAMILY = ("chinese", "mandarin", "cantonese")

# (keyword, points) pairs; a keyword scores when it appears in both texts
SPECIAL_NEEDS_KEYWORDS = (
    ("translation", 25),
    ("navigation", 20),
    ("wheelchair", 30),
    ("elderly", 25),
    ("medical", 30),
    ("language", 20),
)

# (destination keyword, service area keyword, points)
SERVICE_AREA_KEYWORDS = (
    ("city", "city", 30),
    ("north shore", "north shore", 40),
    ("east auckland", "east", 35),
    ("west auckland", "west", 35),
    ("south auckland", "south", 35),
    ("cbd", "cbd", 35),
)

# "all aucklabd" is a misspelling present in live offer data
WHOLE_REGION_AREAS = ("all auckland", "all aucklabd")
WHOLE_REGION_SCORE = 90.0

# (minimum ratio, score), checked in order
PRICING_RATIO_TIERS = (
    (Decimal("1.2"), 100.0),  # Generous budget
    (Decimal("1.0"), 90.0),  # Exact match
    (Decimal("0.8"), 70.0),
    (Decimal("0.6"), 50.0),
    (Decimal("0.4"), 30.0),
)
PRICING_FLOOR_SCORE = 10.0


def _days_between(later: datetime, earlier: Optional[datetime]) -> Optional[float]:
    if earlier is None:
        return None
    return (later - earlier).total_seconds() / 86400


def score_reputation(profile: Optional[UserReputationProfile], now: datetime) -> float:
    """
    Score provider reputation.

    Rated users get (rating/5)*80 plus a rating-count tier bonus; unrated
    users start from 40. Verification adds 15 and account age adds up to 5.

    Args:
        profile: Provider reputation snapshot (None scores as a new, unverified user)
        now: Reference time for account age

    Returns:
        Score capped at 100
    """
    if profile is None:
        return 40.0

    if profile.total_ratings > 0:
        score = (float(profile.rating) / 5.0) * 80

        # More ratings, more reliable
        if profile.total_ratings >= 10:
            score += 5
        elif profile.total_ratings >= 5:
            score += 3
        elif profile.total_ratings >= 3:
            score += 1
    else:
        score = 40.0

    if profile.is_verified:
        score += 15

    account_age_days = _days_between(now, profile.created_at)
    if account_age_days is not None:
        if account_age_days >= 365:
            score += 5
        elif account_age_days >= 180:
            score += 3
        elif account_age_days >= 30:
            score += 1

    return min(score, MAX_SCORE)


def _count_listed_services(services: Optional[str]) -> int:
    if not services:
        return 0
    listed = {item.strip().lower() for item in services.split(",")}
    listed.discard("")
    return len(listed)


def score_flight_companion_experience(offer: FlightCompanionOffer, now: datetime) -> float:
    """Help-count tier, plus service variety (up to 20) and recency (up to 10)."""
    helped = offer.helped_count
    if helped >= 20:
        score = 70.0
    elif helped >= 10:
        score = 50.0
    elif helped >= 5:
        score = 30.0
    elif helped >= 1:
        score = 15.0
    else:
        score = 5.0  # New helpers get some credit

    score += min(_count_listed_services(offer.available_services) * 5, 20)

    days_since_created = _days_between(now, offer.created_at)
    if days_since_created is not None:
        if days_since_created <= 7:
            score += 10
        elif days_since_created <= 30:
            score += 5

    return min(score, MAX_SCORE)


def score_pickup_experience(offer: PickupOffer) -> float:
    """Pickup-count tier, rating term (up to 25), capacity (up to 10), extras (5)."""
    pickups = offer.total_pickups
    if pickups >= 50:
        score = 60.0
    elif pickups >= 20:
        score = 45.0
    elif pickups >= 10:
        score = 30.0
    elif pickups >= 5:
        score = 20.0
    elif pickups >= 1:
        score = 10.0
    else:
        score = 5.0

    if offer.average_rating > 0:
        score += (float(offer.average_rating) / 5.0) * 25

    if offer.max_passengers >= 6:
        score += 10
    elif offer.max_passengers >= 4:
        score += 5

    if offer.additional_services:
        score += 5

    return min(score, MAX_SCORE)


def _in_chinese_family(language: str) -> bool:
    return any(member in language for member in CHINESE_LANGUAGE_FAMILY)


def score_language(user_language: Optional[str], offer_languages: Optional[str]) -> float:
    """
    Compare the requester's preferred language with the offer's language list.

    Exact match -> 100, Chinese-family cross match -> 90, offer speaks
    English -> 70, otherwise 30. Missing data on either side -> 50.

    Example:
        >>> score_language("Mandarin", "Cantonese, English")
        90.0
    """
    if not user_language or not offer_languages:
        logger.debug("language_score_neutral",
                     user_language=user_language,
                     offer_languages=offer_languages)
        return NEUTRAL_LANGUAGE_SCORE

    wanted = user_language.strip().lower()
    available = [language.strip() for language in offer_languages.lower().split(",")]

    if wanted in available:
        return 100.0

    if _in_chinese_family(wanted) and any(_in_chinese_family(language) for language in available):
        return 90.0

    if "english" in available:
        return 70.0

    return 30.0


def score_special_needs(special_needs: Optional[str], available_services: Optional[str]) -> float:
    """Keyword overlap between stated needs and offered services, base 50."""
    if not special_needs:
        return MAX_SCORE  # Nothing to accommodate

    if not available_services:
        return 40.0

    needs = special_needs.lower()
    services = available_services.lower()

    score = 50.0
    for keyword, points in SPECIAL_NEEDS_KEYWORDS:
        if keyword in needs and keyword in services:
            score += points

    return min(score, MAX_SCORE)


def score_service_area(destination_address: Optional[str], service_area: Optional[str]) -> float:
    """Area-name overlap between the pickup destination and the driver's area."""
    if not service_area:
        return NEUTRAL_SERVICE_AREA_SCORE

    destination = (destination_address or "").lower()
    area = service_area.lower()

    if any(region in area for region in WHOLE_REGION_AREAS):
        return WHOLE_REGION_SCORE

    score = 50.0
    for destination_keyword, area_keyword, points in SERVICE_AREA_KEYWORDS:
        if destination_keyword in destination and area_keyword in area:
            score += points

    return min(score, MAX_SCORE)


def score_pricing(offered_amount: Decimal, requested_amount: Decimal) -> float:
    """
    Score the requester's budget against the provider's rate.

    Returns:
        100 for free services, 0 for a zero budget against a paid offer,
        otherwise the tier for offered/requested.
    """
    offered = Decimal(offered_amount or 0)
    requested = Decimal(requested_amount or 0)

    if requested == 0:
        return 100.0
    if offered == 0:
        return 0.0

    ratio = offered / requested
    for minimum_ratio, score in PRICING_RATIO_TIERS:
        if ratio >= minimum_ratio:
            return score

    return PRICING_FLOOR_SCORE
