"""
Matching Snapshots

Immutable, by-value views of requests, offers and provider reputation.

The matching engine never touches ORM rows: the repository resolves each
row once per call into one of these frozen dataclasses, and every scorer
works on them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class ServiceType(str, Enum):
    """The two marketplace services the engine can match."""
    FLIGHT_COMPANION = "flight_companion"
    PICKUP = "pickup"


@dataclass(frozen=True)
class UserReputationProfile:
    """Read-only reputation inputs for a provider."""
    user_id: int
    rating: Decimal = Decimal("0")  # 0.00 to 5.00
    total_ratings: int = 0
    is_verified: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FlightCompanionRequest:
    id: int
    user_id: int
    flight_number: str
    flight_date: datetime
    departure_airport: str
    arrival_airport: str
    offered_amount: Decimal = Decimal("0")
    preferred_language: Optional[str] = None  # Requester's language
    traveler_age: Optional[str] = None  # "Elderly", "Adult", ...
    special_needs: Optional[str] = None
    is_matched: bool = False


@dataclass(frozen=True)
class FlightCompanionOffer:
    id: int
    user_id: int
    flight_number: str
    flight_date: datetime
    departure_airport: str
    arrival_airport: str
    requested_amount: Decimal = Decimal("0")
    available_services: Optional[str] = None  # "Translation, Navigation"
    languages: Optional[str] = None  # "Chinese, English"
    helped_count: int = 0
    is_available: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PickupRequest:
    id: int
    user_id: int
    airport: str
    arrival_at: datetime  # Arrival date + time, UTC
    destination_address: str = ""
    passenger_count: int = 1
    has_luggage: bool = True
    offered_amount: Decimal = Decimal("0")
    preferred_language: Optional[str] = None
    special_requests: Optional[str] = None
    flight_number: Optional[str] = None
    is_matched: bool = False


@dataclass(frozen=True)
class PickupOffer:
    id: int
    user_id: int
    airport: str
    max_passengers: int = 4
    can_handle_luggage: bool = True
    service_area: Optional[str] = None  # "Auckland City", "All Auckland"
    base_rate: Decimal = Decimal("0")
    languages: Optional[str] = None
    additional_services: Optional[str] = None
    vehicle_type: Optional[str] = None
    total_pickups: int = 0
    average_rating: float = 0.0
    is_available: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CompatibilityScore:
    """
    Multi-factor score for one request/offer pair.

    Factor scores are 0-100. `weighted_score` is the pre-bonus weighted sum;
    `overall_score` is the same value after bonus multipliers and may
    exceed 100.

    `need_compatibility_score` is only populated for flight companion pairs,
    `service_area_score` only for pickup pairs.
    """
    reputation_score: float
    experience_score: float
    language_score: float
    pricing_score: float
    weighted_score: float
    overall_score: float
    need_compatibility_score: float = 0.0
    service_area_score: float = 0.0
    applied_bonuses: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchResult:
    """A ranked candidate returned to the caller. Never persisted here."""
    service_type: ServiceType
    request: object  # FlightCompanionRequest | PickupRequest
    offer: object  # FlightCompanionOffer | PickupOffer
    provider: UserReputationProfile
    score: CompatibilityScore
    recommendation_reason: str = ""
    scoring_details: dict = field(default_factory=dict, compare=False, hash=False)
