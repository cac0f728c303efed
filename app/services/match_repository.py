"""
SQLAlchemy Match Repository

Candidate source for the matching engine. Resolves ORM rows into frozen
snapshots once per call so scoring never navigates live relationships.

Eligible-offer queries apply the hard gates in SQL:
- Flight companion: same flight number, same calendar day, same route,
  available, not owned by the requester
- Pickup: same airport, enough seats, luggage handled when needed,
  available, not owned by the requester
"""

from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session
import structlog

from app.models import (
    FlightCompanionOffer as FlightCompanionOfferRow,
    FlightCompanionRequest as FlightCompanionRequestRow,
    PickupOffer as PickupOfferRow,
    PickupRequest as PickupRequestRow,
    User,
)
from app.services.matching.snapshots import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
    UserReputationProfile,
)

logger = structlog.get_logger(__name__)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Read naive timestamps (e.g. from SQLite) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _amount(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def _requester_language(row) -> Optional[str]:
    return row.user.preferred_language if row.user is not None else None


def to_flight_companion_request(row: FlightCompanionRequestRow) -> FlightCompanionRequest:
    return FlightCompanionRequest(
        id=row.id,
        user_id=row.user_id,
        flight_number=row.flight_number,
        flight_date=as_utc(row.flight_date),
        departure_airport=row.departure_airport,
        arrival_airport=row.arrival_airport,
        offered_amount=_amount(row.offered_amount),
        preferred_language=_requester_language(row),
        traveler_age=row.traveler_age,
        special_needs=row.special_needs,
        is_matched=bool(row.is_matched),
    )


def to_flight_companion_offer(row: FlightCompanionOfferRow) -> FlightCompanionOffer:
    return FlightCompanionOffer(
        id=row.id,
        user_id=row.user_id,
        flight_number=row.flight_number,
        flight_date=as_utc(row.flight_date),
        departure_airport=row.departure_airport,
        arrival_airport=row.arrival_airport,
        requested_amount=_amount(row.requested_amount),
        available_services=row.available_services,
        languages=row.languages,
        helped_count=row.helped_count or 0,
        is_available=bool(row.is_available),
        created_at=as_utc(row.created_at),
    )


def to_pickup_request(row: PickupRequestRow) -> PickupRequest:
    return PickupRequest(
        id=row.id,
        user_id=row.user_id,
        airport=row.airport,
        arrival_at=datetime.combine(row.arrival_date, row.arrival_time, tzinfo=timezone.utc),
        destination_address=row.destination_address or "",
        passenger_count=row.passenger_count or 1,
        has_luggage=bool(row.has_luggage),
        offered_amount=_amount(row.offered_amount),
        preferred_language=_requester_language(row),
        special_requests=row.special_requests,
        flight_number=row.flight_number,
        is_matched=bool(row.is_matched),
    )


def to_pickup_offer(row: PickupOfferRow) -> PickupOffer:
    return PickupOffer(
        id=row.id,
        user_id=row.user_id,
        airport=row.airport,
        max_passengers=row.max_passengers,
        can_handle_luggage=bool(row.can_handle_luggage),
        service_area=row.service_area,
        base_rate=_amount(row.base_rate),
        languages=row.languages,
        additional_services=row.additional_services,
        vehicle_type=row.vehicle_type,
        total_pickups=row.total_pickups or 0,
        average_rating=float(row.average_rating or 0),
        is_available=bool(row.is_available),
        created_at=as_utc(row.created_at),
    )


class SqlAlchemyMatchRepository:
    """
    Read-only candidate source backed by a SQLAlchemy session.

    Usage:
        repository = SqlAlchemyMatchRepository(db)
        engine = MatchingEngine(repository)
    """

    def __init__(self, db: Session):
        self.db = db

    def get_flight_companion_request(self, request_id: int) -> Optional[FlightCompanionRequest]:
        row = self.db.query(FlightCompanionRequestRow).filter(
            FlightCompanionRequestRow.id == request_id
        ).first()
        return to_flight_companion_request(row) if row else None

    def get_eligible_flight_companion_offers(
        self,
        request: FlightCompanionRequest
    ) -> List[FlightCompanionOffer]:
        day_start = datetime.combine(request.flight_date.date(), time.min, tzinfo=timezone.utc)
        day_end = day_start + timedelta(days=1)

        rows = self.db.query(FlightCompanionOfferRow).filter(
            FlightCompanionOfferRow.is_available.is_(True),
            FlightCompanionOfferRow.flight_number == request.flight_number,
            FlightCompanionOfferRow.flight_date >= day_start,
            FlightCompanionOfferRow.flight_date < day_end,
            FlightCompanionOfferRow.departure_airport == request.departure_airport,
            FlightCompanionOfferRow.arrival_airport == request.arrival_airport,
            FlightCompanionOfferRow.user_id != request.user_id,  # Don't match with self
        ).order_by(
            FlightCompanionOfferRow.id.asc()
        ).all()

        logger.debug("flight_companion_offers_loaded",
                     request_id=request.id,
                     flight_number=request.flight_number,
                     count=len(rows))

        return [to_flight_companion_offer(row) for row in rows]

    def get_pickup_request(self, request_id: int) -> Optional[PickupRequest]:
        row = self.db.query(PickupRequestRow).filter(
            PickupRequestRow.id == request_id
        ).first()
        return to_pickup_request(row) if row else None

    def get_eligible_pickup_offers(self, request: PickupRequest) -> List[PickupOffer]:
        query = self.db.query(PickupOfferRow).filter(
            PickupOfferRow.is_available.is_(True),
            PickupOfferRow.airport == request.airport,
            PickupOfferRow.max_passengers >= request.passenger_count,
            PickupOfferRow.user_id != request.user_id,
        )

        if request.has_luggage:
            query = query.filter(PickupOfferRow.can_handle_luggage.is_(True))

        rows = query.order_by(PickupOfferRow.id.asc()).all()

        logger.debug("pickup_offers_loaded",
                     request_id=request.id,
                     airport=request.airport,
                     count=len(rows))

        return [to_pickup_offer(row) for row in rows]

    def get_reputation_profile(self, user_id: int) -> Optional[UserReputationProfile]:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            return None

        return UserReputationProfile(
            user_id=user.id,
            rating=_amount(user.rating),
            total_ratings=user.total_ratings or 0,
            is_verified=bool(user.is_verified),
            created_at=as_utc(user.created_at),
        )
