"""
Match Confirmation Service

Commits a request to a specific offer. This is the only write in the
matching flow and must succeed at most once per request:

- Request and offer rows are loaded FOR UPDATE (row locks on PostgreSQL)
  and re-read from the database, not from the session identity map
- Business rules are re-checked under the lock: request not yet matched,
  offer still available, not self-owned, still eligible for the request
- Every row carries a version counter (SQLAlchemy version_id_col); a writer
  that loses a race gets StaleDataError, which is surfaced as
  MatchConflictError after rollback

Once confirmed, re-running the matching engine for the request returns an
empty result because the request is flagged matched.
"""

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
import structlog

from app.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
)
from app.services.match_repository import (
    to_flight_companion_offer,
    to_flight_companion_request,
    to_pickup_offer,
    to_pickup_request,
)
from app.services.matching import (
    MatchConflictError,
    OfferNotFoundError,
    RequestNotFoundError,
    is_eligible_flight_companion_offer,
    is_eligible_pickup_offer,
)
from app.services.matching.snapshots import ServiceType

logger = structlog.get_logger(__name__)


class MatchConfirmationService:
    """
    Atomic, exclusive match confirmation.

    Usage:
        service = MatchConfirmationService(db)
        try:
            service.confirm_pickup_match(request_id=7, offer_id=3)
        except MatchConflictError as e:
            # Someone else confirmed first, or the offer went away
            ...
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = logger.bind(service="match_confirmation")

    def _lock(self, model, row_id: int):
        return self.db.query(model).filter(
            model.id == row_id
        ).with_for_update().populate_existing().first()

    def _commit(self, service_type: ServiceType, request_id: int, offer_id: int) -> None:
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            self.logger.warning("match_confirmation_lost_race",
                                service_type=service_type.value,
                                request_id=request_id,
                                offer_id=offer_id)
            raise MatchConflictError(
                service_type.value, request_id, offer_id, "concurrent_confirmation"
            )

    def _reject(self, service_type: ServiceType, request_id: int, offer_id: int, reason: str):
        self.db.rollback()
        self.logger.info("match_confirmation_rejected",
                         service_type=service_type.value,
                         request_id=request_id,
                         offer_id=offer_id,
                         reason=reason)
        return MatchConflictError(service_type.value, request_id, offer_id, reason)

    def confirm_flight_companion_match(self, request_id: int, offer_id: int) -> FlightCompanionRequest:
        """
        Match a flight companion request with an offer.

        Returns:
            The updated request row

        Raises:
            RequestNotFoundError / OfferNotFoundError: Unknown ids
            MatchConflictError: Already matched, offer unavailable or ineligible, or lost race
        """
        service_type = ServiceType.FLIGHT_COMPANION

        request = self._lock(FlightCompanionRequest, request_id)
        if request is None:
            self.db.rollback()
            raise RequestNotFoundError(service_type.value, request_id)

        offer = self._lock(FlightCompanionOffer, offer_id)
        if offer is None:
            self.db.rollback()
            raise OfferNotFoundError(service_type.value, offer_id)

        if request.is_matched:
            raise self._reject(service_type, request_id, offer_id, "request_already_matched")

        if not offer.is_available:
            raise self._reject(service_type, request_id, offer_id, "offer_not_available")

        if offer.user_id == request.user_id:
            raise self._reject(service_type, request_id, offer_id, "self_match")

        if not is_eligible_flight_companion_offer(
            to_flight_companion_request(request), to_flight_companion_offer(offer)
        ):
            raise self._reject(service_type, request_id, offer_id, "offer_not_eligible")

        request.is_matched = True
        request.matched_offer_id = offer.id
        offer.helped_count = (offer.helped_count or 0) + 1

        self._commit(service_type, request_id, offer_id)
        self.logger.info("match_confirmed",
                         service_type=service_type.value,
                         request_id=request_id,
                         offer_id=offer_id)
        return request

    def confirm_pickup_match(self, request_id: int, offer_id: int) -> PickupRequest:
        """
        Match a pickup request with a driver's offer.

        Returns:
            The updated request row

        Raises:
            RequestNotFoundError / OfferNotFoundError: Unknown ids
            MatchConflictError: Already matched, offer unavailable or ineligible, or lost race
        """
        service_type = ServiceType.PICKUP

        request = self._lock(PickupRequest, request_id)
        if request is None:
            self.db.rollback()
            raise RequestNotFoundError(service_type.value, request_id)

        offer = self._lock(PickupOffer, offer_id)
        if offer is None:
            self.db.rollback()
            raise OfferNotFoundError(service_type.value, offer_id)

        if request.is_matched:
            raise self._reject(service_type, request_id, offer_id, "request_already_matched")

        if not offer.is_available:
            raise self._reject(service_type, request_id, offer_id, "offer_not_available")

        if offer.user_id == request.user_id:
            raise self._reject(service_type, request_id, offer_id, "self_match")

        if not is_eligible_pickup_offer(to_pickup_request(request), to_pickup_offer(offer)):
            raise self._reject(service_type, request_id, offer_id, "offer_not_eligible")

        request.is_matched = True
        request.matched_offer_id = offer.id
        offer.total_pickups = (offer.total_pickups or 0) + 1

        self._commit(service_type, request_id, offer_id)
        self.logger.info("match_confirmed",
                         service_type=service_type.value,
                         request_id=request_id,
                         offer_id=offer_id)
        return request
