"""
Compatibility Matching Engine

Public entry point for ranking offers against a request:

1. Load the request (missing -> RequestNotFoundError)
2. Already matched -> empty result plus a warning event
3. Gate candidates through the hard eligibility filter
4. Score each candidate (factors -> weighted sum -> bonuses)
5. Rank, truncate, attach recommendation reasons

The engine is stateless and read-only. It works on snapshots resolved once
per call, so concurrent calls for different requests share nothing mutable.
Confirming a match is a separate write (see match_confirmation).
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Protocol, Sequence

import structlog

from app.services.matching import (
    ExplainabilityBuilder,
    FLIGHT_COMPANION_WEIGHTS,
    PICKUP_WEIGHTS,
    RequestNotFoundError,
    filter_flight_companion_candidates,
    filter_pickup_candidates,
    flight_companion_reason,
    pickup_reason,
    rank_match_results,
    score_flight_companion_pair,
    score_pickup_pair,
)
from app.services.matching.snapshots import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    MatchResult,
    PickupOffer,
    PickupRequest,
    ServiceType,
    UserReputationProfile,
)

logger = structlog.get_logger(__name__)

DEFAULT_MAX_RESULTS = 10


class MatchRepository(Protocol):
    """Data source consumed by the engine. Implementations return snapshots."""

    def get_flight_companion_request(self, request_id: int) -> Optional[FlightCompanionRequest]: ...

    def get_eligible_flight_companion_offers(
        self, request: FlightCompanionRequest
    ) -> Sequence[FlightCompanionOffer]: ...

    def get_pickup_request(self, request_id: int) -> Optional[PickupRequest]: ...

    def get_eligible_pickup_offers(self, request: PickupRequest) -> Sequence[PickupOffer]: ...

    def get_reputation_profile(self, user_id: int) -> Optional[UserReputationProfile]: ...


class EventSink(Protocol):
    """Structured event sink; a structlog logger satisfies it."""

    def info(self, event: str, **kwargs) -> None: ...

    def warning(self, event: str, **kwargs) -> None: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MatchingEngine:
    """
    Rank flight companion and pickup offers for a request.

    Usage:
        engine = MatchingEngine(SqlAlchemyMatchRepository(db))
        results = engine.find_flight_companion_matches(request_id=42, max_results=5)

        for result in results:
            print(result.offer.id, result.score.overall_score, result.recommendation_reason)
    """

    def __init__(
        self,
        repository: MatchRepository,
        event_sink: Optional[EventSink] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize matching engine.

        Args:
            repository: Request, candidate and reputation source
            event_sink: Receives info/warning events (default: structlog logger)
            clock: Returns the reference "now" for time-based factors
        """
        self.repository = repository
        self.events = event_sink or logger
        self.clock = clock

    def find_flight_companion_matches(
        self,
        request_id: int,
        max_results: int = DEFAULT_MAX_RESULTS
    ) -> List[MatchResult]:
        """
        Find the best flight companion offers for a request.

        Raises:
            RequestNotFoundError: No request with this id
        """
        service_type = ServiceType.FLIGHT_COMPANION
        self.events.info("matching_started",
                         service_type=service_type.value,
                         request_id=request_id,
                         max_results=max_results)

        request = self.repository.get_flight_companion_request(request_id)
        if request is None:
            raise RequestNotFoundError(service_type.value, request_id)

        if request.is_matched:
            self.events.warning("request_already_matched",
                                service_type=service_type.value,
                                request_id=request_id)
            return []

        if max_results <= 0:
            return []

        candidates = filter_flight_companion_candidates(
            request, self.repository.get_eligible_flight_companion_offers(request)
        )
        self.events.info("candidates_found",
                         service_type=service_type.value,
                         request_id=request_id,
                         count=len(candidates))

        now = self.clock()
        scored = []
        for offer in candidates:
            provider = self._reputation_for(offer.user_id)
            score = score_flight_companion_pair(request, offer, provider, now)
            scored.append(MatchResult(
                service_type=service_type,
                request=request,
                offer=offer,
                provider=provider,
                score=score,
            ))

        ranked = rank_match_results(scored, max_results)
        results = [
            self._explain(
                result,
                flight_companion_reason(result.offer, result.provider, result.score),
                FLIGHT_COMPANION_WEIGHTS,
                rank,
            )
            for rank, result in enumerate(ranked, 1)
        ]
        self._log_completed(service_type, request_id, results)
        return results

    def find_pickup_matches(
        self,
        request_id: int,
        max_results: int = DEFAULT_MAX_RESULTS
    ) -> List[MatchResult]:
        """
        Find the best pickup offers for a request.

        Raises:
            RequestNotFoundError: No request with this id
        """
        service_type = ServiceType.PICKUP
        self.events.info("matching_started",
                         service_type=service_type.value,
                         request_id=request_id,
                         max_results=max_results)

        request = self.repository.get_pickup_request(request_id)
        if request is None:
            raise RequestNotFoundError(service_type.value, request_id)

        if request.is_matched:
            self.events.warning("request_already_matched",
                                service_type=service_type.value,
                                request_id=request_id)
            return []

        if max_results <= 0:
            return []

        candidates = filter_pickup_candidates(
            request, self.repository.get_eligible_pickup_offers(request)
        )
        self.events.info("candidates_found",
                         service_type=service_type.value,
                         request_id=request_id,
                         count=len(candidates))

        now = self.clock()
        scored = []
        for offer in candidates:
            provider = self._reputation_for(offer.user_id)
            score = score_pickup_pair(request, offer, provider, now)
            scored.append(MatchResult(
                service_type=service_type,
                request=request,
                offer=offer,
                provider=provider,
                score=score,
            ))

        ranked = rank_match_results(scored, max_results)
        results = [
            self._explain(
                result,
                pickup_reason(request, result.offer, result.provider, result.score),
                PICKUP_WEIGHTS,
                rank,
            )
            for rank, result in enumerate(ranked, 1)
        ]
        self._log_completed(service_type, request_id, results)
        return results

    def _reputation_for(self, user_id: int) -> UserReputationProfile:
        # Providers without a profile row score as new, unverified users
        profile = self.repository.get_reputation_profile(user_id)
        return profile or UserReputationProfile(user_id=user_id)

    @staticmethod
    def _explain(
        result: MatchResult,
        reason: str,
        weights: Dict[str, float],
        rank: int
    ) -> MatchResult:
        return MatchResult(
            service_type=result.service_type,
            request=result.request,
            offer=result.offer,
            provider=result.provider,
            score=result.score,
            recommendation_reason=reason,
            scoring_details=ExplainabilityBuilder.build(
                service_type=result.service_type.value,
                score=result.score,
                weights=weights,
                rank=rank,
            ),
        )

    def _log_completed(self, service_type: ServiceType, request_id: int, results: List[MatchResult]) -> None:
        self.events.info("matching_completed",
                         service_type=service_type.value,
                         request_id=request_id,
                         returned=len(results),
                         top_offer_id=results[0].offer.id if results else None,
                         top_score=round(results[0].score.overall_score, 4) if results else None)


__all__ = ["MatchingEngine", "MatchRepository", "EventSink", "DEFAULT_MAX_RESULTS", "utc_now"]
