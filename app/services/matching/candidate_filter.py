"""
Candidate Filter

Hard eligibility gates applied before any scoring. These rules are pass/fail:
an offer that fails one is never scored, it is simply not a candidate.

The SQL repository applies the same gates in its queries; the engine runs
them again over whatever the candidate source returns so that the
invariants (no self-matches, no unavailable offers) hold for any source.
"""

from typing import Iterable, List

from app.services.matching.snapshots import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
)


def is_eligible_flight_companion_offer(
    request: FlightCompanionRequest,
    offer: FlightCompanionOffer
) -> bool:
    """Same flight, same calendar day, same route, available, not self-owned."""
    if not offer.is_available:
        return False
    if offer.user_id == request.user_id:
        return False
    return (
        offer.flight_number == request.flight_number
        and offer.flight_date.date() == request.flight_date.date()
        and offer.departure_airport == request.departure_airport
        and offer.arrival_airport == request.arrival_airport
    )


def is_eligible_pickup_offer(request: PickupRequest, offer: PickupOffer) -> bool:
    """Same airport, enough seats, luggage handled if needed, available, not self-owned."""
    if not offer.is_available:
        return False
    if offer.user_id == request.user_id:
        return False
    if offer.airport != request.airport:
        return False
    if offer.max_passengers < request.passenger_count:
        return False
    if request.has_luggage and not offer.can_handle_luggage:
        return False
    return True


def filter_flight_companion_candidates(
    request: FlightCompanionRequest,
    offers: Iterable[FlightCompanionOffer]
) -> List[FlightCompanionOffer]:
    return [offer for offer in offers if is_eligible_flight_companion_offer(request, offer)]


def filter_pickup_candidates(
    request: PickupRequest,
    offers: Iterable[PickupOffer]
) -> List[PickupOffer]:
    return [offer for offer in offers if is_eligible_pickup_offer(request, offer)]
