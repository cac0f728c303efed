"""
Tests for the SQLAlchemy match repository and match confirmation

Runs against SQLite (in-memory, and file-backed for two-session races).
Tests cover:
- Snapshot conversion (timezones, requester language, arrival timestamp)
- Eligibility gates applied in SQL
- Reputation profile lookup
- Confirmation success, business-rule conflicts, and lost races
"""

import pytest
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from app.database import Base
from app.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
    User,
)
from app.services.match_confirmation import MatchConfirmationService
from app.services.match_repository import SqlAlchemyMatchRepository, as_utc
from app.services.matching import MatchConflictError, OfferNotFoundError, RequestNotFoundError
from app.services.matching_engine import MatchingEngine
from tests.factories import NOW, fixed_clock

FLIGHT_DAY = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)


def seed_users(db):
    """Requester (1), verified helper (2), new driver (3)."""
    db.add_all([
        User(id=1, email="mei.chen@example.com", first_name="Mei", last_name="Chen",
             preferred_language="Chinese", created_at=NOW - timedelta(days=20)),
        User(id=2, email="li.wang@example.com", first_name="Li", last_name="Wang",
             preferred_language="Chinese", is_verified=True, rating=Decimal("4.80"),
             total_ratings=15, created_at=NOW - timedelta(days=400)),
        User(id=3, email="sam.taylor@example.com", first_name="Sam", last_name="Taylor",
             created_at=NOW - timedelta(days=10)),
    ])
    db.commit()


def add_flight_offer(db, offer_id, **overrides):
    values = dict(
        id=offer_id,
        user_id=2,
        flight_number="CA783",
        airline="Air China",
        flight_date=FLIGHT_DAY,
        departure_airport="AKL",
        arrival_airport="PVG",
        available_services="Translation, Wheelchair",
        languages="Chinese, English",
        requested_amount=Decimal("40.00"),
        helped_count=3,
        created_at=NOW - timedelta(days=60),
    )
    values.update(overrides)
    db.add(FlightCompanionOffer(**values))


def add_pickup_offer(db, offer_id, **overrides):
    values = dict(
        id=offer_id,
        user_id=3,
        airport="AKL",
        vehicle_type="SUV",
        max_passengers=5,
        can_handle_luggage=True,
        service_area="All Auckland",
        base_rate=Decimal("65.00"),
        languages="English",
        created_at=NOW - timedelta(days=60),
    )
    values.update(overrides)
    db.add(PickupOffer(**values))


def seed_flight_marketplace(db):
    """CA783 request 10; offers 20 and 21 eligible, 22-26 not."""
    db.add(FlightCompanionRequest(
        id=10, user_id=1, flight_number="CA783", airline="Air China",
        flight_date=FLIGHT_DAY, departure_airport="AKL", arrival_airport="PVG",
        traveler_age="Elderly", special_needs="Translation", offered_amount=Decimal("50.00"),
    ))
    add_flight_offer(db, 20)
    add_flight_offer(db, 21, flight_date=datetime(2026, 3, 4, 23, 30, tzinfo=timezone.utc), user_id=3)
    add_flight_offer(db, 22, flight_date=datetime(2026, 3, 5, 0, 30, tzinfo=timezone.utc))
    add_flight_offer(db, 23, user_id=1)
    add_flight_offer(db, 24, is_available=False)
    add_flight_offer(db, 25, arrival_airport="SYD")
    add_flight_offer(db, 26, flight_number="NZ289")
    db.commit()


def seed_pickup_marketplace(db):
    """Request 30: two passengers with luggage at AKL. Offer 40 eligible, 41-45 not."""
    db.add(PickupRequest(
        id=30, user_id=1, flight_number="NZ289", arrival_date=date(2026, 3, 2),
        arrival_time=time(6, 45), airport="AKL", destination_address="Takapuna, North Shore",
        passenger_count=2, has_luggage=True, offered_amount=Decimal("70.00"),
    ))
    add_pickup_offer(db, 40)
    add_pickup_offer(db, 41, max_passengers=1)
    add_pickup_offer(db, 42, can_handle_luggage=False)
    add_pickup_offer(db, 43, airport="WLG")
    add_pickup_offer(db, 44, user_id=1)
    add_pickup_offer(db, 45, is_available=False)
    db.commit()


@pytest.fixture
def users(db_session):
    seed_users(db_session)


@pytest.fixture
def flight_request(db_session, users):
    seed_flight_marketplace(db_session)
    return db_session.get(FlightCompanionRequest, 10)


@pytest.fixture
def pickup_request(db_session, users):
    seed_pickup_marketplace(db_session)
    return db_session.get(PickupRequest, 30)


@pytest.fixture
def competing_sessions(tmp_path):
    """
    Two sessions on one file-backed SQLite database.

    Seeded with both marketplaces plus a second eligible pickup offer (46)
    so that two writers can claim the same request with different offers.
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'marketplace.db'}")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, autoflush=False)

    first, second = Session(), Session()
    seed_users(first)
    seed_flight_marketplace(first)
    seed_pickup_marketplace(first)
    add_pickup_offer(first, 46, user_id=2)
    first.commit()
    try:
        yield first, second
    finally:
        first.close()
        second.close()
        engine.dispose()


def run_before_commit(session, monkeypatch, other_write):
    """Commit `other_write` just before `session` commits its own changes."""
    commit = session.commit

    def commit_second():
        other_write()
        commit()

    monkeypatch.setattr(session, "commit", commit_second)


class TestSnapshotConversion:
    """Tests for row-to-snapshot conversion."""

    def test_as_utc(self):
        naive = datetime(2026, 3, 4, 9, 0)
        assert as_utc(naive) == datetime(2026, 3, 4, 9, 0, tzinfo=timezone.utc)
        assert as_utc(None) is None

    def test_flight_companion_request(self, db_session, flight_request):
        snapshot = SqlAlchemyMatchRepository(db_session).get_flight_companion_request(10)

        assert snapshot.flight_date == FLIGHT_DAY
        assert snapshot.preferred_language == "Chinese"
        assert snapshot.offered_amount == Decimal("50.00")
        assert snapshot.is_matched is False

    def test_pickup_request_arrival_combined(self, db_session, pickup_request):
        snapshot = SqlAlchemyMatchRepository(db_session).get_pickup_request(30)

        assert snapshot.arrival_at == datetime(2026, 3, 2, 6, 45, tzinfo=timezone.utc)
        assert snapshot.passenger_count == 2

    def test_unknown_requests(self, db_session, users):
        repository = SqlAlchemyMatchRepository(db_session)

        assert repository.get_flight_companion_request(999) is None
        assert repository.get_pickup_request(999) is None


class TestCandidateQueries:
    """Eligibility gates applied in SQL."""

    def test_flight_companion_offers_same_flight_and_day(self, db_session, flight_request):
        repository = SqlAlchemyMatchRepository(db_session)
        request = repository.get_flight_companion_request(10)

        offers = repository.get_eligible_flight_companion_offers(request)

        assert [offer.id for offer in offers] == [20, 21]
        assert offers[0].created_at == NOW - timedelta(days=60)

    def test_pickup_offers_airport_capacity_luggage(self, db_session, pickup_request):
        repository = SqlAlchemyMatchRepository(db_session)
        request = repository.get_pickup_request(30)

        offers = repository.get_eligible_pickup_offers(request)

        assert [offer.id for offer in offers] == [40]

    def test_reputation_profile(self, db_session, users):
        repository = SqlAlchemyMatchRepository(db_session)

        profile = repository.get_reputation_profile(2)

        assert profile.rating == Decimal("4.80")
        assert isinstance(profile.rating, Decimal)
        assert profile.total_ratings == 15
        assert profile.is_verified is True
        assert profile.created_at == NOW - timedelta(days=400)
        assert repository.get_reputation_profile(999) is None

    def test_engine_over_sql_repository(self, db_session, flight_request):
        engine = MatchingEngine(SqlAlchemyMatchRepository(db_session), clock=fixed_clock)

        results = engine.find_flight_companion_matches(10)

        assert [result.offer.id for result in results] == [20, 21]
        assert results[0].provider.is_verified is True


class TestFlightCompanionConfirmation:
    """Tests for confirm_flight_companion_match."""

    def test_confirm_marks_request_and_counts_help(self, db_session, flight_request):
        service = MatchConfirmationService(db_session)

        request = service.confirm_flight_companion_match(10, 20)

        assert request.is_matched is True
        assert request.matched_offer_id == 20
        assert request.version == 2
        assert db_session.get(FlightCompanionOffer, 20).helped_count == 4

    def test_matched_request_no_longer_matches(self, db_session, flight_request):
        MatchConfirmationService(db_session).confirm_flight_companion_match(10, 20)

        engine = MatchingEngine(SqlAlchemyMatchRepository(db_session), clock=fixed_clock)
        assert engine.find_flight_companion_matches(10) == []

    def test_second_confirmation_conflicts(self, db_session, flight_request):
        service = MatchConfirmationService(db_session)
        service.confirm_flight_companion_match(10, 20)

        with pytest.raises(MatchConflictError) as exc_info:
            service.confirm_flight_companion_match(10, 21)

        assert exc_info.value.reason == "request_already_matched"
        assert db_session.get(FlightCompanionRequest, 10).matched_offer_id == 20

    @pytest.mark.parametrize("offer_id, reason", [
        (24, "offer_not_available"),
        (23, "self_match"),
        (22, "offer_not_eligible"),
        (26, "offer_not_eligible"),
    ])
    def test_rejected_offers(self, db_session, flight_request, offer_id, reason):
        with pytest.raises(MatchConflictError) as exc_info:
            MatchConfirmationService(db_session).confirm_flight_companion_match(10, offer_id)

        assert exc_info.value.reason == reason
        assert db_session.get(FlightCompanionRequest, 10).is_matched is False

    def test_unknown_ids(self, db_session, flight_request):
        service = MatchConfirmationService(db_session)

        with pytest.raises(RequestNotFoundError):
            service.confirm_flight_companion_match(999, 20)
        with pytest.raises(OfferNotFoundError):
            service.confirm_flight_companion_match(10, 999)

    def test_lost_race_surfaces_conflict(self, db_session, flight_request, monkeypatch):
        monkeypatch.setattr(db_session, "commit", Mock(side_effect=StaleDataError("version mismatch")))

        with pytest.raises(MatchConflictError) as exc_info:
            MatchConfirmationService(db_session).confirm_flight_companion_match(10, 20)

        assert exc_info.value.reason == "concurrent_confirmation"
        assert db_session.get(FlightCompanionRequest, 10).is_matched is False
        assert db_session.get(FlightCompanionOffer, 20).helped_count == 3


class TestPickupConfirmation:
    """Tests for confirm_pickup_match."""

    def test_confirm_counts_pickup(self, db_session, pickup_request):
        request = MatchConfirmationService(db_session).confirm_pickup_match(30, 40)

        assert request.is_matched is True
        assert request.matched_offer_id == 40
        assert db_session.get(PickupOffer, 40).total_pickups == 1

    @pytest.mark.parametrize("offer_id, reason", [
        (45, "offer_not_available"),
        (44, "self_match"),
        (41, "offer_not_eligible"),
        (42, "offer_not_eligible"),
        (43, "offer_not_eligible"),
    ])
    def test_rejected_offers(self, db_session, pickup_request, offer_id, reason):
        with pytest.raises(MatchConflictError) as exc_info:
            MatchConfirmationService(db_session).confirm_pickup_match(30, offer_id)

        assert exc_info.value.reason == reason

    def test_second_confirmation_conflicts(self, db_session, pickup_request):
        service = MatchConfirmationService(db_session)
        service.confirm_pickup_match(30, 40)

        with pytest.raises(MatchConflictError) as exc_info:
            service.confirm_pickup_match(30, 40)

        assert exc_info.value.reason == "request_already_matched"


class TestConcurrentConfirmation:
    """Two sessions confirming the same request; the later commit loses."""

    def test_flight_companion_race(self, competing_sessions, monkeypatch):
        first, second = competing_sessions
        run_before_commit(
            first, monkeypatch,
            lambda: MatchConfirmationService(second).confirm_flight_companion_match(10, 21),
        )

        with pytest.raises(MatchConflictError) as exc_info:
            MatchConfirmationService(first).confirm_flight_companion_match(10, 20)

        assert exc_info.value.reason == "concurrent_confirmation"

        second.expire_all()
        request = second.get(FlightCompanionRequest, 10)
        assert request.is_matched is True
        assert request.matched_offer_id == 21
        assert request.version == 2
        assert second.get(FlightCompanionOffer, 21).helped_count == 4
        assert second.get(FlightCompanionOffer, 20).helped_count == 3

    def test_pickup_race(self, competing_sessions, monkeypatch):
        first, second = competing_sessions
        run_before_commit(
            first, monkeypatch,
            lambda: MatchConfirmationService(second).confirm_pickup_match(30, 46),
        )

        with pytest.raises(MatchConflictError) as exc_info:
            MatchConfirmationService(first).confirm_pickup_match(30, 40)

        assert exc_info.value.reason == "concurrent_confirmation"

        second.expire_all()
        request = second.get(PickupRequest, 30)
        assert request.matched_offer_id == 46
        assert second.get(PickupOffer, 46).total_pickups == 1
        assert second.get(PickupOffer, 40).total_pickups == 0

    def test_loser_session_sees_winner_after_rollback(self, competing_sessions, monkeypatch):
        first, second = competing_sessions
        run_before_commit(
            first, monkeypatch,
            lambda: MatchConfirmationService(second).confirm_flight_companion_match(10, 21),
        )

        with pytest.raises(MatchConflictError):
            MatchConfirmationService(first).confirm_flight_companion_match(10, 20)

        engine = MatchingEngine(SqlAlchemyMatchRepository(first), clock=fixed_clock)
        assert engine.find_flight_companion_matches(10) == []
