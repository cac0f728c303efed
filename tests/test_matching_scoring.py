"""
Tests for score aggregation and bonus factors

Tests cover:
- Weight vectors
- Weighted aggregation
- Bonus conditions and their time windows
- Post-bonus scores are not clamped
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from app.services.matching import (
    FLIGHT_COMPANION_BONUSES,
    FLIGHT_COMPANION_WEIGHTS,
    PICKUP_BONUSES,
    PICKUP_WEIGHTS,
    aggregate_scores,
    apply_bonus_factors,
    score_flight_companion_pair,
    score_pickup_pair,
)
from tests.factories import (
    NOW,
    make_flight_offer,
    make_flight_request,
    make_pickup_offer,
    make_pickup_request,
    make_profile,
)


class TestWeights:
    """Weight vectors."""

    def test_weight_vectors_sum_to_one(self):
        assert sum(FLIGHT_COMPANION_WEIGHTS.values()) == pytest.approx(1.0)
        assert sum(PICKUP_WEIGHTS.values()) == pytest.approx(1.0)

    def test_flight_companion_weights(self):
        assert FLIGHT_COMPANION_WEIGHTS == {
            "reputation": 0.30,
            "experience": 0.25,
            "language": 0.20,
            "need_compatibility": 0.15,
            "pricing": 0.10,
        }

    def test_pickup_weights(self):
        assert PICKUP_WEIGHTS == {
            "reputation": 0.35,
            "experience": 0.25,
            "service_area": 0.20,
            "language": 0.10,
            "pricing": 0.10,
        }

    def test_aggregate_scores(self):
        factors = {
            "reputation": 100.0,
            "experience": 40.0,
            "language": 50.0,
            "need_compatibility": 100.0,
            "pricing": 0.0,
        }
        assert aggregate_scores(factors, FLIGHT_COMPANION_WEIGHTS) == pytest.approx(65.0)


class TestFlightCompanionBonuses:
    """Bonus factors for flight companion pairs."""

    def test_no_bonus_leaves_score_unchanged(self):
        request = make_flight_request()
        score, applied = apply_bonus_factors(80.0, FLIGHT_COMPANION_BONUSES, request, make_flight_offer(), NOW)

        assert score == 80.0
        assert applied == ()

    def test_all_bonuses_apply_in_order(self):
        request = make_flight_request(
            traveler_age="Elderly",
            special_needs="First time flying alone",
            flight_date=NOW + timedelta(hours=10),
        )
        score, applied = apply_bonus_factors(80.0, FLIGHT_COMPANION_BONUSES, request, make_flight_offer(), NOW)

        assert applied == ("elderly_traveler", "time_sensitive", "first_time_traveler")
        assert score == pytest.approx(80.0 * 1.15 * 1.10 * 1.08)

    @pytest.mark.parametrize("offset, expected", [
        (timedelta(0), False),
        (timedelta(seconds=1), True),
        (timedelta(hours=24), True),
        (timedelta(hours=24, seconds=1), False),
        (timedelta(hours=-1), False),
    ])
    def test_time_sensitive_window(self, offset, expected):
        request = make_flight_request(flight_date=NOW + offset)
        _, applied = apply_bonus_factors(50.0, FLIGHT_COMPANION_BONUSES, request, make_flight_offer(), NOW)

        assert ("time_sensitive" in applied) is expected


class TestPickupBonuses:
    """Bonus factors for pickup pairs."""

    def test_large_group_needs_enough_seats(self):
        offer = make_pickup_offer(max_passengers=4)

        _, applied = apply_bonus_factors(50.0, PICKUP_BONUSES, make_pickup_request(passenger_count=4), offer, NOW)
        assert "large_group" in applied

        _, applied = apply_bonus_factors(50.0, PICKUP_BONUSES, make_pickup_request(passenger_count=3), offer, NOW)
        assert "large_group" not in applied

    @pytest.mark.parametrize("offset, expected", [
        (timedelta(0), False),
        (timedelta(hours=6), True),
        (timedelta(hours=6, seconds=1), False),
    ])
    def test_time_sensitive_window(self, offset, expected):
        request = make_pickup_request(arrival_at=NOW + offset)
        _, applied = apply_bonus_factors(50.0, PICKUP_BONUSES, request, make_pickup_offer(), NOW)

        assert ("time_sensitive" in applied) is expected

    def test_large_luggage_requires_luggage_on_both_sides(self):
        offer = make_pickup_offer(can_handle_luggage=True)

        request = make_pickup_request(has_luggage=True, special_requests="Two large luggage items")
        _, applied = apply_bonus_factors(50.0, PICKUP_BONUSES, request, offer, NOW)
        assert applied == ("large_luggage",)

        request = make_pickup_request(has_luggage=False, special_requests="Large luggage")
        _, applied = apply_bonus_factors(50.0, PICKUP_BONUSES, request, offer, NOW)
        assert applied == ()


class TestPairScoring:
    """End-to-end scoring of one request/offer pair."""

    def test_flight_companion_pair(self):
        request = make_flight_request(
            traveler_age="Elderly",
            special_needs="Translation help, wheelchair",
            offered_amount=Decimal("50"),
        )
        offer = make_flight_offer(
            helped_count=12,
            available_services="Translation, Wheelchair, Navigation",
            languages="Chinese, English",
            requested_amount=Decimal("40"),
            created_at=NOW - timedelta(days=60),
        )
        provider = make_profile(rating=4.8, total_ratings=15, is_verified=True, age_days=400)

        score = score_flight_companion_pair(request, offer, provider, NOW)

        assert score.reputation_score == 100.0
        assert score.experience_score == 65.0
        assert score.language_score == 100.0
        assert score.need_compatibility_score == 100.0
        assert score.pricing_score == 100.0
        assert score.service_area_score == 0.0
        assert score.weighted_score == pytest.approx(91.25)
        assert score.applied_bonuses == ("elderly_traveler",)
        assert score.overall_score == pytest.approx(91.25 * 1.15)

    def test_overall_score_is_not_clamped_at_100(self):
        request = make_flight_request(
            traveler_age="Elderly",
            special_needs="First time traveler",
            flight_date=NOW + timedelta(hours=5),
            offered_amount=Decimal("100"),
        )
        offer = make_flight_offer(
            helped_count=30,
            available_services="Translation, Navigation, Wheelchair, Medical",
            created_at=NOW - timedelta(days=1),
        )
        provider = make_profile(rating=5.0, total_ratings=20, is_verified=True, age_days=500)

        score = score_flight_companion_pair(request, offer, provider, NOW)

        assert score.weighted_score <= 100.0
        assert score.overall_score > 100.0
        assert score.overall_score == pytest.approx(score.weighted_score * 1.15 * 1.10 * 1.08)

    def test_pickup_pair(self):
        request = make_pickup_request(
            arrival_at=NOW + timedelta(hours=3),
            destination_address="123 Queen St, Auckland CBD",
            passenger_count=4,
            has_luggage=True,
            special_requests="Large luggage",
            offered_amount=Decimal("80"),
            preferred_language="English",
        )
        offer = make_pickup_offer(
            max_passengers=6,
            service_area="Auckland City, CBD",
            base_rate=Decimal("70"),
            languages="English, Mandarin",
            additional_services="Child seat",
            total_pickups=25,
            average_rating=4.6,
        )
        provider = make_profile(rating=4.5, total_ratings=8, age_days=200)

        score = score_pickup_pair(request, offer, provider, NOW)

        assert score.reputation_score == pytest.approx(78.0)
        assert score.experience_score == pytest.approx(83.0)
        assert score.service_area_score == 85.0
        assert score.language_score == 100.0
        assert score.pricing_score == 90.0
        assert score.need_compatibility_score == 0.0
        assert score.weighted_score == pytest.approx(84.05)
        assert score.applied_bonuses == ("large_group", "time_sensitive", "large_luggage")
        assert score.overall_score == pytest.approx(84.05 * 1.12 * 1.10 * 1.08)

    @pytest.mark.parametrize("weighted", [10.0, 55.5, 90.0, 100.0])
    def test_bonuses_multiply_without_clamp(self, weighted):
        request = make_flight_request(
            traveler_age="Elderly",
            special_needs="First time",
            flight_date=NOW + timedelta(hours=1),
        )

        score, _ = apply_bonus_factors(weighted, FLIGHT_COMPANION_BONUSES, request, make_flight_offer(), NOW)

        assert score == pytest.approx(weighted * 1.15 * 1.10 * 1.08)
        if weighted == 100.0:
            assert score > 100.0
