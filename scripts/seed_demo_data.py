#!/usr/bin/env python
"""
Seed Demo Marketplace

Creates a small marketplace to exercise the matching endpoints locally:
- An elderly traveler on CA783 AKL -> PVG and three companion offers
- A family of four landing at AKL and three pickup offers

Usage:
    DATABASE_URL=sqlite:///./demo.db python scripts/seed_demo_data.py [--create-tables]

Idempotent: skips users whose email already exists and request/offer rows
whose id already exists.
"""

import argparse
import sys
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import app.database as database
from app.models import (
    FlightCompanionOffer,
    FlightCompanionRequest,
    PickupOffer,
    PickupRequest,
    User,
)

NOW = datetime.now(timezone.utc)
FLIGHT_DAY = (NOW + timedelta(days=3)).replace(hour=13, minute=15, second=0, microsecond=0)
ARRIVAL_DAY = (NOW + timedelta(days=1)).date()

USERS = [
    {'id': 1, 'email': 'mei.chen@example.com', 'first_name': 'Mei', 'last_name': 'Chen',
     'preferred_language': 'Chinese', 'created_at': NOW - timedelta(days=40)},
    {'id': 2, 'email': 'li.wang@example.com', 'first_name': 'Li', 'last_name': 'Wang',
     'preferred_language': 'Chinese', 'is_verified': True, 'rating': Decimal('4.80'),
     'total_ratings': 15, 'created_at': NOW - timedelta(days=420)},
    {'id': 3, 'email': 'james.smith@example.com', 'first_name': 'James', 'last_name': 'Smith',
     'preferred_language': 'English', 'rating': Decimal('4.20'), 'total_ratings': 4,
     'created_at': NOW - timedelta(days=200)},
    {'id': 4, 'email': 'aroha.ngata@example.com', 'first_name': 'Aroha', 'last_name': 'Ngata',
     'preferred_language': 'English', 'is_verified': True, 'rating': Decimal('4.60'),
     'total_ratings': 8, 'created_at': NOW - timedelta(days=250)},
    {'id': 5, 'email': 'raj.patel@example.com', 'first_name': 'Raj', 'last_name': 'Patel',
     'preferred_language': 'English', 'created_at': NOW - timedelta(days=5)},
]

FLIGHT_COMPANION_REQUESTS = [
    {'id': 1, 'user_id': 1, 'flight_number': 'CA783', 'airline': 'Air China',
     'flight_date': FLIGHT_DAY, 'departure_airport': 'AKL', 'arrival_airport': 'PVG',
     'traveler_name': 'My parents', 'traveler_age': 'Elderly',
     'special_needs': 'Translation help, wheelchair at transfer', 'offered_amount': Decimal('50.00')},
]

FLIGHT_COMPANION_OFFERS = [
    {'id': 1, 'user_id': 2, 'flight_number': 'CA783', 'airline': 'Air China',
     'flight_date': FLIGHT_DAY, 'departure_airport': 'AKL', 'arrival_airport': 'PVG',
     'available_services': 'Translation, Wheelchair, Navigation', 'languages': 'Chinese, English',
     'requested_amount': Decimal('40.00'), 'helped_count': 12},
    {'id': 2, 'user_id': 3, 'flight_number': 'CA783', 'airline': 'Air China',
     'flight_date': FLIGHT_DAY, 'departure_airport': 'AKL', 'arrival_airport': 'PVG',
     'available_services': 'General Help', 'languages': 'English',
     'requested_amount': Decimal('60.00'), 'helped_count': 2},
    {'id': 3, 'user_id': 5, 'flight_number': 'CA783', 'airline': 'Air China',
     'flight_date': FLIGHT_DAY, 'departure_airport': 'AKL', 'arrival_airport': 'PVG',
     'available_services': 'Navigation', 'languages': 'English, Hindi',
     'requested_amount': Decimal('0.00'), 'helped_count': 0},
]

PICKUP_REQUESTS = [
    {'id': 1, 'user_id': 1, 'flight_number': 'NZ289', 'arrival_date': ARRIVAL_DAY,
     'arrival_time': time(6, 45), 'airport': 'AKL', 'destination_address': '12 Hurstmere Rd, Takapuna, North Shore',
     'passenger_count': 4, 'has_luggage': True, 'special_requests': 'Large luggage, child seat',
     'offered_amount': Decimal('80.00')},
]

PICKUP_OFFERS = [
    {'id': 1, 'user_id': 4, 'airport': 'AKL', 'vehicle_type': 'Van', 'max_passengers': 7,
     'can_handle_luggage': True, 'service_area': 'North Shore, Auckland City',
     'base_rate': Decimal('75.00'), 'languages': 'English', 'additional_services': 'Child seat',
     'total_pickups': 32, 'average_rating': Decimal('4.70')},
    {'id': 2, 'user_id': 3, 'airport': 'AKL', 'vehicle_type': 'Sedan', 'max_passengers': 4,
     'can_handle_luggage': True, 'service_area': 'All Auckland', 'base_rate': Decimal('65.00'),
     'languages': 'English', 'total_pickups': 6, 'average_rating': Decimal('4.10')},
    {'id': 3, 'user_id': 5, 'airport': 'AKL', 'vehicle_type': 'Hatchback', 'max_passengers': 3,
     'can_handle_luggage': False, 'service_area': 'South Auckland', 'base_rate': Decimal('40.00'),
     'languages': 'English, Hindi'},
]


def seed_rows(db, model, rows, key='id'):
    """Insert rows whose key is not present yet. Returns (created, skipped)."""
    created = skipped = 0
    for row in rows:
        existing = db.query(model).filter(getattr(model, key) == row[key]).first()
        if existing:
            print(f"  Skipping {model.__name__} {key}={row[key]} (already exists)")
            skipped += 1
            continue
        db.add(model(**row))
        print(f"  Created {model.__name__} {key}={row[key]}")
        created += 1
    db.flush()
    return created, skipped


def main():
    parser = argparse.ArgumentParser(description="Seed a demo marketplace for local matching")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables from the models first (SQLite demos; use alembic elsewhere)"
    )
    args = parser.parse_args()

    database.init_db()
    if database.SessionLocal is None:
        print("ERROR: Database not configured. Set DATABASE_URL environment variable.")
        sys.exit(2)

    if args.create_tables:
        database.Base.metadata.create_all(database.engine)

    db = database.SessionLocal()
    try:
        total_created = total_skipped = 0
        for model, rows, key in (
            (User, USERS, 'email'),
            (FlightCompanionOffer, FLIGHT_COMPANION_OFFERS, 'id'),
            (FlightCompanionRequest, FLIGHT_COMPANION_REQUESTS, 'id'),
            (PickupOffer, PICKUP_OFFERS, 'id'),
            (PickupRequest, PICKUP_REQUESTS, 'id'),
        ):
            created, skipped = seed_rows(db, model, rows, key)
            total_created += created
            total_skipped += skipped

        db.commit()
        print(f"\nSeeding complete: {total_created} created, {total_skipped} skipped")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
