"""create_marketplace_tables

Revision ID: 20261017_0900_marketplace
Revises:
Create Date: 2026-10-17 09:00:00

Adds: users, flight_companion_requests/offers, pickup_requests/offers
Purpose: Tables read by the matching engine and written by match confirmation
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261017_0900_marketplace'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Create marketplace tables.

    Every request/offer table carries a `version` column used by SQLAlchemy
    as version_id_col for optimistic concurrency on match confirmation.
    """

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False),
        sa.Column('last_name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('preferred_language', sa.String(length=50), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('rating', sa.Numeric(precision=3, scale=2), nullable=False, server_default='0'),
        sa.Column('total_ratings', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'flight_companion_offers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('flight_number', sa.String(length=100), nullable=False),
        sa.Column('airline', sa.String(length=50), nullable=False),
        sa.Column('flight_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('departure_airport', sa.String(length=10), nullable=False),
        sa.Column('arrival_airport', sa.String(length=10), nullable=False),
        sa.Column('available_services', sa.String(length=200), nullable=True),
        sa.Column('languages', sa.String(length=50), nullable=True),
        sa.Column('requested_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('additional_info', sa.Text(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('helped_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
    )
    op.create_index('ix_flight_companion_offers_id', 'flight_companion_offers', ['id'])
    op.create_index('ix_flight_companion_offers_user_id', 'flight_companion_offers', ['user_id'])
    op.create_index(
        'idx_flight_companion_offers_flight',
        'flight_companion_offers',
        ['flight_number', 'departure_airport', 'arrival_airport'],
    )

    op.create_table(
        'flight_companion_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('flight_number', sa.String(length=100), nullable=False),
        sa.Column('airline', sa.String(length=50), nullable=False),
        sa.Column('flight_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('departure_airport', sa.String(length=10), nullable=False),
        sa.Column('arrival_airport', sa.String(length=10), nullable=False),
        sa.Column('traveler_name', sa.String(length=100), nullable=True),
        sa.Column('traveler_age', sa.String(length=20), nullable=True),
        sa.Column('special_needs', sa.String(length=500), nullable=True),
        sa.Column('offered_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('additional_notes', sa.Text(), nullable=True),
        sa.Column('is_matched', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('matched_offer_id', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['matched_offer_id'], ['flight_companion_offers.id'], ),
    )
    op.create_index('ix_flight_companion_requests_id', 'flight_companion_requests', ['id'])
    op.create_index('ix_flight_companion_requests_user_id', 'flight_companion_requests', ['user_id'])

    op.create_table(
        'pickup_offers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('airport', sa.String(length=10), nullable=False),
        sa.Column('vehicle_type', sa.String(length=100), nullable=True),
        sa.Column('max_passengers', sa.Integer(), nullable=False, server_default='4'),
        sa.Column('can_handle_luggage', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('service_area', sa.String(length=200), nullable=True),
        sa.Column('base_rate', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('languages', sa.String(length=100), nullable=True),
        sa.Column('additional_services', sa.String(length=500), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('total_pickups', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average_rating', sa.Numeric(precision=3, scale=2), nullable=False, server_default='0'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
    )
    op.create_index('ix_pickup_offers_id', 'pickup_offers', ['id'])
    op.create_index('ix_pickup_offers_user_id', 'pickup_offers', ['user_id'])
    op.create_index('idx_pickup_offers_airport_capacity', 'pickup_offers', ['airport', 'max_passengers'])

    op.create_table(
        'pickup_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('flight_number', sa.String(length=100), nullable=False),
        sa.Column('arrival_date', sa.Date(), nullable=False),
        sa.Column('arrival_time', sa.Time(), nullable=False),
        sa.Column('airport', sa.String(length=10), nullable=False),
        sa.Column('destination_address', sa.String(length=200), nullable=False),
        sa.Column('passenger_name', sa.String(length=100), nullable=True),
        sa.Column('passenger_phone', sa.String(length=20), nullable=True),
        sa.Column('passenger_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('has_luggage', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('special_requests', sa.String(length=500), nullable=True),
        sa.Column('offered_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_matched', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('matched_offer_id', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['matched_offer_id'], ['pickup_offers.id'], ),
    )
    op.create_index('ix_pickup_requests_id', 'pickup_requests', ['id'])
    op.create_index('ix_pickup_requests_user_id', 'pickup_requests', ['user_id'])
    op.create_index('ix_pickup_requests_airport', 'pickup_requests', ['airport'])


def downgrade() -> None:
    """Drop marketplace tables in dependency order."""
    op.drop_table('pickup_requests')
    op.drop_table('pickup_offers')
    op.drop_table('flight_companion_requests')
    op.drop_table('flight_companion_offers')
    op.drop_table('users')
