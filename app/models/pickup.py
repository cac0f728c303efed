"""
Pickup Models
Airport pickup requests and the drivers offering them
"""

from sqlalchemy import Column, Integer, String, DateTime, Date, Time, Numeric, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class PickupRequest(Base):
    """
    A traveler asking to be collected at an airport

    Arrival is stored as separate date and time columns; the repository
    combines them into one UTC timestamp for matching.
    """
    __tablename__ = "pickup_requests"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Owner
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user = relationship("User")

    # Arrival
    flight_number = Column(String(100), nullable=False)
    arrival_date = Column(Date, nullable=False)
    arrival_time = Column(Time, nullable=False)
    airport = Column(String(10), nullable=False, index=True)  # AKL
    destination_address = Column(String(200), nullable=False)

    # Passengers
    passenger_name = Column(String(100), nullable=True)
    passenger_phone = Column(String(20), nullable=True)
    passenger_count = Column(Integer, nullable=False, default=1)
    has_luggage = Column(Boolean, nullable=False, default=True)
    special_requests = Column(String(500), nullable=True)  # "Elderly passengers", "Large luggage"

    # Payment
    offered_amount = Column(Numeric(10, 2), nullable=False, default=0)

    # Status Tracking
    is_active = Column(Boolean, nullable=False, default=True)
    is_matched = Column(Boolean, nullable=False, default=False)
    matched_offer_id = Column(Integer, ForeignKey("pickup_offers.id"), nullable=True)

    # Concurrency
    version = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<PickupRequest(id={self.id}, airport='{self.airport}', matched={self.is_matched})>"


class PickupOffer(Base):
    """
    A driver offering airport pickups
    """
    __tablename__ = "pickup_offers"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Owner
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user = relationship("User")

    # Vehicle and Service
    airport = Column(String(10), nullable=False)
    vehicle_type = Column(String(100), nullable=True)  # "Sedan", "SUV", "Van"
    max_passengers = Column(Integer, nullable=False, default=4)
    can_handle_luggage = Column(Boolean, nullable=False, default=True)
    service_area = Column(String(200), nullable=True)  # "Auckland City", "North Shore", "All Auckland"
    base_rate = Column(Numeric(10, 2), nullable=False, default=0)
    languages = Column(String(100), nullable=True)
    additional_services = Column(String(500), nullable=True)

    # Status Tracking
    is_available = Column(Boolean, nullable=False, default=True)

    # Experience
    total_pickups = Column(Integer, nullable=False, default=0)
    average_rating = Column(Numeric(3, 2), nullable=False, default=0)

    # Concurrency
    version = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        # Candidate lookup by airport and capacity
        Index('idx_pickup_offers_airport_capacity', 'airport', 'max_passengers'),
    )

    def __repr__(self):
        return f"<PickupOffer(id={self.id}, airport='{self.airport}', available={self.is_available})>"
