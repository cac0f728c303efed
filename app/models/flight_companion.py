"""
Flight Companion Models
Requests for in-flight assistance and the offers that can fill them
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class FlightCompanionRequest(Base):
    """
    A traveler (or family member) asking for help on a specific flight

    `version` is an optimistic concurrency counter: match confirmation relies
    on it so two concurrent confirmations cannot both succeed.
    """
    __tablename__ = "flight_companion_requests"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Owner
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user = relationship("User")

    # Flight
    flight_number = Column(String(100), nullable=False)
    airline = Column(String(50), nullable=False, default="")
    flight_date = Column(DateTime(timezone=True), nullable=False)
    departure_airport = Column(String(10), nullable=False)  # AKL, PVG, etc.
    arrival_airport = Column(String(10), nullable=False)

    # Traveler
    traveler_name = Column(String(100), nullable=True)  # e.g. "My parents"
    traveler_age = Column(String(20), nullable=True)  # "Elderly", "Adult"
    special_needs = Column(String(500), nullable=True)  # Wheelchair, medical, language help

    # Payment
    offered_amount = Column(Numeric(10, 2), nullable=False, default=0)

    # Status Tracking
    is_active = Column(Boolean, nullable=False, default=True)
    additional_notes = Column(Text, nullable=True)
    is_matched = Column(Boolean, nullable=False, default=False)
    matched_offer_id = Column(Integer, ForeignKey("flight_companion_offers.id"), nullable=True)

    # Concurrency
    version = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return (
            f"<FlightCompanionRequest(id={self.id}, flight='{self.flight_number}', "
            f"matched={self.is_matched})>"
        )


class FlightCompanionOffer(Base):
    """
    A member on a flight offering to help other travelers on it
    """
    __tablename__ = "flight_companion_offers"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Owner
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user = relationship("User")

    # Flight
    flight_number = Column(String(100), nullable=False)
    airline = Column(String(50), nullable=False, default="")
    flight_date = Column(DateTime(timezone=True), nullable=False)
    departure_airport = Column(String(10), nullable=False)
    arrival_airport = Column(String(10), nullable=False)

    # Service
    available_services = Column(String(200), nullable=True)  # "Translation, Navigation, General Help"
    languages = Column(String(50), nullable=True)  # "Chinese, English"
    requested_amount = Column(Numeric(10, 2), nullable=False, default=0)
    additional_info = Column(Text, nullable=True)

    # Status Tracking
    is_available = Column(Boolean, nullable=False, default=True)

    # Experience
    helped_count = Column(Integer, nullable=False, default=0)

    # Concurrency
    version = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        # Candidate lookup by flight and route
        Index('idx_flight_companion_offers_flight', 'flight_number', 'departure_airport', 'arrival_airport'),
    )

    def __repr__(self):
        return (
            f"<FlightCompanionOffer(id={self.id}, flight='{self.flight_number}', "
            f"available={self.is_available})>"
        )
