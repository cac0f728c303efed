"""
Database Models
"""

from app.models.user import User
from app.models.flight_companion import FlightCompanionRequest, FlightCompanionOffer
from app.models.pickup import PickupRequest, PickupOffer

__all__ = [
    "User",
    "FlightCompanionRequest",
    "FlightCompanionOffer",
    "PickupRequest",
    "PickupOffer",
]
