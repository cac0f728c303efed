"""
API routers package
"""

from app.routers.flight_companion import router as flight_companion_router
from app.routers.pickup import router as pickup_router
