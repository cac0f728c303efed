"""
Travel Assist Matcher - Main Application
FastAPI Entry Point
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse
import structlog

from app.config import settings
from app.database import init_db
from app.middleware import CorrelationIdMiddleware, get_correlation_id
from app.routers import flight_companion_router, pickup_router
from app.services.monitoring import setup_logging


# Structured Logging Setup
def add_correlation_id(logger, method_name, event_dict):
    """Stamp structlog events with the request correlation id."""
    event_dict.setdefault("correlation_id", get_correlation_id())
    return event_dict


structlog.configure(
    processors=[
        add_correlation_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ]
)
logger = structlog.get_logger()

# FastAPI App
app = FastAPI(
    title="Travel Assist Matcher",
    description="Compatibility matching for flight companion and airport pickup requests",
    version="0.1.0",
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None,
)

app.add_middleware(CorrelationIdMiddleware)

# Register routers
app.include_router(flight_companion_router)
app.include_router(pickup_router)


@app.on_event("startup")
async def startup_event():
    """Application Startup"""
    if settings.environment != "testing":
        setup_logging()
    logger.info("startup", environment=settings.environment)

    # Initialize database connection
    init_db()
    logger.info("database_initialized")


@app.on_event("shutdown")
async def shutdown_event():
    """Application Shutdown"""
    logger.info("shutdown")


@app.get("/")
async def root():
    """Root Endpoint"""
    return {
        "message": "Travel Assist Matcher API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """
    Health Check Endpoint
    """
    health_status = {
        "status": "healthy",
        "environment": settings.environment,
        "services": {
            "api": "running",
            "database": "configured" if settings.database_url else "not_configured"
        }
    }

    return JSONResponse(
        content=health_status,
        status_code=200
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development"
    )
