"""
Database Configuration and Session Management
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings
import logging

logger = logging.getLogger(__name__)

# Create SQLAlchemy engine
engine = None
SessionLocal = None


def driver_url(database_url: str) -> str:
    """Select the psycopg3 driver for plain postgresql:// URLs."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return database_url


def init_db():
    """Initialize database connection"""
    global engine, SessionLocal

    if not settings.database_url:
        logger.warning("DATABASE_URL not configured - database features disabled")
        return

    logger.info("Connecting to database...")
    db_url = driver_url(settings.database_url)

    engine_options = {"pool_pre_ping": True}  # Verify connections before using them
    if not db_url.startswith("sqlite"):
        engine_options.update(pool_size=5, max_overflow=10)

    engine = create_engine(db_url, **engine_options)

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info("Database connection established")


def get_db():
    """
    Dependency for getting database session
    Usage: db: Session = Depends(get_db)

    Returns None if the database is not configured
    """
    if SessionLocal is None:
        logger.warning("Database not configured - matching endpoints unavailable")
        yield None
        return

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Base class for all models
Base = declarative_base()
