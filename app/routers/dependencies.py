"""
Shared router dependencies
"""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.match_confirmation import MatchConfirmationService
from app.services.match_repository import SqlAlchemyMatchRepository
from app.services.matching_engine import MatchingEngine


def _require_db(db: Session) -> Session:
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return db


def get_matching_engine(db: Session = Depends(get_db)) -> MatchingEngine:
    return MatchingEngine(SqlAlchemyMatchRepository(_require_db(db)))


def get_confirmation_service(db: Session = Depends(get_db)) -> MatchConfirmationService:
    return MatchConfirmationService(_require_db(db))
