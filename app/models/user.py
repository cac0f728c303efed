"""
User Model
Marketplace members: travelers posting requests and providers posting offers
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    """
    Represents a marketplace member

    Only the fields the matching engine reads are modelled here; reputation
    (rating, total_ratings, is_verified, created_at) is maintained by the
    rating and verification flows and is read-only for matching.
    """
    __tablename__ = "users"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Identity
    first_name = Column(String(50), nullable=False, default="")
    last_name = Column(String(50), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True, index=True)

    # Preferences
    preferred_language = Column(String(50), nullable=True, default="English")  # "English", "Chinese"

    # Reputation
    is_verified = Column(Boolean, nullable=False, default=False)
    rating = Column(Numeric(3, 2), nullable=False, default=0)  # 0.00 to 5.00
    total_ratings = Column(Integer, nullable=False, default=0)

    # Status
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', rating={self.rating})>"
