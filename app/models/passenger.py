"""SQLAlchemy model for passengers."""

from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class Passenger(Base):
    """Traveller record; registered users get one linked automatically."""

    __tablename__ = "passengers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    passport_number = Column(String(30), nullable=True)
    nationality = Column(String(60), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="passenger")


__all__ = ["Passenger"]
