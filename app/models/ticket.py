"""SQLAlchemy model for tickets."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SqlEnum, ForeignKey, Integer, Numeric

from app.models.base import Base, enum_values, utcnow


class TicketStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    USED = "used"
    REFUNDED = "refunded"


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    flight_id = Column(Integer, ForeignKey("flights.id"), nullable=False, index=True)
    passenger_id = Column(Integer, ForeignKey("passengers.id"), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(
        SqlEnum(TicketStatus, name="ticket_status", values_callable=enum_values),
        nullable=False,
        default=TicketStatus.ACTIVE,
    )
    created_at = Column(DateTime, nullable=False, default=utcnow)


__all__ = ["Ticket", "TicketStatus"]
