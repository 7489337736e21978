"""SQLAlchemy models for flights and their crew assignments."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import (
    Column,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, enum_values, utcnow


class FlightStatus(str, Enum):
    SCHEDULED = "scheduled"
    BOARDING = "boarding"
    DEPARTED = "departed"
    DELAYED = "delayed"
    ARRIVED = "arrived"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that mark a finished leg; "completed" is the legacy spelling of "arrived".
COMPLETED_STATUSES = frozenset({FlightStatus.ARRIVED, FlightStatus.COMPLETED})


class CrewPosition(str, Enum):
    PILOT = "pilot"
    CO_PILOT = "co_pilot"
    FLIGHT_ENGINEER = "flight_engineer"
    PURSER = "purser"
    FLIGHT_ATTENDANT = "flight_attendant"


class Flight(Base):
    __tablename__ = "flights"

    id = Column(Integer, primary_key=True, index=True)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False, index=True)
    flight_number = Column(String(10), nullable=False, index=True)
    scheduled_departure = Column(DateTime, nullable=False, index=True)
    scheduled_arrival = Column(DateTime, nullable=False)
    actual_departure = Column(DateTime, nullable=True)
    actual_arrival = Column(DateTime, nullable=True)
    status = Column(
        SqlEnum(FlightStatus, name="flight_status", values_callable=enum_values),
        nullable=False,
        default=FlightStatus.SCHEDULED,
    )

    route = relationship("Route", back_populates="flights")
    crew = relationship("FlightCrew", back_populates="flight")


class FlightCrew(Base):
    """Assignment of one user to one flight in a given position."""

    __tablename__ = "flight_crew"

    id = Column(Integer, primary_key=True, index=True)
    flight_id = Column(
        Integer,
        ForeignKey("flights.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(
        SqlEnum(CrewPosition, name="crew_position", values_callable=enum_values),
        nullable=False,
    )
    notes = Column(Text, nullable=True)
    assigned_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("flight_id", "position", name="uq_flight_crew_flight_position"),
        UniqueConstraint("flight_id", "user_id", name="uq_flight_crew_flight_user"),
    )

    flight = relationship("Flight", back_populates="crew", lazy="joined")
    user = relationship("User", back_populates="crew_assignments", lazy="joined")


__all__ = [
    "Flight",
    "FlightCrew",
    "FlightStatus",
    "CrewPosition",
    "COMPLETED_STATUSES",
]
