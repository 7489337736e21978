"""SQLAlchemy model for routes between airports."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, enum_values, utcnow


class RouteStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Route(Base):
    """Directed connection between a departure and an arrival airport."""

    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    departure_airport_id = Column(
        Integer,
        ForeignKey("airports.id"),
        nullable=False,
        index=True,
    )
    arrival_airport_id = Column(
        Integer,
        ForeignKey("airports.id"),
        nullable=False,
        index=True,
    )
    distance = Column(Integer, nullable=True)
    duration = Column(String(20), nullable=True)
    status = Column(
        SqlEnum(RouteStatus, name="route_status", values_callable=enum_values),
        nullable=False,
        default=RouteStatus.ACTIVE,
    )
    base_price = Column(Numeric(10, 2), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint(
            "departure_airport_id",
            "arrival_airport_id",
            name="uq_routes_departure_arrival",
        ),
        CheckConstraint(
            "departure_airport_id <> arrival_airport_id",
            name="ck_routes_distinct_airports",
        ),
    )

    departure_airport = relationship(
        "Airport",
        foreign_keys=[departure_airport_id],
        lazy="joined",
    )
    arrival_airport = relationship(
        "Airport",
        foreign_keys=[arrival_airport_id],
        lazy="joined",
    )
    flights = relationship("Flight", back_populates="route")


__all__ = ["Route", "RouteStatus"]
