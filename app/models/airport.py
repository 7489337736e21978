"""SQLAlchemy models for airport reference data."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base


class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    country = Column(String(120), nullable=False, index=True)

    airports = relationship("Airport", back_populates="city")


class Airport(Base):
    __tablename__ = "airports"

    id = Column(Integer, primary_key=True, index=True)
    iata_code = Column(String(3), unique=True, nullable=False, index=True)
    icao_code = Column(String(4), nullable=True)
    name = Column(String(120), nullable=False)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)

    city = relationship("City", back_populates="airports", lazy="joined")


__all__ = ["City", "Airport"]
