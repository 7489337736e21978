"""Pydantic schemas for flight crew assignments and crew analytics."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.flight import CrewPosition


class FlightCrewCreateRequest(BaseModel):
    flight_id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    position: CrewPosition
    notes: Optional[str] = Field(None, max_length=2000)


class FlightCrewUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    flight_id: Optional[int] = Field(None, ge=1)
    user_id: Optional[int] = Field(None, ge=1)
    position: Optional[CrewPosition] = None
    notes: Optional[str] = Field(None, max_length=2000)


class FlightCrewFilters(BaseModel):
    flight_id: Optional[int] = None
    user_id: Optional[int] = None
    position: Optional[CrewPosition] = None
    flight_number: Optional[str] = None
    crew_name: Optional[str] = None


class FlightCrewResponse(BaseModel):
    id: int
    flight_id: int
    flight_number: Optional[str] = None
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    position: CrewPosition
    notes: Optional[str] = None
    assigned_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CrewAvailabilityRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    flight_id: Optional[int] = Field(None, ge=1)
    position: Optional[CrewPosition] = None


class CurrentFlight(BaseModel):
    flight_id: int
    flight_number: str
    scheduled_departure: datetime
    scheduled_arrival: datetime


class CrewAvailabilityResponse(BaseModel):
    user_id: int
    name: str
    position: CrewPosition
    is_available: bool
    current_flight: Optional[CurrentFlight] = None
    next_available: datetime
    total_flight_hours: float
    rest_hours_required: float


class CrewStatisticsFilters(BaseModel):
    user_id: Optional[int] = None
    position: Optional[CrewPosition] = None
    flight_id: Optional[int] = None


class ActiveCrewMember(BaseModel):
    user_id: int
    name: str
    position: CrewPosition
    flight_count: int


class CrewEfficiency(BaseModel):
    user_id: int
    name: str
    position: CrewPosition
    efficiency_score: float
    on_time_performance: float


class CrewStatisticsResponse(BaseModel):
    period: str = "all_time"
    total_crew_members: int
    total_flights_served: int
    average_flights_per_crew: float
    crew_by_position: dict[CrewPosition, int]
    most_active_crew: list[ActiveCrewMember]
    crew_efficiency: list[CrewEfficiency]


__all__ = [
    "FlightCrewCreateRequest",
    "FlightCrewUpdateRequest",
    "FlightCrewFilters",
    "FlightCrewResponse",
    "CrewAvailabilityRequest",
    "CurrentFlight",
    "CrewAvailabilityResponse",
    "CrewStatisticsFilters",
    "ActiveCrewMember",
    "CrewEfficiency",
    "CrewStatisticsResponse",
]
