"""Pydantic schemas for routes and route analytics."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.route import RouteStatus


class RouteCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    departure_airport_id: int = Field(..., ge=1)
    arrival_airport_id: int = Field(..., ge=1)
    distance: Optional[int] = Field(None, ge=1)
    duration: Optional[str] = Field(None, max_length=20)
    status: RouteStatus = RouteStatus.ACTIVE
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None


class RouteUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    departure_airport_id: Optional[int] = Field(None, ge=1)
    arrival_airport_id: Optional[int] = Field(None, ge=1)
    distance: Optional[int] = Field(None, ge=1)
    duration: Optional[str] = Field(None, max_length=20)
    status: Optional[RouteStatus] = None
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None


class RouteFilters(BaseModel):
    name: Optional[str] = None
    departure_airport: Optional[str] = None
    arrival_airport: Optional[str] = None
    departure_airport_id: Optional[int] = None
    arrival_airport_id: Optional[int] = None
    status: Optional[RouteStatus] = None
    min_distance: Optional[int] = Field(None, ge=1)
    max_distance: Optional[int] = Field(None, ge=1)

    @model_validator(mode="after")
    def check_distance_bounds(self) -> "RouteFilters":
        if (
            self.min_distance is not None
            and self.max_distance is not None
            and self.min_distance > self.max_distance
        ):
            raise ValueError("min_distance cannot exceed max_distance")
        return self


class AirportSummary(BaseModel):
    airport_id: int
    iata_code: str
    airport_name: str
    city_name: str
    country: str


class RouteResponse(BaseModel):
    id: int
    name: str
    departure_airport_id: int
    departure_airport: AirportSummary
    arrival_airport_id: int
    arrival_airport: AirportSummary
    distance: Optional[int] = None
    duration: Optional[str] = None
    status: RouteStatus
    base_price: Optional[float] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RouteStatisticsFilters(BaseModel):
    departure_country: Optional[str] = None
    arrival_country: Optional[str] = None
    status: Optional[RouteStatus] = None


class RouteStatisticsResponse(BaseModel):
    route_id: int
    route_name: str
    departure_airport: str
    arrival_airport: str
    total_flights: int
    total_passengers: int
    average_load_factor: float
    average_price: float
    total_revenue: float
    on_time_performance: float
    most_popular_month: Optional[str] = None
    busiest_day_of_week: Optional[str] = None


class PopularRoutesFilters(BaseModel):
    limit: int = Field(default=10, ge=1, le=100)
    departure_country: Optional[str] = None
    arrival_country: Optional[str] = None


class PopularRouteResponse(BaseModel):
    route_id: int
    route_name: str
    departure_airport: str
    arrival_airport: str
    flight_count: int
    passenger_count: int
    average_load_factor: float
    total_revenue: float
    popularity_score: float


__all__ = [
    "RouteCreateRequest",
    "RouteUpdateRequest",
    "RouteFilters",
    "AirportSummary",
    "RouteResponse",
    "RouteStatisticsFilters",
    "RouteStatisticsResponse",
    "PopularRoutesFilters",
    "PopularRouteResponse",
]
