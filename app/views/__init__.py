"""Pydantic schemas used as views in the MVC architecture."""

from .auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    RoleResponse,
    UserResponse,
)
from .common import PaginatedResponse, PaginationParams
from .flight_crew import (
    ActiveCrewMember,
    CrewAvailabilityRequest,
    CrewAvailabilityResponse,
    CrewEfficiency,
    CrewStatisticsFilters,
    CrewStatisticsResponse,
    CurrentFlight,
    FlightCrewCreateRequest,
    FlightCrewFilters,
    FlightCrewResponse,
    FlightCrewUpdateRequest,
)
from .routes import (
    AirportSummary,
    PopularRouteResponse,
    PopularRoutesFilters,
    RouteCreateRequest,
    RouteFilters,
    RouteResponse,
    RouteStatisticsFilters,
    RouteStatisticsResponse,
    RouteUpdateRequest,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "RegisterResponse",
    "RoleResponse",
    "UserResponse",
    "PaginatedResponse",
    "PaginationParams",
    "ActiveCrewMember",
    "CrewAvailabilityRequest",
    "CrewAvailabilityResponse",
    "CrewEfficiency",
    "CrewStatisticsFilters",
    "CrewStatisticsResponse",
    "CurrentFlight",
    "FlightCrewCreateRequest",
    "FlightCrewFilters",
    "FlightCrewResponse",
    "FlightCrewUpdateRequest",
    "AirportSummary",
    "PopularRouteResponse",
    "PopularRoutesFilters",
    "RouteCreateRequest",
    "RouteFilters",
    "RouteResponse",
    "RouteStatisticsFilters",
    "RouteStatisticsResponse",
    "RouteUpdateRequest",
]
