"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_session
from app.models.base import utcnow
from app.services import AuthService, FlightCrewService, RouteService

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_clock() -> Callable[[], datetime]:
    """Source of the current time for availability checks."""

    return utcnow


ClockDep = Annotated[Callable[[], datetime], Depends(get_clock)]


def get_auth_service(session: SessionDep) -> AuthService:
    return AuthService(session)


def get_flight_crew_service(session: SessionDep, clock: ClockDep) -> FlightCrewService:
    return FlightCrewService(session, clock=clock)


def get_route_service(session: SessionDep) -> RouteService:
    return RouteService(session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
FlightCrewServiceDep = Annotated[FlightCrewService, Depends(get_flight_crew_service)]
RouteServiceDep = Annotated[RouteService, Depends(get_route_service)]


__all__ = [
    "SessionDep",
    "ClockDep",
    "get_clock",
    "get_auth_service",
    "get_flight_crew_service",
    "get_route_service",
    "AuthServiceDep",
    "FlightCrewServiceDep",
    "RouteServiceDep",
]
