"""Business services used by the controllers."""

from .auth import AuthService
from .errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from .flight_crew import FlightCrewService
from .routes import RouteService

__all__ = [
    "AuthService",
    "FlightCrewService",
    "RouteService",
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "BadRequestError",
    "UnauthorizedError",
]
