"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .airport import Airport, City  # noqa: F401
from .flight import CrewPosition, Flight, FlightCrew, FlightStatus  # noqa: F401
from .passenger import Passenger  # noqa: F401
from .route import Route, RouteStatus  # noqa: F401
from .ticket import Ticket, TicketStatus  # noqa: F401
from .user import Permission, Role, User, UserRole  # noqa: F401

__all__ = [
    "Base",
    "User",
    "Role",
    "UserRole",
    "Permission",
    "Passenger",
    "City",
    "Airport",
    "Route",
    "RouteStatus",
    "Flight",
    "FlightCrew",
    "FlightStatus",
    "CrewPosition",
    "Ticket",
    "TicketStatus",
]
