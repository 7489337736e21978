"""FastAPI routers acting as controllers in the MVC architecture."""

from . import auth, flight_crew, routes

__all__ = ["auth", "flight_crew", "routes"]
