"""SQLAlchemy models for users, roles and their assignments."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class Permission(str, Enum):
    """Closed set of capabilities a role may grant."""

    USERS_READ = "users:read"
    USERS_WRITE = "users:write"
    FLIGHTS_READ = "flights:read"
    FLIGHTS_WRITE = "flights:write"
    CREW_READ = "crew:read"
    CREW_WRITE = "crew:write"
    ROUTES_READ = "routes:read"
    ROUTES_WRITE = "routes:write"
    TICKETS_READ = "tickets:read"
    TICKETS_WRITE = "tickets:write"
    ANALYTICS_READ = "analytics:read"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    phone = Column(String(30), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    passport_number = Column(String(30), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    passenger = relationship("Passenger", back_populates="user", uselist=False)
    crew_assignments = relationship("FlightCrew", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    permissions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class UserRole(Base):
    """Association between users and the roles granted to them."""

    __tablename__ = "user_roles"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    assigned_at = Column(DateTime, nullable=False, default=utcnow)


__all__ = ["User", "Role", "UserRole", "Permission"]
