"""Declarative base shared by all SQLAlchemy models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, matching DateTime columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_values(enum_cls) -> list[str]:
    """Persist enum members by value rather than by name."""

    return [member.value for member in enum_cls]


__all__ = ["Base", "utcnow", "enum_values"]
