"""Error taxonomy raised by the service layer."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for domain failures surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, *, context: Optional[dict[str, Any]] = None):
        self.detail = detail
        self.context = context or {}
        super().__init__(detail)


class NotFoundError(ServiceError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(ServiceError):
    """A uniqueness or state rule would be violated."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class BadRequestError(ServiceError):
    """A domain rule rejects the request."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "bad_request"


class UnauthorizedError(ServiceError):
    """Credentials could not be verified."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "BadRequestError",
    "UnauthorizedError",
]
