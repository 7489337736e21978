"""User registration and credential verification."""

from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models import Passenger, Role, User, UserRole
from app.services.errors import ConflictError, ServiceError, UnauthorizedError
from app.telemetry import increment_login, increment_registration
from app.utils import hash_password, verify_password
from app.views import (
    AuthResponse,
    RegisterRequest,
    RegisterResponse,
    RoleResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)

# Identity fields a passenger profile needs before travel documents can be issued.
PASSENGER_IDENTITY_FIELDS = ("passport_number", "date_of_birth", "phone")

_INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Registers users and verifies their credentials."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _identity_taken(self, email: str, username: str) -> bool:
        result = await self.session.execute(
            select(User.id).where(or_(User.email == email, User.username == username))
        )
        return result.first() is not None

    async def register(self, payload: RegisterRequest) -> RegisterResponse:
        if await self._identity_taken(payload.email, payload.username):
            raise ConflictError("User with this email or username already exists")

        role_name = settings.auth.default_role
        role_result = await self.session.execute(select(Role).where(Role.name == role_name))
        default_role = role_result.scalar_one_or_none()
        if default_role is None:
            raise ServiceError(f"Default role '{role_name}' is not configured")

        missing_fields = [
            field for field in PASSENGER_IDENTITY_FIELDS if getattr(payload, field) is None
        ]
        if missing_fields:
            logger.warning(
                "Registering %s without passenger fields: %s",
                payload.username,
                ", ".join(missing_fields),
            )

        user = User(
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=payload.phone,
            date_of_birth=payload.date_of_birth,
            passport_number=payload.passport_number,
            is_active=True,
        )
        self.session.add(user)

        try:
            await self.session.flush()
            self.session.add(UserRole(user_id=user.id, role_id=default_role.id))
            self.session.add(
                Passenger(
                    user_id=user.id,
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    email=payload.email,
                    phone=payload.phone,
                    passport_number=payload.passport_number,
                    nationality=payload.nationality,
                    date_of_birth=payload.date_of_birth,
                )
            )
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConflictError(
                "User with this email or username already exists"
            ) from exc

        increment_registration()
        logger.info("Registered user %s (id=%s)", user.username, user.id)

        return RegisterResponse(
            user=UserResponse.model_validate(user),
            roles=[RoleResponse.model_validate(default_role)],
            missing_passenger_fields=missing_fields,
        )

    async def login(self, email: str, password: str) -> AuthResponse:
        result = await self.session.execute(
            select(User).where(User.email == email, User.is_active.is_(True))
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            logger.info("Rejected login attempt for %s", email)
            raise UnauthorizedError(_INVALID_CREDENTIALS)

        roles = await self.roles_for(user.id)
        increment_login()

        return AuthResponse(
            user=UserResponse.model_validate(user),
            roles=[RoleResponse.model_validate(role) for role in roles],
        )

    async def roles_for(self, user_id: int) -> list[Role]:
        result = await self.session.execute(
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.id)
        )
        return list(result.scalars().all())


__all__ = ["AuthService", "PASSENGER_IDENTITY_FIELDS"]
