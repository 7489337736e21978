"""Authentication controller providing registration and login endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from app.controllers.dependencies import AuthServiceDep
from app.views import AuthResponse, LoginRequest, RegisterRequest, RegisterResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    payload: RegisterRequest,
    service: AuthServiceDep,
) -> RegisterResponse:
    """Create a user, grant the default role and open a passenger profile."""

    return await service.register(payload)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    service: AuthServiceDep,
) -> AuthResponse:
    """Validate credentials and return the user with their roles."""

    return await service.login(payload.email, payload.password)
