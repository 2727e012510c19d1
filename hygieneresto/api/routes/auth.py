"""Login, self registration and token verification endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from hygieneresto.core.config import Settings
from hygieneresto.core.deps import DbSession, get_bearer_token, get_settings
from hygieneresto.core.services.auth_service import (
    login_service,
    register_service,
    verify_token_service,
)
from hygieneresto.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    VerifyTokenResponse,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/login",
    summary="Log in",
    description="Exchange email and password for a bearer token and the user profile.",
)
async def login(
    body: LoginRequest,
    db: DbSession,
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    return await login_service(db, body.email, body.password, settings)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register an account",
    description="Self registration of an admin_client (or an employer joining an existing establishment).",
)
async def register(
    body: RegisterRequest,
    db: DbSession,
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    return await register_service(db, body, settings)


@router.api_route(
    "/verify-token",
    methods=["GET", "POST"],
    summary="Verify a bearer token",
    description="Validate the token sent as `Authorization: Bearer` or `x-auth-token` and return the fresh profile.",
)
async def verify_token(
    token: Annotated[str | None, Depends(get_bearer_token)],
    db: DbSession,
    settings: Annotated[Settings, Depends(get_settings)],
) -> VerifyTokenResponse:
    return await verify_token_service(db, token, settings)
