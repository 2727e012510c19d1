"""Authentication request and response schemas."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hygieneresto.models.enums import UserRole
from hygieneresto.schemas.user import UserProfile


class LoginRequest(BaseModel):
    """Credentials posted to ``/auth/login``."""

    email: Annotated[str, Field(min_length=1, description="Login email")]
    password: Annotated[str, Field(min_length=1, description="Plain password")]


class RegisterRequest(BaseModel):
    """Self registration payload posted to ``/auth/register``.

    ``siret`` is required for ``admin_client``; ``admin_client_siret`` is
    required for ``employer``. The role checks live in the auth service so the
    error messages stay specific.
    """

    nom_entreprise: Annotated[str, Field(min_length=1, description="Company name")]
    nom_client: Annotated[str, Field(min_length=1, description="Last name")]
    prenom_client: Annotated[str, Field(min_length=1, description="First name")]
    email: EmailStr
    password: Annotated[str, Field(min_length=1)]
    telephone: str | None = None
    adresse: str | None = None
    siret: str | None = None
    role: UserRole = UserRole.admin_client
    admin_client_siret: str | None = None

    model_config = ConfigDict(extra="ignore")


class AuthResponse(BaseModel):
    """Token issued by login and registration."""

    message: str
    token: str
    user: UserProfile


class VerifyTokenResponse(BaseModel):
    message: str
    user: UserProfile
