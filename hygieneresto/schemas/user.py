"""User schemas: the session profile and the user management payloads."""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Self

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from hygieneresto.models.enums import UserRole

if TYPE_CHECKING:
    from hygieneresto.models.user import User

SIRET_PATTERN = r"^\d{14}$"


class UserProfile(BaseModel):
    """Profile returned by login, registration and token verification.

    Invariants: an ``admin_client`` always carries its own ``siret``; an
    ``employer`` always carries the ``admin_client_siret`` of its establishment.
    """

    id: Annotated[int, Field(description="User ID")]
    email: Annotated[str, Field(description="Login email")]
    role: Annotated[UserRole, Field(description="Account role")]
    company_name: Annotated[
        str | None, Field(description="Establishment name")
    ] = None
    siret: Annotated[
        str | None, Field(description="Own SIRET (admin_client only)")
    ] = None
    admin_client_siret: Annotated[
        str | None, Field(description="SIRET of the owning admin_client (employer only)")
    ] = None
    logo_url: Annotated[str | None, Field(description="Establishment logo")] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_role_scope(self) -> Self:
        if self.role is UserRole.admin_client and not self.siret:
            raise ValueError("admin_client profile requires a siret")
        if self.role is UserRole.employer and not self.admin_client_siret:
            raise ValueError("employer profile requires an admin_client_siret")
        return self

    @property
    def establishment_siret(self) -> str | None:
        """SIRET whose records this user works on."""
        match self.role:
            case UserRole.admin_client:
                return self.siret
            case UserRole.employer:
                return self.admin_client_siret
            case UserRole.super_admin:
                return None

    @classmethod
    def from_user(cls, user: "User") -> "UserProfile":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            company_name=user.nom_entreprise,
            siret=user.siret if user.role is UserRole.admin_client else None,
            admin_client_siret=(
                user.admin_client_siret if user.role is UserRole.employer else None
            ),
            logo_url=user.logo_url,
        )


class UserOut(BaseModel):
    """Full user record as listed by the management endpoints."""

    id: int
    email: str
    role: UserRole
    nom_entreprise: str
    nom_client: str
    prenom_client: str
    telephone: str | None = None
    adresse: str | None = None
    siret: str | None = None
    admin_client_siret: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Account created by a super admin. Any role may be created here."""

    nom_entreprise: Annotated[str, Field(min_length=1, description="Company name")]
    nom_client: Annotated[str, Field(min_length=1, description="Last name")]
    prenom_client: Annotated[str, Field(min_length=1, description="First name")]
    email: EmailStr
    password: Annotated[str, Field(min_length=1)]
    role: UserRole
    telephone: str | None = None
    adresse: str | None = None
    siret: str | None = None
    admin_client_siret: str | None = None
    logo_url: str | None = None

    model_config = ConfigDict(extra="forbid")


class UserUpdate(BaseModel):
    """Partial update of an account. The role cannot be changed."""

    nom_entreprise: Annotated[str | None, Field(min_length=1)] = None
    nom_client: Annotated[str | None, Field(min_length=1)] = None
    prenom_client: Annotated[str | None, Field(min_length=1)] = None
    email: EmailStr | None = None
    password: Annotated[str | None, Field(min_length=1)] = None
    telephone: str | None = None
    adresse: str | None = None
    siret: str | None = None
    admin_client_siret: str | None = None
    logo_url: str | None = None

    model_config = ConfigDict(extra="forbid")


class EmployeeCreate(BaseModel):
    """Employee account created by an admin_client inside its own establishment."""

    nom_client: Annotated[str, Field(min_length=1, description="Last name")]
    prenom_client: Annotated[str, Field(min_length=1, description="First name")]
    email: EmailStr
    password: Annotated[str, Field(min_length=1)]
    telephone: str | None = None
    adresse: str | None = None

    model_config = ConfigDict(extra="forbid")


class EmployeeUpdate(BaseModel):
    nom_client: Annotated[str | None, Field(min_length=1)] = None
    prenom_client: Annotated[str | None, Field(min_length=1)] = None
    email: EmailStr | None = None
    password: Annotated[str | None, Field(min_length=1)] = None
    telephone: str | None = None
    adresse: str | None = None

    model_config = ConfigDict(extra="forbid")
