from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hygieneresto.models.base import Base, TimestampMixin
from hygieneresto.models.enums import UserRole


class User(Base, TimestampMixin):
    """A login account.

    ``admin_client`` accounts own an establishment identified by ``siret``.
    ``employer`` accounts belong to one establishment through
    ``admin_client_siret``. ``super_admin`` accounts carry neither.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        index=True,
    )
    nom_entreprise: Mapped[str] = mapped_column(String(255))
    nom_client: Mapped[str] = mapped_column(String(255))
    prenom_client: Mapped[str] = mapped_column(String(255))
    telephone: Mapped[str | None] = mapped_column(String(32), default=None)
    adresse: Mapped[str | None] = mapped_column(String(512), default=None)
    siret: Mapped[str | None] = mapped_column(
        String(14), unique=True, index=True, default=None
    )
    admin_client_siret: Mapped[str | None] = mapped_column(
        String(14), index=True, default=None
    )
    logo_url: Mapped[str | None] = mapped_column(String(1024), default=None)

    @property
    def establishment_siret(self) -> str | None:
        """SIRET of the establishment this account acts for, if any."""
        if self.role is UserRole.admin_client:
            return self.siret
        if self.role is UserRole.employer:
            return self.admin_client_siret
        return None
