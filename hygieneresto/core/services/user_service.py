"""User management: global accounts for super admins, employees for admin clients."""

from collections.abc import Sequence

from loguru import logger
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hygieneresto.core.exceptions import (
    EmailAlreadyUsedError,
    EmployeeNotFoundError,
    EmptyUpdateError,
    EstablishmentHasEmployeesError,
    InvalidSiretError,
    MissingEstablishmentError,
    SiretAlreadyUsedError,
    UnknownAdminClientError,
    UserNotFoundError,
)
from hygieneresto.core.security import hash_password
from hygieneresto.core.services.auth_service import (
    get_admin_client_by_siret,
    get_user_by_email,
    insert_user,
    is_valid_siret,
    siret_in_use,
    validate_role_scope,
)
from hygieneresto.models.enums import UserRole
from hygieneresto.models.temperature_record import TemperatureRecord
from hygieneresto.models.traceability_record import TraceabilityRecord
from hygieneresto.models.user import User
from hygieneresto.schemas.user import (
    EmployeeCreate,
    EmployeeUpdate,
    UserCreate,
    UserUpdate,
)


async def get_user_by_id_service(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError
    return user


async def list_users_service(db: AsyncSession) -> Sequence[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return result.scalars().all()


async def create_user_service(
    db: AsyncSession, data: UserCreate, bcrypt_rounds: int
) -> User:
    """Create an account of any role. No password policy applies here."""
    if await get_user_by_email(db, data.email) is not None:
        raise EmailAlreadyUsedError
    siret, admin_client_siret = await validate_role_scope(
        db, data.role, data.siret, data.admin_client_siret
    )

    user = User(
        email=data.email.strip().lower(),
        password_hash=hash_password(data.password, bcrypt_rounds),
        role=data.role,
        nom_entreprise=data.nom_entreprise,
        nom_client=data.nom_client,
        prenom_client=data.prenom_client,
        telephone=data.telephone or None,
        adresse=data.adresse or None,
        siret=siret,
        admin_client_siret=admin_client_siret,
        logo_url=data.logo_url,
    )
    await insert_user(db, user)
    logger.info(f"Super admin created user {user.id} ({user.role.value})")
    return user


async def _apply_common_update(
    db: AsyncSession,
    user: User,
    changes: dict,
    bcrypt_rounds: int,
) -> None:
    if not changes:
        raise EmptyUpdateError

    if "email" in changes:
        email = changes.pop("email").strip().lower()
        existing = await get_user_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise EmailAlreadyUsedError
        user.email = email
    if "password" in changes:
        user.password_hash = hash_password(changes.pop("password"), bcrypt_rounds)
    for field, value in changes.items():
        setattr(user, field, value)


async def update_user_service(
    db: AsyncSession, user_id: int, data: UserUpdate, bcrypt_rounds: int
) -> User:
    """Partial update of any account. The role never changes."""
    user = await get_user_by_id_service(db, user_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    # Establishment fields only make sense for the role that owns them
    siret = changes.pop("siret", None)
    admin_client_siret = changes.pop("admin_client_siret", None)
    if siret is not None and user.role is UserRole.admin_client:
        if not is_valid_siret(siret):
            raise InvalidSiretError("The SIRET must contain 14 digits.")
        if await siret_in_use(db, siret, exclude_id=user.id):
            raise SiretAlreadyUsedError
        changes["siret"] = siret
    if admin_client_siret is not None and user.role is UserRole.employer:
        if not is_valid_siret(admin_client_siret):
            raise InvalidSiretError("The admin client SIRET must contain 14 digits.")
        if await get_admin_client_by_siret(db, admin_client_siret) is None:
            raise UnknownAdminClientError
        changes["admin_client_siret"] = admin_client_siret

    previous_siret = user.siret
    await _apply_common_update(db, user, changes, bcrypt_rounds)
    if previous_siret and user.siret != previous_siret:
        await _move_establishment(db, previous_siret, user.siret)
    await db.flush()
    await db.refresh(user)
    logger.info(f"Updated user {user.id}")
    return user


async def _move_establishment(db: AsyncSession, old_siret: str, new_siret: str) -> None:
    """Carry the employees and readings of an establishment over to its new SIRET."""
    moved = await db.execute(
        update(User)
        .where(User.role == UserRole.employer, User.admin_client_siret == old_siret)
        .values(admin_client_siret=new_siret)
    )
    for model in (TemperatureRecord, TraceabilityRecord):
        await db.execute(
            update(model)
            .where(model.siret_etablissement == old_siret)
            .values(siret_etablissement=new_siret)
        )
    logger.info(
        f"Establishment {old_siret} moved to {new_siret} with {moved.rowcount} employees"
    )


async def _delete_user_records(db: AsyncSession, user_id: int) -> None:
    await db.execute(delete(TemperatureRecord).where(TemperatureRecord.user_id == user_id))
    await db.execute(
        delete(TraceabilityRecord).where(TraceabilityRecord.user_id == user_id)
    )


async def delete_user_service(db: AsyncSession, user_id: int) -> None:
    """Delete an account together with the records it owns.

    Refused for an admin client whose establishment still has employees.
    """
    user = await get_user_by_id_service(db, user_id)
    if user.role is UserRole.admin_client and user.siret:
        employees = await db.scalar(
            select(func.count())
            .select_from(User)
            .where(
                User.role == UserRole.employer, User.admin_client_siret == user.siret
            )
        )
        if employees:
            raise EstablishmentHasEmployeesError
    await _delete_user_records(db, user.id)
    await db.delete(user)
    await db.flush()
    logger.info(f"Deleted user {user_id}")


# Employees of an admin client


def _require_establishment(admin_client: User) -> str:
    if not admin_client.siret:
        raise MissingEstablishmentError
    return admin_client.siret


async def list_employees_service(db: AsyncSession, admin_client: User) -> Sequence[User]:
    siret = _require_establishment(admin_client)
    result = await db.execute(
        select(User)
        .where(User.role == UserRole.employer, User.admin_client_siret == siret)
        .order_by(User.nom_client, User.prenom_client)
    )
    return result.scalars().all()


async def get_employee_service(
    db: AsyncSession, admin_client: User, employee_id: int
) -> User:
    """An employee of the caller's establishment, or 404."""
    siret = _require_establishment(admin_client)
    employee = await db.get(User, employee_id)
    if (
        employee is None
        or employee.role is not UserRole.employer
        or employee.admin_client_siret != siret
    ):
        raise EmployeeNotFoundError
    return employee


async def create_employee_service(
    db: AsyncSession, admin_client: User, data: EmployeeCreate, bcrypt_rounds: int
) -> User:
    siret = _require_establishment(admin_client)
    if await get_user_by_email(db, data.email) is not None:
        raise EmailAlreadyUsedError

    employee = User(
        email=data.email.strip().lower(),
        password_hash=hash_password(data.password, bcrypt_rounds),
        role=UserRole.employer,
        nom_entreprise=admin_client.nom_entreprise,
        nom_client=data.nom_client,
        prenom_client=data.prenom_client,
        telephone=data.telephone or None,
        adresse=data.adresse or None,
        admin_client_siret=siret,
    )
    await insert_user(db, employee)
    logger.info(f"Admin client {admin_client.id} created employee {employee.id}")
    return employee


async def update_employee_service(
    db: AsyncSession,
    admin_client: User,
    employee_id: int,
    data: EmployeeUpdate,
    bcrypt_rounds: int,
) -> User:
    employee = await get_employee_service(db, admin_client, employee_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    await _apply_common_update(db, employee, changes, bcrypt_rounds)
    await db.flush()
    await db.refresh(employee)
    return employee


async def delete_employee_service(
    db: AsyncSession, admin_client: User, employee_id: int
) -> None:
    employee = await get_employee_service(db, admin_client, employee_id)
    await _delete_user_records(db, employee.id)
    await db.delete(employee)
    await db.flush()
    logger.info(f"Admin client {admin_client.id} deleted employee {employee_id}")
