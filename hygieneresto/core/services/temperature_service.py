"""Temperature readings, scoped to the establishment of the caller."""

from collections.abc import Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hygieneresto.core.exceptions import (
    EstablishmentAccessDeniedError,
    InvalidRecordOwnerError,
    MissingEstablishmentError,
    TemperatureRecordNotFoundError,
)
from hygieneresto.models.enums import UserRole
from hygieneresto.models.temperature_record import TemperatureRecord
from hygieneresto.models.user import User
from hygieneresto.schemas.temperature import (
    AdminClientTemperatureCreate,
    TemperatureRecordCreate,
)


def _establishment_of(user: User) -> str:
    siret = user.establishment_siret
    if not siret:
        raise MissingEstablishmentError
    return siret


async def _require_employee_of(db: AsyncSession, siret: str, user_id: int) -> User:
    employee = await db.get(User, user_id)
    if (
        employee is None
        or employee.role is not UserRole.employer
        or employee.admin_client_siret != siret
    ):
        raise EstablishmentAccessDeniedError(
            "The user given is not an employee of your establishment."
        )
    return employee


async def _owner_siret(db: AsyncSession, user_id: int) -> str:
    owner = await db.get(User, user_id)
    siret = owner.establishment_siret if owner is not None else None
    if not siret:
        raise InvalidRecordOwnerError
    return siret


async def _get_record(db: AsyncSession, record_id: int) -> TemperatureRecord:
    record = await db.get(TemperatureRecord, record_id)
    if record is None:
        raise TemperatureRecordNotFoundError
    return record


async def list_all_temperatures_service(db: AsyncSession) -> Sequence[TemperatureRecord]:
    result = await db.execute(
        select(TemperatureRecord).order_by(
            TemperatureRecord.timestamp.desc(), TemperatureRecord.id.desc()
        )
    )
    return result.scalars().all()


async def list_establishment_temperatures_service(
    db: AsyncSession, admin_client: User
) -> Sequence[TemperatureRecord]:
    """Readings taken by the employees of an admin client's establishment."""
    siret = _establishment_of(admin_client)
    result = await db.execute(
        select(TemperatureRecord)
        .join(User, TemperatureRecord.user_id == User.id)
        .where(
            TemperatureRecord.siret_etablissement == siret,
            User.role == UserRole.employer,
        )
        .order_by(TemperatureRecord.timestamp.desc(), TemperatureRecord.id.desc())
    )
    return result.scalars().all()


async def list_employee_temperatures_service(
    db: AsyncSession, employee: User
) -> Sequence[TemperatureRecord]:
    siret = _establishment_of(employee)
    result = await db.execute(
        select(TemperatureRecord)
        .where(
            TemperatureRecord.user_id == employee.id,
            TemperatureRecord.siret_etablissement == siret,
        )
        .order_by(TemperatureRecord.timestamp.desc(), TemperatureRecord.id.desc())
    )
    return result.scalars().all()


async def create_employee_temperature_service(
    db: AsyncSession, employee: User, data: TemperatureRecordCreate
) -> TemperatureRecord:
    record = TemperatureRecord(
        user_id=employee.id,
        siret_etablissement=_establishment_of(employee),
        **data.model_dump(),
    )
    db.add(record)
    await db.flush()
    await db.refresh(record)
    logger.info(f"Employee {employee.id} recorded temperature {record.id}")
    return record


async def update_employee_temperature_service(
    db: AsyncSession, employee: User, record_id: int, data: TemperatureRecordCreate
) -> TemperatureRecord:
    """Replace a reading. Employees may only edit their own readings."""
    siret = _establishment_of(employee)
    record = await _get_record(db, record_id)
    if record.user_id != employee.id or record.siret_etablissement != siret:
        raise EstablishmentAccessDeniedError(
            "This temperature record does not belong to you."
        )
    for field, value in data.model_dump().items():
        setattr(record, field, value)
    await db.flush()
    await db.refresh(record)
    return record


async def create_establishment_temperature_service(
    db: AsyncSession, admin_client: User, data: AdminClientTemperatureCreate
) -> TemperatureRecord:
    """Record a reading on behalf of one of the admin client's employees."""
    siret = _establishment_of(admin_client)
    await _require_employee_of(db, siret, data.user_id)

    record = TemperatureRecord(
        siret_etablissement=siret,
        **data.model_dump(),
    )
    db.add(record)
    await db.flush()
    await db.refresh(record)
    logger.info(f"Admin client {admin_client.id} recorded temperature {record.id}")
    return record


async def delete_establishment_temperature_service(
    db: AsyncSession, admin_client: User, record_id: int
) -> None:
    siret = _establishment_of(admin_client)
    record = await _get_record(db, record_id)
    if record.siret_etablissement != siret:
        raise EstablishmentAccessDeniedError(
            "This temperature record does not belong to your establishment."
        )
    await db.delete(record)
    await db.flush()
    logger.info(f"Admin client {admin_client.id} deleted temperature {record_id}")


async def update_establishment_temperature_service(
    db: AsyncSession,
    admin_client: User,
    record_id: int,
    data: AdminClientTemperatureCreate,
) -> TemperatureRecord:
    """Replace a reading of the establishment, possibly moving it to another employee."""
    siret = _establishment_of(admin_client)
    record = await _get_record(db, record_id)
    if record.siret_etablissement != siret:
        raise EstablishmentAccessDeniedError(
            "This temperature record does not belong to your establishment."
        )
    await _require_employee_of(db, siret, data.user_id)

    for field, value in data.model_dump().items():
        setattr(record, field, value)
    await db.flush()
    await db.refresh(record)
    logger.info(f"Admin client {admin_client.id} updated temperature {record_id}")
    return record


# Super admin: any establishment. The SIRET always follows the owner.


async def create_temperature_service(
    db: AsyncSession, data: AdminClientTemperatureCreate
) -> TemperatureRecord:
    record = TemperatureRecord(
        siret_etablissement=await _owner_siret(db, data.user_id),
        **data.model_dump(),
    )
    db.add(record)
    await db.flush()
    await db.refresh(record)
    logger.info(f"Super admin recorded temperature {record.id} for user {data.user_id}")
    return record


async def update_temperature_service(
    db: AsyncSession, record_id: int, data: AdminClientTemperatureCreate
) -> TemperatureRecord:
    record = await _get_record(db, record_id)
    siret = await _owner_siret(db, data.user_id)

    for field, value in data.model_dump().items():
        setattr(record, field, value)
    record.siret_etablissement = siret
    await db.flush()
    await db.refresh(record)
    logger.info(f"Super admin updated temperature {record_id}")
    return record


async def delete_temperature_service(db: AsyncSession, record_id: int) -> None:
    record = await _get_record(db, record_id)
    await db.delete(record)
    await db.flush()
    logger.info(f"Super admin deleted temperature {record_id}")
