"""Traceability records for food batches."""

from collections.abc import Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hygieneresto.core.exceptions import (
    EstablishmentAccessDeniedError,
    MissingEstablishmentError,
    TraceabilityRecordNotFoundError,
)
from hygieneresto.models.enums import UserRole
from hygieneresto.models.traceability_record import TraceabilityRecord
from hygieneresto.models.user import User
from hygieneresto.schemas.traceability import TraceabilityRecordCreate


def can_read_establishment(user: User, siret: str) -> bool:
    """Whether ``user`` may list the traceability records of ``siret``."""
    match user.role:
        case UserRole.super_admin:
            return True
        case UserRole.admin_client:
            return user.siret == siret
        case UserRole.employer:
            return user.admin_client_siret == siret


def can_delete_record(user: User, record: TraceabilityRecord) -> bool:
    match user.role:
        case UserRole.super_admin:
            return True
        case UserRole.admin_client:
            return user.siret == record.siret_etablissement
        case UserRole.employer:
            return False


async def add_traceability_record_service(
    db: AsyncSession, user: User, data: TraceabilityRecordCreate
) -> TraceabilityRecord:
    """Store a traced batch under the caller's establishment."""
    siret = user.establishment_siret
    if not siret:
        raise MissingEstablishmentError(
            "The establishment SIRET is missing for this account."
        )
    record = TraceabilityRecord(
        user_id=user.id,
        siret_etablissement=siret,
        **data.model_dump(),
    )
    db.add(record)
    await db.flush()
    await db.refresh(record)
    logger.info(f"User {user.id} added traceability record {record.id} for {siret}")
    return record


async def list_establishment_records_service(
    db: AsyncSession, user: User, siret: str
) -> Sequence[TraceabilityRecord]:
    if not can_read_establishment(user, siret):
        raise EstablishmentAccessDeniedError
    result = await db.execute(
        select(TraceabilityRecord)
        .where(TraceabilityRecord.siret_etablissement == siret)
        .order_by(TraceabilityRecord.capture_date.desc(), TraceabilityRecord.id.desc())
    )
    return result.scalars().all()


async def list_all_records_service(db: AsyncSession) -> Sequence[TraceabilityRecord]:
    result = await db.execute(
        select(TraceabilityRecord).order_by(
            TraceabilityRecord.capture_date.desc(), TraceabilityRecord.id.desc()
        )
    )
    return result.scalars().all()


async def delete_traceability_record_service(
    db: AsyncSession, user: User, record_id: int
) -> None:
    record = await db.get(TraceabilityRecord, record_id)
    if record is None:
        raise TraceabilityRecordNotFoundError
    if not can_delete_record(user, record):
        raise EstablishmentAccessDeniedError("Not authorized to delete this record.")
    await db.delete(record)
    await db.flush()
    logger.info(f"User {user.id} deleted traceability record {record_id}")
