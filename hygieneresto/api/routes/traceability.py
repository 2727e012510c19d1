"""Traceability endpoints.

Any role attached to an establishment may add records. Listing by SIRET is
open to the owning admin client, its employees and super admins; deletion to
the owning admin client and super admins.
"""

from typing import Annotated

from fastapi import APIRouter, Path, Response, status

from hygieneresto.core.deps import CurrentUser, DbSession, SuperAdmin
from hygieneresto.core.services.traceability_service import (
    add_traceability_record_service,
    delete_traceability_record_service,
    list_all_records_service,
    list_establishment_records_service,
)
from hygieneresto.schemas.traceability import (
    TraceabilityRecordCreate,
    TraceabilityRecordOut,
)
from hygieneresto.schemas.user import SIRET_PATTERN

router = APIRouter(prefix="/traceability", tags=["Traceability"])


@router.post(
    "/add", status_code=status.HTTP_201_CREATED, summary="Add a traceability record"
)
async def add_record(
    body: TraceabilityRecordCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> TraceabilityRecordOut:
    record = await add_traceability_record_service(db, current_user, body)
    return TraceabilityRecordOut.model_validate(record)


@router.get("/client/{siret}", summary="List the records of an establishment")
async def list_establishment_records(
    siret: Annotated[str, Path(pattern=SIRET_PATTERN, description="Establishment SIRET")],
    current_user: CurrentUser,
    db: DbSession,
) -> list[TraceabilityRecordOut]:
    records = await list_establishment_records_service(db, current_user, siret)
    return [TraceabilityRecordOut.model_validate(record) for record in records]


@router.get("", summary="List every traceability record")
async def list_records(_: SuperAdmin, db: DbSession) -> list[TraceabilityRecordOut]:
    records = await list_all_records_service(db)
    return [TraceabilityRecordOut.model_validate(record) for record in records]


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a traceability record",
)
async def delete_record(
    record_id: Annotated[int, Path(description="Traceability record ID")],
    current_user: CurrentUser,
    db: DbSession,
) -> Response:
    await delete_traceability_record_service(db, current_user, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
