"""Employee endpoints: the caller's own temperature readings."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from hygieneresto.core.deps import DbSession, Employer
from hygieneresto.core.services.temperature_service import (
    create_employee_temperature_service,
    list_employee_temperatures_service,
    update_employee_temperature_service,
)
from hygieneresto.schemas.temperature import (
    TemperatureRecordCreate,
    TemperatureRecordOut,
)

router = APIRouter(prefix="/employer", tags=["Employer"])


@router.get("/temperatures", summary="List my readings")
async def list_temperatures(
    current_user: Employer, db: DbSession
) -> list[TemperatureRecordOut]:
    records = await list_employee_temperatures_service(db, current_user)
    return [TemperatureRecordOut.model_validate(record) for record in records]


@router.post(
    "/temperatures", status_code=status.HTTP_201_CREATED, summary="Record a reading"
)
async def create_temperature(
    body: TemperatureRecordCreate,
    current_user: Employer,
    db: DbSession,
) -> TemperatureRecordOut:
    record = await create_employee_temperature_service(db, current_user, body)
    return TemperatureRecordOut.model_validate(record)


@router.put("/temperatures/{record_id}", summary="Replace one of my readings")
async def update_temperature(
    record_id: Annotated[int, Path(description="Temperature record ID")],
    body: TemperatureRecordCreate,
    current_user: Employer,
    db: DbSession,
) -> TemperatureRecordOut:
    record = await update_employee_temperature_service(
        db, current_user, record_id, body
    )
    return TemperatureRecordOut.model_validate(record)
