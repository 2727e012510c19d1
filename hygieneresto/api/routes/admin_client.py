"""Admin client endpoints, scoped to the caller's establishment."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from hygieneresto.core.config import Settings
from hygieneresto.core.deps import AdminClient, DbSession, get_settings
from hygieneresto.core.services.temperature_service import (
    create_establishment_temperature_service,
    delete_establishment_temperature_service,
    list_establishment_temperatures_service,
    update_establishment_temperature_service,
)
from hygieneresto.core.services.user_service import (
    create_employee_service,
    delete_employee_service,
    list_employees_service,
    update_employee_service,
)
from hygieneresto.schemas.temperature import (
    AdminClientTemperatureCreate,
    TemperatureRecordOut,
)
from hygieneresto.schemas.user import EmployeeCreate, EmployeeUpdate, UserOut

router = APIRouter(prefix="/admin-client", tags=["Admin Client"])


@router.get("/employees", summary="List the employees of the establishment")
async def list_employees(current_user: AdminClient, db: DbSession) -> list[UserOut]:
    employees = await list_employees_service(db, current_user)
    return [UserOut.model_validate(employee) for employee in employees]


@router.post(
    "/employees", status_code=status.HTTP_201_CREATED, summary="Create an employee"
)
async def create_employee(
    body: EmployeeCreate,
    current_user: AdminClient,
    db: DbSession,
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserOut:
    employee = await create_employee_service(
        db, current_user, body, settings.BCRYPT_ROUNDS
    )
    return UserOut.model_validate(employee)


@router.put("/employees/{employee_id}", summary="Update an employee")
async def update_employee(
    employee_id: Annotated[int, Path(description="Employee user ID")],
    body: EmployeeUpdate,
    current_user: AdminClient,
    db: DbSession,
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserOut:
    employee = await update_employee_service(
        db, current_user, employee_id, body, settings.BCRYPT_ROUNDS
    )
    return UserOut.model_validate(employee)


@router.delete(
    "/employees/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an employee",
)
async def delete_employee(
    employee_id: Annotated[int, Path(description="Employee user ID")],
    current_user: AdminClient,
    db: DbSession,
) -> Response:
    await delete_employee_service(db, current_user, employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/temperatures", summary="List the establishment's readings")
async def list_temperatures(
    current_user: AdminClient, db: DbSession
) -> list[TemperatureRecordOut]:
    records = await list_establishment_temperatures_service(db, current_user)
    return [TemperatureRecordOut.model_validate(record) for record in records]


@router.post(
    "/temperatures",
    status_code=status.HTTP_201_CREATED,
    summary="Record a reading for an employee",
)
async def create_temperature(
    body: AdminClientTemperatureCreate,
    current_user: AdminClient,
    db: DbSession,
) -> TemperatureRecordOut:
    record = await create_establishment_temperature_service(db, current_user, body)
    return TemperatureRecordOut.model_validate(record)


@router.put("/temperatures/{record_id}", summary="Update a reading")
async def update_temperature(
    record_id: Annotated[int, Path(description="Temperature record ID")],
    body: AdminClientTemperatureCreate,
    current_user: AdminClient,
    db: DbSession,
) -> TemperatureRecordOut:
    record = await update_establishment_temperature_service(
        db, current_user, record_id, body
    )
    return TemperatureRecordOut.model_validate(record)


@router.delete(
    "/temperatures/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a reading",
)
async def delete_temperature(
    record_id: Annotated[int, Path(description="Temperature record ID")],
    current_user: AdminClient,
    db: DbSession,
) -> Response:
    await delete_establishment_temperature_service(db, current_user, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
