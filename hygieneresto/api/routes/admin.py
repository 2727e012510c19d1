"""Super admin endpoints: every account and every reading, across establishments."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from hygieneresto.core.config import Settings
from hygieneresto.core.deps import DbSession, get_settings, require_roles
from hygieneresto.core.services.temperature_service import (
    create_temperature_service,
    delete_temperature_service,
    list_all_temperatures_service,
    update_temperature_service,
)
from hygieneresto.core.services.user_service import (
    create_user_service,
    delete_user_service,
    list_users_service,
    update_user_service,
)
from hygieneresto.models.enums import UserRole
from hygieneresto.schemas.temperature import (
    AdminClientTemperatureCreate,
    TemperatureRecordOut,
)
from hygieneresto.schemas.user import UserCreate, UserOut, UserUpdate

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_roles(UserRole.super_admin))],
)


@router.get("/users", summary="List users")
async def list_users(db: DbSession) -> list[UserOut]:
    users = await list_users_service(db)
    return [UserOut.model_validate(user) for user in users]


@router.post("/users", status_code=status.HTTP_201_CREATED, summary="Create a user")
async def create_user(
    body: UserCreate,
    db: DbSession,
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserOut:
    user = await create_user_service(db, body, settings.BCRYPT_ROUNDS)
    return UserOut.model_validate(user)


@router.put("/users/{user_id}", summary="Update a user")
async def update_user(
    user_id: Annotated[int, Path(description="User ID")],
    body: UserUpdate,
    db: DbSession,
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserOut:
    user = await update_user_service(db, user_id, body, settings.BCRYPT_ROUNDS)
    return UserOut.model_validate(user)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
    description="Delete an account and every record it owns.",
)
async def delete_user(
    user_id: Annotated[int, Path(description="User ID")],
    db: DbSession,
) -> Response:
    await delete_user_service(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/temperatures", summary="List every temperature reading")
async def list_temperatures(db: DbSession) -> list[TemperatureRecordOut]:
    records = await list_all_temperatures_service(db)
    return [TemperatureRecordOut.model_validate(record) for record in records]


@router.post(
    "/temperatures",
    status_code=status.HTTP_201_CREATED,
    summary="Record a reading for any user",
    description="The establishment SIRET is taken from the user the reading belongs to.",
)
async def create_temperature(
    body: AdminClientTemperatureCreate, db: DbSession
) -> TemperatureRecordOut:
    record = await create_temperature_service(db, body)
    return TemperatureRecordOut.model_validate(record)


@router.put("/temperatures/{record_id}", summary="Update any reading")
async def update_temperature(
    record_id: Annotated[int, Path(description="Temperature record ID")],
    body: AdminClientTemperatureCreate,
    db: DbSession,
) -> TemperatureRecordOut:
    record = await update_temperature_service(db, record_id, body)
    return TemperatureRecordOut.model_validate(record)


@router.delete(
    "/temperatures/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete any reading",
)
async def delete_temperature(
    record_id: Annotated[int, Path(description="Temperature record ID")],
    db: DbSession,
) -> Response:
    await delete_temperature_service(db, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
