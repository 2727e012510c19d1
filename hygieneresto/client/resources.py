"""Thin clients for the record endpoints, routed by the caller's role."""

from typing import TYPE_CHECKING, TypeVar, assert_never

from pydantic import TypeAdapter, ValidationError

from hygieneresto.client.exceptions import InvalidResponseError, NotAuthenticatedError
from hygieneresto.client.http import ApiClient
from hygieneresto.models.enums import UserRole
from hygieneresto.schemas.temperature import (
    AdminClientTemperatureCreate,
    TemperatureRecordCreate,
    TemperatureRecordOut,
)
from hygieneresto.schemas.traceability import (
    TraceabilityRecordCreate,
    TraceabilityRecordOut,
)
from hygieneresto.schemas.user import UserProfile

if TYPE_CHECKING:
    from hygieneresto.client.session import SessionController

T = TypeVar("T")

_traceability_list = TypeAdapter(list[TraceabilityRecordOut])
_temperature_list = TypeAdapter(list[TemperatureRecordOut])


def _parse(adapter: TypeAdapter[T], body: object) -> T:
    try:
        return adapter.validate_python(body)
    except ValidationError as e:
        raise InvalidResponseError from e


class _ResourceClient:
    def __init__(self, api: ApiClient, controller: "SessionController") -> None:
        self._api = api
        self._controller = controller

    def _user(self) -> UserProfile:
        user = self._controller.current_user
        if user is None or not self._controller.is_authenticated:
            raise NotAuthenticatedError
        return user


class TraceabilityClient(_ResourceClient):
    def records_path(self) -> str:
        """Listing route for the current user.

        Establishment users list their own SIRET; an employee uses the SIRET
        of its admin client. Super admins list everything.
        """
        user = self._user()
        match user.role:
            case UserRole.super_admin:
                return "/traceability"
            case UserRole.admin_client | UserRole.employer:
                return f"/traceability/client/{user.establishment_siret}"
            case _:
                assert_never(user.role)

    async def list_records(self) -> list[TraceabilityRecordOut]:
        body = await self._api.get(self.records_path())
        return _parse(_traceability_list, body)

    async def add_record(self, data: TraceabilityRecordCreate) -> TraceabilityRecordOut:
        self._user()
        body = await self._api.post("/traceability/add", json=data.model_dump(mode="json"))
        return _parse(TypeAdapter(TraceabilityRecordOut), body)

    async def delete_record(self, record_id: int) -> None:
        self._user()
        await self._api.delete(f"/traceability/{record_id}")


class TemperatureClient(_ResourceClient):
    def readings_path(self) -> str:
        user = self._user()
        match user.role:
            case UserRole.super_admin:
                return "/admin/temperatures"
            case UserRole.admin_client:
                return "/admin-client/temperatures"
            case UserRole.employer:
                return "/employer/temperatures"
            case _:
                assert_never(user.role)

    async def list_readings(self) -> list[TemperatureRecordOut]:
        body = await self._api.get(self.readings_path())
        return _parse(_temperature_list, body)

    async def add_reading(
        self, data: TemperatureRecordCreate | AdminClientTemperatureCreate
    ) -> TemperatureRecordOut:
        """Employees record for themselves; admin clients name the employee."""
        path = self.readings_path()
        body = await self._api.post(path, json=data.model_dump(mode="json"))
        return _parse(TypeAdapter(TemperatureRecordOut), body)

    async def update_reading(
        self,
        record_id: int,
        data: TemperatureRecordCreate | AdminClientTemperatureCreate,
    ) -> TemperatureRecordOut:
        body = await self._api.put(
            f"{self.readings_path()}/{record_id}", json=data.model_dump(mode="json")
        )
        return _parse(TypeAdapter(TemperatureRecordOut), body)

    async def delete_reading(self, record_id: int) -> None:
        """Admin clients and super admins only; employees cannot delete readings."""
        await self._api.delete(f"{self.readings_path()}/{record_id}")
