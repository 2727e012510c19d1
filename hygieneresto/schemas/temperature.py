"""Temperature record schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from hygieneresto.models.enums import TemperatureType


class TemperatureRecordCreate(BaseModel):
    """Reading entered by an employee for its own establishment."""

    type: Annotated[str, Field(min_length=1, description="Equipment kind, e.g. fridge")]
    location: Annotated[str, Field(min_length=1, description="Where the reading was taken")]
    temperature: Annotated[float, Field(description="Reading in degrees Celsius")]
    temperature_type: TemperatureType
    timestamp: Annotated[datetime, Field(description="When the reading was taken")]
    notes: str | None = None

    model_config = ConfigDict(extra="forbid")


class AdminClientTemperatureCreate(TemperatureRecordCreate):
    """Reading entered on behalf of another user.

    Admin clients may only name their employees; super admins any user
    attached to an establishment.
    """

    user_id: Annotated[int, Field(description="User the reading belongs to")]


class TemperatureRecordOut(BaseModel):
    id: int
    user_id: int
    siret_etablissement: str
    type: str
    location: str
    temperature: float
    temperature_type: TemperatureType
    timestamp: datetime
    notes: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
