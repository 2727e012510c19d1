"""Traceability record schemas."""

from datetime import date, datetime
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TraceabilityRecordCreate(BaseModel):
    """A traced batch. The image is uploaded elsewhere; only its URL is kept."""

    designation: Annotated[str, Field(min_length=1, description="Product name")]
    quantity_value: Annotated[float, Field(gt=0, description="Quantity")]
    quantity_unit: Annotated[str, Field(min_length=1, description="Unit, e.g. kg")]
    date_transformation: Annotated[
        date | None, Field(description="Date the product was transformed")
    ] = None
    date_limite_consommation: Annotated[date, Field(description="Use-by date")]
    image_url: Annotated[str | None, Field(description="Label photo URL")] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_dates(self) -> Self:
        if (
            self.date_transformation is not None
            and self.date_limite_consommation < self.date_transformation
        ):
            raise ValueError("date_limite_consommation cannot precede date_transformation")
        return self


class TraceabilityRecordOut(BaseModel):
    id: int
    user_id: int
    siret_etablissement: str
    designation: str
    quantity_value: float
    quantity_unit: str
    date_transformation: date | None = None
    date_limite_consommation: date
    image_url: str | None = None
    capture_date: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
