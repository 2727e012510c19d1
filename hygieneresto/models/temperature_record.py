from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from hygieneresto.models.base import Base
from hygieneresto.models.enums import TemperatureType


class TemperatureRecord(Base):
    """A cold-chain temperature reading taken in an establishment."""

    __tablename__ = "temperature_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    siret_etablissement: Mapped[str] = mapped_column(String(14), index=True)
    type: Mapped[str] = mapped_column(String(64))
    location: Mapped[str] = mapped_column(String(255))
    temperature: Mapped[float] = mapped_column(Float)
    temperature_type: Mapped[TemperatureType] = mapped_column(
        Enum(
            TemperatureType,
            name="temperature_type",
            native_enum=False,
            values_callable=lambda kinds: [kind.value for kind in kinds],
        )
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
