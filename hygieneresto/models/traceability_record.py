from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from hygieneresto.models.base import Base


class TraceabilityRecord(Base):
    """A traced food batch (designation, quantity, use-by date, label photo URL)."""

    __tablename__ = "traceability_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    siret_etablissement: Mapped[str] = mapped_column(String(14), index=True)
    designation: Mapped[str] = mapped_column(String(255))
    quantity_value: Mapped[float] = mapped_column(Float)
    quantity_unit: Mapped[str] = mapped_column(String(32))
    date_transformation: Mapped[date | None] = mapped_column(Date, default=None)
    date_limite_consommation: Mapped[date] = mapped_column(Date)
    image_url: Mapped[str | None] = mapped_column(String(1024), default=None)
    capture_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
