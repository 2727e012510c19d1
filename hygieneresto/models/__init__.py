"""SQLAlchemy models. Importing this package registers every table on ``Base.metadata``."""

from hygieneresto.models.base import Base
from hygieneresto.models.enums import TemperatureType, UserRole
from hygieneresto.models.temperature_record import TemperatureRecord
from hygieneresto.models.traceability_record import TraceabilityRecord
from hygieneresto.models.user import User

__all__ = [
    "Base",
    "TemperatureRecord",
    "TemperatureType",
    "TraceabilityRecord",
    "User",
    "UserRole",
]
