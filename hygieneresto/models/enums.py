"""Closed enumerations shared by the models, the schemas and the client."""

from enum import Enum


class UserRole(str, Enum):
    """Role of a user account. Fixed at creation."""

    super_admin = "super_admin"
    admin_client = "admin_client"
    employer = "employer"


class TemperatureType(str, Enum):
    """Whether a reading comes from positive (fridge) or negative (freezer) cold."""

    positive = "positive"
    negative = "negative"
