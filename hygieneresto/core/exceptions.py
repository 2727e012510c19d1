"""Domain exceptions raised by the services and the auth dependencies.

Every error is an ``HTTPException`` carrying a fixed status code and a title;
the API error handler renders them as ``{"message": detail, "status": code}``
which is the body shape the session client reads.
"""

from typing import ClassVar

from fastapi import HTTPException, status


class HygieneRestoError(HTTPException):
    """Base class for API errors with a default detail message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title: ClassVar[str] = "Internal Server Error"
    default_detail: ClassVar[str] = "Unexpected server error."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or type(self).default_detail,
        )


# Authentication (401)


class InvalidCredentialsError(HygieneRestoError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Invalid Credentials"
    default_detail = "Incorrect email or password."


class TokenMissingError(HygieneRestoError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Authentication Required"
    default_detail = "Authentication token required."


class TokenExpiredError(HygieneRestoError):
    """Expired token presented to the verification endpoint."""

    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Token Expired"
    default_detail = "Token expired."


class TokenInvalidError(HygieneRestoError):
    """Malformed or badly signed token presented to the verification endpoint."""

    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Invalid Token"
    default_detail = "Invalid token."


# Authorization (403)


class InvalidOrExpiredTokenError(HygieneRestoError):
    """Rejected token on a protected resource."""

    status_code = status.HTTP_403_FORBIDDEN
    title = "Invalid Or Expired Token"
    default_detail = "Invalid or expired token."


class InsufficientPermissionsError(HygieneRestoError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Insufficient Permissions"
    default_detail = "Access denied: insufficient privileges."


class EstablishmentAccessDeniedError(HygieneRestoError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Establishment Access Denied"
    default_detail = "Not authorized to access the records of this establishment."


# Not found (404)


class UserNotFoundError(HygieneRestoError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "User Not Found"
    default_detail = "User not found."


class EmployeeNotFoundError(HygieneRestoError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Employee Not Found"
    default_detail = "Employee not found or not attached to your establishment."


class TemperatureRecordNotFoundError(HygieneRestoError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Temperature Record Not Found"
    default_detail = "Temperature record not found."


class TraceabilityRecordNotFoundError(HygieneRestoError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Traceability Record Not Found"
    default_detail = "Traceability record not found."


# Conflicts (409)


class EmailAlreadyUsedError(HygieneRestoError):
    status_code = status.HTTP_409_CONFLICT
    title = "User Already Exists"
    default_detail = "A user with this email already exists."


class SiretAlreadyUsedError(HygieneRestoError):
    status_code = status.HTTP_409_CONFLICT
    title = "SIRET Already Used"
    default_detail = "Another admin_client already uses this SIRET."


class EstablishmentHasEmployeesError(HygieneRestoError):
    status_code = status.HTTP_409_CONFLICT
    title = "Establishment Has Employees"
    default_detail = (
        "This admin client still has employees. Delete them before the account."
    )


# Validation (400)


class RegistrationValidationError(HygieneRestoError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Invalid Registration"
    default_detail = "All required fields must be provided."


class WeakPasswordError(HygieneRestoError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Weak Password"
    default_detail = (
        "The password must contain at least 14 characters, including an upper case "
        "letter, a lower case letter, a digit and a special character."
    )


class InvalidSiretError(HygieneRestoError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Invalid SIRET"
    default_detail = "The SIRET is required and must contain 14 digits."


class UnknownAdminClientError(HygieneRestoError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Unknown Admin Client"
    default_detail = "The admin client SIRET does not exist or is not valid."


class EmptyUpdateError(HygieneRestoError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Nothing To Update"
    default_detail = "No data to update."


class MissingEstablishmentError(HygieneRestoError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Missing Establishment"
    default_detail = "This account is not attached to any establishment."


class InvalidRecordOwnerError(HygieneRestoError):
    status_code = status.HTTP_400_BAD_REQUEST
    title = "Invalid Record Owner"
    default_detail = "The user given does not belong to any establishment."
