"""Login, self registration and token verification."""

import re

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hygieneresto.core.config import Settings
from hygieneresto.core.exceptions import (
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    InvalidSiretError,
    RegistrationValidationError,
    SiretAlreadyUsedError,
    TokenExpiredError,
    TokenInvalidError,
    TokenMissingError,
    UnknownAdminClientError,
    UserNotFoundError,
    WeakPasswordError,
)
from hygieneresto.core.security import (
    ExpiredSignatureError,
    JWTError,
    create_access_token,
    decode_access_token,
    hash_password,
    is_strong_password,
    verify_password,
)
from hygieneresto.models.enums import UserRole
from hygieneresto.models.user import User
from hygieneresto.schemas.auth import AuthResponse, RegisterRequest, VerifyTokenResponse
from hygieneresto.schemas.user import SIRET_PATTERN, UserProfile

_SIRET_RE = re.compile(SIRET_PATTERN)


def is_valid_siret(value: str | None) -> bool:
    return value is not None and _SIRET_RE.match(value) is not None


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def get_admin_client_by_siret(db: AsyncSession, siret: str) -> User | None:
    result = await db.execute(
        select(User).where(User.siret == siret, User.role == UserRole.admin_client)
    )
    return result.scalar_one_or_none()


async def siret_in_use(db: AsyncSession, siret: str, exclude_id: int | None = None) -> bool:
    stmt = select(User.id).where(User.siret == siret)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def insert_user(db: AsyncSession, user: User) -> User:
    """Persist a new account.

    The email and SIRET checks done beforehand can lose a race against a
    concurrent insert; the unique constraints then decide and the loser gets
    the same 409 as the pre-check would have given.
    """
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"Account insert for {user.email} hit a unique constraint")
        if user.siret is not None and await siret_in_use(db, user.siret):
            raise SiretAlreadyUsedError from e
        raise EmailAlreadyUsedError from e
    await db.refresh(user)
    return user


async def validate_role_scope(
    db: AsyncSession,
    role: UserRole,
    siret: str | None,
    admin_client_siret: str | None,
) -> tuple[str | None, str | None]:
    """Check the establishment fields a role needs and return the ones to store.

    An admin_client owns a fresh 14 digit SIRET; an employer points at the
    SIRET of an existing admin_client; a super admin carries neither.
    """
    match role:
        case UserRole.admin_client:
            if not is_valid_siret(siret):
                raise InvalidSiretError
            if await siret_in_use(db, siret):
                raise SiretAlreadyUsedError
            return siret, None
        case UserRole.employer:
            if not is_valid_siret(admin_client_siret):
                raise InvalidSiretError(
                    "The admin client SIRET is required and must contain 14 digits."
                )
            if await get_admin_client_by_siret(db, admin_client_siret) is None:
                raise UnknownAdminClientError
            return None, admin_client_siret
        case UserRole.super_admin:
            return None, None


async def login_service(
    db: AsyncSession, email: str, password: str, settings: Settings
) -> AuthResponse:
    """Authenticate a user by email and password and issue a bearer token.

    Unknown email and wrong password produce the same error.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        logger.info(f"Login failed: unknown email {email}")
        raise InvalidCredentialsError
    if not verify_password(password, user.password_hash):
        logger.info(f"Login failed: wrong password for user {user.id}")
        raise InvalidCredentialsError

    token = create_access_token(user, settings)
    logger.info(f"User {user.id} logged in as {user.role.value}")
    return AuthResponse(
        message="Login successful.",
        token=token,
        user=UserProfile.from_user(user),
    )


async def register_service(
    db: AsyncSession, data: RegisterRequest, settings: Settings
) -> AuthResponse:
    """Create an admin_client or employer account and log it in.

    Raises:
        RegistrationValidationError: The role cannot be self registered
        WeakPasswordError: The password does not meet the policy
        EmailAlreadyUsedError: The email is taken
        InvalidSiretError: A required SIRET is missing or malformed
        SiretAlreadyUsedError: The admin_client SIRET is taken
        UnknownAdminClientError: The employer's parent SIRET does not exist
    """
    if data.role is UserRole.super_admin:
        raise RegistrationValidationError(
            "The super_admin role cannot be self registered."
        )
    if not is_strong_password(data.password, settings.PASSWORD_MIN_LENGTH):
        raise WeakPasswordError(
            f"The password must contain at least {settings.PASSWORD_MIN_LENGTH} "
            "characters, including an upper case letter, a lower case letter, "
            "a digit and a special character."
        )
    if await get_user_by_email(db, data.email) is not None:
        raise EmailAlreadyUsedError

    siret, admin_client_siret = await validate_role_scope(
        db, data.role, data.siret, data.admin_client_siret
    )

    user = User(
        email=data.email.strip().lower(),
        password_hash=hash_password(data.password, settings.BCRYPT_ROUNDS),
        role=data.role,
        nom_entreprise=data.nom_entreprise,
        nom_client=data.nom_client,
        prenom_client=data.prenom_client,
        telephone=data.telephone or None,
        adresse=data.adresse or None,
        siret=siret,
        admin_client_siret=admin_client_siret,
    )
    await insert_user(db, user)

    logger.info(f"Registered user {user.id} with role {user.role.value}")
    return AuthResponse(
        message="User registered successfully.",
        token=create_access_token(user, settings),
        user=UserProfile.from_user(user),
    )


async def verify_token_service(
    db: AsyncSession, token: str | None, settings: Settings
) -> VerifyTokenResponse:
    """Validate a bearer token and return the fresh profile of its owner."""
    if token is None:
        raise TokenMissingError("No token provided, authorization denied.")

    try:
        payload = decode_access_token(token, settings)
        user_id = int(payload["sub"])
    except ExpiredSignatureError as e:
        raise TokenExpiredError from e
    except (JWTError, ValueError) as e:
        logger.debug(f"Token verification failed: {e}")
        raise TokenInvalidError from e

    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError
    return VerifyTokenResponse(message="Valid token.", user=UserProfile.from_user(user))
