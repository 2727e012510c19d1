"""Settings shared by the REST backend and the session client.

Every value can be overridden through the environment or a ``.env`` file.
Production runs on PostgreSQL; set ``DATABASE_URL`` to point anywhere else
(``sqlite+aiosqlite:///./dev.db`` for local work).
"""

from pydantic import AnyHttpUrl, Field, PostgresDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        API_PREFIX: Path under which every REST route is mounted
        BACKEND_CORS_ORIGINS: Browser origins allowed to call the API
        SECRET_KEY: Key signing the JWT bearer tokens
        ACCESS_TOKEN_EXPIRE_MINUTES: Lifetime of an issued token
        BCRYPT_ROUNDS: Cost factor of stored password hashes
        PASSWORD_MIN_LENGTH: Minimum length enforced on self registration
        DATABASE_URL: Full SQLAlchemy URL, overrides the POSTGRES_* settings
        FIRST_SUPERUSER: Super admin email created at startup when set
        CLIENT_API_BASE_URL: Base URL the session client talks to
        CLIENT_TOKEN_STORE_PATH: File where the session client keeps its token
        CLIENT_TIMEOUT_SECONDS: Timeout of every client request
    """

    PROJECT_NAME: str = "HygieneResto"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(
        default="production",
        description="production, development or testing",
    )
    API_PREFIX: str = "/api"
    BACKEND_CORS_ORIGINS: list[AnyHttpUrl] = Field(default_factory=list)

    # Authentication
    SECRET_KEY: str = Field(
        default="change-me-hygieneresto-secret",
        description="Must be overridden outside development",
    )
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=480, ge=1)
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)
    PASSWORD_MIN_LENGTH: int = Field(default=14, ge=8)

    # Database
    DATABASE_URL: str | None = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "hygieneresto"
    POSTGRES_PASSWORD: str = "hygieneresto"
    POSTGRES_DB: str = "hygieneresto"
    DB_POOL_SIZE: int = Field(default=5, ge=1, le=20)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DB_POOL_TIMEOUT: int = Field(default=30, ge=0)
    DB_POOL_RECYCLE: int = Field(
        default=1800, ge=-1, description="Seconds before a connection is recycled, -1 never"
    )
    DB_ECHO: bool = False

    # Bootstrap account
    FIRST_SUPERUSER: str | None = None
    FIRST_SUPERUSER_PASSWORD: str | None = None

    # Logging
    log_level: str = Field(default="INFO", description="Log level for loguru")
    log_to_file: bool = False
    log_file_path: str = "logs/hygieneresto.log"
    log_retention: str = "10 days"
    log_rotation: str = "10 MB"

    # Session client
    CLIENT_API_BASE_URL: str = "http://localhost:5001/api"
    CLIENT_TOKEN_STORE_PATH: str = "~/.hygieneresto/session.json"
    CLIENT_TIMEOUT_SECONDS: float = Field(
        default=30.0, gt=0, description="Requests are never retried"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def sqlalchemy_database_uri(self) -> str:
        """``DATABASE_URL`` when set, otherwise a psycopg DSN built from POSTGRES_*."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return str(
            PostgresDsn.build(
                scheme="postgresql+psycopg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_SERVER,
                path=self.POSTGRES_DB,
            )
        )


settings = Settings()
