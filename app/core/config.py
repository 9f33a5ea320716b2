"""
Application configuration management using Pydantic Settings.
All settings can be overridden via environment variables.
"""

from typing import Any, List

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Anonymous Feedback Service"
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    # pbkdf2_sha256 rounds; 600k costs roughly 100-300ms per hash
    PASSWORD_HASH_ROUNDS: int = 600_000

    # Account lockout
    MAX_LOGIN_ATTEMPTS: int = 5
    LOCKOUT_DURATION_MINUTES: int = 120

    # Database
    DATABASE_URL: str | None = None  # Optional: Use this if set (e.g., sqlite:///./data/dev.db)
    POSTGRES_SERVER: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str | None = None

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Get database URI - supports both SQLite and PostgreSQL."""
        # If DATABASE_URL is explicitly set, use it verbatim
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # Otherwise, construct from POSTGRES_* variables
        if self.POSTGRES_SERVER and self.POSTGRES_USER and self.POSTGRES_PASSWORD and self.POSTGRES_DB:
            return (
                f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        # Default to SQLite for local dev if nothing is configured
        return "sqlite:///./feedback.db"

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.SQLALCHEMY_DATABASE_URI.startswith("sqlite")

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> List[str] | str:
        """Parse CORS origins from string or list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Pagination
    PAGE_SIZE_DEFAULT: int = 20
    PAGE_SIZE_MAX: int = 100

    # Default admin account (created by `python -m app.db.init_db`, never on startup)
    DEFAULT_ADMIN_EMAIL: str = "admin@company.com"
    DEFAULT_ADMIN_PASSWORD: str | None = None
    DEFAULT_ADMIN_ROLE: str = "COO"

    @field_validator("DEFAULT_ADMIN_ROLE", mode="after")
    @classmethod
    def validate_admin_role(cls, v: str) -> str:
        """Default admin role must be one of the known roles."""
        allowed = {"HR", "CEO", "COO", "CTO", "CFO", "CCO", "CPO"}
        if v not in allowed:
            raise ValueError(f"DEFAULT_ADMIN_ROLE must be one of {sorted(allowed)}")
        return v


settings = Settings()  # type: ignore
