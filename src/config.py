"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TOKEN_DURATION_MINUTES = 24 * 60

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")

LOCAL_ENVIRONMENTS = ("development", "test")
LOCAL_DATABASE_URL = "sqlite:///./credentials.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database; required outside development and test
    database_url: str | None = Field(default=None)

    # JWT
    jwt_secret: str
    jwt_algorithm: str = Field(default="HS256")
    token_duration_minutes: int = Field(default=DEFAULT_TOKEN_DURATION_MINUTES, ge=0)

    # Password hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # API
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    @field_validator("jwt_secret")
    @classmethod
    def secret_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT_SECRET must not be empty")
        return value

    @field_validator("jwt_algorithm")
    @classmethod
    def algorithm_is_hmac(cls, value: str) -> str:
        value = value.upper()
        if value not in HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(HMAC_ALGORITHMS)}")
        return value

    @field_validator("token_duration_minutes")
    @classmethod
    def default_zero_duration(cls, value: int) -> int:
        # An explicit 0 means "unset"
        return value or DEFAULT_TOKEN_DURATION_MINUTES

    @model_validator(mode="after")
    def default_local_database(self) -> "Settings":
        """Only development and test may fall back to a local SQLite file."""
        if not self.database_url:
            if self.environment not in LOCAL_ENVIRONMENTS:
                raise ValueError("DATABASE_URL is required")
            self.database_url = LOCAL_DATABASE_URL
        return self

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.jwt_secret == "change-me-in-production":  # noqa: S105
                raise ValueError("JWT_SECRET must be changed in production")
            if self.database_url.startswith("sqlite"):
                raise ValueError("DATABASE_URL must point at a real database in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
