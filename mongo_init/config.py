"""
Init job configuration loaded from environment variables.
"""
from functools import lru_cache

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Init job settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB
    mongodb_uri: str = "mongodb://mongodb:27017"
    server_selection_timeout_ms: int = Field(default=2000, gt=0)

    # Administrator user
    mongodb_user: str
    mongodb_password: str
    admin_db_name: str = "admin"
    admin_roles: list[str] = Field(default_factory=lambda: ["root"])

    # Target database
    mongodb_database: str

    # Readiness
    startup_delay_seconds: float = Field(default=0.0, ge=0)
    readiness_timeout_seconds: float = Field(default=30.0, ge=0)
    readiness_initial_backoff_seconds: float = Field(default=0.5, gt=0)
    readiness_max_backoff_seconds: float = Field(default=5.0, gt=0)

    # Logging
    log_level: str = "INFO"

    @field_validator("mongodb_user", "mongodb_password", "mongodb_database", "admin_db_name")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise ValueError(f"missing required field: {info.field_name}")
        return value

    @field_validator("admin_roles")
    @classmethod
    def _has_roles(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("admin_roles must name at least one role")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
