"""Environment-driven configuration.

Every knob the service reads lives on :class:`Settings`. Values come from the
process environment or a local ``.env`` file and are read once, the first time
``get_settings`` is called.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Equipment Tracker"
    LOG_LEVEL: str = "INFO"

    DB_URL: str = Field(
        default="sqlite:///./equipment.db",
        validation_alias=AliasChoices("DB_URL", "DATABASE_URL"),
    )

    # ---- Tokens
    JWT_SECRET: str = "change-me"
    # Access tokens lived for a week in the first deployment; keep that default.
    JWT_ACCESS_TTL_MIN: int = 60 * 24 * 7
    JWT_REFRESH_TTL_DAYS: int = 30

    # ---- Bootstrap admin account (created when no admin exists)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    ADMIN_NAME: str = "System Admin"
    SEED_DEFAULT_DEPARTMENTS: bool = True

    # Public lookup page the QR codes point at, e.g. https://gear.example.org
    PUBLIC_BASE_URL: str = ""

    PAGE_DEFAULT_LIMIT: int = 10
    PAGE_MAX_LIMIT: int = 100

    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = Field(default_factory=list)

    HOST: str = "0.0.0.0"
    PORT: int = 3001

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("ALLOWED_ORIGINS must be a comma separated string or list")

    def public_equipment_url(self, equipment_id: int) -> str | None:
        base = self.PUBLIC_BASE_URL.strip().rstrip("/")
        if not base:
            return None
        return f"{base}/public/equipment/{equipment_id}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
