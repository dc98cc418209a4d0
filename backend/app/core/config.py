# backend/app/core/config.py
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any, List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


DEFAULT_RECURRING_NOTE_TEMPLATE = "(Part of monthly booking: {anchor_id})"


class Settings(BaseSettings):
    environment: str = Field(default="development", description="Deployment environment name")
    log_level: str = Field(default="INFO", description="Root logging level")

    database_url: str = Field(
        default="sqlite+pysqlite:///./court_booking.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    # Slot lock around conflict check + insert
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis for slot locks")
    booking_lock_enabled: bool = True
    booking_lock_ttl_seconds: int = Field(default=30, ge=1)
    lock_namespace: str = "court_booking"

    # Pricing rules
    weekend_days: Annotated[List[int], NoDecode] = Field(
        default_factory=lambda: [0, 6],
        description="Weekend days for pricing, Sunday=0 .. Saturday=6",
    )
    holiday_pricing_enabled: bool = True
    min_booking_hours: int = Field(default=1, ge=1)
    recurring_note_template: str = DEFAULT_RECURRING_NOTE_TEMPLATE

    is_testing: bool = False  # Set to True when running tests

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("weekend_days", mode="before")
    @classmethod
    def _parse_weekend_days(cls, value: Any) -> Any:
        """Accept a JSON list or a comma-separated string of day numbers."""
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return []
            if raw.startswith("["):
                return json.loads(raw)
            return [int(part) for part in raw.split(",") if part.strip()]
        return value

    @field_validator("weekend_days")
    @classmethod
    def _validate_weekend_days(cls, value: List[int]) -> List[int]:
        invalid = [day for day in value if not 0 <= day <= 6]
        if invalid:
            raise ValueError(
                f"weekend_days must use Sunday=0..Saturday=6, got invalid values {invalid}"
            )
        return sorted(set(value))

    @field_validator("recurring_note_template")
    @classmethod
    def _validate_note_template(cls, value: str) -> str:
        if "{anchor_id}" not in value:
            raise ValueError("recurring_note_template must contain '{anchor_id}'")
        return value

    @property
    def weekend_day_set(self) -> frozenset[int]:
        return frozenset(self.weekend_days)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
logger.info(
    "[CONFIG] environment=%s weekend_days=%s booking_lock_enabled=%s",
    settings.environment,
    settings.weekend_days,
    settings.booking_lock_enabled,
)
