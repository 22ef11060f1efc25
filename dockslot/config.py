"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env at the project root (parent of dockslot/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./dockslot.db"
    log_level: str = "INFO"

    # Captain defaults, used when a profile leaves the value empty
    default_timezone: str = "America/New_York"
    default_booking_buffer_minutes: int = 60
    default_advance_booking_days: int = 60

    # Slot walk step for the public calendar
    slot_interval_minutes: int = 30

    max_party_size: int = 6  # USCG six-pack license
    guest_token_ttl_days: int = 7
    max_blackout_range_days: int = 60

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("slot_interval_minutes", mode="after")
    @classmethod
    def positive_interval(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("slot_interval_minutes must be positive")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


settings = Settings()
