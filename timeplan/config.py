"""
Timeplan — Centralized configuration.

Loads all settings from .env and validates them.
The domain core never reads settings directly; only the entry point and the
data loaders do, so every rule in timeplan.core stays a pure function.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from timeplan/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_DEFAULT_ONBOARDING_PATH = Path(__file__).resolve().parent / "data" / "onboarding_defaults.json"

_REVIEW_DAYS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Onboarding document seeded into every new account
    ONBOARDING_CONFIG_PATH: str = str(_DEFAULT_ONBOARDING_PATH)

    # Upper bound on entities written in one onboarding transaction
    MAX_ONBOARDING_ITEMS: int = 100

    # Weekly review day used when a user has no settings yet
    DEFAULT_REVIEW_DAY: str = "sunday"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("MAX_ONBOARDING_ITEMS", mode="before")
    @classmethod
    def parse_max_items(cls, v: str | int) -> int:
        return int(v)

    @field_validator("DEFAULT_REVIEW_DAY", mode="before")
    @classmethod
    def parse_review_day(cls, v: str) -> str:
        day = str(v).strip().lower()
        if day not in _REVIEW_DAYS:
            raise ValueError(f"DEFAULT_REVIEW_DAY must be one of {', '.join(_REVIEW_DAYS)}")
        return day

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        return str(v).strip().upper()


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        ONBOARDING_CONFIG_PATH=os.getenv("ONBOARDING_CONFIG_PATH", str(_DEFAULT_ONBOARDING_PATH)),
        MAX_ONBOARDING_ITEMS=os.getenv("MAX_ONBOARDING_ITEMS", "100"),
        DEFAULT_REVIEW_DAY=os.getenv("DEFAULT_REVIEW_DAY", "sunday"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton, imported by entry points and loaders as:
#   from timeplan.config import settings
settings = _load_settings()
