"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_sync.domain.stats import NutrientTarget

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

BACKEND_SUPABASE = "supabase"
BACKEND_REST = "rest"
BACKEND_LOCAL = "local"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_key: str | None = None
    backend_url: str | None = None
    remote_backend: str | None = None
    cache_path: str | None = None
    allow_plaintext_hashing: bool = False
    http_timeout_seconds: float = 10
    target_calories: str = "1000-1500"
    target_protein: str = "120-200"
    target_carbs: str = "120-250"
    target_fat: str = "30-70"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="NUTRITION_SYNC_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_backend(settings: Settings) -> str:
    """Pick the remote backend: explicit choice first, then whatever is configured."""
    if settings.remote_backend:
        choice = settings.remote_backend.strip().lower()
        if choice not in {BACKEND_SUPABASE, BACKEND_REST, BACKEND_LOCAL}:
            raise ValueError(f"Unknown remote backend: {settings.remote_backend}")
        return choice
    if settings.supabase_url and settings.supabase_key:
        return BACKEND_SUPABASE
    if settings.backend_url:
        return BACKEND_REST
    return BACKEND_LOCAL


def parse_target_range(raw: str) -> NutrientTarget:
    """Parse a ``min-max`` daily target."""
    low, separator, high = raw.strip().partition("-")
    if not separator:
        raise ValueError(f"Target must look like 'min-max': {raw!r}")
    target = NutrientTarget(min=float(low), max=float(high))
    if target.min > target.max:
        raise ValueError(f"Target minimum exceeds maximum: {raw!r}")
    return target


def parse_targets(settings: Settings) -> dict[str, NutrientTarget]:
    return {
        "calories": parse_target_range(settings.target_calories),
        "protein": parse_target_range(settings.target_protein),
        "carbs": parse_target_range(settings.target_carbs),
        "fat": parse_target_range(settings.target_fat),
    }
