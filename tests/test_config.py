"""Tests for configuration helpers."""

import pytest

from nutrition_sync.config import (
    BACKEND_LOCAL,
    BACKEND_REST,
    BACKEND_SUPABASE,
    Settings,
    parse_target_range,
    parse_targets,
    resolve_backend,
)
from nutrition_sync.domain.stats import NutrientTarget


def test_resolve_backend_infers_from_configuration(settings: Settings) -> None:
    assert resolve_backend(settings) == BACKEND_LOCAL
    rest = settings.model_copy(update={"backend_url": "https://api.example.com"})
    assert resolve_backend(rest) == BACKEND_REST
    both = rest.model_copy(
        update={"supabase_url": "https://example.supabase.co", "supabase_key": "k"}
    )
    assert resolve_backend(both) == BACKEND_SUPABASE


def test_resolve_backend_explicit_choice(settings: Settings) -> None:
    forced = settings.model_copy(
        update={"remote_backend": " REST ", "supabase_url": "u", "supabase_key": "k"}
    )
    assert resolve_backend(forced) == BACKEND_REST

    unknown = settings.model_copy(update={"remote_backend": "firebase"})
    with pytest.raises(ValueError):
        resolve_backend(unknown)


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NUTRITION_SYNC_BACKEND_URL", "https://api.example.com")
    monkeypatch.setenv("NUTRITION_SYNC_ALLOW_PLAINTEXT_HASHING", "true")

    settings = Settings()

    assert settings.backend_url == "https://api.example.com"
    assert settings.allow_plaintext_hashing is True


def test_parse_target_range() -> None:
    assert parse_target_range(" 30-70 ") == NutrientTarget(min=30, max=70)
    with pytest.raises(ValueError):
        parse_target_range("70")
    with pytest.raises(ValueError):
        parse_target_range("70-30")


def test_parse_targets_defaults(settings: Settings) -> None:
    targets = parse_targets(settings)

    assert targets["calories"] == NutrientTarget(min=1000, max=1500)
    assert targets["fat"] == NutrientTarget(min=30, max=70)
