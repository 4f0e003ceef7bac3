"""Tests for settings parsing."""

import pytest
from pydantic import ValidationError

from travel_blog.config import Settings, parse_allowed_origins


def test_parse_allowed_origins() -> None:
    assert parse_allowed_origins(None) == ["*"]
    assert parse_allowed_origins(" * ") == ["*"]
    assert parse_allowed_origins("https://a.test/, https://b.test") == [
        "https://a.test",
        "https://b.test",
    ]
    assert parse_allowed_origins(" , ") == ["*"]


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "header.payload.signature")
    monkeypatch.setenv("ADMIN_TOKEN", "secret")

    settings = Settings(_env_file=None)

    assert settings.thumb_width == 250
    assert settings.thumb_height == 250
    assert settings.max_image_size_bytes == 5 * 1024 * 1024
    assert settings.islands_table == "islands"


def test_settings_reject_non_positive_thumbnail_size() -> None:
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            supabase_url="https://example.supabase.co",
            supabase_service_key="key",
            admin_token="secret",
            thumb_width=0,
        )
