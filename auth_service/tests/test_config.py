from __future__ import annotations

import pytest

from auth_service.shared.config.settings import AppConfig, SecurityConfig


def test_sections_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOKEN_TTL_MINUTES", "15")
    monkeypatch.setenv("PAGE_SIZE_MAX", "50")
    monkeypatch.setenv("RESET_TOKEN_TTL_MINUTES", "30")

    config = AppConfig()

    assert config.tokens.ttl_seconds == 900
    assert config.pagination.max_page_size == 50
    assert config.reset.ttl_minutes == 30


def test_allowed_origins_accepts_comma_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")

    assert SecurityConfig().allowed_origins == ["https://a.example", "https://b.example"]


def test_production_refuses_weak_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "dev")

    with pytest.raises(SystemExit):
        AppConfig()
