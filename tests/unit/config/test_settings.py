# -*- coding: utf-8 -*-
"""Unit tests for Settings loading from the environment."""

from __future__ import annotations

from pathlib import Path

import pytest

from ton_tracker.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    settings = Settings()

    assert settings.tonapi.base_url == "https://tonapi.io/v2"
    assert settings.tonapi.min_request_interval_seconds == 0.25
    assert settings.webhook.port == 8080
    assert settings.webhook.sync_interval_seconds == 30.0
    assert settings.webhook.sync_startup_delay_seconds == 5.0
    assert settings.backfill.events_limit == 5
    assert settings.webhook.sync_enabled is False


def test_nested_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TONAPI__BASE_URL", "https://testnet.tonapi.io/v2/")
    monkeypatch.setenv("TONAPI__API_KEY", "key")
    monkeypatch.setenv("WEBHOOK__ENDPOINT", "https://tracker.example.org/webhook")
    monkeypatch.setenv("WEBHOOK__PORT", "9000")
    monkeypatch.setenv("BACKFILL__EVENTS_LIMIT", "10")

    settings = Settings()

    assert settings.tonapi.base_url == "https://testnet.tonapi.io/v2"
    assert settings.tonapi.api_key == "key"
    assert settings.webhook.sync_enabled is True
    assert settings.webhook.port == 9000
    assert settings.backfill.events_limit == 10


def test_from_env_accepts_nested_overrides() -> None:
    settings = Settings.from_env(webhook={"endpoint": "https://x/webhook"}, filters={"min_transfer_ton": 0.5})

    assert settings.webhook.endpoint == "https://x/webhook"
    assert settings.filters.min_transfer_ton == 0.5
