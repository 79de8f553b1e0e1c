"""Tests for sweeper configuration floors, clamps and defaults."""

import logging

import pytest
from pydantic import ValidationError

from team_sweeper.config.settings import Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.sweeper_enabled is False
    assert settings.sweeper_interval_seconds == 1800
    assert settings.sweeper_initial_delay_ms == 20000
    assert settings.sweeper_max_accounts == 300
    assert settings.sweeper_concurrency == 3
    assert settings.sweeper_range_days == 30
    assert settings.admin_ids == [1001, 1002]
    assert settings.log_level == logging.INFO


def test_get_settings_is_a_singleton():
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", True),
        ("1", True),
        ("yes", True),
        ("enabled", True),
        ("false", False),
        ("FALSE", False),
        ("0", False),
        ("off", False),
        (" Off ", False),
        ("no", True),
        ("", True),
    ],
)
def test_enabled_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("TEAM_STATUS_SWEEPER_ENABLED", raw)
    assert Settings().sweeper_enabled is expected


@pytest.mark.parametrize(
    "env, field, raw, expected",
    [
        ("TEAM_STATUS_SWEEPER_INTERVAL_SECONDS", "sweeper_interval_seconds", "10", 60),
        ("TEAM_STATUS_SWEEPER_INTERVAL_SECONDS", "sweeper_interval_seconds", "600", 600),
        ("TEAM_STATUS_SWEEPER_INTERVAL_SECONDS", "sweeper_interval_seconds", "abc", 1800),
        ("TEAM_STATUS_SWEEPER_INITIAL_DELAY_MS", "sweeper_initial_delay_ms", "5", 1000),
        ("TEAM_STATUS_SWEEPER_INITIAL_DELAY_MS", "sweeper_initial_delay_ms", "45000", 45000),
        ("TEAM_STATUS_SWEEPER_MAX_ACCOUNTS", "sweeper_max_accounts", "3", 10),
        ("TEAM_STATUS_SWEEPER_MAX_ACCOUNTS", "sweeper_max_accounts", "500", 500),
        ("TEAM_STATUS_SWEEPER_CONCURRENCY", "sweeper_concurrency", "0", 1),
        ("TEAM_STATUS_SWEEPER_CONCURRENCY", "sweeper_concurrency", "50", 10),
        ("TEAM_STATUS_SWEEPER_CONCURRENCY", "sweeper_concurrency", "5", 5),
        ("TEAM_STATUS_SWEEPER_CONCURRENCY", "sweeper_concurrency", "x", 3),
        ("TEAM_STATUS_SWEEPER_RANGE_DAYS", "sweeper_range_days", "7", 7),
        ("TEAM_STATUS_SWEEPER_RANGE_DAYS", "sweeper_range_days", "15", 15),
        ("TEAM_STATUS_SWEEPER_RANGE_DAYS", "sweeper_range_days", "14", 30),
        ("TEAM_STATUS_SWEEPER_RANGE_DAYS", "sweeper_range_days", "nope", 30),
    ],
)
def test_numeric_floors_and_clamps(monkeypatch, env, field, raw, expected):
    monkeypatch.setenv(env, raw)
    assert getattr(Settings(), field) == expected


def test_init_kwargs_are_validated_too():
    settings = Settings(
        TEAM_STATUS_SWEEPER_CONCURRENCY=99,
        TEAM_STATUS_SWEEPER_RANGE_DAYS=15,
    )
    assert settings.sweeper_concurrency == 10
    assert settings.sweeper_range_days == 15


def test_invalid_log_level_is_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValidationError):
        Settings()


def test_socks5_proxy_uses_remote_dns(monkeypatch):
    monkeypatch.setenv("SOCKS5_PROXY", "socks5://127.0.0.1:1080")
    proxy = Settings().curl_proxy
    assert proxy == {
        "proxies": {
            "http": "socks5h://127.0.0.1:1080",
            "https": "socks5h://127.0.0.1:1080",
        }
    }


def test_no_proxy_configured():
    assert Settings().curl_proxy is None
