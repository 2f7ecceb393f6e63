from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from orderdesk.config import ConfigurationError, Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "ORDERDESK_API_URL",
        "ORDERDESK_API_TOKEN",
        "ORDERDESK_TIMEOUT_SECONDS",
        "ORDERDESK_CURRENCY",
        "ORDERDESK_TAX_RATE",
        "ORDERDESK_REFRESH_SECONDS",
        "ORDERDESK_SEARCH_DEBOUNCE_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.api_url == "http://localhost:5000/api"
    assert settings.api_token is None
    assert settings.tax_rate == Decimal("0.18")
    assert settings.currency == "RWF"
    assert settings.refresh_seconds == 15.0


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("ORDERDESK_API_URL", "https://pos.example.com/api/")
    monkeypatch.setenv("ORDERDESK_API_TOKEN", "tok")
    monkeypatch.setenv("ORDERDESK_CURRENCY", "usd")
    monkeypatch.setenv("ORDERDESK_TAX_RATE", "0.16")
    monkeypatch.setenv("ORDERDESK_SEARCH_DEBOUNCE_SECONDS", "0.25")

    settings = Settings.from_env()

    assert settings.api_url == "https://pos.example.com/api"
    assert settings.api_token == "tok"
    assert settings.currency == "USD"
    assert settings.tax_rate == Decimal("0.16")
    assert settings.search_debounce_seconds == 0.25


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("ORDERDESK_TIMEOUT_SECONDS", "soon"),
        ("ORDERDESK_REFRESH_SECONDS", "0"),
        ("ORDERDESK_TAX_RATE", "-0.1"),
        ("ORDERDESK_TAX_RATE", "eighteen"),
        ("ORDERDESK_CURRENCY", "EURO"),
    ],
)
def test_invalid_settings_raise(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        Settings.from_env()
