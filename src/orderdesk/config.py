from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation


class ConfigurationError(Exception):
    pass


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0")
    return value


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a decimal, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0")
    return value


@dataclass(frozen=True)
class Settings:
    api_url: str = "http://localhost:5000/api"
    api_token: str | None = None
    timeout_seconds: float = 30.0
    currency: str = "RWF"
    tax_rate: Decimal = Decimal("0.18")
    refresh_seconds: float = 15.0
    search_debounce_seconds: float = 0.5

    @classmethod
    def from_env(cls) -> Settings:
        currency = os.getenv("ORDERDESK_CURRENCY", "RWF").strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ConfigurationError("ORDERDESK_CURRENCY must be a 3-letter code")
        return cls(
            api_url=os.getenv("ORDERDESK_API_URL", "http://localhost:5000/api").rstrip("/"),
            api_token=os.getenv("ORDERDESK_API_TOKEN") or None,
            timeout_seconds=_env_float("ORDERDESK_TIMEOUT_SECONDS", 30.0),
            currency=currency,
            tax_rate=_env_decimal("ORDERDESK_TAX_RATE", "0.18"),
            refresh_seconds=_env_float("ORDERDESK_REFRESH_SECONDS", 15.0),
            search_debounce_seconds=_env_float("ORDERDESK_SEARCH_DEBOUNCE_SECONDS", 0.5),
        )
