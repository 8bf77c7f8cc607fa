"""Persistence helpers for analytics settings."""

from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_SETTINGS_PATH = "data/analytics_settings.json"
SETTINGS_PATH_ENV = "LEDGERLENS_SETTINGS_PATH"
DEFAULT_CURRENCY_ENV = "LEDGERLENS_DEFAULT_CURRENCY"


@dataclass(frozen=True)
class AnalyticsSettings:
    default_currency: str = "INR"
    bills_category: str = "Bills"
    trend_window: int = 3
    stable_change_pct: float = 5.0
    cache_size: int = 32

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


DEFAULT_SETTINGS = AnalyticsSettings()


def _normalize_currency(raw: Any, fallback: str) -> str:
    text = str(raw or "").strip().upper()
    if len(text) == 3 and text.isalpha():
        return text
    return fallback


def _normalize_text(raw: Any, fallback: str) -> str:
    text = str(raw or "").strip()
    return text or fallback


def _normalize_positive_int(raw: Any, fallback: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _normalize_non_negative_float(raw: Any, fallback: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value >= 0 else fallback


def normalize_settings(raw: Any) -> AnalyticsSettings:
    """Build settings from a loose mapping, falling back to defaults per field."""
    if not isinstance(raw, dict):
        raw = {}
    base = DEFAULT_SETTINGS
    return AnalyticsSettings(
        default_currency=_normalize_currency(raw.get("default_currency"), base.default_currency),
        bills_category=_normalize_text(raw.get("bills_category"), base.bills_category),
        trend_window=_normalize_positive_int(raw.get("trend_window"), base.trend_window),
        stable_change_pct=_normalize_non_negative_float(
            raw.get("stable_change_pct"), base.stable_change_pct
        ),
        cache_size=_normalize_positive_int(raw.get("cache_size"), base.cache_size),
    )


def resolve_settings_path(path: str | None = None) -> Path:
    return Path(path or os.getenv(SETTINGS_PATH_ENV) or DEFAULT_SETTINGS_PATH).expanduser()


def load_settings(path: str | None = None) -> AnalyticsSettings:
    """Load settings from disk, applying environment overrides."""
    target = resolve_settings_path(path)
    payload: dict[str, Any] = {}
    if target.exists():
        loaded = json.loads(target.read_text(encoding="utf-8"))
        if isinstance(loaded, dict):
            payload = dict(loaded)

    env_currency = os.getenv(DEFAULT_CURRENCY_ENV)
    if env_currency:
        payload["default_currency"] = env_currency
    return normalize_settings(payload)


def save_settings(path: str | None, settings: AnalyticsSettings) -> Path:
    """Save settings to disk and return saved path."""
    target = resolve_settings_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = normalize_settings(settings.to_dict()).to_dict()
    target.write_text(json.dumps(payload, indent=2, ensure_ascii=True), encoding="utf-8")
    return target
