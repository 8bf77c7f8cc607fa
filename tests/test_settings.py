import json
from pathlib import Path

import pytest

from settings import AnalyticsSettings, load_settings, save_settings


def test_settings_roundtrip(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "settings.json"
    save_settings(str(target), AnalyticsSettings(default_currency="USD", trend_window=6))

    loaded = load_settings(str(target))
    assert loaded.default_currency == "USD"
    assert loaded.trend_window == 6
    assert loaded.bills_category == "Bills"


def test_settings_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert load_settings(str(tmp_path / "missing.json")) == AnalyticsSettings()


def test_settings_normalize_malformed_values(tmp_path: Path) -> None:
    target = tmp_path / "settings.json"
    target.write_text(
        json.dumps(
            {
                "default_currency": "dollars",
                "trend_window": "x",
                "stable_change_pct": -1,
                "bills_category": "  Utilities ",
                "cache_size": 0,
            }
        ),
        encoding="utf-8",
    )

    loaded = load_settings(str(target))
    assert loaded.default_currency == "INR"
    assert loaded.trend_window == 3
    assert loaded.stable_change_pct == 5.0
    assert loaded.bills_category == "Utilities"
    assert loaded.cache_size == 32


def test_settings_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "env_settings.json"
    target.write_text(json.dumps({"default_currency": "GBP"}), encoding="utf-8")
    monkeypatch.setenv("LEDGERLENS_SETTINGS_PATH", str(target))
    assert load_settings().default_currency == "GBP"

    monkeypatch.setenv("LEDGERLENS_DEFAULT_CURRENCY", "usd")
    assert load_settings().default_currency == "USD"
