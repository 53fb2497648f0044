"""Settings loading tests."""

from __future__ import annotations

from pathlib import Path

from larder.config import Settings, get_settings


def test_defaults():
    settings = get_settings()

    assert settings == Settings()
    assert settings.expiry_window_days == 3
    assert settings.missing_penalty_threshold == 3
    assert settings.fallback_category == "Other"
    assert settings.unit_table_path is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LARDER_LOG_FORMAT", "json")
    monkeypatch.setenv("LARDER_EXPIRY_WINDOW_DAYS", "5")
    monkeypatch.setenv("LARDER_EXPIRY_BOOST", "12.5")
    monkeypatch.setenv("LARDER_DISPLAY_PRECISION", "3")
    monkeypatch.setenv("LARDER_UNIT_TABLE_PATH", "/etc/larder/units.json")

    settings = get_settings()

    assert settings.log_format == "json"
    assert settings.expiry_window_days == 5
    assert settings.expiry_boost == 12.5
    assert settings.display_precision == 3
    assert settings.unit_table_path == Path("/etc/larder/units.json")


def test_malformed_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("LARDER_MISSING_PENALTY_THRESHOLD", "several")
    monkeypatch.setenv("LARDER_MISSING_PENALTY", "lots")

    settings = get_settings()

    assert settings.missing_penalty_threshold == 3
    assert settings.missing_penalty == 15.0


def test_env_file_fallback(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(
        "# local overrides\nLARDER_FALLBACK_CATEGORY=Misc\nLARDER_LOG_LEVEL=DEBUG\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LARDER_LOG_LEVEL", "WARNING")

    settings = get_settings()

    assert settings.fallback_category == "Misc"
    assert settings.log_level == "WARNING"


def test_settings_are_cached():
    assert get_settings() is get_settings()
