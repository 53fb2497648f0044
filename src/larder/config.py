"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global engine settings loaded from environment variables or .env files."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    expiry_window_days: int = Field(
        default=3,
        ge=0,
        description="Pantry items expiring within this many days boost a recipe's ranking.",
    )
    expiry_boost: float = Field(
        default=10.0,
        ge=0,
        description="Ranking score bonus for recipes that use near-expiry pantry items.",
    )
    missing_penalty_threshold: int = Field(
        default=3,
        ge=0,
        description="Recipes missing more required ingredients than this are penalised.",
    )
    missing_penalty: float = Field(
        default=15.0,
        ge=0,
        description="Ranking score penalty applied above the missing ingredient threshold.",
    )
    display_precision: int = Field(
        default=2,
        ge=0,
        description="Decimal places used when rendering quantities.",
    )
    unit_table_path: Optional[Path] = Field(
        default=None,
        description="JSON file replacing the built-in unit conversion table.",
    )
    category_map_path: Optional[Path] = Field(
        default=None,
        description="JSON file with ingredient category overrides and keywords.",
    )
    fallback_category: str = Field(
        default="Other",
        description="Category assigned to ingredients without reference data.",
    )

    model_config = ConfigDict(frozen=True)


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (log_level := _env("LARDER_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("LARDER_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (window := _env("LARDER_EXPIRY_WINDOW_DAYS")):
        try:
            payload["expiry_window_days"] = int(window)
        except ValueError:
            pass
    if (boost := _env("LARDER_EXPIRY_BOOST")):
        try:
            payload["expiry_boost"] = float(boost)
        except ValueError:
            pass
    if (threshold := _env("LARDER_MISSING_PENALTY_THRESHOLD")):
        try:
            payload["missing_penalty_threshold"] = int(threshold)
        except ValueError:
            pass
    if (penalty := _env("LARDER_MISSING_PENALTY")):
        try:
            payload["missing_penalty"] = float(penalty)
        except ValueError:
            pass
    if (precision := _env("LARDER_DISPLAY_PRECISION")):
        try:
            payload["display_precision"] = int(precision)
        except ValueError:
            pass
    if (unit_table_path := _env("LARDER_UNIT_TABLE_PATH")):
        payload["unit_table_path"] = Path(unit_table_path)
    if (category_map_path := _env("LARDER_CATEGORY_MAP_PATH")):
        payload["category_map_path"] = Path(category_map_path)
    if (fallback := _env("LARDER_FALLBACK_CATEGORY")):
        payload["fallback_category"] = fallback
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
