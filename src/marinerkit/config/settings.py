# src/marinerkit/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/marinerkit/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `MARINERKIT_CONFIG_PATH` (replaces the packaged defaults)
- a small whitelist of environment variables (see `_apply_env_overrides`)

Design rule:
- Tuning knobs (throttle window, cruising speed) live in YAML, not in the core functions.
  The core takes them as explicit parameters; only entrypoints read settings.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from marinerkit.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `marinerkit.config`."""
    text = resources.files("marinerkit.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "MarinerKit"
    timezone: str = "America/New_York"
    log_level: str = "INFO"


class SyncSettings(BaseModel):
    throttle_window_seconds: float = Field(10.0, ge=0)


class RouteSettings(BaseModel):
    average_speed_knots: float = Field(6.0, gt=0)
    intermediate_interval_minutes: int = Field(30, gt=0)


class CatalogSettings(BaseModel):
    stations_path: str = "data/catalogs/stations.json"
    waypoints_path: str = "data/routes/route.json"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
    route: RouteSettings = Field(default_factory=RouteSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("MARINERKIT_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    throttle = os.getenv("MARINERKIT_SYNC_THROTTLE_SECONDS")
    if throttle:
        data.setdefault("sync", {})["throttle_window_seconds"] = throttle

    speed = os.getenv("MARINERKIT_AVERAGE_SPEED_KNOTS")
    if speed:
        data.setdefault("route", {})["average_speed_knots"] = speed

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("MARINERKIT_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
