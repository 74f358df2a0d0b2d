# src/siap/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/siap/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `SIAP_REMOTE_BASE_URL`, `GEMINI_API_KEY`)
- an external YAML file via `SIAP_CONFIG_PATH`

Design rule:
- Tuning knobs (geofence radius, canvas size, timeouts) live in YAML, not in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from siap.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `siap.config`."""
    text = resources.files("siap.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "SIAP Visit"
    timezone: str = "Asia/Jakarta"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class GeofenceSettings(BaseModel):
    radius_m: float = Field(250, gt=0)


class LocationSettings(BaseModel):
    timeout_seconds: float = Field(10, gt=0)
    enable_high_accuracy: bool = True


class SignatureSettings(BaseModel):
    width: int = Field(500, ge=1)
    height: int = Field(176, ge=1)
    stroke_width: int = Field(3, ge=1)
    ink_color: str = "#0f172a"


class RemoteSettings(BaseModel):
    base_url: str


class CacheSettings(BaseModel):
    path: str = ".cache/siap/state.json"


class AdvisorSettings(BaseModel):
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-3-flash-preview"
    api_key: str | None = None
    empathy_fallback: str = (
        "Teruslah mendampingi dengan hati. Setiap langkah kecil menuju perubahan adalah kemenangan."
    )
    leadership_fallback: str = (
        "Kepemimpinan adalah seni memberdayakan orang lain untuk melampaui batas mereka sendiri."
    )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    geofence: GeofenceSettings = Field(default_factory=GeofenceSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    signature: SignatureSettings = Field(default_factory=SignatureSettings)
    remote: RemoteSettings
    cache: CacheSettings = Field(default_factory=CacheSettings)
    advisor: AdvisorSettings = Field(default_factory=AdvisorSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("SIAP_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    remote_url = os.getenv("SIAP_REMOTE_BASE_URL")
    if remote_url:
        data.setdefault("remote", {})["base_url"] = remote_url

    cache_path = os.getenv("SIAP_CACHE_PATH")
    if cache_path:
        data.setdefault("cache", {})["path"] = cache_path

    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if api_key:
        data.setdefault("advisor", {})["api_key"] = api_key

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SIAP_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
