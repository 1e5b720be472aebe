"""Env var config loading with pydantic-settings."""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()

_PRESETS_PATH = Path(__file__).parent / "presets.yaml"


class CspSettings(BaseSettings):
    """Package configuration, overridden by ``CSP_*`` env vars."""

    model_config = SettingsConfigDict(
        env_prefix="CSP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "info"
    log_json: bool = True

    # Named baseline policies
    presets_file: str = str(_PRESETS_PATH)
    default_preset: str = "balanced"

    # load(): reject rule names outside the directive catalog instead of storing them
    reject_unknown_directives: bool = False


_settings: CspSettings | None = None


def get_settings() -> CspSettings:
    """Get or create the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def load_settings() -> CspSettings:
    """Load settings from env vars (env vars override model defaults)."""
    global _settings
    _settings = CspSettings()
    logger.debug(
        "config_loaded",
        presets_file=_settings.presets_file,
        reject_unknown_directives=_settings.reject_unknown_directives,
    )
    return _settings
