"""Settings and preset loading."""

from csp_manager.config.loader import CspSettings, get_settings, load_settings
from csp_manager.config.presets import (
    PresetNotFoundError,
    get_preset,
    load_presets,
    reset_presets_cache,
)

__all__ = [
    "CspSettings",
    "PresetNotFoundError",
    "get_preset",
    "get_settings",
    "load_presets",
    "load_settings",
    "reset_presets_cache",
]
