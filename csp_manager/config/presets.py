"""Named baseline policies loaded from YAML."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from csp_manager.catalog import PolicyError
from csp_manager.config.loader import get_settings

logger = structlog.get_logger()

# Cache loaded presets
_presets: dict[str, str] | None = None


class PresetNotFoundError(PolicyError):
    """Raised when a preset name is not defined in the presets file."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown CSP preset: {name!r}")


def load_presets() -> dict[str, str]:
    """Load preset headers from YAML, caching after first load."""
    global _presets
    if _presets is not None:
        return _presets
    path = Path(get_settings().presets_file)
    if not path.exists():
        logger.error("header_presets_not_found", path=str(path))
        _presets = {}
        return _presets
    with open(path) as f:
        _presets = {str(k): str(v) for k, v in (yaml.safe_load(f) or {}).items()}
    logger.debug("preset_loaded", path=str(path), presets=sorted(_presets))
    return _presets


def reset_presets_cache() -> None:
    """Reset the presets cache (for testing)."""
    global _presets
    _presets = None


def get_preset(name: str | None = None) -> str:
    """Return the header text of a preset (the configured default if omitted)."""
    name = name or get_settings().default_preset
    presets = load_presets()
    if name not in presets:
        raise PresetNotFoundError(name)
    return presets[name]
