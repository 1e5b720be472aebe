"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import structlog

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True, scope="session")
def _route_structlog_to_stdlib():
    """Send log events through stdlib logging so pytest captures them."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch):
    """Provide default settings for all tests."""
    monkeypatch.setenv("CSP_LOG_JSON", "false")
    monkeypatch.setenv("CSP_LOG_LEVEL", "debug")
    monkeypatch.delenv("CSP_REJECT_UNKNOWN_DIRECTIVES", raising=False)
    monkeypatch.delenv("CSP_PRESETS_FILE", raising=False)
    monkeypatch.delenv("CSP_DEFAULT_PRESET", raising=False)

    # Reset cached settings and presets
    import csp_manager.config.loader as loader
    import csp_manager.config.presets as presets
    loader._settings = None
    presets._presets = None
    yield
    loader._settings = None
    presets._presets = None


@pytest.fixture
def reports_path() -> Path:
    return FIXTURES / "reports.json"


@pytest.fixture
def reports(reports_path) -> list[dict]:
    """Violation report bodies as delivered by the Reporting API."""
    with open(reports_path) as f:
        return json.load(f)
