"""Tests for settings and presets."""

from __future__ import annotations

import pytest

from csp_manager import ContentSecurityPolicy
from csp_manager.config import (
    PresetNotFoundError,
    get_preset,
    get_settings,
    load_presets,
    load_settings,
    reset_presets_cache,
)


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.log_level == "debug"
        assert settings.log_json is False
        assert settings.default_preset == "balanced"
        assert settings.reject_unknown_directives is False
        assert settings.presets_file.endswith("presets.yaml")

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CSP_DEFAULT_PRESET", "strict")
        monkeypatch.setenv("CSP_REJECT_UNKNOWN_DIRECTIVES", "1")
        settings = load_settings()
        assert settings.default_preset == "strict"
        assert settings.reject_unknown_directives is True
        assert get_settings() is settings


# ── presets ──────────────────────────────────────────────────────────────


class TestPresets:
    def test_packaged_presets(self):
        assert set(load_presets()) == {"strict", "balanced", "permissive"}

    def test_cached(self):
        assert load_presets() is load_presets()
        first = load_presets()
        reset_presets_cache()
        assert load_presets() is not first

    def test_default_preset(self):
        assert get_preset() == get_preset("balanced")

    def test_unknown_preset(self):
        with pytest.raises(PresetNotFoundError, match="nope"):
            get_preset("nope")

    def test_missing_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CSP_PRESETS_FILE", str(tmp_path / "missing.yaml"))
        assert load_presets() == {}

    def test_custom_file(self, monkeypatch, tmp_path):
        path = tmp_path / "presets.yaml"
        path.write_text("locked: \"default-src 'none'\"\n")
        monkeypatch.setenv("CSP_PRESETS_FILE", str(path))
        monkeypatch.setenv("CSP_DEFAULT_PRESET", "locked")
        assert str(ContentSecurityPolicy.from_preset()) == "default-src 'none'"


class TestFromPreset:
    def test_strict(self):
        policy = ContentSecurityPolicy.from_preset("strict")
        assert str(policy) == "; ".join([
            "base-uri 'self'",
            "connect-src 'self'",
            "default-src 'self'",
            "font-src 'self'",
            "form-action 'self'",
            "frame-ancestors 'none'",
            "img-src 'self'",
            "object-src 'none'",
            "script-src 'self'",
            "style-src 'self'",
            "upgrade-insecure-requests",
        ])

    def test_balanced(self):
        policy = ContentSecurityPolicy.from_preset("balanced")
        json = policy.to_json()
        assert json["rules"]["data:"] == ["img-src"]
        assert json["rules"]["https:"] == ["connect-src", "font-src", "img-src"]
        assert "img-src 'self' data: https:" in str(policy)

    def test_permissive(self):
        policy = ContentSecurityPolicy.from_preset("permissive")
        assert "connect-src *" in str(policy)
        assert "script-src 'self' 'unsafe-eval' 'unsafe-inline' https:" in str(policy)

    @pytest.mark.parametrize("name", ["strict", "balanced", "permissive"])
    def test_presets_are_stable(self, name):
        once = str(ContentSecurityPolicy.from_preset(name))
        assert str(ContentSecurityPolicy(once)) == once
