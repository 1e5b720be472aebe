"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest

import csp_manager.__main__ as cli


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    """Keep the CLI from reconfiguring logging for the whole test session."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


class TestCompact:
    def test_compact(self, capsys):
        assert cli.main(["compact", "'self' *.example.com www.example.com", "example.com"]) == 0
        assert capsys.readouterr().out.strip() == "'self' *.example.com example.com"


class TestNormalize:
    def test_text(self, capsys):
        assert cli.main(["normalize", "script-src https://a.com a.com 'self'; upgrade-insecure-requests"]) == 0
        assert capsys.readouterr().out.strip() == "script-src 'self' a.com; upgrade-insecure-requests"

    def test_json(self, capsys):
        assert cli.main(["normalize", "img-src a.com", "--format", "json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"rules": {"a.com": ["img-src"]}, "flags": {}}

    def test_table(self, capsys):
        assert cli.main(["normalize", "img-src a.com", "--format", "table"]) == 0
        assert json.loads(capsys.readouterr().out) == [
            ["rules", [["a.com", ["img-src"]]]],
            ["flags", []],
        ]

    def test_invalid_flag(self, capsys):
        assert cli.main(["normalize", "report-to bad!name"]) == 1
        assert "Invalid value for report-to" in capsys.readouterr().err

    def test_strict(self, capsys):
        assert cli.main(["normalize", "script-scr a.com", "--strict"]) == 1
        assert "script-scr" in capsys.readouterr().err


class TestAdjust:
    def test_reports_file(self, capsys, reports_path):
        assert cli.main(["adjust", str(reports_path), "--header", "img-src 'self'"]) == 0
        out = capsys.readouterr().out.strip()
        assert "img-src 'self' data" in out
        assert "font-src fonts.gstatic.com" in out

    def test_single_report(self, capsys, tmp_path):
        path = tmp_path / "report.json"
        path.write_text(json.dumps({"effectiveDirective": "img-src", "blockedURL": "https://a.com/x"}))
        assert cli.main(["adjust", str(path), "--preset", "strict"]) == 0
        assert "img-src 'self' a.com" in capsys.readouterr().out

    def test_missing_file(self, capsys, tmp_path):
        assert cli.main(["adjust", str(tmp_path / "nope.json")]) == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestPreset:
    def test_default(self, capsys):
        assert cli.main(["preset"]) == 0
        assert "object-src 'none'" in capsys.readouterr().out

    def test_unknown(self, capsys):
        assert cli.main(["preset", "nope"]) == 1
        assert "Unknown CSP preset" in capsys.readouterr().err


def test_no_command(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out
