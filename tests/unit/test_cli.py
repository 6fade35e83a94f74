"""
Tests for the geolink command-line interface.

Only URLs that resolve from their text are used, so no request leaves the process.
"""

import json

import pytest
from click.testing import CliRunner

from geolink import __version__
from geolink.cli import cli


def last_json_line(output):
    return json.loads(output.strip().splitlines()[-1])


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.unit
class TestResolveCommand:
    def test_json_output(self, runner):
        result = runner.invoke(cli, ["resolve", "https://www.google.com/maps/@7.998158,98.3251492,17z", "--json"])

        assert result.exit_code == 0, result.output
        assert last_json_line(result.stdout) == {
            "success": True,
            "data": {"coordinates": {"lat": 7.998158, "lng": 98.3251492}, "address": None},
        }

    def test_table_output(self, runner):
        result = runner.invoke(cli, ["resolve", "https://www.google.com/maps/place/Wat+Arun/@13.7437,100.4888,17z"])

        assert result.exit_code == 0, result.output
        assert "13.7437" in result.stdout
        assert "Wat Arun" in result.stdout
        assert "at_zoom_marker" in result.stdout

    def test_unresolvable_url_exits_with_error(self, runner):
        result = runner.invoke(cli, ["resolve", "https://example.com/nothing-here", "--json"])

        assert result.exit_code == 1
        assert last_json_line(result.stdout) == {
            "success": False,
            "message": "Could not extract coordinates from URL. Please check the link format.",
        }

    def test_blank_url(self, runner):
        result = runner.invoke(cli, ["resolve", "  "])

        assert result.exit_code == 1
        assert "URL is required" in result.stdout


@pytest.mark.unit
class TestConfigCommand:
    def test_api_key_masked(self, runner, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("google:\n  api_key: very-secret-key\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(path), "config"])

        assert result.exit_code == 0, result.output
        assert "very-secret-key" not in result.stdout
        assert "***" in result.stdout

    def test_missing_config_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["--config", str(tmp_path / "missing.yaml"), "config"])
        assert result.exit_code != 0


@pytest.mark.unit
def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


@pytest.mark.unit
class TestLogLevel:
    @pytest.fixture
    def debug_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("monitoring:\n  log_level: DEBUG\n", encoding="utf-8")
        return path

    def test_configured_level_kept_without_option(self, runner, debug_config):
        result = runner.invoke(cli, ["--config", str(debug_config), "config"])

        assert result.exit_code == 0, result.output
        assert '"log_level": "DEBUG"' in result.stdout

    def test_option_overrides_configured_level(self, runner, debug_config):
        result = runner.invoke(cli, ["--config", str(debug_config), "--log-level", "ERROR", "config"])

        assert result.exit_code == 0, result.output
        assert '"log_level": "ERROR"' in result.stdout
        assert '"log_level": "DEBUG"' not in result.stdout

    def test_default_level_without_configuration(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0, result.output
        assert '"log_level": "INFO"' in result.stdout
