"""
Tests for the faultline command line interface.
"""

import json

from typer.testing import CliRunner

from faultline.cli.cli import app_cli

runner = CliRunner()


def test_classify_json():
    result = runner.invoke(app_cli, ["classify", "Network connection timeout", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["category"] == "NETWORK"
    assert payload["error_code"] == "NETWORK_ERROR"
    assert payload["should_alert"] is True


def test_classify_with_status_json():
    result = runner.invoke(app_cli, ["classify", "Not Found", "--status", "404", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["error_code"] == "HTTP_404"
    assert payload["should_alert"] is False


def test_classify_with_kind_json():
    result = runner.invoke(app_cli, ["classify", "Order total exceeds limit", "--kind", "ValidationError", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["category"] == "VALIDATION"


def test_classify_table():
    result = runner.invoke(app_cli, ["classify", "Security violation detected"])

    assert result.exit_code == 0
    assert "SECURITY" in result.stdout
    assert "Alert" in result.stdout


def test_patterns():
    result = runner.invoke(app_cli, ["patterns"])

    assert result.exit_code == 0
    assert "Error Patterns" in result.stdout
