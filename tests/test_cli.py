"""
Tests for the Typer command line interface.
"""

import pytest
from typer.testing import CliRunner

from bookingwindow.cli.app import app

runner = CliRunner()

CONFIG_YAML = """
organizations:
  - id: acme
    name: ACME Equipment Rental
    working_hours:
      enabled: true
      weekly_schedule:
        1: { is_open: true, open_time: "09:00", close_time: "17:00" }
        2: { is_open: true, open_time: "09:00", close_time: "17:00" }
      overrides:
        - date: 2024-11-26
          is_open: false
          reason: Inventory day
    booking_policy:
      buffer_start_time: 4
      max_booking_length: 48
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return str(path)


def test_check_valid_window(config_file):
    result = runner.invoke(
        app,
        ["check", "acme", "2024-11-25T10:00", "2024-11-25T12:00", "--now", "2024-11-20T10:00", "-c", config_file],
    )

    assert result.exit_code == 0
    assert "Booking window is valid" in result.output


def test_check_invalid_window_lists_reasons(config_file):
    result = runner.invoke(
        app,
        ["check", "acme", "2024-11-26T10:00", "2024-11-26T12:00", "--now", "2024-11-26T09:00", "-c", config_file],
    )

    assert result.exit_code == 1
    assert "at least 4 hours in advance" in result.output
    assert "Inventory day" in result.output


def test_check_unknown_organization(config_file):
    result = runner.invoke(
        app,
        ["check", "nope", "2024-11-25T10:00", "2024-11-25T12:00", "-c", config_file],
    )

    assert result.exit_code == 1
    assert "Unknown organization" in result.output


def test_hours_preview(config_file):
    result = runner.invoke(app, ["hours", "acme", "--from", "2024-11-25", "--days", "3", "-c", config_file])

    assert result.exit_code == 0
    assert "Working days: Monday, Tuesday" in result.output
    assert "Maximum booking length is 48 hours." in result.output
    assert "2024-11-26" in result.output
    assert "Closed" in result.output


def test_list_organizations(config_file):
    result = runner.invoke(app, ["list-organizations", "-c", config_file])

    assert result.exit_code == 0
    assert "acme" in result.output


def test_missing_config(tmp_path):
    result = runner.invoke(app, ["list-organizations", "-c", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output
