"""
Tests for the command line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from stylebook import __version__
from stylebook.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Config pointing --mock at a small seed file."""
    seed = {
        "stylists": {
            "amara-okafor": {
                "services": [{"serviceId": "braids", "durationMins": 240}],
                "availability": {
                    "weeklyRules": {
                        "sat": [{"start": "09:00", "end": "17:00"}],
                    }
                },
            },
            "closed-stylist": {"services": []},
        }
    }
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps(seed), encoding="utf-8")

    path = tmp_path / "config.yaml"
    path.write_text(
        "timezone: America/New_York\n"
        "store:\n"
        f"  mock_data_file: {seed_file}\n"
        "providers:\n"
        "  - name: amara\n"
        "    provider_id: amara-okafor\n",
        encoding="utf-8",
    )
    return path


def test_slots_for_service(config_file):
    result = runner.invoke(app, [
        "slots", "amara", "--service", "braids", "--mock",
        "--config", str(config_file), "--now", "2024-11-23 08:00",
    ])

    assert result.exit_code == 0, result.output
    assert "2024-11-23" in result.output
    assert "2024-11-30" in result.output
    assert "9:00 AM" in result.output
    assert "18 slot(s) on 2 day(s)" in result.output


def test_slots_with_duration(config_file):
    result = runner.invoke(app, [
        "slots", "amara-okafor", "--duration", "480", "--days", "1", "--mock",
        "--config", str(config_file), "--now", "2024-11-23 08:00",
    ])

    assert result.exit_code == 0, result.output
    assert "1 slot(s) on 1 day(s)" in result.output


def test_slots_for_one_date(config_file):
    result = runner.invoke(app, [
        "slots", "amara", "--service", "braids", "--date", "2024-11-30", "--mock",
        "--config", str(config_file), "--now", "2024-11-23 08:00",
    ])

    assert result.exit_code == 0, result.output
    assert "2024-11-30" in result.output
    assert "2024-11-23" not in result.output
    assert "9 slot(s) on 1 day(s)" in result.output


def test_slots_for_date_without_availability(config_file):
    result = runner.invoke(app, [
        "slots", "amara", "--date", "2024-11-25", "--mock",
        "--config", str(config_file), "--now", "2024-11-23 08:00",
    ])

    assert result.exit_code == 0, result.output
    assert "No availability for amara-okafor on 2024-11-25" in result.output


def test_slots_invalid_date(config_file):
    result = runner.invoke(app, [
        "slots", "amara", "--date", "next saturday", "--mock", "--config", str(config_file),
    ])

    assert result.exit_code == 1
    assert "--date must be YYYY-MM-DD" in result.output


def test_slots_no_availability(config_file):
    result = runner.invoke(app, [
        "slots", "closed-stylist", "--mock", "--config", str(config_file),
    ])

    assert result.exit_code == 0, result.output
    assert "No availability" in result.output


def test_slots_unknown_service(config_file):
    result = runner.invoke(app, [
        "slots", "amara", "--service", "perm", "--mock", "--config", str(config_file),
    ])

    assert result.exit_code == 1
    assert "does not offer" in result.output


def test_slots_invalid_now(config_file):
    result = runner.invoke(app, [
        "slots", "amara", "--mock", "--config", str(config_file), "--now", "someday",
    ])

    assert result.exit_code == 1
    assert "--now" in result.output


def test_slots_without_store_configuration(config_file):
    result = runner.invoke(app, ["slots", "amara", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "No document store configured" in result.output


def test_missing_explicit_config(tmp_path):
    result = runner.invoke(app, ["slots", "amara", "--mock", "--config", str(tmp_path / "nope.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_hours(config_file):
    result = runner.invoke(app, ["hours", "amara", "--mock", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "Saturday" in result.output
    assert "9:00 AM – 5:00 PM" in result.output
    assert "Closed" in result.output


def test_list_providers(config_file):
    result = runner.invoke(app, ["list-providers", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "amara-okafor" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
