"""Tests for CLI commands: help, session, queue, stats, review, preview and config."""

import json

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from repetita.application.scheduler import preview_intervals
from repetita.interface.cli import app

runner = CliRunner()

RECORDS = """\
decks:
  spanish:
    - id: overdue
      ease_factor: 2.5
      interval_days: 3
      next_review_at: 2001-01-05T00:00:00+00:00
      review_count: 2
      correct_count: 2
    - id: oldest
      ease_factor: 2.2
      interval_days: 1
      next_review_at: 2000-01-01T00:00:00+00:00
      review_count: 3
      lapse_count: 1
      correct_count: 2
      last_reviewed_at: 1999-12-31T10:00:00+00:00
    - id: later
      interval_days: 30
      next_review_at: 2999-01-01T00:00:00+00:00
      review_count: 5
      perfect_count: 5
    - id: brand-new
  latin:
    - id: amo
"""


@pytest.fixture(autouse=True)
def isolated_home(mock_home, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return mock_home


@pytest.fixture
def records_file(tmp_path):
    path = tmp_path / "records.yaml"
    path.write_text(RECORDS, encoding="utf-8")
    return path


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "SM-2 spaced-repetition scheduler" in result.stdout
    for command in ("session", "queue", "stats", "review", "preview", "config"):
        assert command in result.stdout


# --- Session ---


def test_session_json(records_file):
    result = runner.invoke(app, ["session", "--records", str(records_file), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["cards"] == ["oldest", "overdue", "brand-new", "amo"]
    assert data["due_available"] == 2
    assert data["new_available"] == 2


def test_session_caps_and_deck(records_file):
    result = runner.invoke(
        app,
        [
            "session", "--records", str(records_file), "--deck", "spanish",
            "--max-new", "0", "--max-review", "1", "--json",
        ],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["cards"] == ["oldest"]


def test_session_uses_default_records_file(records_file):
    result = runner.invoke(app, ["session"])

    assert result.exit_code == 0
    assert "due  oldest" in result.stdout
    assert "new  amo" in result.stdout


def test_empty_session(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("cards: []\n")

    result = runner.invoke(app, ["session", "--records", str(path)])

    assert result.exit_code == 0
    assert "Nothing to study now." in result.stdout


def test_session_missing_file(tmp_path):
    result = runner.invoke(app, ["session", "--records", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1


@pytest.mark.parametrize("flag", ["--max-new", "--max-review"])
def test_session_rejects_negative_cap(records_file, flag):
    result = runner.invoke(app, ["session", "--records", str(records_file), flag, "-1"])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValidationError)


def test_session_invalid_env_config(records_file, monkeypatch):
    monkeypatch.setenv("REPETITA_MAX_REVIEW", "-4")

    result = runner.invoke(app, ["session", "--records", str(records_file)])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


# --- Queue & Stats ---


def test_queue_json(records_file):
    result = runner.invoke(app, ["queue", "--records", str(records_file), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["due"] == ["oldest", "overdue"]
    assert data["estimated_minutes"] == 1.0


def test_stats_json(records_file):
    result = runner.invoke(app, ["stats", "--records", str(records_file), "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["total_cards"] == 5
    assert data["due_cards"] == 2
    assert data["new_cards"] == 2
    assert data["scheduled_cards"] == 1
    assert data["total_reviews"] == 10
    assert data["last_reviewed_at"].startswith("1999-12-31T10:00:00")


def test_stats_text(records_file):
    result = runner.invoke(app, ["stats", "--records", str(records_file), "--deck", "latin"])

    assert result.exit_code == 0
    assert "Cards: 1" in result.stdout
    assert "Average ease: 2.50" in result.stdout


# --- Review & Preview ---


def test_review_prints_updated_record(records_file):
    before = records_file.read_text()

    result = runner.invoke(app, ["review", "overdue", "GOOD", "--records", str(records_file)])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["id"] == "overdue"
    assert data["review_count"] == 3
    assert data["correct_count"] == 3
    assert data["interval_days"] == 8  # ceil(3 * 2.5)
    assert records_file.read_text() == before


def test_review_again(records_file):
    result = runner.invoke(app, ["review", "oldest", "again", "--records", str(records_file)])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["interval_days"] == 0
    assert data["lapse_count"] == 2
    assert data["ease_factor"] == 2.0


def test_review_unknown_card(records_file):
    result = runner.invoke(app, ["review", "ghost", "good", "--records", str(records_file)])
    assert result.exit_code == 1


def test_review_invalid_grade(records_file):
    result = runner.invoke(app, ["review", "overdue", "hard", "--records", str(records_file)])
    assert result.exit_code != 0


def test_preview_json(records_file):
    result = runner.invoke(
        app, ["preview", "brand-new", "--records", str(records_file), "--json"]
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["again"]["interval_days"] == 0
    assert data["good"]["interval_days"] == 1
    assert data["easy"]["interval_days"] == 4


def test_preview_text(records_file):
    result = runner.invoke(app, ["preview", "later", "--records", str(records_file)])

    assert result.exit_code == 0
    assert "Again" in result.stdout
    assert "Easy" in result.stdout


def test_preview_goes_through_scheduler_previews(records_file, monkeypatch):
    calls = []

    def spy(record, now, *, max_interval_days):
        calls.append(max_interval_days)
        return preview_intervals(record, now, max_interval_days=max_interval_days)

    monkeypatch.setattr("repetita.interface.cli.preview_intervals", spy)
    monkeypatch.setenv("REPETITA_MAX_INTERVAL_DAYS", "50")

    result = runner.invoke(app, ["preview", "later", "--records", str(records_file), "--json"])

    assert result.exit_code == 0
    assert calls == [50]
    data = json.loads(result.stdout)
    # Stored interval 30 grows to the cap of 50 under Good and Easy
    assert data["good"]["interval_days"] == 50
    assert data["easy"]["interval_days"] == 50


# --- Config ---


def test_config_show(isolated_home, tmp_path, monkeypatch):
    monkeypatch.setenv("REPETITA_MAX_NEW", "11")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["max_new"] == 11
    assert data["records_path"] == str((tmp_path / "records.yaml").resolve())


def test_verbose_flag(records_file):
    result = runner.invoke(app, ["-vv", "queue", "--records", str(records_file)])
    assert result.exit_code == 0
    assert "Due cards: 2" in result.stdout
