"""Tests for the CLI commands."""

import json
from datetime import date, datetime
from unittest.mock import patch, MagicMock

import pytest
import requests
from click.testing import CliRunner

from daygrid.adapters.events_api import AuthenticationError
from daygrid.cli import main
from daygrid.config import Config
from daygrid.core.layout import DayCell


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def config():
    with patch("daygrid.cli.load_config", return_value=Config(email="me@example.com")) as mock_load:
        yield mock_load.return_value


@pytest.fixture
def repo():
    with patch("daygrid.cli.get_repository") as mock_get:
        mock_get.return_value = MagicMock()
        yield mock_get.return_value


class TestDay:
    @patch("daygrid.cli.compile_day", return_value="### Saturday, March 02\n  No events.")
    def test_text(self, mock_compile, runner):
        result = runner.invoke(main, ["day", "--date", "2024-03-02"])
        assert result.exit_code == 0
        assert "No events." in result.output
        assert mock_compile.call_args[0][1] == date(2024, 3, 2)

    @patch("daygrid.cli.compute_day")
    def test_json(self, mock_compute, runner):
        mock_compute.return_value = DayCell(day=date(2024, 3, 2))
        result = runner.invoke(main, ["day", "--date", "2024-03-02", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["day"] == "2024-03-02"

    def test_bad_date(self, runner):
        result = runner.invoke(main, ["day", "--date", "March 2"])
        assert result.exit_code == 2
        assert "YYYY-MM-DD" in result.output

    @patch("daygrid.cli.compile_day", side_effect=AuthenticationError("No valid session."))
    def test_auth_error(self, mock_compile, runner):
        result = runner.invoke(main, ["day"])
        assert result.exit_code == 1
        assert "Error: No valid session." in result.output


class TestMonth:
    @patch("daygrid.cli.compile_month", return_value="grid")
    def test_month_with_offset(self, mock_compile, runner):
        result = runner.invoke(main, ["month", "--month", "2024-11", "--offset", "2"])
        assert result.exit_code == 0
        assert mock_compile.call_args[0][1] == date(2025, 1, 1)

    @patch("daygrid.cli.compile_month", side_effect=requests.ConnectionError("down"))
    def test_network_error(self, mock_compile, runner):
        result = runner.invoke(main, ["month"])
        assert result.exit_code == 1


class TestWindow:
    def test_json(self, runner):
        result = runner.invoke(main, ["window", "0", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["slot_index"] == 0
        assert data["month_offset"] == -3
        assert data["rendered_slots"] == [0, 1, 2]

    def test_bad_settings(self, runner, config):
        config.current_month_index = 99
        result = runner.invoke(main, ["window", "0"])
        assert result.exit_code == 1
        assert "invalid month window settings" in result.output


class TestAddRemove:
    def test_add(self, runner, repo):
        result = runner.invoke(
            main,
            ["add", "Dentist", "--start", "2024-03-02T09:00", "--end", "2024-03-02T10:00", "--category", "red"],
        )
        assert result.exit_code == 0
        draft = repo.create_event.call_args[0][0]
        assert draft["title"] == "Dentist"
        assert draft["start"] == datetime(2024, 3, 2, 9)
        assert draft["end_time"] == datetime(2024, 3, 2, 10)
        assert draft["category_id"] == "red"

    def test_add_end_before_start(self, runner, repo):
        result = runner.invoke(main, ["add", "Oops", "--start", "2024-03-02T09:00", "--end", "2024-03-01T09:00"])
        assert result.exit_code == 2
        repo.create_event.assert_not_called()

    def test_add_warns_on_unknown_colour(self, runner, repo):
        result = runner.invoke(main, ["add", "Gym", "--start", "2024-03-02T09:00", "--category", "sparkly"])
        assert result.exit_code == 0
        assert "dodgerblue" in result.output

    def test_remove_confirmed(self, runner, repo):
        result = runner.invoke(main, ["remove", "42"], input="y\n")
        assert result.exit_code == 0
        repo.delete_event.assert_called_once_with("42")

    def test_remove_declined(self, runner, repo):
        result = runner.invoke(main, ["remove", "42"], input="n\n")
        assert result.exit_code == 0
        repo.delete_event.assert_not_called()


class TestRecord:
    def test_uploads_audio(self, runner, repo, tmp_path):
        audio = tmp_path / "note.webm"
        audio.write_bytes(b"data")
        result = runner.invoke(main, ["record", str(audio), "--date", "2024-03-02"])
        assert result.exit_code == 0
        repo.create_event_from_audio.assert_called_once_with(audio, date(2024, 3, 2))


class TestLogin:
    def test_login(self, runner, repo):
        result = runner.invoke(main, ["login", "--password", "pw"])
        assert result.exit_code == 0
        repo.login.assert_called_once_with("me@example.com", "pw")

    def test_login_failure(self, runner, repo):
        repo.login.side_effect = AuthenticationError("Login failed: nope")
        result = runner.invoke(main, ["login", "--password", "pw"])
        assert result.exit_code == 1

    def test_logout(self, runner, repo):
        result = runner.invoke(main, ["logout"])
        assert result.exit_code == 0
        repo.logout.assert_called_once()


class TestColor:
    def test_valid(self, runner):
        result = runner.invoke(main, ["color", "red"])
        assert "rgba(255,0,0,0.3)" in result.output

    def test_invalid(self, runner):
        result = runner.invoke(main, ["color", "invalidcolorxyz"])
        assert "falling back to dodgerblue" in result.output
        assert "rgba(30,144,255,0.3)" in result.output
