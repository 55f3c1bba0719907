"""Tests for the JSON sidecar repository."""

import json
import logging
from pathlib import Path

import pytest

from progress_widgets.adapters.json_tracker_repository import JsonTrackerRepository
from progress_widgets.services.tracker import TrackerService
from tests.conftest import FIXED_NOW


def test_path_is_derived_from_sanitized_name(tmp_path: Path) -> None:
    repo = JsonTrackerRepository(tmp_path)

    assert repo.path_for("Month Tracker").name == "tracker_Month_Tracker.json"
    assert repo.path_for("My  big\tgoal").name == "tracker_My_big_goal.json"


def test_missing_file_is_empty(tmp_path: Path) -> None:
    assert JsonTrackerRepository(tmp_path).load_x_days("Month_Tracker") == []


def test_save_writes_x_days_object(tmp_path: Path) -> None:
    repo = JsonTrackerRepository(tmp_path / "data")

    repo.save_x_days("Month_Tracker", [1, 4])

    path = tmp_path / "data" / "tracker_Month_Tracker.json"
    assert json.loads(path.read_text()) == {"xDays": [1, 4]}
    assert repo.load_x_days("Month_Tracker") == [1, 4]


def test_malformed_json_is_logged_and_ignored(tmp_path: Path, caplog) -> None:
    (tmp_path / "tracker_Month_Tracker.json").write_text("{not json")
    repo = JsonTrackerRepository(tmp_path)

    with caplog.at_level(logging.WARNING):
        assert repo.load_x_days("Month_Tracker") == []

    assert "Error loading tracker data" in caplog.text


def test_unexpected_payload_shape_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "tracker_Month_Tracker.json"
    repo = JsonTrackerRepository(tmp_path)

    path.write_text("[1, 2]")
    assert repo.load_x_days("Month_Tracker") == []

    path.write_text('{"xDays": "3"}')
    assert repo.load_x_days("Month_Tracker") == []

    path.write_text('{"xDays": [2, "x", true, 7]}')
    assert repo.load_x_days("Month_Tracker") == [2, 7]


def test_integral_floats_are_read_as_day_indices(tmp_path: Path) -> None:
    (tmp_path / "tracker_Month_Tracker.json").write_text('{"xDays": [3.0, 4.5, 9]}')

    assert JsonTrackerRepository(tmp_path).load_x_days("Month_Tracker") == [3, 9]


def test_toggle_keeps_other_stored_days(tmp_path: Path, tracker_config) -> None:
    path = tmp_path / "tracker_Month_Tracker.json"
    path.write_text('{"xDays": [3.0, 9]}')
    service = TrackerService(JsonTrackerRepository(tmp_path))

    result = service.toggle_today(tracker_config, FIXED_NOW)

    assert result.day_index == 9
    assert result.is_x is False
    assert json.loads(path.read_text()) == {"xDays": [3]}


def test_failed_write_raises_runtime_error(tmp_path: Path) -> None:
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")
    repo = JsonTrackerRepository(blocker)

    with pytest.raises(RuntimeError, match="Failed to save tracker data"):
        repo.save_x_days("Month_Tracker", [1])
