"""Tests for tracker service."""

from datetime import UTC, datetime

import pytest

from progress_widgets.config import WidgetConfig
from progress_widgets.services.tracker import TrackerService
from tests.conftest import FIXED_NOW, InMemoryTrackerRepository


def test_today_index_is_last_completed_day(tracker_config: WidgetConfig) -> None:
    service = TrackerService(InMemoryTrackerRepository())

    assert service.today_index(tracker_config, FIXED_NOW) == 9


def test_today_index_out_of_range(tracker_config: WidgetConfig) -> None:
    service = TrackerService(InMemoryTrackerRepository())
    first_day = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
    long_after = datetime(2025, 8, 1, 12, 0, tzinfo=UTC)

    assert service.today_index(tracker_config, first_day) is None
    assert service.today_index(tracker_config, long_after) is None


def test_prompt_describes_pending_toggle(tracker_config: WidgetConfig) -> None:
    repo = InMemoryTrackerRepository(x_days={"Month_Tracker": [9]})
    service = TrackerService(repo)

    prompt = service.prompt_for_today(tracker_config, FIXED_NOW)

    assert prompt is not None
    assert prompt.title == "toggle today"
    assert prompt.message == (
        "day 10 is currently: X\nwhat would you like to change it to?"
    )
    assert prompt.actions == ["change to dot", "keep as X"]


def test_toggle_twice_restores_original_state(tracker_config: WidgetConfig) -> None:
    repo = InMemoryTrackerRepository(x_days={"Month_Tracker": [3, 5]})
    service = TrackerService(repo)

    first = service.toggle_today(tracker_config, FIXED_NOW)
    assert first.is_x
    assert first.state == "X"
    assert sorted(repo.x_days["Month_Tracker"]) == [3, 5, 9]

    second = service.toggle_today(tracker_config, FIXED_NOW)
    assert not second.is_x
    assert sorted(repo.x_days["Month_Tracker"]) == [3, 5]
    assert repo.saves == ["Month_Tracker", "Month_Tracker"]


def test_toggle_today_rejects_countdowns(countdown_config: WidgetConfig) -> None:
    service = TrackerService(InMemoryTrackerRepository())

    with pytest.raises(ValueError, match="not a tracker"):
        service.toggle_today(countdown_config, FIXED_NOW)


def test_toggle_today_rejects_out_of_range(tracker_config: WidgetConfig) -> None:
    repo = InMemoryTrackerRepository()
    service = TrackerService(repo)

    with pytest.raises(ValueError, match="outside the range"):
        service.toggle_today(tracker_config, datetime(2025, 6, 1, tzinfo=UTC))
    assert repo.saves == []


def test_countdowns_have_no_x_days(countdown_config: WidgetConfig) -> None:
    repo = InMemoryTrackerRepository(x_days={"End_of_the_month": [1]})
    service = TrackerService(repo)

    assert service.get_x_days(countdown_config) == []
