"""Missed-day tracking for tracker widgets."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from progress_widgets.config import WidgetConfig
from progress_widgets.domain.progress import WidgetKind
from progress_widgets.domain.tracker import (
    DOT_STATE,
    X_STATE,
    TogglePrompt,
    ToggleResult,
)
from progress_widgets.services.progress import days_since_start, total_days

_logger = logging.getLogger(__name__)


class TrackerRepository(Protocol):
    """Persistence interface for X-marked day indices."""

    def load_x_days(self, key: str) -> list[int]:
        """Return the X-marked day indices for a tracker."""

    def save_x_days(self, key: str, x_days: list[int]) -> None:
        """Replace the X-marked day indices for a tracker."""


@dataclass
class TrackerService:
    """Service for reading and toggling missed days."""

    repository: TrackerRepository

    def get_x_days(self, config: WidgetConfig) -> list[int]:
        """Return X days for trackers and nothing for countdowns."""
        if config.kind is not WidgetKind.TRACKER:
            return []
        return self.repository.load_x_days(config.key)

    def today_index(self, config: WidgetConfig, now: datetime) -> int | None:
        """Return the index of the most recently completed day, if in range."""
        date_range = config.date_range
        index = days_since_start(date_range, now) - 1
        if 0 <= index < total_days(date_range):
            return index
        return None

    def prompt_for_today(
        self, config: WidgetConfig, now: datetime
    ) -> TogglePrompt | None:
        """Describe the pending toggle for today, or None when out of range."""
        index = self.today_index(config, now)
        if index is None:
            return None
        is_x = index in self.repository.load_x_days(config.key)
        return TogglePrompt(
            day_index=index,
            current_state=X_STATE if is_x else DOT_STATE,
            target_state=DOT_STATE if is_x else X_STATE,
        )

    def toggle_day(self, key: str, index: int) -> ToggleResult:
        """Flip a single day between X and dot and persist the result."""
        x_days = self.repository.load_x_days(key)
        if index in x_days:
            x_days = [day for day in x_days if day != index]
            is_x = False
        else:
            x_days = [*x_days, index]
            is_x = True
        self.repository.save_x_days(key, x_days)
        _logger.info("Tracker toggle: key=%s day=%s is_x=%s", key, index, is_x)
        return ToggleResult(day_index=index, is_x=is_x, x_days=x_days)

    def toggle_today(self, config: WidgetConfig, now: datetime) -> ToggleResult:
        """Toggle today's day for a tracker widget."""
        if config.kind is not WidgetKind.TRACKER:
            raise ValueError(f"{config.event_name} is not a tracker")
        index = self.today_index(config, now)
        if index is None:
            raise ValueError(f"Today is outside the range of {config.event_name}")
        return self.toggle_day(config.key, index)
