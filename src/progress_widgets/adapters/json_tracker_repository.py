"""JSON sidecar repository for tracker state."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from progress_widgets.config import widget_key
from progress_widgets.services.tracker import TrackerRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonTrackerRepository(TrackerRepository):
    """Stores X days as `{"xDays": [...]}` in one file per tracker."""

    data_dir: Path

    def path_for(self, key: str) -> Path:
        """Return the sidecar path for a tracker key or event name."""
        return self.data_dir / f"tracker_{widget_key(key)}.json"

    def load_x_days(self, key: str) -> list[int]:
        """Return stored X days, treating unreadable files as empty."""
        path = self.path_for(key)
        if not path.exists():
            return []
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.warning("Error loading tracker data from %s: %s", path, exc)
            return []
        x_days = payload.get("xDays", []) if isinstance(payload, dict) else None
        if not isinstance(x_days, list):
            _logger.warning("Ignoring malformed tracker data in %s", path)
            return []
        return [day for day in map(_day_index, x_days) if day is not None]

    def save_x_days(self, key: str, x_days: list[int]) -> None:
        """Overwrite the sidecar file with the given X days."""
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps({"xDays": x_days}), encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"Failed to save tracker data to {path}") from exc


def _day_index(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
