"""Shared test fixtures."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from progress_widgets.app_logging import LOGGER_NAME
from progress_widgets.config import Settings, WidgetConfig
from progress_widgets.containers import AppContainer
from progress_widgets.domain.progress import WidgetFamily, WidgetKind
from progress_widgets.services.render import Rgba, Symbol, WidgetCanvas, WidgetRenderer
from progress_widgets.services.tracker import TrackerRepository, TrackerService
from progress_widgets.services.widgets import WidgetService

FIXED_NOW = datetime(2025, 6, 11, 9, 30, tzinfo=UTC)


@dataclass
class InMemoryTrackerRepository(TrackerRepository):
    """In-memory tracker repository for tests."""

    x_days: dict[str, list[int]] = field(default_factory=dict)
    saves: list[str] = field(default_factory=list)

    def load_x_days(self, key: str) -> list[int]:
        return list(self.x_days.get(key, []))

    def save_x_days(self, key: str, x_days: list[int]) -> None:
        self.x_days[key] = list(x_days)
        self.saves.append(key)


@dataclass
class FakeCanvas(WidgetCanvas):
    """Canvas that records draw calls instead of rasterizing."""

    width: int = 338
    height: int = 158
    background: Rgba | None = None
    background_image: Path | None = None
    fail_image: bool = False
    overlays: list[Rgba] = field(default_factory=list)
    symbols: list[tuple[float, float, int, Symbol, Rgba]] = field(
        default_factory=list
    )
    texts: list[tuple[float, float, str, bool]] = field(default_factory=list)

    @classmethod
    def for_family(cls, family: WidgetFamily) -> "FakeCanvas":
        return cls(width=family.value.width, height=family.value.height)

    def fill_background(self, color: Rgba) -> None:
        self.background = color

    def draw_background_image(self, path: Path) -> None:
        if self.fail_image:
            raise OSError("cannot identify image file")
        self.background_image = path

    def draw_overlay(self, color: Rgba) -> None:
        self.overlays.append(color)

    def draw_symbol(
        self, x: float, y: float, size: int, symbol: Symbol, color: Rgba
    ) -> None:
        self.symbols.append((x, y, size, symbol, color))

    def draw_text(
        self, x: float, y: float, text: str, color: Rgba, size: int, *, bold: bool
    ) -> None:
        self.texts.append((x, y, text, bold))

    def text_width(self, text: str, size: int, *, bold: bool) -> float:
        return len(text) * size * 0.6

    def to_png(self) -> bytes:
        return b"\x89PNG fake"

    @property
    def text_lines(self) -> list[str]:
        return [text for _, _, text, _ in self.texts]


def make_config(**overrides: object) -> WidgetConfig:
    values: dict[str, object] = {
        "event_name": "End of the month",
        "kind": WidgetKind.COUNTDOWN,
        "start_date": date(2025, 6, 1),
        "end_date": date(2025, 6, 30),
        "bg_image": "",
    }
    values.update(overrides)
    return WidgetConfig(**values)


@pytest.fixture(autouse=True)
def _propagate_package_logs() -> None:
    # configure_logging() detaches the package logger from root, hiding it from caplog
    logging.getLogger(LOGGER_NAME).propagate = True


@pytest.fixture
def countdown_config() -> WidgetConfig:
    return make_config()


@pytest.fixture
def tracker_config() -> WidgetConfig:
    return make_config(event_name="Month Tracker", kind=WidgetKind.TRACKER)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        widgets_file=tmp_path / "widgets.json",
        data_dir=tmp_path / "data",
        assets_dir=tmp_path / "assets",
        api_token="api-token",
    )


@pytest.fixture
def tracker_repository() -> InMemoryTrackerRepository:
    return InMemoryTrackerRepository()


@pytest.fixture
def container(
    settings: Settings,
    tracker_repository: InMemoryTrackerRepository,
    countdown_config: WidgetConfig,
    tracker_config: WidgetConfig,
) -> AppContainer:
    tracker_service = TrackerService(tracker_repository)
    widget_service = WidgetService(
        configs={
            countdown_config.key: countdown_config,
            tracker_config.key: tracker_config,
        },
        tracker_service=tracker_service,
        renderer=WidgetRenderer(settings.assets_dir),
        canvas_factory=FakeCanvas.for_family,
        cutoff_hour=settings.evening_cutoff_hour,
    )
    return AppContainer(
        settings=settings,
        tracker_service=tracker_service,
        widget_service=widget_service,
        clock=lambda: FIXED_NOW,
    )
