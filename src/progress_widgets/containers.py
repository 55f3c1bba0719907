"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from zoneinfo import ZoneInfo

from progress_widgets.adapters.json_tracker_repository import JsonTrackerRepository
from progress_widgets.adapters.pillow_canvas import PillowCanvas
from progress_widgets.config import Settings, load_widget_configs
from progress_widgets.services.render import WidgetRenderer
from progress_widgets.services.tracker import TrackerService
from progress_widgets.services.widgets import WidgetService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tracker_service: TrackerService
    widget_service: WidgetService
    clock: Callable[[], datetime]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    tz = ZoneInfo(resolved_settings.timezone)
    configs = load_widget_configs(resolved_settings.widgets_file)
    tracker_service = TrackerService(JsonTrackerRepository(resolved_settings.data_dir))
    widget_service = WidgetService(
        configs=configs,
        tracker_service=tracker_service,
        renderer=WidgetRenderer(resolved_settings.assets_dir),
        canvas_factory=partial(
            PillowCanvas.for_family, scale=resolved_settings.render_scale
        ),
        cutoff_hour=resolved_settings.evening_cutoff_hour,
    )

    def clock() -> datetime:
        return datetime.now(tz=tz)

    return AppContainer(
        settings=resolved_settings,
        tracker_service=tracker_service,
        widget_service=widget_service,
        clock=clock,
    )
