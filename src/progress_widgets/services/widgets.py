"""Application service for configured widgets."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from progress_widgets.config import WidgetConfig
from progress_widgets.domain.progress import ProgressSnapshot, WidgetFamily
from progress_widgets.services.progress import build_snapshot
from progress_widgets.services.render import WidgetCanvas, WidgetRenderer
from progress_widgets.services.tracker import TrackerService

CanvasFactory = Callable[[WidgetFamily], WidgetCanvas]


@dataclass
class WidgetService:
    """Computes and renders widget state for a given moment."""

    configs: dict[str, WidgetConfig]
    tracker_service: TrackerService
    renderer: WidgetRenderer
    canvas_factory: CanvasFactory
    cutoff_hour: int = 20

    def list_widgets(self) -> list[WidgetConfig]:
        return list(self.configs.values())

    def get_config(self, key: str) -> WidgetConfig | None:
        return self.configs.get(key)

    def snapshot(
        self, config: WidgetConfig, family: WidgetFamily, now: datetime
    ) -> ProgressSnapshot:
        """Return the progress state, including persisted X days for trackers."""
        return build_snapshot(
            config,
            family,
            now,
            x_days=self.tracker_service.get_x_days(config),
            cutoff_hour=self.cutoff_hour,
        )

    def render_png(
        self, config: WidgetConfig, family: WidgetFamily, now: datetime
    ) -> bytes:
        """Draw the widget and return it as PNG bytes."""
        canvas = self.canvas_factory(family)
        self.renderer.render(self.snapshot(config, family, now), config, canvas)
        return canvas.to_png()
