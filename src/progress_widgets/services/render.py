"""Widget renderer that draws a progress snapshot onto a canvas."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from progress_widgets.config import WidgetConfig
from progress_widgets.domain.progress import ProgressSnapshot, WidgetFamily
from progress_widgets.services.progress import (
    completion_lines,
    estimated_text_width,
    right_align_spacer,
)

_logger = logging.getLogger(__name__)

Rgba = tuple[int, int, int, int]

FONT_SIZE = 12
LEGEND_FONT_SIZE = 9
LEGEND_GAP = 4
FOOTER_LINE_GAP = 4
LEGEND_COLOR: Rgba = (255, 255, 255, 178)


class Symbol(Enum):
    """Marks that can be placed in the dot grid."""

    DOT = "●"
    CROSS = "✕"


class WidgetCanvas(Protocol):
    """Drawing surface sized to a widget family, in points."""

    width: int
    height: int

    def fill_background(self, color: Rgba) -> None:
        """Paint the whole canvas with a solid color."""

    def draw_background_image(self, path: Path) -> None:
        """Cover the canvas with an image, raising OSError if unreadable."""

    def draw_overlay(self, color: Rgba) -> None:
        """Blend a translucent color over the whole canvas."""

    def draw_symbol(  # noqa: PLR0913
        self, x: float, y: float, size: int, symbol: Symbol, color: Rgba
    ) -> None:
        """Draw a grid symbol with its top-left corner at x, y."""

    def draw_text(  # noqa: PLR0913
        self, x: float, y: float, text: str, color: Rgba, size: int, *, bold: bool
    ) -> None:
        """Draw a single line of text with its top-left corner at x, y."""

    def text_width(self, text: str, size: int, *, bold: bool) -> float:
        """Return the rendered width of a line of text."""

    def to_png(self) -> bytes:
        """Encode the canvas as PNG."""


@dataclass
class WidgetRenderer:
    """Lays out the dot grid and footer of a widget."""

    assets_dir: Path

    def render(
        self, snapshot: ProgressSnapshot, config: WidgetConfig, canvas: WidgetCanvas
    ) -> None:
        self._draw_background(config, canvas)
        overlay = (*config.bg_color.rgb, round(config.bg_overlay_opacity * 255))
        canvas.draw_overlay(overlay)

        if snapshot.is_complete:
            self._draw_completed(snapshot, config, canvas)
            return

        y = self._draw_grid(snapshot, config, canvas, float(config.padding))
        y += config.text_spacing
        if snapshot.family is WidgetFamily.SMALL:
            self._draw_stacked_footer(snapshot, config, canvas, y)
        else:
            self._draw_aligned_footer(snapshot, config, canvas, y)

    def _draw_background(self, config: WidgetConfig, canvas: WidgetCanvas) -> None:
        if config.bg_image:
            path = self.assets_dir / config.bg_image
            if path.is_file():
                try:
                    canvas.draw_background_image(path)
                    return
                except OSError as exc:
                    _logger.warning("Error loading background image %s: %s", path, exc)
        canvas.fill_background(config.bg_color.rgba)

    def _draw_completed(
        self, snapshot: ProgressSnapshot, config: WidgetConfig, canvas: WidgetCanvas
    ) -> None:
        lines = completion_lines(snapshot)
        block = len(lines) * FONT_SIZE + (len(lines) - 1) * FOOTER_LINE_GAP
        y = (canvas.height - block) / 2
        for number, line in enumerate(lines):
            bold = number == 0
            width = canvas.text_width(line, FONT_SIZE, bold=bold)
            x = (canvas.width - width) / 2
            canvas.draw_text(
                x, y, line, config.color_filled.rgba, FONT_SIZE, bold=bold
            )
            y += FONT_SIZE + FOOTER_LINE_GAP

    def _draw_grid(
        self,
        snapshot: ProgressSnapshot,
        config: WidgetConfig,
        canvas: WidgetCanvas,
        y: float,
    ) -> float:
        left = config.padding + config.dot_shift_left
        if snapshot.legend:
            canvas.draw_text(
                left, y, snapshot.legend, LEGEND_COLOR, LEGEND_FONT_SIZE, bold=False
            )
            y += LEGEND_FONT_SIZE + LEGEND_GAP

        size = snapshot.sizing.circle_size
        step = size + snapshot.sizing.spacing
        columns = snapshot.layout.columns
        for dot in snapshot.visible_dots:
            row, col = divmod(dot.index, columns)
            if dot.is_x:
                symbol, color = Symbol.CROSS, config.color_x.rgba
            elif dot.is_completed:
                symbol, color = Symbol.DOT, config.color_filled.rgba
            else:
                symbol, color = Symbol.DOT, config.color_unfilled.rgba
            canvas.draw_symbol(left + col * step, y + row * step, size, symbol, color)

        rows = snapshot.layout.rows
        return y + rows * size + max(rows - 1, 0) * snapshot.sizing.spacing

    def _draw_stacked_footer(
        self,
        snapshot: ProgressSnapshot,
        config: WidgetConfig,
        canvas: WidgetCanvas,
        y: float,
    ) -> None:
        x = config.padding + config.text_offset
        color = config.color_filled.rgba
        canvas.draw_text(x, y, snapshot.event_name, color, FONT_SIZE, bold=True)
        for line in (snapshot.progress_text, snapshot.streak_text):
            if line is None:
                continue
            y += FONT_SIZE + FOOTER_LINE_GAP
            canvas.draw_text(x, y, line, color, FONT_SIZE, bold=False)

    def _draw_aligned_footer(
        self,
        snapshot: ProgressSnapshot,
        config: WidgetConfig,
        canvas: WidgetCanvas,
        y: float,
    ) -> None:
        x = config.padding + config.text_offset
        color = config.color_filled.rgba
        name_width = estimated_text_width(snapshot.event_name)
        canvas.draw_text(x, y, snapshot.event_name, color, FONT_SIZE, bold=True)

        spacer = right_align_spacer(config, snapshot.family, snapshot.progress_text)
        canvas.draw_text(
            x + name_width + spacer,
            y,
            snapshot.progress_text,
            color,
            FONT_SIZE,
            bold=True,
        )
        if snapshot.streak_text is None:
            return
        y += FONT_SIZE + FOOTER_LINE_GAP
        spacer = right_align_spacer(config, snapshot.family, snapshot.streak_text)
        canvas.draw_text(
            x + name_width + spacer,
            y,
            snapshot.streak_text,
            color,
            FONT_SIZE,
            bold=False,
        )
