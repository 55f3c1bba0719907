"""Pillow implementation of the widget canvas."""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, ImageOps
from PIL.ImageFont import FreeTypeFont
from PIL.ImageFont import ImageFont as BuiltinFont

from progress_widgets.domain.progress import WidgetFamily
from progress_widgets.services.render import Rgba, Symbol, WidgetCanvas

_logger = logging.getLogger(__name__)

FONT_DIR = Path("/usr/share/fonts/truetype/dejavu")
REGULAR_FONT = FONT_DIR / "DejaVuSansMono.ttf"
BOLD_FONT = FONT_DIR / "DejaVuSansMono-Bold.ttf"
TRANSPARENT: Rgba = (0, 0, 0, 0)
# DejaVu Sans Mono has no glyphs outside the Basic Multilingual Plane.
LAST_BMP_CODEPOINT = 0xFFFF


@dataclass
class PillowCanvas(WidgetCanvas):
    """Draws in points and rasterizes at `scale` pixels per point."""

    width: int
    height: int
    scale: int = 2
    _background: Image.Image = field(init=False, repr=False)
    _ink: Image.Image = field(init=False, repr=False)
    _fonts: dict[tuple[int, bool], FreeTypeFont | BuiltinFont] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        size = self._px_size()
        self._background = Image.new("RGBA", size, (0, 0, 0, 255))
        self._ink = Image.new("RGBA", size, TRANSPARENT)
        self._draw = ImageDraw.Draw(self._ink)

    @classmethod
    def for_family(cls, family: WidgetFamily, scale: int = 2) -> "PillowCanvas":
        return cls(width=family.value.width, height=family.value.height, scale=scale)

    def fill_background(self, color: Rgba) -> None:
        self._background = Image.new("RGBA", self._px_size(), color)

    def draw_background_image(self, path: Path) -> None:
        try:
            with Image.open(path) as source:
                source.load()
                fitted = ImageOps.fit(source.convert("RGBA"), self._px_size())
        except Image.DecompressionBombError as exc:
            raise OSError(str(exc)) from exc
        self._background = fitted

    def draw_overlay(self, color: Rgba) -> None:
        layer = Image.new("RGBA", self._px_size(), color)
        self._background = Image.alpha_composite(self._background, layer)

    def draw_symbol(  # noqa: PLR0913
        self, x: float, y: float, size: int, symbol: Symbol, color: Rgba
    ) -> None:
        box = [self._px(x), self._px(y), self._px(x + size), self._px(y + size)]
        if symbol is Symbol.DOT:
            self._draw.ellipse(box, fill=color)
            return
        stroke = max(1, self._px(size) // 5)
        left, top, right, bottom = box
        self._draw.line([(left, top), (right, bottom)], fill=color, width=stroke)
        self._draw.line([(left, bottom), (right, top)], fill=color, width=stroke)

    def draw_text(  # noqa: PLR0913
        self, x: float, y: float, text: str, color: Rgba, size: int, *, bold: bool
    ) -> None:
        font = self._font(size, bold=bold)
        position = (self._px(x), self._px(y))
        self._draw.text(position, _drawable(text), font=font, fill=color)

    def text_width(self, text: str, size: int, *, bold: bool) -> float:
        font = self._font(size, bold=bold)
        return self._draw.textlength(_drawable(text), font=font) / self.scale

    def to_png(self) -> bytes:
        composed = Image.alpha_composite(self._background, self._ink)
        buffer = io.BytesIO()
        composed.convert("RGB").save(buffer, format="PNG")
        return buffer.getvalue()

    def _font(self, size: int, *, bold: bool) -> FreeTypeFont | BuiltinFont:
        key = (size, bold)
        if key not in self._fonts:
            pixels = self._px(size)
            try:
                self._fonts[key] = ImageFont.truetype(
                    str(BOLD_FONT if bold else REGULAR_FONT), pixels
                )
            except OSError:
                _logger.warning("System font not available, using default")
                self._fonts[key] = ImageFont.load_default(pixels)
        return self._fonts[key]

    def _px(self, value: float) -> int:
        return round(value * self.scale)

    def _px_size(self) -> tuple[int, int]:
        return self.width * self.scale, self.height * self.scale


def _drawable(text: str) -> str:
    return "".join(char for char in text if ord(char) <= LAST_BMP_CODEPOINT).rstrip()
