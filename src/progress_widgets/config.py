"""Application configuration."""

import logging
import os
import re
from datetime import date
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from progress_widgets.domain.progress import DateRange, WidgetKind

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
LONG_RANGE_DAYS = 365

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    widgets_file: Path = Path("widgets.json")
    data_dir: Path = Path("data")
    assets_dir: Path = Path("assets")
    timezone: str = "UTC"
    evening_cutoff_hour: int = Field(default=20, ge=0, le=24)
    render_scale: int = Field(default=2, ge=1, le=4)
    api_token: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        env_prefix="WIDGETS_",
        extra="ignore",
    )

    @field_validator("api_token", mode="before")
    @classmethod
    def blank_token_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ColorSetting(BaseModel):
    """Hex color with an alpha channel."""

    model_config = ConfigDict(frozen=True)

    hex: str
    alpha: float = Field(default=1.0, ge=0, le=1)

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, value: object) -> object:
        if isinstance(value, str):
            return {"hex": value}
        return value

    @field_validator("hex")
    @classmethod
    def _check_hex(cls, value: str) -> str:
        if not _HEX_COLOR.match(value):
            raise ValueError(f"Invalid hex color: {value!r}")
        return value.lower()

    @property
    def rgb(self) -> tuple[int, int, int]:
        digits = self.hex[1:]
        if len(digits) == 3:  # noqa: PLR2004
            digits = "".join(ch * 2 for ch in digits)
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return (*self.rgb, round(self.alpha * 255))


class WidgetConfig(BaseModel):
    """Static definition of one progress widget."""

    model_config = ConfigDict(frozen=True)

    event_name: str = Field(min_length=1)
    kind: WidgetKind = WidgetKind.COUNTDOWN
    start_date: date
    end_date: date
    bg_color: ColorSetting = ColorSetting(hex="#000")
    bg_overlay_opacity: float = Field(default=0.25, ge=0, le=1)
    bg_image: str = "image.jpg"
    color_filled: ColorSetting = ColorSetting(hex="#ffffff")
    color_unfilled: ColorSetting = ColorSetting(hex="#ffffff", alpha=0.4)
    color_x: ColorSetting = ColorSetting(hex="#ff4444")
    padding: int = Field(default=12, ge=0)
    circle_size: int = Field(default=8, ge=1)
    circle_spacing: int = Field(default=6, ge=0)
    text_spacing: int = Field(default=10, ge=0)
    dot_shift_left: int = Field(default=4, ge=2)

    @model_validator(mode="after")
    def _check_range(self) -> "WidgetConfig":
        if self.start_date >= self.end_date:
            raise ValueError("Start date must be before end date")
        days = (self.end_date - self.start_date).days + 1
        if days > LONG_RANGE_DAYS:
            logger.warning(
                "Very long period for %s: %s days", self.event_name, days
            )
        return self

    @property
    def key(self) -> str:
        return widget_key(self.event_name)

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def text_offset(self) -> int:
        return self.dot_shift_left - 2


class WidgetFile(BaseModel):
    """Top-level layout of the widget definitions file."""

    widgets: list[WidgetConfig]


def widget_key(event_name: str) -> str:
    """Return the identifier used for URLs and sidecar files."""
    return re.sub(r"\s+", "_", event_name.strip())


def load_widget_configs(path: Path) -> dict[str, WidgetConfig]:
    """Load and validate widget definitions keyed by widget key."""
    parsed = WidgetFile.model_validate_json(path.read_text(encoding="utf-8"))
    configs: dict[str, WidgetConfig] = {}
    for widget in parsed.widgets:
        if widget.key in configs:
            raise ValueError(f"Duplicate widget key: {widget.key}")
        configs[widget.key] = widget
    logger.info("Loaded %s widget definitions from %s", len(configs), path)
    return configs
