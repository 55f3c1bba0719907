"""Domain models for day-range progress widgets."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


@dataclass(frozen=True)
class FamilySpec:
    """Pixel size and dot capacity of a widget family."""

    name: str
    width: int
    height: int
    max_rows: int
    max_cols: int

    @property
    def capacity(self) -> int:
        return self.max_rows * self.max_cols


class WidgetFamily(Enum):
    """Widget sizes offered by the home screen."""

    SMALL = FamilySpec("small", width=158, height=158, max_rows=4, max_cols=8)
    MEDIUM = FamilySpec("medium", width=338, height=158, max_rows=6, max_cols=25)
    LARGE = FamilySpec("large", width=338, height=354, max_rows=20, max_cols=25)

    @classmethod
    def parse(cls, raw: str | None) -> "WidgetFamily":
        """Return the family for a name, falling back to medium."""
        for entry in cls:
            if entry.value.name == (raw or "").strip().lower():
                return entry
        return cls.MEDIUM


class WidgetKind(Enum):
    """Flavours of progress widget."""

    COUNTDOWN = "countdown"
    TRACKER = "tracker"


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range covered by a widget."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError("Start date must be before end date")


@dataclass(frozen=True)
class Grouping:
    """How many days a single dot stands for."""

    days_per_dot: int
    unit: str
    total_dots: int


@dataclass(frozen=True)
class DotSizing:
    """Dot diameter and gap, in points."""

    circle_size: int
    spacing: int


@dataclass(frozen=True)
class GridLayout:
    """Columns and visible rows of the dot grid."""

    columns: int
    rows: int


@dataclass(frozen=True)
class Dot:
    """State of one dot in the grid."""

    index: int
    is_completed: bool
    is_x: bool = False


@dataclass(frozen=True)
class DayState:
    """State of one tracked day."""

    index: int
    is_x: bool
    is_completed: bool


@dataclass(frozen=True)
class ProgressSnapshot:
    """Everything needed to draw a widget at a point in time."""

    key: str
    event_name: str
    kind: WidgetKind
    family: WidgetFamily
    total_days: int
    days_elapsed: int
    adjusted_days: int
    days_until_end: int
    percentage: int
    grouping: Grouping
    sizing: DotSizing
    layout: GridLayout
    dots: list[Dot]
    legend: str | None
    progress_text: str
    streak_text: str | None
    longest_streak: int | None

    @property
    def is_complete(self) -> bool:
        return self.days_until_end <= 0

    @property
    def visible_dots(self) -> list[Dot]:
        """Dots that fit in the visible rows, in row-major order."""
        return self.dots[: self.layout.rows * self.layout.columns]
