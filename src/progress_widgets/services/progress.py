"""Progress calculator for countdown and tracker widgets."""

import math
from collections.abc import Collection
from datetime import datetime

from progress_widgets.config import WidgetConfig
from progress_widgets.domain.progress import (
    DateRange,
    DayState,
    Dot,
    DotSizing,
    GridLayout,
    Grouping,
    ProgressSnapshot,
    WidgetFamily,
    WidgetKind,
)

CHAR_WIDTH = 7.5
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30
MEDIUM_RANGE_DAYS = 90
LONG_RANGE_DAYS = 180


def total_days(date_range: DateRange) -> int:
    """Return the number of calendar days in the range, both ends included."""
    return (date_range.end - date_range.start).days + 1


def days_since_start(date_range: DateRange, now: datetime) -> int:
    """Return whole days elapsed since the start date."""
    return (now.date() - date_range.start).days


def adjusted_days_since_start(elapsed: int, now: datetime, cutoff_hour: int) -> int:
    """Count today as done once the evening cutoff has passed."""
    if now.hour >= cutoff_hour:
        return elapsed + 1
    return elapsed


def days_until_end(total: int, adjusted: int) -> int:
    return max(0, total - adjusted)


def progress_percentage(adjusted: int, total: int) -> int:
    return round(adjusted / total * 100)


def choose_grouping(total: int, family: WidgetFamily) -> Grouping:
    """Pick the finest dot granularity that fits the widget."""
    capacity = family.value.capacity
    if total <= capacity:
        return Grouping(days_per_dot=1, unit="day", total_dots=total)
    if total / DAYS_PER_WEEK <= capacity:
        return Grouping(
            days_per_dot=DAYS_PER_WEEK,
            unit="week",
            total_dots=math.ceil(total / DAYS_PER_WEEK),
        )
    return Grouping(
        days_per_dot=DAYS_PER_MONTH,
        unit="month",
        total_dots=math.ceil(total / DAYS_PER_MONTH),
    )


def responsive_sizing(total: int, circle_size: int, spacing: int) -> DotSizing:
    """Shrink dots for longer periods."""
    if total > LONG_RANGE_DAYS:
        return DotSizing(max(5, circle_size - 2), max(3, spacing - 2))
    if total > MEDIUM_RANGE_DAYS:
        return DotSizing(max(6, circle_size - 1), max(4, spacing - 1))
    return DotSizing(circle_size, spacing)


def grid_layout(
    family: WidgetFamily,
    total_dots: int,
    sizing: DotSizing,
    padding: int,
    shift: int,
) -> GridLayout:
    """Fit dots into columns across the widget width and cap the rows."""
    usable = family.value.width - 2 * padding - shift
    columns = max(1, usable // (sizing.circle_size + sizing.spacing))
    rows = math.ceil(total_dots / columns)
    return GridLayout(columns=columns, rows=min(rows, family.value.max_rows))


def day_states(
    total: int, x_days: Collection[int], completed_days: int
) -> list[DayState]:
    marked = set(x_days)
    return [
        DayState(index=i, is_x=i in marked, is_completed=i < completed_days)
        for i in range(total)
    ]


def longest_streak(total: int, x_days: Collection[int], completed_days: int) -> int:
    """Return the longest run of completed days not broken by an X day."""
    longest = 0
    current = 0
    for day in day_states(total, x_days, completed_days):
        if day.is_x:
            longest = max(longest, current)
            current = 0
        elif day.is_completed:
            current += 1
    return max(longest, current)


def dot_states(
    grouping: Grouping,
    completed_days: int,
    x_days: Collection[int],
    total: int,
) -> list[Dot]:
    """Compute completion and X status for every dot."""
    marked = set(x_days)
    per_dot = grouping.days_per_dot
    dots = []
    for index in range(grouping.total_dots):
        first_day = index * per_dot
        days_represented = (index + 1) * per_dot
        covered = range(first_day, min(first_day + per_dot, total))
        dots.append(
            Dot(
                index=index,
                is_completed=completed_days >= days_represented - (per_dot - 1),
                is_x=any(day in marked for day in covered),
            )
        )
    return dots


def legend_text(kind: WidgetKind, grouping: Grouping) -> str | None:
    if grouping.days_per_dot == 1:
        return None
    if kind is WidgetKind.TRACKER:
        return f"each dot = 1 {grouping.unit} (red x = missed day)"
    return f"Each dot = 1 {grouping.unit}"


def progress_text(
    kind: WidgetKind,
    family: WidgetFamily,
    grouping: Grouping,
    left: int,
    percentage: int,
) -> str:
    """Return the footer line describing remaining time."""
    grouped_left = math.ceil(left / grouping.days_per_dot)
    if family is WidgetFamily.SMALL:
        if grouping.days_per_dot == 1:
            return f"{left} days left ({percentage}%)"
        return f"{left} days ({grouped_left} {grouping.unit}s) left"
    if kind is WidgetKind.TRACKER:
        return f"{left} days left ({percentage}%)"
    if grouping.days_per_dot == 1:
        return f"{left} days left ({percentage}% complete)"
    return f"{left} days ({grouped_left} {grouping.unit}s) left ({percentage}%)"


def completion_lines(snapshot: ProgressSnapshot) -> list[str]:
    lines = [f"{snapshot.event_name} completed! 🎉"]
    if snapshot.longest_streak is not None:
        lines.append(f"longest streak: {snapshot.longest_streak} days")
    return lines


def estimated_text_width(text: str) -> float:
    """Approximate rendered width using a fixed average character width."""
    return len(text) * CHAR_WIDTH


def right_align_spacer(config: WidgetConfig, family: WidgetFamily, text: str) -> float:
    """Return the gap between the event name and a right-aligned footer text."""
    available = (
        family.value.width
        - config.padding * 2
        - config.text_offset
        - estimated_text_width(config.event_name)
    )
    return available - estimated_text_width(text)


def build_snapshot(
    config: WidgetConfig,
    family: WidgetFamily,
    now: datetime,
    x_days: Collection[int] = (),
    cutoff_hour: int = 20,
) -> ProgressSnapshot:
    """Derive the full widget state for the given moment."""
    date_range = config.date_range
    total = total_days(date_range)
    elapsed = days_since_start(date_range, now)
    adjusted = adjusted_days_since_start(elapsed, now, cutoff_hour)
    left = days_until_end(total, adjusted)
    percentage = progress_percentage(adjusted, total)
    grouping = choose_grouping(total, family)
    sizing = responsive_sizing(total, config.circle_size, config.circle_spacing)
    layout = grid_layout(
        family, grouping.total_dots, sizing, config.padding, config.dot_shift_left
    )

    is_tracker = config.kind is WidgetKind.TRACKER
    marked = list(x_days) if is_tracker else []
    # trackers follow the actual calendar day so toggles line up with dots
    completed = elapsed if is_tracker else adjusted
    streak = longest_streak(total, marked, elapsed) if is_tracker else None

    return ProgressSnapshot(
        key=config.key,
        event_name=config.event_name,
        kind=config.kind,
        family=family,
        total_days=total,
        days_elapsed=elapsed,
        adjusted_days=adjusted,
        days_until_end=left,
        percentage=percentage,
        grouping=grouping,
        sizing=sizing,
        layout=layout,
        dots=dot_states(grouping, completed, marked, total),
        legend=legend_text(config.kind, grouping),
        progress_text=progress_text(
            config.kind, family, grouping, left, percentage
        ),
        streak_text=f"longest streak: {streak}" if streak is not None else None,
        longest_streak=streak,
    )
