"""Widget endpoints: state, rendered images and the today toggle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import Response

from progress_widgets.domain.progress import WidgetFamily, WidgetKind

if TYPE_CHECKING:
    from progress_widgets.config import WidgetConfig
    from progress_widgets.containers import AppContainer
    from progress_widgets.domain.progress import ProgressSnapshot
    from progress_widgets.domain.tracker import TogglePrompt, ToggleResult

router = APIRouter(prefix="/widgets", tags=["widgets"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _get_api_token(request: Request) -> str | None:
    return _container(request).settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str | None = Depends(_get_api_token),
) -> None:
    """Ensure write requests carry the configured token, when one is set."""
    if not api_token:
        return
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def _get_widget(request: Request, key: str) -> WidgetConfig:
    config = _container(request).widget_service.get_config(key)
    if config is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return config


def _get_tracker(request: Request, key: str) -> WidgetConfig:
    config = _get_widget(request, key)
    if config.kind is not WidgetKind.TRACKER:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{config.event_name} is not a tracker",
        )
    return config


@router.get("")
async def list_widgets(request: Request) -> dict[str, object]:
    """Return the configured widgets."""
    widgets = _container(request).widget_service.list_widgets()
    return {"widgets": [_format_widget(config) for config in widgets]}


@router.get("/{key}")
async def widget_state(
    key: str, request: Request, family: str = "medium"
) -> dict[str, object]:
    """Return the computed progress state of a widget."""
    container = _container(request)
    config = _get_widget(request, key)
    snapshot = container.widget_service.snapshot(
        config, WidgetFamily.parse(family), container.clock()
    )
    return _format_snapshot(snapshot)


@router.get("/{key}/image.png")
async def widget_image(
    key: str, request: Request, family: str = "medium"
) -> Response:
    """Render a widget to PNG."""
    container = _container(request)
    config = _get_widget(request, key)
    image = container.widget_service.render_png(
        config, WidgetFamily.parse(family), container.clock()
    )
    return Response(content=image, media_type="image/png")


@router.get("/{key}/today")
async def today_prompt(key: str, request: Request) -> dict[str, object]:
    """Describe the toggle that would be applied to today."""
    container = _container(request)
    config = _get_tracker(request, key)
    prompt = container.tracker_service.prompt_for_today(config, container.clock())
    if prompt is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Today is outside the tracked range",
        )
    return _format_prompt(prompt)


@router.post("/{key}/today/toggle", dependencies=[Depends(require_token)])
async def toggle_today(key: str, request: Request) -> dict[str, object]:
    """Flip today between X and dot."""
    container = _container(request)
    config = _get_tracker(request, key)
    try:
        result = container.tracker_service.toggle_today(config, container.clock())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    return _format_toggle(result)


def _format_widget(config: WidgetConfig) -> dict[str, object]:
    return {
        "key": config.key,
        "event_name": config.event_name,
        "kind": config.kind.value,
        "start_date": config.start_date.isoformat(),
        "end_date": config.end_date.isoformat(),
    }


def _format_snapshot(snapshot: ProgressSnapshot) -> dict[str, object]:
    return {
        "key": snapshot.key,
        "event_name": snapshot.event_name,
        "kind": snapshot.kind.value,
        "family": snapshot.family.value.name,
        "total_days": snapshot.total_days,
        "days_elapsed": snapshot.days_elapsed,
        "adjusted_days": snapshot.adjusted_days,
        "days_until_end": snapshot.days_until_end,
        "percentage": snapshot.percentage,
        "is_complete": snapshot.is_complete,
        "grouping": {
            "days_per_dot": snapshot.grouping.days_per_dot,
            "unit": snapshot.grouping.unit,
            "total_dots": snapshot.grouping.total_dots,
        },
        "layout": {
            "columns": snapshot.layout.columns,
            "rows": snapshot.layout.rows,
            "circle_size": snapshot.sizing.circle_size,
            "spacing": snapshot.sizing.spacing,
        },
        "dots": [
            {"index": dot.index, "completed": dot.is_completed, "x": dot.is_x}
            for dot in snapshot.dots
        ],
        "legend": snapshot.legend,
        "progress_text": snapshot.progress_text,
        "streak_text": snapshot.streak_text,
        "longest_streak": snapshot.longest_streak,
    }


def _format_prompt(prompt: TogglePrompt) -> dict[str, object]:
    return {
        "title": prompt.title,
        "message": prompt.message,
        "day": prompt.day_number,
        "current_state": prompt.current_state,
        "target_state": prompt.target_state,
        "actions": prompt.actions,
    }


def _format_toggle(result: ToggleResult) -> dict[str, object]:
    return {
        "day": result.day_index + 1,
        "state": result.state,
        "x_days": sorted(result.x_days),
    }
