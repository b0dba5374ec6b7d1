from __future__ import annotations

from bisect import bisect_left, bisect_right
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from .events import clip_events, visible_events
from .growth import cagr
from .models import BrushResult, DataPoint, EventMarker, PaneModel, PlacedEvent, RenderConfig, Series, ViewState
from .regression import trend_for
from .scales import TimeScale, axis_ticks, build_value_scale, plot_value


def selection_to_domain(selection: Optional[Tuple[float, float]], context_x: Optional[TimeScale]) -> Optional[Tuple[datetime, datetime]]:
    """Map a pixel selection on the context view back to calendar dates."""
    if selection is None or context_x is None:
        return None
    x0, x1 = sorted((float(selection[0]), float(selection[1])))
    lo, hi = sorted(context_x.range)
    x0 = min(max(x0, lo), hi)
    x1 = min(max(x1, lo), hi)
    return context_x.invert(x0), context_x.invert(x1)


def domain_to_selection(domain: Optional[Tuple[datetime, datetime]], context_x: Optional[TimeScale]) -> Optional[Tuple[float, float]]:
    if domain is None or context_x is None:
        return None
    return context_x(domain[0]), context_x(domain[1])


def _index_bounds(series: Sequence[DataPoint], start: datetime, end: datetime) -> Tuple[int, int]:
    dates = [p.date for p in series]
    return bisect_left(dates, start), bisect_right(dates, end)


def points_in_domain(series: Sequence[DataPoint], start: datetime, end: datetime) -> Series:
    i0, i1 = _index_bounds(series, start, end)
    return list(series[i0:i1])


def path_for(points: Iterable[DataPoint], x_scale, y_scale, log_scale: bool) -> List[Tuple[float, float]]:
    if x_scale is None or y_scale is None:
        return []
    return [(x_scale(p.date), y_scale(plot_value(p.value, log_scale))) for p in points]


def apply_brush(
    smoothed: Sequence[DataPoint],
    domain: Optional[Tuple[datetime, datetime]],
    view_state: ViewState,
    config: RenderConfig,
    catalogue: Iterable[EventMarker],
    raw: Optional[Sequence[DataPoint]] = None,
) -> BrushResult:
    """Recompute the focus pane for a brushed date range.

    Scales, path and trend follow the smoothed series; CAGR reads the raw
    points in the same range when `raw` is given.
    """
    width = float(config.width)
    height = float(config.focus_height)
    focus = PaneModel(width=width, height=height)
    if domain is None or not smoothed:
        return BrushResult(domain=domain, cagr=None, trend=None, visible=[], focus=focus)

    start, end = domain
    if end < start:
        start, end = end, start
    log_scale = view_state.log_scale

    # (a) focus time domain
    focus.x_scale = TimeScale((start, end), (0.0, width))
    focus.x_ticks = axis_ticks(focus.x_scale, config.tick_count)

    # (b) value scale over the inclusive sub-range
    i0, i1 = _index_bounds(smoothed, start, end)
    visible = list(smoothed[i0:i1])
    focus.y_scale = build_value_scale([p.value for p in visible], log_scale, (height, 0.0), rescale=True)
    focus.y_ticks = axis_ticks(focus.y_scale, config.tick_count)
    # One neighbour on each side keeps the line running to the pane edges; the view clips it.
    focus.path = path_for(smoothed[max(0, i0 - 1):min(len(smoothed), i1 + 1)], focus.x_scale, focus.y_scale, log_scale)

    # (c) growth over the same range, on unsmoothed values
    growth = cagr(points_in_domain(raw, start, end) if raw is not None else visible)

    # (d) trend over the same range
    trend = trend_for(visible, log_scale, view_state.show_trendline)
    trend_path = path_for(trend or [], focus.x_scale, focus.y_scale, log_scale)

    # (e) events clipped to the new domain
    markers = clip_events(visible_events(catalogue, view_state.event_filters, view_state.show_events), start, end)
    placed = [PlacedEvent(marker=m, x=focus.x_scale(m.date)) for m in markers]

    return BrushResult(
        domain=(start, end),
        cagr=growth,
        trend=trend,
        visible=visible,
        focus=focus,
        trend_path=trend_path,
        events=placed,
    )
