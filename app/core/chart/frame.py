"""
Pure frame computation for the focus/context chart.

`compute_frame` turns a series and a view-state snapshot into a `FrameModel`
laid out in pixel space. Renderers only draw what the frame holds; nothing in
here touches a widget, so every state change can rebuild the frame from
scratch.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, Sequence, Tuple

from .brush import apply_brush, domain_to_selection, path_for, selection_to_domain
from .events import EVENT_CATALOGUE
from .growth import hover_stats
from .lookup import nearest
from .models import BrushResult, DataPoint, EventMarker, FrameModel, PaneModel, RenderConfig, Series, TooltipModel, ViewState
from .scales import axis_ticks, build_time_scale, build_value_scale, plot_value
from .smoothing import smooth
from .theme import palette_for


def context_pane(smoothed: Sequence[DataPoint], view_state: ViewState, config: RenderConfig) -> PaneModel:
    width = float(config.width)
    height = float(config.context_height)
    pane = PaneModel(width=width, height=height)
    if not smoothed:
        return pane
    pane.x_scale = build_time_scale([p.date for p in smoothed], (0.0, width))
    pane.y_scale = build_value_scale([p.value for p in smoothed], view_state.log_scale, (height, 0.0))
    pane.x_ticks = axis_ticks(pane.x_scale, config.tick_count)
    pane.path = path_for(smoothed, pane.x_scale, pane.y_scale, view_state.log_scale)
    return pane


def _clamp_domain(domain: Optional[Tuple[datetime, datetime]], context: PaneModel) -> Optional[Tuple[datetime, datetime]]:
    if context.x_scale is None:
        return None
    full_start, full_end = context.x_scale.domain
    if domain is None:
        return full_start, full_end
    start, end = sorted(domain)
    start = min(max(start, full_start), full_end)
    end = min(max(end, full_start), full_end)
    return start, end


def compute_frame(
    series: Series,
    view_state: ViewState,
    config: Optional[RenderConfig] = None,
    catalogue: Iterable[EventMarker] = EVENT_CATALOGUE,
    smoothed: Optional[Series] = None,
) -> FrameModel:
    config = config or RenderConfig()
    if smoothed is None:
        smoothed = smooth(series, view_state.smoothing_window)
    context = context_pane(smoothed, view_state, config)
    domain = _clamp_domain(view_state.selected_domain, context)
    brushed = apply_brush(smoothed, domain, view_state, config, catalogue, raw=series)
    return FrameModel(
        config=config,
        palette=palette_for(config.dark_mode),
        view_state=view_state,
        smoothed=smoothed,
        focus=brushed.focus,
        context=context,
        selection=domain_to_selection(brushed.domain, context.x_scale),
        domain=brushed.domain,
        cagr=brushed.cagr,
        trend=brushed.trend,
        trend_path=brushed.trend_path,
        events=brushed.events,
    )


def hover(smoothed: Sequence[DataPoint], query: datetime, focus: Optional[PaneModel] = None, log_scale: bool = False) -> Optional[TooltipModel]:
    # Always the full smoothed series, whatever the brush shows.
    point = nearest(smoothed, query)
    if point is None:
        return None
    stats = hover_stats(smoothed, point)
    tooltip = TooltipModel(
        point=point,
        return_from_start_pct=stats["from_start"],
        return_to_present_pct=stats["to_present"],
        annualized_to_present_pct=stats["annualized"],
    )
    if focus is not None and focus.x_scale is not None and focus.y_scale is not None and focus.x_scale.contains(point.date):
        tooltip.x = focus.x_scale(point.date)
        tooltip.y = focus.y_scale(plot_value(point.value, log_scale))
    return tooltip


class ChartEngine:
    """Host-facing wrapper: caches the smoothed series and the last frame."""

    def __init__(self, config: Optional[RenderConfig] = None, catalogue: Iterable[EventMarker] = EVENT_CATALOGUE) -> None:
        self.config = config or RenderConfig()
        self.catalogue = tuple(catalogue)
        self._series: Series = []
        self._smoothed_key: Optional[int] = None
        self._smoothed: Series = []
        self.last_frame: Optional[FrameModel] = None

    @property
    def series(self) -> Series:
        return self._series

    def set_series(self, series: Series) -> None:
        self._series = list(series)
        self._smoothed_key = None
        self._smoothed = []
        self.last_frame = None

    def set_config(self, config: RenderConfig) -> None:
        self.config = config

    def smoothed(self, window: int) -> Series:
        if self._smoothed_key != window:
            self._smoothed = smooth(self._series, window)
            self._smoothed_key = window
        return self._smoothed

    def compute_frame(self, view_state: ViewState) -> FrameModel:
        frame = compute_frame(
            self._series,
            view_state,
            self.config,
            self.catalogue,
            smoothed=self.smoothed(view_state.smoothing_window),
        )
        self.last_frame = frame
        return frame

    def on_brush(self, selection: Optional[Tuple[float, float]], view_state: ViewState) -> BrushResult:
        smoothed = self.smoothed(view_state.smoothing_window)
        context = context_pane(smoothed, view_state, self.config)
        domain = selection_to_domain(selection, context.x_scale) if selection is not None else _clamp_domain(None, context)
        result = apply_brush(smoothed, domain, view_state, self.config, self.catalogue, raw=self._series)
        if self.last_frame is not None:
            # Later hovers map through the brushed focus scales.
            self.last_frame = replace(
                self.last_frame,
                view_state=replace(view_state, selected_domain=result.domain),
                focus=result.focus,
                selection=domain_to_selection(result.domain, context.x_scale),
                domain=result.domain,
                cagr=result.cagr,
                trend=result.trend,
                trend_path=result.trend_path,
                events=result.events,
            )
        return result

    def selection_for_domain(self, domain: Optional[Tuple[datetime, datetime]], view_state: ViewState) -> Optional[Tuple[float, float]]:
        """Context-pane pixel span for a date range, clamped to the data."""
        context = context_pane(self.smoothed(view_state.smoothing_window), view_state, self.config)
        return domain_to_selection(_clamp_domain(domain, context), context.x_scale)

    def on_hover(self, query: datetime, view_state: Optional[ViewState] = None) -> Optional[TooltipModel]:
        frame = self.last_frame
        if view_state is None:
            view_state = frame.view_state if frame is not None else ViewState()
        focus = frame.focus if frame is not None else None
        return hover(self.smoothed(view_state.smoothing_window), query, focus, view_state.log_scale)
