from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, FrozenSet, List, Optional, Tuple

from .theme import Palette

if TYPE_CHECKING:
    from .scales import Scale, TimeScale


@dataclass(frozen=True)
class DataPoint:
    date: datetime
    value: float


Series = List[DataPoint]


@dataclass(frozen=True)
class EventMarker:
    date: datetime
    label: str
    id: Optional[str] = None


@dataclass(frozen=True)
class CAGRResult:
    # cagr is a percentage, e.g. 7.18 for 7.18% per year.
    cagr: float
    start_date: datetime
    end_date: datetime
    start_value: float
    end_value: float
    years: float


@dataclass(frozen=True)
class ViewState:
    log_scale: bool = False
    smoothing_window: int = 1
    show_events: bool = True
    show_trendline: bool = False
    event_filters: FrozenSet[str] = frozenset()
    selected_domain: Optional[Tuple[datetime, datetime]] = None


@dataclass(frozen=True)
class Margins:
    top: int
    right: int
    bottom: int
    left: int


@dataclass(frozen=True)
class RenderConfig:
    total_width: int = 1000
    total_height: int = 500
    focus_margin: Margins = Margins(20, 20, 110, 50)
    context_margin: Margins = Margins(430, 20, 30, 50)
    dark_mode: bool = False
    tick_count: int = 10

    @property
    def width(self) -> int:
        return self.total_width - self.focus_margin.left - self.focus_margin.right

    @property
    def focus_height(self) -> int:
        return self.total_height - self.focus_margin.top - self.focus_margin.bottom

    @property
    def context_height(self) -> int:
        return self.total_height - self.context_margin.top - self.context_margin.bottom


@dataclass
class AxisTick:
    position: float
    label: str


@dataclass
class PaneModel:
    """One view (focus or context) laid out in its own pixel space.

    Paths are pixel coordinates with y growing downwards, matching the
    scale ranges `[height, 0]`.
    """

    width: float
    height: float
    x_scale: Optional[TimeScale] = None
    y_scale: Optional[Scale] = None
    path: List[Tuple[float, float]] = field(default_factory=list)
    x_ticks: List[AxisTick] = field(default_factory=list)
    y_ticks: List[AxisTick] = field(default_factory=list)


@dataclass
class PlacedEvent:
    marker: EventMarker
    x: float


@dataclass
class BrushResult:
    domain: Optional[Tuple[datetime, datetime]]
    cagr: Optional[CAGRResult]
    trend: Optional[Series]
    visible: Series
    focus: PaneModel
    trend_path: List[Tuple[float, float]] = field(default_factory=list)
    events: List[PlacedEvent] = field(default_factory=list)


@dataclass
class TooltipModel:
    point: DataPoint
    return_from_start_pct: Optional[float]
    return_to_present_pct: Optional[float]
    annualized_to_present_pct: Optional[float]
    # Pixel position in the focus pane; None when the point is outside the brushed domain.
    x: Optional[float] = None
    y: Optional[float] = None

    def lines(self) -> List[str]:
        def pct(val: Optional[float]) -> str:
            if val is None:
                return "n/a"
            sign = "+" if val >= 0 else ""
            return f"{sign}{val:.2f}%"

        return [
            self.point.date.strftime("%b %Y"),
            f"Value: {self.point.value:,.2f}",
            f"Return from start: {pct(self.return_from_start_pct)}",
            f"Return to present: {pct(self.return_to_present_pct)}",
            f"Annualized to present: {pct(self.annualized_to_present_pct)}",
        ]


@dataclass
class FrameModel:
    config: RenderConfig
    palette: Palette
    view_state: ViewState
    smoothed: Series
    focus: PaneModel
    context: PaneModel
    selection: Optional[Tuple[float, float]] = None
    domain: Optional[Tuple[datetime, datetime]] = None
    cagr: Optional[CAGRResult] = None
    trend: Optional[Series] = None
    trend_path: List[Tuple[float, float]] = field(default_factory=list)
    events: List[PlacedEvent] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.smoothed
