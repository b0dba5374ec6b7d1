from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .models import AxisTick

PADDING_RATIO = 0.05
SYMLOG_MIN_RATIO = 1.3
SYMLOG_CONSTANT = 1.0

LINEAR = "linear"
SYMLOG = "symlog"

_EPOCH = datetime(1970, 1, 1)


def to_seconds(value: datetime) -> float:
    # Naive datetimes are treated as UTC; no local timezone lookup.
    if value.tzinfo is not None:
        value = value.replace(tzinfo=None) - value.utcoffset()
    return (value - _EPOCH).total_seconds()


def from_seconds(seconds: float) -> datetime:
    # Whole seconds so a pixel round trip lands back on the same date.
    return _EPOCH + timedelta(seconds=round(float(seconds)))


def symlog(x: float, constant: float = SYMLOG_CONSTANT) -> float:
    return math.copysign(math.log1p(abs(x) / constant), x)


def symexp(y: float, constant: float = SYMLOG_CONSTANT) -> float:
    return math.copysign(math.expm1(abs(y)) * constant, y)


class Scale:
    """Linear map between a (possibly transformed) domain and a pixel range."""

    kind = LINEAR

    def __init__(self, domain: Tuple[float, float], pixel_range: Tuple[float, float]) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(pixel_range[0]), float(pixel_range[1]))

    def _forward(self, value: float) -> float:
        return float(value)

    def _backward(self, value: float) -> float:
        return float(value)

    def __call__(self, value: float) -> float:
        d0 = self._forward(self.domain[0])
        d1 = self._forward(self.domain[1])
        r0, r1 = self.range
        span = d1 - d0
        if span == 0 or not math.isfinite(span):
            return (r0 + r1) / 2.0
        t = (self._forward(value) - d0) / span
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0 = self._forward(self.domain[0])
        d1 = self._forward(self.domain[1])
        r0, r1 = self.range
        if r1 == r0:
            return self._backward(d0)
        t = (float(pixel) - r0) / (r1 - r0)
        return self._backward(d0 + t * (d1 - d0))

    def ticks(self, count: int = 10) -> List[float]:
        return linear_ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, value: float, count: int = 10) -> str:
        step = tick_step(self.domain[0], self.domain[1], count)
        return format_number(value, step)


class LinearScale(Scale):
    kind = LINEAR


class SymlogScale(Scale):
    kind = SYMLOG

    def __init__(self, domain: Tuple[float, float], pixel_range: Tuple[float, float], constant: float = SYMLOG_CONSTANT) -> None:
        super().__init__(domain, pixel_range)
        self.constant = constant

    def _forward(self, value: float) -> float:
        return symlog(float(value), self.constant)

    def _backward(self, value: float) -> float:
        return symexp(float(value), self.constant)

    def ticks(self, count: int = 10) -> List[float]:
        lo, hi = sorted(self.domain)
        values = log_ticks(lo, hi)
        if len(values) < 2:
            return linear_ticks(lo, hi, count)
        if len(values) > count * 2:
            values = [v for v in values if _is_power_of_ten(v)] or values
        return values

    def tick_format(self, value: float, count: int = 10) -> str:
        return format_si(value)


class TimeScale:
    """Calendar time to pixels; always linear."""

    kind = LINEAR

    def __init__(self, domain: Tuple[datetime, datetime], pixel_range: Tuple[float, float]) -> None:
        self.domain = (domain[0], domain[1])
        self.range = (float(pixel_range[0]), float(pixel_range[1]))
        self._inner = LinearScale((to_seconds(domain[0]), to_seconds(domain[1])), self.range)

    def __call__(self, value: datetime) -> float:
        return self._inner(to_seconds(value))

    def invert(self, pixel: float) -> datetime:
        return from_seconds(self._inner.invert(pixel))

    def contains(self, value: datetime) -> bool:
        return self.domain[0] <= value <= self.domain[1]

    def ticks(self, count: int = 10) -> List[datetime]:
        return time_ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, value: datetime, count: int = 10) -> str:
        if _span_months(self.domain[0], self.domain[1]) >= 24:
            return str(value.year)
        if value.month == 1:
            return str(value.year)
        return value.strftime("%b")


def substitute_non_positive(values: Iterable[float]) -> np.ndarray:
    arr = np.asarray(list(values), dtype=np.float64)
    return np.where(arr <= 0, 1.0, arr)


def value_extent(values: Sequence[float], log_scale: bool) -> Optional[Tuple[float, float]]:
    arr = np.asarray(list(values), dtype=np.float64)
    if log_scale:
        arr = substitute_non_positive(arr)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return float(arr.min()), float(arr.max())


def value_domain(values: Sequence[float], log_scale: bool) -> Optional[Tuple[float, float]]:
    extent = value_extent(values, log_scale)
    if extent is None:
        return None
    lo, hi = extent
    if log_scale:
        return lo, hi
    padding = (hi - lo) * PADDING_RATIO
    return lo - padding, hi + padding


def choose_value_kind(values: Sequence[float], log_scale: bool, rescale: bool = False) -> str:
    if not log_scale:
        return LINEAR
    if not rescale:
        return SYMLOG
    extent = value_extent(values, True)
    if extent is None:
        return LINEAR
    lo, hi = extent
    if hi / lo < SYMLOG_MIN_RATIO:
        return LINEAR
    return SYMLOG


def build_value_scale(
    values: Sequence[float],
    log_scale: bool,
    pixel_range: Tuple[float, float],
    rescale: bool = False,
) -> Optional[Scale]:
    kind = choose_value_kind(values, log_scale, rescale)
    # A sub-range that falls back to linear still reads clamped values, so the
    # substitution is kept while the padding follows the linear rule.
    if kind == SYMLOG:
        domain = value_domain(values, True)
        if domain is None:
            return None
        return SymlogScale(domain, pixel_range)
    if log_scale:
        values = substitute_non_positive(values)
    domain = value_domain(values, False)
    if domain is None:
        return None
    return LinearScale(domain, pixel_range)


def build_time_scale(dates: Sequence[datetime], pixel_range: Tuple[float, float]) -> Optional[TimeScale]:
    if not dates:
        return None
    return TimeScale((min(dates), max(dates)), pixel_range)


def plot_value(value: float, log_scale: bool) -> float:
    if log_scale and value <= 0:
        return 1.0
    return float(value)


def tick_step(lo: float, hi: float, count: int) -> float:
    span = abs(float(hi) - float(lo))
    if span <= 0 or not math.isfinite(span) or count <= 0:
        return 0.0
    raw_step = span / count
    base = 10 ** math.floor(math.log10(raw_step))
    for mult in (1, 2, 5, 10):
        step = base * mult
        if step >= raw_step:
            return step
    return base * 10


def linear_ticks(lo: float, hi: float, count: int = 10) -> List[float]:
    lo, hi = sorted((float(lo), float(hi)))
    step = tick_step(lo, hi, count)
    if step <= 0:
        return [lo] if math.isfinite(lo) else []
    start = math.ceil(lo / step)
    stop = math.floor(hi / step)
    return [round(i * step, 12) for i in range(int(start), int(stop) + 1)]


def log_ticks(lo: float, hi: float) -> List[float]:
    if hi <= 0:
        return []
    lo = max(lo, 1.0)
    values = []
    for exp in range(int(math.floor(math.log10(lo))), int(math.ceil(math.log10(hi))) + 1):
        for mult in (1, 2, 5):
            val = mult * (10 ** exp)
            if lo <= val <= hi:
                values.append(float(val))
    return values


def _is_power_of_ten(value: float) -> bool:
    if value <= 0:
        return False
    exp = math.log10(value)
    return abs(exp - round(exp)) < 1e-9


def format_number(value: float, step: float) -> str:
    if step >= 1 or step <= 0:
        return f"{value:,.0f}"
    decimals = min(6, max(0, -int(math.floor(math.log10(step)))))
    return f"{value:,.{decimals}f}"


def format_si(value: float) -> str:
    for threshold, suffix in ((1e9, "G"), (1e6, "M"), (1e3, "k")):
        if abs(value) >= threshold:
            return f"{value / threshold:.0f}{suffix}"
    return f"{value:.0f}"


def _span_months(start: datetime, end: datetime) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def time_ticks(start: datetime, end: datetime, count: int = 10) -> List[datetime]:
    if end < start:
        start, end = end, start
    months = _span_months(start, end)
    if months >= 24:
        span_years = end.year - start.year
        step = 1
        for candidate in (1, 2, 5, 10, 20, 50, 100):
            step = candidate
            if span_years / candidate <= count:
                break
        year = start.year if start == datetime(start.year, 1, 1) else start.year + 1
        year = int(math.ceil(year / step) * step)
        ticks = []
        while year <= end.year:
            ticks.append(datetime(year, 1, 1))
            year += step
        return ticks
    step = 1
    for candidate in (1, 2, 3, 6, 12):
        step = candidate
        if months / candidate <= count:
            break
    ticks = []
    index = start.year * 12 + (start.month - 1)
    if start.day != 1 or start.hour or start.minute or start.second:
        index += 1
    index = int(math.ceil(index / step) * step)
    while True:
        tick = datetime(index // 12, index % 12 + 1, 1)
        if tick > end:
            break
        ticks.append(tick)
        index += step
    return ticks


def axis_ticks(scale, count: int = 10) -> List[AxisTick]:
    if scale is None:
        return []
    out = []
    for value in scale.ticks(count):
        out.append(AxisTick(position=scale(value), label=scale.tick_format(value, count)))
    return out
