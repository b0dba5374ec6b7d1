"""
Growth statistics over a series.

Two annualization bases coexist on purpose:
- `cagr` counts years at month granularity, matching monthly source data.
- `annualized_return` counts elapsed days over a 365.25-day year and backs the
  hover tooltip.
They produce different numbers for the same pair of points.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

from .models import CAGRResult, DataPoint

DAYS_PER_YEAR = 365.25


def month_years(start: datetime, end: datetime) -> float:
    return (end.year - start.year) + (end.month - start.month) / 12.0


def _compound_rate(start_value: float, end_value: float, years: float) -> Optional[float]:
    if years <= 0 or start_value <= 0:
        return None
    ratio = end_value / start_value
    if ratio < 0 or not math.isfinite(ratio):
        return None
    return (ratio ** (1.0 / years) - 1.0) * 100.0


def cagr(points: Sequence[DataPoint]) -> Optional[CAGRResult]:
    if len(points) < 2:
        return None
    first = points[0]
    last = points[-1]
    years = month_years(first.date, last.date)
    if years == 0:
        return None
    rate = _compound_rate(first.value, last.value, years)
    if rate is None:
        return None
    return CAGRResult(
        cagr=rate,
        start_date=first.date,
        end_date=last.date,
        start_value=first.value,
        end_value=last.value,
        years=years,
    )


def annualized_return(start: DataPoint, end: DataPoint) -> Optional[float]:
    years = (end.date - start.date).total_seconds() / 86400.0 / DAYS_PER_YEAR
    return _compound_rate(start.value, end.value, years)


def simple_return(start_value: float, end_value: float) -> Optional[float]:
    if start_value == 0:
        return None
    return (end_value - start_value) / start_value * 100.0


def hover_stats(series: Sequence[DataPoint], point: DataPoint) -> dict:
    if not series:
        return {"from_start": None, "to_present": None, "annualized": None}
    first = series[0]
    last = series[-1]
    return {
        "from_start": simple_return(first.value, point.value),
        "to_present": simple_return(point.value, last.value),
        "annualized": annualized_return(point, last),
    }
