from __future__ import annotations

from bisect import bisect_left
from datetime import datetime
from typing import Optional, Sequence

from .models import DataPoint


def index_for_date(series: Sequence[DataPoint], query: datetime) -> Optional[int]:
    if not series:
        return None
    dates = [p.date for p in series]
    pos = bisect_left(dates, query, 1)
    if pos >= len(series):
        return len(series) - 1
    before = series[pos - 1]
    after = series[pos]
    # The later point wins only when strictly closer.
    if (query - before.date) > (after.date - query):
        return pos
    return pos - 1


def nearest(series: Sequence[DataPoint], query: datetime) -> Optional[DataPoint]:
    idx = index_for_date(series, query)
    if idx is None:
        return None
    return series[idx]
