from __future__ import annotations

from typing import Iterable

import numpy as np

from .models import DataPoint, Series


def clamp_window(window: int, length: int) -> int:
    try:
        window = int(window)
    except (TypeError, ValueError):
        window = 1
    return max(1, min(window, max(1, length)))


def trailing_mean(values: Iterable[float], window: int) -> np.ndarray:
    """Causal moving average whose first `window - 1` outputs average fewer samples."""
    arr = np.asarray(values, dtype=np.float64)
    n = arr.size
    if n == 0:
        return arr
    window = clamp_window(window, n)
    if window == 1:
        return arr.copy()
    csum = np.cumsum(arr, dtype=np.float64)
    out = np.empty(n, dtype=np.float64)
    out[:window] = csum[:window] / np.arange(1, window + 1, dtype=np.float64)
    out[window:] = (csum[window:] - csum[:-window]) / float(window)
    return out


def smooth(series: Series, window: int) -> Series:
    if not series:
        return []
    window = clamp_window(window, len(series))
    if window == 1:
        return list(series)
    means = trailing_mean([p.value for p in series], window)
    return [DataPoint(p.date, float(v)) for p, v in zip(series, means)]
