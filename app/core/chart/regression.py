from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .models import DataPoint, Series


def least_squares(x: np.ndarray, y: np.ndarray) -> Optional[Tuple[float, float]]:
    """Closed-form OLS; returns (slope, intercept) or None when x has no spread."""
    if x.size < 2 or x.size != y.size:
        return None
    x_mean = float(x.mean())
    y_mean = float(y.mean())
    dx = x - x_mean
    denom = float(np.dot(dx, dx))
    if denom == 0:
        return None
    slope = float(np.dot(dx, y - y_mean)) / denom
    intercept = y_mean - slope * x_mean
    return slope, intercept


def fit(series: Series, log_scale: bool) -> Optional[Series]:
    # Point index, not date, is the regressor.
    if len(series) < 2:
        return None
    values = np.asarray([p.value for p in series], dtype=np.float64)
    x = np.arange(values.size, dtype=np.float64)
    y = np.log(np.maximum(values, 1.0)) if log_scale else values
    coeffs = least_squares(x, y)
    if coeffs is None:
        return None
    slope, intercept = coeffs
    fitted = slope * x + intercept
    if log_scale:
        fitted = np.exp(fitted)
    return [DataPoint(p.date, float(v)) for p, v in zip(series, fitted)]


def trend_for(series: Series, log_scale: bool, show_trendline: bool) -> Optional[Series]:
    # The trend overlay is only offered in log mode.
    if not (log_scale and show_trendline):
        return None
    return fit(series, log_scale=True)
