import math
import os
import sys
import unittest
from datetime import datetime

import numpy as np

# Allow `import core.*` like the app does when running `python app/main.py`.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
APP_DIR = os.path.join(REPO_ROOT, "app")
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from core.chart.models import DataPoint
from core.chart.regression import fit, least_squares, trend_for


def _series(values):
    return [DataPoint(datetime(2000 + i // 12, i % 12 + 1, 1), float(v)) for i, v in enumerate(values)]


class RegressionTests(unittest.TestCase):
    def test_least_squares_recovers_line(self):
        x = np.arange(5, dtype=np.float64)
        slope, intercept = least_squares(x, 3.0 * x + 2.0)
        self.assertAlmostEqual(slope, 3.0)
        self.assertAlmostEqual(intercept, 2.0)

    def test_least_squares_needs_spread(self):
        self.assertIsNone(least_squares(np.zeros(1), np.zeros(1)))
        self.assertIsNone(least_squares(np.ones(3), np.arange(3, dtype=np.float64)))

    def test_log_fit_reproduces_exponential_growth(self):
        values = [100.0 * math.exp(0.01 * i) for i in range(40)]
        trend = fit(_series(values), log_scale=True)
        self.assertEqual(len(trend), 40)
        for got, want in zip(trend, values):
            self.assertAlmostEqual(got.value, want, places=6)

    def test_log_fit_clamps_non_positive(self):
        trend = fit(_series([-5.0, 0.0, 1.0]), log_scale=True)
        for point in trend:
            self.assertAlmostEqual(point.value, 1.0)

    def test_fit_preserves_dates(self):
        series = _series([1.0, 3.0, 2.0, 5.0])
        trend = fit(series, log_scale=False)
        self.assertEqual([p.date for p in trend], [p.date for p in series])

    def test_short_series_has_no_trend(self):
        self.assertIsNone(fit(_series([10.0]), log_scale=True))

    def test_trend_requires_log_mode_and_toggle(self):
        series = _series([10.0, 20.0, 40.0])
        self.assertIsNone(trend_for(series, log_scale=False, show_trendline=True))
        self.assertIsNone(trend_for(series, log_scale=True, show_trendline=False))
        self.assertEqual(len(trend_for(series, log_scale=True, show_trendline=True)), 3)


if __name__ == "__main__":
    unittest.main()
