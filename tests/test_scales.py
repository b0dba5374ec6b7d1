import math
import os
import sys
import unittest
from datetime import datetime

# Allow `import core.*` like the app does when running `python app/main.py`.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
APP_DIR = os.path.join(REPO_ROOT, "app")
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from core.chart.scales import (
    LINEAR,
    SYMLOG,
    LinearScale,
    SymlogScale,
    TimeScale,
    build_value_scale,
    choose_value_kind,
    linear_ticks,
    symexp,
    symlog,
    time_ticks,
    value_domain,
    value_extent,
)


class ValueDomainTests(unittest.TestCase):
    def test_extent_bounds_every_value(self):
        values = [120.0, 87.5, 300.25, 95.0, 210.0]
        lo, hi = value_extent(values, False)
        for v in values:
            self.assertLessEqual(lo, v)
            self.assertLessEqual(v, hi)

    def test_linear_domain_padded_five_percent(self):
        lo, hi = value_domain([100.0, 200.0], False)
        self.assertAlmostEqual(lo, 95.0)
        self.assertAlmostEqual(hi, 205.0)

    def test_symlog_substitutes_non_positive_with_one(self):
        lo, hi = value_domain([-20.0, 0.0, 50.0, 400.0], True)
        self.assertEqual(lo, 1.0)
        self.assertEqual(hi, 400.0)

    def test_empty_values_have_no_domain(self):
        self.assertIsNone(value_extent([], False))
        self.assertIsNone(value_domain([], True))
        self.assertIsNone(build_value_scale([], True, (100.0, 0.0), rescale=True))


class ScaleKindTests(unittest.TestCase):
    def test_linear_mode_never_symlog(self):
        self.assertEqual(choose_value_kind([1.0, 1000.0], False, rescale=True), LINEAR)

    def test_rescale_falls_back_to_linear_on_flat_range(self):
        self.assertEqual(choose_value_kind([100.0, 110.0, 120.0], True, rescale=True), LINEAR)
        scale = build_value_scale([100.0, 110.0, 120.0], True, (370.0, 0.0), rescale=True)
        self.assertEqual(scale.kind, LINEAR)
        # linear fallback keeps the 5% padding
        self.assertAlmostEqual(scale.domain[0], 99.0)
        self.assertAlmostEqual(scale.domain[1], 121.0)

    def test_rescale_keeps_symlog_at_threshold(self):
        self.assertEqual(choose_value_kind([100.0, 130.0], True, rescale=True), SYMLOG)
        self.assertEqual(choose_value_kind([100.0, 129.0], True, rescale=True), LINEAR)

    def test_full_range_log_mode_is_symlog_regardless_of_ratio(self):
        scale = build_value_scale([100.0, 101.0], True, (40.0, 0.0))
        self.assertIsInstance(scale, SymlogScale)


class ScaleMappingTests(unittest.TestCase):
    def test_linear_scale_round_trip(self):
        scale = LinearScale((0.0, 200.0), (370.0, 0.0))
        self.assertAlmostEqual(scale(0.0), 370.0)
        self.assertAlmostEqual(scale(200.0), 0.0)
        self.assertAlmostEqual(scale(100.0), 185.0)
        self.assertAlmostEqual(scale.invert(185.0), 100.0)

    def test_symlog_transform(self):
        self.assertAlmostEqual(symlog(0.0), 0.0)
        self.assertAlmostEqual(symlog(9.0), math.log(10.0))
        self.assertAlmostEqual(symlog(-9.0), -math.log(10.0))
        self.assertAlmostEqual(symexp(symlog(1234.5)), 1234.5, places=6)

    def test_symlog_scale_is_monotonic_and_invertible(self):
        scale = SymlogScale((1.0, 10000.0), (370.0, 0.0))
        self.assertAlmostEqual(scale(1.0), 370.0)
        self.assertAlmostEqual(scale(10000.0), 0.0)
        self.assertGreater(scale(10.0), scale(100.0))
        self.assertAlmostEqual(scale.invert(scale(500.0)), 500.0, places=6)

    def test_degenerate_domain_maps_to_middle(self):
        scale = LinearScale((50.0, 50.0), (100.0, 0.0))
        self.assertEqual(scale(50.0), 50.0)
        self.assertEqual(scale(10.0), 50.0)

    def test_time_scale_round_trip_lands_on_date(self):
        start = datetime(1990, 1, 1)
        end = datetime(2020, 1, 1)
        scale = TimeScale((start, end), (0.0, 930.0))
        self.assertAlmostEqual(scale(start), 0.0)
        self.assertAlmostEqual(scale(end), 930.0)
        feb = datetime(1990, 2, 1)
        self.assertEqual(scale.invert(scale(feb)), feb)


class TickTests(unittest.TestCase):
    def test_linear_ticks_are_nice_and_inside(self):
        ticks = linear_ticks(0.0, 97.0, 10)
        self.assertEqual(ticks[0], 0.0)
        self.assertEqual(ticks[1], 10.0)
        self.assertLessEqual(ticks[-1], 97.0)

    def test_symlog_ticks_follow_decades(self):
        ticks = SymlogScale((80.0, 2500.0), (100.0, 0.0)).ticks()
        self.assertIn(100.0, ticks)
        self.assertIn(1000.0, ticks)
        self.assertTrue(all(80.0 <= t <= 2500.0 for t in ticks))

    def test_time_ticks_yearly_over_long_span(self):
        ticks = time_ticks(datetime(1980, 1, 1), datetime(2024, 12, 1), 10)
        self.assertTrue(all(t.month == 1 and t.day == 1 for t in ticks))
        self.assertLessEqual(len(ticks), 11)

    def test_time_ticks_monthly_over_short_span(self):
        ticks = time_ticks(datetime(1990, 1, 1), datetime(1990, 3, 1), 10)
        self.assertEqual(ticks, [datetime(1990, 1, 1), datetime(1990, 2, 1), datetime(1990, 3, 1)])


if __name__ == "__main__":
    unittest.main()
