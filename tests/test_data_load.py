import os
import sys
import tempfile
import unittest
from datetime import datetime

# Allow `import core.*` like the app does when running `python app/main.py`.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
APP_DIR = os.path.join(REPO_ROOT, "app")
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from core.data_load import load_series_csv, parse_row


class LoadSeriesCsvTests(unittest.TestCase):
    def _write(self, text: str) -> str:
        handle = tempfile.NamedTemporaryFile("w", suffix=".csv", delete=False, encoding="utf-8")
        with handle:
            handle.write(text)
        self.addCleanup(os.remove, handle.name)
        return handle.name

    def test_reads_and_sorts_rows(self):
        path = self._write("Date,MSCI World\n03/1990,90\n01/1990,100\n02/1990,\"1,110.5\"\n")
        points, skipped = load_series_csv(path)
        self.assertEqual(skipped, 0)
        self.assertEqual([p.date for p in points], [datetime(1990, 1, 1), datetime(1990, 2, 1), datetime(1990, 3, 1)])
        self.assertEqual([p.value for p in points], [100.0, 1110.5, 90.0])

    def test_bad_rows_are_skipped(self):
        path = self._write("Date,MSCI World\n01/1990,100\n13/1990,5\n02/1990,abc\n03/1990,nan\n04/1990,120\n")
        points, skipped = load_series_csv(path)
        self.assertEqual(len(points), 2)
        self.assertEqual(skipped, 3)

    def test_custom_column(self):
        path = self._write("Date, Other \n01/2000,7\n")
        points, _ = load_series_csv(path, column="Other")
        self.assertEqual(points[0].value, 7.0)

    def test_missing_column_raises(self):
        path = self._write("Month,Value\n01/1990,1\n")
        with self.assertRaises(ValueError) as ctx:
            load_series_csv(path)
        self.assertIn("Missing column", str(ctx.exception))

    def test_missing_file_raises(self):
        with self.assertRaises(ValueError):
            load_series_csv(os.path.join(tempfile.gettempdir(), "no_such_series_file.csv"))

    def test_parse_row(self):
        self.assertIsNone(parse_row({"Date": "", "MSCI World": "1"}, "MSCI World"))
        self.assertIsNone(parse_row({"Date": "01/1990", "MSCI World": "inf"}, "MSCI World"))
        point = parse_row({"Date": "1990-01-31", "X": "2"}, "X", date_format="%Y-%m-%d")
        self.assertEqual(point.date, datetime(1990, 1, 31))

    def test_sample_feed_loads(self):
        path = os.path.join(APP_DIR, "data", "sample_chart.csv")
        points, skipped = load_series_csv(path)
        self.assertEqual(skipped, 0)
        self.assertEqual(len(points), 540)
        self.assertEqual(points[0].date, datetime(1980, 1, 1))
        self.assertEqual(points[-1].date, datetime(2024, 12, 1))


if __name__ == "__main__":
    unittest.main()
