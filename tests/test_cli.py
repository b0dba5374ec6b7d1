import io
import os
import sys
import unittest
from contextlib import redirect_stdout

# Allow `import core.*` like the app does when running `python app/main.py`.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
APP_DIR = os.path.join(REPO_ROOT, "app")
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from core.chart.cli import main


def _run(*args):
    out = io.StringIO()
    with redirect_stdout(out):
        code = main(list(args))
    return code, out.getvalue().splitlines()


class CliTests(unittest.TestCase):
    def test_default_feed_full_range(self):
        code, lines = _run()
        self.assertEqual(code, 0)
        self.assertEqual(lines[0], "points=540 skipped=0 window=1")
        self.assertIn("domain=01/1980..12/2024", lines)
        self.assertTrue(any(line.startswith("cagr=") and line != "cagr=n/a" for line in lines))

    def test_brush_and_filter(self):
        _, lines = _run("--start", "01/2007", "--end", "12/2009", "--filter", "gfc", "--log", "--trend")
        self.assertIn("domain=01/2007..12/2009", lines)
        events = [line for line in lines if line.startswith("event=")]
        self.assertEqual(events, ["event=09/2008 Global Financial Crisis [gfc]"])
        self.assertTrue(any(line.startswith("trend_start=") for line in lines))

    def test_no_events(self):
        _, lines = _run("--no-events")
        self.assertFalse(any(line.startswith("event=") for line in lines))

    def test_hover(self):
        _, lines = _run("--hover", "06/2000")
        hover = [line for line in lines if line.startswith("hover=")]
        self.assertEqual(len(hover), 1)
        self.assertTrue(hover[0].startswith("hover=06/2000 "))

    def test_missing_file_exits(self):
        with self.assertRaises(SystemExit):
            _run("--csv", os.path.join(REPO_ROOT, "no_such_file.csv"))

    def test_bad_month_exits(self):
        with self.assertRaises(SystemExit):
            _run("--start", "2007-01")


if __name__ == "__main__":
    unittest.main()
