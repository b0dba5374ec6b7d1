"""
Convenience package shim.

The chart engine lives under `app/core`, and the GUI is run via
`python app/main.py`, which puts `app/` on `sys.path` so `import core.*` works.

From the repo root (e.g. `python -m core.chart.cli --csv data.csv`), `app/` is
not on `sys.path`; this shim extends the package search path to `app/core`.
"""

from __future__ import annotations

import os

_HERE = os.path.abspath(os.path.dirname(__file__))
_APP_CORE = os.path.normpath(os.path.join(_HERE, "..", "app", "core"))

if os.path.isdir(_APP_CORE):
    __path__.append(_APP_CORE)  # type: ignore[name-defined]
