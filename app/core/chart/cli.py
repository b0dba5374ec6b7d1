from __future__ import annotations

import argparse
import os
from datetime import datetime
from typing import Optional

from core.chart.events import EVENT_CATALOGUE, filterable_events, parse_month
from core.chart.frame import ChartEngine
from core.chart.models import ViewState
from core.data_load import DEFAULT_COLUMN, DEFAULT_DATE_FORMAT, load_series_csv


def _parse_month_arg(val: str) -> datetime:
    try:
        return parse_month(val)
    except ValueError:
        raise SystemExit(f"Expected MM/YYYY, got: {val}")


def _fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%m/%Y") if value is not None else "-"


def _fmt_pct(value: Optional[float]) -> str:
    return f"{value:.2f}%" if value is not None else "n/a"


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Headless focus/context chart analytics (no UI).")
    here = os.path.abspath(os.path.dirname(__file__))
    # This module lives at app/core/chart/cli.py; the default feed sits in app/data/.
    default_csv = os.path.normpath(os.path.join(here, "..", "..", "data", "sample_chart.csv"))
    ap.add_argument("--csv", default=default_csv, help="Series CSV with Date (MM/YYYY) and value columns")
    ap.add_argument("--column", default=DEFAULT_COLUMN, help=f"Value column (default: {DEFAULT_COLUMN})")
    ap.add_argument("--date-format", default=DEFAULT_DATE_FORMAT)
    ap.add_argument("--window", type=int, default=1, help="Smoothing window in months")
    ap.add_argument("--log", action="store_true", help="Symmetric-log value scale")
    ap.add_argument("--trend", action="store_true", help="Fit the log-space trend line (requires --log)")
    ap.add_argument("--start", help="Brush start, MM/YYYY")
    ap.add_argument("--end", help="Brush end, MM/YYYY")
    ap.add_argument("--no-events", action="store_true", help="Hide event markers")
    ap.add_argument(
        "--filter",
        action="append",
        default=[],
        choices=sorted(e.id for e in filterable_events(EVENT_CATALOGUE)),
        help="Only show events with this id (repeatable)",
    )
    ap.add_argument("--hover", help="Report tooltip statistics for the point nearest to MM/YYYY")
    args = ap.parse_args(argv)

    try:
        series, skipped = load_series_csv(os.path.abspath(args.csv), column=args.column, date_format=args.date_format)
    except ValueError as exc:
        raise SystemExit(str(exc))
    if not series:
        raise SystemExit("No rows parsed from the series file.")

    domain = None
    if args.start or args.end:
        start = _parse_month_arg(args.start) if args.start else series[0].date
        end = _parse_month_arg(args.end) if args.end else series[-1].date
        domain = (start, end)

    state = ViewState(
        log_scale=bool(args.log),
        smoothing_window=int(args.window),
        show_events=not bool(args.no_events),
        show_trendline=bool(args.trend),
        event_filters=frozenset(args.filter),
        selected_domain=domain,
    )
    engine = ChartEngine()
    engine.set_series(series)
    frame = engine.compute_frame(state)

    print(f"points={len(series)} skipped={skipped} window={state.smoothing_window}")
    if frame.domain is not None:
        print(f"domain={_fmt_date(frame.domain[0])}..{_fmt_date(frame.domain[1])}")
    y_scale = frame.focus.y_scale
    if y_scale is not None:
        lo, hi = y_scale.domain
        print(f"value_scale={y_scale.kind} value_domain=[{lo:.4f}, {hi:.4f}]")
    else:
        print("value_scale=none")
    if frame.cagr is not None:
        c = frame.cagr
        print(
            f"cagr={_fmt_pct(c.cagr)} years={c.years:.3f} "
            f"start={_fmt_date(c.start_date)}@{c.start_value:.2f} end={_fmt_date(c.end_date)}@{c.end_value:.2f}"
        )
    else:
        print("cagr=n/a")
    if frame.trend:
        print(f"trend_start={frame.trend[0].value:.2f} trend_end={frame.trend[-1].value:.2f}")
    for placed in frame.events:
        marker = placed.marker
        print(f"event={_fmt_date(marker.date)} {marker.label}" + (f" [{marker.id}]" if marker.id else ""))

    if args.hover:
        tooltip = engine.on_hover(_parse_month_arg(args.hover))
        if tooltip is not None:
            print(
                f"hover={_fmt_date(tooltip.point.date)} value={tooltip.point.value:.2f} "
                f"from_start={_fmt_pct(tooltip.return_from_start_pct)} "
                f"to_present={_fmt_pct(tooltip.return_to_present_pct)} "
                f"annualized={_fmt_pct(tooltip.annualized_to_present_pct)}"
            )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
