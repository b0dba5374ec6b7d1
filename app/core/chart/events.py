from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .models import EventMarker

# (MM/YYYY, label, filter id)
_CATALOGUE: Tuple[Tuple[str, str, Optional[str]], ...] = (
    ("03/1980", "Volcker Shock", None),
    ("10/1987", "Black Monday", "black_monday"),
    ("07/1990", "Early 90s Recession", None),
    ("12/1994", "Mexican Peso Crisis", None),
    ("07/1997", "Asian Crisis", "asian_crisis"),
    ("08/1998", "Russian Default", None),
    ("09/1998", "LTCM Collapse", None),
    ("03/2000", "Dot-com Bubble Burst", "dotcom"),
    ("09/2001", "9/11 Attacks", None),
    ("09/2008", "Global Financial Crisis", "gfc"),
    ("05/2010", "Eurozone Crisis", "eurozone"),
    ("08/2011", "US Debt Downgrade", None),
    ("08/2015", "China Market Turmoil", None),
    ("06/2016", "Brexit", None),
    ("10/2018", "Trade War Fears", None),
    ("03/2020", "COVID Crash", "covid"),
    ("02/2022", "Russia Invades Ukraine", None),
    ("06/2022", "Inflation & Rate Hikes", "rate_hikes"),
    ("10/2022", "UK Gilt Crisis", None),
    ("03/2023", "Banking Mini-Crisis", None),
    ("05/2023", "US Debt Ceiling Crisis", None),
    ("10/2023", "Israel-Hamas War Begins", None),
    ("11/2023", "AI-Led Rally Begins", None),
    ("01/2024", "Fed Pivot Optimism", None),
    ("08/2024", "Yen Carry Trade Unwind", None),
)


def parse_month(text: str) -> datetime:
    """Parse the `MM/YYYY` format shared by the series feed and the catalogue."""
    return datetime.strptime(text.strip(), "%m/%Y")


EVENT_CATALOGUE: Tuple[EventMarker, ...] = tuple(
    EventMarker(date=parse_month(date), label=label, id=event_id) for date, label, event_id in _CATALOGUE
)


def filterable_events(catalogue: Iterable[EventMarker] = EVENT_CATALOGUE) -> List[EventMarker]:
    return [event for event in catalogue if event.id]


def visible_events(
    catalogue: Iterable[EventMarker],
    filters: Iterable[str],
    show_events: bool,
) -> List[EventMarker]:
    if not show_events:
        return []
    active = {f for f in filters if f}
    if active:
        # Any active filter turns the catalogue into an allow-list; unlabeled events drop out too.
        return [event for event in catalogue if event.id is not None and event.id in active]
    return list(catalogue)


def clip_events(events: Iterable[EventMarker], start: datetime, end: datetime) -> List[EventMarker]:
    return [event for event in events if start <= event.date <= end]
