import csv
import math
import os
from datetime import datetime
from typing import List, Optional, Tuple

from core.chart.models import DataPoint

DEFAULT_COLUMN = 'MSCI World'
DEFAULT_DATE_COLUMN = 'Date'
DEFAULT_DATE_FORMAT = '%m/%Y'


def parse_row(row: dict, column: str, date_column: str = DEFAULT_DATE_COLUMN, date_format: str = DEFAULT_DATE_FORMAT) -> Optional[DataPoint]:
    try:
        date = datetime.strptime(str(row.get(date_column, '')).strip(), date_format)
        raw = str(row.get(column, '')).strip().replace(',', '')
        value = float(raw)
    except (ValueError, TypeError):
        return None
    if not math.isfinite(value):
        return None
    return DataPoint(date=date, value=value)


def load_series_csv(
    path: str,
    column: str = DEFAULT_COLUMN,
    date_column: str = DEFAULT_DATE_COLUMN,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Tuple[List[DataPoint], int]:
    """Read a `Date,<column>` CSV into a date-ordered series.

    Returns the series and the number of rows that could not be parsed.
    """
    if not os.path.isfile(path):
        raise ValueError(f'Series file not found: {path}')
    with open(path, 'r', encoding='utf-8-sig', newline='') as handle:
        reader = csv.DictReader(handle)
        fields = [f.strip() for f in (reader.fieldnames or [])]
        if date_column not in fields or column not in fields:
            found = ', '.join(fields) if fields else '(none)'
            raise ValueError(f'Missing column(s) in {path}: need [{date_column}, {column}], found [{found}]')
        points: List[DataPoint] = []
        skipped = 0
        for raw_row in reader:
            row = {str(k).strip(): v for k, v in raw_row.items() if k is not None}
            point = parse_row(row, column, date_column, date_format)
            if point is None:
                skipped += 1
                continue
            points.append(point)
    points.sort(key=lambda p: p.date)
    return points, skipped
