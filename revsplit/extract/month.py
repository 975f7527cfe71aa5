"""
Month inference for DI workbooks.

A settlement workbook covers one accounting month. The month is the most
common month among the TOTAL DI payment dates; when the sheet has no usable
dates it comes from the filename ("Oct-Nov 2024.xlsx" -> October 2024, the
first month named). Otherwise the month is unknown (key 0).
"""
from __future__ import annotations

import datetime as dt
import re
from collections import Counter
from typing import Iterable

from revsplit.config import DI_SHEET, DI_DATE_HEADERS
from revsplit.data.dates import month_key, month_name, normalize_date
from revsplit.data.reader import Workbook, cell, resolve_column
from revsplit.data.schemas import MonthInfo

_MONTH_ABBR = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
# Not preceded by a letter, so "Summary" doesn't read as March
_MONTH_RE = re.compile(r"(?<![a-z])(" + "|".join(_MONTH_ABBR) + r")", re.IGNORECASE)
_YEAR_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")


def vote_month(dates: Iterable[dt.date]) -> int | None:
    """Most frequent MonthKey; ties go to the month seen first."""
    counts = Counter(month_key(d) for d in dates)
    if not counts:
        return None
    # most_common() keeps first-encountered order among equal counts
    return counts.most_common(1)[0][0]


def month_from_filename(filename: str) -> MonthInfo | None:
    m = _MONTH_RE.search(filename)
    y = _YEAR_RE.search(filename)
    if not (m and y):
        return None
    key = int(y.group(1)) * 100 + _MONTH_ABBR[m.group(1).lower()]
    return MonthInfo(month_name(key), key)


def _sheet_dates(workbook: Workbook) -> list[dt.date]:
    sheet = workbook.find_sheet(DI_SHEET)
    if sheet is None:
        return []
    grid = workbook.grid(sheet)
    if not grid:
        return []
    date_col = resolve_column(grid[0], *DI_DATE_HEADERS)
    if date_col is None:
        return []
    parsed = (normalize_date(cell(rv, date_col)) for rv in grid[1:])
    return [d for d in parsed if d is not None]


def infer_month(workbook: Workbook, filename: str) -> MonthInfo:
    key = vote_month(_sheet_dates(workbook))
    if key is not None:
        return MonthInfo(month_name(key), key)
    return month_from_filename(filename) or MonthInfo(filename, 0)
