"""
Best-effort date normalization for spreadsheet cells, plus MonthKey helpers.
"""
from __future__ import annotations

import datetime as dt
import math
import numbers
import warnings

import pandas as pd
from openpyxl.utils.datetime import from_excel


def normalize_date(value) -> dt.date | None:
    """Return a calendar date for a cell value, or None if it isn't one.

    Accepts date/datetime objects, spreadsheet serial numbers (the fractional
    time-of-day part is dropped) and date-like strings. Never raises.
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        return _from_serial(float(value))
    if isinstance(value, str):
        return _from_text(value)
    return None


def _from_serial(serial: float) -> dt.date | None:
    if not math.isfinite(serial) or serial < 1:
        return None
    try:
        return from_excel(math.floor(serial)).date()
    except (OverflowError, ValueError):
        return None


def _from_text(text: str) -> dt.date | None:
    s = text.strip()
    if not s:
        return None
    with warnings.catch_warnings():
        # "Could not infer format" noise on free-form strings
        warnings.simplefilter("ignore")
        try:
            ts = pd.to_datetime(s, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if pd.isna(ts):
        return None
    return ts.date()


# ---------------------------------------------------------------------------
# MonthKey: year*100 + month, 0 = unknown
# ---------------------------------------------------------------------------

def month_key(date: dt.date) -> int:
    return date.year * 100 + date.month


def month_name(key: int) -> str:
    """Display name for a MonthKey, e.g. 202410 -> "October 2024"."""
    year, month = divmod(key, 100)
    if year < 1 or not 1 <= month <= 12:
        return "Unknown"
    return f"{dt.date(year, month, 1):%B %Y}"
