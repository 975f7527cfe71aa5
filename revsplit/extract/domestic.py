"""
DO extractor — the rolling Domestic Payments ledger.

The ledger has no usable header row for our purposes, so columns are read by
position (see DoColumns). The payment date appears only on the first row of
each payment block and is filled down to the rows beneath it.
"""
from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Any, Union

from revsplit.config import DO_MARKER, DO_MAX_COLS, REPORTING_YEAR, UNKNOWN_PROGRAM
from revsplit.data.amounts import to_amount
from revsplit.data.dates import normalize_date
from revsplit.data.reader import Grid, Workbook, cell, text
from revsplit.data.schemas import DoColumns, ExtractResult, RevenueRow, SkipCounts
from revsplit.errors import SourceFileError

DEFAULT_COLUMNS = DoColumns()

# Either a kept row or the SkipCounts field naming why it was dropped
RowOutcome = Union[RevenueRow, str]


def select_do_sheet(sheet_names: list[str], reporting_year: int = REPORTING_YEAR) -> str | None:
    """Prefer the reporting year's ledger sheet, else any ledger sheet."""
    preferred = f"{reporting_year}_{DO_MARKER}"
    return (
        next((n for n in sheet_names if preferred in n), None)
        or next((n for n in sheet_names if DO_MARKER in n), None)
    )


def resolve_row(
    last_date: dt.date | None,
    rv: list[Any],
    columns: DoColumns = DEFAULT_COLUMNS,
) -> tuple[dt.date | None, RowOutcome]:
    """One fill-down step: returns the carried date and this row's outcome."""
    last_date = normalize_date(cell(rv, columns.date)) or last_date

    team = text(cell(rv, columns.team))
    raw = cell(rv, columns.amount)

    if last_date is None:
        return last_date, "no_date"
    if team is None:
        return last_date, "no_team"
    amount = to_amount(raw)
    if amount is None:
        return last_date, "no_amount"

    program = text(cell(rv, columns.program)) or UNKNOWN_PROGRAM
    return last_date, RevenueRow(team=team, program=program, amount=amount, date=last_date)


def read_do_rows(grid: Grid, columns: DoColumns = DEFAULT_COLUMNS) -> ExtractResult:
    """Fold resolve_row over the data rows of a ledger grid (row 0 is the header)."""
    rows: list[RevenueRow] = []
    reasons: Counter[str] = Counter()
    last_date = None
    for rv in grid[1:]:
        if not rv or all(v is None for v in rv):
            continue
        last_date, outcome = resolve_row(last_date, rv, columns)
        if isinstance(outcome, RevenueRow):
            rows.append(outcome)
        else:
            reasons[outcome] += 1
    return ExtractResult(rows=rows, skipped=SkipCounts(**reasons))


def extract_do(
    workbook: Workbook,
    source_label: str = "Domestic Payments",
    reporting_year: int = REPORTING_YEAR,
) -> ExtractResult:
    """Read the ledger sheet; every returned row carries a (filled-down) date."""
    sheet = select_do_sheet(workbook.sheet_names, reporting_year)
    if sheet is None:
        raise SourceFileError(source_label, f"No {DO_MARKER} sheet found")

    grid = workbook.grid(sheet, max_cols=DO_MAX_COLS)
    if len(grid) < 2:
        raise SourceFileError(source_label, "Domestic Payments sheet is empty")
    print(f"  [DO] Sheet: {sheet} | Rows: {len(grid):,}")

    result = read_do_rows(grid)
    result.sheet = sheet
    s = result.skipped
    print(f"  [DO] Result: {len(result.rows):,} valid rows | noDate: {s.no_date} "
          f"| noTeam: {s.no_team} | noAmount: {s.no_amount}")
    if result.rows:
        print(f"  [DO] By month: {result.rows_by_month()}")
    return result
