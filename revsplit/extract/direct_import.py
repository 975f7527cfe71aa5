"""
DI extractor — the TOTAL DI sheet of a monthly settlement workbook.

Columns are found by header label. Team is mandatory; Program is optional;
the amount comes from "Paid Per Item", falling back to the net-amount column
when that cell is empty.
"""
from __future__ import annotations

from revsplit.config import (
    DI_SHEET, DI_TEAM_HEADERS, DI_PROGRAM_HEADERS, DI_PAID_HEADERS, DI_NET_HEADERS,
    UNKNOWN_PROGRAM,
)
from revsplit.data.amounts import to_amount
from revsplit.data.reader import Grid, Workbook, cell, header_index, resolve_column, text
from revsplit.data.schemas import ExtractResult, RevenueRow, SkipCounts
from revsplit.errors import SourceFileError


def read_di_rows(grid: Grid, source_label: str) -> ExtractResult:
    """Extract (team, program, amount) rows from a TOTAL DI grid.

    Raises SourceFileError for an empty sheet or a missing Team column.
    """
    if len(grid) < 2:
        raise SourceFileError(source_label, f"{DI_SHEET} sheet is empty")

    headers = grid[0]
    index = header_index(headers)
    team_col = resolve_column(index, *DI_TEAM_HEADERS)
    prog_col = resolve_column(index, *DI_PROGRAM_HEADERS)
    paid_col = resolve_column(index, *DI_PAID_HEADERS)
    net_col = resolve_column(index, *DI_NET_HEADERS)

    if team_col is None:
        labels = ", ".join("" if h is None else str(h) for h in headers)
        raise SourceFileError(source_label, f"No 'Team' column in {DI_SHEET} headers: {labels}")

    rows: list[RevenueRow] = []
    skipped = SkipCounts()
    for rv in grid[1:]:
        if not rv or all(v is None for v in rv[:5]):
            continue

        raw = cell(rv, paid_col)
        if raw is None:
            raw = cell(rv, net_col)
        amount = to_amount(raw)
        if amount is None:
            skipped.no_amount += 1
            continue

        team = text(cell(rv, team_col))
        if team is None:
            # Includes TOTAL / SUBTOTAL / partner-name label rows
            skipped.no_team += 1
            continue

        program = text(cell(rv, prog_col)) or UNKNOWN_PROGRAM
        rows.append(RevenueRow(team=team, program=program, amount=amount))

    return ExtractResult(rows=rows, skipped=skipped)


def extract_di(workbook: Workbook, source_label: str) -> ExtractResult:
    """Read the TOTAL DI sheet of one settlement workbook."""
    sheet = workbook.find_sheet(DI_SHEET)
    if sheet is None:
        raise SourceFileError(source_label, f'No "{DI_SHEET}" sheet found')

    result = read_di_rows(workbook.grid(sheet), source_label)
    result.sheet = sheet
    s = result.skipped
    print(f"  [DI] {source_label}: {len(result.rows):,} rows | noTeam: {s.no_team} | noAmount: {s.no_amount}")
    return result
