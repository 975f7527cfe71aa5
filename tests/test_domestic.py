import datetime as dt
from decimal import Decimal

import pytest

from revsplit.data.reader import Workbook, load_workbook
from revsplit.data.schemas import DoColumns, RevenueRow
from revsplit.errors import SourceFileError
from revsplit.extract.domestic import extract_do, read_do_rows, resolve_row, select_do_sheet

D1 = dt.date(2024, 10, 7)
D2 = dt.date(2024, 11, 2)


def test_dates_fill_down_until_next_date(do_row):
    grid = [
        do_row(),
        do_row(date=D1, team="Blackfin", amount=1, program="A"),
        do_row(team="Blackfin", amount=2, program="B"),
        do_row(team="Mizar", amount=3, program="C"),
        do_row(date=D2, team="Mizar", amount=4, program="D"),
    ]
    rows = read_do_rows(grid).rows
    assert [r.date for r in rows] == [D1, D1, D1, D2]


def test_blank_program_defaults_to_unknown(do_row):
    grid = [do_row(), do_row(date=D1, team="Blackfin", amount=200, program="  ")]
    assert read_do_rows(grid).rows == [RevenueRow("Blackfin", "UNKNOWN", Decimal("200"), D1)]


def test_skip_reasons_are_counted(do_ledger, do_row):
    grid = [do_row(), do_row(team="Blackfin", amount=9)] + do_ledger[1:] + [
        do_row(team="Mizar", amount=None),
        do_row(team="Mizar", amount="n/a"),
    ]
    result = read_do_rows(grid)
    assert len(result.rows) == 3
    assert result.skipped.no_date == 1
    assert result.skipped.no_team == 1
    assert result.skipped.no_amount == 2


def test_undated_skipped_rows_still_carry_date_forward(do_row):
    # a dated row without a team still starts a new block
    grid = [
        do_row(),
        do_row(date=D1, team="Blackfin", amount=1),
        do_row(date=D2),
        do_row(team="Blackfin", amount=5),
    ]
    rows = read_do_rows(grid).rows
    assert [r.date for r in rows] == [D1, D2]


def test_resolve_row_is_a_pure_step(do_row):
    last, outcome = resolve_row(None, do_row(team="Blackfin", amount=1))
    assert last is None and outcome == "no_date"

    last, outcome = resolve_row(D1, do_row(team="Blackfin", amount=1))
    assert last == D1
    assert outcome == RevenueRow("Blackfin", "UNKNOWN", Decimal("1"), D1)


def test_custom_column_schema():
    grid = [["Date", "Team", "Paid", "Program"], [D1, "Mizar", 7, "Gold"]]
    rows = read_do_rows(grid, DoColumns(date=0, team=1, amount=2, program=3)).rows
    assert rows == [RevenueRow("Mizar", "Gold", Decimal("7"), D1)]


@pytest.mark.parametrize("names,year,expected", [
    (["2024_Payment Details", "2025_Payment Details"], 2025, "2025_Payment Details"),
    (["2024_Payment Details", "2025_Payment Details"], 2024, "2024_Payment Details"),
    (["Notes", "2023_Payment Details"], 2025, "2023_Payment Details"),
    (["Notes"], 2025, None),
])
def test_select_do_sheet(names, year, expected):
    assert select_do_sheet(names, year) == expected


def test_extract_do_missing_sheet_is_fatal():
    with pytest.raises(SourceFileError, match="Payment Details"):
        extract_do(Workbook.from_grids({"Sheet1": [[1], [2]]}), "ledger.xlsx")


def test_extract_do_empty_sheet_is_fatal(do_row):
    with pytest.raises(SourceFileError, match="empty"):
        extract_do(Workbook.from_grids({"Payment Details": [do_row()]}), "ledger.xlsx")


def test_extract_do_from_wide_xlsx(do_row, xlsx_bytes):
    # trailing junk far beyond column AH must not be read
    wide = [row + [None] * 20 + ["junk"] for row in [
        do_row(date="Payment Date", team="Team", amount="Paid", program="Program"),
        do_row(date=D1, team="Blackfin", amount=12.5, program="Gold"),
        do_row(team="Mizar", amount=3),
    ]]
    wb = load_workbook(xlsx_bytes({"2025_Payment Details": wide}), "ledger.xlsx")
    result = extract_do(wb, "ledger.xlsx", reporting_year=2025)

    assert result.sheet == "2025_Payment Details"
    assert all(len(r) == 34 for r in wb.grid(result.sheet, max_cols=34))
    assert result.rows == [
        RevenueRow("Blackfin", "Gold", Decimal("12.5"), D1),
        RevenueRow("Mizar", "UNKNOWN", Decimal("3"), D1),
    ]
    assert result.rows_by_month() == {202410: 2}
