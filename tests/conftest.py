# tests/conftest.py

import datetime as dt
import io

import openpyxl
import pytest
import xlrd
from openpyxl.utils.datetime import to_excel
from xlrd.sheet import Cell

from revsplit.config import DO_MAX_COLS
from revsplit.data.reader import Workbook
from revsplit.data.schemas import DoColumns, SourceFile

DI_HEADERS = ["Payment Date", "Team", "Program", "Paid Per Item", "Discount Net Amount"]


def _do_row(date=None, team=None, amount=None, program=None, width=DO_MAX_COLS):
    cols = DoColumns()
    row = [None] * width
    row[0] = "PAY"  # ledger reference column, never read
    row[cols.date] = date
    row[cols.team] = team
    row[cols.amount] = amount
    row[cols.program] = program
    return row


def _xlsx_bytes(sheets):
    """Real .xlsx bytes with one worksheet per {name: rows} entry."""
    wb = openpyxl.Workbook()
    first = True
    for name, rows in sheets.items():
        if first:
            ws = wb.active
            ws.title = name
            first = False
        else:
            ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


class _XlsSheet:
    def __init__(self, rows):
        width = max((len(r) for r in rows), default=0)
        self._rows = [r + [Cell(xlrd.XL_CELL_EMPTY, "")] * (width - len(r)) for r in rows]
        self.nrows = len(rows)

    def row(self, i):
        return self._rows[i]


class _XlsBook:
    """Stand-in for an xlrd Book (xlrd cannot write .xls files)."""

    datemode = 0

    def __init__(self, sheets):
        self._sheets = {name: _XlsSheet([[_xls_cell(v) for v in r] for r in rows]) for name, rows in sheets.items()}

    def sheet_names(self):
        return list(self._sheets)

    def sheet_by_name(self, name):
        return self._sheets[name]


def _xls_cell(value):
    if value is None:
        return Cell(xlrd.XL_CELL_EMPTY, "")
    if isinstance(value, bool):
        return Cell(xlrd.XL_CELL_BOOLEAN, int(value))
    if isinstance(value, (dt.date, dt.datetime)):
        return Cell(xlrd.XL_CELL_DATE, float(to_excel(value)))
    if isinstance(value, (int, float)):
        return Cell(xlrd.XL_CELL_NUMBER, float(value))
    return Cell(xlrd.XL_CELL_TEXT, value)


@pytest.fixture
def do_row():
    """Builds one DO ledger row with values at the fixed ledger positions."""
    return _do_row


@pytest.fixture
def xlsx_bytes():
    return _xlsx_bytes


@pytest.fixture
def xls_book():
    """Builds an xlrd-shaped book from {sheet name: rows}."""
    return _XlsBook


@pytest.fixture
def di_october():
    """TOTAL DI grid for October 2024 (one September straggler, one non-partner team)."""
    return [
        DI_HEADERS,
        [dt.date(2024, 10, 3), "Blackfin", "Gold", 100.25, None],
        [dt.date(2024, 10, 3), "Blackfin", "Silver", None, 50.5],
        [dt.date(2024, 10, 4), "Mizar", None, 200, None],
        [dt.date(2024, 9, 30), "Mizar", "Gold", 10, None],
        [None, None, "TOTAL", 360.75, None],
        [dt.date(2024, 10, 5), "Orca", "Gold", 999, None],
    ]


@pytest.fixture
def di_november_undated():
    """TOTAL DI grid with no date column; month must come from the filename."""
    return [
        ["Team", "Program", "Paid Per Item"],
        ["Blackfin", "Gold", 20],
    ]


@pytest.fixture
def do_ledger():
    header = _do_row(date="Payment Date", team="Team", amount="Paid Per Item", program="Program")
    return [
        header,
        _do_row(date=dt.date(2024, 10, 7), team="Blackfin", amount=300, program="Gold"),
        _do_row(team="Mizar", amount=75.5),
        _do_row(date=dt.date(2024, 11, 2), team="Blackfin", amount=40, program="Gold"),
        _do_row(amount=5),
    ]


@pytest.fixture
def sources(di_october, di_november_undated, do_ledger):
    """(di_files, do_file) for a two-month batch."""
    di_files = [
        SourceFile(Workbook.from_grids({"SUMMARY": [["x"]], "TOTAL DI": di_october}), "JPM Oct 2024.xlsx"),
        SourceFile(Workbook.from_grids({"TOTAL DI": di_november_undated}), "JPM Nov 2024.xlsx"),
    ]
    do_file = SourceFile(Workbook.from_grids({"2024_Payment Details": do_ledger}), "Domestic Payments.xlsx")
    return di_files, do_file
