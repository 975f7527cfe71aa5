import datetime as dt

import pytest
import xlrd

from revsplit.data.reader import Workbook, cell, header_index, load_workbook, resolve_column, text, xls_grids
from revsplit.errors import SourceFileError


class TestResolveColumn:
    def test_case_and_whitespace_insensitive(self):
        headers = ["Date", "  TEAM ", " Paid Per Item "]
        assert resolve_column(headers, "Team") == 1
        assert resolve_column(headers, "paid per item") == 2

    def test_any_alias_leftmost_wins(self):
        headers = ["Discount Net Amount", "x", "Payment Amount"]
        assert resolve_column(headers, "Payment Amount", "Discount Net Amount") == 0

    def test_missing_column_is_none(self):
        assert resolve_column(["Team", None, 5], "Program") is None

    def test_accepts_prebuilt_index(self):
        index = header_index(["Team", "team", "Program"])
        assert index == {"team": 0, "program": 2}
        assert resolve_column(index, "TEAM") == 0


def test_cell_and_text_helpers():
    row = ["  Blackfin ", "", None]
    assert cell(row, 0) == "  Blackfin "
    assert cell(row, 10) is None
    assert cell(row, None) is None
    assert text(cell(row, 0)) == "Blackfin"
    assert text(cell(row, 1)) is None
    assert text(cell(row, 2)) is None


def test_from_grids_caps_columns():
    wb = Workbook.from_grids({"Sheet": [list(range(50)), list(range(50))]})
    assert wb.sheet_names == ["Sheet"]
    assert len(wb.grid("Sheet")[0]) == 50
    assert all(len(r) == 34 for r in wb.grid("Sheet", max_cols=34))


def test_find_sheet_matches_trimmed_name():
    wb = Workbook.from_grids({" TOTAL DI ": [["Team"]], "Other": []})
    assert wb.find_sheet("TOTAL DI") == " TOTAL DI "
    assert wb.find_sheet("SUMMARY") is None


def test_grid_unknown_sheet_raises_key_error():
    with pytest.raises(KeyError):
        Workbook.from_grids({"A": []}).grid("B")


def test_load_workbook_from_xlsx_bytes(xlsx_bytes):
    data = xlsx_bytes({
        "TOTAL DI": [["Payment Date", "Team"], [dt.date(2024, 10, 3), "Blackfin"]],
        "Wide": [[None] * 39 + ["far right"]],
    })
    wb = load_workbook(data, "JPM.xlsx")
    assert wb.sheet_names == ["TOTAL DI", "Wide"]

    grid = wb.grid("TOTAL DI")
    assert grid[0] == ["Payment Date", "Team"]
    assert isinstance(grid[1][0], dt.datetime)
    assert grid[1][0].date() == dt.date(2024, 10, 3)

    capped = wb.grid("Wide", max_cols=34)
    assert len(capped[0]) == 34
    assert "far right" not in capped[0]


def test_load_workbook_rejects_garbage():
    with pytest.raises(SourceFileError) as exc:
        load_workbook(b"not a spreadsheet", "broken.xlsx")
    assert exc.value.filename == "broken.xlsx"
    assert "Failed to parse" in str(exc.value)


def test_xls_grids_convert_cells(xls_book):
    book = xls_book({
        "TOTAL DI": [
            ["Payment Date", "Team", "Paid Per Item", "Flag"],
            [dt.date(2024, 10, 3), "Blackfin", 100.25, True],
            [None, "Mizar"],
        ],
        "Notes": [],
    })
    grids = xls_grids(book)
    assert list(grids) == ["TOTAL DI", "Notes"]
    assert grids["TOTAL DI"][1] == [dt.datetime(2024, 10, 3), "Blackfin", 100.25, True]
    assert grids["TOTAL DI"][2] == [None, "Mizar", None, None]
    assert grids["Notes"] == []


def test_load_workbook_reads_xls_with_xlrd(monkeypatch, xls_book):
    book = xls_book({"Sheet1": [["x"]], "TOTAL DI": [["Team"], ["Blackfin"]]})
    seen = {}

    def open_workbook(*args, **kwargs):
        seen.update(kwargs)
        return book

    monkeypatch.setattr(xlrd, "open_workbook", open_workbook)
    wb = load_workbook(b"legacy bytes", "JPM Oct 2024.XLS")
    assert seen == {"file_contents": b"legacy bytes"}
    assert wb.sheet_names == ["Sheet1", "TOTAL DI"]
    assert wb.grid("TOTAL DI") == [["Team"], ["Blackfin"]]


def test_load_workbook_rejects_garbage_xls():
    with pytest.raises(SourceFileError) as exc:
        load_workbook(b"not a spreadsheet", "broken.xls")
    assert exc.value.filename == "broken.xls"
    assert "Failed to parse" in str(exc.value)
