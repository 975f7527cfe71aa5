"""
Tabular reader — workbook abstraction over openpyxl (xlrd for .xls), raw cell grids, header lookup.
"""
from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Optional

import openpyxl
import xlrd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError
from xlrd.xldate import XLDateError

from revsplit.errors import SourceFileError

Grid = list[list[Any]]


class Workbook:
    """Read-only, ordered set of named sheets.

    Backed either by an openpyxl workbook (uploads) or by in-memory grids
    (tests, callers that already hold parsed data). Grids are cached per
    (sheet, column cap) since month inference re-reads the DI sheet.
    """

    def __init__(self, sheet_names: list[str], book=None, grids: dict[str, Grid] | None = None) -> None:
        self.sheet_names = list(sheet_names)
        self._book = book
        self._grids = grids or {}
        self._cache: dict[tuple[str, Optional[int]], Grid] = {}

    @classmethod
    def from_grids(cls, grids: dict[str, Iterable[Iterable[Any]]]) -> "Workbook":
        materialized = {name: [list(r) for r in rows] for name, rows in grids.items()}
        return cls(list(materialized), grids=materialized)

    # ------------------------------------------------------------------
    # Sheet access
    # ------------------------------------------------------------------

    def find_sheet(self, name: str) -> str | None:
        """Actual sheet name whose trimmed form equals name."""
        return next((s for s in self.sheet_names if s.strip() == name), None)

    def grid(self, name: str, max_cols: int | None = None) -> Grid:
        """Raw cell values of a sheet, row-major. max_cols caps the scanned width."""
        if name not in self.sheet_names:
            raise KeyError(name)
        key = (name, max_cols)
        if key not in self._cache:
            self._cache[key] = self._read(name, max_cols)
        return self._cache[key]

    def _read(self, name: str, max_cols: int | None) -> Grid:
        if self._book is None:
            rows = self._grids[name]
            if max_cols is None:
                return [list(r) for r in rows]
            return [list(r[:max_cols]) for r in rows]

        ws = self._book[name]
        return [list(r) for r in ws.iter_rows(values_only=True, max_col=max_cols)]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_workbook(source: bytes | str | Path | BinaryIO, filename: str | None = None) -> Workbook:
    """Parse workbook bytes (or a path / file object) into a Workbook.

    Cells come back as cached values; date-formatted cells arrive as datetimes.
    Legacy .xls files are read with xlrd, everything else with openpyxl.
    """
    if filename is None:
        filename = Path(source).name if isinstance(source, (str, Path)) else "upload"
    if Path(filename).suffix.lower() == ".xls":
        return _load_xls(source, filename)
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    try:
        book = openpyxl.load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise SourceFileError(filename, f"Failed to parse workbook: {exc}") from exc
    return Workbook(book.sheetnames, book=book)


def _load_xls(source: bytes | str | Path | BinaryIO, filename: str) -> Workbook:
    try:
        if isinstance(source, (str, Path)):
            book = xlrd.open_workbook(str(source))
        else:
            data = source if isinstance(source, bytes) else source.read()
            book = xlrd.open_workbook(file_contents=data)
    except (xlrd.XLRDError, CompDocError, OSError, ValueError) as exc:
        raise SourceFileError(filename, f"Failed to parse workbook: {exc}") from exc
    return Workbook.from_grids(xls_grids(book))


def xls_grids(book) -> dict[str, Grid]:
    """Materialize every sheet of an xlrd book as raw cell grids, in sheet order."""
    grids: dict[str, Grid] = {}
    for name in book.sheet_names():
        sheet = book.sheet_by_name(name)
        grids[name] = [
            [_xls_value(c, book.datemode) for c in sheet.row(i)]
            for i in range(sheet.nrows)
        ]
    return grids


def _xls_value(c, datemode: int):
    """xlrd cell -> the value openpyxl would have produced for it."""
    if c.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if c.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(c.value)
    if c.ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate_as_datetime(c.value, datemode)
        except XLDateError:
            return None
    return c.value


# ---------------------------------------------------------------------------
# Header lookup
# ---------------------------------------------------------------------------

def _label(value) -> str:
    return str(value).strip().lower()


def header_index(header_row: Iterable[Any]) -> dict[str, int]:
    """Map normalized header label -> first column index carrying it."""
    index: dict[str, int] = {}
    for i, h in enumerate(header_row):
        if h is None:
            continue
        index.setdefault(_label(h), i)
    return index


def resolve_column(headers: Iterable[Any] | dict[str, int], *names: str) -> int | None:
    """Index of the leftmost header matching any alias (case/whitespace-insensitive).

    headers is a header row or a prebuilt header_index(). None when nothing matches.
    """
    index = headers if isinstance(headers, dict) else header_index(headers)
    hits = [index[k] for k in map(_label, names) if k in index]
    return min(hits) if hits else None


def cell(row: list[Any] | None, idx: int | None):
    """Cell value or None when the row is short or the column is unresolved."""
    if row is None or idx is None or idx >= len(row):
        return None
    return row[idx]


def text(value) -> str | None:
    """Trimmed string form of a cell, None when blank."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None
