"""
Fatal pipeline errors. Row-level data gaps never raise; they are counted.
"""
from __future__ import annotations


class SplitError(ValueError):
    """Base class for errors that abort a pipeline run."""


class SourceFileError(SplitError):
    """A single uploaded workbook cannot be processed (missing sheet/column, empty sheet)."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(f"{filename}: {message}")
        self.filename = filename
        self.reason = message


class NoDIFilesError(SplitError):
    def __init__(self) -> None:
        super().__init__("No DI files detected. Upload files with TOTAL DI / SUMMARY sheets.")


class EmptyResultError(SplitError):
    def __init__(self) -> None:
        super().__init__("No data found in uploaded files.")
