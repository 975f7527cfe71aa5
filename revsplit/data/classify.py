"""
Source classification by sheet name, and upload filename acceptance.
"""
from __future__ import annotations

from revsplit.config import ACCEPTED_EXTENSIONS, DI_MARKER_SHEETS, DO_MARKER
from revsplit.data.reader import Workbook
from revsplit.data.schemas import SourceKind


def classify(workbook: Workbook) -> SourceKind:
    """DI if any trimmed sheet name is a DI marker, DO if any contains the ledger
    marker, otherwise UNRECOGNIZED. Sheet contents are never inspected."""
    names = [n.strip() for n in workbook.sheet_names]
    if any(n in DI_MARKER_SHEETS for n in names):
        return SourceKind.DI
    if any(DO_MARKER in n for n in names):
        return SourceKind.DO
    return SourceKind.UNRECOGNIZED


def is_accepted_filename(name: str) -> bool:
    return name.lower().endswith(ACCEPTED_EXTENSIONS)
