"""
Batch pipeline — upload triage, DO month bucketing, one report per DI file.

Reading bytes is the caller's business (the only I/O); everything here is
synchronous and deterministic. Any fatal error in a DI file aborts the batch.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from revsplit.config import ACCEPTED_EXTENSIONS, REPORTING_YEAR
from revsplit.data.classify import classify, is_accepted_filename
from revsplit.data.dates import month_key
from revsplit.data.reader import load_workbook
from revsplit.data.schemas import MonthlyReport, RevenueRow, SourceFile, SourceKind, UploadStatus
from revsplit.errors import EmptyResultError, NoDIFilesError, SourceFileError, SplitError
from revsplit.analytics.aggregate import build_report
from revsplit.extract.direct_import import extract_di
from revsplit.extract.domestic import extract_do
from revsplit.extract.month import infer_month


# ---------------------------------------------------------------------------
# Upload triage
# ---------------------------------------------------------------------------

def classify_uploads(uploads: Iterable[tuple[str, bytes]]) -> list[UploadStatus]:
    """Parse and classify (filename, bytes) uploads.

    Files without a spreadsheet extension are dropped before parsing. A file
    that fails to parse or isn't recognized is reported, not fatal.
    """
    accepted = [(name, data) for name, data in uploads if is_accepted_filename(name)]
    if not accepted:
        raise SplitError(f"Please upload Excel files ({', '.join(ACCEPTED_EXTENSIONS)})")

    statuses: list[UploadStatus] = []
    for name, data in accepted:
        try:
            wb = load_workbook(data, name)
        except SourceFileError as exc:
            statuses.append(UploadStatus(name=name, status="error", error=exc.reason))
            print(f"  {name}: error — {exc.reason}")
            continue
        kind = classify(wb)
        status = "unknown" if kind is SourceKind.UNRECOGNIZED else "ready"
        statuses.append(UploadStatus(name=name, kind=kind, status=status, workbook=wb))
        print(f"  {name}: {kind.value} ({status})")
    return statuses


def split_sources(statuses: list[UploadStatus]) -> tuple[list[SourceFile], SourceFile | None]:
    """Every ready DI upload, plus the first ready DO upload."""
    di_files = [
        SourceFile(s.workbook, s.name) for s in statuses
        if s.is_ready and s.kind is SourceKind.DI
    ]
    do_file = next(
        (SourceFile(s.workbook, s.name) for s in statuses if s.is_ready and s.kind is SourceKind.DO),
        None,
    )
    return di_files, do_file


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def group_by_month(rows: Iterable[RevenueRow]) -> dict[int, list[RevenueRow]]:
    """Bucket dated rows by MonthKey."""
    buckets: dict[int, list[RevenueRow]] = defaultdict(list)
    for r in rows:
        if r.date is not None:
            buckets[month_key(r.date)].append(r)
    return dict(buckets)


def run_pipeline(
    di_files: list[SourceFile],
    do_file: SourceFile | None,
    reporting_year: int = REPORTING_YEAR,
) -> list[MonthlyReport]:
    """One MonthlyReport per DI file, sorted by month (unknown month first)."""
    if not di_files:
        raise NoDIFilesError()

    do_rows: list[RevenueRow] = []
    if do_file is not None:
        do_rows = extract_do(do_file.workbook, do_file.filename, reporting_year).rows
    do_by_month = group_by_month(do_rows)

    results: list[MonthlyReport] = []
    for src in di_files:
        di = extract_di(src.workbook, src.filename)
        month = infer_month(src.workbook, src.filename)
        month_rows = do_by_month.get(month.month_key, [])
        report = build_report(di.rows, month_rows, month, src.filename)
        results.append(report)
        print(f"  {src.filename} → {month.display_name}: "
              f"DI {report.di_row_count:,} rows, DO {report.do_row_count:,} rows, "
              f"grand total ${report.actual.grand_total:,.2f}")

    # Unreachable while each DI file yields exactly one report
    if not results:
        raise EmptyResultError()

    results.sort(key=lambda r: r.month_key)
    return results


def process_uploads(
    uploads: Iterable[tuple[str, bytes]],
    reporting_year: int = REPORTING_YEAR,
) -> tuple[list[UploadStatus], list[MonthlyReport]]:
    """Triage raw uploads and run the pipeline over the usable ones."""
    statuses = classify_uploads(uploads)
    di_files, do_file = split_sources(statuses)
    return statuses, run_pipeline(di_files, do_file, reporting_year)
