"""
Split endpoints: upload workbooks -> monthly report JSON, or a CSV/XLSX download.

Only reading the upload bodies is awaited; parsing, reconciliation and export
rendering run in the threadpool.
"""
from __future__ import annotations

import io
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from revsplit.config import ACCEPTED_EXTENSIONS, CSV_FILENAME, XLSX_FILENAME, XLSX_MEDIA_TYPE
from revsplit.analytics.pipeline import process_uploads
from revsplit.data.classify import is_accepted_filename
from revsplit.data.schemas import MonthlyReport, UploadStatus
from revsplit.errors import SplitError
from revsplit.api.response_models import SplitResponse, UploadStatusResponse
from revsplit.reports.split_report import generate_json, detail_frame, to_delimited_text, to_spreadsheet

router = APIRouter(prefix="/api", tags=["split"])


async def _read_uploads(files: list[UploadFile]) -> tuple[list[tuple[str, bytes]], list[str]]:
    """Read accepted uploads into memory; return (uploads, rejected filenames)."""
    uploads, rejected = [], []
    for f in files:
        if not f.filename:
            raise HTTPException(400, "Missing filename")
        if not is_accepted_filename(f.filename):
            rejected.append(f.filename)
            continue
        uploads.append((f.filename, await f.read()))
    if not uploads:
        raise HTTPException(
            400,
            f"Please upload Excel files ({', '.join(ACCEPTED_EXTENSIONS)}). Rejected: {', '.join(rejected)}",
        )
    return uploads, rejected


async def _run(uploads: list[tuple[str, bytes]]) -> tuple[list[UploadStatus], list[MonthlyReport]]:
    try:
        return await run_in_threadpool(process_uploads, uploads)
    except SplitError as exc:
        raise HTTPException(400, str(exc))


def _status_response(s: UploadStatus) -> UploadStatusResponse:
    return UploadStatusResponse(name=s.name, kind=s.kind.value, status=s.status, error=s.error)


def _report_data(
    reports: list[MonthlyReport],
    team: Optional[str],
    category: Optional[str],
    sort_by: Optional[str],
    ascending: bool,
) -> dict:
    data = generate_json(reports)
    if team or category or sort_by:
        detail = detail_frame(reports, team=team, category=category, sort_by=sort_by, ascending=ascending)
        data["detail"] = [
            {**rec, "Amount": round(float(rec["Amount"]), 2)} for rec in detail.to_dict("records")
        ]
    return data


def _render_export(reports: list[MonthlyReport], fmt: str) -> tuple[bytes, str, str]:
    if fmt == "csv":
        return to_delimited_text(reports).encode("utf-8"), "text/csv", CSV_FILENAME
    return to_spreadsheet(reports), XLSX_MEDIA_TYPE, XLSX_FILENAME


@router.post("/split", response_model=SplitResponse)
async def split(
    files: list[UploadFile] = File(...),
    team: Optional[str] = Query(None, description="Detail filter: partner name"),
    category: Optional[str] = Query(None, description="Detail filter: DI|DO"),
    sort_by: Optional[str] = Query(None, description="month|category|team|program|amount"),
    ascending: bool = Query(True),
):
    """Classify uploaded workbooks and reconcile them into monthly reports."""
    uploads, rejected = await _read_uploads(files)
    statuses, reports = await _run(uploads)

    try:
        data = await run_in_threadpool(_report_data, reports, team, category, sort_by, ascending)
    except ValueError as exc:
        raise HTTPException(400, str(exc))

    return SplitResponse(
        files=[_status_response(s) for s in statuses],
        rejected=rejected,
        **data,
    )


@router.post("/split/export")
async def export_split(
    files: list[UploadFile] = File(...),
    fmt: str = Query("xlsx", description="csv|xlsx"),
):
    """Same input as /split, returned as a downloadable CSV or workbook."""
    if fmt not in ("csv", "xlsx"):
        raise HTTPException(400, f"Invalid fmt: {fmt}. Valid: csv, xlsx")
    uploads, _ = await _read_uploads(files)
    _, reports = await _run(uploads)

    content, media_type, filename = await run_in_threadpool(_render_export, reports, fmt)

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
