"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str
    reporting_year: int


class UploadStatusResponse(BaseModel):
    name: str
    kind: str        # "DI" | "DO" | "unrecognized"
    status: str      # "ready" | "unknown" | "error"
    error: Optional[str] = None


class MonthlyReportResponse(BaseModel):
    month: str
    month_key: int
    filename: str
    actual: dict[str, float]
    di_blackfin_programs: dict[str, float]
    di_mizar_programs: dict[str, float]
    do_blackfin_programs: dict[str, float]
    do_mizar_programs: dict[str, float]
    other_teams: list[str]
    di_row_count: int
    do_row_count: int


class SplitResponse(BaseModel):
    files: list[UploadStatusResponse]
    rejected: list[str]
    months: list[MonthlyReportResponse]
    totals: dict[str, float]
    detail: list[dict[str, Any]]
