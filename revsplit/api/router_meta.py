"""
Meta endpoints: health.
"""
from __future__ import annotations

from fastapi import APIRouter

from revsplit import __version__
from revsplit.config import REPORTING_YEAR
from revsplit.api.response_models import HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", version=__version__, reporting_year=REPORTING_YEAR)
