"""
Aggregation & reconciliation — team/program sums and the per-month report.

Sums stay exact (Decimal) here; rounding happens only when rendering.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from revsplit.config import PARTNER_A, PARTNER_B
from revsplit.data.schemas import (
    ZERO, Actuals, MonthInfo, MonthlyReport, RevenueRow, TeamPrograms,
)


def aggregate(rows: Iterable[RevenueRow]) -> TeamPrograms:
    """team -> program -> summed amount."""
    result: TeamPrograms = {}
    for r in rows:
        programs = result.setdefault(r.team, {})
        programs[r.program] = programs.get(r.program, ZERO) + r.amount
    return result


def partner_total(agg: TeamPrograms, team: str) -> Decimal:
    return sum(agg.get(team, {}).values(), ZERO)


def build_report(
    di_rows: list[RevenueRow],
    do_rows: list[RevenueRow],
    month: MonthInfo,
    filename: str,
) -> MonthlyReport:
    """Reconcile one DI file with the DO rows of its month.

    Breakdowns keep every team; summary totals only count the two partners.
    """
    di_agg = aggregate(di_rows)
    do_agg = aggregate(do_rows)

    actual = Actuals(
        di_blackfin=partner_total(di_agg, PARTNER_A),
        di_mizar=partner_total(di_agg, PARTNER_B),
        do_blackfin=partner_total(do_agg, PARTNER_A),
        do_mizar=partner_total(do_agg, PARTNER_B),
    )
    return MonthlyReport(
        month=month.display_name,
        month_key=month.month_key,
        filename=filename,
        actual=actual,
        di_programs=di_agg,
        do_programs=do_agg,
        di_row_count=len(di_rows),
        do_row_count=len(do_rows),
    )
