"""
Revenue split exports — Detail table, CSV text, Summary/Detail workbook, JSON.

Amounts are rounded to cents only here. Workbook cells keep full precision.
"""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pandas as pd

from revsplit.config import PARTNER_A, PARTNER_B
from revsplit.data.amounts import round_cents
from revsplit.data.schemas import ZERO, MonthlyReport
from revsplit.excel.writer import ExcelWriter


DETAIL_HEADERS = ["Month", "Category", "Team", "Program", "Amount"]

SUMMARY_COLS = [
    ("month", "text", "Month"),
    ("di_blackfin", "currency", f"{PARTNER_A} DI"),
    ("di_mizar", "currency", f"{PARTNER_B} DI"),
    ("do_blackfin", "currency", f"{PARTNER_A} DO"),
    ("do_mizar", "currency", f"{PARTNER_B} DO"),
    ("grand_total", "currency", "Grand Total"),
]

DETAIL_COLS = [
    ("Month", "text", "Month"),
    ("Category", "text", "Category"),
    ("Team", "text", "Team"),
    ("Program", "text", "Program"),
    ("Amount", "currency", "Amount"),
]

_ACTUAL_KEYS = ["di_blackfin", "di_mizar", "do_blackfin", "do_mizar", "di_total", "do_total", "grand_total"]


# ---------------------------------------------------------------------------
# Detail rows
# ---------------------------------------------------------------------------

def detail_records(reports: list[MonthlyReport]) -> list[dict]:
    """Flatten partner breakdowns: one record per (month, category, partner, program)."""
    records = []
    for r in reports:
        for category, team, programs in r.breakdowns():
            for program, amount in programs.items():
                records.append({
                    "Month": r.month,
                    "Category": category,
                    "Team": team,
                    "Program": program,
                    "Amount": amount,
                })
    return records


def detail_frame(
    reports: list[MonthlyReport],
    team: str | None = None,
    category: str | None = None,
    sort_by: str | None = None,
    ascending: bool = True,
) -> pd.DataFrame:
    """Detail table with optional team/category filters and a sort column."""
    df = pd.DataFrame(detail_records(reports), columns=DETAIL_HEADERS)
    if team:
        df = df[df["Team"] == team]
    if category:
        df = df[df["Category"] == category]
    if sort_by:
        col = sort_by.capitalize()
        if col not in DETAIL_HEADERS:
            raise ValueError(f"Cannot sort by '{sort_by}'. Valid: {[h.lower() for h in DETAIL_HEADERS]}")
        key = (lambda s: s.astype(float)) if col == "Amount" else (lambda s: s.astype(str).str.lower())
        df = df.sort_values(col, ascending=ascending, key=key, kind="stable")
    return df.reset_index(drop=True)


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def to_delimited_text(reports: list[MonthlyReport]) -> str:
    """Month,Category,Team,Program,Amount lines; amounts to exactly 2 places."""
    df = detail_frame(reports)
    df["Amount"] = df["Amount"].map(lambda a: f"{round_cents(a):.2f}")
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")


# ---------------------------------------------------------------------------
# Workbook
# ---------------------------------------------------------------------------

def summary_records(reports: list[MonthlyReport]) -> list[dict]:
    rows = []
    for r in reports:
        row = {"month": r.month}
        row.update({k: float(v) for k, v in r.actual.as_dict().items()})
        rows.append(row)
    return rows


def _partner_highlight(_idx: int, row: dict) -> str | None:
    team = row.get("Team")
    if team == PARTNER_A:
        return "blackfin"
    if team == PARTNER_B:
        return "mizar"
    return None


def _build_workbook(reports: list[MonthlyReport]) -> ExcelWriter:
    ew = ExcelWriter()

    ws = ew.add_sheet("Summary")
    ew.write_table(ws, 1, SUMMARY_COLS, summary_records(reports), show_total=len(reports) > 1)

    detail = detail_frame(reports)
    detail["Amount"] = detail["Amount"].astype(float)
    ws_d = ew.add_sheet("Detail")
    ew.write_table(ws_d, 1, DETAIL_COLS, detail, highlight_fn=_partner_highlight)
    return ew


def to_spreadsheet(reports: list[MonthlyReport]) -> bytes:
    """Summary + Detail workbook as .xlsx bytes."""
    return _build_workbook(reports).to_bytes()


def generate_excel(reports: list[MonthlyReport], output_path: str | Path) -> Path:
    return _build_workbook(reports).save(output_path)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def _money(amount: Decimal) -> float:
    return float(round_cents(amount))


def _programs_json(programs: dict[str, Decimal]) -> dict[str, float]:
    return {p: _money(a) for p, a in programs.items()}


def report_json(r: MonthlyReport) -> dict:
    return {
        "month": r.month,
        "month_key": r.month_key,
        "filename": r.filename,
        "actual": {k: _money(v) for k, v in r.actual.as_dict().items()},
        "di_blackfin_programs": _programs_json(r.di_blackfin_programs),
        "di_mizar_programs": _programs_json(r.di_mizar_programs),
        "do_blackfin_programs": _programs_json(r.do_blackfin_programs),
        "do_mizar_programs": _programs_json(r.do_mizar_programs),
        "other_teams": r.other_teams,
        "di_row_count": r.di_row_count,
        "do_row_count": r.do_row_count,
    }


def generate_json(reports: list[MonthlyReport]) -> dict:
    totals = {
        key: _money(sum((r.actual.as_dict()[key] for r in reports), ZERO))
        for key in _ACTUAL_KEYS
    }
    return {
        "months": [report_json(r) for r in reports],
        "totals": totals,
        "detail": [
            {**rec, "Amount": _money(rec["Amount"])} for rec in detail_records(reports)
        ],
    }
