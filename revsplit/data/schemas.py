"""
Row, extraction-result and report schemas shared across the pipeline.
"""
from __future__ import annotations

import datetime as dt
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Iterator, NamedTuple, Optional

from revsplit.config import (
    DO_DATE_COL, DO_TEAM_COL, DO_AMOUNT_COL, DO_PROGRAM_COL,
    PARTNER_A, PARTNER_B,
)

if TYPE_CHECKING:
    from revsplit.data.reader import Workbook

ZERO = Decimal("0")

ProgramTotals = dict[str, Decimal]
TeamPrograms = dict[str, ProgramTotals]


class SourceKind(str, Enum):
    DI = "DI"
    DO = "DO"
    UNRECOGNIZED = "unrecognized"


class DoColumns(NamedTuple):
    """Positional layout of the DO ledger (0-indexed columns)."""
    date: int = DO_DATE_COL
    team: int = DO_TEAM_COL
    amount: int = DO_AMOUNT_COL
    program: int = DO_PROGRAM_COL


@dataclass(frozen=True)
class RevenueRow:
    team: str
    program: str
    amount: Decimal
    date: Optional[dt.date] = None


@dataclass
class SkipCounts:
    """Rows dropped during extraction, by reason."""
    no_date: int = 0
    no_team: int = 0
    no_amount: int = 0

    @property
    def total(self) -> int:
        return self.no_date + self.no_team + self.no_amount


@dataclass
class ExtractResult:
    rows: list[RevenueRow]
    skipped: SkipCounts = field(default_factory=SkipCounts)
    sheet: str = ""

    def rows_by_month(self) -> dict[int, int]:
        """Row counts keyed by MonthKey (dated rows only)."""
        counts = Counter(
            r.date.year * 100 + r.date.month for r in self.rows if r.date is not None
        )
        return dict(sorted(counts.items()))


@dataclass(frozen=True)
class MonthInfo:
    display_name: str
    month_key: int   # year*100 + month, 0 = unknown

    @property
    def is_unknown(self) -> bool:
        return self.month_key == 0


@dataclass(frozen=True)
class Actuals:
    """Partner-scoped summary totals. Derived totals are computed, never stored."""
    di_blackfin: Decimal = ZERO
    di_mizar: Decimal = ZERO
    do_blackfin: Decimal = ZERO
    do_mizar: Decimal = ZERO

    @property
    def di_total(self) -> Decimal:
        return self.di_blackfin + self.di_mizar

    @property
    def do_total(self) -> Decimal:
        return self.do_blackfin + self.do_mizar

    @property
    def grand_total(self) -> Decimal:
        return self.di_total + self.do_total

    def as_dict(self) -> dict[str, Decimal]:
        return {
            "di_blackfin": self.di_blackfin,
            "di_mizar": self.di_mizar,
            "do_blackfin": self.do_blackfin,
            "do_mizar": self.do_mizar,
            "di_total": self.di_total,
            "do_total": self.do_total,
            "grand_total": self.grand_total,
        }


@dataclass
class MonthlyReport:
    """One DI file reconciled against the DO rows of its inferred month."""
    month: str
    month_key: int
    filename: str
    actual: Actuals
    di_programs: TeamPrograms = field(default_factory=dict)
    do_programs: TeamPrograms = field(default_factory=dict)
    di_row_count: int = 0
    do_row_count: int = 0

    @property
    def di_blackfin_programs(self) -> ProgramTotals:
        return self.di_programs.get(PARTNER_A, {})

    @property
    def di_mizar_programs(self) -> ProgramTotals:
        return self.di_programs.get(PARTNER_B, {})

    @property
    def do_blackfin_programs(self) -> ProgramTotals:
        return self.do_programs.get(PARTNER_A, {})

    @property
    def do_mizar_programs(self) -> ProgramTotals:
        return self.do_programs.get(PARTNER_B, {})

    def breakdowns(self) -> Iterator[tuple[str, str, ProgramTotals]]:
        """Yield (category, partner, programs) in report order: DI then DO, partner A then B."""
        yield "DI", PARTNER_A, self.di_blackfin_programs
        yield "DI", PARTNER_B, self.di_mizar_programs
        yield "DO", PARTNER_A, self.do_blackfin_programs
        yield "DO", PARTNER_B, self.do_mizar_programs

    @property
    def other_teams(self) -> list[str]:
        """Team labels present in the data that are not one of the two partners."""
        teams = set(self.di_programs) | set(self.do_programs)
        return sorted(teams - {PARTNER_A, PARTNER_B})


@dataclass
class SourceFile:
    workbook: Workbook
    filename: str


@dataclass
class UploadStatus:
    """Triage outcome for one uploaded file."""
    name: str
    kind: SourceKind = SourceKind.UNRECOGNIZED
    status: str = "unknown"          # ready | unknown | error
    error: Optional[str] = None
    workbook: Optional[Workbook] = None

    @property
    def is_ready(self) -> bool:
        return self.status == "ready"
