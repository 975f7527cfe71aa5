"""
Revenue Split — Configuration: paths, sheet markers, column aliases, partners.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with REVSPLIT_DATA_DIR env var for server deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("REVSPLIT_DATA_DIR", str(Path.home() / "Revenue Split")))
EXPORTS_FOLDER = _data_dir / "exports"

# ---------------------------------------------------------------------------
# Upload acceptance
# ---------------------------------------------------------------------------
# .xls goes through xlrd, everything else through openpyxl
ACCEPTED_EXTENSIONS = (".xlsx", ".xlsm", ".xls")

# ---------------------------------------------------------------------------
# Source classification (sheet names only, never content)
# ---------------------------------------------------------------------------
DI_SHEET = "TOTAL DI"
DI_MARKER_SHEETS = {"TOTAL DI", "SUMMARY"}
DO_MARKER = "Payment Details"

# The DO ledger carries one sheet per year; the reporting year's sheet wins
REPORTING_YEAR = int(os.environ.get("REVSPLIT_REPORTING_YEAR", "2025"))

# ---------------------------------------------------------------------------
# DI header aliases (matched case-insensitively after trimming)
# ---------------------------------------------------------------------------
DI_TEAM_HEADERS = ("Team",)
DI_PROGRAM_HEADERS = ("Program",)
DI_PAID_HEADERS = ("Paid Per Item",)
DI_NET_HEADERS = ("Payment Amount", "Discount Net Amount")
DI_DATE_HEADERS = ("Payment Date", "Discount Start Date")

# ---------------------------------------------------------------------------
# DO ledger layout — fixed positions, columns A..AH
#   C  = Payment Date (only on the first row of each payment block)
#   AB = Team
#   AG = Paid Per Item
#   AH = Program
# ---------------------------------------------------------------------------
DO_DATE_COL = 2
DO_TEAM_COL = 27
DO_AMOUNT_COL = 32
DO_PROGRAM_COL = 33

# Ledger sheets report 16K+ used columns; never scan past AH
DO_MAX_COLS = 34

# ---------------------------------------------------------------------------
# Partners — only these two roll up into the summary totals
# ---------------------------------------------------------------------------
PARTNER_A = "Blackfin"
PARTNER_B = "Mizar"
PARTNERS = (PARTNER_A, PARTNER_B)

UNKNOWN_PROGRAM = "UNKNOWN"

# ---------------------------------------------------------------------------
# Export defaults
# ---------------------------------------------------------------------------
CSV_FILENAME = "revenue-split.csv"
XLSX_FILENAME = "revenue-split.xlsx"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
