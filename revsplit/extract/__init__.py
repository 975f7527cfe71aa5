"""Source-specific row extraction (DI settlement, DO ledger) and DI month inference."""
from .direct_import import extract_di, read_di_rows
from .domestic import extract_do, read_do_rows, select_do_sheet
from .month import infer_month, vote_month, month_from_filename
