"""Workbook reading, cell normalization, source classification and schemas."""
from .reader import Workbook, load_workbook, header_index, resolve_column
from .dates import normalize_date, month_key, month_name
from .amounts import to_amount
from .classify import classify, is_accepted_filename
from .schemas import RevenueRow, SkipCounts, ExtractResult, MonthInfo, MonthlyReport, SourceKind
