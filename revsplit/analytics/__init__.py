"""Aggregation, reconciliation and the batch pipeline."""
from .aggregate import aggregate, build_report, partner_total
from .pipeline import run_pipeline, group_by_month, classify_uploads, split_sources, process_uploads
