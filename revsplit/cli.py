#!/usr/bin/env python3
"""
Revenue Split CLI — reconcile DI settlement workbooks with the DO ledger.

USAGE:
  python -m revsplit.cli split "Oct-Nov 2024.xlsx" "Domestic Payments.xlsx"
  python -m revsplit.cli split *.xlsx --out ./exports          # CSV + XLSX into ./exports
  python -m revsplit.cli split *.xlsx --json                    # print report JSON
  python -m revsplit.cli split *.xlsx --year 2024               # prefer the 2024 ledger sheet

  python -m revsplit.cli serve                                  # Start API server
  python -m revsplit.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import contextlib
import json
import os
import sys
from datetime import datetime
from pathlib import Path

from revsplit.config import CSV_FILENAME, EXPORTS_FOLDER, REPORTING_YEAR, XLSX_FILENAME
from revsplit.analytics.pipeline import process_uploads
from revsplit.errors import SplitError
from revsplit.reports.split_report import generate_excel, generate_json, to_delimited_text


def _read_files(paths: list[str]) -> list[tuple[str, bytes]]:
    uploads = []
    for p in map(Path, paths):
        if not p.is_file():
            print(f"  File not found: '{p}'")
            continue
        uploads.append((p.name, p.read_bytes()))
    return uploads


def cmd_split(args) -> int:
    """Run the pipeline over local workbooks and write the exports."""
    if not args.json:
        print("\n" + "=" * 70)
        print("  REVENUE SPLIT")
        print("=" * 70)

    uploads = _read_files(args.files)
    try:
        # Keep stdout clean for --json; diagnostics go to stderr
        with contextlib.redirect_stdout(sys.stderr if args.json else sys.stdout):
            statuses, reports = process_uploads(uploads, reporting_year=args.year)
    except SplitError as exc:
        print(f"\n  Error: {exc}\n", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(generate_json(reports), indent=2))
        return 0

    skipped = [s for s in statuses if not s.is_ready]
    for s in skipped:
        print(f"  Skipped {s.name}: {s.error or 'unrecognized workbook'}")

    print(f"\n  {'Month':<20}{'DI':>16}{'DO':>16}{'Total':>16}")
    for r in reports:
        a = r.actual
        print(f"  {r.month[:19]:<20}{a.di_total:>16,.2f}{a.do_total:>16,.2f}{a.grand_total:>16,.2f}")
        if r.other_teams:
            print(f"      (not in totals: {', '.join(r.other_teams)})")

    out = Path(args.out) if args.out else EXPORTS_FOLDER / datetime.now().strftime("%Y%m%d_%H%M%S")
    out.mkdir(parents=True, exist_ok=True)
    (out / CSV_FILENAME).write_text(to_delimited_text(reports) + "\n")
    generate_excel(reports, out / XLSX_FILENAME)

    print(f"\n  Exports saved to: {out}")
    print("=" * 70 + "\n")
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Revenue Split API on port {args.port}...")
    uvicorn.run("revsplit.main:app", host="0.0.0.0", port=args.port, reload=args.reload)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Revenue Split — partner revenue reconciliation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    split_parser = subparsers.add_parser("split", help="Reconcile workbooks and export the split")
    split_parser.add_argument("files", nargs="+", help="DI workbook(s) and optionally one DO ledger")
    split_parser.add_argument("--out", help="Output directory (default: timestamped folder under exports)")
    split_parser.add_argument("--json", action="store_true", help="Print report JSON instead of writing files")
    split_parser.add_argument("--year", type=int, default=REPORTING_YEAR,
                              help=f"DO ledger reporting year (default {REPORTING_YEAR})")
    split_parser.set_defaults(func=cmd_split)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
