"""Partner revenue split: DI settlement workbooks + DO ledger → monthly allocation."""

__version__ = "1.0.0"
