"""contract-views: contract tree grouping and account reconciliation."""

__version__ = "0.3.0"
