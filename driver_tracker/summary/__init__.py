"""Financial summary package."""

from driver_tracker.summary.deriver import (
    BUSINESS_EXPENSE_RATE,
    TAX_FREE_ALLOWANCE,
    TAX_RATE,
    derive_month_summary,
    summarize_year,
)

__all__ = [
    "BUSINESS_EXPENSE_RATE",
    "TAX_FREE_ALLOWANCE",
    "TAX_RATE",
    "derive_month_summary",
    "summarize_year",
]
