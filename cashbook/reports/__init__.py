"""Reporting package."""

from cashbook.reports.summary import (
    Summary,
    aggregate,
    current_month,
    format_amount,
    format_money,
    current_quarter_start,
    month_bounds,
    quarter_bounds,
    year_bounds,
)

__all__ = [
    "Summary",
    "aggregate",
    "current_month",
    "format_amount",
    "format_money",
    "current_quarter_start",
    "month_bounds",
    "quarter_bounds",
    "year_bounds",
]
