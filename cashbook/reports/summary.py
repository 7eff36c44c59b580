"""
Transaction Summaries

Reduces a set of transactions into Cash In / Cash Out / Expense totals and a
balance, and formats amounts for display. Everything here is pure: no I/O,
no dependency on the data platform.

Balance = Cash In - (Cash Out + Expense)
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict

from cashbook.models.ledger import TransactionType


Number = Union[Decimal, int, float]

ZERO = Decimal("0")
CENT = Decimal("0.01")


class Summary(BaseModel):
    """Category totals and the derived balance for a transaction set."""
    
    model_config = ConfigDict(frozen=True)
    
    cash_in: Decimal = ZERO
    cash_out: Decimal = ZERO
    expense: Decimal = ZERO
    count_in: int = 0
    count_out: int = 0
    count_expense: int = 0
    
    @property
    def balance(self) -> Decimal:
        return self.cash_in - (self.cash_out + self.expense)
    
    def total(self, type_: TransactionType) -> Decimal:
        return {
            TransactionType.CASH_IN: self.cash_in,
            TransactionType.CASH_OUT: self.cash_out,
            TransactionType.EXPENSE: self.expense,
        }[type_]
    
    def count(self, type_: TransactionType) -> int:
        return {
            TransactionType.CASH_IN: self.count_in,
            TransactionType.CASH_OUT: self.count_out,
            TransactionType.EXPENSE: self.count_expense,
        }[type_]


def _type_value(transaction) -> str:
    type_ = getattr(transaction, "type", None)
    return type_.value if isinstance(type_, TransactionType) else str(type_)


def aggregate(transactions: Iterable) -> Summary:
    """
    Sum transaction amounts by type.
    
    Accepts any objects with ``type`` and ``amount`` attributes. Entries
    whose type is not one of the three known values are left out of every
    bucket.
    """
    totals = {t.value: ZERO for t in TransactionType}
    counts = {t.value: 0 for t in TransactionType}
    
    for transaction in transactions:
        key = _type_value(transaction)
        if key not in totals:
            continue
        totals[key] += Decimal(str(transaction.amount))
        counts[key] += 1
    
    return Summary(
        cash_in=totals["in"],
        cash_out=totals["out"],
        expense=totals["expense"],
        count_in=counts["in"],
        count_out=counts["out"],
        count_expense=counts["expense"],
    )


def _to_cents(value: Number) -> Decimal:
    """Round half away from zero to two decimals."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Number) -> str:
    """Grouped thousands with exactly two decimals: 1000 -> '1,000.00'."""
    # Adding zero turns a negative zero into 0.00.
    return f"{_to_cents(value) + ZERO:,.2f}"


def format_money(value: Number, symbol: str = "₱") -> str:
    """format_amount() with a currency symbol; '-₱12.00' for negatives."""
    amount = _to_cents(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{format_amount(abs(amount))}"


def month_bounds(month: str) -> tuple[date, date]:
    """
    First and last day of a 'YYYY-MM' month.
    
    Raises:
        ValueError: If month is not in YYYY-MM form
    """
    try:
        year_str, month_str = month.split("-")
        year, month_no = int(year_str), int(month_str)
        first = date(year, month_no, 1)
    except ValueError:
        raise ValueError(f"Invalid month: {month!r} (expected YYYY-MM)")
    last_day = calendar.monthrange(year, month_no)[1]
    return first, date(year, month_no, last_day)


def current_month(today: Optional[date] = None) -> str:
    return (today or date.today()).strftime("%Y-%m")


def quarter_bounds(year: int, start_month: int) -> tuple[date, date]:
    """
    First and last day of the three months starting at start_month.
    
    The quarter need not follow the calendar: a November start covers
    November through January of the following year.
    
    Raises:
        ValueError: If start_month is not between 1 and 12
    """
    if not 1 <= start_month <= 12:
        raise ValueError(f"Invalid quarter start month: {start_month} (expected 1-12)")
    first = date(year, start_month, 1)
    end_index = start_month - 1 + 2
    end_year, end_month = year + end_index // 12, end_index % 12 + 1
    last_day = calendar.monthrange(end_year, end_month)[1]
    return first, date(end_year, end_month, last_day)


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def current_quarter_start(today: Optional[date] = None) -> int:
    """Start month (1, 4, 7 or 10) of the calendar quarter containing today."""
    month = (today or date.today()).month
    return (month - 1) // 3 * 3 + 1
