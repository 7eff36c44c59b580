"""
Ledger Models

Transactions are the rows of the cash book. The type is a closed set of
three values; anything else is rejected when a model is built, so unknown
types never enter the system through this code.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionType(str, Enum):
    """
    The three transaction categories.
    
    Cash In increases the balance; Cash Out and Expense decrease it.
    """
    CASH_IN = "in"
    CASH_OUT = "out"
    EXPENSE = "expense"
    
    @property
    def label(self) -> str:
        return {
            TransactionType.CASH_IN: "Cash In",
            TransactionType.CASH_OUT: "Cash Out",
            TransactionType.EXPENSE: "Expense",
        }[self]


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class NewTransaction(BaseModel):
    """Insert payload for a transaction."""
    
    model_config = ConfigDict(str_strip_whitespace=True)
    
    date: dt.date
    type: TransactionType
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount added to the type's bucket"
    )
    category: Optional[str] = Field(default=None, max_length=100)
    note: Optional[str] = Field(default=None, max_length=1000)
    receipt_url: Optional[str] = None
    
    @field_validator("category", "note", "receipt_url", mode="before")
    @classmethod
    def empty_as_null(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)
    
    def to_record(self) -> dict:
        """Row as sent to the data platform."""
        return self.model_dump(mode="json")


class Transaction(BaseModel):
    """A stored transaction, as returned by the data platform."""
    
    id: str
    created_at: dt.datetime
    date: dt.date
    type: TransactionType
    amount: Decimal = Field(..., ge=0)
    category: Optional[str] = None
    note: Optional[str] = None
    receipt_url: Optional[str] = None
