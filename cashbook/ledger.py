"""
Ledger Service

Reads and writes the transactions collection and summarizes it.
"""

from datetime import date
from typing import Optional

import structlog
from pydantic import ValidationError

from cashbook.models.ledger import NewTransaction, Transaction
from cashbook.reports.summary import Summary, aggregate, month_bounds
from cashbook.services.platform.interface import RecordError, RecordStoreInterface


logger = structlog.get_logger(__name__)

TRANSACTIONS = "transactions"

# Newest business date first, then newest entry first within a day.
TRANSACTION_ORDER = (("date", True), ("created_at", True))


class LedgerService:
    """Transactions on the data platform."""
    
    def __init__(self, records: RecordStoreInterface):
        self._records = records
    
    def record(self, transaction: NewTransaction) -> Transaction:
        """
        Insert a transaction.
        
        Raises:
            RecordError: If the platform rejects the insert
        """
        row = self._records.insert(TRANSACTIONS, transaction.to_record())
        try:
            return Transaction.model_validate(row)
        except ValidationError as e:
            raise RecordError(f"Unexpected transaction row returned: {e.errors()[0]['msg']}")
    
    def list_transactions(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Transaction]:
        """
        List transactions, newest first, optionally within a date range.
        
        Rows that do not validate (for example an unknown type written by
        another client) are skipped and logged.
        """
        filters = []
        if date_from is not None:
            filters.append(("date", "gte", date_from.isoformat()))
        if date_to is not None:
            filters.append(("date", "lte", date_to.isoformat()))
        
        rows = self._records.query(TRANSACTIONS, filters=filters, order=TRANSACTION_ORDER)
        
        transactions = []
        for row in rows:
            try:
                transactions.append(Transaction.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    "transaction_row_skipped",
                    transaction_id=row.get("id"),
                    error=str(e),
                )
        return transactions
    
    def list_month(self, month: str) -> list[Transaction]:
        """Transactions dated within a 'YYYY-MM' month."""
        first, last = month_bounds(month)
        return self.list_transactions(first, last)
    
    def summarize(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Summary:
        return aggregate(self.list_transactions(date_from, date_to))
