"""Tests for the ledger service."""

from datetime import date
from decimal import Decimal

import pytest

from cashbook.ledger import TRANSACTION_ORDER, LedgerService
from cashbook.models import NewTransaction, TransactionType
from cashbook.services.platform.interface import RecordError


def row(id_, type_="in", amount="10.00", day="2024-03-01"):
    return {
        "id": id_,
        "created_at": "2024-03-01T08:00:00+00:00",
        "date": day,
        "type": type_,
        "amount": amount,
        "category": None,
        "note": None,
        "receipt_url": None,
    }


class TestLedgerService:
    """Tests for LedgerService."""

    def test_list_orders_newest_first(self, platform):
        LedgerService(platform).list_transactions()

        [(_, collection, filters, order)] = platform.calls_of("query")
        assert collection == "transactions"
        assert filters == []
        assert order == list(TRANSACTION_ORDER)
        assert order == [("date", True), ("created_at", True)]

    def test_date_range_filters(self, platform):
        LedgerService(platform).list_transactions(date(2024, 3, 1), date(2024, 3, 31))

        [(_, _, filters, _)] = platform.calls_of("query")
        assert filters == [("date", "gte", "2024-03-01"), ("date", "lte", "2024-03-31")]

    def test_list_month(self, platform):
        LedgerService(platform).list_month("2024-02")

        [(_, _, filters, _)] = platform.calls_of("query")
        assert filters == [("date", "gte", "2024-02-01"), ("date", "lte", "2024-02-29")]

    def test_invalid_rows_skipped(self, platform):
        platform.query_rows = [row("t1"), row("t2", type_="refund"), row("t3", type_="out")]

        transactions = LedgerService(platform).list_transactions()

        assert [t.id for t in transactions] == ["t1", "t3"]

    def test_summarize(self, platform):
        platform.query_rows = [
            row("t1", "in", "1000.00"),
            row("t2", "out", "250.00"),
            row("t3", "expense", "99.99"),
        ]

        summary = LedgerService(platform).summarize()

        assert summary.balance == Decimal("650.01")
        assert summary.count_expense == 1

    def test_record_returns_stored_row(self, platform):
        transaction = LedgerService(platform).record(NewTransaction(
            date=date(2024, 3, 2),
            type=TransactionType.CASH_IN,
            amount=Decimal("500"),
        ))

        assert transaction.id.startswith("transactions-")
        assert transaction.amount == Decimal("500")
        assert platform.tables["transactions"][0]["type"] == "in"

    def test_record_propagates_platform_error(self, platform):
        platform.insert_error = "JWT expired"

        with pytest.raises(RecordError, match="JWT expired"):
            LedgerService(platform).record(NewTransaction(
                date=date(2024, 3, 2),
                type=TransactionType.CASH_OUT,
                amount=Decimal("1"),
            ))
