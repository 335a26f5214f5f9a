"""
TransactionSelector tests against an in-memory SQLite store.

Rows come back as frozen domain snapshots in a deterministic order.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.transaction import AccountInfo, Transaction
from ledger_kernel.models.account import Account
from ledger_kernel.models.transaction import Transaction as TransactionRow
from ledger_kernel.selectors.transaction_selector import TransactionSelector


@pytest.fixture
def seeded(session):
    session.add_all([
        Account(id="acct-main", name="Main Bank", account_type="BANK", is_default=True),
        Account(id="acct-loan", name="Loan", account_type="LIABILITIES"),
    ])
    session.flush()
    session.add_all([
        TransactionRow(id="t-03", account_id="acct-main", transaction_type="EXPENSE",
                       category="rent", amount=Decimal("3000"),
                       transaction_date=date(2024, 3, 8), description="March rent"),
        TransactionRow(id="t-01", account_id="acct-main", transaction_type="INCOME",
                       category="salary", amount=Decimal("8000.50"),
                       transaction_date=date(2024, 3, 5)),
        TransactionRow(id="t-02", account_id="acct-loan", transaction_type="LIABILITY",
                       category="", amount=Decimal("4000"),
                       transaction_date=date(2024, 2, 12)),
    ])
    session.commit()
    return session


class TestAccounts:

    def test_snapshots(self, seeded):
        accounts = TransactionSelector(seeded).accounts()
        by_id = {a.account_id: a for a in accounts}
        assert set(by_id) == {"acct-main", "acct-loan"}
        main = by_id["acct-main"]
        assert isinstance(main, AccountInfo)
        assert main.is_default
        assert main.is_cash_like
        assert main.balance == Decimal("0")
        assert not by_id["acct-loan"].is_cash_like

    def test_empty_store(self, session):
        assert TransactionSelector(session).accounts() == []


class TestTransactions:

    def test_ordered_by_date(self, seeded):
        rows = TransactionSelector(seeded).transactions()
        assert [t.transaction_id for t in rows] == ["t-02", "t-01", "t-03"]
        assert all(isinstance(t, Transaction) for t in rows)

    def test_fields_converted(self, seeded):
        salary, rent = TransactionSelector(seeded).transactions(account_id="acct-main")
        assert salary.raw_type == "INCOME"
        assert salary.amount == Decimal("8000.50")
        assert salary.date == date(2024, 3, 5)
        assert salary.description is None
        assert rent.description == "March rent"

    def test_empty_category_is_none(self, seeded):
        (loan,) = TransactionSelector(seeded).transactions(account_id="acct-loan")
        assert loan.category is None
        assert loan.category_tag == "Uncategorized"

    def test_date_range_inclusive(self, seeded):
        rows = TransactionSelector(seeded).transactions(
            start=date(2024, 3, 5), end=date(2024, 3, 8),
        )
        assert [t.transaction_id for t in rows] == ["t-01", "t-03"]

    def test_load_logged(self, seeded, captured_logs):
        TransactionSelector(seeded).transactions()
        record = next(r for r in captured_logs() if r["message"] == "transactions_loaded")
        assert record["count"] == 3
