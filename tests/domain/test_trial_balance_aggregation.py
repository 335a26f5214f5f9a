"""
Trial balance aggregation tests.

Rows are grouped by exact account name, sorted lexicographically, and the
debit/credit equality is checked rather than assumed.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.dtos import AccountCategory, LedgerAccount, LineSide, Posting
from ledger_kernel.domain.trial_balance import build_trial_balance
from ledger_kernel.exceptions import UnbalancedLedgerError
from ledger_kernel.services.ledger_builder import build_postings

CASH = "Main Bank"


def _posting(seq: int, account: LedgerAccount, side: LineSide, amount: str) -> Posting:
    return Posting(
        sequence=seq,
        transaction_id=f"t-{seq}",
        date=date(2024, 3, 1),
        description="x",
        account=account,
        side=side,
        amount=Decimal(amount),
    )


class TestBuildTrialBalance:

    def test_salary_and_rent_scenario(self, salary_and_rent):
        tb = build_trial_balance(build_postings(salary_and_rent, CASH).postings)

        salary = tb.get("Revenue: salary")
        assert salary.total_credit == Decimal("8000")
        assert salary.total_debit == Decimal("0")

        rent = tb.get("Expense: rent")
        assert rent.total_debit == Decimal("20000")

        assert tb.net_balance(CASH) == Decimal("-12000")
        assert tb.is_balanced
        assert tb.total_debits == tb.total_credits == Decimal("28000")

    def test_rows_sorted_by_name(self, mixed_month):
        tb = build_trial_balance(build_postings(mixed_month, CASH).postings)
        names = [row.account_name for row in tb]
        assert names == sorted(names)
        assert len(tb) == len(set(names))

    def test_grouping_is_case_sensitive(self):
        postings = [
            _posting(0, LedgerAccount.expense("Rent"), LineSide.DEBIT, "5"),
            _posting(1, LedgerAccount.expense("rent"), LineSide.DEBIT, "7"),
            _posting(2, LedgerAccount.cash(CASH), LineSide.CREDIT, "12"),
        ]
        tb = build_trial_balance(postings)
        assert tb.net_balance("Expense: Rent") == Decimal("5")
        assert tb.net_balance("Expense: rent") == Decimal("7")

    def test_net_balance_debit_positive(self, mixed_month):
        tb = build_trial_balance(build_postings(mixed_month, CASH).postings)
        for row in tb:
            assert row.net_balance == row.total_debit - row.total_credit
        assert tb.net_balance(CASH) == Decimal("4300")

    def test_category_helpers(self, mixed_month):
        tb = build_trial_balance(build_postings(mixed_month, CASH).postings)
        assets = tb.by_category(AccountCategory.ASSET)
        assert [row.account_name for row in assets] == ["Asset: computers", "Asset: inventory"]
        assert tb.category_total(AccountCategory.EXPENSE) == Decimal("4200")
        assert tb.category_total(AccountCategory.REVENUE) == Decimal("-8000")

    def test_absent_account_is_zero(self, salary_and_rent):
        tb = build_trial_balance(build_postings(salary_and_rent, CASH).postings)
        assert tb.get("Expense: travel") is None
        assert tb.net_balance("Expense: travel") == Decimal("0")
        assert tb.row_index("Expense: travel") is None
        assert tb.row_index(CASH) == 1

    def test_empty(self):
        tb = build_trial_balance([])
        assert len(tb) == 0
        assert tb.is_balanced

    def test_unbalanced_strict_raises(self, salary_and_rent, captured_logs):
        postings = build_postings(salary_and_rent, CASH).postings[:-1]
        with pytest.raises(UnbalancedLedgerError):
            build_trial_balance(postings)
        assert any(r["message"] == "trial_balance_unbalanced" for r in captured_logs())

    def test_unbalanced_non_strict_returns(self, salary_and_rent):
        postings = build_postings(salary_and_rent, CASH).postings[:-1]
        tb = build_trial_balance(postings, strict=False)
        assert not tb.is_balanced
        assert tb.total_debits - tb.total_credits == Decimal("20000")

    def test_built_event_logged(self, salary_and_rent, captured_logs):
        build_trial_balance(build_postings(salary_and_rent, CASH).postings)
        record = next(r for r in captured_logs() if r["message"] == "trial_balance_built")
        assert record["account_count"] == 3
        assert record["posting_count"] == 4
