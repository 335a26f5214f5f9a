"""
DTOs -- Pure domain data transfer objects for the posting pipeline.

Responsibility:
    Defines the immutable data structures that flow from posting rules to
    the trial balance: ``LedgerAccount`` (the tagged account identity),
    ``AccountPair`` (rule output), ``Posting`` (one side of a double entry)
    and ``SkippedTransaction`` (recoverable rejection record).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Ledger accounts are identified by ``AccountCategory`` plus a free-form
      tag; statements filter on the category, never on a name prefix.
    - ``Posting.amount`` is a non-negative Decimal on exactly one side.

Data flow:
    Transaction -> AccountPair -> (Posting, Posting) -> TrialBalanceRow
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from ledger_kernel.domain.values import ZERO


class LineSide(str, Enum):
    """
    Which side of the entry a posting is on.

    Guarantees:
        - Exhaustive enumeration -- no other sides exist in double-entry.
    """

    DEBIT = "debit"
    CREDIT = "credit"


class NormalBalance(str, Enum):
    """Normal balance side for an account category."""

    DEBIT = "debit"
    CREDIT = "credit"


class AccountCategory(str, Enum):
    """
    Ledger account categories.

    CASH is the cash/bank account every rule posts against; the other five
    are the statement categories carried by ``"<Label>: <tag>"`` accounts.
    """

    CASH = "cash"
    REVENUE = "revenue"
    EXPENSE = "expense"
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def normal_balance(self) -> NormalBalance:
        if self in (AccountCategory.CASH, AccountCategory.ASSET, AccountCategory.EXPENSE):
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT

    @property
    def financial_statement(self) -> str:
        if self in (AccountCategory.REVENUE, AccountCategory.EXPENSE):
            return "Income Statement"
        return "Balance sheet"


_CATEGORY_LABELS = {
    AccountCategory.CASH: "Cash",
    AccountCategory.REVENUE: "Revenue",
    AccountCategory.EXPENSE: "Expense",
    AccountCategory.ASSET: "Asset",
    AccountCategory.LIABILITY: "Liability",
    AccountCategory.EQUITY: "Equity",
}


@dataclass(frozen=True)
class LedgerAccount:
    """
    A named general-ledger account.

    For CASH the tag IS the account name (the external cash/bank account's
    name).  For every other category the name is ``"<Label>: <tag>"``.
    """

    category: AccountCategory
    tag: str

    @property
    def name(self) -> str:
        if self.category == AccountCategory.CASH:
            return self.tag
        return f"{self.category.label}: {self.tag}"

    @classmethod
    def cash(cls, name: str) -> LedgerAccount:
        return cls(AccountCategory.CASH, name)

    @classmethod
    def revenue(cls, tag: str) -> LedgerAccount:
        return cls(AccountCategory.REVENUE, tag)

    @classmethod
    def expense(cls, tag: str) -> LedgerAccount:
        return cls(AccountCategory.EXPENSE, tag)

    @classmethod
    def asset(cls, tag: str) -> LedgerAccount:
        return cls(AccountCategory.ASSET, tag)

    @classmethod
    def liability(cls, tag: str) -> LedgerAccount:
        return cls(AccountCategory.LIABILITY, tag)

    @classmethod
    def equity(cls, tag: str) -> LedgerAccount:
        return cls(AccountCategory.EQUITY, tag)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class AccountPair:
    """Posting rule output: the account debited and the account credited."""

    debit: LedgerAccount
    credit: LedgerAccount


@dataclass(frozen=True)
class Posting:
    """
    One side of a double-entry record.

    ``sequence`` is the zero-based emission index; it makes ordering
    explicit when two transactions touch the same account on the same day.
    """

    sequence: int
    transaction_id: str
    date: date
    description: str
    account: LedgerAccount
    side: LineSide
    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < ZERO:
            raise ValueError(f"Posting amount must be non-negative, got {self.amount}")

    @property
    def account_name(self) -> str:
        return self.account.name

    @property
    def debit_amount(self) -> Decimal | None:
        return self.amount if self.side == LineSide.DEBIT else None

    @property
    def credit_amount(self) -> Decimal | None:
        return self.amount if self.side == LineSide.CREDIT else None


@dataclass(frozen=True)
class SkippedTransaction:
    """A transaction excluded from postings, with the reason."""

    transaction_id: str
    raw_type: str
    reason: str
