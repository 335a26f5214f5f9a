"""
Module: ledger_kernel.domain.trial_balance
Responsibility: Aggregate postings into the canonical per-account trial
    balance that every statement deriver reads from.
Architecture position: Kernel > Domain.  Pure function over ``Posting``
    values; no I/O apart from a structured log line.

Invariants enforced:
    DOUBLE_ENTRY_BALANCE -- total debits equal total credits across all rows.
        In strict mode a mismatch raises; in non-strict mode the trial balance
        is returned with ``is_balanced=False`` so that every downstream check
        cell resolves to "Error".
    Deterministic ordering -- rows are sorted by account name (case-sensitive),
        so enumeration order never depends on posting order.

Failure modes:
    - UnbalancedLedgerError (strict mode) when debits != credits.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal

from ledger_kernel.domain.dtos import AccountCategory, LedgerAccount, LineSide, Posting
from ledger_kernel.domain.values import ZERO
from ledger_kernel.exceptions import UnbalancedLedgerError
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.trial_balance")


@dataclass(frozen=True)
class TrialBalanceRow:
    """A single row in a trial balance."""

    account: LedgerAccount
    total_debit: Decimal
    total_credit: Decimal

    @property
    def account_name(self) -> str:
        return self.account.name

    @property
    def category(self) -> AccountCategory:
        return self.account.category

    @property
    def net_balance(self) -> Decimal:
        """Debit-positive net balance (total debit minus total credit)."""
        return self.total_debit - self.total_credit


@dataclass(frozen=True)
class TrialBalance:
    """
    Sorted trial balance rows plus grand totals.

    Lookup helpers never raise for an absent account: an account with no
    postings has a zero balance.
    """

    rows: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits

    def __iter__(self) -> Iterator[TrialBalanceRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def get(self, account_name: str) -> TrialBalanceRow | None:
        for row in self.rows:
            if row.account_name == account_name:
                return row
        return None

    def net_balance(self, account_name: str) -> Decimal:
        row = self.get(account_name)
        return row.net_balance if row is not None else ZERO

    def by_category(self, category: AccountCategory) -> tuple[TrialBalanceRow, ...]:
        """Rows of one category, in trial-balance (name) order."""
        return tuple(row for row in self.rows if row.category == category)

    def category_total(self, category: AccountCategory) -> Decimal:
        """Sum of debit-positive net balances over one category."""
        return sum((row.net_balance for row in self.by_category(category)), ZERO)

    def row_index(self, account_name: str) -> int | None:
        """Zero-based position of an account in ``rows``."""
        for index, row in enumerate(self.rows):
            if row.account_name == account_name:
                return index
        return None


def build_trial_balance(
    postings: Iterable[Posting],
    strict: bool = True,
    currency: str = "USD",
) -> TrialBalance:
    """
    Group postings by ledger-account name and total each side.

    Preconditions:
        - Posting amounts were rounded once at emission; no re-rounding here.
    Postconditions:
        - One row per distinct account name, sorted lexicographically.
        - ``total_debits`` / ``total_credits`` are the column sums.

    Raises:
        UnbalancedLedgerError: if ``strict`` and debits != credits.
    """
    debits: dict[str, Decimal] = {}
    credits: dict[str, Decimal] = {}
    accounts: dict[str, LedgerAccount] = {}
    posting_count = 0

    for posting in postings:
        posting_count += 1
        name = posting.account_name
        accounts.setdefault(name, posting.account)
        debits.setdefault(name, ZERO)
        credits.setdefault(name, ZERO)
        if posting.side == LineSide.DEBIT:
            debits[name] += posting.amount
        else:
            credits[name] += posting.amount

    rows = tuple(
        TrialBalanceRow(
            account=accounts[name],
            total_debit=debits[name],
            total_credit=credits[name],
        )
        for name in sorted(accounts)
    )
    total_debits = sum((row.total_debit for row in rows), ZERO)
    total_credits = sum((row.total_credit for row in rows), ZERO)
    trial_balance = TrialBalance(
        rows=rows,
        total_debits=total_debits,
        total_credits=total_credits,
    )

    if not trial_balance.is_balanced:
        logger.warning(
            "trial_balance_unbalanced",
            extra={
                "total_debits": str(total_debits),
                "total_credits": str(total_credits),
                "strict": strict,
            },
        )
        if strict:
            raise UnbalancedLedgerError(
                str(total_debits), str(total_credits), currency,
            )

    logger.info(
        "trial_balance_built",
        extra={
            "posting_count": posting_count,
            "account_count": len(rows),
            "total_debits": str(total_debits),
            "total_credits": str(total_credits),
        },
    )
    return trial_balance
