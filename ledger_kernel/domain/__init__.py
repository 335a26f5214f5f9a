"""
Pure domain layer.

This module contains pure data transfer objects and domain logic
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Posting rules or report derivers
- I/O

All domain objects are immutable and deterministic.
"""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.dtos import (
    AccountCategory,
    AccountPair,
    LedgerAccount,
    LineSide,
    NormalBalance,
    Posting,
    SkippedTransaction,
)
from ledger_kernel.domain.transaction import (
    DEFAULT_CASH_ACCOUNT_NAME,
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    AccountInfo,
    Transaction,
    TransactionType,
    parse_account,
    parse_transaction,
    resolve_cash_account_name,
    select_account,
)
from ledger_kernel.domain.trial_balance import (
    TrialBalance,
    TrialBalanceRow,
    build_trial_balance,
)
from ledger_kernel.domain.values import (
    CENT,
    ZERO,
    ReportingPeriod,
    iter_months,
    month_end,
    month_start,
    parse_amount,
    parse_date,
    to_cents,
)

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Values
    "CENT",
    "ZERO",
    "ReportingPeriod",
    "iter_months",
    "month_end",
    "month_start",
    "parse_amount",
    "parse_date",
    "to_cents",
    # Inputs
    "DEFAULT_CASH_ACCOUNT_NAME",
    "DEFAULT_CATEGORY",
    "DEFAULT_DESCRIPTION",
    "AccountInfo",
    "Transaction",
    "TransactionType",
    "parse_account",
    "parse_transaction",
    "resolve_cash_account_name",
    "select_account",
    # Postings
    "AccountCategory",
    "AccountPair",
    "LedgerAccount",
    "LineSide",
    "NormalBalance",
    "Posting",
    "SkippedTransaction",
    # Trial balance
    "TrialBalance",
    "TrialBalanceRow",
    "build_trial_balance",
]
