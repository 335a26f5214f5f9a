"""
Transaction and account input types.

Responsibility:
    Immutable snapshots of the external transaction and account records the
    engine borrows for one derivation pass, plus the boundary parsers that
    turn loosely-typed records (dicts from YAML/JSON, ORM rows) into them.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - ``Transaction.amount`` is a non-negative ``Decimal``.
    - The raw type string is kept verbatim so that an unrecognized type can be
      skipped and reported by the ledger builder instead of rejected here.

Failure modes:
    - InvalidAmountError / InvalidDateError / MissingFieldError from the
      ``parse_*`` functions, each naming the offending record id.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from ledger_kernel.domain.values import MAX_AMOUNT, ZERO, parse_amount, parse_date
from ledger_kernel.exceptions import InvalidAmountError, MissingFieldError

DEFAULT_DESCRIPTION = "Untitled Transaction"
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_CASH_ACCOUNT_NAME = "Bank/cash"

CASH_LIKE_ACCOUNT_TYPES = frozenset({"cash", "bank"})


class TransactionType(str, Enum):
    """Recognized transaction types."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    EQUITY = "EQUITY"
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"

    @classmethod
    def parse(cls, raw: str | None) -> TransactionType | None:
        """Case-insensitive lookup; accepts ASSETS / LIABILITIES. None if unknown."""
        if not raw:
            return None
        key = raw.strip().upper()
        key = _TYPE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_TYPE_ALIASES = {
    "ASSETS": "ASSET",
    "LIABILITIES": "LIABILITY",
}


@dataclass(frozen=True)
class Transaction:
    """
    One single-entry transaction record.

    ``category`` and ``description`` keep the raw (possibly absent) values;
    use ``category_tag`` / ``display_description`` for the defaulted ones.
    """

    transaction_id: str
    raw_type: str
    amount: Decimal
    date: date
    account_id: str | None = None
    category: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise InvalidAmountError(self.transaction_id, self.amount)
        if self.amount < ZERO:
            raise InvalidAmountError(
                self.transaction_id, self.amount, "amount must be non-negative",
            )
        if self.amount >= MAX_AMOUNT:
            raise InvalidAmountError(self.transaction_id, self.amount, "amount out of range")

    @property
    def transaction_type(self) -> TransactionType | None:
        return TransactionType.parse(self.raw_type)

    @property
    def category_tag(self) -> str:
        return self.category or DEFAULT_CATEGORY

    @property
    def display_description(self) -> str:
        return self.description or DEFAULT_DESCRIPTION


@dataclass(frozen=True)
class AccountInfo:
    """
    Snapshot of an external account (cash box, bank account, ...).

    ``balance`` is maintained by the persistence layer and is never
    recomputed by the engine.
    """

    account_id: str
    name: str
    account_type: str
    is_default: bool = False
    balance: Decimal = ZERO

    @property
    def is_cash_like(self) -> bool:
        return bool(self.account_type) and self.account_type.lower() in CASH_LIKE_ACCOUNT_TYPES


# =========================================================================
# Boundary parsers
# =========================================================================


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def _text(value: Any) -> str | None:
    """Optional free-text field; empty values become None."""
    if value is None:
        return None
    text = str(value)
    return text or None


def parse_transaction(record: Mapping[str, Any]) -> Transaction:
    """
    Build a ``Transaction`` from a loosely-typed record.

    Accepts both ``accountId`` and ``account_id`` spellings.  The ``type``
    field is required but is NOT validated against ``TransactionType``.
    """
    raw_id = _first(record, "id", "transaction_id")
    record_id = str(raw_id) if raw_id is not None else None
    if record_id is None:
        raise MissingFieldError(None, "id")

    raw_type = _first(record, "type", "transaction_type")
    if raw_type is None:
        raise MissingFieldError(record_id, "type")

    account_id = _first(record, "accountId", "account_id")
    return Transaction(
        transaction_id=record_id,
        raw_type=str(raw_type),
        amount=parse_amount(record.get("amount"), record_id),
        date=parse_date(record.get("date"), record_id),
        account_id=str(account_id) if account_id is not None else None,
        category=_text(record.get("category")),
        description=_text(record.get("description")),
    )


def parse_account(record: Mapping[str, Any]) -> AccountInfo:
    """Build an ``AccountInfo`` from a loosely-typed record."""
    raw_id = _first(record, "id", "account_id")
    if raw_id is None:
        raise MissingFieldError(None, "id")
    record_id = str(raw_id)
    name = record.get("name")
    if not name:
        raise MissingFieldError(record_id, "name")

    raw_balance = record.get("balance")
    balance = ZERO
    if raw_balance is not None:
        # Balances may be overdrawn; only the numeric check applies.
        try:
            balance = Decimal(str(raw_balance))
        except InvalidOperation:
            raise InvalidAmountError(
                record_id, raw_balance, "balance is not a number",
            ) from None

    return AccountInfo(
        account_id=record_id,
        name=str(name),
        account_type=str(record.get("type") or ""),
        is_default=bool(_first(record, "isDefault", "is_default")),
        balance=balance,
    )


def resolve_cash_account_name(
    accounts: Iterable[AccountInfo],
    fallback: str = DEFAULT_CASH_ACCOUNT_NAME,
) -> str:
    """Name of the first cash/bank account, or ``fallback`` when none exists."""
    for account in accounts:
        if account.is_cash_like:
            return account.name
    return fallback


def select_account(
    accounts: Iterable[AccountInfo],
    account_id: str | None = None,
) -> AccountInfo | None:
    """
    Pick the account a report is scoped to.

    Explicit ``account_id`` wins; otherwise the default account; otherwise
    the first account.  Returns None for an empty account set or an unknown id.
    """
    accounts = list(accounts)
    if account_id is not None:
        return next((a for a in accounts if a.account_id == account_id), None)
    default = next((a for a in accounts if a.is_default), None)
    if default is not None:
        return default
    return accounts[0] if accounts else None
