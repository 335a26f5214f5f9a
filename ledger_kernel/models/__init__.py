"""ORM models for the external account and transaction store."""

from ledger_kernel.models.account import Account
from ledger_kernel.models.transaction import Transaction

__all__ = [
    "Account",
    "Transaction",
]
