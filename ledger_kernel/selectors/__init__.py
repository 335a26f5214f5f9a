"""Read-only selectors over the transaction store."""

from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.transaction_selector import TransactionSelector

__all__ = [
    "BaseSelector",
    "TransactionSelector",
]
