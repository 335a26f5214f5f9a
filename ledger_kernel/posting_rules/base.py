"""
Base posting rule protocol.

Posting rules map a transaction to the pair of ledger accounts it debits and
credits. The amount is not the rule's concern: the ledger builder places the
same rounded amount on both sides.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from ledger_kernel.domain.dtos import AccountPair
from ledger_kernel.domain.transaction import Transaction, TransactionType


@runtime_checkable
class PostingRule(Protocol):
    """
    Protocol for posting rules.

    Each rule is:
    - Deterministic: Same transaction always resolves to the same pair
    - Versioned: Several versions of a rule may be registered side by side
    - Stateless: No side effects during resolution
    """

    @property
    def transaction_type(self) -> TransactionType:
        """Transaction type this rule handles."""
        ...

    @property
    def version(self) -> int:
        """Version of this rule."""
        ...

    def resolve(self, transaction: Transaction, cash_account: str) -> AccountPair:
        """
        Resolve the debit and credit accounts for a transaction.

        Args:
            transaction: The transaction to post.
            cash_account: Name of the cash/bank ledger account.

        Returns:
            AccountPair naming the debited and credited accounts.
        """
        ...


class BasePostingRule(ABC):
    """
    Abstract base class for posting rules.

    Provides the type check shared by every concrete rule.
    """

    @property
    @abstractmethod
    def transaction_type(self) -> TransactionType:
        """Transaction type this rule handles."""
        pass

    @property
    def version(self) -> int:
        return 1

    @abstractmethod
    def resolve(self, transaction: Transaction, cash_account: str) -> AccountPair:
        pass

    def validate_transaction(self, transaction: Transaction) -> None:
        """
        Validate that the transaction is suitable for this rule.

        Raises:
            ValueError: If the transaction type does not match the rule.
        """
        if transaction.transaction_type != self.transaction_type:
            raise ValueError(
                f"Transaction type mismatch: expected {self.transaction_type.value}, "
                f"got {transaction.raw_type}"
            )
