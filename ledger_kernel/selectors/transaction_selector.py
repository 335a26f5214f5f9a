"""
Module: ledger_kernel.selectors.transaction_selector
Responsibility: Load accounts and transactions from the store and convert
    them into the frozen domain snapshots the derivation pipeline consumes.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Transactions are returned ordered by (date, created_at, id) so the
      posting order, and therefore every derived report, is deterministic.
    - Amounts pass through the same ``parse_amount`` validation as file
      input; a corrupt row fails with a typed input-validation error.
"""

from datetime import date

from sqlalchemy import select

from ledger_kernel.domain.transaction import AccountInfo, Transaction
from ledger_kernel.domain.values import parse_amount, parse_date
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account as AccountModel
from ledger_kernel.models.transaction import Transaction as TransactionModel
from ledger_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.transaction")


class TransactionSelector(BaseSelector[TransactionModel]):
    """Read-only access to accounts and transactions."""

    def accounts(self) -> list[AccountInfo]:
        """All accounts in creation order."""
        rows = self.session.execute(
            select(AccountModel).order_by(AccountModel.created_at, AccountModel.id)
        ).scalars()
        return [self._to_account(row) for row in rows]

    def transactions(
        self,
        account_id: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Transaction]:
        """
        Transactions, optionally filtered by account and inclusive date range.

        Args:
            account_id: Only transactions scoped to this account.
            start: Earliest transaction date to include.
            end: Latest transaction date to include.
        """
        stmt = select(TransactionModel)
        if account_id is not None:
            stmt = stmt.where(TransactionModel.account_id == account_id)
        if start is not None:
            stmt = stmt.where(TransactionModel.transaction_date >= start)
        if end is not None:
            stmt = stmt.where(TransactionModel.transaction_date <= end)
        stmt = stmt.order_by(
            TransactionModel.transaction_date,
            TransactionModel.created_at,
            TransactionModel.id,
        )

        result = [self._to_transaction(row) for row in self.session.execute(stmt).scalars()]
        logger.debug(
            "transactions_loaded",
            extra={"count": len(result), "filter_account_id": account_id},
        )
        return result

    @staticmethod
    def _to_account(row: AccountModel) -> AccountInfo:
        return AccountInfo(
            account_id=row.id,
            name=row.name,
            account_type=row.account_type,
            is_default=row.is_default,
            balance=row.balance,
        )

    @staticmethod
    def _to_transaction(row: TransactionModel) -> Transaction:
        return Transaction(
            transaction_id=row.id,
            raw_type=row.transaction_type,
            amount=parse_amount(row.amount, row.id),
            date=parse_date(row.transaction_date, row.id),
            account_id=row.account_id,
            category=row.category or None,
            description=row.description or None,
        )
