"""
Module: ledger_kernel.models.transaction
Responsibility: ORM persistence for single-entry transaction records.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - ``amount`` is stored non-negative; the economic sign comes from
      ``transaction_type`` and ``category``.
    - ``transaction_type`` is stored verbatim so that an unrecognized type
      reaches the ledger builder and is reported as skipped.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account


class Transaction(TrackedBase):
    """A categorized transaction against one account."""

    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_transaction_amount_non_negative"),
        Index("idx_transaction_account_date", "account_id", "date"),
    )

    account_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("accounts.id"),
        nullable=True,
    )

    transaction_type: Mapped[str] = mapped_column(
        "type",
        String(20),
        nullable=False,
    )

    category: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    transaction_date: Mapped[date] = mapped_column(
        "date",
        Date,
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    account: Mapped["Account"] = relationship(
        back_populates="transactions",
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.id}: {self.transaction_type} "
            f"{self.amount} on {self.transaction_date}>"
        )
