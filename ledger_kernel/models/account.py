"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for external accounts (cash box, bank
    account, loan, ...) that transactions are scoped to.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - ``balance`` is maintained by the owning application; the reporting
      engine reads it but never recomputes or writes it.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from ledger_kernel.models.transaction import Transaction


class Account(TrackedBase):
    """
    An external account.

    ``account_type`` is free text (CASH, BANK, ASSETS, LIABILITIES, EQUITY,
    ...); a cash or bank type marks the account the ledger posts cash against.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        Index("idx_account_default", "is_default"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    account_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    is_default: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    balance: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="account",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<Account {self.id}: {self.name} ({self.account_type})>"
