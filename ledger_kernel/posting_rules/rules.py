"""
Concrete posting rules, one per transaction type.

Sign convention: increases to assets and expenses are debits; increases to
liabilities, equity and revenue are credits. Every rule posts against the
cash/bank account on the other side.

    type       | debit                | credit
    -----------|----------------------|----------------------
    INCOME     | cash                 | Revenue: <category>
    EXPENSE    | Expense: <category>  | cash
    ASSET      | Asset: <category>    | cash
    LIABILITY  | cash                 | Liability: <category>
    EQUITY     | cash                 | Equity: <category>
    EQUITY     | Equity: owner-draw   | cash  (owner-draw only)
"""

from ledger_kernel.domain.dtos import AccountPair, LedgerAccount
from ledger_kernel.domain.transaction import Transaction, TransactionType
from ledger_kernel.posting_rules.base import BasePostingRule

OWNER_INVESTMENT = "owner-investment"
OWNER_DRAW = "owner-draw"


class IncomeRule(BasePostingRule):
    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.INCOME

    def resolve(self, transaction: Transaction, cash_account: str) -> AccountPair:
        self.validate_transaction(transaction)
        return AccountPair(
            debit=LedgerAccount.cash(cash_account),
            credit=LedgerAccount.revenue(transaction.category_tag),
        )


class ExpenseRule(BasePostingRule):
    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.EXPENSE

    def resolve(self, transaction: Transaction, cash_account: str) -> AccountPair:
        self.validate_transaction(transaction)
        return AccountPair(
            debit=LedgerAccount.expense(transaction.category_tag),
            credit=LedgerAccount.cash(cash_account),
        )


class AssetRule(BasePostingRule):
    """Asset purchases are paid from cash."""

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.ASSET

    def resolve(self, transaction: Transaction, cash_account: str) -> AccountPair:
        self.validate_transaction(transaction)
        return AccountPair(
            debit=LedgerAccount.asset(transaction.category_tag),
            credit=LedgerAccount.cash(cash_account),
        )


class LiabilityRule(BasePostingRule):
    """Liabilities incurred bring cash in."""

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.LIABILITY

    def resolve(self, transaction: Transaction, cash_account: str) -> AccountPair:
        self.validate_transaction(transaction)
        return AccountPair(
            debit=LedgerAccount.cash(cash_account),
            credit=LedgerAccount.liability(transaction.category_tag),
        )


class EquityRule(BasePostingRule):
    """
    Owner draws reduce equity and cash; every other equity tag, including
    owner-investment, is a contribution.
    """

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.EQUITY

    def resolve(self, transaction: Transaction, cash_account: str) -> AccountPair:
        self.validate_transaction(transaction)
        tag = transaction.category_tag
        if tag == OWNER_DRAW:
            return AccountPair(
                debit=LedgerAccount.equity(OWNER_DRAW),
                credit=LedgerAccount.cash(cash_account),
            )
        return AccountPair(
            debit=LedgerAccount.cash(cash_account),
            credit=LedgerAccount.equity(tag),
        )


DEFAULT_RULES: tuple[type[BasePostingRule], ...] = (
    IncomeRule,
    ExpenseRule,
    AssetRule,
    LiabilityRule,
    EquityRule,
)
