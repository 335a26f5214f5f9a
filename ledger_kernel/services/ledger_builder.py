"""
Ledger Builder -- Expands transactions into double-entry postings.

Responsibility:
    For each transaction, in input order, resolves the debit/credit account
    pair through the posting rule registry and emits two postings of equal
    amount. Transactions whose type has no rule are skipped and reported.

Architecture position:
    Kernel > Services -- pure function; the only side effect is logging.
    Depends on domain/ and posting_rules/.

Invariants enforced:
    DOUBLE_ENTRY_BALANCE -- every transaction yields exactly one debit and
        one credit posting carrying the same amount.
    Rounding -- amounts are quantized to 0.01 (ROUND_HALF_UP) exactly once,
        here, and are never re-rounded downstream.
    Ordering -- postings are emitted debit-first, in transaction input
        order, with a stable zero-based ``sequence``.

Failure modes:
    - An unrecognized transaction type is NOT an error: the transaction is
      excluded from the postings and listed in ``LedgerBuildResult.skipped``.
    - UnbalancedLedgerError from ``verify_double_entry`` when a posting set
      has been corrupted.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from ledger_kernel.domain.dtos import LineSide, Posting, SkippedTransaction
from ledger_kernel.domain.transaction import Transaction
from ledger_kernel.domain.values import ZERO, to_cents
from ledger_kernel.exceptions import PostingRuleNotFoundError, UnbalancedLedgerError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.posting_rules.registry import PostingRuleRegistry, get_default_registry

logger = get_logger("services.ledger_builder")


@dataclass(frozen=True)
class LedgerBuildResult:
    """Postings emitted for one derivation pass, plus skipped transactions."""

    postings: tuple[Posting, ...]
    skipped: tuple[SkippedTransaction, ...] = ()

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def build_postings(
    transactions: Iterable[Transaction],
    cash_account: str,
    registry: PostingRuleRegistry | None = None,
) -> LedgerBuildResult:
    """
    Expand each transaction into a debit posting and a credit posting.

    Args:
        transactions: Transactions in the order postings should follow.
        cash_account: Name of the cash/bank ledger account.
        registry: Rule registry; the shared default registry when None.

    Returns:
        LedgerBuildResult with the postings and the skipped transactions.
    """
    registry = registry or get_default_registry()
    postings: list[Posting] = []
    skipped: list[SkippedTransaction] = []

    for transaction in transactions:
        try:
            pair = registry.resolve(transaction, cash_account)
        except PostingRuleNotFoundError as exc:
            logger.warning(
                "transaction_skipped",
                extra={
                    "transaction_id": transaction.transaction_id,
                    "raw_type": transaction.raw_type,
                    "reason": exc.code,
                },
            )
            skipped.append(
                SkippedTransaction(
                    transaction_id=transaction.transaction_id,
                    raw_type=transaction.raw_type,
                    reason=str(exc),
                )
            )
            continue

        amount = to_cents(transaction.amount)
        description = transaction.display_description
        for account, side in ((pair.debit, LineSide.DEBIT), (pair.credit, LineSide.CREDIT)):
            postings.append(
                Posting(
                    sequence=len(postings),
                    transaction_id=transaction.transaction_id,
                    date=transaction.date,
                    description=description,
                    account=account,
                    side=side,
                    amount=amount,
                )
            )

    logger.info(
        "postings_built",
        extra={
            "posting_count": len(postings),
            "skipped_count": len(skipped),
            "cash_account": cash_account,
        },
    )
    return LedgerBuildResult(postings=tuple(postings), skipped=tuple(skipped))


def verify_double_entry(postings: Sequence[Posting], currency: str = "USD") -> None:
    """
    Check that the debit and credit columns of a posting set are equal.

    Raises:
        UnbalancedLedgerError: If the totals differ.
    """
    debits: Decimal = ZERO
    credits: Decimal = ZERO
    for posting in postings:
        if posting.side == LineSide.DEBIT:
            debits += posting.amount
        else:
            credits += posting.amount
    if debits != credits:
        raise UnbalancedLedgerError(str(debits), str(credits), currency)
