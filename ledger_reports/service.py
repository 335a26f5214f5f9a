"""
ledger_reports.service -- Database-backed report generation.

Responsibility:
    Loads the account and transaction snapshot through the read-only
    ``TransactionSelector`` and hands it to ``assemble``.

Architecture position:
    Services -- thin orchestration over the selector and the pure
    assembly pass.  Never writes to the session.

Usage:
    with session_scope() as session:
        service = ReportingService(session, SystemClock(), get_active_config())
        result = service.generate(account_id="acct-1")
"""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.values import ReportingPeriod
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.posting_rules.registry import PostingRuleRegistry
from ledger_kernel.selectors.transaction_selector import TransactionSelector
from ledger_reports.assembly import AssemblyResult, assemble
from ledger_reports.config import ReportingConfig

logger = get_logger("reports.service")


class ReportingService:
    """Generates report bundles from the transaction store."""

    def __init__(
        self,
        session: Session,
        clock: Clock,
        config: ReportingConfig | None = None,
        registry: PostingRuleRegistry | None = None,
    ):
        self._selector = TransactionSelector(session)
        self._clock = clock
        self._config = config or ReportingConfig()
        self._registry = registry

    def generate(
        self,
        account_id: str | None = None,
        period: ReportingPeriod | None = None,
        parallel: bool = False,
    ) -> AssemblyResult:
        """
        Assemble the report bundle for one account.

        The full transaction history is loaded because the historical P&L
        spans every account and month; ``assemble`` does the scoping.
        """
        with LogContext.bind(correlation_id=str(uuid4())):
            accounts = self._selector.accounts()
            transactions = self._selector.transactions()
            logger.info(
                "report_generation_started",
                extra={
                    "account_count": len(accounts),
                    "transaction_count": len(transactions),
                },
            )
            return assemble(
                transactions,
                accounts,
                period,
                account_id=account_id,
                config=self._config,
                clock=self._clock,
                registry=self._registry,
                parallel=parallel,
            )
