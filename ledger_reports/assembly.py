"""
Report assembly -- one derivation pass from transactions to a bundle.

Responsibility:
    Scopes the transaction set to one account and one reporting window,
    builds postings and the trial balance, runs every statement deriver,
    renders each result to a table and collects the tables in bundle order.

Architecture position:
    Reports layer, top-level entry point. Depends on the kernel services
    (ledger builder, trial balance) and on every deriver module. Holds no
    state between calls.

Invariants enforced:
    DOUBLE_ENTRY_BALANCE -- an unbalanced trial balance raises unless
        ``fail_on_integrity_error`` is off.
    BALANCE_SHEET_EQUATION / CASH_RECONCILIATION -- a failed terminal
        check is always listed in ``integrity_issues`` and raises
        ReportIntegrityError when ``fail_on_integrity_error`` is on.
    DETERMINISTIC_DERIVATION -- no randomness and no wall-clock reads
        beyond the injected Clock reach the bundle (the per-call run_id
        only appears in log records); the parallel and sequential paths
        produce identical bundles.

Failure modes:
    - UnbalancedLedgerError: debit and credit totals differ (strict mode).
    - ReportIntegrityError: a balance-sheet or cash-flow check failed
      (strict mode).
    - Unrecognized transaction types never fail; they are reported in
      ``AssemblyResult.skipped``.
"""

from __future__ import annotations

import contextvars
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import SkippedTransaction
from ledger_kernel.domain.transaction import (
    AccountInfo,
    Transaction,
    resolve_cash_account_name,
    select_account,
)
from ledger_kernel.domain.trial_balance import build_trial_balance
from ledger_kernel.domain.values import ReportingPeriod
from ledger_kernel.exceptions import ReportIntegrityError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.posting_rules.registry import PostingRuleRegistry
from ledger_kernel.services.ledger_builder import build_postings
from ledger_reports.chart_of_accounts import derive_chart_of_accounts
from ledger_reports.config import ReportingConfig
from ledger_reports.depreciation import derive_depreciation_schedule
from ledger_reports.history import derive_expense_breakdown, derive_historical_profit_and_loss
from ledger_reports.models import (
    BUNDLE_ORDER,
    ReportBundle,
    ReportMetadata,
    ReportTable,
    ReportType,
)
from ledger_reports.ratios import derive_ratios
from ledger_reports.statements import (
    derive_balance_sheet,
    derive_cash_flow,
    derive_profit_and_loss,
)
from ledger_reports import tables
from ledger_reports.tax import derive_corporate_tax, derive_vat_report

logger = get_logger("reports.assembly")

# Reports whose terminal check guards a structural invariant.
CHECKED_TABLES: dict[ReportType, Callable[[Any], bool]] = {
    ReportType.TRIAL_BALANCE: lambda report: report.is_balanced,
    ReportType.BALANCE_SHEET: lambda report: report.is_balanced,
    ReportType.CASH_FLOW: lambda report: report.reconciles,
}


@dataclass(frozen=True)
class AssemblyResult:
    """Everything one derivation pass produces."""

    bundle: ReportBundle
    reports: Mapping[str, Any]
    skipped: tuple[SkippedTransaction, ...]
    integrity_issues: tuple[str, ...]
    metadata: ReportMetadata

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def is_balanced(self) -> bool:
        return not self.integrity_issues


def scope_transactions(
    transactions: Iterable[Transaction],
    account: AccountInfo | None,
    account_id: str | None = None,
) -> list[Transaction]:
    """
    Transactions belonging to the report's account.

    With neither a resolved account nor an explicit id, nothing is filtered.
    """
    scope_id = account.account_id if account is not None else account_id
    if scope_id is None:
        return list(transactions)
    return [t for t in transactions if t.account_id == scope_id]


def integrity_issues(reports: Mapping[str, Any]) -> tuple[str, ...]:
    """Names of the checked reports whose terminal check failed."""
    issues = []
    for report_type, passed in CHECKED_TABLES.items():
        report = reports.get(report_type.value)
        if report is None:
            continue
        if not passed(report):
            issues.append(report_type.value)
    return tuple(issues)


def _named(name: str, task: Callable[[], Any]) -> Callable[[], Any]:
    def run() -> Any:
        with LogContext.bind(report_name=name):
            result = task()
            logger.debug("report_derived")
            return result

    return run


def _run_all(
    tasks: Mapping[str, Callable[[], Any]],
    parallel: bool,
) -> dict[str, Any]:
    if not parallel:
        return {name: _named(name, task)() for name, task in tasks.items()}
    with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
        # Each task runs in a copy of the caller's context so LogContext
        # fields reach the worker threads.
        futures = {
            name: executor.submit(contextvars.copy_context().run, _named(name, task))
            for name, task in tasks.items()
        }
        return {name: future.result() for name, future in futures.items()}


def assemble(
    transactions: Iterable[Transaction],
    accounts: Iterable[AccountInfo],
    period: ReportingPeriod | None = None,
    *,
    account_id: str | None = None,
    config: ReportingConfig | None = None,
    clock: Clock | None = None,
    registry: PostingRuleRegistry | None = None,
    parallel: bool = False,
) -> AssemblyResult:
    """
    Derive every report for one account and one reporting window.

    Args:
        transactions: The full, unscoped transaction set.
        accounts: Account metadata used for scoping and the cash account.
        period: Reporting window; the calendar month of ``clock.today()``
            when None.
        account_id: Account to report on; the default (then first) account
            when None.
        config: Rates and options; defaults when None.
        clock: Time source for the default period and ``generated_at``.
        registry: Posting rule registry; the default rules when None.
        parallel: Run the independent derivers on a thread pool.

    Returns:
        AssemblyResult with the bundle, the typed reports by table name,
        skipped transactions and any failed integrity checks.
    """
    config = config or ReportingConfig()
    clock = clock or SystemClock()
    transactions = list(transactions)
    accounts = list(accounts)

    account = select_account(accounts, account_id)
    if account_id is not None and account is None:
        logger.warning("account_not_found", extra={"account_id": account_id})
    period = period or ReportingPeriod.month_of(clock.today())
    cash_account = resolve_cash_account_name(accounts, config.cash_account_fallback)
    scope_id = account.account_id if account is not None else account_id

    with LogContext.bind(account_id=scope_id, run_id=str(uuid4())):
        scoped = scope_transactions(transactions, account, account_id)
        window = [t for t in scoped if period.contains(t.date)]

        ledger = build_postings(window, cash_account, registry)
        trial_balance = build_trial_balance(
            ledger.postings,
            strict=config.fail_on_integrity_error,
            currency=config.default_currency,
        )

        derivers: dict[str, Callable[[], Any]] = {
            ReportType.CHART_OF_ACCOUNTS.value: lambda: derive_chart_of_accounts(trial_balance),
            ReportType.BALANCE_SHEET.value: lambda: derive_balance_sheet(
                trial_balance, cash_account, period,
            ),
            ReportType.CASH_FLOW.value: lambda: derive_cash_flow(
                trial_balance, window, cash_account, period,
            ),
            ReportType.PROFIT_AND_LOSS.value: lambda: derive_profit_and_loss(
                trial_balance, period, config,
            ),
            ReportType.HISTORICAL_PROFIT_AND_LOSS.value: lambda: (
                derive_historical_profit_and_loss(transactions, period.end)
            ),
            ReportType.FINANCIAL_RATIOS.value: lambda: derive_ratios(
                trial_balance, window, cash_account, period, config,
            ),
            ReportType.VAT.value: lambda: derive_vat_report(window, period, config),
            ReportType.CORPORATE_TAX.value: lambda: derive_corporate_tax(window, period, config),
            ReportType.DEPRECIATION.value: lambda: derive_depreciation_schedule(
                trial_balance, period, config,
            ),
            ReportType.EXPENSE_BREAKDOWN.value: lambda: derive_expense_breakdown(window, period),
        }
        derived = _run_all(derivers, parallel)

        reports: dict[str, Any] = {
            ReportType.GENERAL_ENTRIES.value: ledger.postings,
            ReportType.TRIAL_BALANCE.value: trial_balance,
            ReportType.DETAILED_LEDGER.value: tuple(window),
            **derived,
        }
        rendered = _render(reports, config)
        bundle = ReportBundle(
            tables=tuple(rendered[report_type.value] for report_type in BUNDLE_ORDER)
        )

        issues = integrity_issues(reports)
        for name in issues:
            logger.warning("integrity_check_failed", extra={"report_name": name})
        if issues and config.fail_on_integrity_error:
            _raise_integrity_error(issues[0], reports)

        metadata = ReportMetadata(
            entity_name=config.entity_name,
            currency=config.default_currency,
            period_start=period.start,
            period_end=period.end,
            generated_at=clock.now().isoformat(),
            cash_account=cash_account,
            account_id=scope_id,
            account_name=account.name if account is not None else None,
        )

        logger.info(
            "report_assembled",
            extra={
                "table_count": len(bundle),
                "transaction_count": len(window),
                "posting_count": len(ledger.postings),
                "skipped_count": ledger.skipped_count,
                "integrity_issue_count": len(issues),
                "period_start": period.start,
                "period_end": period.end,
            },
        )

    return AssemblyResult(
        bundle=bundle,
        reports=reports,
        skipped=ledger.skipped,
        integrity_issues=issues,
        metadata=metadata,
    )


def _render(reports: Mapping[str, Any], config: ReportingConfig) -> dict[str, ReportTable]:
    """Render in bundle order; the ratio table references earlier tables."""
    rendered: dict[str, ReportTable] = {}

    def put(table: ReportTable) -> None:
        rendered[table.name] = table

    put(tables.render_chart_of_accounts(reports[ReportType.CHART_OF_ACCOUNTS.value]))
    put(tables.render_general_entries(reports[ReportType.GENERAL_ENTRIES.value]))
    put(tables.render_trial_balance(reports[ReportType.TRIAL_BALANCE.value]))
    put(tables.render_balance_sheet(reports[ReportType.BALANCE_SHEET.value]))
    put(tables.render_cash_flow(reports[ReportType.CASH_FLOW.value]))
    put(tables.render_profit_and_loss(reports[ReportType.PROFIT_AND_LOSS.value], config))
    put(tables.render_historical_profit_and_loss(
        reports[ReportType.HISTORICAL_PROFIT_AND_LOSS.value]
    ))
    put(tables.render_ratios(
        reports[ReportType.FINANCIAL_RATIOS.value],
        rendered[ReportType.BALANCE_SHEET.value],
        rendered[ReportType.PROFIT_AND_LOSS.value],
        rendered[ReportType.CASH_FLOW.value],
        config,
    ))
    put(tables.render_vat_report(reports[ReportType.VAT.value]))
    put(tables.render_corporate_tax(reports[ReportType.CORPORATE_TAX.value]))
    put(tables.render_detailed_ledger(reports[ReportType.DETAILED_LEDGER.value]))
    put(tables.render_depreciation_schedule(reports[ReportType.DEPRECIATION.value]))
    put(tables.render_expense_breakdown(reports[ReportType.EXPENSE_BREAKDOWN.value]))
    return rendered


def _raise_integrity_error(name: str, reports: Mapping[str, Any]) -> None:
    if name == ReportType.BALANCE_SHEET.value:
        sheet = reports[name]
        raise ReportIntegrityError(
            name, "Assets = Liabilities + Equity",
            str(sheet.total_assets), str(sheet.total_liabilities_and_equity),
        )
    if name == ReportType.CASH_FLOW.value:
        flow = reports[name]
        raise ReportIntegrityError(
            name, "Cash at End of Period",
            str(flow.cash_at_end), str(flow.cash_at_end_per_trial_balance),
        )
    trial_balance = reports[ReportType.TRIAL_BALANCE.value]
    raise ReportIntegrityError(
        name, "Total Debits = Total Credits",
        str(trial_balance.total_debits), str(trial_balance.total_credits),
    )
