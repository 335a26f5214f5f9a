"""
Financial ratio deriver.

Ratios are computed from the balance sheet, P&L and cash flow figures of
the same trial balance.  Every ratio is quantized to 0.01; a zero
denominator yields the ``"N/A"`` sentinel instead of a division fault.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ledger_kernel.domain.dtos import AccountCategory
from ledger_kernel.domain.transaction import Transaction
from ledger_kernel.domain.trial_balance import TrialBalance
from ledger_kernel.domain.values import ZERO, ReportingPeriod, to_cents
from ledger_reports.config import ReportingConfig
from ledger_reports.models import (
    NOT_AVAILABLE,
    BalanceSheetReport,
    FinancialRatio,
    FinancialRatiosReport,
    RatioValue,
)
from ledger_reports.statements import (
    category_balance,
    derive_balance_sheet,
    derive_cash_flow,
    derive_profit_and_loss,
)

CURRENT_RATIO = "Current Ratio"
QUICK_RATIO = "Quick Ratio"
GROSS_MARGIN = "Gross Margin"
NET_MARGIN = "Net Margin"
ASSET_TURNOVER = "Asset Turnover"
DEBT_TO_EQUITY = "Debt-to-Equity Ratio"
RETURN_ON_ASSETS = "Return on Assets"
RETURN_ON_EQUITY = "Return on Equity"


def safe_ratio(numerator: Decimal, denominator: Decimal) -> RatioValue:
    """``numerator / denominator`` to 0.01, or ``"N/A"`` on a zero denominator."""
    if denominator == ZERO:
        return NOT_AVAILABLE
    return to_cents(numerator / denominator)


def _ratio(name: str, numerator: Decimal, denominator: Decimal) -> FinancialRatio:
    return FinancialRatio(
        name=name,
        value=safe_ratio(numerator, denominator),
        numerator=numerator,
        denominator=denominator,
    )


def current_assets(
    trial_balance: TrialBalance,
    balance_sheet: BalanceSheetReport,
    config: ReportingConfig,
) -> Decimal:
    """Cash plus the inventory-like asset accounts."""
    inventory = sum(
        (
            category_balance(trial_balance, AccountCategory.ASSET, tag)
            for tag in config.current_asset_categories
        ),
        ZERO,
    )
    return balance_sheet.cash.amount + inventory


def derive_ratios(
    trial_balance: TrialBalance,
    transactions: Iterable[Transaction],
    cash_account: str,
    period: ReportingPeriod,
    config: ReportingConfig,
) -> FinancialRatiosReport:
    """
    Build the ratio set.

    Current = (cash + inventory-like assets) / liabilities
    Quick = cash / liabilities
    Gross / Net Margin = gross profit / NPAT over total revenue
    Asset Turnover = total revenue / total assets
    Debt-to-Equity = |total liabilities| / total equity
    ROA / ROE = NPAT over total assets / total equity
    """
    balance_sheet = derive_balance_sheet(trial_balance, cash_account, period)
    profit_and_loss = derive_profit_and_loss(trial_balance, period, config)
    cash_flow = derive_cash_flow(trial_balance, transactions, cash_account, period)

    liabilities = balance_sheet.total_liabilities
    equity = balance_sheet.total_equity
    assets = balance_sheet.total_assets
    revenue = profit_and_loss.total_revenue
    npat = profit_and_loss.net_profit_after_tax

    ratios = (
        _ratio(CURRENT_RATIO, current_assets(trial_balance, balance_sheet, config), liabilities),
        _ratio(QUICK_RATIO, balance_sheet.cash.amount, liabilities),
        _ratio(GROSS_MARGIN, profit_and_loss.gross_profit, revenue),
        _ratio(NET_MARGIN, npat, revenue),
        _ratio(ASSET_TURNOVER, revenue, assets),
        _ratio(DEBT_TO_EQUITY, abs(liabilities), equity),
        _ratio(RETURN_ON_ASSETS, npat, assets),
        _ratio(RETURN_ON_EQUITY, npat, equity),
    )

    return FinancialRatiosReport(
        period=period,
        ratios=ratios,
        net_cash_from_operating=cash_flow.net_cash_from_operating,
        net_increase_in_cash=cash_flow.net_increase_in_cash,
    )
