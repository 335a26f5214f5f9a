"""
Pure financial statement transformation functions.

These functions derive the balance sheet, profit and loss statement and
cash flow statement from a trial balance. ZERO I/O. ZERO side effects.

All monetary values are Decimal. All inputs/outputs are frozen dataclasses.

Functions in this module follow the ledger_kernel/domain/ purity convention:
- No database access
- No clock access
- No file I/O
- Deterministic: same inputs always produce same outputs

Sign convention: trial-balance net balances are debit-positive.  Credit-
normal categories (revenue, liabilities, equity) are flipped so that the
statements present them as positive figures.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from enum import Enum

from ledger_kernel.domain.dtos import AccountCategory, LedgerAccount
from ledger_kernel.domain.transaction import Transaction, TransactionType
from ledger_kernel.domain.trial_balance import TrialBalance, TrialBalanceRow
from ledger_kernel.domain.values import ZERO, ReportingPeriod, to_cents
from ledger_kernel.posting_rules.rules import OWNER_DRAW, OWNER_INVESTMENT
from ledger_reports.config import ReportingConfig
from ledger_reports.models import (
    BalanceSheetReport,
    CashFlowReport,
    CheckStatus,
    ProfitAndLossReport,
    StatementLine,
)

OWNER_INVESTMENT_LABEL = "Owner-Investment"
OWNER_DRAW_LABEL = "Less: Owner-Draw"
DEPRECIATION_LABEL = "Depreciation"


# =========================================================================
# Shared helpers
# =========================================================================


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def _lines(
    rows: Iterable[TrialBalanceRow],
    flip: bool = False,
) -> tuple[StatementLine, ...]:
    return tuple(
        StatementLine(
            label=row.account_name,
            amount=-row.net_balance if flip else row.net_balance,
            account_name=row.account_name,
        )
        for row in rows
    )


def category_balance(
    trial_balance: TrialBalance,
    category: AccountCategory,
    tag: str,
) -> Decimal:
    """Debit-positive net balance of one tagged account; zero when absent."""
    account = LedgerAccount(category, tag)
    row = trial_balance.get(account.name)
    if row is None or row.category != category:
        return ZERO
    return row.net_balance


def compute_net_income(trial_balance: TrialBalance) -> Decimal:
    """
    Net income = -(sum(revenue) + sum(expense)).

    Revenue is credit-normal (negative net), expenses debit-normal.
    """
    return -(
        trial_balance.category_total(AccountCategory.REVENUE)
        + trial_balance.category_total(AccountCategory.EXPENSE)
    )


def compute_cash_balance(trial_balance: TrialBalance) -> Decimal:
    """Net balance of the cash/bank ledger account."""
    return trial_balance.category_total(AccountCategory.CASH)


def display_tag(tag: str) -> str:
    """``"travel"`` -> ``"Travel"``."""
    return tag[:1].upper() + tag[1:]


def transactions_of_type(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    period: ReportingPeriod | None = None,
) -> list[Transaction]:
    return [
        t for t in transactions
        if t.transaction_type == transaction_type
        and (period is None or period.contains(t.date))
    ]


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of transaction amounts, each rounded to cents as when posted."""
    return _sum(to_cents(t.amount) for t in transactions)


# =========================================================================
# 1. BALANCE SHEET
# =========================================================================


def derive_balance_sheet(
    trial_balance: TrialBalance,
    cash_account: str,
    period: ReportingPeriod,
) -> BalanceSheetReport:
    """
    Build the balance sheet.

    1. Assets: the cash/bank line plus every Asset account (debit-normal)
    2. Liabilities: every Liability account, flipped positive
    3. Equity: owner investment, less owner draw, other equity tags,
       plus net income for the window
    4. Verify A = L + E
    """
    cash = StatementLine(
        label=cash_account,
        amount=compute_cash_balance(trial_balance),
        account_name=cash_account,
    )
    asset_lines = _lines(trial_balance.by_category(AccountCategory.ASSET))
    total_assets = cash.amount + _sum(line.amount for line in asset_lines)

    liability_lines = _lines(
        trial_balance.by_category(AccountCategory.LIABILITY), flip=True,
    )
    total_liabilities = _sum(line.amount for line in liability_lines)

    investment = ZERO
    draw = ZERO
    other_rows: list[TrialBalanceRow] = []
    for row in trial_balance.by_category(AccountCategory.EQUITY):
        if row.account.tag == OWNER_INVESTMENT:
            investment += -row.net_balance
        elif row.account.tag == OWNER_DRAW:
            draw += row.net_balance
        else:
            other_rows.append(row)
    other_equity_lines = _lines(other_rows, flip=True)

    net_income = compute_net_income(trial_balance)
    total_equity = (
        investment
        - draw
        + _sum(line.amount for line in other_equity_lines)
        + net_income
    )
    total_l_and_e = total_liabilities + total_equity

    return BalanceSheetReport(
        period=period,
        cash=cash,
        asset_lines=asset_lines,
        total_assets=total_assets,
        liability_lines=liability_lines,
        total_liabilities=total_liabilities,
        owner_investment=StatementLine(
            OWNER_INVESTMENT_LABEL, investment, LedgerAccount.equity(OWNER_INVESTMENT).name,
        ),
        owner_draw=StatementLine(
            OWNER_DRAW_LABEL, draw, LedgerAccount.equity(OWNER_DRAW).name,
        ),
        other_equity_lines=other_equity_lines,
        net_income=net_income,
        total_equity=total_equity,
        total_liabilities_and_equity=total_l_and_e,
        check=CheckStatus.of(total_assets, total_l_and_e),
    )


# =========================================================================
# 2. PROFIT & LOSS
# =========================================================================


def derive_profit_and_loss(
    trial_balance: TrialBalance,
    period: ReportingPeriod,
    config: ReportingConfig,
) -> ProfitAndLossReport:
    """
    Build the profit and loss statement.

    No cost-of-sales account is modeled, so Gross Profit equals revenue.
    Operating expenses are the configured expense tags plus the fixed
    depreciation charge; EBITDA excludes only the depreciation line.
    Income tax applies to positive EBIT only.
    """
    revenue_lines = _lines(
        trial_balance.by_category(AccountCategory.REVENUE), flip=True,
    )
    total_revenue = _sum(line.amount for line in revenue_lines)
    cost_of_sales = ZERO
    gross_profit = total_revenue - cost_of_sales

    operating_lines = tuple(
        StatementLine(
            label=display_tag(tag),
            amount=category_balance(trial_balance, AccountCategory.EXPENSE, tag),
            account_name=LedgerAccount.expense(tag).name,
        )
        for tag in config.operating_expense_categories
    )
    cash_opex = _sum(line.amount for line in operating_lines)
    depreciation = to_cents(config.depreciation_charge)
    total_operating_expenses = cash_opex + depreciation

    ebitda = gross_profit - cash_opex
    ebit = ebitda - depreciation
    if ebit > ZERO:
        income_tax = to_cents(ebit * config.corporate_tax_rate)
    else:
        income_tax = to_cents(ZERO)
    net_profit_after_tax = ebit - income_tax

    expense_lines = _lines(trial_balance.by_category(AccountCategory.EXPENSE))
    total_expenses = _sum(line.amount for line in expense_lines)

    return ProfitAndLossReport(
        period=period,
        revenue_lines=revenue_lines,
        total_revenue=total_revenue,
        cost_of_sales=cost_of_sales,
        gross_profit=gross_profit,
        operating_expense_lines=operating_lines,
        depreciation=depreciation,
        total_operating_expenses=total_operating_expenses,
        ebitda=ebitda,
        ebit=ebit,
        income_tax=income_tax,
        net_profit_after_tax=net_profit_after_tax,
        expense_lines=expense_lines,
        total_expenses=total_expenses,
        net_profit=total_revenue - total_expenses,
    )


# =========================================================================
# 3. CASH FLOW STATEMENT
# =========================================================================


def derive_cash_flow(
    trial_balance: TrialBalance,
    transactions: Iterable[Transaction],
    cash_account: str,
    period: ReportingPeriod,
) -> CashFlowReport:
    """
    Build the cash flow statement.

    Operating: cash received from revenue less cash paid for expenses.
    Investing: asset purchases in the period, as an outflow.
    Financing: liabilities incurred plus owner investment less owner draw.
    The trial balance covers only the window, so beginning cash is zero.
    """
    cash_received = abs(trial_balance.category_total(AccountCategory.REVENUE))
    cash_paid = trial_balance.category_total(AccountCategory.EXPENSE)
    net_operating = cash_received - cash_paid

    net_investing = -sum_amounts(
        transactions_of_type(transactions, TransactionType.ASSET, period)
    )
    net_financing = -(
        trial_balance.category_total(AccountCategory.LIABILITY)
        + trial_balance.category_total(AccountCategory.EQUITY)
    )

    net_increase = net_operating + net_investing + net_financing
    cash_at_beginning = ZERO
    cash_at_end = cash_at_beginning + net_increase
    per_trial_balance = compute_cash_balance(trial_balance)

    return CashFlowReport(
        period=period,
        cash_account=cash_account,
        cash_received=cash_received,
        cash_paid=cash_paid,
        net_cash_from_operating=net_operating,
        net_cash_from_investing=net_investing,
        net_cash_from_financing=net_financing,
        net_increase_in_cash=net_increase,
        cash_at_beginning=cash_at_beginning,
        cash_at_end=cash_at_end,
        cash_at_end_per_trial_balance=per_trial_balance,
        check=CheckStatus.of(cash_at_end, per_trial_balance),
    )


# =========================================================================
# 4. RENDERER (dict/JSON output)
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Mappings (including ReportBundle) -> dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, Mapping):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
