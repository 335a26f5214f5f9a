"""
Historical P&L and expense breakdown derivers.

These read transactions directly: the historical view spans the whole
unscoped transaction history, month by month, and the expense breakdown
groups the window's expenses by their raw category.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from ledger_kernel.domain.transaction import Transaction, TransactionType
from ledger_kernel.domain.values import ZERO, ReportingPeriod, iter_months, month_start, to_cents
from ledger_reports.models import (
    ExpenseBreakdown,
    ExpenseCategoryAmount,
    HistoricalMonth,
    HistoricalProfitAndLoss,
)
from ledger_reports.statements import transactions_of_type


def derive_historical_profit_and_loss(
    transactions: Iterable[Transaction],
    current: date,
) -> HistoricalProfitAndLoss:
    """
    Revenue, expenses and net profit for every calendar month from the
    earliest transaction through the month containing ``current``.

    Months with no activity are included.  With no transactions at all the
    history is the current month alone.
    """
    transactions = list(transactions)
    earliest = min((t.date for t in transactions), default=current)
    start = min(earliest, current)

    revenue: dict[date, Decimal] = {}
    expenses: dict[date, Decimal] = {}
    for transaction in transactions:
        key = month_start(transaction.date)
        if transaction.transaction_type == TransactionType.INCOME:
            revenue[key] = revenue.get(key, ZERO) + to_cents(transaction.amount)
        elif transaction.transaction_type == TransactionType.EXPENSE:
            expenses[key] = expenses.get(key, ZERO) + to_cents(transaction.amount)

    months = []
    for month in iter_months(start, current):
        month_revenue = to_cents(revenue.get(month, ZERO))
        month_expenses = to_cents(expenses.get(month, ZERO))
        months.append(
            HistoricalMonth(
                month=month,
                revenue=month_revenue,
                expenses=month_expenses,
                net_profit=month_revenue - month_expenses,
            )
        )
    return HistoricalProfitAndLoss(months=tuple(months))


def derive_expense_breakdown(
    transactions: Iterable[Transaction],
    period: ReportingPeriod,
) -> ExpenseBreakdown:
    """Window expenses grouped by category, in first-seen order."""
    totals: dict[str, Decimal] = {}
    for transaction in transactions_of_type(transactions, TransactionType.EXPENSE, period):
        category = transaction.category_tag
        totals[category] = totals.get(category, ZERO) + to_cents(transaction.amount)

    items = tuple(
        ExpenseCategoryAmount(category=category, amount=amount)
        for category, amount in totals.items()
    )
    return ExpenseBreakdown(
        period=period,
        items=items,
        total=to_cents(sum((item.amount for item in items), ZERO)),
    )
