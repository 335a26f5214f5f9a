"""
VAT and corporate tax derivers.

Both work from the scoped transaction set for the reporting window rather
than from the trial balance: VAT is a per-transaction computation, and the
corporate tax summary is the transaction-level cross-check of the P&L
net profit.  Amounts are rounded to cents exactly as the ledger builder
rounds them, so the two views agree.
"""

from __future__ import annotations

from collections.abc import Iterable

from ledger_kernel.domain.transaction import Transaction, TransactionType
from ledger_kernel.domain.values import ZERO, ReportingPeriod, to_cents
from ledger_reports.config import ReportingConfig
from ledger_reports.models import CorporateTaxReport, VatLine, VatReport
from ledger_reports.statements import sum_amounts, transactions_of_type


def derive_vat_report(
    transactions: Iterable[Transaction],
    period: ReportingPeriod,
    config: ReportingConfig,
) -> VatReport:
    """
    VAT at ``config.vat_rate`` on every transaction in the window.

    Every transaction is listed; only INCOME feeds output VAT and only
    EXPENSE feeds input VAT.  VAT is rounded per row and the totals sum the
    rounded rows.
    """
    lines: list[VatLine] = []
    output_vat = ZERO
    input_vat = ZERO
    for transaction in transactions:
        if not period.contains(transaction.date):
            continue
        amount = to_cents(transaction.amount)
        vat = to_cents(amount * config.vat_rate)
        transaction_type = transaction.transaction_type
        if transaction_type == TransactionType.INCOME:
            output_vat += vat
        elif transaction_type == TransactionType.EXPENSE:
            input_vat += vat
        lines.append(
            VatLine(
                transaction_id=transaction.transaction_id,
                transaction_type=(
                    transaction_type.value if transaction_type else transaction.raw_type
                ),
                amount=amount,
                vat_amount=vat,
            )
        )

    return VatReport(
        period=period,
        vat_rate=config.vat_rate,
        lines=tuple(lines),
        total_output_vat=to_cents(output_vat),
        total_input_vat=to_cents(input_vat),
        net_vat_payable=to_cents(output_vat - input_vat),
    )


def derive_corporate_tax(
    transactions: Iterable[Transaction],
    period: ReportingPeriod,
    config: ReportingConfig,
) -> CorporateTaxReport:
    """Tax at ``config.corporate_tax_rate`` on positive net profit, else zero."""
    transactions = list(transactions)
    total_income = to_cents(
        sum_amounts(transactions_of_type(transactions, TransactionType.INCOME, period))
    )
    total_expenses = to_cents(
        sum_amounts(transactions_of_type(transactions, TransactionType.EXPENSE, period))
    )
    net_profit = total_income - total_expenses
    if net_profit > ZERO:
        tax_liability = to_cents(net_profit * config.corporate_tax_rate)
    else:
        tax_liability = to_cents(ZERO)

    return CorporateTaxReport(
        period=period,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=net_profit,
        tax_rate=config.corporate_tax_rate,
        tax_liability=tax_liability,
    )
