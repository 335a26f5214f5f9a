"""
Chart of Accounts.

A static reference chart (account classes, sub-accounts, and the individual
accounts grouped by statement) followed by the ledger accounts actually in
use in the trial balance.
"""

from __future__ import annotations

from itertools import zip_longest

from ledger_kernel.domain.trial_balance import TrialBalance
from ledger_reports.models import ChartOfAccounts, LedgerAccountUsage

REFERENCE_HEADER = (
    "Account Classes",
    "Accounts",
    "Sub-Accounts",
    "Financial Statements",
    "Individual Accounts",
    "Sub Accounts",
)

ACCOUNT_CLASSES = ("Revenue", "Expenses", "Assets", "Liabilities", "Equity")

SUB_ACCOUNTS = (
    ("Revenue", "Revenue"),
    ("Revenue", "Contra Revenue"),
    ("Expenses", "Expenses"),
    ("Assets", "Non-current Assets"),
    ("Assets", "Current Assets"),
    ("Liabilities", "Non-current Liabilities"),
    ("Liabilities", "Current Liabilities"),
    ("Equity", "Equity"),
)

_INCOME = "Income Statement"
_BALANCE = "Balance sheet"

INDIVIDUAL_ACCOUNTS = (
    (_INCOME, "Sales", "Revenue"),
    (_INCOME, "Sales-Construction", "Revenue"),
    (_INCOME, "Interest Income", "Revenue"),
    (_INCOME, "Other Income", "Revenue"),
    (_INCOME, "Cost of sales", "Direct Cost"),
    (_INCOME, "Direct Cost-Equipment", "Direct Cost"),
    (_INCOME, "Direct Cost-Labour", "Direct Cost"),
    (_INCOME, "Direct Cost-Motor Vehicle", "Direct Cost"),
    (_INCOME, "Direct Cost-Material", "Direct Cost"),
    (_INCOME, "Direct Cost-Permits & Site Costs", "Direct Cost"),
    (_INCOME, "Marketing", "Operating Expenses"),
    (_INCOME, "Professional fees", "Operating Expenses"),
    (_INCOME, "Telephone & Internet", "Operating Expenses"),
    (_INCOME, "Printing and stationery", "Operating Expenses"),
    (_INCOME, "Business Permits", "Operating Expenses"),
    (_INCOME, "Tourism levy", "Operating Expenses"),
    (_INCOME, "Motor Vehicle expenses", "Operating Expenses"),
    (_INCOME, "Transport & Travel", "Operating Expenses"),
    (_INCOME, "Fuel", "Operating Expenses"),
    (_INCOME, "Meals And Refreshment", "Operating Expenses"),
    (_INCOME, "Electricity", "Operating Expenses"),
    (_INCOME, "Water", "Operating Expenses"),
    (_INCOME, "Staff expenses", "Staff cost expenses"),
    (_INCOME, "Rent", "Establishment Expenses"),
    (_INCOME, "Repairs and Maintenance", "Establishment Expenses"),
    (_INCOME, "Salaries & Wages", "Staff cost expenses"),
    (_INCOME, "Commissions", "Staff cost expenses"),
    (_INCOME, "Housing Levy", "Staff cost expenses"),
    (_INCOME, "Charity & Donations", "Other Expenses"),
    (_INCOME, "Interest Expense", "Expenses"),
    (_INCOME, "Bank charges", "Expenses"),
    (_INCOME, "Credit Card charges", "Expenses"),
    (_INCOME, "M-Pesa charges", "Expenses"),
    (_INCOME, "Open float charges", "Expenses"),
    (_INCOME, "Depreciation Expense", "Expenses"),
    (_INCOME, "Mpesa till charges", "Expenses"),
    (_BALANCE, "Bank/cash", "Current Assets"),
    (_BALANCE, "Inventory", "Current Assets"),
    (_BALANCE, "Accounts Receivable (A/R)", "Current Assets"),
    (_BALANCE, "Rent deposit", "Current Assets"),
    (_BALANCE, "Prepaid Expenses", "Current Assets"),
    (_BALANCE, "Prepaid Insurance", "Current Assets"),
    (_BALANCE, "Staff Advances", "Current Assets"),
    (_BALANCE, "Accumulated Depreciation", "Non-current Assets"),
    (_BALANCE, "Patents & Goodwill", "Non-current Assets"),
    (_BALANCE, "Furniture & Fittings", "Non-current Assets"),
    (_BALANCE, "Leasehold Improvements", "Non-current Assets"),
    (_BALANCE, "Computers", "Non-current Assets"),
    (_BALANCE, "Accounts Payable (A/P)", "Current Liabilities"),
    (_BALANCE, "Short term loan", "Current Liabilities"),
    (_BALANCE, "Deferred Income - current", "Current Liabilities"),
    (_BALANCE, "Accrued Expenses", "Current Liabilities"),
    (_BALANCE, "Accrued Income Taxes", "Current Liabilities"),
    (_BALANCE, "Long-term Debt", "Non-current Liabilities"),
    (_BALANCE, "Deferred Income Taxes", "Non-current Liabilities"),
    (_BALANCE, "Common Stock", "Equity"),
    (_BALANCE, "Retained Earnings", "Equity"),
    (_BALANCE, "Directors' Account", "Equity"),
)


def reference_rows() -> tuple[tuple[str, ...], ...]:
    """The static chart laid out side by side, one tuple per row."""
    rows = []
    for account_class, sub_account, individual in zip_longest(
        ACCOUNT_CLASSES, SUB_ACCOUNTS, INDIVIDUAL_ACCOUNTS,
    ):
        class_cell = account_class or ""
        parent, child = sub_account or ("", "")
        statement, name, group = individual or ("", "", "")
        rows.append((class_cell, parent, child, statement, name, group))
    return tuple(rows)


def derive_chart_of_accounts(trial_balance: TrialBalance) -> ChartOfAccounts:
    return ChartOfAccounts(
        reference_rows=reference_rows(),
        accounts_in_use=tuple(
            LedgerAccountUsage(
                account_name=row.account_name,
                category=row.category.label,
                financial_statement=row.category.financial_statement,
            )
            for row in trial_balance
        ),
    )
