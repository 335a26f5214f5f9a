"""
Tabular rendering (``ledger_reports.tables``).

Responsibility
--------------
Turns derived report dataclasses into ``ReportTable`` grids.  Every numeric
cell carries the evaluated value and, where the figure is derived from
another table, a spreadsheet provenance formula (``SUMIF``, ``IF``,
``ROUND``, cross-sheet references).  A serializer chooses live formulas or
baked numbers through ``CellMode`` without touching derivation logic.

Architecture position
---------------------
**Reports layer** -- pure presentation.  Values always come from the
derivers; formulas are never evaluated here.

Invariants enforced
-------------------
* Row numbers in formulas are 1-based and match the row's position in the
  table, so a grid written verbatim to a sheet resolves every reference.
* Cross-sheet references only point at tables rendered earlier in the
  bundle (via anchors) or at whole columns of any table.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from ledger_kernel.domain.dtos import Posting
from ledger_kernel.domain.transaction import Transaction
from ledger_kernel.domain.trial_balance import TrialBalance
from ledger_kernel.domain.values import ReportingPeriod, to_cents
from ledger_reports.chart_of_accounts import REFERENCE_HEADER
from ledger_reports.config import ReportingConfig
from ledger_reports.models import (
    BalanceSheetReport,
    CashFlowReport,
    Cell,
    CellValue,
    ChartOfAccounts,
    CheckStatus,
    CorporateTaxReport,
    DepreciationSchedule,
    ExpenseBreakdown,
    FinancialRatiosReport,
    HistoricalProfitAndLoss,
    ProfitAndLossReport,
    ReportTable,
    ReportType,
    RowKind,
    TableRow,
    VatReport,
)
from ledger_reports import ratios as ratio_names

_TB = ReportType.TRIAL_BALANCE.value
_GE = ReportType.GENERAL_ENTRIES.value
_DL = ReportType.DETAILED_LEDGER.value


# =========================================================================
# Formula helpers
# =========================================================================


def quote(text: str) -> str:
    """Spreadsheet string literal."""
    return '"' + text.replace('"', '""') + '"'


def tb_sumif(criteria: str) -> str:
    """Sum of trial-balance net balances for accounts matching ``criteria``."""
    return f"SUMIF('{_TB}'!A:A, {criteria}, '{_TB}'!D:D)"


def ledger_sumif(transaction_type: str) -> str:
    """Sum of detailed-ledger amounts for one transaction type."""
    return f"SUMIF('{_DL}'!E:E, {quote(transaction_type)}, '{_DL}'!F:F)"


def check_formula(left: str, right: str) -> str:
    return f'IF({left}={right}, "{CheckStatus.BALANCED.value}", "{CheckStatus.ERROR.value}")'


def _sum_range(column: str, first: int, last: int) -> str | None:
    if last < first:
        return None
    return f"SUM({column}{first}:{column}{last})"


def _month_heading(period: ReportingPeriod) -> str:
    return f"For the Month Ending {period.label}"


def _as_of_heading(period: ReportingPeriod) -> str:
    return f"As of {period.end.isoformat()}"


class _Sheet:
    """Row-by-row table builder that tracks row numbers and anchors."""

    def __init__(self, name: str):
        self.name = name
        self._rows: list[TableRow] = []
        self._anchors: list[tuple[str, str]] = []

    @property
    def next_row(self) -> int:
        return len(self._rows) + 1

    def add(
        self,
        *cells: Cell | CellValue,
        kind: RowKind = RowKind.LINE,
        anchor: str | None = None,
    ) -> int:
        row_number = self.next_row
        self._rows.append(
            TableRow(
                cells=tuple(c if isinstance(c, Cell) else Cell(c) for c in cells),
                kind=kind,
            )
        )
        if anchor is not None:
            self.mark(anchor, f"B{row_number}")
        return row_number

    def mark(self, key: str, address: str) -> None:
        self._anchors.append((key, address))

    def title(self, text: str) -> int:
        return self.add(text, kind=RowKind.TITLE)

    def header(self, *labels: str) -> int:
        return self.add(*labels, kind=RowKind.HEADER)

    def blank(self) -> int:
        return self.add(kind=RowKind.BLANK)

    def total(self, label: str, value: Decimal, formula: str | None, anchor: str | None = None) -> int:
        return self.add(label, Cell(value, formula), kind=RowKind.SUBTOTAL, anchor=anchor)

    def check(self, status: CheckStatus, formula: str) -> int:
        return self.add("Check", Cell(status.value, formula), kind=RowKind.CHECK)

    def build(self) -> ReportTable:
        return ReportTable(
            name=self.name,
            rows=tuple(self._rows),
            anchors=tuple(self._anchors),
        )


def _type_label(transaction: Transaction) -> str:
    transaction_type = transaction.transaction_type
    return transaction_type.value if transaction_type else transaction.raw_type


# =========================================================================
# Ledger tables
# =========================================================================


def render_chart_of_accounts(chart: ChartOfAccounts) -> ReportTable:
    sheet = _Sheet(ReportType.CHART_OF_ACCOUNTS.value)
    sheet.header(*REFERENCE_HEADER)
    for row in chart.reference_rows:
        sheet.add(*row)
    sheet.blank()
    sheet.title("Ledger Accounts in Use")
    sheet.header("Account", "Category", "Financial Statement")
    for usage in chart.accounts_in_use:
        sheet.add(usage.account_name, usage.category, usage.financial_statement)
    return sheet.build()


def render_general_entries(postings: Iterable[Posting]) -> ReportTable:
    sheet = _Sheet(_GE)
    sheet.header("Date", "Description", "Account", "Debit", "Credit")
    for posting in postings:
        sheet.add(
            posting.date.isoformat(),
            posting.description,
            posting.account_name,
            posting.debit_amount,
            posting.credit_amount,
        )
    return sheet.build()


def render_trial_balance(trial_balance: TrialBalance) -> ReportTable:
    sheet = _Sheet(_TB)
    sheet.header("Account", "Debit", "Credit", "Balance")
    first = sheet.next_row
    for row in trial_balance:
        r = sheet.next_row
        sheet.add(
            row.account_name,
            Cell(row.total_debit, f"SUMIF('{_GE}'!C:C, A{r}, '{_GE}'!D:D)"),
            Cell(row.total_credit, f"SUMIF('{_GE}'!C:C, A{r}, '{_GE}'!E:E)"),
            Cell(row.net_balance, f"B{r} - C{r}"),
        )
    last = sheet.next_row - 1

    total_row = sheet.add(
        "Total",
        Cell(trial_balance.total_debits, _sum_range("B", first, last)),
        Cell(trial_balance.total_credits, _sum_range("C", first, last)),
        Cell(
            trial_balance.total_debits - trial_balance.total_credits,
            _sum_range("D", first, last),
        ),
        kind=RowKind.SUBTOTAL,
    )
    sheet.mark("total_debits", f"B{total_row}")
    sheet.mark("total_credits", f"C{total_row}")
    sheet.check(
        CheckStatus.of(trial_balance.total_debits, trial_balance.total_credits),
        check_formula(f"B{total_row}", f"C{total_row}"),
    )
    return sheet.build()


def render_detailed_ledger(transactions: Iterable[Transaction]) -> ReportTable:
    sheet = _Sheet(_DL)
    sheet.header("Transaction ID", "Date", "Description", "Category", "Type", "Amount")
    for transaction in transactions:
        sheet.add(
            transaction.transaction_id,
            transaction.date.isoformat(),
            transaction.display_description,
            transaction.category_tag,
            _type_label(transaction),
            to_cents(transaction.amount),
        )
    return sheet.build()


# =========================================================================
# Statements
# =========================================================================


def render_balance_sheet(report: BalanceSheetReport) -> ReportTable:
    sheet = _Sheet(ReportType.BALANCE_SHEET.value)
    sheet.title("Balance Sheet")
    sheet.add(_as_of_heading(report.period))
    sheet.blank()

    sheet.header("Assets")
    first_asset = sheet.next_row
    r = sheet.next_row
    sheet.add(report.cash.label, Cell(report.cash.amount, tb_sumif(f"A{r}")), anchor="cash")
    for line in report.asset_lines:
        r = sheet.next_row
        sheet.add(line.label, Cell(line.amount, tb_sumif(f"A{r}")))
    total_assets = sheet.total(
        "Total Assets", report.total_assets,
        _sum_range("B", first_asset, sheet.next_row - 1), anchor="total_assets",
    )
    sheet.blank()

    sheet.header("Liabilities")
    first_liability = sheet.next_row
    for line in report.liability_lines:
        r = sheet.next_row
        sheet.add(line.label, Cell(line.amount, f"-{tb_sumif(f'A{r}')}"))
    total_liabilities = sheet.total(
        "Total Liabilities", report.total_liabilities,
        _sum_range("B", first_liability, sheet.next_row - 1), anchor="total_liabilities",
    )
    sheet.blank()

    sheet.header("Equity")
    investment = sheet.add(
        report.owner_investment.label,
        Cell(
            report.owner_investment.amount,
            f"-{tb_sumif(quote(report.owner_investment.account_name))}",
        ),
        anchor="owner_investment",
    )
    draw = sheet.add(
        report.owner_draw.label,
        Cell(report.owner_draw.amount, tb_sumif(quote(report.owner_draw.account_name))),
        anchor="owner_draw",
    )
    other_rows = []
    for line in report.other_equity_lines:
        r = sheet.next_row
        other_rows.append(sheet.add(line.label, Cell(line.amount, f"-{tb_sumif(f'A{r}')}")))
    net_income = sheet.add(
        "Net Income",
        Cell(
            report.net_income,
            f"-({tb_sumif(quote('Revenue:*'))} + {tb_sumif(quote('Expense:*'))})",
        ),
        anchor="net_income",
    )
    equity_formula = f"B{investment} - B{draw}"
    equity_formula += "".join(f" + B{r}" for r in other_rows)
    equity_formula += f" + B{net_income}"
    total_equity = sheet.total(
        "Total Equity", report.total_equity, equity_formula, anchor="total_equity",
    )
    sheet.blank()

    total_l_and_e = sheet.total(
        "Total Liabilities & Equity", report.total_liabilities_and_equity,
        f"B{total_liabilities} + B{total_equity}",
        anchor="total_liabilities_and_equity",
    )
    sheet.check(report.check, check_formula(f"B{total_assets}", f"B{total_l_and_e}"))
    return sheet.build()


def render_cash_flow(report: CashFlowReport) -> ReportTable:
    sheet = _Sheet(ReportType.CASH_FLOW.value)
    sheet.title("Cash Flow Statement")
    sheet.add(_month_heading(report.period))
    sheet.blank()

    sheet.header("Cash Flows from Operating Activities")
    received = sheet.add(
        "Cash Received from Income",
        Cell(report.cash_received, f"ABS({tb_sumif(quote('Revenue:*'))})"),
    )
    paid = sheet.add(
        "Cash Paid for Expenses",
        Cell(report.cash_paid, tb_sumif(quote("Expense:*"))),
    )
    operating = sheet.total(
        "Net Cash from Operating Activities", report.net_cash_from_operating,
        f"B{received} - B{paid}", anchor="net_operating",
    )
    sheet.blank()

    sheet.header("Cash Flows from Investing Activities")
    investing = sheet.total(
        "Net Cash from Investing Activities", report.net_cash_from_investing,
        f"-{ledger_sumif('ASSET')}", anchor="net_investing",
    )
    sheet.blank()

    sheet.header("Cash Flows from Financing Activities")
    financing = sheet.total(
        "Net Cash from Financing Activities", report.net_cash_from_financing,
        f"-({tb_sumif(quote('Liability:*'))} + {tb_sumif(quote('Equity:*'))})",
        anchor="net_financing",
    )
    sheet.blank()

    increase = sheet.total(
        "Net Increase in Cash", report.net_increase_in_cash,
        f"B{operating} + B{investing} + B{financing}", anchor="net_increase",
    )
    beginning = sheet.add("Cash at Beginning of Period", report.cash_at_beginning)
    end = sheet.total(
        "Cash at End of Period", report.cash_at_end,
        f"B{beginning} + B{increase}", anchor="cash_at_end",
    )
    per_tb = sheet.add(
        "Cash at End of Period (from Trial Balance)",
        Cell(report.cash_at_end_per_trial_balance, tb_sumif(quote(report.cash_account))),
    )
    sheet.check(report.check, check_formula(f"B{end}", f"B{per_tb}"))
    return sheet.build()


def render_profit_and_loss(report: ProfitAndLossReport, config: ReportingConfig) -> ReportTable:
    sheet = _Sheet(ReportType.PROFIT_AND_LOSS.value)
    sheet.title("Profit & Loss Statement")
    sheet.add(_month_heading(report.period))
    sheet.blank()

    sheet.header("Revenue")
    first = sheet.next_row
    for line in report.revenue_lines:
        r = sheet.next_row
        sheet.add(line.label, Cell(line.amount, f"-{tb_sumif(f'A{r}')}"))
    total_revenue = sheet.total(
        "Total Revenue", report.total_revenue,
        _sum_range("B", first, sheet.next_row - 1), anchor="total_revenue",
    )
    cost_of_sales = sheet.add("Cost of Sales", report.cost_of_sales)
    gross_profit = sheet.total(
        "Gross Profit", report.gross_profit,
        f"B{total_revenue} - B{cost_of_sales}", anchor="gross_profit",
    )
    sheet.blank()

    sheet.header("Operating Expenses")
    first_opex = sheet.next_row
    for line in report.operating_expense_lines:
        sheet.add(line.label, Cell(line.amount, tb_sumif(quote(line.account_name))))
    last_opex = sheet.next_row - 1
    depreciation = sheet.add("Depreciation", report.depreciation)
    sheet.total(
        "Total Operating Expenses", report.total_operating_expenses,
        _sum_range("B", first_opex, depreciation),
    )
    sheet.blank()

    opex_range = _sum_range("B", first_opex, last_opex)
    ebitda = sheet.total(
        "EBITDA", report.ebitda,
        f"B{gross_profit} - {opex_range}" if opex_range else f"B{gross_profit}",
        anchor="ebitda",
    )
    ebit = sheet.total("EBIT", report.ebit, f"B{ebitda} - B{depreciation}", anchor="ebit")
    rate = config.corporate_tax_rate
    tax = sheet.add(
        "Income Tax",
        Cell(report.income_tax, f"IF(B{ebit}>0, ROUND(B{ebit} * {rate}, 2), 0)"),
    )
    sheet.total(
        "Net Profit After Tax", report.net_profit_after_tax,
        f"B{ebit} - B{tax}", anchor="net_profit_after_tax",
    )
    sheet.blank()

    sheet.header("Expenses")
    first_expense = sheet.next_row
    for line in report.expense_lines:
        r = sheet.next_row
        sheet.add(line.label, Cell(line.amount, tb_sumif(f"A{r}")))
    total_expenses = sheet.total(
        "Total Expenses", report.total_expenses,
        _sum_range("B", first_expense, sheet.next_row - 1), anchor="total_expenses",
    )
    sheet.blank()
    sheet.total(
        "Net Profit", report.net_profit,
        f"B{total_revenue} - B{total_expenses}", anchor="net_profit",
    )
    return sheet.build()


def render_historical_profit_and_loss(report: HistoricalProfitAndLoss) -> ReportTable:
    sheet = _Sheet(ReportType.HISTORICAL_PROFIT_AND_LOSS.value)
    sheet.title("Historical Profit & Loss")
    sheet.header("Month", "Revenue", "Expenses", "Net Profit")
    for month in report.months:
        r = sheet.next_row
        sheet.add(month.label, month.revenue, month.expenses, Cell(month.net_profit, f"B{r} - C{r}"))
    return sheet.build()


def render_ratios(
    report: FinancialRatiosReport,
    balance_sheet: ReportTable,
    profit_and_loss: ReportTable,
    cash_flow: ReportTable,
    config: ReportingConfig,
) -> ReportTable:
    """
    Render the ratio table.

    Ratio formulas reference the balance sheet, P&L and cash flow tables,
    which precede this table in the bundle.
    """
    bs = balance_sheet.reference
    pl = profit_and_loss.reference

    inventory = "".join(
        f" + {tb_sumif(quote(f'Asset: {tag}'))}" for tag in config.current_asset_categories
    )
    operands = {
        ratio_names.CURRENT_RATIO: (f"({bs('cash')}{inventory})", bs("total_liabilities")),
        ratio_names.QUICK_RATIO: (bs("cash"), bs("total_liabilities")),
        ratio_names.GROSS_MARGIN: (pl("gross_profit"), pl("total_revenue")),
        ratio_names.NET_MARGIN: (pl("net_profit_after_tax"), pl("total_revenue")),
        ratio_names.ASSET_TURNOVER: (pl("total_revenue"), bs("total_assets")),
        ratio_names.DEBT_TO_EQUITY: (f"ABS({bs('total_liabilities')})", bs("total_equity")),
        ratio_names.RETURN_ON_ASSETS: (pl("net_profit_after_tax"), bs("total_assets")),
        ratio_names.RETURN_ON_EQUITY: (pl("net_profit_after_tax"), bs("total_equity")),
    }

    sheet = _Sheet(ReportType.FINANCIAL_RATIOS.value)
    sheet.title("Financial Ratios")
    sheet.add(_as_of_heading(report.period))
    sheet.blank()
    sheet.header("Ratio", "Value")
    for ratio in report.ratios:
        numerator, denominator = operands[ratio.name]
        sheet.add(
            ratio.name,
            Cell(
                ratio.value,
                f'IF({denominator}<>0, ROUND({numerator} / {denominator}, 2), "N/A")',
            ),
        )
    sheet.add(
        "Net Cash from Operating Activities",
        Cell(report.net_cash_from_operating, cash_flow.reference("net_operating")),
    )
    sheet.add(
        "Net Increase in Cash",
        Cell(report.net_increase_in_cash, cash_flow.reference("net_increase")),
    )
    return sheet.build()


# =========================================================================
# Tax and schedules
# =========================================================================


def render_vat_report(report: VatReport) -> ReportTable:
    sheet = _Sheet(ReportType.VAT.value)
    sheet.title("VAT Report")
    sheet.add(_month_heading(report.period))
    sheet.blank()
    sheet.header("Transaction ID", "Type", "Amount", "VAT Amount")
    first = sheet.next_row
    for line in report.lines:
        r = sheet.next_row
        sheet.add(
            line.transaction_id,
            line.transaction_type,
            line.amount,
            Cell(line.vat_amount, f"ROUND(C{r} * {report.vat_rate}, 2)"),
        )
    last = sheet.next_row - 1
    sheet.blank()

    def by_type(label: str) -> str | None:
        if last < first:
            return None
        return f"SUMIF(B{first}:B{last}, {quote(label)}, D{first}:D{last})"

    output_vat = sheet.total("Total Output VAT", report.total_output_vat, by_type("INCOME"))
    input_vat = sheet.total("Total Input VAT", report.total_input_vat, by_type("EXPENSE"))
    sheet.total(
        "Net VAT Payable", report.net_vat_payable, f"B{output_vat} - B{input_vat}",
    )
    return sheet.build()


def render_corporate_tax(report: CorporateTaxReport) -> ReportTable:
    sheet = _Sheet(ReportType.CORPORATE_TAX.value)
    sheet.title("Corporate Tax Summary")
    sheet.add(_month_heading(report.period))
    sheet.blank()
    income = sheet.add("Total Income", Cell(report.total_income, ledger_sumif("INCOME")))
    expenses = sheet.add("Total Expenses", Cell(report.total_expenses, ledger_sumif("EXPENSE")))
    net_profit = sheet.total(
        "Net Profit", report.net_profit, f"B{income} - B{expenses}", anchor="net_profit",
    )
    sheet.add("Tax Rate", report.tax_rate_display)
    sheet.total(
        "Corporate Tax Liability", report.tax_liability,
        f"IF(B{net_profit}>0, ROUND(B{net_profit} * {report.tax_rate}, 2), 0)",
        anchor="tax_liability",
    )
    return sheet.build()


def render_depreciation_schedule(report: DepreciationSchedule) -> ReportTable:
    sheet = _Sheet(ReportType.DEPRECIATION.value)
    sheet.header(
        "Asset Name",
        "Opening Value",
        "Useful Life (Months)",
        "Monthly Depreciation",
        "Accumulated Depreciation",
        "Net Book Value",
    )
    for line in report.lines:
        r = sheet.next_row
        sheet.add(
            line.asset_name,
            Cell(line.opening_value, tb_sumif(f"A{r}")),
            line.useful_life_months,
            Cell(line.monthly_depreciation, f"ROUND(B{r} / C{r}, 2)"),
            Cell(line.accumulated_depreciation, f"D{r}"),
            Cell(line.net_book_value, f"B{r} - E{r}"),
        )
    return sheet.build()


def render_expense_breakdown(report: ExpenseBreakdown) -> ReportTable:
    sheet = _Sheet(ReportType.EXPENSE_BREAKDOWN.value)
    sheet.title("Expense Breakdown")
    sheet.add(_month_heading(report.period))
    sheet.blank()
    sheet.header("Category", "Amount")
    first = sheet.next_row
    for item in report.items:
        sheet.add(item.category, item.amount)
    sheet.total(
        "Total", report.total, _sum_range("B", first, sheet.next_row - 1), anchor="total",
    )
    return sheet.build()

