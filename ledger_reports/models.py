"""
Financial Reporting Domain Models (``ledger_reports.models``).

Responsibility
--------------
Frozen dataclass value objects for every derived statement (balance sheet,
profit and loss, cash flow, VAT, corporate tax, depreciation, ratios,
historical P&L, expense breakdown, chart of accounts) and the tabular
output structures (``Cell``, ``TableRow``, ``ReportTable``,
``ReportBundle``) a serializer consumes.

Architecture position
---------------------
**Reports layer** -- pure data definitions with ZERO I/O.  Produced by the
derivers in ``statements``, ``tax``, ``depreciation``, ``ratios`` and
``history``; rendered into tables by ``tables``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* A ``Cell`` carries its evaluated value and, optionally, a provenance
  formula; the rendering mode decides which one a grid shows.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Union

from ledger_kernel.domain.values import ReportingPeriod

# =========================================================================
# Enums
# =========================================================================


class ReportType(str, Enum):
    """Report tables, valued by their table name, in bundle order."""

    CHART_OF_ACCOUNTS = "Chart of Accounts"
    GENERAL_ENTRIES = "General Entries"
    TRIAL_BALANCE = "Trial Balance"
    BALANCE_SHEET = "Balance Sheet"
    CASH_FLOW = "Cash Flow"
    PROFIT_AND_LOSS = "Profit & Loss"
    HISTORICAL_PROFIT_AND_LOSS = "Historical P&L"
    FINANCIAL_RATIOS = "Financial Ratios"
    VAT = "VAT Report"
    CORPORATE_TAX = "Corporate Tax"
    DETAILED_LEDGER = "Detailed Ledger"
    DEPRECIATION = "Depreciation Schedule"
    EXPENSE_BREAKDOWN = "Expense Breakdown"


BUNDLE_ORDER: tuple[ReportType, ...] = tuple(ReportType)


class CheckStatus(str, Enum):
    """Outcome of a terminal check row."""

    BALANCED = "Balanced"
    ERROR = "Error"

    @classmethod
    def of(cls, left: Decimal, right: Decimal) -> CheckStatus:
        return cls.BALANCED if left == right else cls.ERROR


class CellMode(str, Enum):
    """How a grid renders cells that carry a provenance formula."""

    VALUES = "values"
    FORMULAS = "formulas"


class RowKind(str, Enum):
    """Presentation role of a table row."""

    TITLE = "title"
    HEADER = "header"
    LINE = "line"
    SUBTOTAL = "subtotal"
    CHECK = "check"
    BLANK = "blank"


NOT_AVAILABLE = "N/A"

# A ratio is either a quantized Decimal or the "N/A" sentinel.
RatioValue = Union[Decimal, str]


# =========================================================================
# Report Metadata
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to an assembled bundle."""

    entity_name: str
    currency: str
    period_start: date
    period_end: date
    generated_at: str  # ISO format timestamp from injected clock
    cash_account: str
    account_id: str | None = None
    account_name: str | None = None


# =========================================================================
# Shared line type
# =========================================================================


@dataclass(frozen=True)
class StatementLine:
    """
    A labeled amount on a statement.

    ``account_name`` is the trial-balance account the line reads from, if any.
    """

    label: str
    amount: Decimal
    account_name: str | None = None


# =========================================================================
# Balance Sheet
# =========================================================================


@dataclass(frozen=True)
class BalanceSheetReport:
    """
    Balance sheet for the reporting window.

    Total Assets == Total Liabilities + Total Equity is the terminal check.
    """

    period: ReportingPeriod
    cash: StatementLine
    asset_lines: tuple[StatementLine, ...]
    total_assets: Decimal
    liability_lines: tuple[StatementLine, ...]
    total_liabilities: Decimal
    owner_investment: StatementLine
    owner_draw: StatementLine  # positive; presented as a reduction
    other_equity_lines: tuple[StatementLine, ...]
    net_income: Decimal
    total_equity: Decimal
    total_liabilities_and_equity: Decimal
    check: CheckStatus

    @property
    def is_balanced(self) -> bool:
        return self.check == CheckStatus.BALANCED


# =========================================================================
# Profit & Loss
# =========================================================================


@dataclass(frozen=True)
class ProfitAndLossReport:
    """
    Profit and loss statement.

    Multi-step: Revenue - Cost of Sales = Gross Profit; Gross Profit -
    operating expenses = EBITDA; EBITDA - depreciation = EBIT; EBIT - tax =
    Net Profit After Tax.  The full expense listing gives Net Profit.
    """

    period: ReportingPeriod
    revenue_lines: tuple[StatementLine, ...]
    total_revenue: Decimal
    cost_of_sales: Decimal
    gross_profit: Decimal
    operating_expense_lines: tuple[StatementLine, ...]
    depreciation: Decimal
    total_operating_expenses: Decimal
    ebitda: Decimal
    ebit: Decimal
    income_tax: Decimal
    net_profit_after_tax: Decimal
    expense_lines: tuple[StatementLine, ...]
    total_expenses: Decimal
    net_profit: Decimal


# =========================================================================
# Cash Flow
# =========================================================================


@dataclass(frozen=True)
class CashFlowReport:
    """
    Direct-method cash flow for the reporting window.

    Ending cash from the running total must equal the trial-balance cash line.
    """

    period: ReportingPeriod
    cash_account: str
    cash_received: Decimal
    cash_paid: Decimal
    net_cash_from_operating: Decimal
    net_cash_from_investing: Decimal
    net_cash_from_financing: Decimal
    net_increase_in_cash: Decimal
    cash_at_beginning: Decimal
    cash_at_end: Decimal
    cash_at_end_per_trial_balance: Decimal
    check: CheckStatus

    @property
    def reconciles(self) -> bool:
        return self.check == CheckStatus.BALANCED


# =========================================================================
# VAT and Corporate Tax
# =========================================================================


@dataclass(frozen=True)
class VatLine:
    """VAT on a single transaction."""

    transaction_id: str
    transaction_type: str
    amount: Decimal
    vat_amount: Decimal


@dataclass(frozen=True)
class VatReport:
    period: ReportingPeriod
    vat_rate: Decimal
    lines: tuple[VatLine, ...]
    total_output_vat: Decimal
    total_input_vat: Decimal
    net_vat_payable: Decimal


@dataclass(frozen=True)
class CorporateTaxReport:
    period: ReportingPeriod
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    tax_rate: Decimal
    tax_liability: Decimal

    @property
    def tax_rate_display(self) -> str:
        """The rate as a percentage string, e.g. ``"30%"``."""
        percent = (self.tax_rate * 100).normalize()
        return f"{percent:f}%"


# =========================================================================
# Depreciation
# =========================================================================


@dataclass(frozen=True)
class DepreciationLine:
    """Straight-line schedule position of one asset account after month one."""

    asset_name: str
    opening_value: Decimal
    useful_life_months: int
    monthly_depreciation: Decimal
    accumulated_depreciation: Decimal
    net_book_value: Decimal


@dataclass(frozen=True)
class DepreciationSchedule:
    period: ReportingPeriod
    lines: tuple[DepreciationLine, ...]


# =========================================================================
# Ratios
# =========================================================================


@dataclass(frozen=True)
class FinancialRatio:
    """A ratio with the figures it was computed from."""

    name: str
    value: RatioValue
    numerator: Decimal
    denominator: Decimal

    @property
    def is_available(self) -> bool:
        return self.value != NOT_AVAILABLE


@dataclass(frozen=True)
class FinancialRatiosReport:
    period: ReportingPeriod
    ratios: tuple[FinancialRatio, ...]
    net_cash_from_operating: Decimal
    net_increase_in_cash: Decimal

    def get(self, name: str) -> FinancialRatio:
        for ratio in self.ratios:
            if ratio.name == name:
                return ratio
        raise KeyError(name)


# =========================================================================
# History and breakdown
# =========================================================================


@dataclass(frozen=True)
class HistoricalMonth:
    month: date  # first day of the month
    revenue: Decimal
    expenses: Decimal
    net_profit: Decimal

    @property
    def label(self) -> str:
        return self.month.strftime("%B %Y")


@dataclass(frozen=True)
class HistoricalProfitAndLoss:
    months: tuple[HistoricalMonth, ...]


@dataclass(frozen=True)
class ExpenseCategoryAmount:
    category: str
    amount: Decimal


@dataclass(frozen=True)
class ExpenseBreakdown:
    period: ReportingPeriod
    items: tuple[ExpenseCategoryAmount, ...]
    total: Decimal


# =========================================================================
# Chart of Accounts
# =========================================================================


@dataclass(frozen=True)
class LedgerAccountUsage:
    """A ledger account that appears in the trial balance."""

    account_name: str
    category: str
    financial_statement: str


@dataclass(frozen=True)
class ChartOfAccounts:
    reference_rows: tuple[tuple[str, ...], ...]
    accounts_in_use: tuple[LedgerAccountUsage, ...]


# =========================================================================
# Tabular output
# =========================================================================

CellValue = Union[str, int, Decimal, None]


@dataclass(frozen=True)
class Cell:
    """
    One grid cell.

    ``formula`` is a spreadsheet expression without the leading ``=``,
    e.g. ``SUM(B5:B7)``.
    """

    value: CellValue
    formula: str | None = None

    def render(self, mode: CellMode) -> CellValue:
        if mode == CellMode.FORMULAS and self.formula is not None:
            return f"={self.formula}"
        return self.value


@dataclass(frozen=True)
class TableRow:
    cells: tuple[Cell, ...]
    kind: RowKind = RowKind.LINE

    @property
    def label(self) -> CellValue:
        return self.cells[0].value if self.cells else None


@dataclass(frozen=True)
class ReportTable:
    """
    A named 2-D grid.

    ``anchors`` maps a semantic key (``"total_assets"``) to the A1-style
    address of the cell holding that figure, so later tables can reference
    it in their formulas.
    """

    name: str
    rows: tuple[TableRow, ...]
    anchors: tuple[tuple[str, str], ...] = ()

    def to_grid(self, mode: CellMode = CellMode.VALUES) -> list[list[CellValue]]:
        return [[cell.render(mode) for cell in row.cells] for row in self.rows]

    def anchor(self, key: str) -> str:
        """Address of an anchored cell, e.g. ``"B7"``."""
        for name, address in self.anchors:
            if name == key:
                return address
        raise KeyError(f"{self.name} has no anchor {key!r}")

    def reference(self, key: str) -> str:
        """Cross-sheet reference to an anchored cell, e.g. ``'Cash Flow'!B7``."""
        return f"'{self.name}'!{self.anchor(key)}"

    def find_row(self, label: str) -> TableRow:
        """First row whose leading cell equals ``label``."""
        for row in self.rows:
            if row.label == label:
                return row
        raise KeyError(f"{self.name} has no row {label!r}")

    def value(self, label: str, column: int = 1) -> CellValue:
        """Value in ``column`` of the row labeled ``label``."""
        return self.find_row(label).cells[column].value


@dataclass(frozen=True)
class ReportBundle(Mapping[str, ReportTable]):
    """Ordered mapping of table name to table."""

    tables: tuple[ReportTable, ...]

    def __getitem__(self, name: str) -> ReportTable:
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return (table.name for table in self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(table.name for table in self.tables)

    def to_grids(self, mode: CellMode = CellMode.VALUES) -> dict[str, list[list[CellValue]]]:
        return {table.name: table.to_grid(mode) for table in self.tables}
