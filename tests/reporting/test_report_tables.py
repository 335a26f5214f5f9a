"""
Table rendering tests.

Rows carry evaluated values; cells derived from other tables carry the
provenance formula that reproduces them on a spreadsheet.
"""

from decimal import Decimal

import pytest

from ledger_kernel.services.ledger_builder import build_postings
from ledger_reports import tables
from ledger_reports.chart_of_accounts import derive_chart_of_accounts
from ledger_reports.config import ReportingConfig
from ledger_reports.models import CellMode, RowKind
from ledger_reports.ratios import QUICK_RATIO, derive_ratios
from ledger_reports.statements import (
    derive_balance_sheet,
    derive_cash_flow,
    derive_profit_and_loss,
)
from ledger_reports.tax import derive_corporate_tax, derive_vat_report

CASH = "Main Bank"


@pytest.fixture
def statement_tables(mixed_tb, mixed_month, march_period, reporting_config):
    bs = tables.render_balance_sheet(derive_balance_sheet(mixed_tb, CASH, march_period))
    pl = tables.render_profit_and_loss(
        derive_profit_and_loss(mixed_tb, march_period, reporting_config), reporting_config,
    )
    cf = tables.render_cash_flow(derive_cash_flow(mixed_tb, mixed_month, CASH, march_period))
    return bs, pl, cf


class TestFormulaHelpers:

    def test_quote_escapes(self):
        assert tables.quote('say "hi"') == '"say ""hi"""'

    def test_tb_sumif(self):
        assert tables.tb_sumif("A5") == "SUMIF('Trial Balance'!A:A, A5, 'Trial Balance'!D:D)"

    def test_ledger_sumif(self):
        assert tables.ledger_sumif("INCOME") == (
            "SUMIF('Detailed Ledger'!E:E, \"INCOME\", 'Detailed Ledger'!F:F)"
        )

    def test_check_formula(self):
        assert tables.check_formula("B8", "B20") == 'IF(B8=B20, "Balanced", "Error")'


class TestTrialBalanceTable:

    def test_layout(self, mixed_tb):
        table = tables.render_trial_balance(mixed_tb)
        assert table.name == "Trial Balance"
        assert table.rows[0].kind == RowKind.HEADER
        assert table.value("Total") == Decimal("29700")
        assert table.value("Total", 2) == Decimal("29700")
        assert table.value("Check") == "Balanced"
        assert table.anchor("total_debits") == f"B{len(mixed_tb) + 2}"

    def test_rows_reference_general_entries(self, mixed_tb):
        table = tables.render_trial_balance(mixed_tb)
        cash_row = table.find_row(CASH)
        r = table.rows.index(cash_row) + 1
        assert cash_row.cells[1].formula == (
            f"SUMIF('General Entries'!C:C, A{r}, 'General Entries'!D:D)"
        )
        assert cash_row.cells[3].formula == f"B{r} - C{r}"
        assert cash_row.cells[3].value == Decimal("4300")

    def test_empty_ledger_totals_have_no_formula(self, trial_balance_for):
        table = tables.render_trial_balance(trial_balance_for([]))
        total = table.find_row("Total")
        assert total.cells[1].formula is None
        assert table.value("Check") == "Balanced"


class TestLedgerTables:

    def test_general_entries(self, mixed_month):
        postings = build_postings(mixed_month, CASH).postings
        table = tables.render_general_entries(postings)
        assert table.to_grid()[0] == ["Date", "Description", "Account", "Debit", "Credit"]
        assert len(table.rows) == len(postings) + 1
        first = table.to_grid()[1]
        assert first[0] == "2024-03-01"
        assert first[2] == CASH
        assert first[3] == Decimal("5000")
        assert first[4] is None

    def test_detailed_ledger_defaults(self, make_transaction):
        txn = make_transaction("assets", "12.345")
        grid = tables.render_detailed_ledger([txn]).to_grid()
        assert grid[1] == [
            txn.transaction_id, "2024-03-15", "Untitled Transaction",
            "Uncategorized", "ASSET", Decimal("12.35"),
        ]

    def test_chart_of_accounts(self, mixed_tb):
        table = tables.render_chart_of_accounts(derive_chart_of_accounts(mixed_tb))
        heading = table.find_row("Ledger Accounts in Use")
        start = table.rows.index(heading)
        assert table.rows[start + 1].kind == RowKind.HEADER
        assert len(table.rows) - start - 2 == len(mixed_tb)


class TestStatementTables:

    def test_balance_sheet(self, statement_tables):
        bs, _, _ = statement_tables
        assert bs.value("Total Assets") == Decimal("10800")
        assert bs.value("Owner-Investment") == Decimal("5000")
        assert bs.value("Less: Owner-Draw") == Decimal("2000")
        assert bs.value("Net Income") == Decimal("3800")
        assert bs.value("Total Liabilities & Equity") == Decimal("10800")
        assert bs.value("Check") == "Balanced"
        assert bs.value("As of 2024-03-31", 0) == "As of 2024-03-31"

        total_assets = bs.anchor("total_assets")
        total_l_and_e = bs.anchor("total_liabilities_and_equity")
        check = bs.find_row("Check").cells[1]
        assert check.formula == f'IF({total_assets}={total_l_and_e}, "Balanced", "Error")'

    def test_balance_sheet_cash_formula(self, statement_tables):
        bs, _, _ = statement_tables
        address = bs.anchor("cash")
        row = bs.rows[int(address[1:]) - 1]
        assert row.label == CASH
        assert row.cells[1].formula == tables.tb_sumif(f"A{address[1:]}")

    def test_profit_and_loss(self, statement_tables):
        _, pl, _ = statement_tables
        assert pl.value("Total Revenue") == Decimal("8000")
        assert pl.value("Gross Profit") == Decimal("8000")
        assert pl.value("Travel") == Decimal("1200")
        assert pl.value("EBITDA") == Decimal("6800")
        assert pl.value("Income Tax") == Decimal("2040.00")
        assert pl.value("Net Profit After Tax") == Decimal("4760.00")
        assert pl.value("Net Profit") == Decimal("3800")
        ebit = pl.anchor("ebit")
        assert pl.find_row("Income Tax").cells[1].formula == (
            f"IF({ebit}>0, ROUND({ebit} * 0.30, 2), 0)"
        )
        assert pl.find_row("Travel").cells[1].formula == tables.tb_sumif('"Expense: travel"')

    def test_cash_flow(self, statement_tables):
        _, _, cf = statement_tables
        assert cf.value("Cash Received from Income") == Decimal("8000")
        assert cf.value("Net Cash from Operating Activities") == Decimal("3800")
        assert cf.value("Net Cash from Investing Activities") == Decimal("-6500.00")
        assert cf.value("Net Cash from Financing Activities") == Decimal("7000")
        assert cf.value("Net Increase in Cash") == Decimal("4300")
        assert cf.value("Cash at End of Period") == Decimal("4300")
        assert cf.value("Check") == "Balanced"
        assert cf.find_row("Net Cash from Investing Activities").cells[1].formula == (
            "-" + tables.ledger_sumif("ASSET")
        )

    def test_month_heading(self, statement_tables):
        _, pl, _ = statement_tables
        assert pl.rows[1].label.startswith("For the Month Ending ")


class TestRatioTable:

    def test_references_statement_anchors(
        self, statement_tables, mixed_tb, mixed_month, march_period, reporting_config,
    ):
        bs, pl, cf = statement_tables
        report = derive_ratios(mixed_tb, mixed_month, CASH, march_period, reporting_config)
        table = tables.render_ratios(report, bs, pl, cf, reporting_config)

        quick = table.find_row(QUICK_RATIO).cells[1]
        assert quick.value == Decimal("1.08")
        cash = bs.reference("cash")
        liabilities = bs.reference("total_liabilities")
        assert cash.startswith("'Balance Sheet'!B")
        assert quick.formula == (
            f'IF({liabilities}<>0, ROUND({cash} / {liabilities}, 2), "N/A")'
        )
        operating = table.find_row("Net Cash from Operating Activities").cells[1]
        assert operating.formula == cf.reference("net_operating")
        assert operating.value == Decimal("3800")

    def test_not_available_value(
        self, salary_rent_tb, salary_and_rent, march_period, reporting_config,
    ):
        bs = tables.render_balance_sheet(derive_balance_sheet(salary_rent_tb, CASH, march_period))
        pl = tables.render_profit_and_loss(
            derive_profit_and_loss(salary_rent_tb, march_period, reporting_config), reporting_config,
        )
        cf = tables.render_cash_flow(
            derive_cash_flow(salary_rent_tb, salary_and_rent, CASH, march_period),
        )
        report = derive_ratios(salary_rent_tb, salary_and_rent, CASH, march_period, reporting_config)
        table = tables.render_ratios(report, bs, pl, cf, reporting_config)
        assert table.value(QUICK_RATIO) == "N/A"


class TestTaxTables:

    def test_vat(self, mixed_month, march_period, reporting_config):
        table = tables.render_vat_report(derive_vat_report(mixed_month, march_period, reporting_config))
        assert table.value("Total Output VAT") == Decimal("1280.00")
        assert table.value("Total Input VAT") == Decimal("672.00")
        assert table.value("Net VAT Payable") == Decimal("608.00")
        first_line = table.rows[4]
        assert first_line.cells[3].formula == "ROUND(C5 * 0.16, 2)"

    def test_corporate_tax(self, salary_and_rent, march_period, reporting_config):
        table = tables.render_corporate_tax(
            derive_corporate_tax(salary_and_rent, march_period, reporting_config),
        )
        assert table.value("Tax Rate") == "30%"
        assert table.value("Net Profit") == Decimal("-12000")
        liability = table.find_row("Corporate Tax Liability").cells[1]
        assert str(liability.value) == "0.00"
        assert table.find_row("Total Income").cells[1].formula == tables.ledger_sumif("INCOME")


class TestCellModes:

    def test_formulas_mode_prefixes_equals(self, mixed_tb):
        table = tables.render_trial_balance(mixed_tb)
        values = table.to_grid(CellMode.VALUES)
        formulas = table.to_grid(CellMode.FORMULAS)
        total = len(mixed_tb) + 1
        assert values[total][1] == Decimal("29700")
        assert formulas[total][1] == f"=SUM(B2:B{total})"
        # plain cells are unchanged
        assert formulas[0] == values[0]

    def test_config_cell_mode_values(self):
        assert ReportingConfig(cell_mode="formulas").cell_mode == CellMode.FORMULAS
