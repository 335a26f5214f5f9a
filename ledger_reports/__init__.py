"""
Financial statement derivation from a double-entry trial balance.

Public surface:
    assemble / AssemblyResult   one full derivation pass
    ReportingService            database-backed entry point
    ReportingConfig             rates and rendering options
    derive_*                    the individual statement derivers
    ReportBundle / ReportTable  tabular output, values or formulas
"""

from ledger_reports.assembly import AssemblyResult, assemble, integrity_issues
from ledger_reports.chart_of_accounts import derive_chart_of_accounts
from ledger_reports.config import ReportingConfig
from ledger_reports.depreciation import derive_depreciation_schedule, straight_line
from ledger_reports.history import derive_expense_breakdown, derive_historical_profit_and_loss
from ledger_reports.models import (
    BUNDLE_ORDER,
    NOT_AVAILABLE,
    Cell,
    CellMode,
    CheckStatus,
    ReportBundle,
    ReportMetadata,
    ReportTable,
    ReportType,
    RowKind,
    TableRow,
)
from ledger_reports.ratios import derive_ratios
from ledger_reports.service import ReportingService
from ledger_reports.statements import (
    derive_balance_sheet,
    derive_cash_flow,
    derive_profit_and_loss,
    render_to_dict,
)
from ledger_reports.tax import derive_corporate_tax, derive_vat_report

__all__ = [
    "AssemblyResult",
    "BUNDLE_ORDER",
    "Cell",
    "CellMode",
    "CheckStatus",
    "NOT_AVAILABLE",
    "ReportBundle",
    "ReportMetadata",
    "ReportTable",
    "ReportType",
    "ReportingConfig",
    "ReportingService",
    "RowKind",
    "TableRow",
    "assemble",
    "derive_balance_sheet",
    "derive_cash_flow",
    "derive_chart_of_accounts",
    "derive_corporate_tax",
    "derive_depreciation_schedule",
    "derive_expense_breakdown",
    "derive_historical_profit_and_loss",
    "derive_profit_and_loss",
    "derive_ratios",
    "derive_vat_report",
    "integrity_issues",
    "render_to_dict",
    "straight_line",
]
