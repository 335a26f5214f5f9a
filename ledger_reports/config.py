"""
Reporting Configuration Schema.

Jurisdictional rates and statement layout options.  Every constant the
derivers use (VAT rate, corporate tax rate, useful life) is injected from
here so that jurisdictional variants are testable without code changes.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Self

from ledger_kernel.domain.transaction import DEFAULT_CASH_ACCOUNT_NAME
from ledger_kernel.exceptions import ConfigurationError
from ledger_kernel.logging_config import get_logger
from ledger_reports.models import CellMode

logger = get_logger("reports.config")

# camelCase spellings accepted by from_dict()
_ALIASES = {
    "vatRate": "vat_rate",
    "corporateTaxRate": "corporate_tax_rate",
    "depreciationMonths": "depreciation_months",
}

_ONE = Decimal("1")


def _to_decimal(option: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(option, value, "must be a number")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(option, value, "must be a number") from None
    if not result.is_finite():
        raise ConfigurationError(option, value, "must be finite")
    return result


def _to_tags(option: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(option, value, "must be a list of category tags")
    if not all(isinstance(tag, str) and tag for tag in value):
        raise ConfigurationError(option, value, "category tags must be non-empty strings")
    return tuple(value)


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting engine.

    Controls rates, P&L operating-expense lines, ratio classification,
    rendering mode, and integrity-failure behaviour.
    """

    # VAT applied to every INCOME (output) and EXPENSE (input) transaction
    vat_rate: Decimal = Decimal("0.16")

    # Corporate income tax on positive profit
    corporate_tax_rate: Decimal = Decimal("0.30")

    # Straight-line useful life for every asset account
    depreciation_months: int = 60

    # Fixed depreciation line on the P&L
    depreciation_charge: Decimal = Decimal("0.00")

    # Expense tags shown as operating-expense lines on the P&L
    operating_expense_categories: tuple[str, ...] = ("travel",)

    # Asset tags counted as current assets in the current ratio
    current_asset_categories: tuple[str, ...] = ("inventory",)

    # Cash account name when no cash/bank account exists
    cash_account_fallback: str = DEFAULT_CASH_ACCOUNT_NAME

    # Default grid rendering mode
    cell_mode: CellMode = CellMode.VALUES

    # Entity name shown on report metadata
    entity_name: str = "Company"

    # Default currency for reports
    default_currency: str = "USD"

    # Raise on an unbalanced ledger instead of rendering "Error" checks
    fail_on_integrity_error: bool = True

    def __post_init__(self):
        self.vat_rate = _to_decimal("vat_rate", self.vat_rate)
        self.corporate_tax_rate = _to_decimal("corporate_tax_rate", self.corporate_tax_rate)
        self.depreciation_charge = _to_decimal("depreciation_charge", self.depreciation_charge)

        for option in ("vat_rate", "corporate_tax_rate"):
            rate = getattr(self, option)
            if rate < 0 or rate > _ONE:
                raise ConfigurationError(option, rate, "must be between 0 and 1")
        if self.depreciation_charge < 0:
            raise ConfigurationError(
                "depreciation_charge", self.depreciation_charge, "cannot be negative",
            )
        if isinstance(self.depreciation_months, bool) or not isinstance(self.depreciation_months, int):
            raise ConfigurationError(
                "depreciation_months", self.depreciation_months, "must be an integer",
            )
        if self.depreciation_months <= 0:
            raise ConfigurationError(
                "depreciation_months", self.depreciation_months, "must be positive",
            )
        if not isinstance(self.default_currency, str) or len(self.default_currency) != 3:
            raise ConfigurationError(
                "default_currency", self.default_currency,
                "must be a 3-letter ISO 4217 code",
            )
        if not self.cash_account_fallback:
            raise ConfigurationError(
                "cash_account_fallback", self.cash_account_fallback, "cannot be empty",
            )

        self.operating_expense_categories = _to_tags(
            "operating_expense_categories", self.operating_expense_categories,
        )
        self.current_asset_categories = _to_tags(
            "current_asset_categories", self.current_asset_categories,
        )
        try:
            self.cell_mode = CellMode(self.cell_mode)
        except ValueError:
            raise ConfigurationError(
                "cell_mode", self.cell_mode, "must be 'values' or 'formulas'",
            ) from None

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """
        Create config from dictionary.

        Raises:
            ConfigurationError: On an unknown option or an invalid value.
        """
        known = {f.name for f in fields(cls)}
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(key, value, "unknown option")
            normalized[name] = value
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(normalized.keys())},
        )
        return cls(**normalized)
