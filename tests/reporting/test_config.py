"""
Tests for reporting configuration.

Verifies config validation, defaults, and factory methods.
NO database required.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_kernel.exceptions import ConfigurationError
from ledger_reports.config import ReportingConfig
from ledger_reports.models import CellMode


class TestReportingConfig:
    """Tests for ReportingConfig."""

    def test_defaults(self):
        config = ReportingConfig.with_defaults()
        assert config.vat_rate == Decimal("0.16")
        assert config.corporate_tax_rate == Decimal("0.30")
        assert config.depreciation_months == 60
        assert config.depreciation_charge == Decimal("0")
        assert config.operating_expense_categories == ("travel",)
        assert config.current_asset_categories == ("inventory",)
        assert config.cash_account_fallback == "Bank/cash"
        assert config.cell_mode == CellMode.VALUES
        assert config.default_currency == "USD"
        assert config.fail_on_integrity_error is True

    def test_rates_coerced_to_decimal(self):
        config = ReportingConfig(vat_rate="0.2", corporate_tax_rate=0.25)
        assert config.vat_rate == Decimal("0.2")
        assert config.corporate_tax_rate == Decimal("0.25")

    def test_sequences_become_tuples(self):
        config = ReportingConfig(operating_expense_categories=["travel", "fuel"])
        assert config.operating_expense_categories == ("travel", "fuel")

    @pytest.mark.parametrize(
        "kwargs, option",
        [
            ({"vat_rate": "1.5"}, "vat_rate"),
            ({"vat_rate": "-0.01"}, "vat_rate"),
            ({"vat_rate": "abc"}, "vat_rate"),
            ({"vat_rate": "NaN"}, "vat_rate"),
            ({"corporate_tax_rate": True}, "corporate_tax_rate"),
            ({"depreciation_months": 0}, "depreciation_months"),
            ({"depreciation_months": "60"}, "depreciation_months"),
            ({"depreciation_charge": "-1"}, "depreciation_charge"),
            ({"default_currency": "US"}, "default_currency"),
            ({"cash_account_fallback": ""}, "cash_account_fallback"),
            ({"cell_mode": "live"}, "cell_mode"),
            ({"operating_expense_categories": "travel"}, "operating_expense_categories"),
            ({"operating_expense_categories": [""]}, "operating_expense_categories"),
            ({"current_asset_categories": "inventory"}, "current_asset_categories"),
            ({"current_asset_categories": [1, 2]}, "current_asset_categories"),
        ],
    )
    def test_invalid_values_rejected(self, kwargs, option):
        with pytest.raises(ConfigurationError) as excinfo:
            ReportingConfig(**kwargs)
        assert excinfo.value.option == option

    def test_from_dict(self):
        config = ReportingConfig.from_dict({
            "default_currency": "GBP",
            "entity_name": "UK Ltd",
        })
        assert config.default_currency == "GBP"
        assert config.entity_name == "UK Ltd"

    def test_from_dict_camel_case_aliases(self):
        config = ReportingConfig.from_dict({
            "vatRate": "0.075",
            "corporateTaxRate": "0.21",
            "depreciationMonths": 36,
        })
        assert config.vat_rate == Decimal("0.075")
        assert config.corporate_tax_rate == Decimal("0.21")
        assert config.depreciation_months == 36

    def test_from_dict_unknown_option(self):
        with pytest.raises(ConfigurationError, match="unknown option"):
            ReportingConfig.from_dict({"vat": "0.16"})

    def test_from_dict_logged(self, captured_logs):
        ReportingConfig.from_dict({"vatRate": "0.1"})
        record = next(
            r for r in captured_logs() if r["message"] == "reporting_config_loading_from_dict"
        )
        assert record["keys"] == ["vat_rate"]

    def test_from_dict_category_lists(self):
        config = ReportingConfig.from_dict({
            "operating_expense_categories": ["travel", "fuel"],
            "current_asset_categories": [],
        })
        assert config.operating_expense_categories == ("travel", "fuel")
        assert config.current_asset_categories == ()

    def test_from_dict_scalar_category_rejected(self):
        with pytest.raises(ConfigurationError, match="must be a list") as excinfo:
            ReportingConfig.from_dict({"operating_expense_categories": "travel"})
        assert excinfo.value.option == "operating_expense_categories"
