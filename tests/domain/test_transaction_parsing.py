"""
Boundary parsing of transaction and account records.

Malformed input fails with a typed input-validation error identifying the
offending record; absent optional fields fall back to their defaults.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledger_kernel.domain.transaction import (
    DEFAULT_CASH_ACCOUNT_NAME,
    AccountInfo,
    Transaction,
    TransactionType,
    parse_account,
    parse_transaction,
    resolve_cash_account_name,
    select_account,
)
from ledger_kernel.exceptions import (
    InputValidationError,
    InvalidAmountError,
    InvalidDateError,
    MissingFieldError,
)


def _record(**overrides) -> dict:
    record = {
        "id": "t-1",
        "type": "EXPENSE",
        "category": "rent",
        "amount": "20000",
        "date": "2024-03-06",
        "accountId": "acct-1",
        "description": "March rent",
    }
    record.update(overrides)
    return record


class TestTransactionType:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("INCOME", TransactionType.INCOME),
            ("income", TransactionType.INCOME),
            ("ASSETS", TransactionType.ASSET),
            ("Liabilities", TransactionType.LIABILITY),
            ("EQUITY", TransactionType.EQUITY),
        ],
    )
    def test_parse(self, raw, expected):
        assert TransactionType.parse(raw) == expected

    @pytest.mark.parametrize("raw", ["TRANSFER", "", None, "   "])
    def test_unknown_is_none(self, raw):
        assert TransactionType.parse(raw) is None


class TestParseTransaction:

    def test_full_record(self):
        txn = parse_transaction(_record())
        assert txn.transaction_id == "t-1"
        assert txn.transaction_type == TransactionType.EXPENSE
        assert txn.amount == Decimal("20000")
        assert txn.date == date(2024, 3, 6)
        assert txn.account_id == "acct-1"
        assert txn.category_tag == "rent"
        assert txn.display_description == "March rent"

    def test_snake_case_keys(self):
        record = _record()
        record["account_id"] = record.pop("accountId")
        assert parse_transaction(record).account_id == "acct-1"

    def test_defaults_for_missing_optional_fields(self):
        txn = parse_transaction(_record(category=None, description=None))
        assert txn.category is None
        assert txn.category_tag == "Uncategorized"
        assert txn.display_description == "Untitled Transaction"

    def test_empty_optional_fields_become_none(self):
        txn = parse_transaction(_record(category="", description=""))
        assert txn.category is None
        assert txn.description is None

    def test_non_string_text_fields_coerced(self):
        txn = parse_transaction(_record(category=2024, description=12.5))
        assert txn.category == "2024"
        assert txn.category_tag == "2024"
        assert txn.description == "12.5"

    def test_unknown_type_kept_verbatim(self):
        txn = parse_transaction(_record(type="TRANSFER"))
        assert txn.raw_type == "TRANSFER"
        assert txn.transaction_type is None

    @pytest.mark.parametrize("value", [12.5, 3, "7.25", Decimal("1.10")])
    def test_numeric_amounts(self, value):
        assert parse_transaction(_record(amount=value)).amount == Decimal(str(value))

    def test_datetime_truncated_to_date(self):
        txn = parse_transaction(_record(date=datetime(2024, 3, 6, 18, 30)))
        assert txn.date == date(2024, 3, 6)

    def test_iso_datetime_string(self):
        assert parse_transaction(_record(date="2024-03-06T09:15:00")).date == date(2024, 3, 6)

    @pytest.mark.parametrize("amount", ["abc", None, "-5", "NaN", True, [1]])
    def test_bad_amount(self, amount):
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_transaction(_record(amount=amount))
        assert exc_info.value.record_id == "t-1"
        assert exc_info.value.field == "amount"
        assert exc_info.value.code == "INVALID_AMOUNT"

    @pytest.mark.parametrize("amount", ["1e27", "1000000000000000", 10**20])
    def test_amount_out_of_range(self, amount):
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_transaction(_record(amount=amount))
        assert exc_info.value.record_id == "t-1"
        assert exc_info.value.reason == "amount out of range"

    def test_largest_amount_accepted(self):
        txn = parse_transaction(_record(amount="999999999999999.99"))
        assert txn.amount == Decimal("999999999999999.99")

    @pytest.mark.parametrize("value", ["06/03/2024", "", None, 20240306])
    def test_bad_date(self, value):
        with pytest.raises(InvalidDateError) as exc_info:
            parse_transaction(_record(date=value))
        assert exc_info.value.record_id == "t-1"
        assert exc_info.value.code == "INVALID_DATE"

    def test_missing_id(self):
        record = _record()
        del record["id"]
        with pytest.raises(MissingFieldError) as exc_info:
            parse_transaction(record)
        assert exc_info.value.field == "id"

    def test_missing_type(self):
        record = _record()
        del record["type"]
        with pytest.raises(MissingFieldError) as exc_info:
            parse_transaction(record)
        assert exc_info.value.record_id == "t-1"
        assert exc_info.value.field == "type"

    def test_errors_share_input_validation_base(self):
        with pytest.raises(InputValidationError):
            parse_transaction(_record(amount="x"))

    def test_constructor_rejects_negative_amount(self):
        with pytest.raises(InvalidAmountError):
            Transaction(
                transaction_id="t-2",
                raw_type="INCOME",
                amount=Decimal("-1"),
                date=date(2024, 3, 1),
            )

    def test_constructor_rejects_out_of_range_amount(self):
        with pytest.raises(InvalidAmountError, match="out of range"):
            Transaction(
                transaction_id="t-2",
                raw_type="INCOME",
                amount=Decimal("1e27"),
                date=date(2024, 3, 1),
            )


class TestParseAccount:

    def test_full_record(self):
        account = parse_account(
            {"id": "a-1", "name": "KCB", "type": "BANK", "isDefault": True, "balance": "10.5"}
        )
        assert account == AccountInfo("a-1", "KCB", "BANK", True, Decimal("10.5"))
        assert account.is_cash_like

    def test_overdrawn_balance_allowed(self):
        account = parse_account({"id": "a-1", "name": "Cash", "type": "CASH", "balance": -40})
        assert account.balance == Decimal("-40")

    def test_bad_balance(self):
        with pytest.raises(InvalidAmountError):
            parse_account({"id": "a-1", "name": "Cash", "balance": "lots"})

    def test_missing_name(self):
        with pytest.raises(MissingFieldError) as exc_info:
            parse_account({"id": "a-1"})
        assert exc_info.value.field == "name"

    @pytest.mark.parametrize("account_type", ["cash", "CASH", "Bank"])
    def test_cash_like_types(self, account_type):
        assert AccountInfo("a", "n", account_type).is_cash_like

    @pytest.mark.parametrize("account_type", ["ASSETS", "LIABILITIES", ""])
    def test_non_cash_types(self, account_type):
        assert not AccountInfo("a", "n", account_type).is_cash_like


class TestAccountSelection:

    ACCOUNTS = [
        AccountInfo("a-1", "Loan", "LIABILITIES"),
        AccountInfo("a-2", "Till", "CASH", is_default=True),
        AccountInfo("a-3", "KCB", "BANK"),
    ]

    def test_cash_account_is_first_cash_like(self):
        assert resolve_cash_account_name(self.ACCOUNTS) == "Till"

    def test_cash_account_fallback(self):
        assert resolve_cash_account_name([]) == DEFAULT_CASH_ACCOUNT_NAME
        assert resolve_cash_account_name([], fallback="Cash box") == "Cash box"

    def test_explicit_id_wins(self):
        assert select_account(self.ACCOUNTS, "a-3").name == "KCB"

    def test_default_account_next(self):
        assert select_account(self.ACCOUNTS).name == "Till"

    def test_first_account_last(self):
        accounts = [AccountInfo("x", "X", "BANK"), AccountInfo("y", "Y", "CASH")]
        assert select_account(accounts).account_id == "x"

    def test_unknown_id_and_empty_set(self):
        assert select_account(self.ACCOUNTS, "missing") is None
        assert select_account([]) is None
