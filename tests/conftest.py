"""
Pytest fixtures for the ledger statements test suite.

Provides:
- Structured logging setup and a log-capture fixture
- A deterministic clock and the matching reporting period
- Transaction and account factories for pure derivation tests
- An in-memory SQLite session for selector and service tests
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from itertools import count

import pytest

from ledger_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.transaction import AccountInfo, Transaction
from ledger_kernel.domain.values import ReportingPeriod
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ledger_reports.config import ReportingConfig

MAIN_ACCOUNT_ID = "acct-main"
SAVINGS_ACCOUNT_ID = "acct-savings"
CASH_ACCOUNT_NAME = "Main Bank"

# Fixed "today" for every test that needs the current month
TODAY = date(2024, 3, 15)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            assemble(...)
            logs = captured_logs()
            assert any(r["message"] == "report_assembled" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def march_period() -> ReportingPeriod:
    return ReportingPeriod.month_of(TODAY)


@pytest.fixture
def reporting_config() -> ReportingConfig:
    """Standard reporting configuration for tests."""
    return ReportingConfig.with_defaults()


# =============================================================================
# Domain data
# =============================================================================


@pytest.fixture
def make_transaction():
    """
    Factory for ``Transaction`` values with sequential ids.

    Usage::

        txn = make_transaction("INCOME", "8000", category="salary")
    """
    ids = count(1)

    def _make(
        raw_type: str,
        amount: str | Decimal,
        category: str | None = None,
        on: date = TODAY,
        account_id: str | None = MAIN_ACCOUNT_ID,
        description: str | None = None,
        transaction_id: str | None = None,
    ) -> Transaction:
        return Transaction(
            transaction_id=transaction_id or f"txn-{next(ids):03d}",
            raw_type=raw_type,
            amount=Decimal(str(amount)),
            date=on,
            account_id=account_id,
            category=category,
            description=description,
        )

    return _make


@pytest.fixture
def accounts() -> list[AccountInfo]:
    return [
        AccountInfo(
            account_id=MAIN_ACCOUNT_ID,
            name=CASH_ACCOUNT_NAME,
            account_type="BANK",
            is_default=True,
            balance=Decimal("0"),
        ),
        AccountInfo(
            account_id=SAVINGS_ACCOUNT_ID,
            name="Savings",
            account_type="SAVINGS",
        ),
    ]


@pytest.fixture
def salary_and_rent(make_transaction) -> list[Transaction]:
    """One 8000 salary income and one 20000 rent expense in March 2024."""
    return [
        make_transaction("INCOME", "8000", category="salary", on=date(2024, 3, 5)),
        make_transaction("EXPENSE", "20000", category="rent", on=date(2024, 3, 6)),
    ]


@pytest.fixture
def mixed_month(make_transaction) -> list[Transaction]:
    """A month touching every transaction type."""
    return [
        make_transaction("EQUITY", "5000", category="owner-investment", on=date(2024, 3, 1)),
        make_transaction("INCOME", "8000", category="salary", on=date(2024, 3, 5)),
        make_transaction("EXPENSE", "1200", category="travel", on=date(2024, 3, 7)),
        make_transaction("EXPENSE", "3000", category="rent", on=date(2024, 3, 8)),
        make_transaction("ASSETS", "6000", category="computers", on=date(2024, 3, 10)),
        make_transaction("ASSET", "500", category="inventory", on=date(2024, 3, 11)),
        make_transaction("LIABILITY", "4000", category="short-term-loan", on=date(2024, 3, 12)),
        make_transaction("EQUITY", "2000", category="owner-draw", on=date(2024, 3, 20)),
    ]


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def session():
    """In-memory SQLite session with fresh tables."""
    init_engine_from_url("sqlite:///:memory:")
    create_tables()
    db_session = get_session()
    yield db_session
    db_session.close()
    drop_tables()
    reset_engine()
