"""
Reporting-specific test fixtures.

Provides:
- A trial-balance factory for pure deriver tests
- Trial balances for the two standard transaction sets
"""

import pytest

from ledger_kernel.domain.trial_balance import TrialBalance, build_trial_balance
from ledger_kernel.services.ledger_builder import build_postings

CASH = "Main Bank"


@pytest.fixture
def trial_balance_for():
    """Build the trial balance of a transaction list against ``CASH``."""

    def _build(transactions, strict: bool = True) -> TrialBalance:
        postings = build_postings(transactions, CASH).postings
        return build_trial_balance(postings, strict=strict)

    return _build


@pytest.fixture
def mixed_tb(trial_balance_for, mixed_month) -> TrialBalance:
    return trial_balance_for(mixed_month)


@pytest.fixture
def salary_rent_tb(trial_balance_for, salary_and_rent) -> TrialBalance:
    return trial_balance_for(salary_and_rent)
