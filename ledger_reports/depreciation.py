"""
Depreciation schedule deriver.

Straight-line, no salvage value, over ``config.depreciation_months``.  The
opening value of each asset is the net debit balance of its ``Asset:``
account in the trial balance; the schedule shows the position after the
first month's charge.
"""

from __future__ import annotations

from decimal import Decimal

from ledger_kernel.domain.dtos import AccountCategory
from ledger_kernel.domain.trial_balance import TrialBalance
from ledger_kernel.domain.values import ZERO, ReportingPeriod, to_cents
from ledger_reports.config import ReportingConfig
from ledger_reports.models import DepreciationLine, DepreciationSchedule


def straight_line(
    cost: Decimal,
    useful_life_months: int,
    salvage_value: Decimal = ZERO,
) -> Decimal:
    """
    Calculate monthly straight-line depreciation.

    Preconditions:
        - ``useful_life_months`` is a positive integer (0 returns zero).
    Postconditions:
        - Returns monthly depreciation quantized to 0.01 (ROUND_HALF_UP).
    """
    if useful_life_months <= 0:
        return to_cents(ZERO)
    return to_cents((cost - salvage_value) / useful_life_months)


def derive_depreciation_schedule(
    trial_balance: TrialBalance,
    period: ReportingPeriod,
    config: ReportingConfig,
) -> DepreciationSchedule:
    """One schedule line per Asset account, in trial-balance order."""
    months = config.depreciation_months
    lines = []
    for row in trial_balance.by_category(AccountCategory.ASSET):
        opening = row.net_balance
        monthly = straight_line(opening, months)
        accumulated = monthly
        lines.append(
            DepreciationLine(
                asset_name=row.account_name,
                opening_value=opening,
                useful_life_months=months,
                monthly_depreciation=monthly,
                accumulated_depreciation=accumulated,
                net_book_value=opening - accumulated,
            )
        )
    return DepreciationSchedule(period=period, lines=tuple(lines))
