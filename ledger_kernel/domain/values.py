"""
Values -- Monetary and calendar value helpers.

Responsibility:
    Canonical amount/date parsing and the two-decimal rounding rule used at
    posting emission, plus the ``ReportingPeriod`` window type.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Amounts are ``Decimal`` -- NEVER ``float``.  A float arriving from an
      external record is converted through ``str`` so that 0.1 stays 0.1.
    - Amounts are non-negative; the sign of the economic effect comes from
      the transaction type, never from the amount.
    - Rounding is ROUND_HALF_UP to 0.01 and happens exactly once, at the
      point a posting is emitted.

Failure modes:
    - InvalidAmountError for non-numeric, non-finite, boolean or negative
      amounts.
    - InvalidDateError for missing or unparseable dates.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterator

from ledger_kernel.exceptions import InvalidAmountError, InvalidDateError

ZERO = Decimal("0")
CENT = Decimal("0.01")
# Upper bound keeping cent-quantized totals inside the default 28-digit context.
MAX_AMOUNT = Decimal("1e15")


def to_cents(amount: Decimal) -> Decimal:
    """Quantize an amount to two decimal places (ROUND_HALF_UP)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value: object, record_id: str | None = None) -> Decimal:
    """
    Parse an external amount into a non-negative ``Decimal``.

    Preconditions:
        - ``value`` is a Decimal, int, float or numeric string.
    Postconditions:
        - Returns a finite, non-negative Decimal.  No rounding is applied.
    Raises:
        InvalidAmountError: if the value is missing, non-numeric, non-finite,
            negative, or not below ``MAX_AMOUNT``.
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmountError(record_id, value)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmountError(record_id, value) from None
    else:
        raise InvalidAmountError(record_id, value)

    if not amount.is_finite():
        raise InvalidAmountError(record_id, value, "not a finite number")
    if amount < ZERO:
        raise InvalidAmountError(record_id, value, "amount must be non-negative")
    if amount >= MAX_AMOUNT:
        raise InvalidAmountError(record_id, value, "amount out of range")
    return amount


def parse_date(value: object, record_id: str | None = None) -> date:
    """
    Parse an external date (``date``, ``datetime`` or ISO-8601 string).

    Datetimes are truncated to their calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise InvalidDateError(record_id, value) from None
    raise InvalidDateError(record_id, value)


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    next_month = (d.replace(day=28) + timedelta(days=4)).replace(day=1)
    return next_month - timedelta(days=1)


def iter_months(start: date, end: date) -> Iterator[date]:
    """Yield the first day of every calendar month from start to end inclusive."""
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current
        current = month_end(current) + timedelta(days=1)


@dataclass(frozen=True)
class ReportingPeriod:
    """
    Inclusive date window a derivation pass reports on.

    Monthly statements use ``ReportingPeriod.month_of(clock.today())``.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"ReportingPeriod end {self.end} precedes start {self.start}"
            )

    @classmethod
    def month_of(cls, d: date) -> ReportingPeriod:
        """Calendar month containing ``d``."""
        return cls(start=month_start(d), end=month_end(d))

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    @property
    def label(self) -> str:
        """Month label of the period end, e.g. ``"January 2024"``."""
        return self.end.strftime("%B %Y")
