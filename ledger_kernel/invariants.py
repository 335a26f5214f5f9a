"""
Kernel Invariants Contract.

These invariants are structural law. No ReportingConfig option may
override them.

This module exists solely to declare these invariants explicitly. The
enforcement is distributed across the ledger builder, the trial-balance
aggregator, and the terminal check rows of each statement.
"""

from enum import Enum, unique


@unique
class KernelInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel.

    Each value names one structural guarantee that the kernel provides
    unconditionally. Configuration may influence *what* gets derived, but
    never *whether* these rules apply.
    """

    DOUBLE_ENTRY_BALANCE = "double_entry_balance"
    """Every transaction yields exactly two postings of equal amount on
    opposite sides. Checked by verify_double_entry() and by the trial
    balance aggregator."""

    BALANCE_SHEET_EQUATION = "balance_sheet_equation"
    """Total Assets == Total Liabilities + Total Equity. Rendered as the
    balance sheet's terminal check row."""

    CASH_RECONCILIATION = "cash_reconciliation"
    """Cash at end of period from the running total equals the cash/bank
    line of the trial balance. Rendered as the cash flow's terminal check
    row."""

    DETERMINISTIC_DERIVATION = "deterministic_derivation"
    """Identical inputs yield identical report bundles, cell for cell. No
    global counters, no randomness, no wall-clock reads inside derivers."""


# All invariants as a frozenset for programmatic checks.
ALL_KERNEL_INVARIANTS: frozenset[KernelInvariant] = frozenset(KernelInvariant)

# The kernel package may not import from these packages.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "ledger_reports",
    "ledger_config",
)
