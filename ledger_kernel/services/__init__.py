"""Services for the ledger kernel (posting side)."""

from ledger_kernel.services.ledger_builder import (
    LedgerBuildResult,
    build_postings,
    verify_double_entry,
)

__all__ = [
    "LedgerBuildResult",
    "build_postings",
    "verify_double_entry",
]
