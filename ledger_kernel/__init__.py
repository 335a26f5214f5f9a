"""
Ledger Kernel

A pure, single-pass statement derivation core with:
- Rule-driven double-entry posting of single-entry transactions
- Deterministic trial-balance aggregation
- Typed integrity errors for unbalanced ledgers
- Structured JSON logging
"""

__version__ = "0.1.0"
