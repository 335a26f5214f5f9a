"""Posting rules for transforming transactions into debit/credit account pairs."""

from ledger_kernel.posting_rules.base import BasePostingRule, PostingRule
from ledger_kernel.posting_rules.registry import (
    PostingRuleRegistry,
    build_default_registry,
    get_default_registry,
)
from ledger_kernel.posting_rules.rules import (
    OWNER_DRAW,
    OWNER_INVESTMENT,
    AssetRule,
    EquityRule,
    ExpenseRule,
    IncomeRule,
    LiabilityRule,
)

__all__ = [
    "PostingRule",
    "BasePostingRule",
    "PostingRuleRegistry",
    "build_default_registry",
    "get_default_registry",
    "OWNER_DRAW",
    "OWNER_INVESTMENT",
    "AssetRule",
    "EquityRule",
    "ExpenseRule",
    "IncomeRule",
    "LiabilityRule",
]
