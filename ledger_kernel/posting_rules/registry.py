"""
Posting rule registry.

Manages registration and lookup of posting rules by transaction type.
"""

from ledger_kernel.domain.dtos import AccountPair
from ledger_kernel.domain.transaction import Transaction, TransactionType
from ledger_kernel.exceptions import PostingRuleNotFoundError
from ledger_kernel.posting_rules.base import PostingRule
from ledger_kernel.posting_rules.rules import DEFAULT_RULES


class PostingRuleRegistry:
    """
    Registry for posting rules.

    Allows registration and lookup of rules by transaction type.
    Supports versioning for backward compatibility.
    """

    def __init__(self):
        """Initialize an empty registry."""
        # Map of transaction_type -> version -> rule
        self._rules: dict[TransactionType, dict[int, PostingRule]] = {}
        # Default version to use when not specified
        self._default_versions: dict[TransactionType, int] = {}

    def register(
        self,
        rule: PostingRule,
        set_default: bool = True,
    ) -> None:
        """
        Register a posting rule.

        Args:
            rule: The posting rule to register.
            set_default: If True, set this as the default version.
        """
        transaction_type = rule.transaction_type
        version = rule.version

        self._rules.setdefault(transaction_type, {})[version] = rule

        if set_default:
            self._default_versions[transaction_type] = version

    def get_rule(
        self,
        transaction_type: TransactionType,
        version: int | None = None,
    ) -> PostingRule | None:
        """
        Get a posting rule for a transaction type.

        Args:
            transaction_type: The transaction type to look up.
            version: Optional specific version. If None, uses default.

        Returns:
            PostingRule if found, None otherwise.
        """
        if transaction_type not in self._rules:
            return None

        if version is None:
            version = self._default_versions.get(transaction_type)
            if version is None:
                # Use highest version
                version = max(self._rules[transaction_type].keys())

        return self._rules[transaction_type].get(version)

    def resolve(
        self,
        transaction: Transaction,
        cash_account: str,
        version: int | None = None,
    ) -> AccountPair:
        """
        Resolve the account pair for a transaction.

        Raises:
            PostingRuleNotFoundError: If the type is unrecognized or has no rule.
        """
        transaction_type = transaction.transaction_type
        rule = self.get_rule(transaction_type, version) if transaction_type else None

        if rule is None:
            raise PostingRuleNotFoundError(transaction.raw_type)

        return rule.resolve(transaction, cash_account)

    def list_transaction_types(self) -> list[TransactionType]:
        """List all registered transaction types."""
        return list(self._rules.keys())

    def list_versions(self, transaction_type: TransactionType) -> list[int]:
        """List all versions for a transaction type."""
        if transaction_type not in self._rules:
            return []
        return sorted(self._rules[transaction_type].keys())


def build_default_registry() -> PostingRuleRegistry:
    """Return a fresh registry holding the standard rule for every type."""
    registry = PostingRuleRegistry()
    for rule_class in DEFAULT_RULES:
        registry.register(rule_class())
    return registry


# Global default registry
_default_registry = build_default_registry()


def get_default_registry() -> PostingRuleRegistry:
    """Get the default posting rule registry."""
    return _default_registry
