"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Statement derivation has exactly one failure surface: malformed input or a
structural defect in the posting rules. Callers must be able to tell the two
apart without parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (record id, field, offending value)

Example - RIGHT way:
    try:
        transactions = [parse_transaction(r) for r in records]
    except InvalidAmountError as e:
        reject(record_id=e.record_id, code=e.code, value=e.value)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- InputValidationError
    |   +-- InvalidAmountError
    |   +-- InvalidDateError
    |   +-- MissingFieldError
    |
    +-- PostingError
    |   +-- UnbalancedLedgerError
    |   +-- PostingRuleNotFoundError
    |
    +-- ReportError
    |   +-- ReportIntegrityError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Input           | INVALID_AMOUNT              | Amount not numeric, or negative
                | INVALID_DATE                | Date missing or unparseable
                | MISSING_FIELD               | Required field absent from a record
----------------|-----------------------------|-----------------------------------------
Posting         | UNBALANCED_LEDGER           | Total debits != total credits
                | POSTING_RULE_NOT_FOUND      | No rule registered for a type
----------------|-----------------------------|-----------------------------------------
Report          | REPORT_INTEGRITY            | A terminal check row resolved to "Error"
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION       | Config value out of range / wrong type

An unrecognized transaction TYPE is not an exception: the ledger builder
skips the record and reports it in the skipped-transaction list.
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Input validation exceptions


class InputValidationError(LedgerKernelError):
    """A transaction or account record failed validation."""

    code: str = "INPUT_VALIDATION_ERROR"

    def __init__(self, record_id: str | None, field: str, value: object, reason: str):
        self.record_id = record_id
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid {field} on record {record_id or '<unknown>'}: "
            f"{value!r} ({reason})"
        )


class InvalidAmountError(InputValidationError):
    """Amount is not a finite non-negative decimal."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, record_id: str | None, value: object, reason: str = "not a non-negative number"):
        super().__init__(record_id, "amount", value, reason)


class InvalidDateError(InputValidationError):
    """Date is missing or cannot be parsed."""

    code: str = "INVALID_DATE"

    def __init__(self, record_id: str | None, value: object, reason: str = "unparseable date"):
        super().__init__(record_id, "date", value, reason)


class MissingFieldError(InputValidationError):
    """A required field is absent."""

    code: str = "MISSING_FIELD"

    def __init__(self, record_id: str | None, field: str):
        super().__init__(record_id, field, None, "required field missing")


# Posting exceptions


class PostingError(LedgerKernelError):
    """Base exception for posting-related errors."""

    code: str = "POSTING_ERROR"


class UnbalancedLedgerError(PostingError):
    """
    Total debits do not equal total credits.

    Signals a posting-rule defect. Never tolerated silently.
    """

    code: str = "UNBALANCED_LEDGER"

    def __init__(self, debits: str, credits: str, currency: str):
        self.debits = debits
        self.credits = credits
        self.currency = currency
        super().__init__(
            f"Unbalanced ledger in {currency}: debits={debits}, credits={credits}"
        )


class PostingRuleNotFoundError(PostingError):
    """No posting rule is registered for a transaction type."""

    code: str = "POSTING_RULE_NOT_FOUND"

    def __init__(self, transaction_type: str):
        self.transaction_type = transaction_type
        super().__init__(f"No posting rule found for transaction type: {transaction_type}")


# Report exceptions


class ReportError(LedgerKernelError):
    """Base exception for report derivation errors."""

    code: str = "REPORT_ERROR"


class ReportIntegrityError(ReportError):
    """A statement's terminal check did not balance."""

    code: str = "REPORT_INTEGRITY"

    def __init__(self, report_name: str, check: str, left: str, right: str):
        self.report_name = report_name
        self.check = check
        self.left = left
        self.right = right
        super().__init__(
            f"{report_name} check '{check}' failed: {left} != {right}"
        )


# Configuration exceptions


class ConfigurationError(LedgerKernelError):
    """A configuration value is invalid."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, option: str, value: object, reason: str):
        self.option = option
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration {option}={value!r}: {reason}")
