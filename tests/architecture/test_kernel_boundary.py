"""
Kernel boundary and invariants contract.

1. ledger_kernel/** may NOT import ledger_reports or ledger_config.
   The kernel never depends upward.

2. Statement derivers are pure: no database, clock or file access.

3. The kernel invariants declaration is complete and non-empty.

These tests read source code via AST; they cannot break anything.
"""

import ast
import glob
from pathlib import Path

from ledger_kernel.invariants import (
    ALL_KERNEL_INVARIANTS,
    FORBIDDEN_KERNEL_IMPORTS,
    KernelInvariant,
)

ROOT = Path(__file__).resolve().parents[2]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _python_files(package: str) -> list[str]:
    """Return all .py files under a top-level package."""
    return sorted(glob.glob(str(ROOT / package / "**" / "*.py"), recursive=True))


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Extract (line_number, module_string) for all imports in a file."""
    source = Path(filepath).read_text()
    tree = ast.parse(source, filename=filepath)

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _violations(files: list[str], forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for filepath in files:
        for lineno, module in _extract_imports(filepath):
            for prefix in forbidden:
                if module == prefix or module.startswith(f"{prefix}."):
                    found.append(f"  {filepath}:{lineno} imports '{module}'")
    return found


# ---------------------------------------------------------------------------
# Test: Kernel has no upward dependencies
# ---------------------------------------------------------------------------

class TestKernelNoUpwardDependencies:
    """ledger_kernel/** must not import ledger_reports or ledger_config."""

    def test_kernel_files_found(self):
        assert _python_files("ledger_kernel")

    def test_kernel_does_not_import_forbidden_packages(self):
        violations = _violations(_python_files("ledger_kernel"), FORBIDDEN_KERNEL_IMPORTS)
        assert not violations, (
            "Kernel boundary violation: ledger_kernel/** must not import "
            "ledger_reports or ledger_config:\n" + "\n".join(violations)
        )

    def test_reports_do_not_import_config_package(self):
        """ledger_config sits above ledger_reports, never below it."""
        violations = _violations(_python_files("ledger_reports"), ("ledger_config",))
        assert not violations, "\n".join(violations)


class TestDeriverPurity:
    """Derivers take snapshots; only the service and assembly touch I/O or time."""

    PURE_MODULES = (
        "statements.py",
        "tax.py",
        "depreciation.py",
        "ratios.py",
        "history.py",
        "chart_of_accounts.py",
        "tables.py",
    )
    IMPURE_IMPORTS = (
        "sqlalchemy",
        "ledger_kernel.db",
        "ledger_kernel.models",
        "ledger_kernel.selectors",
        "ledger_kernel.domain.clock",
        "yaml",
    )

    def test_derivers_have_no_io_imports(self):
        files = [str(ROOT / "ledger_reports" / name) for name in self.PURE_MODULES]
        violations = _violations(files, self.IMPURE_IMPORTS)
        assert not violations, "\n".join(violations)


class TestKernelInvariantsDeclared:

    def test_invariants_non_empty(self):
        assert len(ALL_KERNEL_INVARIANTS) >= 4

    def test_expected_invariants_present(self):
        assert KernelInvariant.DOUBLE_ENTRY_BALANCE in ALL_KERNEL_INVARIANTS
        assert KernelInvariant.BALANCE_SHEET_EQUATION in ALL_KERNEL_INVARIANTS
        assert KernelInvariant.CASH_RECONCILIATION in ALL_KERNEL_INVARIANTS
        assert KernelInvariant.DETERMINISTIC_DERIVATION in ALL_KERNEL_INVARIANTS

    def test_forbidden_imports_cover_upper_layers(self):
        assert set(FORBIDDEN_KERNEL_IMPORTS) == {"ledger_reports", "ledger_config"}
