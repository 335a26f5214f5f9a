#!/usr/bin/env python3
"""
Generate the monthly report bundle and print it as JSON.

Transactions and accounts come either from a YAML/JSON snapshot file
(top-level ``accounts`` and ``transactions`` lists) or from a database.

Usage:
    python3 scripts/generate_reports.py --input snapshot.yaml [options]
    python3 scripts/generate_reports.py --db-url sqlite:///ledger.db [options]

Examples:
    # Current month, default account, baked values
    python3 scripts/generate_reports.py --input snapshot.yaml

    # A specific account and month, with live spreadsheet formulas
    python3 scripts/generate_reports.py --input snapshot.json \\
        --account-id acct-2 --month 2024-03 --formulas

    # Custom rates
    python3 scripts/generate_reports.py --input snapshot.yaml --config kenya.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_month(value: str) -> date:
    try:
        return date.fromisoformat(f"{value}-01")
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}") from None


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Derive financial statements from transactions and print them as JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=Path,
        help="YAML or JSON snapshot with 'accounts' and 'transactions' lists.",
    )
    source.add_argument(
        "--db-url",
        help="SQLAlchemy database URL of the transaction store.",
    )
    parser.add_argument(
        "--account-id",
        default=None,
        help="Account to report on (default: the default account, else the first).",
    )
    parser.add_argument(
        "--month",
        type=_parse_month,
        default=None,
        help="Reporting month as YYYY-MM (default: current month).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Reporting configuration YAML (default: packaged default set).",
    )
    parser.add_argument(
        "--formulas",
        action="store_true",
        help="Emit provenance formulas instead of evaluated values.",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the statement derivers on a thread pool.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for the structured JSON log on stderr (default: WARNING).",
    )
    return parser.parse_args(argv)


def _records(data: dict, key: str) -> list:
    from ledger_kernel.exceptions import InputValidationError

    records = data.get(key) or []
    if not isinstance(records, list):
        raise InputValidationError(None, key, type(records).__name__, "must be a list")
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise InputValidationError(
                f"{key}[{index}]", key, type(record).__name__, "record must be a mapping",
            )
    return records


def _load_snapshot(path: Path):
    import yaml

    from ledger_kernel.domain.transaction import parse_account, parse_transaction
    from ledger_kernel.exceptions import InputValidationError

    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InputValidationError(
            None, "snapshot", type(data).__name__, "document must be a mapping",
        )
    accounts = [parse_account(record) for record in _records(data, "accounts")]
    transactions = [parse_transaction(record) for record in _records(data, "transactions")]
    return accounts, transactions


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    import logging

    import yaml

    from ledger_config import get_active_config
    from ledger_kernel.domain.clock import SystemClock
    from ledger_kernel.domain.values import ReportingPeriod
    from ledger_kernel.exceptions import LedgerKernelError
    from ledger_kernel.logging_config import configure_logging
    from ledger_reports.assembly import assemble
    from ledger_reports.models import CellMode
    from ledger_reports.statements import render_to_dict

    configure_logging(level=getattr(logging, args.log_level.upper(), logging.WARNING))
    clock = SystemClock()
    period = ReportingPeriod.month_of(args.month) if args.month else None

    try:
        config = get_active_config(args.config)
        if args.input:
            accounts, transactions = _load_snapshot(args.input)
            result = assemble(
                transactions,
                accounts,
                period,
                account_id=args.account_id,
                config=config,
                clock=clock,
                parallel=args.parallel,
            )
        else:
            from ledger_kernel.db.engine import init_engine_from_url, session_scope
            from ledger_reports.service import ReportingService

            init_engine_from_url(args.db_url)
            with session_scope() as session:
                service = ReportingService(session, clock, config)
                result = service.generate(
                    account_id=args.account_id, period=period, parallel=args.parallel,
                )
    except (LedgerKernelError, OSError, yaml.YAMLError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    mode = CellMode.FORMULAS if args.formulas else config.cell_mode
    output = {
        "metadata": render_to_dict(result.metadata),
        "skipped_count": result.skipped_count,
        "skipped": render_to_dict(result.skipped),
        "integrity_issues": list(result.integrity_issues),
        "tables": render_to_dict(result.bundle.to_grids(mode)),
    }
    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0 if result.is_balanced else 2


if __name__ == "__main__":
    sys.exit(main())
