#!/usr/bin/env python3
"""
Payment Ledger Entry Point

Reads a CSV of client operations and writes the final account balances:

    python -m payment_ledger transactions.csv > accounts.csv
"""

import argparse
import sys
from typing import List, Optional

from .config import get_config
from .engine import process_csv
from .logging_config import setup_logging


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="payment-ledger",
        description="Apply a CSV log of client operations and print final balances"
    )
    ap.add_argument("input", help="Path to the operations CSV (type,client,tx,amount)")
    ap.add_argument("--output", "-o", help="Write balances here instead of stdout")
    ap.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS,
                    help="Diagnostic log level (default from config)")
    ap.add_argument("--log-format", choices=["json", "text"], help="Diagnostic log format")
    ap.add_argument("--strict-ids", action="store_true",
                    help="Also reject withdrawals that reuse a transaction id")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    if args.strict_ids:
        overrides["strict_transaction_ids"] = True
    config = get_config().model_copy(update=overrides)

    setup_logging(level=config.log_level, log_format=config.log_format)

    try:
        with open(args.input, "r", newline="", encoding="utf-8") as source:
            if args.output:
                with open(args.output, "w", newline="", encoding="utf-8") as sink:
                    process_csv(source, sink, config)
            else:
                process_csv(source, sys.stdout, config)
    except OSError as e:
        print(f"Error: {e.filename}: {e.strerror}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
