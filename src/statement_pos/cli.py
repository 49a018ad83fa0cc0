"""
Command-line interface for Statement POS.
"""

import argparse
import json
import sys
from datetime import date, datetime
from typing import List, Optional

from . import __version__
from .menu.decomposer import AmountDecomposer
from .menu.pricing import ITEM_KINDS, PriceTable
from .models import Transaction
from .orders.automation import AutomationCredentials
from .orders.builder import OrderDocumentBuilder
from .orders.client import PosOrderClient
from .orders.pacing import FixedDelayPacer
from .orders.pos_config import PosConfig
from .orders.workflow import ApiOrderChannel, AutomationOrderChannel, BatchReport, OrderWorkflow
from .statement.parser import MerchantMatcher, StatementParser
from .statement.reader import read_grid
from .statement.summary import StatementSummary, summarize
from .utils.config import Config
from .utils.logging import setup_logging

ITEM_LABELS = {
    "full_plate": "Full",
    "half_plate": "Half",
    "water": "Water",
    "packing": "Pack",
}


def _iso_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="statement-pos",
        description="Statement POS - rebuild POS orders from bank statement credits",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  statement-pos parse statement.xlsx --merchant "LITTICIOUS"
  statement-pos parse statement.xlsx --merchant litti --match substring --start 2026-10-01
  statement-pos push statement.xlsx --merchant "LITTICIOUS" --dry-run
  statement-pos push statement.xlsx --merchant "LITTICIOUS" --mode api --delay 2
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Statement POS {__version__}",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Environment file with POS and portal settings (default: .env)",
    )

    statement_args = argparse.ArgumentParser(add_help=False)
    statement_args.add_argument("file", help="Bank statement export (.xlsx or .csv)")
    statement_args.add_argument(
        "--merchant",
        help="Merchant keyword in the narration (default: MERCHANT_KEYWORD)",
    )
    statement_args.add_argument(
        "--match",
        choices=MerchantMatcher.MODES,
        help="How the keyword is matched against the narration (default: suffix)",
    )
    statement_args.add_argument(
        "--case-sensitive",
        action="store_true",
        default=None,
        help="Match the merchant keyword case-sensitively",
    )
    statement_args.add_argument("--start", type=_iso_date, help="First transaction date (YYYY-MM-DD)")
    statement_args.add_argument("--end", type=_iso_date, help="Last transaction date (YYYY-MM-DD)")
    statement_args.add_argument("--sheet", help="Worksheet name (default: first sheet)")

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
    )

    subparsers.add_parser(
        "parse",
        parents=[statement_args],
        help="List merchant credits and the inferred orders",
    )

    push_parser = subparsers.add_parser(
        "push",
        parents=[statement_args],
        help="Create and settle POS orders for the parsed transactions",
    )
    push_parser.add_argument(
        "--mode",
        choices=["api", "automation"],
        default="api",
        help="Realize orders through the POS API or by driving the web portal (default: api)",
    )
    push_parser.add_argument(
        "--delay",
        type=float,
        help="Seconds between orders (default: ORDER_DELAY_SECONDS)",
    )
    push_parser.add_argument(
        "--limit",
        type=int,
        help="Only process the first N transactions",
    )
    push_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the order payloads without sending them",
    )

    return parser


def load_transactions(args: argparse.Namespace, config: Config) -> List[Transaction]:
    """Read the statement file and parse it with CLI/config filters."""
    grid = read_grid(args.file, sheet_name=getattr(args, "sheet", None))
    case_sensitive = args.case_sensitive
    if case_sensitive is None:
        case_sensitive = config.get("merchant_case_sensitive", False)
    matcher = MerchantMatcher(
        keyword=args.merchant if args.merchant is not None else config.get("merchant_keyword", ""),
        mode=args.match or config.get("merchant_match", "suffix"),
        case_sensitive=case_sensitive,
    )
    date_range = (args.start, args.end) if (args.start or args.end) else None
    parser = StatementParser(decomposer=AmountDecomposer(PriceTable.from_config(config)))
    return parser.parse(grid, matcher, date_range)


def print_transactions(transactions: List[Transaction]) -> None:
    if not transactions:
        print("No matching credit transactions found.")
        return
    header = (
        f"{'Date':<12} {'Paid':>10} "
        + " ".join(f"{ITEM_LABELS[k]:>5}" for k in ITEM_KINDS)
        + f" {'Expected':>10} {'Adj':>7} {'Status':<8} Details"
    )
    print(header)
    print("-" * len(header))
    for txn in transactions:
        quantities = " ".join(f"{getattr(txn, k):>5}" for k in ITEM_KINDS)
        print(
            f"{txn.date:<12} {txn.paid_amount:>10.2f} {quantities} "
            f"{txn.expected_cost:>10.2f} {txn.adjustment:>7.2f} {txn.status:<8} {txn.details[:40]}"
        )


def print_summary(summary: StatementSummary) -> None:
    print("\nSUMMARY:")
    print("=" * 60)
    print(f"   Transactions:       {summary.total}")
    print(f"   Processed:          {summary.processed}")
    print(f"   Failed:             {summary.failed}")
    print(f"   With adjustment:    {summary.adjustments}")
    print(f"   Total paid:         ₹{summary.total_paid:,.2f}")
    print(f"   Total expected:     ₹{summary.total_expected:,.2f}")
    print(f"   Average ticket:     ₹{summary.average_ticket:,.2f}")
    items = ", ".join(f"{ITEM_LABELS[k]} {summary.item_totals[k]}" for k in ITEM_KINDS)
    print(f"   Items:              {items} (total {summary.total_items})")


def print_batch_report(report: BatchReport) -> None:
    print("\nORDER RESULTS:")
    print("=" * 60)
    for outcome in report.outcomes:
        if outcome.skipped:
            status = "SKIPPED"
        elif outcome.success:
            status = "OK"
        else:
            status = "FAILED"
        detail = outcome.order_id if outcome.success else outcome.error
        if not outcome.success and outcome.order_id:
            detail = f"{outcome.error} (created as {outcome.order_id}, not settled)"
        print(f"   {status:<8} {outcome.transaction_id:<28} {detail or ''}")
    print(f"\n   Succeeded: {report.succeeded}, Failed: {report.failed}, Skipped: {report.skipped}")
    if report.cancelled:
        print("   Batch was stopped before all transactions were processed.")


def run_parse(args: argparse.Namespace, config: Config) -> int:
    transactions = load_transactions(args, config)
    print_transactions(transactions)
    print_summary(summarize(transactions))
    return 0


def run_push(args: argparse.Namespace, config: Config) -> int:
    transactions = load_transactions(args, config)
    if args.limit is not None:
        transactions = transactions[: max(args.limit, 0)]
    if not transactions:
        print("No matching credit transactions found.")
        return 0

    if args.dry_run:
        builder = OrderDocumentBuilder(PosConfig.from_config(config), price_table=PriceTable.from_config(config))
        documents = [builder.build(txn).to_payload() for txn in transactions]
        print(json.dumps(documents, indent=2, ensure_ascii=False))
        return 0

    delay = args.delay if args.delay is not None else config.get("order_delay_seconds", 1.0)
    pacer = FixedDelayPacer(delay)

    if args.mode == "automation":
        # Playwright is an optional extra; only needed for this mode.
        from .orders.browser import PlaywrightAutomationExecutor

        channel = AutomationOrderChannel(
            PlaywrightAutomationExecutor(),
            AutomationCredentials.from_config(config),
            headless=config.get("automation_headless", True),
            timeout_ms=config.get("automation_timeout_ms", 30000),
        )
        report = OrderWorkflow(channel, pacer).process_batch(transactions)
    else:
        pos_config = PosConfig.from_config(config)
        builder = OrderDocumentBuilder(pos_config, price_table=PriceTable.from_config(config))
        with PosOrderClient(pos_config) as client:
            report = OrderWorkflow(ApiOrderChannel(builder, client), pacer).process_batch(transactions)

    print_batch_report(report)
    return 0


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    config = Config(parsed_args.env_file)
    log_level = "DEBUG" if parsed_args.verbose else config.get("log_level", "INFO")
    logger = setup_logging(level=log_level, log_file=parsed_args.log_file)

    if not parsed_args.command:
        parser.print_help()
        return 1

    try:
        if parsed_args.command == "parse":
            return run_parse(parsed_args, config)
        if parsed_args.command == "push":
            return run_push(parsed_args, config)
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
