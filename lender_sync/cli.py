"""Command-line interface for the lending pool dashboard."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import load_config
from .logging_setup import configure_logging
from .services import LenderDashboard


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="lender-sync",
        description="Lender position and pool statistics for a lending pool",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show lender position and pool statistics")

    deposit_parser = sub.add_parser("deposit", help="Deposit into the pool")
    deposit_parser.add_argument("amount", help="Amount in whole tokens, e.g. 50.5")

    withdraw_parser = sub.add_parser("withdraw", help="Withdraw from the pool")
    withdraw_parser.add_argument("amount", help="Amount in whole tokens, e.g. 50.5")

    sub.add_parser("approve", help="Allow the pool to pull funds from the wallet")

    mint_parser = sub.add_parser("mint", help="Mint test tokens to the wallet")
    mint_parser.add_argument(
        "amount", nargs="?", default="100", help="Amount to mint (default: 100)"
    )

    watch_parser = sub.add_parser("watch", help="Refresh continuously")
    watch_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Refresh interval in seconds (overrides config)",
    )

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command; returns the process exit code."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    dashboard = LenderDashboard(config)

    await dashboard.mount()

    ok = True
    if args.command == "status":
        pass
    elif args.command == "deposit":
        ok = await dashboard.deposit(args.amount)
    elif args.command == "withdraw":
        ok = await dashboard.withdraw(args.amount)
    elif args.command == "approve":
        ok = await dashboard.grant_allowance()
    elif args.command == "mint":
        ok = await dashboard.mint_test_asset(args.amount)
    elif args.command == "watch":
        try:
            await dashboard.run_continuous(args.interval)
        finally:
            dashboard.close()
        return 0
    else:
        build_parser().print_help()
        return 1

    print(dashboard.render())
    dashboard.close()
    return 0 if ok else 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
