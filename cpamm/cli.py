"""Command-line price quotes for constant-product pools.

Runs amounts through the pricing curve offline, without any pool state:

Usage:
    cpamm quote --input-reserve 1000 --output-reserve 2000 --amount 1
    cpamm route --reserves-a 1000 2000 --reserves-b 1000 1000 --amount 10
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace

import structlog

from cpamm.amm.constant_product import ConstantProduct
from cpamm.config import ExchangeConfig
from cpamm.errors import ExchangeError
from cpamm.log_config import configure_logging
from cpamm.models.state import Quote
from cpamm.models.types import validate_amount

logger = structlog.get_logger()


def _amount(value: str) -> int:
    try:
        return validate_amount(int(value))
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from err


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpamm",
        description="Quote swaps on a constant-product curve",
    )
    parser.add_argument(
        "--fee-percent",
        type=int,
        default=None,
        help="Swap fee in percent (default: CPAMM_FEE_PERCENT or 1)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    quote = sub.add_parser("quote", help="Output for selling an amount into one pool")
    quote.add_argument("--input-reserve", type=_amount, required=True)
    quote.add_argument("--output-reserve", type=_amount, required=True)
    quote.add_argument("--amount", type=_amount, required=True)

    route = sub.add_parser("route", help="Output for a paired A -> base -> paired B trade")
    route.add_argument(
        "--reserves-a",
        type=_amount,
        nargs=2,
        metavar=("BASE", "PAIRED"),
        required=True,
        help="Reserves of the pool being sold into",
    )
    route.add_argument(
        "--reserves-b",
        type=_amount,
        nargs=2,
        metavar=("BASE", "PAIRED"),
        required=True,
        help="Reserves of the pool being bought from",
    )
    route.add_argument("--amount", type=_amount, required=True)
    return parser


def run(args: argparse.Namespace, config: ExchangeConfig) -> Quote:
    """Compute the quote requested by parsed arguments."""
    amm = ConstantProduct(config.fee_multiplier)
    if args.command == "quote":
        amount_out = amm.get_amount_out(args.amount, args.input_reserve, args.output_reserve)
        return Quote(amount_in=args.amount, amount_out=amount_out)

    base_a, paired_a = args.reserves_a
    base_b, paired_b = args.reserves_b
    base_amount, amount_out = amm.get_routed_amount_out(
        args.amount, paired_a, base_a, base_b, paired_b
    )
    return Quote(amount_in=args.amount, amount_out=amount_out, base_amount=base_amount)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the cpamm console script."""
    args = build_parser().parse_args(argv)

    try:
        config = ExchangeConfig.from_env()
        if args.fee_percent is not None:
            config = replace(config, fee_percent=args.fee_percent)
    except ValueError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    configure_logging(verbose=args.verbose, level=config.log_level)

    try:
        quote = run(args, config)
    except (ExchangeError, ArithmeticError) as err:
        logger.error("quote_failed", command=args.command, error=str(err))
        print(f"Error: {err}", file=sys.stderr)
        return 1

    logger.debug("quote_computed", command=args.command, amount_out=quote.amount_out)
    print(quote.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
