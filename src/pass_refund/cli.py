"""Command-line refund calculator.

Usage:
    pass-refund regular --start 2025-06-05 --refund 2025-07-04 --tier 3 \\
        --price 45000 --one-way 500 --one-month 16000
    pass-refund section-change --start 2025-06-05 --refund 2025-06-14 \\
        --tier 1 --price 16000
    pass-refund policy
"""

import argparse
import datetime as dt
import sys

from pass_refund.config import LOG_LEVELS, get_settings
from pass_refund.models import (
    PassTier,
    RefundResult,
    RegularRefundInput,
    SectionChangeRefundInput,
    ValidationError,
    format_user_messages,
)
from pass_refund.services import (
    compute_regular_refund,
    compute_section_change_refund,
    describe_refund_policy,
)
from pass_refund.utils.logging import configure_logging, correlation_scope


def _parse_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an ISO date (YYYY-MM-DD): {value}") from e


def _parse_tier(value: str) -> PassTier:
    try:
        return PassTier(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"pass tier must be 1, 3 or 6: {value}") from e


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--start", type=_parse_date, required=True, help="Pass start date")
    parser.add_argument("--refund", type=_parse_date, required=True, help="Refund request date")
    parser.add_argument(
        "--tier", type=_parse_tier, required=True, help="Pass duration in months (1, 3 or 6)"
    )
    parser.add_argument("--price", type=int, required=True, help="Purchase price in yen")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pass-refund", description="Calculate commuter pass refunds"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level (default: PASS_REFUND_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    regular = subparsers.add_parser("regular", help="Refund a cancelled pass")
    _add_common_arguments(regular)
    regular.add_argument("--one-way", type=int, required=True, help="One-way fare in yen")
    regular.add_argument("--one-month", type=int, required=True, help="One-month pass fare in yen")
    regular.add_argument(
        "--three-month",
        type=int,
        default=None,
        help="Three-month pass fare in yen (required for 6-month passes)",
    )

    section = subparsers.add_parser("section-change", help="Refund after a route change")
    _add_common_arguments(section)

    subparsers.add_parser("policy", help="Print the refund rules")
    return parser


def _print_outcome(outcome: RefundResult | list[ValidationError]) -> int:
    if isinstance(outcome, list):
        print("Refund could not be calculated:")
        for message in format_user_messages(outcome):
            print(f"  - {message}")
        for error in outcome:
            print(f"    [{error.code}] {error.message}")
        return 1

    print(outcome.calculation_details)
    print(f"Used fare:      {outcome.used_amount:,} yen")
    print(f"Processing fee: {outcome.processing_fee:,} yen")
    print(f"Refund:         {outcome.refund_amount:,} yen")
    return 0


def _compute(args: argparse.Namespace) -> RefundResult | list[ValidationError]:
    if args.command == "regular":
        return compute_regular_refund(
            RegularRefundInput(
                start_date=args.start,
                pass_tier=args.tier,
                purchase_price=args.price,
                refund_date=args.refund,
                one_way_fare=args.one_way,
                one_month_fare=args.one_month,
                three_month_fare=args.three_month,
            )
        )
    return compute_section_change_refund(
        SectionChangeRefundInput(
            start_date=args.start,
            pass_tier=args.tier,
            purchase_price=args.price,
            refund_date=args.refund,
        )
    )


def main(argv: list[str] | None = None) -> int:
    """Run the refund calculator."""
    args = build_parser().parse_args(argv)

    configure_logging(args.log_level or get_settings().log_level)

    if args.command == "policy":
        print(describe_refund_policy())
        return 0

    with correlation_scope():
        outcome = _compute(args)
    return _print_outcome(outcome)


if __name__ == "__main__":
    sys.exit(main())
