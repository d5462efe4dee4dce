"""Input validation for refund calculations.

Both validators inspect every rule and return the full list of problems so
a form can show them all at once. They never raise for a rule violation;
an empty list means the input may be computed.
"""

import datetime as dt

from pass_refund.config import SECTION_CHANGE_MAX_MONTHS
from pass_refund.models import (
    ErrorCode,
    PassTier,
    RegularRefundInput,
    SectionChangeRefundInput,
    ValidationError,
)
from pass_refund.utils import calendar_math


def _check_refund_not_before_start(
    start_date: dt.date,
    refund_date: dt.date,
) -> list[ValidationError]:
    if refund_date < start_date:
        return [
            ValidationError.from_code(
                ErrorCode.DATE_RANGE_VIOLATION,
                "refund_date",
                f"refund date {refund_date.isoformat()} is before the start date "
                f"{start_date.isoformat()}",
            )
        ]
    return []


def _check_positive(field: str, label: str, amount: int) -> list[ValidationError]:
    if amount <= 0:
        return [
            ValidationError.from_code(
                ErrorCode.INVALID_AMOUNT,
                field,
                f"{label} must be a positive amount (got {amount})",
            )
        ]
    return []


def validate_regular_input(data: RegularRefundInput) -> list[ValidationError]:
    """Validate a regular refund input.

    Rules:
    - refund date must be on or after the start date
    - refund date must be on or before the pass end date
    - a six-month pass needs the three-month fare
    - every amount given must be positive

    Args:
        data: Input to check

    Returns:
        All violations found, empty if the input is valid
    """
    errors = _check_refund_not_before_start(data.start_date, data.refund_date)

    try:
        end_date = data.end_date
    except OverflowError:
        errors.append(
            ValidationError.from_code(
                ErrorCode.INVALID_DATE,
                "start_date",
                f"pass period starting {data.start_date.isoformat()} cannot be computed",
            )
        )
    else:
        if data.refund_date > end_date:
            errors.append(
                ValidationError.from_code(
                    ErrorCode.DATE_RANGE_VIOLATION,
                    "refund_date",
                    f"refund date {data.refund_date.isoformat()} is after the pass "
                    f"end date {end_date.isoformat()}",
                )
            )

    if data.pass_tier is PassTier.SIX_MONTHS and data.three_month_fare is None:
        errors.append(
            ValidationError.from_code(
                ErrorCode.MISSING_REQUIRED_FIELD,
                "three_month_fare",
                "the three-month fare is required to refund a six-month pass",
            )
        )

    errors += _check_positive("purchase_price", "purchase price", data.purchase_price)
    errors += _check_positive("one_way_fare", "one-way fare", data.one_way_fare)
    errors += _check_positive("one_month_fare", "one-month fare", data.one_month_fare)
    if data.three_month_fare is not None:
        errors += _check_positive(
            "three_month_fare", "three-month fare", data.three_month_fare
        )

    return errors


def validate_section_change_input(data: SectionChangeRefundInput) -> list[ValidationError]:
    """Validate a section-change refund input.

    A section change has no natural end date, so the refund date is capped at
    six months after the start date.

    Args:
        data: Input to check

    Returns:
        All violations found, empty if the input is valid
    """
    errors = _check_refund_not_before_start(data.start_date, data.refund_date)

    try:
        latest = calendar_math.add_months(data.start_date, SECTION_CHANGE_MAX_MONTHS)
    except OverflowError:
        errors.append(
            ValidationError.from_code(
                ErrorCode.INVALID_DATE,
                "start_date",
                f"refund window starting {data.start_date.isoformat()} cannot be computed",
            )
        )
    else:
        if data.refund_date > latest:
            errors.append(
                ValidationError.from_code(
                    ErrorCode.DATE_RANGE_VIOLATION,
                    "refund_date",
                    f"refund date {data.refund_date.isoformat()} is more than "
                    f"{SECTION_CHANGE_MAX_MONTHS} months after the start date "
                    f"(latest {latest.isoformat()})",
                )
            )

    errors += _check_positive("purchase_price", "purchase price", data.purchase_price)

    return errors
