"""Plain-language summary of the refund rules."""

from pass_refund.config import (
    DECADE_DAYS,
    GRACE_PERIOD_DAYS,
    PROCESSING_FEE,
    SECTION_CHANGE_MAX_MONTHS,
)
from pass_refund.models import PassTier


def describe_refund_policy() -> str:
    """Get human-readable description of both refund procedures.

    Returns:
        Policy description text
    """
    base_days = ", ".join(f"{tier.label} {tier.base_days}" for tier in PassTier)
    return (
        "Regular refund (cancellation):\n"
        f"• Within {GRACE_PERIOD_DAYS} days of the start date: round-trip fare per day used\n"
        f"• One-month passes after {GRACE_PERIOD_DAYS} days: no refund\n"
        "• Less than one whole month left before expiry: no refund\n"
        "• Otherwise: one-month fare per month used for up to 2 months, "
        "then the three-month fare plus one-month fare per further month\n"
        "Section-change refund:\n"
        f"• Days used are billed in blocks of {DECADE_DAYS} days at the daily fare\n"
        f"• Daily fare = purchase price / base days ({base_days}), rounded up\n"
        f"• Refund must be requested within {SECTION_CHANGE_MAX_MONTHS} months of the start date\n"
        f"Every refund is charged a processing fee of {PROCESSING_FEE} yen."
    )
