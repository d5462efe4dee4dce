"""Assembly of refund results and their human-readable breakdown."""

from pass_refund.config import PROCESSING_FEE
from pass_refund.models import (
    CalculationMethod,
    ErrorCode,
    PassTier,
    RefundCalculationDetail,
    RefundCalculationError,
    RefundResult,
)


def format_yen(amount: int) -> str:
    return f"{amount:,} yen"


def render_breakdown(tier: PassTier, detail: RefundCalculationDetail) -> str:
    """Render the audit trail shown with a result.

    The first line names the pass and the rule applied; each following
    line is one arithmetic step with its values substituted.
    """
    lines = [f"{tier.label}: {detail.applied_rule}"]
    lines.extend(f"  {step}" for step in detail.steps)
    return "\n".join(lines)


def assemble_result(
    tier: PassTier,
    *,
    refund_amount: int,
    used_amount: int,
    detail: RefundCalculationDetail,
) -> RefundResult:
    """Package computed amounts and their breakdown into a RefundResult.

    Args:
        tier: Pass duration, used in the breakdown heading
        refund_amount: Final refund in yen
        used_amount: Fare charged for the used portion
        detail: Branch and steps that produced the amounts

    Returns:
        RefundResult carrying the fixed processing fee

    Raises:
        RefundCalculationError: If the amounts break the output invariants
    """
    check_amounts(refund_amount, used_amount)
    return RefundResult(
        refund_amount=refund_amount,
        used_amount=used_amount,
        processing_fee=PROCESSING_FEE,
        calculation_details=render_breakdown(tier, detail),
        detail=detail,
    )


def no_refund_result(
    tier: PassTier,
    *,
    reason: str,
    elapsed_days: int,
    used_months: int = 0,
    steps: list[str] | None = None,
) -> RefundResult:
    """Build a successful result with nothing refunded.

    Args:
        tier: Pass duration
        reason: Why no refund is owed
        elapsed_days: Inclusive days used
        used_months: Pass month the refund date falls in
        steps: Arithmetic that led to the decision, if any

    Returns:
        RefundResult with refund and used amounts of zero
    """
    detail = RefundCalculationDetail(
        method=CalculationMethod.NO_REFUND,
        elapsed_days=elapsed_days,
        used_months=used_months,
        applied_rule=reason,
        steps=steps or [],
    )
    return assemble_result(tier, refund_amount=0, used_amount=0, detail=detail)


def check_amounts(refund_amount: int, used_amount: int) -> None:
    """Raise if computed amounts could not belong to a valid refund."""
    if refund_amount < 0:
        raise RefundCalculationError(
            ErrorCode.CALCULATION_FAILURE, f"refund amount is negative ({refund_amount})"
        )
    if used_amount < 0:
        raise RefundCalculationError(
            ErrorCode.CALCULATION_FAILURE, f"used amount is negative ({used_amount})"
        )


def check_result(result: RefundResult) -> None:
    """Verify a finished result against the output invariants.

    Raises:
        RefundCalculationError: If an amount is negative or the fee is wrong
    """
    check_amounts(result.refund_amount, result.used_amount)
    if result.processing_fee != PROCESSING_FEE:
        raise RefundCalculationError(
            ErrorCode.CALCULATION_FAILURE,
            f"processing fee is {result.processing_fee}, expected {PROCESSING_FEE}",
        )
