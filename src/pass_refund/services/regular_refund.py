"""Regular refund engine for cancelling a pass on the same route.

Rules, checked in order (first match wins):
- Within 7 days of the start: charge a round trip per day used
- One-month passes after the grace period: no refund
- Less than one whole month left before expiry: no refund
- Otherwise: charge the months used at pass fares

All amounts are in yen. The processing fee is deducted from every refund.
"""

import logging

from pass_refund.config import GRACE_PERIOD_DAYS
from pass_refund.models import (
    AuditSink,
    CalculationMethod,
    ErrorCode,
    FareSchedule,
    PassTier,
    RefundAuditRecord,
    RefundCalculationDetail,
    RefundCalculationError,
    RefundKind,
    RefundResult,
    RegularRefundInput,
    ValidationError,
)
from pass_refund.utils.logging import log_refund_calculation

from .result_assembler import assemble_result, format_yen, no_refund_result
from .validator import validate_regular_input

logger = logging.getLogger(__name__)

# Months priced individually at the one-month fare before the base tier fare applies
INDIVIDUALLY_PRICED_MONTHS = 2

# Months covered by the base tier fare
BASE_TIER_MONTHS = 3

NO_REFUND_ONE_MONTH = (
    f"one-month passes are not refundable after the first {GRACE_PERIOD_DAYS} days"
)
NO_REFUND_REMAINING = "less than one whole month remains before expiry"
NO_REFUND_NON_POSITIVE = "calculated refund is zero or negative"


def build_fare_schedule(data: RegularRefundInput) -> FareSchedule:
    """Select the fares that price used months for a validated input.

    A six-month pass prices its first three months at the three-month fare.
    A three-month pass uses its own purchase price for that role: the
    purchase price stands in for the three-month fare even though the two
    can differ.

    Args:
        data: Input that has passed validate_regular_input

    Returns:
        FareSchedule with both fares present

    Raises:
        RefundCalculationError: If a fare needed for the schedule is missing
            or not positive
    """
    if data.pass_tier is PassTier.SIX_MONTHS:
        if data.three_month_fare is None:
            raise RefundCalculationError(
                ErrorCode.MISSING_REQUIRED_FIELD,
                "a 6-month pass needs the three-month fare",
            )
        base_tier_fare = data.three_month_fare
    else:
        base_tier_fare = data.purchase_price

    required = (("one-month fare", data.one_month_fare), ("base tier fare", base_tier_fare))
    for label, amount in required:
        if amount <= 0:
            raise RefundCalculationError(
                ErrorCode.INVALID_AMOUNT, f"{label} must be a positive amount (got {amount})"
            )
    return FareSchedule(one_month_fare=data.one_month_fare, base_tier_fare=base_tier_fare)


def compose_used_fare(used_months: int, fares: FareSchedule) -> int:
    """Fare charged for the months used.

    Up to two months are charged at the one-month fare each. From the third
    month the base tier fare covers three months and each further month is
    charged at the one-month fare.
    """
    if used_months <= INDIVIDUALLY_PRICED_MONTHS:
        return fares.one_month_fare * used_months
    return fares.base_tier_fare + fares.one_month_fare * (used_months - BASE_TIER_MONTHS)


class RegularRefundEngine:
    """Applies the regular refund decision table to validated inputs.

    Holds no state; one instance may serve any number of callers. Monthly
    pricing reads fares only from the FareSchedule passed in, which
    build_fare_schedule refuses to create for an incomplete input.
    """

    def calculate(self, data: RegularRefundInput, fares: FareSchedule) -> RefundResult:
        """Calculate the refund for a validated input.

        Args:
            data: Input that has passed validate_regular_input
            fares: Schedule built from data by build_fare_schedule

        Returns:
            RefundResult; a refund of zero carries the reason
        """
        if data.elapsed_days <= GRACE_PERIOD_DAYS:
            return self._within_grace_period(data)

        if data.pass_tier is PassTier.ONE_MONTH:
            return no_refund_result(
                data.pass_tier,
                reason=NO_REFUND_ONE_MONTH,
                elapsed_days=data.elapsed_days,
                used_months=data.used_months,
            )

        if data.remaining_months < 1:
            return no_refund_result(
                data.pass_tier,
                reason=NO_REFUND_REMAINING,
                elapsed_days=data.elapsed_days,
                used_months=data.used_months,
                steps=[
                    f"Valid until {data.end_date.isoformat()}, "
                    f"{data.remaining_days} day(s) left after the refund date"
                ],
            )

        return self._monthly_basis(data, fares)

    def _within_grace_period(self, data: RegularRefundInput) -> RefundResult:
        used_amount = data.round_trip_fare * data.elapsed_days
        refund_amount = max(0, data.purchase_price - used_amount - data.processing_fee)

        detail = RefundCalculationDetail(
            method=CalculationMethod.WITHIN_GRACE_PERIOD,
            elapsed_days=data.elapsed_days,
            applied_rule=f"refund within {GRACE_PERIOD_DAYS} days of the start date",
            steps=[
                f"Used fare = {format_yen(data.round_trip_fare)} round trip "
                f"x {data.elapsed_days} day(s) = {format_yen(used_amount)}",
                f"Refund = {format_yen(data.purchase_price)} - {format_yen(used_amount)} "
                f"- {format_yen(data.processing_fee)} fee = {format_yen(refund_amount)}",
            ],
        )
        return assemble_result(
            data.pass_tier,
            refund_amount=refund_amount,
            used_amount=used_amount,
            detail=detail,
        )

    def _monthly_basis(self, data: RegularRefundInput, fares: FareSchedule) -> RefundResult:
        used_fare = compose_used_fare(data.used_months, fares)
        steps = [self._used_fare_step(data.used_months, fares, used_fare)]

        calculated = data.purchase_price - used_fare - data.processing_fee
        steps.append(
            f"Refund = {format_yen(data.purchase_price)} - {format_yen(used_fare)} "
            f"- {format_yen(data.processing_fee)} fee = {format_yen(calculated)}"
        )

        if calculated <= 0:
            return no_refund_result(
                data.pass_tier,
                reason=NO_REFUND_NON_POSITIVE,
                elapsed_days=data.elapsed_days,
                used_months=data.used_months,
                steps=steps,
            )

        detail = RefundCalculationDetail(
            method=CalculationMethod.MONTHLY,
            elapsed_days=data.elapsed_days,
            used_months=data.used_months,
            applied_rule=f"monthly calculation, {data.used_months} month(s) used",
            steps=steps,
        )
        return assemble_result(
            data.pass_tier,
            refund_amount=calculated,
            used_amount=used_fare,
            detail=detail,
        )

    @staticmethod
    def _used_fare_step(used_months: int, fares: FareSchedule, used_fare: int) -> str:
        if used_months <= INDIVIDUALLY_PRICED_MONTHS:
            return (
                f"Used fare = {format_yen(fares.one_month_fare)} x {used_months} month(s) "
                f"= {format_yen(used_fare)}"
            )
        additional = used_months - BASE_TIER_MONTHS
        return (
            f"Used fare = {format_yen(fares.base_tier_fare)} (3 months) "
            f"+ {format_yen(fares.one_month_fare)} x {additional} month(s) "
            f"= {format_yen(used_fare)}"
        )


_engine = RegularRefundEngine()


def compute_regular_refund(
    data: RegularRefundInput,
    *,
    sink: AuditSink | None = None,
) -> RefundResult | list[ValidationError]:
    """Validate and compute a regular refund.

    Args:
        data: Refund request
        sink: Optional callable receiving a RefundAuditRecord for this call

    Returns:
        RefundResult, or every validation error if the input was rejected
    """
    errors = validate_regular_input(data)
    if errors:
        log_refund_calculation(
            logger,
            "compute_regular_refund",
            pass_tier=data.pass_tier.months,
            error_codes=[error.code for error in errors],
        )
        if sink is not None:
            sink(RefundAuditRecord(kind=RefundKind.REGULAR, input=data, errors=errors))
        return errors

    result = _engine.calculate(data, build_fare_schedule(data))

    log_refund_calculation(
        logger,
        "compute_regular_refund",
        pass_tier=data.pass_tier.months,
        elapsed_days=data.elapsed_days,
        method=result.detail.method.value,
        refund_amount=result.refund_amount,
        used_amount=result.used_amount,
    )
    if sink is not None:
        sink(RefundAuditRecord(kind=RefundKind.REGULAR, input=data, result=result))
    return result
