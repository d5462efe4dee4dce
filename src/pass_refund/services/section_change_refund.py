"""Section-change refund engine.

When a pass holder changes route, the days used are billed in ten-day
blocks ("jun") at a daily rate of the purchase price divided by the tier's
base days (30/90/180), rounded up to a whole yen. Any partial block is
billed in full. There is no minimum remaining period.
"""

import logging

from pass_refund.config import DECADE_DAYS
from pass_refund.models import (
    AuditSink,
    CalculationMethod,
    RefundAuditRecord,
    RefundCalculationDetail,
    RefundKind,
    RefundResult,
    SectionChangeRefundInput,
    ValidationError,
)
from pass_refund.utils.logging import log_refund_calculation

from .result_assembler import assemble_result, format_yen
from .validator import validate_section_change_input

logger = logging.getLogger(__name__)


class SectionChangeRefundEngine:
    """Computes section-change refunds for validated inputs."""

    def calculate(self, data: SectionChangeRefundInput) -> RefundResult:
        used_amount = data.used_decades * data.daily_fare * DECADE_DAYS
        refund_amount = max(0, data.purchase_price - used_amount - data.processing_fee)

        detail = RefundCalculationDetail(
            method=CalculationMethod.DECADE,
            elapsed_days=data.elapsed_days,
            used_decades=data.used_decades,
            applied_rule=(
                f"section change, {data.elapsed_days} day(s) billed as "
                f"{data.used_decades} block(s) of {DECADE_DAYS} days"
            ),
            steps=[
                f"Daily fare = {format_yen(data.purchase_price)} / "
                f"{data.pass_tier.base_days} days, rounded up = {format_yen(data.daily_fare)}",
                f"Used fare = {data.used_decades} block(s) x {format_yen(data.daily_fare)} "
                f"x {DECADE_DAYS} = {format_yen(used_amount)}",
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


_engine = SectionChangeRefundEngine()


def compute_section_change_refund(
    data: SectionChangeRefundInput,
    *,
    sink: AuditSink | None = None,
) -> RefundResult | list[ValidationError]:
    """Validate and compute a section-change refund.

    Args:
        data: Refund request
        sink: Optional callable receiving a RefundAuditRecord for this call

    Returns:
        RefundResult, or every validation error if the input was rejected
    """
    errors = validate_section_change_input(data)
    if errors:
        log_refund_calculation(
            logger,
            "compute_section_change_refund",
            pass_tier=data.pass_tier.months,
            error_codes=[error.code for error in errors],
        )
        if sink is not None:
            sink(RefundAuditRecord(kind=RefundKind.SECTION_CHANGE, input=data, errors=errors))
        return errors

    result = _engine.calculate(data)

    log_refund_calculation(
        logger,
        "compute_section_change_refund",
        pass_tier=data.pass_tier.months,
        elapsed_days=data.elapsed_days,
        method=result.detail.method.value,
        refund_amount=result.refund_amount,
        used_amount=result.used_amount,
    )
    if sink is not None:
        sink(RefundAuditRecord(kind=RefundKind.SECTION_CHANGE, input=data, result=result))
    return result
