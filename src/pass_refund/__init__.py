"""Refund calculation for commuter rail passes."""

from .models import (
    PassTier,
    RefundAuditRecord,
    RefundResult,
    RegularRefundInput,
    SectionChangeRefundInput,
    ValidationError,
)
from .services import (
    compute_regular_refund,
    compute_section_change_refund,
    describe_refund_policy,
)

__all__ = [
    "PassTier",
    "RefundAuditRecord",
    "RefundResult",
    "RegularRefundInput",
    "SectionChangeRefundInput",
    "ValidationError",
    "compute_regular_refund",
    "compute_section_change_refund",
    "describe_refund_policy",
]
