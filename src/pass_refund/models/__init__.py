"""Pydantic models for commuter pass refund calculation."""

from .enums import CalculationMethod, PassTier, RefundKind
from .errors import (
    ERROR_MESSAGES,
    USER_MESSAGES,
    ErrorCode,
    RefundCalculationError,
    ValidationError,
    format_user_messages,
)
from .refund import (
    AuditSink,
    FareSchedule,
    RefundAuditRecord,
    RefundCalculationDetail,
    RefundInput,
    RefundResult,
    RegularRefundInput,
    SectionChangeRefundInput,
)

__all__ = [
    # Enums
    "CalculationMethod",
    "PassTier",
    "RefundKind",
    # Inputs
    "RegularRefundInput",
    "SectionChangeRefundInput",
    "RefundInput",
    "FareSchedule",
    # Results
    "RefundCalculationDetail",
    "RefundResult",
    "RefundAuditRecord",
    "AuditSink",
    # Errors
    "ErrorCode",
    "ERROR_MESSAGES",
    "USER_MESSAGES",
    "RefundCalculationError",
    "ValidationError",
    "format_user_messages",
]
