"""Refund validation and calculation services."""

from .policy import describe_refund_policy
from .regular_refund import RegularRefundEngine, compute_regular_refund
from .result_assembler import check_result
from .section_change_refund import SectionChangeRefundEngine, compute_section_change_refund
from .validator import validate_regular_input, validate_section_change_input

__all__ = [
    "RegularRefundEngine",
    "SectionChangeRefundEngine",
    "check_result",
    "compute_regular_refund",
    "compute_section_change_refund",
    "describe_refund_policy",
    "validate_regular_input",
    "validate_section_change_input",
]
