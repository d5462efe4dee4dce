"""Enumeration types for commuter pass refund models."""

from enum import Enum


class PassTier(int, Enum):
    """Commuter pass duration. The value is the number of months covered."""

    ONE_MONTH = 1
    THREE_MONTHS = 3
    SIX_MONTHS = 6

    @property
    def months(self) -> int:
        return int(self.value)

    @property
    def base_days(self) -> int:
        """Day count used for daily-fare proration (30 per month)."""
        return self.months * 30

    @property
    def label(self) -> str:
        return f"{self.months}-month pass"


class RefundKind(str, Enum):
    """Which refund procedure is being applied."""

    REGULAR = "regular"
    SECTION_CHANGE = "section_change"


class CalculationMethod(str, Enum):
    """Branch of the refund rules that produced a result."""

    WITHIN_GRACE_PERIOD = "within_grace_period"
    MONTHLY = "monthly"
    DECADE = "decade"
    NO_REFUND = "no_refund"
