"""Refund input records and calculation results.

All amounts are whole yen. Input dates may be given as date or datetime;
datetimes are reduced to their calendar day when the record is built.
Aware datetimes are read in the time zone of the first aware one.

Derived values are cached properties computed from the normalized dates.
They are not serialized fields, so a record whose pass period cannot be
computed can still be printed and dumped.
"""

import datetime as dt
from functools import cached_property
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pass_refund.config import PROCESSING_FEE, ROUND_TRIP_MULTIPLIER
from pass_refund.utils import calendar_math

from .enums import CalculationMethod, PassTier, RefundKind
from .errors import ValidationError


_DATE_FIELDS = ("start_date", "refund_date")


class _RefundInputBase(BaseModel):
    """Fields shared by both refund procedures."""

    model_config = ConfigDict(strict=True, frozen=True)

    start_date: dt.date = Field(..., description="First valid day of the pass")
    pass_tier: PassTier = Field(..., description="Pass duration")
    purchase_price: int = Field(..., description="Price paid for the pass in yen")
    refund_date: dt.date = Field(..., description="Day the refund is requested")

    @model_validator(mode="before")
    @classmethod
    def _normalize_dates(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        stamps = {name: data[name] for name in _DATE_FIELDS if name in data}
        tz = calendar_math.common_timezone(*stamps.values())
        normalized = {
            name: calendar_math.normalize_date(value, tz)
            for name, value in stamps.items()
            if isinstance(value, dt.datetime)
        }
        return {**data, **normalized}

    @cached_property
    def elapsed_days(self) -> int:
        """Days used, counting the start date and the refund date."""
        return calendar_math.elapsed_days(self.start_date, self.refund_date)

    @property
    def processing_fee(self) -> int:
        return PROCESSING_FEE


class RegularRefundInput(_RefundInputBase):
    """Input for a standard cancellation of a pass on the same route.

    three_month_fare is only required for six-month passes, where it prices
    the first three used months.
    """

    one_way_fare: int = Field(..., description="One-way base fare in yen")
    one_month_fare: int = Field(..., description="One-month pass fare in yen")
    three_month_fare: Optional[int] = Field(
        default=None,
        description="Three-month pass fare in yen (six-month passes only)",
    )

    @cached_property
    def end_date(self) -> dt.date:
        return calendar_math.end_date(self.start_date, self.pass_tier)

    @cached_property
    def remaining_days(self) -> int:
        """Valid days left after the refund date."""
        return max(0, (self.end_date - self.refund_date).days)

    @cached_property
    def remaining_months(self) -> int:
        """Whole calendar months from the refund date to the end date."""
        return calendar_math.months_between(self.refund_date, self.end_date)

    @cached_property
    def used_months(self) -> int:
        return calendar_math.used_months(self.start_date, self.refund_date)

    @cached_property
    def round_trip_fare(self) -> int:
        return self.one_way_fare * ROUND_TRIP_MULTIPLIER


class SectionChangeRefundInput(_RefundInputBase):
    """Input for a refund issued because the pass route changed.

    Usage is billed in ten-day blocks at a daily rate derived from the
    purchase price alone.
    """

    @cached_property
    def used_decades(self) -> int:
        return calendar_math.used_decades(self.elapsed_days)

    @cached_property
    def daily_fare(self) -> int:
        """Purchase price divided by the tier's base days, rounded up."""
        return calendar_math.daily_fare(self.purchase_price, self.pass_tier.base_days)


class FareSchedule(BaseModel):
    """Fares used to price months consumed on a regular refund.

    Built only from a validated RegularRefundInput. base_tier_fare prices
    the first three used months and is always present.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    one_month_fare: int = Field(..., gt=0)
    base_tier_fare: int = Field(..., gt=0)


class RefundCalculationDetail(BaseModel):
    """How a refund was reached: the branch taken and each arithmetic step."""

    model_config = ConfigDict(strict=True, frozen=True)

    method: CalculationMethod
    elapsed_days: int = Field(..., ge=1)
    used_months: int = Field(default=0, ge=0)
    used_decades: int = Field(default=0, ge=0)
    applied_rule: str
    steps: list[str] = Field(default_factory=list)


class RefundResult(BaseModel):
    """Outcome of a refund calculation.

    A refund of zero is a successful result; the reason is carried in
    calculation_details and detail.applied_rule.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    refund_amount: int = Field(..., ge=0, description="Amount returned in yen")
    used_amount: int = Field(..., ge=0, description="Fare charged for the used portion")
    processing_fee: int = Field(..., ge=0, description="Refund processing fee in yen")
    calculation_details: str = Field(..., description="Human-readable breakdown")
    detail: RefundCalculationDetail


RefundInput = Union[RegularRefundInput, SectionChangeRefundInput]


class RefundAuditRecord(BaseModel):
    """One completed call, delivered to an optional audit sink."""

    model_config = ConfigDict(frozen=True)

    kind: RefundKind
    input: RefundInput
    result: Optional[RefundResult] = None
    errors: list[ValidationError] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.result is not None


AuditSink = Callable[[RefundAuditRecord], None]
