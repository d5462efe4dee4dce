"""Unit tests for the regular refund engine.

Tests verify the decision table, checked in order:
- Within 7 days: round-trip fare per day used
- One-month pass after 7 days: no refund
- Less than one whole month remaining: no refund
- Otherwise: months used charged at pass fares

Test categories:
- Grace period scenarios
- No-refund scenarios
- Monthly scenarios (three- and six-month passes)
- Fare composition, including the three-month base fare quirk
- Invariants (non-negative refunds, idempotence)
"""

import datetime as dt
from typing import Callable

import pydantic
import pytest

from pass_refund.models import (
    CalculationMethod,
    ErrorCode,
    FareSchedule,
    PassTier,
    RefundAuditRecord,
    RefundCalculationError,
    RefundKind,
    RefundResult,
    RegularRefundInput,
)
from pass_refund.services import compute_regular_refund
from pass_refund.services.regular_refund import (
    RegularRefundEngine,
    build_fare_schedule,
    compose_used_fare,
)

MakeInput = Callable[..., RegularRefundInput]


def _compute(data: RegularRefundInput) -> RefundResult:
    result = compute_regular_refund(data)
    assert isinstance(result, RefundResult), result
    return result


# === Grace Period (7 days or fewer) ===


class TestGracePeriod:
    """Refunds within 7 days of the start date."""

    def test_one_month_pass_five_days(self, make_regular_input: MakeInput) -> None:
        """5 days used: 320 x 2 x 5 = 3200 used, 16000 - 3200 - 220 = 12580."""
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.ONE_MONTH,
                purchase_price=16000,
                one_way_fare=320,
                refund_date=dt.date(2025, 6, 9),
            )
        )

        assert result.used_amount == 3200
        assert result.refund_amount == 12580
        assert result.processing_fee == 220
        assert result.detail.method == CalculationMethod.WITHIN_GRACE_PERIOD
        assert result.detail.elapsed_days == 5

    def test_three_month_pass_exactly_seven_days(self, make_regular_input: MakeInput) -> None:
        """Day 7 is still inside the grace period: 500 x 2 x 7 = 7000 used."""
        result = _compute(make_regular_input(refund_date=dt.date(2025, 6, 11)))

        assert result.used_amount == 7000
        assert result.refund_amount == 37780
        assert result.detail.method == CalculationMethod.WITHIN_GRACE_PERIOD

    def test_refund_on_start_date(self, make_regular_input: MakeInput) -> None:
        """The start day counts as one used day."""
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.ONE_MONTH,
                purchase_price=16000,
                one_way_fare=320,
                refund_date=dt.date(2025, 6, 5),
            )
        )

        assert result.used_amount == 640
        assert result.refund_amount == 15140

    def test_used_fare_above_price_clamps_to_zero(self, make_regular_input: MakeInput) -> None:
        """A refund is never negative; the used amount is still reported."""
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.ONE_MONTH,
                purchase_price=1000,
                one_way_fare=320,
                refund_date=dt.date(2025, 6, 9),
            )
        )

        assert result.refund_amount == 0
        assert result.used_amount == 3200


# === No Refund ===


class TestNoRefund:
    """Results with a refund of zero and an explanatory reason."""

    def test_one_month_pass_fifteen_days(self, make_regular_input: MakeInput) -> None:
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.ONE_MONTH,
                purchase_price=16000,
                one_way_fare=320,
                refund_date=dt.date(2025, 6, 19),
            )
        )

        assert result.refund_amount == 0
        assert result.used_amount == 0
        assert result.processing_fee == 220
        assert result.detail.method == CalculationMethod.NO_REFUND
        assert "one-month" in result.detail.applied_rule

    def test_one_month_pass_day_eight(self, make_regular_input: MakeInput) -> None:
        """Day 8 is the first day outside the grace period."""
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.ONE_MONTH,
                purchase_price=16000,
                refund_date=dt.date(2025, 6, 12),
            )
        )

        assert result.refund_amount == 0
        assert result.detail.method == CalculationMethod.NO_REFUND

    def test_less_than_one_month_remaining(self, make_regular_input: MakeInput) -> None:
        """Third month of a three-month pass: under a month left, no refund."""
        data = make_regular_input(refund_date=dt.date(2025, 8, 5))
        assert data.remaining_months == 0

        result = _compute(data)

        assert result.refund_amount == 0
        assert result.used_amount == 0
        assert "less than one whole month" in result.detail.applied_rule

    def test_non_positive_calculation(self, make_regular_input: MakeInput) -> None:
        """Six-month pass, month 5: 45000 + 16000 x 2 = 77000 exceeds the price."""
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.SIX_MONTHS,
                purchase_price=60000,
                three_month_fare=45000,
                refund_date=dt.date(2025, 10, 5),
            )
        )

        assert result.refund_amount == 0
        assert result.used_amount == 0
        assert result.detail.method == CalculationMethod.NO_REFUND
        assert result.detail.used_months == 5
        assert "zero or negative" in result.detail.applied_rule


# === Monthly Calculation ===


class TestMonthlyCalculation:
    """Refunds priced by months used."""

    def test_three_month_pass_first_month(self, make_regular_input: MakeInput) -> None:
        """Month 1 used: 45000 - 16000 - 220 = 28780."""
        result = _compute(make_regular_input(refund_date=dt.date(2025, 7, 4)))

        assert result.used_amount == 16000
        assert result.refund_amount == 28780
        assert result.detail.method == CalculationMethod.MONTHLY
        assert result.detail.used_months == 1

    def test_three_month_pass_day_eight(self, make_regular_input: MakeInput) -> None:
        """Day 8 switches to month pricing: one month charged."""
        result = _compute(make_regular_input(refund_date=dt.date(2025, 6, 12)))

        assert result.used_amount == 16000
        assert result.refund_amount == 28780
        assert result.detail.method == CalculationMethod.MONTHLY

    def test_three_month_pass_second_month(self, make_regular_input: MakeInput) -> None:
        """Month 2 used: 45000 - 32000 - 220 = 12780."""
        result = _compute(make_regular_input(refund_date=dt.date(2025, 8, 4)))

        assert result.used_amount == 32000
        assert result.refund_amount == 12780

    def test_six_month_pass_second_month(self, make_regular_input: MakeInput) -> None:
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.SIX_MONTHS,
                purchase_price=80000,
                three_month_fare=45000,
                refund_date=dt.date(2025, 8, 4),
            )
        )

        assert result.used_amount == 32000
        assert result.refund_amount == 47780

    def test_six_month_pass_third_month(self, make_regular_input: MakeInput) -> None:
        """Month 3 used: the three-month fare alone covers it."""
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.SIX_MONTHS,
                purchase_price=80000,
                three_month_fare=45000,
                refund_date=dt.date(2025, 8, 5),
            )
        )

        assert result.used_amount == 45000
        assert result.refund_amount == 34780

    def test_six_month_pass_fourth_month(self, make_regular_input: MakeInput) -> None:
        """Month 4 used: 45000 + 16000 = 61000, refund 18780."""
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.SIX_MONTHS,
                purchase_price=80000,
                three_month_fare=45000,
                refund_date=dt.date(2025, 10, 4),
            )
        )

        assert result.used_amount == 61000
        assert result.refund_amount == 18780
        assert result.detail.used_months == 4

    def test_six_month_pass_fifth_month(self, make_regular_input: MakeInput) -> None:
        result = _compute(
            make_regular_input(
                pass_tier=PassTier.SIX_MONTHS,
                purchase_price=80000,
                three_month_fare=45000,
                refund_date=dt.date(2025, 10, 5),
            )
        )

        assert result.used_amount == 77000
        assert result.refund_amount == 2780

    def test_breakdown_lists_steps(self, make_regular_input: MakeInput) -> None:
        result = _compute(make_regular_input(refund_date=dt.date(2025, 7, 4)))

        assert result.calculation_details.startswith("3-month pass:")
        assert len(result.detail.steps) == 2


# === Fare Composition ===


class TestFareComposition:
    """Tests for pricing the months used."""

    def test_up_to_two_months_at_one_month_fare(self) -> None:
        fares = FareSchedule(one_month_fare=16000, base_tier_fare=45000)

        assert compose_used_fare(1, fares) == 16000
        assert compose_used_fare(2, fares) == 32000

    def test_base_tier_fare_from_third_month(self) -> None:
        fares = FareSchedule(one_month_fare=16000, base_tier_fare=45000)

        assert compose_used_fare(3, fares) == 45000
        assert compose_used_fare(5, fares) == 77000

    def test_six_month_pass_uses_three_month_fare(self, make_regular_input: MakeInput) -> None:
        data = make_regular_input(
            pass_tier=PassTier.SIX_MONTHS,
            purchase_price=80000,
            three_month_fare=45000,
        )

        assert build_fare_schedule(data).base_tier_fare == 45000

    @pytest.mark.quirk
    def test_three_month_pass_uses_purchase_price_as_base_fare(
        self, make_regular_input: MakeInput
    ) -> None:
        """Known quirk: a three-month pass prices months 3+ from its purchase price.

        The six-month rule takes an explicit three-month fare, but the
        three-month rule substitutes the purchase price even when a different
        three-month fare is supplied. Kept as-is to match the fare rules in use.
        """
        data = make_regular_input(purchase_price=46000, three_month_fare=45000)
        fares = build_fare_schedule(data)

        assert fares.base_tier_fare == 46000
        assert compose_used_fare(3, fares) == 46000
        assert compose_used_fare(4, fares) == 46000 + 16000

    def test_fare_schedule_requires_base_tier_fare(self) -> None:
        """A six-month computation cannot be built without a three-month fare."""
        with pytest.raises(pydantic.ValidationError):
            FareSchedule(one_month_fare=16000, base_tier_fare=None)  # type: ignore[arg-type]

    def test_six_month_schedule_needs_three_month_fare(self, make_regular_input: MakeInput) -> None:
        data = make_regular_input(pass_tier=PassTier.SIX_MONTHS, purchase_price=80000)

        with pytest.raises(RefundCalculationError) as exc_info:
            build_fare_schedule(data)

        assert exc_info.value.code == ErrorCode.MISSING_REQUIRED_FIELD

    def test_schedule_rejects_non_positive_fare(self, make_regular_input: MakeInput) -> None:
        with pytest.raises(RefundCalculationError) as exc_info:
            build_fare_schedule(make_regular_input(one_month_fare=0))

        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT


class TestRegularRefundEngine:
    """Tests for calling the engine directly."""

    def test_engine_needs_fare_schedule(self, make_regular_input: MakeInput) -> None:
        """Monthly pricing cannot run on an input alone."""
        data = make_regular_input(
            pass_tier=PassTier.SIX_MONTHS,
            purchase_price=80000,
            refund_date=dt.date(2025, 8, 4),
        )

        with pytest.raises(TypeError):
            RegularRefundEngine().calculate(data)  # type: ignore[call-arg]
        with pytest.raises(RefundCalculationError):
            RegularRefundEngine().calculate(data, build_fare_schedule(data))

    def test_engine_matches_entry_point(self, make_regular_input: MakeInput) -> None:
        data = make_regular_input(
            pass_tier=PassTier.SIX_MONTHS,
            purchase_price=80000,
            three_month_fare=45000,
            refund_date=dt.date(2025, 8, 4),
        )

        assert RegularRefundEngine().calculate(data, build_fare_schedule(data)) == _compute(data)


# === Invariants ===


class TestInvariants:
    """Properties that hold for every valid input."""

    @pytest.mark.parametrize("tier", list(PassTier))
    def test_refund_never_negative(self, tier: PassTier, make_regular_input: MakeInput) -> None:
        """Every refund date inside the pass period yields refund >= 0."""
        start = dt.date(2025, 6, 5)
        end = start + dt.timedelta(days=200)
        day = start
        while day <= end:
            data = make_regular_input(
                pass_tier=tier,
                purchase_price=30000,
                one_way_fare=900,
                three_month_fare=40000 if tier is PassTier.SIX_MONTHS else None,
                refund_date=day,
            )
            if day <= data.end_date:
                result = _compute(data)
                assert result.refund_amount >= 0
                assert result.used_amount >= 0
                assert result.processing_fee == 220
            day += dt.timedelta(days=1)

    def test_identical_inputs_give_identical_results(self, make_regular_input: MakeInput) -> None:
        first = _compute(make_regular_input(refund_date=dt.date(2025, 8, 4)))
        second = _compute(make_regular_input(refund_date=dt.date(2025, 8, 4)))

        assert first == second
        assert first.model_dump() == second.model_dump()


# === Validation and Audit Sink ===


class TestComputeRegularRefund:
    """Tests for the public entry point."""

    def test_invalid_input_returns_errors(self, make_regular_input: MakeInput) -> None:
        outcome = compute_regular_refund(
            make_regular_input(purchase_price=0, refund_date=dt.date(2025, 6, 1))
        )

        assert isinstance(outcome, list)
        assert len(outcome) == 2

    def test_sink_receives_result(self, make_regular_input: MakeInput) -> None:
        records: list[RefundAuditRecord] = []
        data = make_regular_input()

        result = compute_regular_refund(data, sink=records.append)

        assert len(records) == 1
        assert records[0].kind == RefundKind.REGULAR
        assert records[0].succeeded
        assert records[0].result == result
        assert isinstance(records[0].input, RegularRefundInput)
        assert records[0].input.refund_date == data.refund_date

    def test_sink_receives_errors(self, make_regular_input: MakeInput) -> None:
        records: list[RefundAuditRecord] = []

        compute_regular_refund(
            make_regular_input(pass_tier=PassTier.SIX_MONTHS, purchase_price=80000),
            sink=records.append,
        )

        assert len(records) == 1
        assert not records[0].succeeded
        assert records[0].errors[0].field == "three_month_fare"

    def test_sink_record_dumps_for_overflowing_start(self, make_regular_input: MakeInput) -> None:
        """A start date whose pass period runs past date.max is reported, and its record serializes."""
        records: list[RefundAuditRecord] = []
        data = make_regular_input(
            pass_tier=PassTier.ONE_MONTH,
            start_date=dt.date(9999, 12, 1),
            refund_date=dt.date(9999, 12, 5),
        )

        outcome = compute_regular_refund(data, sink=records.append)

        assert isinstance(outcome, list)
        assert [error.error_code for error in outcome] == [ErrorCode.INVALID_DATE]
        dumped = records[0].model_dump()
        assert dumped["input"]["start_date"] == dt.date(9999, 12, 1)
        assert "end_date" not in dumped["input"]
        assert "9999-12-01" in repr(data)
