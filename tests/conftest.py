"""Pytest configuration and fixtures for refund calculation tests.

This module provides reusable fixtures for testing:
- Input builders for regular and section-change refunds
- Settings and package logger isolation between tests
"""

import datetime as dt
import logging
from typing import Any, Callable, Generator

import pytest

from pass_refund.config import get_settings
from pass_refund.models import PassTier, RegularRefundInput, SectionChangeRefundInput

# === Shared Test Data ===

START_DATE = dt.date(2025, 6, 5)


# === Context Fixtures ===


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Re-read environment settings in every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Remove handlers installed by configure_logging after each test.

    The handler binds the stream captured for one test, so it must not
    outlive that test.
    """
    yield
    package_logger = logging.getLogger("pass_refund")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_pass_refund_handler", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# === Input Fixtures ===


@pytest.fixture
def make_regular_input() -> Callable[..., RegularRefundInput]:
    """Build a RegularRefundInput for a three-month pass, overriding any field.

    Defaults: 45000 yen pass from 2025-06-05, one-way fare 500,
    one-month fare 16000, refund on 2025-07-04.
    """

    def _make(**overrides: Any) -> RegularRefundInput:
        fields: dict[str, Any] = {
            "start_date": START_DATE,
            "pass_tier": PassTier.THREE_MONTHS,
            "purchase_price": 45000,
            "refund_date": dt.date(2025, 7, 4),
            "one_way_fare": 500,
            "one_month_fare": 16000,
            "three_month_fare": None,
        }
        fields.update(overrides)
        return RegularRefundInput(**fields)

    return _make


@pytest.fixture
def make_section_change_input() -> Callable[..., SectionChangeRefundInput]:
    """Build a SectionChangeRefundInput for a one-month pass, overriding any field.

    Defaults: 16000 yen pass from 2025-06-05, refund on 2025-06-14.
    """

    def _make(**overrides: Any) -> SectionChangeRefundInput:
        fields: dict[str, Any] = {
            "start_date": START_DATE,
            "pass_tier": PassTier.ONE_MONTH,
            "purchase_price": 16000,
            "refund_date": dt.date(2025, 6, 14),
        }
        fields.update(overrides)
        return SectionChangeRefundInput(**fields)

    return _make
