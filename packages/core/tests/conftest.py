"""Shared fixtures for tally-core tests."""

from decimal import Decimal
from typing import Optional

import pytest

from tally_core import (
    BracketSchedule,
    FilingStatus,
    InMemoryScheduleProvider,
    TaxBracket,
)


def make_schedule(
    bounds: list[tuple[str, Optional[str], str]],
    tax_year: int = 2024,
    filing_status: FilingStatus = FilingStatus.SINGLE,
) -> BracketSchedule:
    """Build a schedule from (lower, upper, rate) string triples."""
    return BracketSchedule(
        tax_year=tax_year,
        filing_status=filing_status,
        brackets=[
            TaxBracket(
                lower_bound=Decimal(lower),
                upper_bound=None if upper is None else Decimal(upper),
                rate=Decimal(rate),
            )
            for lower, upper, rate in bounds
        ],
    )


@pytest.fixture
def schedule_factory():
    """Factory fixture exposing ``make_schedule`` to tests."""
    return make_schedule


@pytest.fixture
def single_2024() -> BracketSchedule:
    """Seven-bracket schedule shaped like the 2024 single-filer table."""
    return make_schedule(
        [
            ("0", "11000", "0.10"),
            ("11000", "44725", "0.12"),
            ("44725", "95375", "0.22"),
            ("95375", "182050", "0.24"),
            ("182050", "231250", "0.32"),
            ("231250", "578125", "0.35"),
            ("578125", None, "0.37"),
        ]
    )


@pytest.fixture
def joint_2024() -> BracketSchedule:
    """Married-filing-jointly counterpart of ``single_2024``."""
    return make_schedule(
        [
            ("0", "22000", "0.10"),
            ("22000", "89450", "0.12"),
            ("89450", "190750", "0.22"),
            ("190750", "364200", "0.24"),
            ("364200", "462500", "0.32"),
            ("462500", "693750", "0.35"),
            ("693750", None, "0.37"),
        ],
        filing_status=FilingStatus.MARRIED_FILING_JOINTLY,
    )


@pytest.fixture
def flat_ten_percent() -> BracketSchedule:
    """Single unbounded bracket at 10%."""
    return make_schedule([("0", None, "0.10")])


@pytest.fixture
def provider(single_2024: BracketSchedule, joint_2024: BracketSchedule) -> InMemoryScheduleProvider:
    """Provider holding the 2024 single and joint schedules."""
    return InMemoryScheduleProvider([single_2024, joint_2024])
