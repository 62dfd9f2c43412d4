"""Progressive tax bracket engine.

Walks a bracket schedule in ascending order, taxing each slice of income at
its bracket's marginal rate. Flat-rate tax types skip the walk entirely.

Example:
    >>> result = apply_bracket_schedule(Decimal("20000"), schedule_2024_single)
    >>> [entry.amount for entry in result.breakdown]
    [Decimal('1100.00'), Decimal('1080.00')]
    >>> result.gross_tax_owed
    Decimal('2180.00')
"""

from decimal import Decimal

import structlog

from .exceptions import InvalidInputError
from .models import BracketResult, BracketSchedule, BreakdownEntry
from .money import Numeric, require_cents, require_rate, round2, sum_money

logger = structlog.get_logger()

BRACKET_CATEGORY = "Tax Bracket"


def validate_schedule(schedule: BracketSchedule) -> None:
    """Check that a schedule is ordered, gap-free and covers [0, ∞).

    Raises:
        InvalidInputError: Naming the first bracket that breaks an invariant.
    """
    brackets = schedule.brackets
    if not brackets:
        raise InvalidInputError(
            "Bracket schedule has no brackets",
            field="schedule.brackets",
            constraint="at least one bracket",
            details={"tax_year": schedule.tax_year, "filing_status": schedule.filing_status.value},
        )

    if brackets[0].lower_bound != 0:
        raise InvalidInputError(
            "First bracket must start at zero",
            field="schedule.brackets[0].lower_bound",
            value=brackets[0].lower_bound,
            constraint="lower_bound == 0",
        )

    last = len(brackets) - 1
    for i, bracket in enumerate(brackets):
        require_rate(bracket.rate, f"schedule.brackets[{i}].rate")

        if bracket.upper_bound is None:
            if i != last:
                raise InvalidInputError(
                    "Only the last bracket may be unbounded",
                    field=f"schedule.brackets[{i}].upper_bound",
                    constraint="upper_bound set for all but the last bracket",
                )
            continue

        if i == last:
            raise InvalidInputError(
                "Last bracket must be unbounded",
                field=f"schedule.brackets[{i}].upper_bound",
                value=bracket.upper_bound,
                constraint="upper_bound is None",
            )
        if bracket.upper_bound <= bracket.lower_bound:
            raise InvalidInputError(
                "Bracket upper bound must exceed its lower bound",
                field=f"schedule.brackets[{i}].upper_bound",
                value=bracket.upper_bound,
                constraint="upper_bound > lower_bound",
            )
        next_lower = brackets[i + 1].lower_bound
        if next_lower != bracket.upper_bound:
            raise InvalidInputError(
                "Brackets must be contiguous",
                field=f"schedule.brackets[{i + 1}].lower_bound",
                value=next_lower,
                constraint=f"lower_bound == {bracket.upper_bound}",
            )


def apply_bracket_schedule(
    taxable_income: Numeric,
    schedule: BracketSchedule,
) -> BracketResult:
    """Compute progressive tax on ``taxable_income``.

    Negative taxable income is clamped to zero; income with sub-cent precision
    is rejected so every taxed slice is a currency amount. One breakdown entry
    is emitted per bracket the income reaches, in ascending order; brackets
    entirely above the income are omitted. Each contribution is rounded to
    cents before the contributions are summed.

    Args:
        taxable_income: Income after deductions and exemptions.
        schedule: A resolved bracket schedule.

    Returns:
        BracketResult with gross tax, marginal rate and per-bracket breakdown.
    """
    validate_schedule(schedule)
    income = max(Decimal("0"), require_cents(taxable_income, "taxable_income"))

    contributions: list[Decimal] = []
    breakdown: list[BreakdownEntry] = []
    marginal_rate = Decimal("0")

    for bracket in schedule.brackets:
        if income <= bracket.lower_bound:
            break
        top = income if bracket.upper_bound is None else min(income, bracket.upper_bound)
        taxed = top - bracket.lower_bound
        contribution = round2(taxed * bracket.rate)

        contributions.append(contribution)
        marginal_rate = bracket.rate
        breakdown.append(
            BreakdownEntry(
                category=BRACKET_CATEGORY,
                description=bracket.describe(),
                amount=contribution,
                rate=bracket.rate,
                taxable_amount=taxed,
            )
        )
        logger.debug(
            "calculation_step",
            step="tax_bracket",
            input=f"({top} - {bracket.lower_bound}) * {bracket.rate}",
            output=str(contribution),
            source=f"Bracket schedule {schedule.tax_year}/{schedule.filing_status.value}",
        )

    return BracketResult(
        gross_tax_owed=sum_money(contributions),
        marginal_rate=marginal_rate,
        breakdown=tuple(breakdown),
    )


def apply_flat_rate(
    taxable_income: Numeric,
    flat_rate: Numeric,
    label: str = "Flat Rate",
) -> BracketResult:
    """Compute tax at a single flat rate, with one breakdown entry."""
    rate = require_rate(flat_rate, "flat_rate")
    income = max(Decimal("0"), require_cents(taxable_income, "taxable_income"))
    gross = round2(income * rate)
    percent = (rate * 100).normalize()

    entry = BreakdownEntry(
        category=label,
        description=f"{percent:f}% on taxable income",
        amount=gross,
        rate=rate,
        taxable_amount=income,
    )
    logger.debug(
        "calculation_step",
        step="flat_rate",
        input=f"{income} * {rate}",
        output=str(gross),
        source=label,
    )
    return BracketResult(gross_tax_owed=gross, marginal_rate=rate, breakdown=(entry,))


__all__ = [
    "BRACKET_CATEGORY",
    "validate_schedule",
    "apply_bracket_schedule",
    "apply_flat_rate",
]
