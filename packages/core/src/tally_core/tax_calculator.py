"""Tax liability computation.

This module provides two entry points:
1. compute_tax_liability - pure function over an input and a resolved schedule
2. TaxCalculator - resolves the schedule through a provider, computes, and
   reports failures to an explicitly injected error reporter

The result is a pure derivation of the input plus the applicable schedule:
identical inputs always produce equal results.
"""

from decimal import Decimal
from typing import Callable, Optional

import structlog

from .advisory import evaluate_advisories
from .brackets import apply_bracket_schedule, apply_flat_rate
from .config import AdvisoryConfig
from .exceptions import InvalidInputError, ScheduleNotFoundError, TallyError
from .models import (
    BracketResult,
    BracketSchedule,
    TaxComputationInput,
    TaxComputationResult,
    TaxType,
)
from .money import ZERO, Numeric, quantize_rate, require_non_negative, require_rate, round2
from .schedules import ScheduleProvider

logger = structlog.get_logger()

ErrorReporter = Callable[[TallyError], None]

_AMOUNT_FIELDS = ("gross_income", "deductions", "exemptions", "credits", "previously_paid")


def compute_taxable_income(
    gross_income: Numeric,
    deductions: Numeric = 0,
    exemptions: Numeric = 0,
) -> Decimal:
    """Income left after deductions and exemptions, never below zero."""
    gross = require_non_negative(gross_income, "gross_income")
    deducted = require_non_negative(deductions, "deductions")
    exempt = require_non_negative(exemptions, "exemptions")
    return max(ZERO, round2(gross - deducted - exempt))


def _validate_input_fields(tax_input: TaxComputationInput) -> None:
    """Checks that need no schedule: amounts, flat rate, lookup key fields."""
    for field_name in _AMOUNT_FIELDS:
        require_non_negative(getattr(tax_input, field_name), field_name)

    if tax_input.tax_type == TaxType.FLAT_RATE:
        if tax_input.flat_rate is None:
            raise InvalidInputError(
                "flat_rate is required for flat-rate tax types",
                field="flat_rate",
                constraint="required when tax_type is flat_rate",
            )
        require_rate(tax_input.flat_rate, "flat_rate")
        return

    if tax_input.filing_status is None:
        raise InvalidInputError(
            "filing_status is required for progressive income tax",
            field="filing_status",
            constraint="required when tax_type is progressive_income",
        )
    if tax_input.tax_year is None:
        raise InvalidInputError(
            "tax_year is required for progressive income tax",
            field="tax_year",
            constraint="required when tax_type is progressive_income",
        )


def validate_tax_input(
    tax_input: TaxComputationInput,
    schedule: Optional[BracketSchedule] = None,
) -> None:
    """Reject an input before any computation starts.

    Raises:
        InvalidInputError: For negative amounts, a missing or malformed rate,
            a missing filing status or tax year, or a schedule resolved for a
            different key.
        ScheduleNotFoundError: If a progressive computation has no schedule.
    """
    _validate_input_fields(tax_input)
    if tax_input.tax_type == TaxType.FLAT_RATE:
        return
    if schedule is None:
        raise ScheduleNotFoundError(
            f"No bracket schedule supplied for "
            f"{tax_input.tax_year}/{tax_input.filing_status.value}",
            tax_year=tax_input.tax_year,
            filing_status=tax_input.filing_status.value,
        )
    if schedule.key != (tax_input.tax_year, tax_input.filing_status):
        raise InvalidInputError(
            "Bracket schedule does not match the requested tax year and filing status",
            field="schedule",
            value=f"{schedule.tax_year}/{schedule.filing_status.value}",
            constraint=f"{tax_input.tax_year}/{tax_input.filing_status.value}",
        )


def compute_tax_liability(
    tax_input: TaxComputationInput,
    schedule: Optional[BracketSchedule] = None,
    advisory_config: Optional[AdvisoryConfig] = None,
) -> TaxComputationResult:
    """Compute a complete tax result for one input.

    Args:
        tax_input: The raw computation input.
        schedule: The resolved schedule; required for progressive income tax
            and ignored for flat-rate types.
        advisory_config: Thresholds for the advisory rules.

    Returns:
        TaxComputationResult including breakdown, refund or amount due, and
        advisory warnings and suggestions.
    """
    validate_tax_input(tax_input, schedule)

    taxable_income = compute_taxable_income(
        tax_input.gross_income, tax_input.deductions, tax_input.exemptions
    )

    bracket_result: BracketResult
    if tax_input.tax_type == TaxType.FLAT_RATE:
        bracket_result = apply_flat_rate(
            taxable_income, tax_input.flat_rate, tax_input.flat_rate_label
        )
    else:
        bracket_result = apply_bracket_schedule(taxable_income, schedule)

    gross_tax = bracket_result.gross_tax_owed
    net_tax = max(ZERO, round2(gross_tax - tax_input.credits))
    if taxable_income > 0:
        effective_rate = quantize_rate(gross_tax / taxable_income)
    else:
        effective_rate = quantize_rate(0)
    balance = round2(net_tax - tax_input.previously_paid)

    result = TaxComputationResult(
        taxable_income=taxable_income,
        gross_tax_owed=gross_tax,
        net_tax_owed=net_tax,
        effective_rate=effective_rate,
        marginal_rate=bracket_result.marginal_rate,
        total_deductions=round2(tax_input.deductions),
        total_credits=round2(tax_input.credits),
        breakdown=bracket_result.breakdown,
        refund_amount=-balance if balance < 0 else None,
        amount_due=balance if balance > 0 else None,
    )

    advisories = evaluate_advisories(result, tax_input, advisory_config)
    result = result.model_copy(
        update={"warnings": advisories.warnings, "suggestions": advisories.suggestions}
    )

    logger.info(
        "tax_computation_complete",
        tax_type=tax_input.tax_type.value,
        taxable_income=str(taxable_income),
        gross_tax_owed=str(gross_tax),
        net_tax_owed=str(net_tax),
        balance=str(balance),
        warnings=len(result.warnings),
        suggestions=len(result.suggestions),
    )
    return result


class TaxCalculator:
    """Tax calculator bound to a schedule provider.

    Failures are handed to ``error_reporter`` (if one is given) and then
    re-raised unchanged; the calculator holds no global error-handling state
    and never retries.

    Example:
        calculator = TaxCalculator(provider, error_reporter=sentry_capture)
        result = calculator.calculate(tax_input)
    """

    def __init__(
        self,
        schedule_provider: ScheduleProvider,
        advisory_config: Optional[AdvisoryConfig] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        """
        Initialize the calculator.

        Args:
            schedule_provider: Resolves bracket schedules by (tax year, filing status)
            advisory_config: Thresholds for advisory rules (default: from environment)
            error_reporter: Called with every TallyError before it propagates
        """
        self.schedule_provider = schedule_provider
        self.advisory_config = advisory_config or AdvisoryConfig()
        self.error_reporter = error_reporter

    def _resolve_schedule(self, tax_input: TaxComputationInput) -> Optional[BracketSchedule]:
        if tax_input.tax_type != TaxType.PROGRESSIVE_INCOME:
            return None
        return self.schedule_provider.get_schedule(tax_input.tax_year, tax_input.filing_status)

    def calculate(self, tax_input: TaxComputationInput) -> TaxComputationResult:
        """Validate, resolve the schedule, compute, and annotate one input."""
        try:
            _validate_input_fields(tax_input)
            schedule = self._resolve_schedule(tax_input)
            return compute_tax_liability(tax_input, schedule, self.advisory_config)
        except TallyError as exc:
            logger.warning(
                "tax_computation_failed",
                error=exc.__class__.__name__,
                reason=exc.message,
                **exc.details,
            )
            if self.error_reporter is not None:
                self.error_reporter(exc)
            raise


__all__ = [
    "ErrorReporter",
    "compute_taxable_income",
    "validate_tax_input",
    "compute_tax_liability",
    "TaxCalculator",
]
