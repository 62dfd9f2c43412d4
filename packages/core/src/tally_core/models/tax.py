"""Tax computation data models.

This module provides the data structures for the tax calculator:
- Bracket schedules keyed by (tax year, filing status)
- Tax computation inputs for progressive and flat-rate tax types
- Per-bracket breakdown entries and the final computation result

Schedules are supplied by an external provider; nothing here hardcodes
jurisdiction data.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, computed_field, model_validator

from ..exceptions import InvalidInputError
from .base import TallyModel


class FilingStatus(str, Enum):
    """Filing statuses a bracket schedule can be keyed by."""

    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_WIDOW = "qualifying_widow"


class TaxType(str, Enum):
    """Tax computation shapes supported by the engine."""

    PROGRESSIVE_INCOME = "progressive_income"
    FLAT_RATE = "flat_rate"


class TaxBracket(TallyModel):
    """A single marginal bracket.

    ``upper_bound`` of ``None`` means the bracket is unbounded above.
    """

    lower_bound: Decimal = Field(description="Income at which the bracket starts")
    upper_bound: Optional[Decimal] = Field(
        default=None,
        description="Income at which the bracket ends; None for the top bracket",
    )
    rate: Decimal = Field(description="Marginal rate as a fraction in [0, 1]")

    @property
    def is_unbounded(self) -> bool:
        """True for the open-ended top bracket."""
        return self.upper_bound is None

    def describe(self) -> str:
        """Human-readable bracket label, e.g. ``12% on income 11,000 - 44,725``."""
        upper = "∞" if self.upper_bound is None else f"{self.upper_bound:,}"
        percent = (self.rate * 100).normalize()
        return f"{percent:f}% on income {self.lower_bound:,} - {upper}"


class BracketSchedule(TallyModel):
    """Ordered, gap-free brackets covering [0, ∞) for one lookup key.

    Structural invariants are enforced by
    :func:`tally_core.brackets.validate_schedule` before any walk.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "tax_year": 2024,
                    "filing_status": "single",
                    "brackets": [
                        {"lower_bound": "0", "upper_bound": "11000", "rate": "0.10"},
                        {"lower_bound": "11000", "upper_bound": "44725", "rate": "0.12"},
                        {"lower_bound": "44725", "upper_bound": None, "rate": "0.22"},
                    ],
                }
            ]
        },
    }

    tax_year: int = Field(description="Tax year the schedule applies to")
    filing_status: FilingStatus = Field(description="Filing status the schedule applies to")
    brackets: tuple[TaxBracket, ...] = Field(description="Brackets in ascending order")

    @property
    def key(self) -> tuple[int, FilingStatus]:
        """Lookup key for schedule providers."""
        return (self.tax_year, self.filing_status)


class TaxComputationInput(TallyModel):
    """Raw inputs for one tax computation.

    ``filing_status`` and ``tax_year`` are required for progressive income tax;
    ``flat_rate`` is required for flat-rate tax types. These and the
    non-negativity rules are checked by the calculator before it computes
    anything, so rejections surface as ``InvalidInputError``.
    """

    gross_income: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    exemptions: Decimal = Decimal("0")
    credits: Decimal = Decimal("0")
    previously_paid: Decimal = Decimal("0")
    tax_type: TaxType = TaxType.PROGRESSIVE_INCOME
    filing_status: Optional[FilingStatus] = None
    tax_year: Optional[int] = None
    flat_rate: Optional[Decimal] = None
    flat_rate_label: str = Field(
        default="Flat Rate",
        description="Breakdown category for flat-rate types, e.g. 'Sales Tax'",
    )


class BreakdownEntry(TallyModel):
    """One line of the tax breakdown, in computation order."""

    category: str
    description: str
    amount: Decimal = Field(description="Tax contributed by this entry, rounded to cents")
    rate: Optional[Decimal] = None
    taxable_amount: Decimal = Field(description="Slice of taxable income this entry taxed")


class BracketResult(TallyModel):
    """Output of a bracket walk or flat-rate computation."""

    gross_tax_owed: Decimal
    marginal_rate: Decimal
    breakdown: tuple[BreakdownEntry, ...] = ()


class TaxComputationResult(TallyModel):
    """Complete, reproducible result of a tax computation.

    ``refund_amount`` and ``amount_due`` are mutually exclusive; both are
    absent when the balance is exactly zero.
    """

    taxable_income: Decimal
    gross_tax_owed: Decimal
    net_tax_owed: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    total_deductions: Decimal
    total_credits: Decimal
    breakdown: tuple[BreakdownEntry, ...] = ()
    refund_amount: Optional[Decimal] = None
    amount_due: Optional[Decimal] = None
    warnings: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()

    @model_validator(mode="after")
    def refund_and_amount_due_exclusive(self):
        """Reject a result that claims both a refund and an amount due."""
        if self.refund_amount is not None and self.amount_due is not None:
            raise InvalidInputError(
                "refund_amount and amount_due are mutually exclusive",
                field="amount_due",
                value=self.amount_due,
                constraint="at most one of refund_amount, amount_due",
            )
        return self

    @computed_field
    @property
    def balance(self) -> Decimal:
        """Signed balance: positive when owed, negative when refunded."""
        if self.amount_due is not None:
            return self.amount_due
        if self.refund_amount is not None:
            return -self.refund_amount
        return Decimal("0.00")
