"""Invoice line-item and totals models."""

from decimal import Decimal
from enum import Enum

from pydantic import Field, computed_field

from ..money import multiply_money
from .base import TallyModel


class LineItem(TallyModel):
    """A single invoice line.

    Quantity may be fractional (hours, kilograms).
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "description": "Consulting (hours)",
                    "quantity": "2.5",
                    "unit_price": "125.33",
                }
            ]
        },
    }

    description: str = Field(default="", description="Line description shown on the invoice")
    quantity: Decimal = Field(description="Quantity, may be fractional")
    unit_price: Decimal = Field(description="Price per unit")

    @computed_field
    @property
    def line_total(self) -> Decimal:
        """Quantity extended by unit price, rounded to cents."""
        return multiply_money(self.quantity, self.unit_price)


class DiscountKind(str, Enum):
    """How a discount value is interpreted."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class Discount(TallyModel):
    """An invoice-level discount.

    For ``PERCENTAGE`` the value is a fraction in [0, 1]; for ``FIXED`` it is
    an amount taken off, never taking the total below zero.
    """

    kind: DiscountKind
    value: Decimal


class TaxInclusiveBreakdown(TallyModel):
    """Subtotal and tax backed out of a tax-inclusive total."""

    subtotal: Decimal
    tax: Decimal


class CompoundTaxResult(TallyModel):
    """Independent taxes on the same subtotal (e.g. GST + PST)."""

    per_rate_amounts: tuple[Decimal, ...] = ()
    total: Decimal


class InvoiceTotals(TallyModel):
    """Totals for a full invoice."""

    subtotal: Decimal = Field(description="Sum of line totals")
    discount: Decimal = Field(description="Amount taken off the subtotal")
    taxable_amount: Decimal = Field(description="Subtotal after discount")
    tax: Decimal = Field(description="Total tax over all rates")
    total: Decimal = Field(description="Taxable amount plus tax")
