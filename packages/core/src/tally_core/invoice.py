"""Invoice line-item and totals calculations.

All functions are pure: inputs are validated up front, every monetary output
is rounded to cents with ``round2``, and nothing is cached or mutated.

Typical flow:
    items -> compute_subtotal -> (discount) -> compute_tax -> compute_grand_total
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

import structlog

from .exceptions import InvalidInputError
from .models import (
    CompoundTaxResult,
    Discount,
    DiscountKind,
    InvoiceTotals,
    LineItem,
    TaxInclusiveBreakdown,
)
from .money import (
    ONE,
    ZERO,
    Numeric,
    multiply_money,
    quantize_rate,
    require_non_negative,
    require_rate,
    round2,
    sum_money,
    to_decimal,
)

logger = structlog.get_logger()


def compute_line_total(item: LineItem) -> Decimal:
    """Extend a line item: ``round2(quantity * unit_price)``."""
    quantity = require_non_negative(item.quantity, "quantity")
    unit_price = require_non_negative(item.unit_price, "unit_price")
    return multiply_money(quantity, unit_price)


def compute_subtotal(items: Iterable[LineItem]) -> Decimal:
    """Sum of line totals, rounded once."""
    return sum_money(compute_line_total(item) for item in items)


def compute_tax(subtotal: Numeric, tax_rate: Numeric) -> Decimal:
    """Tax on a subtotal at a single rate."""
    rate = require_rate(tax_rate, "tax_rate")
    return round2(to_decimal(subtotal, "subtotal") * rate)


def compute_grand_total(subtotal: Numeric, tax: Numeric) -> Decimal:
    """Subtotal plus tax."""
    return round2(to_decimal(subtotal, "subtotal") + to_decimal(tax, "tax"))


def compute_tax_inclusive_breakdown(
    total_with_tax: Numeric,
    tax_rate: Numeric,
) -> TaxInclusiveBreakdown:
    """Back the subtotal and tax out of a tax-inclusive total.

    Rounding is not perfectly invertible: feeding the result back through
    ``compute_grand_total`` can differ from ``total_with_tax`` by a cent. No
    iterative adjustment is made.
    """
    total = to_decimal(total_with_tax, "total_with_tax")
    rate = require_rate(tax_rate, "tax_rate")
    subtotal = round2(total / (ONE + rate))
    tax = round2(total - subtotal)
    return TaxInclusiveBreakdown(subtotal=subtotal, tax=tax)


def compute_compound_tax(subtotal: Numeric, rates: Sequence[Numeric]) -> CompoundTaxResult:
    """Apply several rates independently to the same subtotal.

    Rates are not cascaded: each one taxes ``subtotal``, not the subtotal plus
    previously applied taxes.
    """
    base = to_decimal(subtotal, "subtotal")
    amounts = tuple(
        round2(base * require_rate(rate, f"rates[{i}]"))
        for i, rate in enumerate(rates)
    )
    return CompoundTaxResult(per_rate_amounts=amounts, total=sum_money(amounts))


def apply_percentage_discount(amount: Numeric, discount_rate: Numeric) -> Decimal:
    """Price after a percentage discount: ``round2(amount * (1 - rate))``."""
    rate = require_rate(discount_rate, "discount_rate")
    return round2(to_decimal(amount, "amount") * (ONE - rate))


def apply_fixed_discount(amount: Numeric, discount: Numeric) -> Decimal:
    """Price after a fixed discount, never below zero."""
    off = require_non_negative(discount, "discount")
    return max(ZERO, round2(to_decimal(amount, "amount") - off))


def compute_processing_fee(
    amount: Numeric,
    fee_rate: Numeric,
    fixed_fee: Numeric = 0,
) -> Decimal:
    """Card-processing style fee: ``round2(amount * rate + fixed)``."""
    rate = require_rate(fee_rate, "fee_rate")
    fixed = require_non_negative(fixed_fee, "fixed_fee")
    return round2(require_non_negative(amount, "amount") * rate + fixed)


def compute_late_penalty(
    amount: Numeric,
    monthly_rate: Numeric,
    months_overdue: int,
) -> Decimal:
    """Simple-interest late penalty over whole months."""
    rate = require_rate(monthly_rate, "monthly_rate")
    months = require_non_negative(months_overdue, "months_overdue")
    return round2(require_non_negative(amount, "amount") * rate * months)


def compute_compound_interest(
    principal: Numeric,
    annual_rate: Numeric,
    years: int,
    periods_per_year: int = 12,
) -> Decimal:
    """Principal grown by periodic compounding.

    Returns the final amount (principal plus interest), rounded once at the end.
    """
    base = require_non_negative(principal, "principal")
    rate = require_rate(annual_rate, "annual_rate")
    if not isinstance(years, int) or years < 0:
        raise InvalidInputError(
            "years must be a non-negative whole number",
            field="years",
            value=years,
            constraint="integer >= 0",
        )
    if not isinstance(periods_per_year, int) or periods_per_year <= 0:
        raise InvalidInputError(
            "periods_per_year must be a positive whole number",
            field="periods_per_year",
            value=periods_per_year,
            constraint="integer > 0",
        )
    growth = (ONE + rate / periods_per_year) ** (periods_per_year * years)
    return round2(base * growth)


def compute_profit_margin(revenue: Numeric, costs: Numeric) -> Decimal:
    """Gross margin as a ratio of revenue; zero when there is no revenue."""
    gross = to_decimal(revenue, "revenue")
    if gross == 0:
        return quantize_rate(0)
    profit = round2(gross - to_decimal(costs, "costs"))
    return quantize_rate(profit / gross)


def _discount_amount(subtotal: Decimal, discount: Optional[Discount]) -> Decimal:
    if discount is None:
        return ZERO
    if discount.kind == DiscountKind.PERCENTAGE:
        return round2(subtotal - apply_percentage_discount(subtotal, discount.value))
    return round2(subtotal - apply_fixed_discount(subtotal, discount.value))


def compute_invoice_totals(
    items: Sequence[LineItem],
    tax_rates: Sequence[Numeric] = (),
    discount: Optional[Discount] = None,
) -> InvoiceTotals:
    """Compute the full set of invoice totals.

    The discount comes off the subtotal before tax; each tax rate then applies
    independently to the discounted amount.

    Args:
        items: Invoice lines in display order.
        tax_rates: Zero or more independent tax rates (e.g. GST and PST).
        discount: Optional invoice-level discount.

    Returns:
        InvoiceTotals with subtotal, discount, taxable amount, tax and total.
    """
    subtotal = compute_subtotal(items)
    discount_amount = _discount_amount(subtotal, discount)
    taxable_amount = round2(subtotal - discount_amount)
    tax = compute_compound_tax(taxable_amount, tax_rates).total
    total = compute_grand_total(taxable_amount, tax)

    logger.debug(
        "calculation_step",
        step="invoice_totals",
        input=f"{len(items)} line items, rates={[str(r) for r in tax_rates]}",
        output=f"subtotal={subtotal}, discount={discount_amount}, tax={tax}, total={total}",
    )

    return InvoiceTotals(
        subtotal=subtotal,
        discount=discount_amount,
        taxable_amount=taxable_amount,
        tax=tax,
        total=total,
    )
