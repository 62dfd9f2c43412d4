#!/usr/bin/env python3
"""
Billing and Tax Demonstration

This script walks through the computation core end to end:
1. Price an invoice with a discount and two sales taxes
2. Prorate a subscription for a partial month
3. Apply a customer payment across open invoices
4. Compute an income tax return with advisories

Run: python examples/billing_demo.py
"""

from decimal import Decimal

from tally_core import (
    Discount,
    DiscountKind,
    FilingStatus,
    InMemoryScheduleProvider,
    LineItem,
    Obligation,
    TallyConfig,
    TaxCalculator,
    TaxComputationInput,
    allocate_payment,
    compute_invoice_totals,
    configure_logging,
    prorate_month,
)


SCHEDULES = [
    {
        "tax_year": 2024,
        "filing_status": "single",
        "brackets": [
            {"lower_bound": "0", "upper_bound": "11000", "rate": "0.10"},
            {"lower_bound": "11000", "upper_bound": "44725", "rate": "0.12"},
            {"lower_bound": "44725", "upper_bound": "95375", "rate": "0.22"},
            {"lower_bound": "95375", "upper_bound": "182050", "rate": "0.24"},
            {"lower_bound": "182050", "upper_bound": "231250", "rate": "0.32"},
            {"lower_bound": "231250", "upper_bound": "578125", "rate": "0.35"},
            {"lower_bound": "578125", "upper_bound": None, "rate": "0.37"},
        ],
    },
]


def main():
    """Run the billing and tax demonstration."""
    configure_logging(TallyConfig(env="development", log_level="WARNING"))

    print("=" * 70)
    print("TALLY CORE - Billing and Tax Demo")
    print("=" * 70)
    print()

    # Step 1: Invoice
    print("Step 1: Pricing an invoice...")
    items = [
        LineItem(description="Consulting (hours)", quantity=Decimal("2.5"), unit_price=Decimal("125.33")),
        LineItem(description="Setup fee", quantity=Decimal("1"), unit_price=Decimal("999.99")),
    ]
    totals = compute_invoice_totals(
        items,
        tax_rates=[Decimal("0.05"), Decimal("0.07")],
        discount=Discount(kind=DiscountKind.PERCENTAGE, value=Decimal("0.10")),
    )
    for item in items:
        print(f"  - {item.description}: {item.quantity} x ${item.unit_price} = ${item.line_total:,}")
    print(f"  - Subtotal: ${totals.subtotal:,}")
    print(f"  - Discount: -${totals.discount:,}")
    print(f"  - Tax (GST + PST): ${totals.tax:,}")
    print(f"  - Total: ${totals.total:,}")
    print()

    # Step 2: Proration
    print("Step 2: Prorating a subscription...")
    prorated = prorate_month(Decimal("49.00"), 2024, 2, 12)
    print(f"  - $49.00/month, 12 of 29 days in February 2024: ${prorated}")
    print()

    # Step 3: Payment allocation
    print("Step 3: Applying a $750.00 payment...")
    allocation = allocate_payment(
        [
            Obligation(obligation_id="INV-1001", outstanding_amount=Decimal("500")),
            Obligation(obligation_id="INV-1002", outstanding_amount=Decimal("300")),
            Obligation(obligation_id="INV-1003", outstanding_amount=Decimal("200")),
        ],
        Decimal("750"),
    )
    for entry in allocation.allocations:
        print(
            f"  - {entry.obligation_id}: applied ${entry.allocated_amount}, "
            f"still owed ${entry.remaining_balance}"
        )
    print(f"  - Unapplied: ${allocation.remainder}")
    print()

    # Step 4: Income tax
    print("Step 4: Computing 2024 income tax...")
    calculator = TaxCalculator(InMemoryScheduleProvider.from_mapping(SCHEDULES))
    result = calculator.calculate(
        TaxComputationInput(
            gross_income=Decimal("100000"),
            deductions=Decimal("0"),
            previously_paid=Decimal("9000"),
            filing_status=FilingStatus.SINGLE,
            tax_year=2024,
        )
    )
    print(f"  - Taxable Income: ${result.taxable_income:,}")
    for entry in result.breakdown:
        print(f"    {entry.description}: ${entry.amount:,}")
    print(f"  - Gross Tax: ${result.gross_tax_owed:,}")
    print(f"  - Effective Rate: {result.effective_rate:.2%}")
    print(f"  - Marginal Rate: {result.marginal_rate:.0%}")
    print(f"  - Balance: ${result.balance:,}")
    for warning in result.warnings:
        print(f"  ! {warning}")
    for suggestion in result.suggestions:
        print(f"  * {suggestion}")

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
