"""Payment allocation across outstanding obligations.

A single payment is applied greedily, strictly in the order the obligations
are given. Callers decide priority (usually oldest due date first); the engine
never sorts. An overpayment is not an error: whatever cannot be applied is
reported as ``remainder``.

Example:
    >>> result = allocate_payment(
    ...     [Obligation(obligation_id="inv1", outstanding_amount=Decimal("500")),
    ...      Obligation(obligation_id="inv2", outstanding_amount=Decimal("300")),
    ...      Obligation(obligation_id="inv3", outstanding_amount=Decimal("200"))],
    ...     Decimal("750"),
    ... )
    >>> [a.allocated_amount for a in result.allocations]
    [Decimal('500.00'), Decimal('250.00'), Decimal('0.00')]
"""

from decimal import Decimal
from typing import Sequence

import structlog

from .models import Allocation, Obligation, PaymentAllocationRequest, PaymentAllocationResult
from .money import Numeric, require_cents, require_non_negative, round2, sum_money

logger = structlog.get_logger()


def _require_amount(value: Numeric, field: str) -> Decimal:
    require_non_negative(value, field)
    return require_cents(value, field)


def allocate_payment(
    obligations: Sequence[Obligation],
    payment_amount: Numeric,
) -> PaymentAllocationResult:
    """Distribute a payment across obligations in the given order.

    Args:
        obligations: Obligations in priority order.
        payment_amount: The payment to distribute.

    Returns:
        PaymentAllocationResult with one allocation per obligation, in input
        order, and the unapplied remainder.

    Raises:
        InvalidInputError: If the payment or any outstanding amount is
            negative, not finite, or carries sub-cent precision. Nothing is
            allocated in that case.
    """
    payment = round2(_require_amount(payment_amount, "payment_amount"))
    outstanding = [
        round2(_require_amount(o.outstanding_amount, f"obligations[{i}].outstanding_amount"))
        for i, o in enumerate(obligations)
    ]

    remaining = payment
    allocations: list[Allocation] = []
    for obligation, owed in zip(obligations, outstanding):
        allocated = min(remaining, owed)
        remaining = round2(remaining - allocated)
        allocations.append(
            Allocation(
                obligation_id=obligation.obligation_id,
                allocated_amount=round2(allocated),
                remaining_balance=round2(owed - allocated),
            )
        )

    result = PaymentAllocationResult(
        allocations=tuple(allocations),
        remainder=remaining,
        total_outstanding=sum_money(outstanding),
        total_allocated=sum_money(a.allocated_amount for a in allocations),
    )

    logger.debug(
        "calculation_step",
        step="allocate_payment",
        input=f"payment={payment}, {len(allocations)} obligations",
        output=f"allocated={result.total_allocated}, remainder={result.remainder}",
    )
    if result.is_overpayment:
        logger.info(
            "payment_overpayment",
            payment=str(payment),
            total_outstanding=str(result.total_outstanding),
            remainder=str(result.remainder),
        )
    return result


def allocate(request: PaymentAllocationRequest) -> PaymentAllocationResult:
    """Allocate a :class:`PaymentAllocationRequest`."""
    return allocate_payment(request.obligations, request.payment_amount)


def compute_overpayment(amount_owed: Numeric, payment_amount: Numeric) -> Decimal:
    """Amount paid beyond what was owed; zero when underpaid."""
    owed = require_non_negative(amount_owed, "amount_owed")
    paid = require_non_negative(payment_amount, "payment_amount")
    return max(Decimal("0.00"), round2(paid - owed))


__all__ = [
    "allocate_payment",
    "allocate",
    "compute_overpayment",
]
