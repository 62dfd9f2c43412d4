"""Payment allocation models."""

from decimal import Decimal

from pydantic import Field, computed_field

from .base import TallyModel


class Obligation(TallyModel):
    """An outstanding amount a payment can be applied to."""

    obligation_id: str = Field(description="Identifier of the invoice or bill")
    outstanding_amount: Decimal = Field(description="Amount still owed")


class PaymentAllocationRequest(TallyModel):
    """A payment and the obligations it should settle, in priority order.

    The engine never reorders obligations; callers establish priority
    (typically oldest due date first).
    """

    obligations: tuple[Obligation, ...] = ()
    payment_amount: Decimal


class Allocation(TallyModel):
    """Portion of a payment applied to one obligation."""

    obligation_id: str
    allocated_amount: Decimal
    remaining_balance: Decimal = Field(description="Outstanding amount left after this allocation")


class PaymentAllocationResult(TallyModel):
    """Allocations parallel to the request's obligations, plus any remainder.

    ``remainder`` is positive only when the payment exceeds the total
    outstanding (an overpayment, which is reported rather than raised).
    """

    allocations: tuple[Allocation, ...] = ()
    remainder: Decimal
    total_outstanding: Decimal
    total_allocated: Decimal

    @computed_field
    @property
    def unpaid_balance(self) -> Decimal:
        """Outstanding amount not covered by the payment."""
        return self.total_outstanding - self.total_allocated

    @computed_field
    @property
    def is_overpayment(self) -> bool:
        """True when part of the payment could not be applied."""
        return self.remainder > 0
