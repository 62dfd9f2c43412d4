"""Tests for payment allocation."""

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from tally_core import (
    InvalidInputError,
    Obligation,
    PaymentAllocationRequest,
    PaymentAllocationResult,
    allocate,
    allocate_payment,
    compute_overpayment,
)


def make_obligations(*amounts: str) -> list[Obligation]:
    """Obligations inv1..invN with the given outstanding amounts."""
    return [
        Obligation(obligation_id=f"inv{i}", outstanding_amount=Decimal(amount))
        for i, amount in enumerate(amounts, start=1)
    ]


class TestAllocatePayment:
    """Test suite for allocate_payment."""

    def test_partial_payment_in_order(self):
        """750 pays the first invoice in full and the second in part."""
        result = allocate_payment(make_obligations("500", "300", "200"), Decimal("750"))

        assert isinstance(result, PaymentAllocationResult)
        assert [a.obligation_id for a in result.allocations] == ["inv1", "inv2", "inv3"]
        assert [a.allocated_amount for a in result.allocations] == [
            Decimal("500.00"),
            Decimal("250.00"),
            Decimal("0.00"),
        ]
        assert [a.remaining_balance for a in result.allocations] == [
            Decimal("0.00"),
            Decimal("50.00"),
            Decimal("200.00"),
        ]
        assert result.remainder == Decimal("0.00")
        assert result.total_outstanding == Decimal("1000.00")
        assert result.total_allocated == Decimal("750.00")
        assert result.unpaid_balance == Decimal("250.00")
        assert result.is_overpayment is False

    def test_order_is_never_changed(self):
        """The caller's order decides priority, not the amounts."""
        result = allocate_payment(make_obligations("200", "500"), Decimal("250"))

        assert [a.allocated_amount for a in result.allocations] == [
            Decimal("200.00"),
            Decimal("50.00"),
        ]

    def test_overpayment_is_reported_not_raised(self):
        """Money left after every obligation is paid becomes the remainder."""
        with capture_logs() as logs:
            result = allocate_payment(make_obligations("100", "50"), Decimal("200"))

        assert result.remainder == Decimal("50.00")
        assert result.is_overpayment is True
        assert result.unpaid_balance == Decimal("0.00")
        events = [entry["event"] for entry in logs]
        assert "payment_overpayment" in events

    def test_no_obligations(self):
        """A payment with nothing to settle is all remainder."""
        result = allocate_payment([], Decimal("100"))

        assert result.allocations == ()
        assert result.remainder == Decimal("100.00")

    def test_zero_payment(self):
        """A zero payment allocates nothing."""
        result = allocate_payment(make_obligations("500", "300"), Decimal("0"))

        assert all(a.allocated_amount == Decimal("0.00") for a in result.allocations)
        assert result.remainder == Decimal("0.00")

    def test_cents(self):
        """Fractional amounts are allocated to the cent."""
        result = allocate_payment(make_obligations("33.33", "33.33", "33.34"), Decimal("50"))

        assert [a.allocated_amount for a in result.allocations] == [
            Decimal("33.33"),
            Decimal("16.67"),
            Decimal("0.00"),
        ]

    def test_settled_obligation_gets_nothing(self):
        """An obligation with nothing outstanding is skipped over."""
        result = allocate_payment(make_obligations("0", "100"), Decimal("60"))

        assert [a.allocated_amount for a in result.allocations] == [
            Decimal("0.00"),
            Decimal("60.00"),
        ]

    @pytest.mark.parametrize(
        "amounts,payment",
        [
            (("500", "300", "200"), "750"),
            (("500", "300", "200"), "1000"),
            (("500", "300", "200"), "1234.56"),
            (("0.01", "0.02"), "0.02"),
            (("19.99", "5.01", "75"), "0"),
            ((), "10"),
            (("500",), "100.50"),
            (("99.990", "0.5"), "100.500"),
        ],
    )
    def test_payment_is_conserved(self, amounts, payment):
        """Allocated plus remainder equals the payment; nothing is lost."""
        obligations = make_obligations(*amounts)
        paid = Decimal(payment)

        result = allocate_payment(obligations, paid)

        allocated = sum(a.allocated_amount for a in result.allocations)
        outstanding = sum(o.outstanding_amount for o in obligations)
        assert allocated + result.remainder == paid
        assert allocated == min(paid, outstanding)
        assert all(a.allocated_amount <= o.outstanding_amount for a, o in zip(result.allocations, obligations))

    def test_negative_payment(self):
        """Refunds are not payments."""
        with pytest.raises(InvalidInputError) as exc_info:
            allocate_payment(make_obligations("100"), Decimal("-1"))

        assert exc_info.value.field == "payment_amount"

    def test_negative_outstanding_names_obligation(self):
        """The offending obligation is identified by position."""
        with pytest.raises(InvalidInputError) as exc_info:
            allocate_payment(make_obligations("100", "-20"), Decimal("50"))

        assert exc_info.value.field == "obligations[1].outstanding_amount"

    @pytest.mark.parametrize(
        "amounts,payment,field",
        [
            (("500",), "100.005", "payment_amount"),
            (("100", "0.001"), "50", "obligations[1].outstanding_amount"),
        ],
    )
    def test_sub_cent_amounts_rejected(self, amounts, payment, field):
        """Fractions of a cent cannot be allocated without creating money."""
        with pytest.raises(InvalidInputError) as exc_info:
            allocate_payment(make_obligations(*amounts), Decimal(payment))

        assert exc_info.value.field == field
        assert "currency scale" in exc_info.value.constraint

    def test_allocate_request(self):
        """A request object allocates the same as the bare call."""
        obligations = make_obligations("500", "300", "200")
        request = PaymentAllocationRequest(obligations=obligations, payment_amount=Decimal("750"))

        assert allocate(request) == allocate_payment(obligations, Decimal("750"))


class TestComputeOverpayment:
    """Test suite for compute_overpayment."""

    def test_overpaid(self):
        """Paying 150 on 100 leaves 50 over."""
        assert compute_overpayment(Decimal("100"), Decimal("150")) == Decimal("50.00")

    def test_underpaid(self):
        """Underpayment is not a negative overpayment."""
        assert compute_overpayment(Decimal("100"), Decimal("80")) == Decimal("0.00")

    def test_rejects_negative(self):
        """Amounts must be non-negative."""
        with pytest.raises(InvalidInputError):
            compute_overpayment(Decimal("-100"), Decimal("80"))
