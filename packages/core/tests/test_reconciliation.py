"""Tests for bank reconciliation totals."""

from decimal import Decimal

import pytest

from tally_core import (
    BankTransaction,
    InvalidInputError,
    TransactionType,
    compute_reconciliation_totals,
)


@pytest.fixture
def statement() -> list[BankTransaction]:
    """A short statement with mixed sign conventions."""
    return [
        BankTransaction(description="Client payment", amount=Decimal("1500.00"), type=TransactionType.CREDIT),
        BankTransaction(description="Rent", amount=Decimal("-1200.00"), type=TransactionType.DEBIT),
        BankTransaction(description="Card fees", amount=Decimal("29.30"), type=TransactionType.DEBIT),
        BankTransaction(
            description="Interest",
            amount=Decimal("0.45"),
            type=TransactionType.CREDIT,
            bank_reference="INT-0424",
        ),
    ]


class TestComputeReconciliationTotals:
    """Test suite for compute_reconciliation_totals."""

    def test_totals(self, statement: list[BankTransaction]):
        """Credits and debits are summed by magnitude."""
        totals = compute_reconciliation_totals(statement)

        assert totals.total_credits == Decimal("1500.45")
        assert totals.total_debits == Decimal("1229.30")
        assert totals.net_change == Decimal("271.15")
        assert totals.ending_balance is None
        assert totals.discrepancy is None
        assert totals.is_reconciled is None

    def test_ending_balance(self, statement: list[BankTransaction]):
        """A starting balance yields the computed ending balance."""
        totals = compute_reconciliation_totals(statement, starting_balance=Decimal("5000"))

        assert totals.ending_balance == Decimal("5271.15")
        assert totals.discrepancy is None

    def test_reconciled(self, statement: list[BankTransaction]):
        """Matching balances reconcile."""
        totals = compute_reconciliation_totals(
            statement,
            starting_balance=Decimal("5000"),
            statement_balance=Decimal("5271.15"),
        )

        assert totals.discrepancy == Decimal("0.00")
        assert totals.is_reconciled is True

    def test_discrepancy(self, statement: list[BankTransaction]):
        """A missing transaction shows up as a discrepancy."""
        totals = compute_reconciliation_totals(
            statement,
            starting_balance=Decimal("5000"),
            statement_balance=Decimal("5251.15"),
        )

        assert totals.discrepancy == Decimal("-20.00")
        assert totals.is_reconciled is False

    def test_statement_balance_without_start_is_not_compared(self, statement: list[BankTransaction]):
        """Without a starting balance there is nothing to compare against."""
        totals = compute_reconciliation_totals(statement, statement_balance=Decimal("100"))

        assert totals.discrepancy is None

    def test_empty_statement(self):
        """No transactions, no movement."""
        totals = compute_reconciliation_totals([], starting_balance=Decimal("10"))

        assert totals.net_change == Decimal("0.00")
        assert totals.ending_balance == Decimal("10.00")

    def test_zero_amount_rejected(self, statement: list[BankTransaction]):
        """A zero-amount line is a bad import."""
        statement.append(BankTransaction(amount=Decimal("0"), type=TransactionType.CREDIT))

        with pytest.raises(InvalidInputError) as exc_info:
            compute_reconciliation_totals(statement)

        assert exc_info.value.field == "transactions[4].amount"
