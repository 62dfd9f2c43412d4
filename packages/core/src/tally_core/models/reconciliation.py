"""Bank reconciliation models."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import TallyModel


class TransactionType(str, Enum):
    """Direction of a bank statement line."""

    DEBIT = "debit"
    CREDIT = "credit"


class BankTransaction(TallyModel):
    """A statement line imported for reconciliation.

    The sign of ``amount`` is ignored; ``type`` carries the direction.
    """

    description: str = ""
    amount: Decimal = Field(description="Transaction amount, non-zero")
    type: TransactionType
    bank_reference: Optional[str] = None


class ReconciliationTotals(TallyModel):
    """Statement totals and, when balances are known, the discrepancy."""

    total_credits: Decimal
    total_debits: Decimal
    net_change: Decimal
    ending_balance: Optional[Decimal] = Field(
        default=None,
        description="Starting balance plus net change",
    )
    discrepancy: Optional[Decimal] = Field(
        default=None,
        description="Statement balance minus computed ending balance",
    )

    @property
    def is_reconciled(self) -> Optional[bool]:
        """Whether the statement balance matches; None when not compared."""
        if self.discrepancy is None:
            return None
        return self.discrepancy == 0
