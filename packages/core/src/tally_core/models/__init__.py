"""Data models for tally-core.

This package provides the immutable value objects consumed and produced by
the calculators:
- Invoice line items, discounts and totals (invoice.py)
- Bracket schedules, tax inputs and results (tax.py)
- Payment allocation requests and results (payment.py)
- Bank reconciliation lines and totals (reconciliation.py)
"""

from tally_core.models.base import TallyModel
from tally_core.models.invoice import (
    CompoundTaxResult,
    Discount,
    DiscountKind,
    InvoiceTotals,
    LineItem,
    TaxInclusiveBreakdown,
)
from tally_core.models.payment import (
    Allocation,
    Obligation,
    PaymentAllocationRequest,
    PaymentAllocationResult,
)
from tally_core.models.reconciliation import (
    BankTransaction,
    ReconciliationTotals,
    TransactionType,
)
from tally_core.models.tax import (
    BracketResult,
    BracketSchedule,
    BreakdownEntry,
    FilingStatus,
    TaxBracket,
    TaxComputationInput,
    TaxComputationResult,
    TaxType,
)

__all__ = [
    "TallyModel",
    # Invoice
    "LineItem",
    "Discount",
    "DiscountKind",
    "TaxInclusiveBreakdown",
    "CompoundTaxResult",
    "InvoiceTotals",
    # Tax
    "FilingStatus",
    "TaxType",
    "TaxBracket",
    "BracketSchedule",
    "TaxComputationInput",
    "BreakdownEntry",
    "BracketResult",
    "TaxComputationResult",
    # Payment
    "Obligation",
    "PaymentAllocationRequest",
    "Allocation",
    "PaymentAllocationResult",
    # Reconciliation
    "TransactionType",
    "BankTransaction",
    "ReconciliationTotals",
]
