"""Tally Core - Monetary and tax computation for invoicing and accounting."""

__version__ = "0.1.0"

from .advisory import Advisories, AdvisoryKind, AdvisoryRule, DEFAULT_RULES, evaluate_advisories
from .allocation import allocate, allocate_payment, compute_overpayment
from .brackets import apply_bracket_schedule, apply_flat_rate, validate_schedule
from .config import AdvisoryConfig, TallyConfig
from .exceptions import (
    ConfigurationError,
    InvalidInputError,
    ScheduleNotFoundError,
    TallyError,
)
from .invoice import (
    apply_fixed_discount,
    apply_percentage_discount,
    compute_compound_interest,
    compute_compound_tax,
    compute_grand_total,
    compute_invoice_totals,
    compute_late_penalty,
    compute_line_total,
    compute_processing_fee,
    compute_profit_margin,
    compute_subtotal,
    compute_tax,
    compute_tax_inclusive_breakdown,
)
from .logging import configure_logging
from .models import (
    Allocation,
    BankTransaction,
    BracketResult,
    BracketSchedule,
    BreakdownEntry,
    CompoundTaxResult,
    Discount,
    DiscountKind,
    FilingStatus,
    InvoiceTotals,
    LineItem,
    Obligation,
    PaymentAllocationRequest,
    PaymentAllocationResult,
    ReconciliationTotals,
    TaxBracket,
    TaxComputationInput,
    TaxComputationResult,
    TaxInclusiveBreakdown,
    TaxType,
    TransactionType,
)
from .money import convert_currency, multiply_money, quantize_rate, round2, sum_money, to_decimal
from .proration import days_in_month, days_in_year, prorate, prorate_month, prorate_year
from .reconciliation import compute_reconciliation_totals
from .schedules import InMemoryScheduleProvider, ScheduleProvider
from .tax_calculator import (
    TaxCalculator,
    compute_tax_liability,
    compute_taxable_income,
    validate_tax_input,
)

__all__ = [
    # Money
    "round2",
    "multiply_money",
    "sum_money",
    "to_decimal",
    "quantize_rate",
    "convert_currency",
    # Invoice
    "compute_line_total",
    "compute_subtotal",
    "compute_tax",
    "compute_grand_total",
    "compute_tax_inclusive_breakdown",
    "compute_compound_tax",
    "apply_percentage_discount",
    "apply_fixed_discount",
    "compute_processing_fee",
    "compute_late_penalty",
    "compute_compound_interest",
    "compute_profit_margin",
    "compute_invoice_totals",
    # Tax
    "validate_schedule",
    "apply_bracket_schedule",
    "apply_flat_rate",
    "compute_taxable_income",
    "validate_tax_input",
    "compute_tax_liability",
    "TaxCalculator",
    "ScheduleProvider",
    "InMemoryScheduleProvider",
    # Proration
    "prorate",
    "prorate_month",
    "prorate_year",
    "days_in_month",
    "days_in_year",
    # Payments
    "allocate_payment",
    "allocate",
    "compute_overpayment",
    # Reconciliation
    "compute_reconciliation_totals",
    # Advisory
    "AdvisoryKind",
    "AdvisoryRule",
    "Advisories",
    "DEFAULT_RULES",
    "evaluate_advisories",
    # Config
    "configure_logging",
    "AdvisoryConfig",
    "TallyConfig",
    # Errors
    "TallyError",
    "InvalidInputError",
    "ScheduleNotFoundError",
    "ConfigurationError",
    # Models
    "LineItem",
    "Discount",
    "DiscountKind",
    "TaxInclusiveBreakdown",
    "CompoundTaxResult",
    "InvoiceTotals",
    "FilingStatus",
    "TaxType",
    "TaxBracket",
    "BracketSchedule",
    "TaxComputationInput",
    "BreakdownEntry",
    "BracketResult",
    "TaxComputationResult",
    "Obligation",
    "PaymentAllocationRequest",
    "Allocation",
    "PaymentAllocationResult",
    "TransactionType",
    "BankTransaction",
    "ReconciliationTotals",
]
