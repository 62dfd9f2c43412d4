"""Bank reconciliation totals.

Statement lines carry their direction in ``type``; amounts are summed by
absolute value so that imported statements with either sign convention give
the same totals.
"""

from typing import Optional, Sequence

import structlog

from .exceptions import InvalidInputError
from .models import BankTransaction, ReconciliationTotals, TransactionType
from .money import Numeric, round2, sum_money, to_decimal

logger = structlog.get_logger()


def compute_reconciliation_totals(
    transactions: Sequence[BankTransaction],
    starting_balance: Optional[Numeric] = None,
    statement_balance: Optional[Numeric] = None,
) -> ReconciliationTotals:
    """Total a statement's credits and debits and compare balances.

    Args:
        transactions: Imported statement lines.
        starting_balance: Book balance before these transactions.
        statement_balance: Closing balance printed on the bank statement.

    Returns:
        ReconciliationTotals. ``ending_balance`` is set when a starting balance
        is given; ``discrepancy`` when both balances are given.

    Raises:
        InvalidInputError: If any transaction amount is zero or not finite.
    """
    credits = []
    debits = []
    for i, txn in enumerate(transactions):
        amount = to_decimal(txn.amount, f"transactions[{i}].amount")
        if amount == 0:
            raise InvalidInputError(
                "Transaction amount cannot be zero",
                field=f"transactions[{i}].amount",
                value=txn.amount,
                constraint="amount != 0",
            )
        if txn.type == TransactionType.CREDIT:
            credits.append(abs(amount))
        else:
            debits.append(abs(amount))

    total_credits = sum_money(credits)
    total_debits = sum_money(debits)
    net_change = round2(total_credits - total_debits)

    ending_balance = None
    discrepancy = None
    if starting_balance is not None:
        ending_balance = round2(to_decimal(starting_balance, "starting_balance") + net_change)
        if statement_balance is not None:
            discrepancy = round2(to_decimal(statement_balance, "statement_balance") - ending_balance)

    logger.debug(
        "calculation_step",
        step="reconciliation_totals",
        input=f"{len(transactions)} transactions",
        output=f"credits={total_credits}, debits={total_debits}, net={net_change}",
    )

    return ReconciliationTotals(
        total_credits=total_credits,
        total_debits=total_debits,
        net_change=net_change,
        ending_balance=ending_balance,
        discrepancy=discrepancy,
    )


__all__ = ["compute_reconciliation_totals"]
