"""Currency-safe decimal arithmetic primitives.

Every monetary value that crosses a calculation boundary passes through
``round2``. Values are ``Decimal`` throughout; inputs may be given as
``Decimal``, ``int``, ``str`` or ``float``. Floats are read through their
shortest ``repr`` so that ``123.455`` is treated as the decimal the user typed,
not its binary approximation.

Rounding is half away from zero (``ROUND_HALF_UP`` on ``Decimal``):

    >>> round2("123.455")
    Decimal('123.46')
    >>> round2("-123.456")
    Decimal('-123.46')
    >>> round2("-0.001")
    Decimal('0.00')
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

import structlog

from .exceptions import InvalidInputError

logger = structlog.get_logger()

Numeric = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
ONE = Decimal("1")

# Ratios (effective rate, margins) keep 6 fraction digits: 4 places of a percent.
RATE_PLACES = 6
RATE_QUANTUM = Decimal(1).scaleb(-RATE_PLACES)


def to_decimal(value: Numeric, field: str = "value") -> Decimal:
    """Normalize a numeric input to a finite ``Decimal``.

    Args:
        value: The raw numeric input.
        field: Name of the input, reported on rejection.

    Returns:
        The value as a ``Decimal``.

    Raises:
        InvalidInputError: If the value is not numeric or not finite.
    """
    if isinstance(value, bool):
        raise InvalidInputError(
            f"{field} must be a number, not a boolean",
            field=field,
            value=value,
            constraint="numeric",
        )
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidInputError(
                f"{field} is not a valid number",
                field=field,
                value=value,
                constraint="numeric",
            ) from None
    else:
        raise InvalidInputError(
            f"{field} must be a number",
            field=field,
            value=value,
            constraint="numeric",
        )

    if not result.is_finite():
        raise InvalidInputError(
            f"{field} must be a finite number",
            field=field,
            value=value,
            constraint="finite",
        )
    return result


def require_non_negative(value: Numeric, field: str) -> Decimal:
    """Normalize ``value`` and reject it if it is below zero."""
    amount = to_decimal(value, field)
    if amount < 0:
        raise InvalidInputError(
            f"{field} cannot be negative",
            field=field,
            value=value,
            constraint=f"{field} >= 0",
        )
    return amount


def require_rate(value: Numeric, field: str) -> Decimal:
    """Normalize ``value`` and reject it unless it lies in [0, 1]."""
    rate = to_decimal(value, field)
    if rate < 0 or rate > 1:
        raise InvalidInputError(
            f"{field} must be between 0 and 1",
            field=field,
            value=value,
            constraint=f"0 <= {field} <= 1",
        )
    return rate


def require_cents(value: Numeric, field: str) -> Decimal:
    """Normalize ``value`` and reject it if it has sub-cent precision.

    Trailing zeros are fine: ``"100.500"`` is accepted, ``"100.005"`` is not.
    """
    amount = to_decimal(value, field)
    if amount.normalize().as_tuple().exponent < CENT.as_tuple().exponent:
        raise InvalidInputError(
            f"{field} has more than two fraction digits",
            field=field,
            value=value,
            constraint="currency scale (at most 2 fraction digits)",
        )
    return amount


def _quantize(value: Numeric, quantum: Decimal) -> Decimal:
    amount = to_decimal(value)
    try:
        return amount.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # The quantized coefficient would exceed the context precision.
        raise InvalidInputError(
            "value is too large to represent at the required precision",
            field="value",
            value=value,
            constraint="magnitude within currency precision",
        ) from None


def round2(value: Numeric) -> Decimal:
    """Round to two fraction digits, half away from zero.

    Idempotent: ``round2(round2(x)) == round2(x)``. A result of zero is always
    the positive ``Decimal("0.00")``.

    Raises:
        InvalidInputError: If the value is not finite or is too large to
            carry two fraction digits within the decimal context precision.
    """
    result = _quantize(value, CENT)
    if result.is_zero():
        return ZERO
    return result


def quantize_rate(value: Numeric) -> Decimal:
    """Round a ratio to ``RATE_PLACES`` fraction digits.

    Ratios are not currency and are never passed through ``round2``.
    """
    result = _quantize(value, RATE_QUANTUM)
    if result.is_zero():
        return result.copy_abs()
    return result


def multiply_money(quantity: Numeric, unit_price: Numeric) -> Decimal:
    """Extend a quantity by a unit price: ``round2(quantity * unit_price)``."""
    return round2(to_decimal(quantity, "quantity") * to_decimal(unit_price, "unit_price"))


def sum_money(values: Iterable[Numeric]) -> Decimal:
    """Sum values exactly, then round once.

    Summing already-rounded amounts and rounding again is a no-op.
    """
    total = Decimal("0")
    for value in values:
        total += to_decimal(value)
    return round2(total)


def convert_currency(amount: Numeric, exchange_rate: Numeric) -> Decimal:
    """Convert an amount with a single rate multiplication.

    Args:
        amount: Amount in the source currency.
        exchange_rate: Units of target currency per unit of source currency.

    Returns:
        The converted amount, rounded to cents.

    Raises:
        InvalidInputError: If the exchange rate is not positive.
    """
    rate = to_decimal(exchange_rate, "exchange_rate")
    if rate <= 0:
        raise InvalidInputError(
            "exchange_rate must be positive",
            field="exchange_rate",
            value=exchange_rate,
            constraint="exchange_rate > 0",
        )
    converted = round2(to_decimal(amount, "amount") * rate)
    logger.debug(
        "calculation_step",
        step="convert_currency",
        input=f"{amount} * {rate}",
        output=str(converted),
    )
    return converted


__all__ = [
    "Numeric",
    "CENT",
    "ZERO",
    "ONE",
    "RATE_PLACES",
    "RATE_QUANTUM",
    "to_decimal",
    "require_non_negative",
    "require_rate",
    "require_cents",
    "round2",
    "quantize_rate",
    "multiply_money",
    "sum_money",
    "convert_currency",
]
