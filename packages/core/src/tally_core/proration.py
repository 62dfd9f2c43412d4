"""Proration of periodic amounts by day count.

``prorate`` performs no calendar math: callers pass the actual number of days
in the period (28-31 for a month, 365 or 366 for a year). The helpers below it
resolve those day counts for callers that bill on calendar periods.
"""

import calendar
from decimal import Decimal

import structlog

from .exceptions import InvalidInputError
from .money import Numeric, round2, to_decimal

logger = structlog.get_logger()


def _require_day_count(value: int, field: str, *, allow_zero: bool) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(
            f"{field} must be a whole number of days",
            field=field,
            value=value,
            constraint="integer",
        )
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidInputError(
            f"{field} must be {bound}",
            field=field,
            value=value,
            constraint=f"{field} {bound}",
        )
    return value


def prorate(period_amount: Numeric, total_period_days: int, used_days: int) -> Decimal:
    """Scale a periodic amount to the days actually used.

    Computes ``period_amount / total_period_days * used_days``, multiplying
    first so the decimal stays exact until the single final rounding.

    Args:
        period_amount: Amount for the full period.
        total_period_days: Days in the period; must be positive.
        used_days: Days used; must not exceed ``total_period_days``.

    Returns:
        The prorated amount, rounded to cents.

    Raises:
        InvalidInputError: If a day count is invalid or ``used_days`` exceeds
            ``total_period_days``. Values are never clamped.
    """
    amount = to_decimal(period_amount, "period_amount")
    total = _require_day_count(total_period_days, "total_period_days", allow_zero=False)
    used = _require_day_count(used_days, "used_days", allow_zero=True)
    if used > total:
        raise InvalidInputError(
            "used_days cannot exceed total_period_days",
            field="used_days",
            value=used,
            constraint=f"used_days <= {total}",
        )

    prorated = round2(amount * used / total)
    logger.debug(
        "calculation_step",
        step="prorate",
        input=f"{amount} / {total} * {used}",
        output=str(prorated),
    )
    return prorated


def days_in_year(year: int) -> int:
    """365, or 366 in a leap year."""
    return 366 if calendar.isleap(year) else 365


def days_in_month(year: int, month: int) -> int:
    """Number of days in a calendar month, leap-year aware."""
    if not 1 <= month <= 12:
        raise InvalidInputError(
            "month must be between 1 and 12",
            field="month",
            value=month,
            constraint="1 <= month <= 12",
        )
    return calendar.monthrange(year, month)[1]


def prorate_month(monthly_amount: Numeric, year: int, month: int, used_days: int) -> Decimal:
    """Prorate a monthly amount over the given calendar month."""
    return prorate(monthly_amount, days_in_month(year, month), used_days)


def prorate_year(annual_amount: Numeric, year: int, used_days: int) -> Decimal:
    """Prorate an annual amount over the given calendar year."""
    return prorate(annual_amount, days_in_year(year), used_days)


__all__ = [
    "prorate",
    "days_in_year",
    "days_in_month",
    "prorate_month",
    "prorate_year",
]
