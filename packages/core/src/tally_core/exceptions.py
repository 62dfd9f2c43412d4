"""Custom exceptions for the Tally computation core.

This module provides a hierarchy of exception classes for consistent error
handling across the monetary and tax calculators. All exceptions inherit from
TallyError, making it easy to catch all core-specific errors.

Example:
    try:
        result = calculator.calculate(tax_input)
    except InvalidInputError as e:
        # Show a field-level message next to the offending form input
        form.set_error(e.field, e.message)
    except ScheduleNotFoundError as e:
        # The bracket table for this year/status is missing upstream
        logger.error("schedule_missing", **e.details)
        raise
"""

from typing import Any, Optional


class TallyError(Exception):
    """Base exception for all Tally computation errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the caller can fix the problem and retry.

    Example:
        >>> raise TallyError("Something went wrong", details={"step": "subtotal"})
        TallyError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize TallyError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is recoverable by correcting the
                input. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class InvalidInputError(TallyError):
    """Error raised when a computation input is rejected.

    Raised before any computation starts for negative amounts or quantities
    where non-negativity is required, non-finite numbers, rates outside
    [0, 1], and other caller contract violations. No partial result is ever
    produced alongside this error.

    Attributes:
        field: The input field that failed validation.
        value: The rejected value.
        constraint: The constraint that was violated.

    Example:
        >>> raise InvalidInputError(
        ...     "Tax rate must be between 0 and 1",
        ...     field="tax_rate",
        ...     value="1.2",
        ...     constraint="0 <= tax_rate <= 1",
        ... )
        InvalidInputError: Tax rate must be between 0 and 1
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize InvalidInputError.

        Args:
            message: Human-readable error description.
            field: The name of the input field that failed validation.
            value: The rejected value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)
        if constraint:
            self.details["constraint"] = constraint


class ScheduleNotFoundError(TallyError):
    """Error raised when no bracket schedule exists for a lookup key.

    This signals a data-availability problem in the schedule provider, not a
    user-input problem, so it is never defaulted to another schedule.

    Attributes:
        tax_year: The requested tax year.
        filing_status: The requested filing status.

    Example:
        >>> raise ScheduleNotFoundError(
        ...     "No bracket schedule for 2031/single",
        ...     tax_year=2031,
        ...     filing_status="single",
        ... )
        ScheduleNotFoundError: No bracket schedule for 2031/single
    """

    def __init__(
        self,
        message: str,
        *,
        tax_year: Optional[int] = None,
        filing_status: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ScheduleNotFoundError.

        Args:
            message: Human-readable error description.
            tax_year: The tax year that was requested.
            filing_status: The filing status that was requested.
            details: Optional dictionary with additional context.
            recoverable: Defaults to False since the schedule data has to be
                published upstream before the computation can succeed.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.tax_year = tax_year
        self.filing_status = filing_status

        if tax_year is not None:
            self.details["tax_year"] = tax_year
        if filing_status:
            self.details["filing_status"] = filing_status


class ConfigurationError(TallyError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Defaults to False since configuration errors need a
                restart with corrected settings.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "TallyError",
    "InvalidInputError",
    "ScheduleNotFoundError",
    "ConfigurationError",
]
