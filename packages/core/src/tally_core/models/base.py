"""Shared base model for the computation core's value objects."""

from contextvars import ContextVar
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from ..exceptions import InvalidInputError

# Nesting depth of TallyModel validation in progress; only the outermost
# model converts errors, so field paths include the parent fields.
_validation_depth: ContextVar[int] = ContextVar("tally_validation_depth", default=0)


def _field_path(loc: tuple) -> Optional[str]:
    """Render a pydantic error location as ``brackets[0].rate``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or None


def invalid_input_from(exc: ValidationError) -> InvalidInputError:
    """Convert a pydantic ValidationError into an InvalidInputError.

    The first error supplies the field, value and constraint; the remaining
    count is kept in ``details``.
    """
    errors = exc.errors(include_url=False)
    first = errors[0]
    field = _field_path(first["loc"])
    message = first["msg"]
    return InvalidInputError(
        f"{field}: {message}" if field else message,
        field=field,
        value=first.get("input"),
        constraint=message,
        details={"model": exc.title, "error_count": len(errors)},
    )


class TallyModel(BaseModel):
    """Frozen pydantic model with float-safe decimal coercion.

    Results are value objects: two computations over equal inputs produce
    equal models, and nothing downstream can mutate them in place.

    Construction and ``model_validate`` raise :class:`InvalidInputError`
    rather than pydantic's ``ValidationError``, so callers handle one error
    type for every rejected input.
    """

    model_config = {"frozen": True}

    @field_validator("*", mode="before")
    @classmethod
    def coerce_float_to_decimal(cls, v):
        """Read floats through their shortest repr, not their binary value."""
        if isinstance(v, float):
            return Decimal(repr(v))
        return v

    @model_validator(mode="wrap")
    @classmethod
    def reject_as_invalid_input(cls, data: Any, handler):
        """Report validation failures as InvalidInputError."""
        if _validation_depth.get():
            return handler(data)
        token = _validation_depth.set(1)
        try:
            return handler(data)
        except ValidationError as exc:
            raise invalid_input_from(exc) from None
        finally:
            _validation_depth.reset(token)
