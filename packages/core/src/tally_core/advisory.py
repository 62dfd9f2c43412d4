"""Advisory rules evaluated over a completed tax computation.

Rules run in this fixed order, so output ordering is reproducible:

1. ``amount_due_ratio`` (warning): amount due exceeds ``balance_warning_ratio``
   of gross income.
2. ``low_deductions`` (suggestion): deductions fall below
   ``deduction_suggestion_ratio`` of gross income.
3. ``high_effective_rate`` (suggestion): effective rate exceeds
   ``effective_rate_suggestion_threshold``.

Each rule looks only at the result and the original input; no rule depends on
another rule having fired.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import structlog

from .config import AdvisoryConfig
from .models import TaxComputationInput, TaxComputationResult

logger = structlog.get_logger()


class AdvisoryKind(str, Enum):
    """Where a fired rule's message is reported."""

    WARNING = "warning"
    SUGGESTION = "suggestion"


RulePredicate = Callable[[TaxComputationResult, TaxComputationInput, AdvisoryConfig], bool]


@dataclass(frozen=True)
class AdvisoryRule:
    """A single advisory rule.

    Attributes:
        name: Stable identifier used in logs.
        kind: Whether the message is a warning or a suggestion.
        message: Text reported when the rule fires; may reference threshold
            names from AdvisoryConfig as format fields.
        predicate: Returns True when the rule fires.
    """

    name: str
    kind: AdvisoryKind
    message: str
    predicate: RulePredicate


@dataclass(frozen=True)
class Advisories:
    """Messages produced by the rule set, in rule order."""

    warnings: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()


def _amount_due_exceeds_ratio(
    result: TaxComputationResult,
    tax_input: TaxComputationInput,
    config: AdvisoryConfig,
) -> bool:
    if result.amount_due is None:
        return False
    return result.amount_due > tax_input.gross_income * config.balance_warning_ratio


def _deductions_below_ratio(
    result: TaxComputationResult,
    tax_input: TaxComputationInput,
    config: AdvisoryConfig,
) -> bool:
    return tax_input.deductions < tax_input.gross_income * config.deduction_suggestion_ratio


def _effective_rate_above_threshold(
    result: TaxComputationResult,
    tax_input: TaxComputationInput,
    config: AdvisoryConfig,
) -> bool:
    return result.effective_rate > config.effective_rate_suggestion_threshold


DEFAULT_RULES: tuple[AdvisoryRule, ...] = (
    AdvisoryRule(
        name="amount_due_ratio",
        kind=AdvisoryKind.WARNING,
        message=(
            "Amount due is more than {balance_warning_ratio:.0%} of gross income. "
            "Consider quarterly payments next year."
        ),
        predicate=_amount_due_exceeds_ratio,
    ),
    AdvisoryRule(
        name="low_deductions",
        kind=AdvisoryKind.SUGGESTION,
        message="You may benefit from reviewing potential additional deductions.",
        predicate=_deductions_below_ratio,
    ),
    AdvisoryRule(
        name="high_effective_rate",
        kind=AdvisoryKind.SUGGESTION,
        message="Consider tax planning strategies to reduce your effective rate.",
        predicate=_effective_rate_above_threshold,
    ),
)


def evaluate_advisories(
    result: TaxComputationResult,
    tax_input: TaxComputationInput,
    config: Optional[AdvisoryConfig] = None,
    rules: tuple[AdvisoryRule, ...] = DEFAULT_RULES,
) -> Advisories:
    """Run the advisory rules over a computed result.

    Args:
        result: The completed tax computation.
        tax_input: The input the result was computed from.
        config: Thresholds; defaults are used when omitted.
        rules: Rule set to evaluate, in reporting order.

    Returns:
        Advisories with warnings and suggestions in rule order.
    """
    config = config or AdvisoryConfig()
    warnings: list[str] = []
    suggestions: list[str] = []

    for rule in rules:
        if not rule.predicate(result, tax_input, config):
            continue
        message = rule.message.format(**config.model_dump())
        if rule.kind == AdvisoryKind.WARNING:
            warnings.append(message)
        else:
            suggestions.append(message)
        logger.debug("advisory_rule_fired", rule=rule.name, kind=rule.kind.value)

    return Advisories(warnings=tuple(warnings), suggestions=tuple(suggestions))


__all__ = [
    "AdvisoryKind",
    "AdvisoryRule",
    "Advisories",
    "DEFAULT_RULES",
    "evaluate_advisories",
]
