"""
Rule evaluation logic for the lead scoring engine.

Rules are hand-edited configuration, so evaluation never raises: a rule
that cannot be evaluated (unknown operator, unknown field, mismatched
types) is worth zero points.
"""

from enum import Enum
from typing import Any, Callable

from serviceagent.utils.logging import get_logger

from .models import Lead, ScoreOperator, ScoreRule

logger = get_logger(__name__)

_MISSING = object()


def is_number(value: Any) -> bool:
    """True for ints and floats; bools are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """
    Equality without cross-type coercion.

    ``1 == True`` and ``"1" == 1`` are both false here; int and float
    still compare numerically.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    return type(left) is type(right) and left == right


class RuleEvaluator:
    """Evaluates leads against scoring rules."""

    def __init__(self):
        self.logger = get_logger(__name__ + ".RuleEvaluator")
        self._operators: dict[str, Callable[[Any, Any], bool]] = {
            ScoreOperator.EQUALS.value: self._check_equals,
            ScoreOperator.CONTAINS.value: self._check_contains,
            ScoreOperator.GREATER_THAN.value: self._check_greater_than,
            ScoreOperator.LESS_THAN.value: self._check_less_than,
            ScoreOperator.EXISTS.value: self._check_exists,
            ScoreOperator.NOT_EXISTS.value: self._check_not_exists,
        }

    @property
    def supported_operators(self) -> list[str]:
        return list(self._operators)

    def evaluate_rule(self, lead: Lead, rule: ScoreRule) -> int:
        """
        Evaluate a single rule against a lead.

        Args:
            lead: Lead to evaluate.
            rule: ScoreRule to evaluate.

        Returns:
            The rule's points if it matched, otherwise 0.
        """
        try:
            operator = str(rule.operator).strip().lower()
            check = self._operators.get(operator)
            if check is None:
                self.logger.debug(
                    f"Rule '{rule.name}' has unknown operator '{rule.operator}'",
                    extra={"rule_id": rule.id},
                )
                return 0

            field_value = self._get_field_value(lead, rule.field)
            if field_value is _MISSING:
                self.logger.debug(
                    f"Rule '{rule.name}' targets unknown field '{rule.field}'",
                    extra={"rule_id": rule.id},
                )
                return 0

            is_existence_check = operator in (
                ScoreOperator.EXISTS.value,
                ScoreOperator.NOT_EXISTS.value,
            )
            if field_value is None and not is_existence_check:
                return 0

            if check(field_value, rule.value):
                self.logger.debug(
                    f"Rule '{rule.name}' matched for lead {lead.id}",
                    extra={"rule_id": rule.id, "points": rule.points},
                )
                return rule.points
            return 0
        except Exception as e:
            self.logger.error(
                f"Error evaluating rule '{rule.name}': {e}",
                extra={"rule_id": rule.id, "error": str(e)},
            )
            return 0

    def _get_field_value(self, lead: Lead, field: str) -> Any:
        field_name = Lead.resolve_field_name(field)
        if field_name is None:
            return _MISSING
        value = getattr(lead, field_name)
        if isinstance(value, Enum):
            return value.value
        return value

    def _check_equals(self, field_value: Any, value: Any) -> bool:
        return strict_equals(field_value, value)

    def _check_contains(self, field_value: Any, value: Any) -> bool:
        """Membership for collections, case-insensitive substring for text."""
        if isinstance(field_value, (list, tuple, set, frozenset)):
            return any(strict_equals(item, value) for item in field_value)
        if isinstance(field_value, str):
            return str(value).lower() in field_value.lower()
        return False

    def _check_greater_than(self, field_value: Any, value: Any) -> bool:
        return is_number(field_value) and is_number(value) and field_value > value

    def _check_less_than(self, field_value: Any, value: Any) -> bool:
        return is_number(field_value) and is_number(value) and field_value < value

    def _check_exists(self, field_value: Any, value: Any) -> bool:
        return field_value is not None

    def _check_not_exists(self, field_value: Any, value: Any) -> bool:
        return field_value is None
