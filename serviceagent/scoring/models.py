"""
Data models for lead scoring.

Leads and rules arrive from the web app in camelCase and from YAML in
snake_case; every model accepts both. Rules accept any operator string
and any field name; the evaluator scores malformed rules zero.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from serviceagent.exceptions import ScoringConfigurationError
from serviceagent.utils.logging import get_logger

logger = get_logger(__name__)

Number = Union[int, float]


class LeadStatus(str, Enum):
    NEW = "New"
    CONTACTED = "Contacted"
    QUALIFIED = "Qualified"
    LOST = "Lost"
    CONVERTED = "Converted"


class ScoreOperator(str, Enum):
    """Operators the rule evaluator understands."""

    EQUALS = "equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )


class ScoreBreakdown(_CamelModel):
    """Audit record of one rule's contribution during one scoring pass."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    rule_name: str
    points: int
    applied_at: datetime


class Lead(_CamelModel):
    """
    A sales lead as stored by the leads page.

    Only the identity fields and the scoring output are validated. The
    attributes rules can target keep whatever value the caller stored, so
    ``interactionCount: "5"`` stays a string and a numeric rule on it
    scores zero in the evaluator.
    """

    id: str
    name: str
    email: str
    phone: Any = None
    company: Any = None
    source: Any = None
    status: Any = LeadStatus.NEW.value
    score: Number = 0
    created_at: Any = None
    notes: Any = None
    tags: Any = None
    assigned_to: Any = None
    score_breakdown: list[ScoreBreakdown] = Field(default_factory=list)
    budget: Any = None
    last_interaction: Any = None
    interaction_count: Any = None
    ai_adjusted: bool = False

    @classmethod
    def resolve_field_name(cls, name: str) -> Optional[str]:
        """
        Map a rule's field name (snake_case or camelCase) to a model field.

        Returns None when the lead has no such field.
        """
        if not isinstance(name, str):
            return None
        if name in cls.model_fields:
            return name
        for field_name, info in cls.model_fields.items():
            if info.alias == name:
                return field_name
        return None


class ScoreRule(_CamelModel):
    """A single field/operator/value/points scoring rule."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    field: str
    operator: str
    value: Any = None
    points: int = 0
    active: bool = Field(
        default=True, validation_alias=AliasChoices("active", "isActive")
    )


class ScoringSettings(_CamelModel):
    """Ordered rule list plus clamp bounds."""

    rules: list[ScoreRule] = Field(default_factory=list)
    min_score: Number
    max_score: Number
    ai_assist: bool = False

    @model_validator(mode="after")
    def check_bounds(self) -> "ScoringSettings":
        if self.min_score > self.max_score:
            raise ValueError(
                f"min_score ({self.min_score}) must not exceed max_score ({self.max_score})"
            )
        return self

    @property
    def active_rules(self) -> list[ScoreRule]:
        return [rule for rule in self.rules if rule.active]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScoringSettings":
        """
        Build settings from a loosely structured payload.

        Individual rules that fail validation are logged and skipped. A
        payload with missing or inverted bounds is a configuration error.

        Raises:
            ScoringConfigurationError: If the settings shape is invalid
        """
        if not isinstance(payload, Mapping):
            raise ScoringConfigurationError(
                f"Scoring settings must be a mapping, got {type(payload).__name__}"
            )

        raw_rules = payload.get("rules") or []
        if not isinstance(raw_rules, (list, tuple)):
            raise ScoringConfigurationError("Scoring settings 'rules' must be a list")

        rules = list(_parse_rules(raw_rules))
        fields = {k: v for k, v in payload.items() if k != "rules"}

        try:
            return cls.model_validate({**fields, "rules": rules})
        except ValidationError as e:
            raise ScoringConfigurationError(
                f"Invalid scoring settings: {e}", metadata={"errors": e.errors()}
            ) from e


def _parse_rules(raw_rules: Iterable[Any]) -> Iterable[ScoreRule]:
    for index, raw_rule in enumerate(raw_rules):
        if isinstance(raw_rule, ScoreRule):
            yield raw_rule
            continue
        try:
            yield ScoreRule.model_validate(raw_rule)
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed scoring rule at index {index}: {e}",
                extra={"rule_index": index},
            )


class LeadScoreResult(BaseModel):
    """Score plus the ordered audit trail of fired rules."""

    score: Number
    breakdown: list[ScoreBreakdown] = Field(default_factory=list)


def coerce_lead(lead: Union[Lead, Mapping[str, Any]]) -> Lead:
    if isinstance(lead, Lead):
        return lead
    return Lead.model_validate(lead)


def coerce_settings(
    settings: Union[ScoringSettings, Mapping[str, Any]],
) -> ScoringSettings:
    if isinstance(settings, ScoringSettings):
        return settings
    return ScoringSettings.from_payload(settings)


def clamp_score(total: Number, settings: ScoringSettings) -> Number:
    """Clamp a raw total into the settings bounds."""
    return max(settings.min_score, min(settings.max_score, total))
