"""
AI-assist score adjustments.

A second, additive pass applied on top of a lead's rule-based score when
the scoring settings enable AI assist. It appends to the existing
breakdown and never revisits earlier entries.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union

from serviceagent.utils.logging import get_logger

from .models import (
    Lead,
    LeadScoreResult,
    ScoreBreakdown,
    ScoringSettings,
    clamp_score,
    coerce_lead,
    coerce_settings,
)
from .rule_evaluator import is_number

logger = get_logger(__name__)


@dataclass(frozen=True)
class AIAdjustment:
    """A fixed heuristic: condition on the lead, points, and a reason."""

    id: str
    reason: str
    points: int
    condition: Callable[[Lead], bool]


def _has_interest_tag(lead: Lead) -> bool:
    tags = lead.tags
    return isinstance(tags, (list, tuple, set, frozenset)) and "Interested" in tags


def _is_highly_engaged(lead: Lead) -> bool:
    return is_number(lead.interaction_count) and lead.interaction_count > 5


def _is_established_company(lead: Lead) -> bool:
    return isinstance(lead.company, str) and "Inc" in lead.company


AI_ADJUSTMENTS: tuple[AIAdjustment, ...] = (
    AIAdjustment(
        id="ai:demo-interest",
        reason="AI: Lead showed interest in product demo",
        points=10,
        condition=_has_interest_tag,
    ),
    AIAdjustment(
        id="ai:high-engagement",
        reason="AI: High engagement pattern detected",
        points=15,
        condition=_is_highly_engaged,
    ),
    AIAdjustment(
        id="ai:established-company",
        reason="AI: Lead from established company",
        points=5,
        condition=_is_established_company,
    ),
)


def apply_ai_score_adjustments(
    lead: Union[Lead, Mapping[str, Any]],
    settings: Union[ScoringSettings, Mapping[str, Any]],
    reference_time: Optional[datetime] = None,
    adjustments: tuple[AIAdjustment, ...] = AI_ADJUSTMENTS,
) -> LeadScoreResult:
    """
    Apply the AI heuristics on top of the lead's current score.

    When AI assist is disabled the lead's score and breakdown are returned
    unchanged. Otherwise every matching heuristic adds its points and one
    breakdown entry, and the result is clamped once at the end.

    Args:
        lead: Lead whose ``score`` and ``score_breakdown`` are the starting point
        settings: Scoring settings (bounds and the ai_assist flag)
        reference_time: Timestamp for new entries; defaults to now (UTC)
        adjustments: Heuristics to apply

    Returns:
        LeadScoreResult with the existing breakdown as its prefix
    """
    lead = coerce_lead(lead)
    settings = coerce_settings(settings)

    breakdown = list(lead.score_breakdown)
    if not settings.ai_assist:
        return LeadScoreResult(score=lead.score, breakdown=breakdown)

    applied_at = reference_time or datetime.now(timezone.utc)
    score = lead.score

    for adjustment in adjustments:
        try:
            matched = adjustment.condition(lead)
        except Exception as e:
            logger.error(
                f"Error evaluating AI adjustment '{adjustment.id}': {e}",
                extra={"rule_id": adjustment.id, "error": str(e)},
            )
            continue
        if not matched:
            continue

        score += adjustment.points
        breakdown.append(
            ScoreBreakdown(
                rule_id=adjustment.id,
                rule_name=adjustment.reason,
                points=adjustment.points,
                applied_at=applied_at,
            )
        )

    return LeadScoreResult(score=clamp_score(score, settings), breakdown=breakdown)
