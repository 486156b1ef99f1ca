"""
Lead scoring engine for ServiceAgent.

The module-level functions are the pure scoring API used by the leads
page. ``ScoringEngine`` wraps them with YAML-loaded settings, logging and
metrics for batch use.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from serviceagent.utils.logging import LogContext, get_logger, log_execution_time
from serviceagent.utils.metrics import (
    LEADS_SCORED,
    SCORING_DURATION,
    SCORING_RULES_FIRED,
    MetricsTimer,
    get_score_range,
    record_metric,
)

from .ai_adjustments import apply_ai_score_adjustments
from .models import (
    Lead,
    LeadScoreResult,
    ScoreBreakdown,
    ScoringSettings,
    clamp_score,
    coerce_lead,
    coerce_settings,
)
from .rule_evaluator import RuleEvaluator
from .yaml_parser import ScoringRulesParser

logger = get_logger(__name__)

_evaluator = RuleEvaluator()


def calculate_lead_score(
    lead: Union[Lead, Mapping[str, Any]],
    settings: Union[ScoringSettings, Mapping[str, Any]],
    reference_time: Optional[datetime] = None,
) -> LeadScoreResult:
    """
    Score a lead against the active rules in ``settings``.

    Rules are evaluated in list order. Every rule worth non-zero points
    adds them to the total and appends one breakdown entry. The total is
    clamped once, after all rules have run.

    Args:
        lead: Lead model or camelCase/snake_case mapping
        settings: ScoringSettings model or mapping
        reference_time: Timestamp stamped on every entry; defaults to now (UTC)

    Returns:
        LeadScoreResult

    Raises:
        ScoringConfigurationError: If the settings are malformed
    """
    lead = coerce_lead(lead)
    settings = coerce_settings(settings)
    applied_at = reference_time or datetime.now(timezone.utc)

    total = 0
    breakdown: List[ScoreBreakdown] = []
    for rule in settings.active_rules:
        points = _evaluator.evaluate_rule(lead, rule)
        if points == 0:
            continue
        total += points
        breakdown.append(
            ScoreBreakdown(
                rule_id=rule.id,
                rule_name=rule.name,
                points=points,
                applied_at=applied_at,
            )
        )

    return LeadScoreResult(score=clamp_score(total, settings), breakdown=breakdown)


def score_lead(
    lead: Union[Lead, Mapping[str, Any]],
    settings: Union[ScoringSettings, Mapping[str, Any]],
    reference_time: Optional[datetime] = None,
) -> Lead:
    """
    Run the rule pass and, when enabled, the AI pass on a copy of ``lead``.

    The input lead is never mutated. ``ai_adjusted`` is set iff the AI
    pass added at least one breakdown entry.
    """
    lead = coerce_lead(lead)
    settings = coerce_settings(settings)
    reference_time = reference_time or datetime.now(timezone.utc)

    result = calculate_lead_score(lead, settings, reference_time)
    record_metric(SCORING_RULES_FIRED, len(result.breakdown), pass_type="rules")
    scored = lead.model_copy(
        update={
            "score": result.score,
            "score_breakdown": result.breakdown,
            "ai_adjusted": False,
        }
    )

    if settings.ai_assist:
        adjusted = apply_ai_score_adjustments(scored, settings, reference_time)
        added = len(adjusted.breakdown) - len(result.breakdown)
        record_metric(SCORING_RULES_FIRED, added, pass_type="ai")
        scored = scored.model_copy(
            update={
                "score": adjusted.score,
                "score_breakdown": adjusted.breakdown,
                "ai_adjusted": added > 0,
            }
        )

    return scored


def rescore_leads(
    leads: Iterable[Union[Lead, Mapping[str, Any]]],
    settings: Union[ScoringSettings, Mapping[str, Any]],
    reference_time: Optional[datetime] = None,
) -> List[Lead]:
    """Re-score every lead after the scoring settings changed."""
    settings = coerce_settings(settings)
    reference_time = reference_time or datetime.now(timezone.utc)
    return [score_lead(lead, settings, reference_time) for lead in leads]


def get_score_category(score: float) -> str:
    """Display category for a score: Hot, Warm, Cool or Cold."""
    if score >= 80:
        return "Hot"
    elif score >= 50:
        return "Warm"
    elif score >= 30:
        return "Cool"
    else:
        return "Cold"


class ScoringEngine:
    """Scoring facade over YAML-configured settings."""

    def __init__(
        self,
        config_path: Optional[str] = None,
        settings: Optional[Union[ScoringSettings, Mapping[str, Any]]] = None,
    ):
        """
        Initialize the scoring engine.

        Args:
            config_path: Path to the YAML rules file. If not provided, uses
                        the configured default path.
            settings: Settings to use instead of a YAML file. When given,
                      ``load_rules()`` uses them as-is.
        """
        self.logger = get_logger(__name__ + ".ScoringEngine")
        self.parser = ScoringRulesParser(config_path)
        self._initial_settings = settings
        self.settings: Optional[ScoringSettings] = None

        self.logger.info("Initialized ScoringEngine")

    @property
    def is_loaded(self) -> bool:
        return self.settings is not None

    def load_rules(self) -> ScoringSettings:
        """Load and validate the scoring settings."""
        self.logger.info("Loading scoring rules...")

        try:
            if self._initial_settings is not None:
                self.settings = coerce_settings(self._initial_settings)
            else:
                self.parser.load_and_validate()
                self.settings = self.parser.get_settings()
        except Exception as e:
            self.logger.error(f"Failed to load scoring rules: {e}")
            raise

        self.logger.info(
            f"Loaded {len(self.settings.active_rules)} active rules "
            f"out of {len(self.settings.rules)}",
            extra={"ai_assist": self.settings.ai_assist},
        )
        return self.settings

    def _require_settings(self) -> ScoringSettings:
        if self.settings is None:
            raise RuntimeError("No rules loaded. Call load_rules() first.")
        return self.settings

    @log_execution_time
    def score_lead(
        self,
        lead: Union[Lead, Mapping[str, Any]],
        reference_time: Optional[datetime] = None,
    ) -> Lead:
        """
        Score a single lead with the loaded settings.

        Args:
            lead: Lead model or mapping

        Returns:
            A scored copy of the lead
        """
        settings = self._require_settings()
        lead = coerce_lead(lead)

        with LogContext(self.logger, lead_id=lead.id, lead_name=lead.name):
            with MetricsTimer(SCORING_DURATION, operation="score_lead"):
                scored = score_lead(lead, settings, reference_time)

            record_metric(LEADS_SCORED, 1, score_range=get_score_range(scored.score))
            self.logger.info(
                f"Scored lead {lead.name}: {scored.score} points",
                extra={
                    "score": scored.score,
                    "entries": len(scored.score_breakdown),
                    "ai_adjusted": scored.ai_adjusted,
                },
            )
            return scored

    def score_leads(
        self,
        leads: List[Union[Lead, Mapping[str, Any]]],
        reference_time: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Score multiple leads.

        A lead that fails to score is reported with an ``error`` entry and
        a score of 0; the remaining leads are still scored.

        Args:
            leads: Lead models or mappings

        Returns:
            List of result dictionaries, in input order
        """
        self._require_settings()
        reference_time = reference_time or datetime.now(timezone.utc)

        self.logger.info(f"Scoring {len(leads)} leads...")

        results = []
        with MetricsTimer(SCORING_DURATION, operation="score_leads"):
            for lead in leads:
                lead_id, lead_name = _identify(lead)
                try:
                    scored = self.score_lead(lead, reference_time)
                    results.append(
                        {
                            "lead_id": scored.id,
                            "lead_name": scored.name,
                            "score": scored.score,
                            "category": get_score_category(scored.score),
                            "ai_adjusted": scored.ai_adjusted,
                            "lead": scored,
                        }
                    )
                except Exception as e:
                    self.logger.error(
                        f"Error scoring lead {lead_name or 'unknown'}: {e}"
                    )
                    results.append(
                        {
                            "lead_id": lead_id,
                            "lead_name": lead_name,
                            "error": str(e),
                            "score": 0,
                        }
                    )

        return results

    def get_rule_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about loaded rules.

        Returns:
            Dictionary with rule statistics.
        """
        if self.settings is None:
            return {
                "error": "No rules loaded",
                "total_rules": 0,
                "active_rules": 0,
            }

        active = self.settings.active_rules
        positive_rules = [r for r in active if r.points > 0]
        negative_rules = [r for r in active if r.points < 0]

        return {
            "total_rules": len(self.settings.rules),
            "active_rules": len(active),
            "inactive_rules": len(self.settings.rules) - len(active),
            "positive_rules": len(positive_rules),
            "negative_rules": len(negative_rules),
            "neutral_rules": len(active) - len(positive_rules) - len(negative_rules),
            "max_possible_points": sum(r.points for r in positive_rules),
            "settings": {
                "min_score": self.settings.min_score,
                "max_score": self.settings.max_score,
                "ai_assist": self.settings.ai_assist,
            },
        }


def _identify(lead: Union[Lead, Mapping[str, Any]]):
    if isinstance(lead, Lead):
        return lead.id, lead.name
    if isinstance(lead, Mapping):
        return lead.get("id"), lead.get("name")
    return None, None
