"""
Lead scoring for ServiceAgent.

Rules are field/operator/value/points records evaluated against a lead,
optionally followed by an AI-assist pass of fixed heuristics.
"""

from .ai_adjustments import AI_ADJUSTMENTS, AIAdjustment, apply_ai_score_adjustments
from .defaults import get_default_scoring_settings
from .models import (
    Lead,
    LeadScoreResult,
    LeadStatus,
    ScoreBreakdown,
    ScoreOperator,
    ScoreRule,
    ScoringSettings,
)
from .rule_evaluator import RuleEvaluator
from .scoring_engine import (
    ScoringEngine,
    calculate_lead_score,
    get_score_category,
    rescore_leads,
    score_lead,
)
from .yaml_parser import ScoringRulesParser

__all__ = [
    "AI_ADJUSTMENTS",
    "AIAdjustment",
    "Lead",
    "LeadScoreResult",
    "LeadStatus",
    "RuleEvaluator",
    "ScoreBreakdown",
    "ScoreOperator",
    "ScoreRule",
    "ScoringEngine",
    "ScoringRulesParser",
    "ScoringSettings",
    "apply_ai_score_adjustments",
    "calculate_lead_score",
    "get_default_scoring_settings",
    "get_score_category",
    "rescore_leads",
    "score_lead",
]
