"""Default scoring settings for accounts that have not customized their rules."""

from .models import ScoreRule, ScoringSettings

DEFAULT_RULES = [
    {
        "id": "1",
        "name": "Lead from LinkedIn",
        "field": "source",
        "operator": "equals",
        "value": "LinkedIn",
        "points": 20,
    },
    {
        "id": "2",
        "name": "Has budget specified",
        "field": "budget",
        "operator": "exists",
        "points": 15,
    },
    {
        "id": "3",
        "name": "High budget",
        "field": "budget",
        "operator": "greater_than",
        "value": 10000,
        "points": 25,
    },
    {
        "id": "4",
        "name": "Has company information",
        "field": "company",
        "operator": "exists",
        "points": 10,
    },
    {
        "id": "5",
        "name": "Has interacted multiple times",
        "field": "interactionCount",
        "operator": "greater_than",
        "value": 3,
        "points": 15,
    },
    {
        "id": "6",
        "name": "No recent interaction",
        "field": "lastInteraction",
        "operator": "not_exists",
        "points": -10,
    },
]


def get_default_scoring_settings() -> ScoringSettings:
    """Return a fresh copy of the default rule set (0..100, AI assist on)."""
    return ScoringSettings(
        rules=[ScoreRule.model_validate(rule) for rule in DEFAULT_RULES],
        min_score=0,
        max_score=100,
        ai_assist=True,
    )
