"""
Subscription plan configuration for ServiceAgent.

Plans are compared by rank. Two plans may share a rank (SCALE and CUSTOM
are interchangeable for gating), so ranks form a total preorder rather
than a strict ordering.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class PlanKey(str, Enum):
    """Normalized plan keys, including the two plan-less states."""

    STARTER = "STARTER"
    LAUNCH = "LAUNCH"
    SCALE = "SCALE"
    CUSTOM = "CUSTOM"
    TEST = "TEST"
    TRIAL = "TRIAL"  # no subscription yet
    NONE = "NONE"  # subscription label we do not recognize


@dataclass(frozen=True)
class PlanConfiguration:
    """Configuration for a single plan."""

    key: PlanKey
    label: str
    rank: int
    candidate_limit: int
    description: str


PLAN_CONFIGS: Dict[PlanKey, PlanConfiguration] = {
    PlanKey.STARTER: PlanConfiguration(
        key=PlanKey.STARTER,
        label="Starter",
        rank=1,
        candidate_limit=10,
        description="Entry plan for small teams",
    ),
    PlanKey.LAUNCH: PlanConfiguration(
        key=PlanKey.LAUNCH,
        label="Launch",
        rank=2,
        candidate_limit=20,
        description="Growing teams running their first campaigns",
    ),
    PlanKey.SCALE: PlanConfiguration(
        key=PlanKey.SCALE,
        label="Scale",
        rank=3,
        candidate_limit=100,
        description="Full agent suite for established businesses",
    ),
    PlanKey.CUSTOM: PlanConfiguration(
        key=PlanKey.CUSTOM,
        label="Custom",
        rank=3,
        candidate_limit=1000,
        description="Negotiated plan with Scale-level features",
    ),
    PlanKey.TEST: PlanConfiguration(
        key=PlanKey.TEST,
        label="Test",
        rank=4,
        candidate_limit=100000,
        description="Internal testing plan with every feature unlocked",
    ),
    PlanKey.TRIAL: PlanConfiguration(
        key=PlanKey.TRIAL,
        label="Free Trial",
        rank=0,
        candidate_limit=1,
        description="No subscription on file",
    ),
    PlanKey.NONE: PlanConfiguration(
        key=PlanKey.NONE,
        label="Unknown",
        rank=0,
        candidate_limit=1,
        description="Unrecognized subscription label",
    ),
}

# Rank lookup for labels that can be purchased
PLAN_HIERARCHY: Dict[str, int] = {
    key.value: config.rank
    for key, config in PLAN_CONFIGS.items()
    if key not in (PlanKey.TRIAL, PlanKey.NONE)
}


def normalize_plan(label: Any) -> str:
    """Upper-case a plan label for lookup."""
    return str(label).upper()


def get_plan_rank(label: Optional[Any]) -> int:
    """
    Map a plan label to its rank.

    Args:
        label: Plan label in any case; None means no plan

    Returns:
        The plan rank, or 0 for absent or unrecognized labels
    """
    if label is None:
        return 0
    return PLAN_HIERARCHY.get(normalize_plan(label), 0)


def to_plan_key(value: Optional[Any]) -> PlanKey:
    """
    Normalize a subscription value to a PlanKey.

    An absent subscription is a trial; an unknown one is NONE.
    """
    if not value:
        return PlanKey.TRIAL
    try:
        key = PlanKey(normalize_plan(value))
    except ValueError:
        return PlanKey.NONE
    if key in (PlanKey.TRIAL, PlanKey.NONE):
        return PlanKey.NONE
    return key


def get_plan_config(value: Optional[Any]) -> PlanConfiguration:
    """Get the configuration for a subscription value."""
    return PLAN_CONFIGS[to_plan_key(value)]


def get_plan_limit(value: Optional[Any]) -> int:
    """Candidate capacity for a subscription value."""
    return get_plan_config(value).candidate_limit


def get_plan_label(value: Optional[Any]) -> str:
    """
    Human label for a subscription value.

    Mirrors how the subscription is displayed: capitalized as stored,
    or "Free Trial" when the user has none.
    """
    if not value:
        return PLAN_CONFIGS[PlanKey.TRIAL].label
    text = str(value)
    return text[:1].upper() + text[1:].lower()


def get_required_plan_label(required_plan: Any) -> Optional[str]:
    """Label shown on upgrade prompts, or None if the plan is not purchasable."""
    key = to_plan_key(required_plan)
    if key in (PlanKey.TRIAL, PlanKey.NONE):
        return None
    return PLAN_CONFIGS[key].label


def get_plan_summary() -> Dict[str, Dict[str, Any]]:
    """
    Get a summary of all purchasable plans.

    Returns:
        Dictionary mapping plan keys to rank, label and limits
    """
    summary = {}

    for key, config in PLAN_CONFIGS.items():
        if key in (PlanKey.TRIAL, PlanKey.NONE):
            continue
        summary[key.value] = {
            "label": config.label,
            "rank": config.rank,
            "candidate_limit": config.candidate_limit,
            "description": config.description,
        }

    return summary
