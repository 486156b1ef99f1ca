"""
Services module for ServiceAgent.

Plan resolution and feature gating built on the plan configuration.
"""

from .feature_gate import FeatureGate, GateDecision, GateStatus
from .plan_service import PlanResolver, UserPlan, has_access

__all__ = [
    "has_access",
    "PlanResolver",
    "UserPlan",
    "FeatureGate",
    "GateDecision",
    "GateStatus",
]
