"""
Feature gating by subscription plan.

A gate never raises for a user who lacks access. It returns a decision
that the caller renders, normally as an "upgrade required" prompt.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from serviceagent.config.plan_config import PlanKey, get_required_plan_label
from serviceagent.utils.logging import get_logger

from .plan_service import PlanResolver, UserPlan

logger = get_logger(__name__)

TRIAL_NOTICE = (
    "Start your 14-day free trial today. No charges until your trial ends."
)


class GateStatus(str, Enum):
    ALLOWED = "allowed"
    UPGRADE_REQUIRED = "upgrade_required"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of a feature gate check."""

    status: GateStatus
    required_plan: str
    required_plan_label: Optional[str] = None
    feature_name: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.status == GateStatus.ALLOWED


class FeatureGate:
    """Gate a feature behind a minimum plan."""

    def __init__(
        self,
        required_plan: Any,
        feature_name: Optional[str] = None,
        title: Optional[str] = None,
        show_gate: bool = True,
    ):
        """
        Args:
            required_plan: Minimum plan, one of STARTER/LAUNCH/SCALE/CUSTOM/TEST
            feature_name: Feature named in the upgrade headline
            title: Explicit headline, overriding the generated one
            show_gate: When False a denied check is HIDDEN instead of prompting
        """
        self.required_plan = str(required_plan).upper()
        self.feature_name = feature_name
        self.title = title
        self.show_gate = show_gate

    def headline(self) -> str:
        if self.title:
            return self.title
        if self.feature_name:
            return f"Upgrade to unlock {self.feature_name}"
        return "Upgrade your plan"

    def check(self, user_plan: UserPlan) -> GateDecision:
        """
        Decide whether the feature is available for a resolved plan.

        Args:
            user_plan: The user's resolved plan

        Returns:
            GateDecision; ALLOWED, UPGRADE_REQUIRED or HIDDEN
        """
        if user_plan.has_access(self.required_plan):
            return GateDecision(
                status=GateStatus.ALLOWED,
                required_plan=self.required_plan,
                feature_name=self.feature_name,
            )

        logger.debug(
            f"Feature gate denied {self.feature_name or self.required_plan}",
            extra={
                "required_plan": self.required_plan,
                "plan_key": user_plan.plan_key.value,
            },
        )

        if not self.show_gate:
            return GateDecision(
                status=GateStatus.HIDDEN,
                required_plan=self.required_plan,
                feature_name=self.feature_name,
            )

        message = f"Unlock {self.feature_name or 'this feature'} by upgrading your plan."
        if user_plan.plan_key == PlanKey.TRIAL:
            message = f"{message} {TRIAL_NOTICE}"

        return GateDecision(
            status=GateStatus.UPGRADE_REQUIRED,
            required_plan=self.required_plan,
            required_plan_label=get_required_plan_label(self.required_plan),
            feature_name=self.feature_name,
            title=self.headline(),
            message=message,
        )

    def check_user(self, resolver: PlanResolver, user_id: Optional[str]) -> GateDecision:
        """Resolve the user's plan and check it."""
        return self.check(resolver.get_user_plan(user_id))
