"""
Plan resolution service.

Answers "does this user's subscription satisfy the plan a feature needs".
The decision itself (``has_access``) is a pure function of two labels.
``PlanResolver`` supplies the current plan for a user, fronting the
profile store with a TTL cache and failing closed when the store errors.
"""

from dataclasses import dataclass
from typing import Any, Optional

from serviceagent.config import settings
from serviceagent.config.plan_config import (
    PlanKey,
    get_plan_label,
    get_plan_limit,
    get_plan_rank,
    to_plan_key,
)
from serviceagent.exceptions import ProfileLookupError
from serviceagent.storage.cache import InMemoryTTLCache, KeyValueCache
from serviceagent.storage.interface import ProfileStore
from serviceagent.utils.logging import get_logger
from serviceagent.utils.metrics import (
    PLAN_ACCESS_CHECKS,
    PLAN_CACHE_LOOKUPS,
    PLAN_FETCH_FAILURES,
    record_metric,
)

logger = get_logger(__name__)


def has_access(current_plan: Optional[Any], required_plan: Any) -> bool:
    """
    Check whether the current plan satisfies the required plan.

    A user with no plan is always denied, whatever the requirement. Any
    other plan is granted iff its rank is at least the required rank;
    unrecognized labels rank 0.

    Args:
        current_plan: The user's plan label, or None for no plan
        required_plan: The minimum plan label a feature needs

    Returns:
        True if access is granted
    """
    if not current_plan:
        return False
    return get_plan_rank(current_plan) >= get_plan_rank(required_plan)


@dataclass(frozen=True)
class UserPlan:
    """Resolved plan state for one user."""

    plan: Optional[str]
    plan_key: PlanKey
    plan_label: str
    plan_limit: int

    @classmethod
    def from_plan(cls, plan: Optional[str]) -> "UserPlan":
        return cls(
            plan=plan,
            plan_key=to_plan_key(plan),
            plan_label=get_plan_label(plan),
            plan_limit=get_plan_limit(plan),
        )

    @property
    def has_plan(self) -> bool:
        return self.plan is not None

    def has_access(self, required_plan: Any) -> bool:
        granted = has_access(self.plan, required_plan)
        record_metric(PLAN_ACCESS_CHECKS, 1, result="granted" if granted else "denied")
        return granted


class PlanResolver:
    """Resolve a user's current plan through a TTL cache and a profile store."""

    def __init__(
        self,
        profile_store: ProfileStore,
        cache: Optional[KeyValueCache] = None,
        ttl_seconds: Optional[int] = None,
        key_prefix: Optional[str] = None,
    ):
        """
        Args:
            profile_store: Source of truth for subscriptions
            cache: Cache collaborator; an in-memory TTL cache if omitted
            ttl_seconds: How long a fetched plan stays fresh; 0 or less
                turns caching off and every lookup hits the store
            key_prefix: Cache key prefix, joined with the user id
        """
        self.profile_store = profile_store
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else settings.PLAN_CACHE_TTL_SECONDS
        )
        if cache is None:
            cache = InMemoryTTLCache(
                max_entries=settings.PLAN_CACHE_MAX_ENTRIES,
                default_ttl=self.ttl_seconds,
            )
        self.cache = cache
        self.key_prefix = key_prefix or settings.PLAN_CACHE_KEY_PREFIX

    @property
    def caching_enabled(self) -> bool:
        return self.ttl_seconds > 0

    def cache_key(self, user_id: str) -> str:
        return f"{self.key_prefix}:{user_id}"

    def resolve_plan(self, user_id: Optional[str]) -> Optional[str]:
        """
        Get the current plan label for a user.

        Never raises: a failed lookup resolves to None ("no plan") and
        drops any cached value for the user.

        Args:
            user_id: ID of the signed-in user, or None when signed out

        Returns:
            The subscription label, or None
        """
        if not user_id:
            return None

        key = self.cache_key(user_id)

        cached = self._read_cache(key, user_id) if self.caching_enabled else None
        if isinstance(cached, dict) and "plan" in cached:
            record_metric(PLAN_CACHE_LOOKUPS, 1, outcome="hit")
            return cached["plan"]
        record_metric(PLAN_CACHE_LOOKUPS, 1, outcome="miss")

        try:
            plan = self.profile_store.get_subscription(user_id)
        except ProfileLookupError as e:
            logger.error(
                f"Error fetching user plan: {e}", extra={"user_id": user_id}
            )
            record_metric(PLAN_FETCH_FAILURES, 1)
            self._drop_cache(key, user_id)
            return None
        except Exception as e:
            # Store implementations outside this package may raise anything
            logger.exception(
                f"Unexpected error fetching user plan: {e}", extra={"user_id": user_id}
            )
            record_metric(PLAN_FETCH_FAILURES, 1)
            self._drop_cache(key, user_id)
            return None

        plan = plan or None
        if self.caching_enabled:
            try:
                self.cache.set(key, {"plan": plan}, ttl=self.ttl_seconds)
            except Exception as e:
                logger.warning(
                    f"Could not cache user plan: {e}", extra={"user_id": user_id}
                )

        logger.debug(
            f"Resolved plan {plan!r} for user {user_id}", extra={"user_id": user_id}
        )
        return plan

    def _read_cache(self, key: str, user_id: str) -> Any:
        # An unreachable cache is a miss
        try:
            return self.cache.get(key)
        except Exception as e:
            logger.warning(
                f"Could not read cached user plan: {e}", extra={"user_id": user_id}
            )
            return None

    def _drop_cache(self, key: str, user_id: str) -> None:
        try:
            self.cache.delete(key)
        except Exception as e:
            logger.warning(
                f"Could not drop cached user plan: {e}", extra={"user_id": user_id}
            )

    def get_user_plan(self, user_id: Optional[str]) -> UserPlan:
        """Resolve the plan and wrap it with key, label and limit."""
        return UserPlan.from_plan(self.resolve_plan(user_id))

    def has_access(self, user_id: Optional[str], required_plan: Any) -> bool:
        """Resolve the user's plan and check it against ``required_plan``."""
        return self.get_user_plan(user_id).has_access(required_plan)

    def invalidate(self, user_id: str) -> None:
        """Forget the cached plan, e.g. right after a checkout completes."""
        self._drop_cache(self.cache_key(user_id), user_id)

    def fetch_plan_usage(self, user_id: Optional[str]) -> int:
        """
        Count plan usage (interview attempts) for the user's company.

        Returns 0 when signed out or when the lookup fails.
        """
        if not user_id:
            return 0
        try:
            return self.profile_store.count_interview_attempts(user_id)
        except Exception as e:
            logger.warning(
                f"Error fetching plan usage: {e}", extra={"user_id": user_id}
            )
            return 0
