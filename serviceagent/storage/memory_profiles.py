"""In-memory profile store for local runs and tests."""

from typing import Optional

from serviceagent.exceptions import ProfileLookupError

from .interface import ProfileStore


class InMemoryProfileStore(ProfileStore):
    """Profile store backed by plain dicts."""

    def __init__(
        self,
        subscriptions: Optional[dict[str, Optional[str]]] = None,
        interview_attempts: Optional[dict[str, int]] = None,
    ):
        self.subscriptions = dict(subscriptions or {})
        self.interview_attempts = dict(interview_attempts or {})

    def get_subscription(self, user_id: str) -> Optional[str]:
        if user_id not in self.subscriptions:
            raise ProfileLookupError(
                f"No profile found for user {user_id}", user_id=user_id
            )
        return self.subscriptions[user_id] or None

    def count_interview_attempts(self, user_id: str) -> int:
        return self.interview_attempts.get(user_id, 0)
