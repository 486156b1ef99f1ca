"""
Profile store interface for ServiceAgent.

The account/subscription store is an external collaborator. This module
defines the narrow contract the plan resolver needs from it.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ProfileStore(ABC):
    """
    Abstract interface for account profile lookups.

    Implementations raise ``ProfileLookupError`` when the backend cannot
    answer; a user without a subscription is not an error and yields None.
    """

    @abstractmethod
    def get_subscription(self, user_id: str) -> Optional[str]:
        """
        Get the subscription label for a user.

        Args:
            user_id: ID of the user

        Returns:
            The raw subscription label, or None if the user has no plan

        Raises:
            ProfileLookupError: If the lookup failed
        """
        pass

    @abstractmethod
    def count_interview_attempts(self, user_id: str) -> int:
        """
        Count interview attempts consumed by the user's company.

        Args:
            user_id: ID of the user who created the company profile

        Returns:
            Number of attempts, 0 if the user has no company profile

        Raises:
            ProfileLookupError: If the lookup failed
        """
        pass
