"""
Supabase-backed profile store.

Reads subscription and usage data from the Supabase tables the web app
writes: ``profiles``, ``company_profiles`` and ``interview_attempts``.
"""

import logging
from typing import Optional

from supabase import Client, create_client

from serviceagent.config import settings
from serviceagent.exceptions import ProfileLookupError

from .interface import ProfileStore

logger = logging.getLogger(__name__)


class SupabaseProfileStore(ProfileStore):
    """Profile lookups against Supabase PostgREST tables."""

    def __init__(
        self,
        client: Optional[Client] = None,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
    ):
        """
        Initialize the store.

        Args:
            client: Pre-built Supabase client; created from URL/key if omitted
            supabase_url: Overrides SUPABASE_URL
            supabase_key: Overrides SUPABASE_KEY

        Raises:
            ValueError: If no client is given and URL or key is missing
        """
        if client is None:
            supabase_url = supabase_url or settings.SUPABASE_URL
            supabase_key = supabase_key or settings.SUPABASE_KEY

            if not supabase_url or not supabase_key:
                raise ValueError(
                    "SUPABASE_URL and SUPABASE_KEY environment variables must be set"
                )

            client = create_client(supabase_url, supabase_key)

        self.client: Client = client
        self.profiles_table = settings.PROFILES_TABLE
        self.company_profiles_table = settings.COMPANY_PROFILES_TABLE
        self.interview_attempts_table = settings.INTERVIEW_ATTEMPTS_TABLE

        logger.info("Supabase profile store initialized")

    def get_subscription(self, user_id: str) -> Optional[str]:
        try:
            response = (
                self.client.table(self.profiles_table)
                .select("subscription")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch subscription for user {user_id}: {e}")
            raise ProfileLookupError(
                f"Subscription lookup failed: {e}", user_id=user_id
            ) from e

        rows = response.data or []
        if not rows:
            raise ProfileLookupError(
                f"No profile found for user {user_id}", user_id=user_id
            )

        return rows[0].get("subscription") or None

    def count_interview_attempts(self, user_id: str) -> int:
        try:
            profile_response = (
                self.client.table(self.company_profiles_table)
                .select("willo_company_key")
                .eq("created_by_user_id", user_id)
                .limit(1)
                .execute()
            )
            rows = profile_response.data or []
            company_key = rows[0].get("willo_company_key") if rows else None
            if not company_key:
                return 0

            count_response = (
                self.client.table(self.interview_attempts_table)
                .select("id", count="exact", head=True)
                .eq("department_key", company_key)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to count interview attempts for user {user_id}: {e}")
            raise ProfileLookupError(
                f"Usage lookup failed: {e}", user_id=user_id
            ) from e

        count = count_response.count
        return count if isinstance(count, int) else 0
