"""
Profile store factory for ServiceAgent.

Selects the profile store backend from configuration or the
``PROFILE_STORE`` environment variable.
"""

import logging
from typing import Optional

from serviceagent.config import settings

from .interface import ProfileStore
from .memory_profiles import InMemoryProfileStore

logger = logging.getLogger(__name__)

# Shared store instance
_store_instance: Optional[ProfileStore] = None


def get_profile_store(
    store_type: Optional[str] = None, force_new: bool = False
) -> ProfileStore:
    """
    Get a profile store instance.

    Args:
        store_type: Backend type ('supabase' or 'memory'); defaults to PROFILE_STORE
        force_new: Build a fresh instance instead of reusing the shared one

    Returns:
        Profile store instance

    Raises:
        ValueError: If the store type is not supported
    """
    global _store_instance

    if _store_instance and not force_new:
        return _store_instance

    store_type = (store_type or settings.PROFILE_STORE or "supabase").lower()

    if store_type == "supabase":
        from .supabase_profiles import SupabaseProfileStore

        instance = SupabaseProfileStore()
    elif store_type == "memory":
        instance = InMemoryProfileStore()
    else:
        raise ValueError(f"Unsupported profile store type: {store_type}")

    if not force_new:
        _store_instance = instance

    logger.info(f"Created {store_type} profile store")
    return instance


def reset_profile_store() -> None:
    """Reset the shared store instance (useful for testing)."""
    global _store_instance
    _store_instance = None
