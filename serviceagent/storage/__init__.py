"""
Storage collaborators for ServiceAgent.

Provides the profile store used for plan lookups and the key-value cache
that fronts it.
"""

from .cache import InMemoryTTLCache, KeyValueCache
from .factory import get_profile_store, reset_profile_store
from .interface import ProfileStore
from .memory_profiles import InMemoryProfileStore

__all__ = [
    "KeyValueCache",
    "InMemoryTTLCache",
    "ProfileStore",
    "InMemoryProfileStore",
    "get_profile_store",
    "reset_profile_store",
]
