"""
Configuration settings for ServiceAgent.

All settings are loaded from environment variables with type conversion
and defaults. Call ``reload()`` after changing the environment (for
example after ``load_config`` applies a .env file).
"""

import sys
from pathlib import Path
from typing import Any

from serviceagent.config import (
    get_boolean_env,
    get_env,
    get_int_env,
)

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ETC_DIR = BASE_DIR / "etc"


def reload() -> None:
    """Re-read every setting from the current environment."""
    module = sys.modules[__name__]

    # Environment
    module.ENVIRONMENT = get_env("ENVIRONMENT", "development")
    module.DEBUG = get_boolean_env("DEBUG", False)

    # Logging
    module.LOG_LEVEL = get_env("LOG_LEVEL", "INFO")
    module.LOG_FORMAT = get_env("LOG_FORMAT", "json")

    # ==================
    # Plan resolution
    # ==================
    module.PLAN_CACHE_TTL_SECONDS = get_int_env("PLAN_CACHE_TTL_SECONDS", 600)
    module.PLAN_CACHE_MAX_ENTRIES = get_int_env("PLAN_CACHE_MAX_ENTRIES", 1000)
    module.PLAN_CACHE_KEY_PREFIX = get_env("PLAN_CACHE_KEY_PREFIX", "sa:userPlan")

    # ==================
    # Profile store
    # ==================
    module.PROFILE_STORE = get_env("PROFILE_STORE", "supabase")
    module.SUPABASE_URL = get_env("SUPABASE_URL")
    module.SUPABASE_KEY = get_env("SUPABASE_KEY")
    module.PROFILES_TABLE = get_env("PROFILES_TABLE", "profiles")
    module.COMPANY_PROFILES_TABLE = get_env(
        "COMPANY_PROFILES_TABLE", "company_profiles"
    )
    module.INTERVIEW_ATTEMPTS_TABLE = get_env(
        "INTERVIEW_ATTEMPTS_TABLE", "interview_attempts"
    )

    # ==================
    # Content
    # ==================
    module.SCORING_RULES_PATH = get_env(
        "SCORING_RULES_PATH", str(ETC_DIR / "scoring_rules.yml")
    )
    module.DOCUMENTATION_PATH = get_env(
        "DOCUMENTATION_PATH", str(ETC_DIR / "documentation.yml")
    )


reload()


def get_all_settings() -> dict[str, Any]:
    """
    Get all configuration settings as a dictionary.

    Returns:
        Dictionary of all uppercase settings defined in this module
    """
    current_module = sys.modules[__name__]
    return {
        name: getattr(current_module, name)
        for name in dir(current_module)
        if name.isupper()
    }
