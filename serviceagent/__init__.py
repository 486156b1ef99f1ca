"""
ServiceAgent rules core.

This package contains the plan-based feature gating and the lead scoring
engine behind the ServiceAgent web app, plus the in-app documentation
catalog.
"""

__version__ = "0.2.0"

# Import key modules to expose at the package level
from . import docs, scoring, services, storage, utils

# Configuration
from .config import get_config, load_config

__all__ = [
    "docs",
    "scoring",
    "services",
    "storage",
    "utils",
    "get_config",
    "load_config",
    "__version__",
]
