"""
Utilities package for ServiceAgent.

Shared logging and metrics helpers used throughout the application.
"""

from . import logging, metrics

__all__ = [
    "logging",
    "metrics",
]
