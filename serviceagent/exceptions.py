"""
Exception classes for ServiceAgent.

Rule evaluation is tolerant of malformed data, so only configuration
problems and upstream lookup failures get their own exception types.
"""

from typing import Any, Dict, Optional


class ServiceAgentError(Exception):
    """Base exception for all ServiceAgent errors."""

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.metadata = metadata or {}


class ScoringConfigurationError(ServiceAgentError, ValueError):
    """Scoring settings have an invalid shape, e.g. missing or inverted bounds."""

    pass


class ProfileLookupError(ServiceAgentError):
    """The account/subscription store could not answer a lookup."""

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, metadata)
        self.user_id = user_id
