"""
Pytest configuration and fixtures for testing.
"""

from datetime import datetime, timezone

import pytest

from serviceagent.config import settings
from serviceagent.scoring import ScoringSettings
from serviceagent.storage import reset_profile_store


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def reference_time():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_settings():
    """Build ScoringSettings from rule dicts with 0..100 bounds by default."""

    def _make(rules=None, min_score=0, max_score=100, ai_assist=False):
        return ScoringSettings.from_payload(
            {
                "rules": rules or [],
                "minScore": min_score,
                "maxScore": max_score,
                "aiAssist": ai_assist,
            }
        )

    return _make


@pytest.fixture
def linkedin_lead():
    return {
        "id": "lead-1",
        "name": "Dana Smith",
        "email": "dana@acme.test",
        "company": "Acme Inc",
        "source": "LinkedIn",
        "status": "New",
        "score": 0,
        "budget": 15000,
        "interactionCount": 6,
        "tags": ["Interested", "Enterprise"],
    }


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Restore module-level settings and the shared profile store."""
    reset_profile_store()
    yield
    reset_profile_store()
    settings.reload()
