"""Pytest configuration and fixtures."""

from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from blocker_insights.config import Settings
from blocker_insights.models.blocker import Blocker
from blocker_insights.models.team_member import TeamMember

NOW = datetime(2026, 3, 10, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant (a Tuesday)."""
    return NOW


@pytest.fixture
def settings() -> Settings:
    """Settings that never read the environment's credentials."""
    return Settings(
        _env_file=None,
        contentstack_api_key="blt_api_key",
        contentstack_delivery_token="cs_delivery",
        contentstack_management_token="cs_management",
        contentstack_environment="test",
        anthropic_api_key=None,
        slack_bot_token=None,
    )


@pytest.fixture
def make_blocker():
    """Factory for blockers; ids are B-001, B-002, ... in creation order."""
    ids = count(1)

    def _make(
        severity: str = "High",
        category: str = "Technical",
        description: str = "CI pipeline is failing on main",
        status: str = "Open",
        owner_id: str = "m-alice",
        timestamp: datetime | None = None,
        hours_ago: int = 1,
    ) -> Blocker:
        return Blocker(
            id=f"B-{next(ids):03d}",
            owner_id=owner_id,
            description=description,
            category=category,
            severity=severity,
            status=status,
            timestamp=timestamp or NOW - timedelta(hours=hours_ago),
        )

    return _make


@pytest.fixture
def alice() -> TeamMember:
    """Individual contributor on Platform."""
    return TeamMember(
        id="m-alice",
        first_name="Alice",
        last_name="Nguyen",
        email="alice@example.com",
        slack_id="U-ALICE",
        team="Platform",
    )


@pytest.fixture
def bob() -> TeamMember:
    """Second Platform member."""
    return TeamMember(
        id="m-bob",
        first_name="Bob",
        last_name="Okafor",
        email="bob@example.com",
        team="Platform",
    )


@pytest.fixture
def manager() -> TeamMember:
    """Platform manager with a Slack id."""
    return TeamMember(
        id="m-carol",
        first_name="Carol",
        last_name="Diaz",
        email="carol@example.com",
        slack_id="U-CAROL",
        team="Platform",
        is_manager=True,
    )
