"""Shared fixtures for gamification tests."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from app.core.config_file import get_settings
from app.core.gamification.catalog import build_default_catalog
from app.core.gamification.models import LeaderboardEntry

# Clear settings cache so tests see environment overrides
get_settings.cache_clear()


@pytest.fixture
def catalog():
    """Fresh default catalog."""
    return build_default_catalog()


@pytest.fixture
def fixed_now():
    """Deterministic award timestamp."""
    return datetime(2024, 1, 20, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_entry():
    """Factory for LeaderboardEntry with sensible defaults."""

    def _make(entry_id: str = "u1", **overrides) -> LeaderboardEntry:
        data = {
            "id": entry_id,
            "name": f"Student {entry_id}",
            "email": f"{entry_id}@example.com",
            "cohort": "Cohort 2024-01",
        }
        data.update(overrides)
        return LeaderboardEntry(**data)

    return _make


@pytest.fixture
def client():
    """Test client for the FastAPI app."""
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client
