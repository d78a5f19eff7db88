from __future__ import annotations

import pytest

from app.config import settings
from app.services.session_store import InMemorySessionStore


@pytest.fixture
def store():
    return InMemorySessionStore(ttl_seconds=0)


@pytest.fixture
def no_credentials(monkeypatch):
    """Run with every provider credential cleared, whatever the local .env holds."""
    for key in (
        "openai_api_key",
        "anthropic_api_key",
        "brave_api_key",
        "tavily_api_key",
        "fred_api_key",
        "jina_api_key",
    ):
        monkeypatch.setattr(settings, key, "")
    monkeypatch.setattr(settings, "ai_provider", "local")
