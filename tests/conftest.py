"""Pytest configuration and fixtures for mem0-cloud tests."""

import pytest


@pytest.fixture
def base_url() -> str:
    """Test base URL."""
    return "https://test.mem0.ai"


@pytest.fixture
def api_key() -> str:
    """Test API key."""
    return "test-api-key"


@pytest.fixture
def memory_payload() -> dict:
    """A memory record as the API returns it."""
    return {
        "id": "mem_123",
        "memory": "User prefers dark mode",
        "user_id": "alice",
        "hash": "abc123",
        "categories": ["preferences"],
        "metadata": {"source": "chat"},
        "created_at": "2026-01-26T10:00:00Z",
        "updated_at": "2026-01-26T10:00:00Z",
    }
