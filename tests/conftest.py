"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest

from idsync.shared.config import get_settings
from idsync.shared.database import reset_client_cache
from idsync.modules.identity.client import reset_identity_provider
from idsync.modules.identity.models import Identity
from idsync.modules.store.supabase_store import reset_data_store

from .fakes import FakeIdentityProvider, users_store


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, clients and stores before and after each test."""
    get_settings.cache_clear()
    reset_client_cache()
    reset_data_store()
    reset_identity_provider()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_data_store()
    reset_identity_provider()


@pytest.fixture
def store():
    """In-memory users store."""
    return users_store()


@pytest.fixture
def provider() -> FakeIdentityProvider:
    """Scriptable identity provider."""
    return FakeIdentityProvider()


@pytest.fixture
def identity() -> Identity:
    """A signed-in identity."""
    return Identity(
        subject_id="user_123",
        session_id="sess_123",
        email="ada@example.com",
        first_name="Ada",
        last_name="Lovelace",
    )
