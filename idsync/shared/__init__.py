"""
Shared infrastructure for idsync.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- logging: Log handler setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import (
    get_supabase_client,
    get_supabase_service_client,
    reset_client_cache,
)
from .exceptions import (
    IdSyncError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_service_client",
    "reset_client_cache",
    "IdSyncError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "ConflictError",
    "ExternalServiceError",
]
