"""
Session module.

Keeps the Supabase data store authorized with a Clerk template token for
the signed-in identity, refreshes it on a fixed cadence, and makes sure
the identity has a profile row.

Public API:
- ISessionSynchronizer: Interface for readiness gating
- SessionCredential, SyncPhase: Models
- SessionNotReadyError: Raised by require_ready()
"""

from .interfaces import ISessionSynchronizer
from .models import SessionCredential, SyncPhase
from .exceptions import SessionNotReadyError

__all__ = [
    # Interface
    "ISessionSynchronizer",
    # Models
    "SessionCredential",
    "SyncPhase",
    # Exceptions
    "SessionNotReadyError",
]
