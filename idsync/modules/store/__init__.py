"""
Data store module.

Wraps the Supabase PostgREST API behind a small CRUD interface that
distinguishes "no matching row" and "duplicate key" from other failures.

Public API:
- IDataStore: Interface every store implementation satisfies
- SupabaseDataStore: Production implementation
- InMemoryDataStore: Network-free implementation
- Store exceptions: StoreError, RowNotFoundError, DuplicateKeyError
"""

from .interfaces import IDataStore
from .memory import InMemoryDataStore
from .supabase_store import (
    SupabaseDataStore,
    get_data_store,
    get_service_data_store,
    reset_data_store,
)
from .exceptions import StoreError, RowNotFoundError, DuplicateKeyError

__all__ = [
    # Interface
    "IDataStore",
    # Implementations
    "SupabaseDataStore",
    "InMemoryDataStore",
    "get_data_store",
    "get_service_data_store",
    "reset_data_store",
    # Exceptions
    "StoreError",
    "RowNotFoundError",
    "DuplicateKeyError",
]
