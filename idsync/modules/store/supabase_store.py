"""
Supabase implementation of the data store.

Wraps the async Supabase client's PostgREST builder and translates its
errors into the store exception taxonomy.
"""

import logging
import re
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from idsync.shared.config import get_settings
from idsync.shared.database import get_supabase_client, get_supabase_service_client

from .exceptions import (
    DuplicateKeyError,
    NO_ROWS_CODE,
    RowNotFoundError,
    StoreError,
    UNIQUE_VIOLATION_CODE,
)

logger = logging.getLogger(__name__)

_ROW_COUNT = re.compile(r"(\d+) rows?")


def _matched_row_count(details: Optional[str]) -> Optional[int]:
    """
    Read the row count from a PGRST116 details string.

    PostgREST uses the same code for zero and for several matching rows,
    e.g. "The result contains 0 rows" vs "The result contains 2 rows".
    """
    match = _ROW_COUNT.search(details or "")
    return int(match.group(1)) if match else None


class SupabaseDataStore:
    """
    Data store backed by a Supabase project.

    The anon key is kept so clear_authorization() can put the client back
    into anonymous mode after sign-out.
    """

    def __init__(self, client: AsyncClient, anon_key: str) -> None:
        self._client = client
        self._anon_key = anon_key
        self._token: Optional[str] = None

    @property
    def authorization(self) -> Optional[str]:
        return self._token

    def set_authorization(self, token: str) -> None:
        self._install(token)
        self._token = token

    def clear_authorization(self) -> None:
        self._install(self._anon_key)
        self._token = None

    def _install(self, token: str) -> None:
        # Both: the postgrest client is rebuilt from options.headers on auth events
        self._client.options.headers["Authorization"] = f"Bearer {token}"
        self._client.postgrest.auth(token)

    async def query(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any]:
        builder = self._client.table(table).select(columns)
        for column, value in filters.items():
            builder = builder.eq(column, value)
        try:
            result = await builder.single().execute()
        except APIError as e:
            raise self._translate(e, table)
        except httpx.HTTPError as e:
            raise StoreError(f"Request to {table} failed: {e}", table=table)
        return result.data

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        try:
            result = await self._client.table(table).insert(record).execute()
        except APIError as e:
            raise self._translate(e, table)
        except httpx.HTTPError as e:
            raise StoreError(f"Request to {table} failed: {e}", table=table)
        return result.data[0]

    async def update(
        self,
        table: str,
        filters: dict[str, Any],
        patch: dict[str, Any],
    ) -> list[dict[str, Any]]:
        builder = self._client.table(table).update(patch)
        for column, value in filters.items():
            builder = builder.eq(column, value)
        try:
            result = await builder.execute()
        except APIError as e:
            raise self._translate(e, table)
        except httpx.HTTPError as e:
            raise StoreError(f"Request to {table} failed: {e}", table=table)
        return list(result.data or [])

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        builder = self._client.table(table).delete()
        for column, value in filters.items():
            builder = builder.eq(column, value)
        try:
            await builder.execute()
        except APIError as e:
            raise self._translate(e, table)
        except httpx.HTTPError as e:
            raise StoreError(f"Request to {table} failed: {e}", table=table)

    @staticmethod
    def _translate(error: APIError, table: str) -> StoreError:
        """Map a PostgREST error onto the store exception taxonomy."""
        message = error.message or str(error)
        if error.code == NO_ROWS_CODE:
            if _matched_row_count(error.details) in (None, 0):
                return RowNotFoundError(table, message)
            return StoreError(message, code=error.code, table=table)
        if error.code == UNIQUE_VIOLATION_CODE:
            return DuplicateKeyError(table, message)
        logger.debug(f"Supabase error on {table}: {error.code} {message}")
        return StoreError(message, code=error.code, table=table)


# Module-level instance getters
_store_instance: Optional[SupabaseDataStore] = None
_service_store_instance: Optional[SupabaseDataStore] = None


async def get_data_store() -> SupabaseDataStore:
    """Get the anon-key data store singleton used by the client."""
    global _store_instance
    if _store_instance is None:
        client = await get_supabase_client()
        _store_instance = SupabaseDataStore(client, get_settings().supabase_anon_key)
    return _store_instance


async def get_service_data_store() -> SupabaseDataStore:
    """Get the service-role data store singleton used by the API server."""
    global _service_store_instance
    if _service_store_instance is None:
        client = await get_supabase_service_client()
        _service_store_instance = SupabaseDataStore(
            client, get_settings().supabase_service_role_key
        )
    return _service_store_instance


def reset_data_store() -> None:
    """Reset the data store singletons (for testing)."""
    global _store_instance, _service_store_instance
    _store_instance = None
    _service_store_instance = None
