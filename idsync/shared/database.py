"""
Database client factory for Supabase.

Provides both anon-key clients (for the signed-in user, authorized later
with a Clerk template token) and service-role clients (for backend
operations bypassing RLS).
"""

from typing import Optional
from supabase import acreate_client, AsyncClient

from .config import get_settings

# Module-level client cache
_client: Optional[AsyncClient] = None
_service_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """
    Get Supabase client with the anon key.

    Row Level Security applies. The credential synchronizer installs the
    user's token on this client once an identity is signed in.

    Returns:
        Async Supabase client configured with the anon key
    """
    global _client

    if _client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        _client = await acreate_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


async def get_supabase_service_client() -> AsyncClient:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for server-side operations such as creating a user row on
    behalf of a freshly verified sign-up.

    Returns:
        Async Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = await acreate_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def reset_client_cache() -> None:
    """
    Reset the cached database clients.

    Useful for testing or when configuration changes.
    """
    global _client, _service_client
    _client = None
    _service_client = None
