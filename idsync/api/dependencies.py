"""
Dependency wiring for FastAPI routes.

Routes receive interfaces; tests replace get_store through
app.dependency_overrides.
"""

from fastapi import Depends

from idsync.shared.config import get_settings
from idsync.modules.profiles.repository import ProfileRepository
from idsync.modules.store.interfaces import IDataStore
from idsync.modules.store.supabase_store import get_service_data_store
from idsync.modules.validation.rules import UsernameRules


async def get_store() -> IDataStore:
    """Service-role data store; the API writes on behalf of new users."""
    return await get_service_data_store()


def get_profile_repository(store: IDataStore = Depends(get_store)) -> ProfileRepository:
    return ProfileRepository(store, get_settings().users_table)


def get_username_rules() -> UsernameRules:
    return UsernameRules.from_settings()
