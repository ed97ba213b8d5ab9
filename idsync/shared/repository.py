"""
Base repository class for data store access.

Provides a common abstraction layer for all repositories, encapsulating
data store access and providing shared utilities for data operations.
"""

from typing import TYPE_CHECKING, TypeVar, Generic

if TYPE_CHECKING:
    from idsync.modules.store.interfaces import IDataStore


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for data operations:
    - Data store access via self._store
    - Table name via self._table
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class ProfileRepository(BaseRepository[ProfileRecord]):
            async def get_by_subject_id(self, subject_id: str) -> Optional[ProfileRecord]:
                try:
                    row = await self._store.query(self._table, {"clerk_id": subject_id})
                except RowNotFoundError:
                    return None
                return self._map_to_profile(row)
    """

    def __init__(self, store: "IDataStore", table: str) -> None:
        """
        Initialize the repository with a data store.

        Args:
            store: Data store used for all operations.
            table: Name of the table this repository reads and writes.
        """
        self._store = store
        self._table = table
