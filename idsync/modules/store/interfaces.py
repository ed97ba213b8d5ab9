"""
Data store interface.

Every component that talks to the backend goes through IDataStore. The
authorization it carries is process-wide state; only the credential
synchronizer calls set_authorization() and clear_authorization().
"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class IDataStore(Protocol):
    """
    Row-level CRUD over named tables with equality filters.

    Implementations raise RowNotFoundError, DuplicateKeyError or StoreError
    from idsync.modules.store.exceptions.
    """

    def set_authorization(self, token: str) -> None:
        """Install a bearer token for all subsequent calls."""
        ...

    def clear_authorization(self) -> None:
        """Drop the installed token and fall back to anonymous access."""
        ...

    @property
    def authorization(self) -> Optional[str]:
        """The token currently installed, if any."""
        ...

    async def query(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any]:
        """
        Fetch exactly one row matching all filters.

        Raises:
            RowNotFoundError: If no row matches
            StoreError: On any other failure
        """
        ...

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it as stored.

        Raises:
            DuplicateKeyError: If a unique constraint is violated
            StoreError: On any other failure
        """
        ...

    async def update(
        self,
        table: str,
        filters: dict[str, Any],
        patch: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Apply patch to all matching rows and return the updated rows."""
        ...

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete all matching rows."""
        ...
