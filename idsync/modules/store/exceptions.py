"""
Data store exceptions.

PostgREST reports "no rows" for single-row selects with code PGRST116 and
Postgres reports unique violations with code 23505. Both are expected
outcomes for callers, so they get their own types.
"""

from typing import Optional

from idsync.shared.exceptions import ExternalServiceError

NO_ROWS_CODE = "PGRST116"
UNIQUE_VIOLATION_CODE = "23505"


class StoreError(ExternalServiceError):
    """Raised when a data store call fails."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        table: Optional[str] = None,
    ):
        super().__init__(
            message,
            service="supabase",
            code=code or "STORE_ERROR",
            details={"table": table} if table else None,
        )
        self.table = table


class RowNotFoundError(StoreError):
    """Raised when a single-row query matches no rows."""

    def __init__(self, table: str, message: str = "No matching row"):
        super().__init__(message, code=NO_ROWS_CODE, table=table)


class DuplicateKeyError(StoreError):
    """Raised when an insert violates a unique constraint."""

    def __init__(self, table: str, message: str = "Duplicate key value"):
        super().__init__(message, code=UNIQUE_VIOLATION_CODE, table=table)
