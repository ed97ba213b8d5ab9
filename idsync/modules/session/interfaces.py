"""
Session module interface.

Screens that need an authorized data store depend on ISessionSynchronizer
for readiness gating.
"""

from typing import Optional, Protocol, runtime_checkable

from idsync.modules.identity.models import Identity

from .models import SessionCredential, SyncPhase


@runtime_checkable
class ISessionSynchronizer(Protocol):
    """
    Keeps the data store authorized for the signed-in identity.
    """

    @property
    def phase(self) -> SyncPhase:
        """Current state machine phase."""
        ...

    @property
    def identity(self) -> Optional[Identity]:
        """The signed-in identity, if any."""
        ...

    @property
    def credential(self) -> Optional[SessionCredential]:
        """The most recently installed credential, if any."""
        ...

    def is_ready(self) -> bool:
        """True once authorized and the profile sync has been attempted."""
        ...

    def require_ready(self) -> Identity:
        """
        Return the identity if ready.

        Raises:
            SessionNotReadyError: If the session is not ready
        """
        ...

    async def on_identity_changed(self, identity: Optional[Identity]) -> None:
        """React to sign-in (identity) or sign-out (None)."""
        ...
