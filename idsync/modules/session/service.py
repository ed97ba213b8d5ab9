"""
Credential synchronizer.

Keeps the data store authorized against the signed-in identity and makes
sure that identity has a profile row.

State machine (per signed-in identity):

    UNAUTHENTICATED --identity available--> ACQUIRING
    ACQUIRING --token installed--> AUTHORIZED (profile sync attempted once)
    ACQUIRING --no token / error--> UNAUTHENTICATED (no retry scheduled)
    AUTHORIZED --refresh tick--> AUTHORIZED (token re-acquired, best effort)
    any --sign-out--> UNAUTHENTICATED (refresh task cancelled)

Each sign-in opens a new generation. Anything that completes after its
generation ended (a slow token fetch, a refresh tick) is discarded, so a
signed-out identity can never re-install its token.
"""

import asyncio
import contextlib
import logging
from typing import Optional

from idsync.shared.config import get_settings
from idsync.modules.identity.exceptions import IdentityProviderError
from idsync.modules.identity.interfaces import IIdentityProvider
from idsync.modules.identity.models import Identity
from idsync.modules.profiles.exceptions import ProfileAlreadyExistsError
from idsync.modules.profiles.models import ProfileCreate
from idsync.modules.profiles.repository import ProfileRepository
from idsync.modules.store.exceptions import StoreError
from idsync.modules.store.interfaces import IDataStore

from .exceptions import SessionNotReadyError
from .models import SessionCredential, SyncPhase

logger = logging.getLogger(__name__)


class CredentialSynchronizer:
    """
    Sole writer of the data store's authorization.

    Runs on a single event loop; no locking is needed because every state
    change happens between awaits.
    """

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        store: IDataStore,
        profiles: ProfileRepository,
        template: Optional[str] = None,
        refresh_seconds: Optional[float] = None,
    ):
        """
        Args:
            identity_provider: Source of template tokens.
            store: Data store whose authorization this synchronizer owns.
            profiles: Repository used for the profile sync.
            template: Token template. Defaults to the configured template.
            refresh_seconds: Refresh cadence. Must be shorter than the token
                             lifetime. Defaults to the configured cadence.
        """
        settings = get_settings()
        self._idp = identity_provider
        self._store = store
        self._profiles = profiles
        self._template = template or settings.credential_template
        self._refresh_seconds = (
            settings.credential_refresh_seconds
            if refresh_seconds is None
            else refresh_seconds
        )

        self._phase = SyncPhase.UNAUTHENTICATED
        self._identity: Optional[Identity] = None
        self._credential: Optional[SessionCredential] = None
        self._ready = False
        self._generation = 0
        self._refresh_task: Optional[asyncio.Task] = None
        self._warned_cadence = False

    @property
    def phase(self) -> SyncPhase:
        return self._phase

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def credential(self) -> Optional[SessionCredential]:
        return self._credential

    @property
    def refresh_active(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def is_ready(self) -> bool:
        """
        True once authorized and the profile sync has been attempted.

        A credential known to be expired (refreshes kept failing) makes the
        session not ready again until a refresh succeeds.
        """
        if not self._ready or self._credential is None:
            return False
        return not self._credential.is_expired()

    def require_ready(self) -> Identity:
        if not self.is_ready() or self._identity is None:
            raise SessionNotReadyError()
        return self._identity

    async def on_identity_changed(self, identity: Optional[Identity]) -> None:
        if identity is None:
            await self.sign_out()
        else:
            await self.sign_in(identity)

    async def sign_in(self, identity: Identity) -> None:
        """
        Authorize the store for an identity and sync its profile.

        Signing in the identity that is already acquiring or authorized is
        a no-op. A different identity signs the current one out first.
        """
        current = self._identity
        if current is not None:
            if current == identity and self._phase != SyncPhase.UNAUTHENTICATED:
                logger.debug(f"Identity {identity.subject_id} already signed in")
                return
            await self.sign_out()

        self._generation += 1
        generation = self._generation
        self._identity = identity
        self._phase = SyncPhase.ACQUIRING
        logger.debug(f"Acquiring credential for {identity.subject_id}")

        try:
            authorized = await self.ensure_authorized()
        except Exception:
            logger.exception(f"Credential setup failed for {identity.subject_id}")
            authorized = False
        if generation != self._generation:
            return
        if not authorized:
            self._phase = SyncPhase.UNAUTHENTICATED
            logger.warning(f"No credential for {identity.subject_id}; store stays unauthorized")
            return

        self._phase = SyncPhase.AUTHORIZED
        try:
            await self.ensure_profile_synced()
        except Exception:
            logger.exception(f"Profile sync raised for {identity.subject_id}")
        if generation != self._generation:
            return

        self._ready = True
        self._refresh_task = asyncio.get_running_loop().create_task(
            self._refresh_loop(generation)
        )
        logger.info(f"Session ready for {identity.subject_id}")

    async def ensure_authorized(self) -> bool:
        """
        Fetch a fresh credential and install it on the data store.

        Returns:
            True if a credential for the current identity is installed.
        """
        identity = self._identity
        if identity is None:
            return False
        generation = self._generation

        try:
            token = await self._idp.acquire_credential(identity.session_id, self._template)
        except IdentityProviderError as e:
            logger.warning(f"Credential acquisition failed for {identity.subject_id}: {e.message}")
            return False

        if generation != self._generation:
            logger.debug(f"Discarding credential acquired for {identity.subject_id}")
            return False
        if not token:
            return False

        if self._credential is not None and self._credential.token == token:
            logger.debug("Credential unchanged, keeping installed token")
            return True

        credential = SessionCredential.from_token(token, self._template)
        self._store.set_authorization(token)
        self._credential = credential
        self._warn_if_cadence_too_slow(credential)
        logger.debug(f"Installed credential expiring at {credential.expires_at}")
        return True

    async def ensure_profile_synced(self) -> None:
        """
        Create the identity's profile row if it does not exist yet.

        Never overwrites an existing row. A duplicate-key failure means
        another session created it first and counts as success.
        """
        identity = self._identity
        if identity is None:
            return

        try:
            existing = await self._profiles.get_by_subject_id(identity.subject_id)
            if existing is not None:
                logger.debug(f"Profile exists for {identity.subject_id}")
                return

            await self._profiles.create(
                ProfileCreate(
                    clerk_id=identity.subject_id,
                    email=identity.email,
                    first_name=identity.first_name,
                    last_name=identity.last_name,
                )
            )
            logger.info(f"Created profile for {identity.subject_id}")
        except ProfileAlreadyExistsError:
            logger.info(f"Profile for {identity.subject_id} was created concurrently")
        except StoreError as e:
            logger.warning(f"Profile sync failed for {identity.subject_id}: {e.message}")

    async def sign_out(self) -> None:
        """Cancel the refresh task and drop the credential."""
        self._generation += 1

        task = self._refresh_task
        self._refresh_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        had_identity = self._identity is not None
        self._identity = None
        self._credential = None
        self._ready = False
        self._phase = SyncPhase.UNAUTHENTICATED

        if had_identity:
            self._store.clear_authorization()
            logger.info("Signed out; store authorization cleared")

    async def close(self) -> None:
        await self.sign_out()

    async def __aenter__(self) -> "CredentialSynchronizer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _refresh_loop(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self._refresh_seconds)
            if generation != self._generation:
                return
            try:
                refreshed = await self.ensure_authorized()
            except Exception:
                logger.exception("Credential refresh raised; retrying next tick")
                continue
            if not refreshed and generation == self._generation:
                logger.warning(
                    f"Credential refresh failed; retrying in {self._refresh_seconds:g}s"
                )

    def _warn_if_cadence_too_slow(self, credential: SessionCredential) -> None:
        validity = credential.validity_seconds
        if self._warned_cadence or validity is None:
            return
        if self._refresh_seconds >= validity:
            self._warned_cadence = True
            logger.warning(
                f"Refresh interval {self._refresh_seconds:g}s is not shorter than "
                f"the credential lifetime {validity:g}s; calls may use expired tokens"
            )
