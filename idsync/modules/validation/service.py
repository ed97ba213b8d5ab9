"""
Live username validation.

UsernameValidator turns keystrokes into ValidationState snapshots:

    empty input        -> IDLE
    format rule fails  -> INVALID (no network)
    format passes      -> CHECKING, then one availability lookup after the
                          quiet window -> VALID or INVALID

The lookup runs on the normalized (trimmed, lowercased) value, the form
usernames are stored in; input_value keeps the raw text.

Every keystroke bumps a generation counter and cancels the pending timer.
Lookups already in flight are left to finish; their result is applied
only if the generation and candidate they were issued for are still the
latest, so a slow answer for an old value never overwrites a newer one.
"""

import asyncio
import logging
from typing import Callable, Optional

from idsync.shared.config import get_settings
from idsync.modules.store.interfaces import IDataStore
from idsync.modules.store.exceptions import RowNotFoundError

from .interfaces import StateListener
from .models import ValidationPhase, ValidationState
from .rules import (
    UsernameRules,
    check_username_format,
    normalize_username,
    suggest_alternative_usernames,
)

logger = logging.getLogger(__name__)

MSG_AVAILABLE = "Username is available"
MSG_TAKEN = "Username is already taken"
MSG_LOOKUP_FAILED = "Error checking username availability"


class UsernameValidator:
    """
    Debounced, race-free username validator.

    Single-threaded: all methods must be called from the event loop that
    runs the lookups.
    """

    def __init__(
        self,
        store: IDataStore,
        rules: Optional[UsernameRules] = None,
        debounce_seconds: Optional[float] = None,
        table: Optional[str] = None,
        column: str = "username",
    ):
        """
        Args:
            store: Data store queried for existing usernames.
            rules: Format rules. Defaults to the configured rules.
            debounce_seconds: Quiet window before a lookup is issued.
            table: Table holding usernames. Defaults to the users table.
            column: Column compared against the candidate.
        """
        settings = get_settings()
        self._store = store
        self._rules = rules or UsernameRules.from_settings(settings)
        self._debounce = (
            settings.username_debounce_seconds
            if debounce_seconds is None
            else debounce_seconds
        )
        self._table = table or settings.users_table
        self._column = column

        self._state = ValidationState()
        self._generation = 0
        self._latest_candidate = ""
        self._pending: Optional[asyncio.TimerHandle] = None
        self._inflight: set[asyncio.Task] = set()
        self._listeners: list[StateListener] = []
        self._closed = False

    @property
    def rules(self) -> UsernameRules:
        return self._rules

    def current_state(self) -> ValidationState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_input_changed(self, value: str) -> None:
        if self._closed:
            logger.debug("Ignoring input on a closed validator")
            return

        self._generation += 1
        self._cancel_pending()

        candidate = normalize_username(value)
        self._latest_candidate = candidate

        if not candidate:
            self._publish(ValidationState(input_value=value))
            return

        reason = check_username_format(candidate, self._rules)
        if reason is not None:
            self._publish(
                ValidationState(
                    input_value=value,
                    phase=ValidationPhase.INVALID,
                    message=reason,
                )
            )
            return

        self._publish(ValidationState(input_value=value, phase=ValidationPhase.CHECKING))
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(
            self._debounce, self._fire, self._generation, candidate, value
        )

    async def settle(self) -> ValidationState:
        """
        Wait until no timer is pending and no lookup is in flight.

        Returns:
            The state once everything has settled
        """
        loop = asyncio.get_running_loop()
        while True:
            if self._inflight:
                await asyncio.wait(set(self._inflight))
            elif self._pending is not None:
                await asyncio.sleep(max(0.0, self._pending.when() - loop.time()))
            else:
                return self._state

    def close(self) -> None:
        self._closed = True
        self._generation += 1
        self._cancel_pending()
        for task in list(self._inflight):
            task.cancel()
        self._listeners.clear()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self, generation: int, candidate: str, raw_value: str) -> None:
        self._pending = None
        if generation != self._generation:
            return
        task = asyncio.get_running_loop().create_task(
            self._check_availability(generation, candidate, raw_value)
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _check_availability(
        self,
        generation: int,
        candidate: str,
        raw_value: str,
    ) -> None:
        logger.debug(f"Checking availability of {candidate!r}")
        try:
            await self._store.query(
                self._table,
                {self._column: candidate},
                columns=self._column,
            )
        except RowNotFoundError:
            state = ValidationState(
                input_value=raw_value,
                phase=ValidationPhase.VALID,
                message=MSG_AVAILABLE,
            )
        except Exception as e:
            logger.warning(f"Username availability check failed for {candidate!r}: {e}")
            state = ValidationState(
                input_value=raw_value,
                phase=ValidationPhase.INVALID,
                message=MSG_LOOKUP_FAILED,
            )
        else:
            state = ValidationState(
                input_value=raw_value,
                phase=ValidationPhase.INVALID,
                message=MSG_TAKEN,
                suggestions=tuple(
                    s
                    for s in suggest_alternative_usernames(candidate)
                    if check_username_format(s, self._rules) is None
                ),
            )

        if self._closed or generation != self._generation or candidate != self._latest_candidate:
            logger.debug(f"Discarding stale verdict for {candidate!r}")
            return
        self._publish(state)

    def _publish(self, state: ValidationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Validation state listener failed")

