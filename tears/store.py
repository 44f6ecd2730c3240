"""
Session storage for the tears service.

This module provides in-memory session stores. Each session owns its own
Selection and Derivation; a store wraps them with asyncio signaling so any
number of subscribers can stream the session's snapshots.
"""

import asyncio
import logging
import uuid
from collections import OrderedDict
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from .config import DEFAULT_MAX_SESSIONS
from .derivation import Derivation
from .events import SelectionEvent, apply_event
from .models import Suggestion
from .selection import Selection
from .suggestions import DEFAULT_TABLE, SuggestionTable
from .views import SessionSnapshot

logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    """Raised when a session id is not known to the registry."""


class SessionStore:
    """
    Selection state of a single session with real-time streaming.

    Every committed change bumps a counter and wakes all waiting subscribers,
    which then read one consistent snapshot. Mutations never await anything
    but the store's own condition, which is uncontended within a session.
    """

    def __init__(
        self, session_id: str | None = None, table: SuggestionTable = DEFAULT_TABLE
    ) -> None:
        self.session_id = session_id
        self._selection = Selection()
        self._derivation = Derivation(self._selection, table)
        self._derivation.subscribe(self._on_change)
        self._condition = asyncio.Condition()
        self._update_counter = 0  # Simple counter to detect updates
        self._closed = False

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def suggestion(self) -> Suggestion | None:
        return self._derivation.current

    def snapshot(self) -> SessionSnapshot:
        """Build a snapshot of the current selection and suggestion."""
        return SessionSnapshot.build(
            state=self._selection.state,
            trust=self._selection.trust,
            mood=self._selection.mood,
            suggestion=self._derivation.current,
            session_id=self.session_id,
        )

    async def apply(self, event: SelectionEvent) -> tuple[bool, SessionSnapshot]:
        """
        Apply a raw selection event and notify all subscribers of any change.

        Args:
            event: The event emitted by a presentation adapter

        Returns:
            Whether the event was accepted, and the resulting snapshot
        """
        async with self._condition:
            accepted = apply_event(self._selection, event)
            if not accepted:
                logger.debug(
                    "Session %s ignored %s value %r",
                    self.session_id,
                    event.field,
                    event.value,
                )
            self._condition.notify_all()
            return accepted, self.snapshot()

    async def read(self) -> SessionSnapshot:
        """Get the current snapshot."""
        async with self._condition:
            return self.snapshot()

    async def close(self) -> None:
        """End the session and release all subscribers."""
        async with self._condition:
            self._closed = True
            self._derivation.close()
            self._condition.notify_all()

    @asynccontextmanager
    async def stream(
        self,
    ) -> AsyncGenerator[AsyncGenerator[SessionSnapshot, None], None]:
        """
        Stream session snapshots to a subscriber.

        This context manager yields an async generator that produces the
        current snapshot, then one snapshot per committed change, until the
        session is closed.

        Yields:
            An async generator of SessionSnapshot objects
        """

        async def snapshot_generator() -> AsyncGenerator[SessionSnapshot, None]:
            # Get initial state and counter
            async with self._condition:
                last_seen_counter = self._update_counter
                snapshot = self.snapshot()
            yield snapshot

            # Wait for updates, never holding the lock across a yield
            try:
                while True:
                    async with self._condition:
                        await self._condition.wait_for(
                            lambda: self._closed
                            or self._update_counter > last_seen_counter
                        )
                        if self._update_counter == last_seen_counter:
                            return

                        last_seen_counter = self._update_counter
                        snapshot = self.snapshot()
                    yield snapshot

            except (asyncio.CancelledError, GeneratorExit):
                # Client disconnected or generator closed, clean exit
                return

        yield snapshot_generator()

    def _on_change(self, _suggestion: Suggestion | None) -> None:
        # Runs synchronously inside apply(), while the condition is held
        self._update_counter += 1


class SessionRegistry:
    """
    In-memory registry of independent sessions.

    Sessions share the read-only suggestion table but never a selection.
    At most `max_sessions` are kept; creating one more evicts the session
    that was used least recently.
    """

    def __init__(
        self,
        table: SuggestionTable = DEFAULT_TABLE,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._table = table
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, SessionStore] = OrderedDict()

    @property
    def max_sessions(self) -> int:
        return self._max_sessions

    async def create(self) -> SessionStore:
        """Start a new session with nothing selected."""
        while len(self._sessions) >= self._max_sessions:
            evicted_id, evicted = self._sessions.popitem(last=False)
            await evicted.close()
            logger.info("Evicted idle session %s", evicted_id)

        session_id = uuid.uuid4().hex
        store = SessionStore(session_id=session_id, table=self._table)
        self._sessions[session_id] = store
        logger.info("Created session %s", session_id)
        return store

    def get(self, session_id: str) -> SessionStore:
        """
        Look up a session and mark it as recently used.

        Raises:
            SessionNotFound: if the session does not exist
        """
        try:
            store = self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None
        self._sessions.move_to_end(session_id)
        return store

    async def close(self, session_id: str) -> None:
        """
        End a session and release its subscribers.

        Raises:
            SessionNotFound: if the session does not exist
        """
        store = self._sessions.pop(session_id, None)
        if store is None:
            raise SessionNotFound(session_id)
        await store.close()
        logger.info("Closed session %s", session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
