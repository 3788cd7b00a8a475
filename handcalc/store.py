"""In-memory calculator session store.

Each session keeps its current ``CalculatorState``; applying keys swaps
in the state returned by ``transition``.  The store is the only place
session state changes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from handcalc.calculator import INITIAL_STATE, CalculatorState, transition
from handcalc.keys import KeyEvent
from handcalc.models import Session, _new_id, _utcnow

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


@dataclass
class _Entry:
    state: CalculatorState
    keys_handled: int
    created_at: datetime
    updated_at: datetime


class SessionStore:
    """In-memory store of calculator sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, _Entry] = {}

    # -- helpers -------------------------------------------------------------

    def _entry(self, session_id: str) -> _Entry:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def _view(self, session_id: str, entry: _Entry) -> Session:
        return Session.build(
            session_id,
            entry.state,
            keys_handled=entry.keys_handled,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )

    # -- operations ----------------------------------------------------------

    def create(self) -> Session:
        """Start a new session at the initial state."""
        now = _utcnow()
        session_id = _new_id()
        entry = _Entry(INITIAL_STATE, 0, now, now)
        self._sessions[session_id] = entry
        logger.info("session %s created", session_id)
        return self._view(session_id, entry)

    def get(self, session_id: str) -> Session:
        return self._view(session_id, self._entry(session_id))

    def state(self, session_id: str) -> CalculatorState:
        return self._entry(session_id).state

    def apply(self, session_id: str, events: Iterable[KeyEvent]) -> Session:
        """Apply key events in order and return the updated session."""
        entry = self._entry(session_id)
        state = entry.state
        handled = 0
        for event in events:
            state = transition(state, event)
            handled += 1
        entry.state = state
        entry.keys_handled += handled
        entry.updated_at = _utcnow()
        logger.debug("session %s: %d keys, buffer=%r", session_id, handled, state.buffer)
        return self._view(session_id, entry)

    def list(self, *, offset: int = 0, limit: int = 50) -> list[Session]:
        """List sessions, newest first."""
        items = [self._view(sid, entry) for sid, entry in self._sessions.items()]
        items.sort(key=lambda s: s.created_at, reverse=True)
        return items[offset : offset + limit]

    def delete(self, session_id: str) -> Session:
        """Delete a session and return its last view."""
        session = self.get(session_id)
        del self._sessions[session_id]
        logger.info("session %s deleted", session_id)
        return session

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()
