"""FastAPI REST endpoints for calculator sessions.

Routes
------
POST   /sessions                  Start a new session
GET    /sessions                  List sessions
GET    /sessions/{id}             Retrieve a session
POST   /sessions/{id}/keys        Apply symbolic keys ("7", "×", "=", "AC" ...)
POST   /sessions/{id}/keyboard    Apply one physical keyboard key ("Enter" ...)
DELETE /sessions/{id}             Delete a session
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from handcalc.keyboard import translate
from handcalc.keys import UnknownKeyError, parse_key
from handcalc.models import KeyBatch, KeyboardKey, Session, SessionListResponse
from handcalc.store import SessionNotFoundError, SessionStore

router = APIRouter(prefix="/sessions", tags=["sessions"])

# The store instance is injected by the app factory (see app.py).
_store: SessionStore | None = None


def set_store(store: SessionStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> SessionStore:
    assert _store is not None, "Store not initialized"
    return _store


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session not found: {session_id}")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=Session, status_code=201)
def create_session() -> Session:
    """Start a new session showing "0"."""
    return get_store().create()


@router.get("", response_model=SessionListResponse)
def list_sessions(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> SessionListResponse:
    store = get_store()
    return SessionListResponse(items=store.list(offset=offset, limit=limit), total=store.count())


@router.get("/{session_id}", response_model=Session)
def get_session(session_id: str) -> Session:
    try:
        return get_store().get(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/keys", response_model=Session)
def press_keys(session_id: str, payload: KeyBatch) -> Session:
    """Apply a batch of symbolic keys.

    The whole batch is parsed first, so an unknown key leaves the
    session untouched.
    """
    try:
        events = [parse_key(label) for label in payload.keys]
    except UnknownKeyError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    try:
        return get_store().apply(session_id, events)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/keyboard", response_model=Session)
def press_keyboard(session_id: str, payload: KeyboardKey) -> Session:
    """Apply a physical keyboard key; keys with no meaning are ignored."""
    label = translate(payload.key)
    events = [parse_key(label)] if label is not None else []
    try:
        return get_store().apply(session_id, events)
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.delete("/{session_id}", response_model=Session)
def delete_session(session_id: str) -> Session:
    """Delete a session and return its last state."""
    try:
        return get_store().delete(session_id)
    except SessionNotFoundError:
        raise _not_found(session_id)
