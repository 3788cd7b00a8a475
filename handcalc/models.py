"""Request and response models for calculator sessions.

A session wraps one ``CalculatorState``.  The models expose the display
readout alongside the raw state so clients can render the pending
operator indicator and inspect the entry buffer.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from handcalc.calculator import CalculatorState, readout


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class KeyBatch(BaseModel):
    """Symbolic key labels applied in order, e.g. ["2", "+", "3", "="]."""

    keys: list[str] = Field(..., min_length=1, max_length=256)


class KeyboardKey(BaseModel):
    """A physical keyboard key name such as "Enter" or "7"."""

    key: str = Field(..., min_length=1, max_length=32)

    @field_validator("key")
    @classmethod
    def key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Key must not be blank")
        return v


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class RepeatView(BaseModel):
    operator: str
    operand: str


class StateView(BaseModel):
    """Raw state fields, operators given as internal tokens."""

    buffer: str
    accumulator: str | None = None
    operator: str | None = None
    awaiting_next: bool = False
    repeat: RepeatView | None = None
    phase: str

    @classmethod
    def from_state(cls, state: CalculatorState) -> StateView:
        repeat = None
        if state.repeat is not None:
            repeat = RepeatView(operator=state.repeat.operator.value, operand=state.repeat.operand)
        return cls(
            buffer=state.buffer,
            accumulator=state.accumulator,
            operator=state.operator.value if state.operator is not None else None,
            awaiting_next=state.awaiting_next,
            repeat=repeat,
            phase=state.phase.name.lower(),
        )


class Session(BaseModel):
    """A calculator session as stored and returned by the API."""

    id: str = Field(default_factory=_new_id)
    display: str = "0"
    pending_operator: str | None = None
    state: StateView
    keys_handled: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def build(cls, session_id: str, state: CalculatorState, **fields) -> Session:
        view = readout(state)
        return cls(
            id=session_id,
            display=view.display,
            pending_operator=view.pending_operator,
            state=StateView.from_state(state),
            **fields,
        )


class SessionListResponse(BaseModel):
    items: list[Session]
    total: int
