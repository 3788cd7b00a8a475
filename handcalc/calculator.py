"""Immediate-execution calculator state machine.

The machine is a pure reducer: ``transition(state, event)`` returns the
next ``CalculatorState`` and never mutates its input.  Operators are
applied left to right as soon as the next operator or "=" arrives, so
``2 + 3 × 4 =`` gives 20, and a repeated "=" replays the last operator
and right operand.

Decision branches are annotated with the branch ids catalogued in
``handcalc.contract.BRANCHES`` so white-box tests can trace coverage.

``Calculator`` is a small holder for callers that want to feed events
one at a time and read the display back.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Iterable

from handcalc.display import ERROR_TEXT, format_display
from handcalc.evaluator import EvaluationError, evaluate
from handcalc.keys import KeyEvent, KeyKind, Operator, parse_key, to_display_symbol
from handcalc.numeric import number_to_string, parse_number

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class Phase(Enum):
    IDLE = auto()               # no pending operator
    AWAITING_OPERAND = auto()   # operator set, next digit starts fresh
    CHAINING = auto()           # operator set, right operand being typed
    ERROR = auto()


@dataclass(frozen=True)
class RepeatState:
    """Operator and right operand of the last completed "="."""

    operator: Operator
    operand: str


@dataclass(frozen=True)
class CalculatorState:
    buffer: str = "0"
    accumulator: str | None = None
    operator: Operator | None = None
    awaiting_next: bool = False
    repeat: RepeatState | None = None

    @property
    def is_error(self) -> bool:
        return self.buffer == ERROR_TEXT

    @property
    def phase(self) -> Phase:
        if self.is_error:
            return Phase.ERROR
        if self.operator is None:
            return Phase.IDLE
        if self.awaiting_next:
            return Phase.AWAITING_OPERAND
        return Phase.CHAINING


INITIAL_STATE = CalculatorState()


@dataclass(frozen=True)
class Readout:
    """What the display shows after an event."""

    display: str
    pending_operator: str | None = None


def readout(state: CalculatorState) -> Readout:
    glyph = to_display_symbol(state.operator) if state.operator is not None else None
    return Readout(display=format_display(state.buffer), pending_operator=glyph)


def _fail(state: CalculatorState, error: EvaluationError, *, keep_repeat: bool = False) -> CalculatorState:
    logger.info("evaluation failed: %s (%s)", error.reason.name, error.detail)
    return replace(
        state,
        buffer=ERROR_TEXT,
        accumulator=None,
        operator=None,
        awaiting_next=False,
        repeat=state.repeat if keep_repeat else None,
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def _clear_all(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    return INITIAL_STATE                                          # CLEAR-ALL


def _clear_entry(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    return replace(state, buffer="0", awaiting_next=False)        # CLEAR-ENTRY


def _backspace(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    if state.awaiting_next:                                       # BS-AWAITING
        return _clear_entry(state, event)
    if len(state.buffer) <= 1:                                    # BS-SHORT
        return replace(state, buffer="0")
    remainder = state.buffer[:-1]
    if remainder == "-":                                          # BS-BARE-SIGN
        return replace(state, buffer="0")
    return replace(state, buffer=remainder)                       # BS-DROP


def _enter(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    """Digit and decimal-point entry."""
    key = event.digit if event.kind == KeyKind.DIGIT else "."

    if state.awaiting_next:                                       # ENTRY-FRESH
        return replace(state, buffer="0." if key == "." else key, awaiting_next=False)

    buffer = state.buffer
    if key == ".":
        if "." in buffer:                                         # ENTRY-SECOND-POINT
            return state
        return replace(state, buffer=buffer + ".")                # ENTRY-POINT

    if buffer == "0":                                             # ENTRY-REPLACE-ZERO
        return replace(state, buffer=key)
    if buffer == "-0":                                            # ENTRY-NEGATIVE-ZERO
        return replace(state, buffer="-" + key)
    return replace(state, buffer=buffer + key)                    # ENTRY-APPEND


def _toggle_sign(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    if state.awaiting_next:                                       # SIGN-FRESH
        return replace(state, buffer="-0", awaiting_next=False)
    buffer = state.buffer
    if buffer.startswith("-"):                                    # SIGN-DROP
        return replace(state, buffer=buffer[1:] or "0")
    if buffer == "0":                                             # SIGN-ZERO
        return replace(state, buffer="-0")
    return replace(state, buffer="-" + buffer)                    # SIGN-PREFIX


def _percent(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    num = parse_number(state.buffer)
    if num is None:                                               # PCT-INVALID
        return replace(state, buffer=ERROR_TEXT, awaiting_next=False)
    # Plain conversion; display rounding is not applied to the new entry.
    return replace(state, buffer=number_to_string(num / 100), awaiting_next=False)  # PCT


def _apply_operator(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    next_op = event.operator

    if state.awaiting_next:                                       # OP-REPLACE
        return replace(state, operator=next_op)

    if state.accumulator is None or state.operator is None:      # OP-FIRST
        return replace(
            state,
            accumulator=state.buffer,
            operator=next_op,
            awaiting_next=True,
            repeat=None,
        )

    result = evaluate(state.accumulator, state.operator, state.buffer)
    if isinstance(result, EvaluationError):                       # OP-CHAIN-ERROR
        return _fail(state, result)

    return replace(                                               # OP-CHAIN
        state,
        buffer=result,
        accumulator=result,
        operator=next_op,
        awaiting_next=True,
        repeat=None,
    )


def _equals(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    repeat = state.repeat
    if (state.operator is None or state.awaiting_next) and repeat is not None:
        base = state.accumulator if state.accumulator is not None else state.buffer
        result = evaluate(base, repeat.operator, repeat.operand)
        if isinstance(result, EvaluationError):                   # EQ-REPEAT-ERROR
            return _fail(state, result, keep_repeat=True)
        return replace(                                           # EQ-REPEAT
            state,
            buffer=result,
            accumulator=result,
            awaiting_next=True,
        )

    if state.accumulator is None or state.operator is None:      # EQ-NOTHING
        return state

    result = evaluate(state.accumulator, state.operator, state.buffer)
    if isinstance(result, EvaluationError):                       # EQ-ERROR
        return _fail(state, result)

    return replace(                                               # EQ-COMPLETE
        state,
        buffer=result,
        accumulator=result,
        operator=None,
        awaiting_next=True,
        repeat=RepeatState(state.operator, state.buffer),
    )


_HANDLERS: dict[KeyKind, Callable[[CalculatorState, KeyEvent], CalculatorState]] = {
    KeyKind.CLEAR_ALL: _clear_all,
    KeyKind.CLEAR_ENTRY: _clear_entry,
    KeyKind.BACKSPACE: _backspace,
    KeyKind.DIGIT: _enter,
    KeyKind.DECIMAL_POINT: _enter,
    KeyKind.TOGGLE_SIGN: _toggle_sign,
    KeyKind.PERCENT: _percent,
    KeyKind.OPERATOR: _apply_operator,
    KeyKind.EQUALS: _equals,
}

# Only these kinds leave the error state.
_ERROR_EXITS = frozenset({KeyKind.CLEAR_ALL, KeyKind.CLEAR_ENTRY})


def transition(state: CalculatorState, event: KeyEvent) -> CalculatorState:
    """Return the state that follows ``state`` after ``event``."""
    if state.is_error and event.kind not in _ERROR_EXITS:        # ERROR-LOCKED
        return state
    return _HANDLERS[event.kind](state, event)


def run(events: Iterable[KeyEvent], state: CalculatorState = INITIAL_STATE) -> CalculatorState:
    """Fold a sequence of events into a final state."""
    for event in events:
        state = transition(state, event)
    return state


# ---------------------------------------------------------------------------
# Holder
# ---------------------------------------------------------------------------

class Calculator:
    """Keeps the current state and applies events one at a time.

    Not safe for concurrent use; callers serialise key events.
    """

    def __init__(self, state: CalculatorState = INITIAL_STATE) -> None:
        self._state = state

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def readout(self) -> Readout:
        return readout(self._state)

    def handle_key(self, event: KeyEvent) -> Readout:
        before = self._state
        self._state = transition(before, event)
        logger.debug("key %s: %s -> %s", event.label, before, self._state)
        return readout(self._state)

    def press(self, label: str) -> Readout:
        """Handle a symbolic key label such as "7", "×" or "AC"."""
        return self.handle_key(parse_key(label))

    def press_all(self, labels: Iterable[str]) -> Readout:
        events = [parse_key(label) for label in labels]
        for event in events:
            self.handle_key(event)
        return self.readout

    def reset(self) -> None:
        self._state = INITIAL_STATE
