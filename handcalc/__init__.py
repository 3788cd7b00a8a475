"""Handheld-style calculator core: key events in, display strings out."""
from __future__ import annotations

from handcalc.calculator import (
    INITIAL_STATE,
    Calculator,
    CalculatorState,
    Phase,
    Readout,
    RepeatState,
    readout,
    transition,
)
from handcalc.display import format_display
from handcalc.evaluator import ErrorReason, EvaluationError, evaluate
from handcalc.keys import KeyEvent, KeyKind, Operator, UnknownKeyError, parse_key, to_display_symbol, to_internal

__all__ = [
    "INITIAL_STATE",
    "Calculator",
    "CalculatorState",
    "ErrorReason",
    "EvaluationError",
    "KeyEvent",
    "KeyKind",
    "Operator",
    "Phase",
    "Readout",
    "RepeatState",
    "UnknownKeyError",
    "evaluate",
    "format_display",
    "parse_key",
    "readout",
    "to_display_symbol",
    "to_internal",
    "transition",
]
