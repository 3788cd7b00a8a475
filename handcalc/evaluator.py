"""Binary arithmetic over text operands.

``evaluate`` never raises for bad input.  An invalid operand or a zero
divisor produces an ``EvaluationError`` value, which the state machine
turns into the "Error" display.  No rounding happens here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

from handcalc.keys import Operator
from handcalc.numeric import number_to_string, parse_number

logger = logging.getLogger(__name__)


class ErrorReason(Enum):
    INVALID_OPERAND = auto()
    DIVISION_BY_ZERO = auto()


@dataclass(frozen=True)
class EvaluationError:
    """Outcome of a binary operation that cannot produce a number."""

    reason: ErrorReason
    detail: str = ""


def compute(x: float, op: Operator, y: float) -> float | EvaluationError:
    """Apply ``op`` to two finite floats."""
    if op == Operator.ADD:
        return x + y
    if op == Operator.SUBTRACT:
        return x - y
    if op == Operator.MULTIPLY:
        return x * y
    if y == 0:
        return EvaluationError(ErrorReason.DIVISION_BY_ZERO, "division by zero")
    return x / y


def evaluate(a: str, op: Operator, b: str) -> str | EvaluationError:
    """Evaluate ``a op b`` and return the result as entry text."""
    x = parse_number(a)
    y = parse_number(b)
    if x is None or y is None:
        bad = a if x is None else b
        logger.debug("evaluate %r %s %r: invalid operand %r", a, op.value, b, bad)
        return EvaluationError(ErrorReason.INVALID_OPERAND, f"not a finite number: {bad!r}")

    result = compute(x, op, y)
    if isinstance(result, EvaluationError):
        logger.debug("evaluate %r %s %r: %s", a, op.value, b, result.detail)
        return result

    text = number_to_string(result)
    logger.debug("evaluate %r %s %r = %s", a, op.value, b, text)
    return text
