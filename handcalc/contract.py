"""Machine-readable contract for the calculator core.

Three catalogues that the conformance tests iterate over:

Property   a predicate that must hold for the evaluator or the formatter
           for every input a strategy produces
Scenario   a key sequence and the displays it must produce, one per key
BranchSpec every decision point in ``handcalc.calculator`` that the
           white-box tests must exercise

Adding an entry here extends the test suite without writing a new test.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from handcalc.display import ERROR_TEXT, MAX_DISPLAY_LEN, format_display
from handcalc.evaluator import ErrorReason, EvaluationError, evaluate
from handcalc.keys import Operator
from handcalc.numeric import parse_number


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Property:
    name: str
    description: str
    arity: int          # how many free float inputs the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class Scenario:
    name: str
    keys: tuple[str, ...]
    displays: tuple[str, ...]   # expected display after each key

    def __post_init__(self) -> None:
        if len(self.keys) != len(self.displays):
            raise ValueError(f"{self.name}: {len(self.keys)} keys but {len(self.displays)} displays")


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the state machine that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which key handler it belongs to


# ---------------------------------------------------------------------------
# Helpers used inside the predicates
# ---------------------------------------------------------------------------

def _text(x: float) -> str:
    return repr(x)


def _close(result: str | EvaluationError, expected: float) -> bool:
    if isinstance(result, EvaluationError):
        return False
    value = float(result)
    if math.isinf(expected):
        return value == expected
    return value == expected or math.isclose(value, expected, rel_tol=1e-15)


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------

EVALUATOR_PROPERTIES: list[Property] = [
    Property(
        "add_matches_float", "evaluate(a, +, b) == a + b", 2,
        lambda a, b: _close(evaluate(_text(a), Operator.ADD, _text(b)), a + b),
    ),
    Property(
        "subtract_matches_float", "evaluate(a, -, b) == a - b", 2,
        lambda a, b: _close(evaluate(_text(a), Operator.SUBTRACT, _text(b)), a - b),
    ),
    Property(
        "multiply_matches_float", "evaluate(a, *, b) == a * b", 2,
        lambda a, b: _close(evaluate(_text(a), Operator.MULTIPLY, _text(b)), a * b),
    ),
    Property(
        "divide_matches_float", "evaluate(a, /, b) == a / b for b != 0", 2,
        lambda a, b: b == 0 or _close(evaluate(_text(a), Operator.DIVIDE, _text(b)), a / b),
    ),
    Property(
        "add_commutes", "evaluate(a, +, b) == evaluate(b, +, a)", 2,
        lambda a, b: (
            evaluate(_text(a), Operator.ADD, _text(b))
            == evaluate(_text(b), Operator.ADD, _text(a))
        ),
    ),
    Property(
        "deterministic", "the same inputs always give the same outcome", 2,
        lambda a, b: all(
            evaluate(_text(a), op, _text(b)) == evaluate(_text(a), op, _text(b))
            for op in Operator
        ),
    ),
    Property(
        "divide_by_zero", "evaluate(a, /, 0) is a division-by-zero error", 1,
        lambda a: (
            isinstance(evaluate(_text(a), Operator.DIVIDE, "0"), EvaluationError)
            and evaluate(_text(a), Operator.DIVIDE, "0").reason == ErrorReason.DIVISION_BY_ZERO
        ),
    ),
    Property(
        "result_reparses", "a successful result parses back as a number", 2,
        lambda a, b: all(
            isinstance(r, EvaluationError) or r in ("Infinity", "-Infinity") or parse_number(r) is not None
            for r in (evaluate(_text(a), op, _text(b)) for op in Operator)
        ),
    ),
]


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

def _is_exponential(out: str) -> bool:
    return "e" in out


FORMATTER_PROPERTIES: list[Property] = [
    Property(
        "bounded_width", "non-exponential output is at most 16 characters", 1,
        lambda x: _is_exponential(format_display(x)) or len(format_display(x)) <= MAX_DISPLAY_LEN,
    ),
    Property(
        "never_error_for_finite", "finite values never format as Error", 1,
        lambda x: format_display(x) != ERROR_TEXT,
    ),
    Property(
        "exponential_outside_range", "exponential form exactly for tiny or huge magnitudes", 1,
        lambda x: _is_exponential(format_display(x)) == ((x != 0 and abs(x) < 1e-6) or abs(x) >= 1e10),
    ),
    Property(
        "no_trailing_zeros", "fixed output has no trailing fractional zeros", 1,
        lambda x: (
            _is_exponential(format_display(x))
            or "." not in format_display(x)
            or len(format_display(x)) == MAX_DISPLAY_LEN
            or not format_display(x).endswith(("0", "."))
        ),
    ),
    Property(
        "string_and_float_agree", "a number and its text format identically", 1,
        lambda x: format_display(x) == format_display(repr(x)),
    ),
]


# ---------------------------------------------------------------------------
# Key scenarios
# ---------------------------------------------------------------------------

SCENARIOS: list[Scenario] = [
    Scenario(
        "no_precedence",
        ("2", "+", "3", "×", "4", "="),
        ("2", "2", "3", "5", "4", "20"),
    ),
    Scenario(
        "repeat_equals",
        ("2", "+", "3", "=", "=", "="),
        ("2", "2", "3", "5", "8", "11"),
    ),
    Scenario(
        "divide_by_zero_locks",
        ("5", "÷", "0", "=", "7", "+", "=", "C", "7"),
        ("5", "5", "0", ERROR_TEXT, ERROR_TEXT, ERROR_TEXT, ERROR_TEXT, "0", "7"),
    ),
    Scenario(
        "operator_replacement",
        ("2", "+", "×", "3", "="),
        ("2", "2", "2", "3", "6"),
    ),
    Scenario(
        "sign_toggle_on_zero",
        ("+/-", "5"),
        ("0", "-5"),
    ),
    Scenario(
        "decimal_entry",
        (".", "5", ".", "2"),
        ("0.", "0.5", "0.5", "0.52"),
    ),
    Scenario(
        "percent",
        ("5", "0", "%"),
        ("5", "50", "0.5"),
    ),
    Scenario(
        "backspace",
        ("1", "2", "3", "⌫", "⌫", "⌫"),
        ("1", "12", "123", "12", "1", "0"),
    ),
    Scenario(
        "floating_point_display",
        ("0", ".", "1", "+", ".", "2", "="),
        ("0", "0.", "0.1", "0.1", "0.", "0.2", "0.3"),
    ),
    Scenario(
        "large_result_exponential",
        ("9", "9", "9", "9", "9", "9", "×", "=", "="),
        ("9", "99", "999", "9999", "99999", "999999", "999999", "9.999980e+11", "9.999970e+17"),
    ),
]


# ---------------------------------------------------------------------------
# Branches
# ---------------------------------------------------------------------------

BRANCHES: list[BranchSpec] = [
    BranchSpec("ERROR-LOCKED", "Non-clear key ignored in error state", "buffer == 'Error' and kind not in {AC, C}", "transition"),
    BranchSpec("CLEAR-ALL", "Every field back to its initial value", "kind == AC", "clear_all"),
    BranchSpec("CLEAR-ENTRY", "Buffer reset, pending operation kept", "kind == C", "clear_entry"),
    BranchSpec("BS-AWAITING", "Backspace while awaiting an operand clears the entry", "awaiting_next", "backspace"),
    BranchSpec("BS-SHORT", "Backspace on a one-character buffer", "len(buffer) <= 1", "backspace"),
    BranchSpec("BS-BARE-SIGN", "Backspace leaving only '-' collapses to '0'", "buffer[:-1] == '-'", "backspace"),
    BranchSpec("BS-DROP", "Backspace drops the last character", "otherwise", "backspace"),
    BranchSpec("ENTRY-FRESH", "Entry after an operator starts a new buffer", "awaiting_next", "enter"),
    BranchSpec("ENTRY-SECOND-POINT", "Second decimal point ignored", "key == '.' and '.' in buffer", "enter"),
    BranchSpec("ENTRY-POINT", "Decimal point appended", "key == '.'", "enter"),
    BranchSpec("ENTRY-REPLACE-ZERO", "Digit replaces a lone zero", "buffer == '0'", "enter"),
    BranchSpec("ENTRY-NEGATIVE-ZERO", "Digit replaces the zero of '-0'", "buffer == '-0'", "enter"),
    BranchSpec("ENTRY-APPEND", "Digit appended", "otherwise", "enter"),
    BranchSpec("SIGN-FRESH", "Sign toggle after an operator starts '-0'", "awaiting_next", "toggle_sign"),
    BranchSpec("SIGN-DROP", "Leading minus removed", "buffer.startswith('-')", "toggle_sign"),
    BranchSpec("SIGN-ZERO", "'0' becomes '-0'", "buffer == '0'", "toggle_sign"),
    BranchSpec("SIGN-PREFIX", "Minus prefixed", "otherwise", "toggle_sign"),
    BranchSpec("PCT", "Buffer divided by 100", "buffer parses", "percent"),
    BranchSpec("PCT-INVALID", "Unparseable buffer becomes Error", "buffer does not parse", "percent"),
    BranchSpec("OP-REPLACE", "Consecutive operator replaces the pending one", "awaiting_next", "apply_operator"),
    BranchSpec("OP-FIRST", "First operator stores the accumulator", "accumulator is None or operator is None", "apply_operator"),
    BranchSpec("OP-CHAIN", "Pending operation evaluated, new operator pending", "evaluate succeeds", "apply_operator"),
    BranchSpec("OP-CHAIN-ERROR", "Pending operation fails", "evaluate fails", "apply_operator"),
    BranchSpec("EQ-REPEAT", "Repeat the last '=' operation", "(operator is None or awaiting_next) and repeat", "equals"),
    BranchSpec("EQ-REPEAT-ERROR", "Repeated operation fails", "repeat evaluate fails", "equals"),
    BranchSpec("EQ-NOTHING", "Nothing pending, '=' ignored", "accumulator is None or operator is None", "equals"),
    BranchSpec("EQ-COMPLETE", "Pending operation evaluated, repeat memory stored", "evaluate succeeds", "equals"),
    BranchSpec("EQ-ERROR", "Pending operation fails", "evaluate fails", "equals"),
]
