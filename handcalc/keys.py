"""Key vocabulary for the calculator.

Two layers live here:

- the operator lookup, a bidirectional map between the four display
  glyphs on the keypad and the internal operator tokens;
- the closed ``KeyEvent`` variant the state machine consumes, plus
  ``parse_key`` for turning a symbolic key label into an event.

Symbolic labels
---------------
"0".."9"  digits            "."    decimal point
"+" "−"   add / subtract    "×" "÷" multiply / divide
"="       equals            "AC"   clear all
"C"       clear entry       "⌫"    backspace
"+/-"     toggle sign       "%"    percent
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

class Operator(Enum):
    """Internal operator tokens."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


_GLYPH_TO_OPERATOR: dict[str, Operator] = {
    "+": Operator.ADD,
    "−": Operator.SUBTRACT,
    "×": Operator.MULTIPLY,
    "÷": Operator.DIVIDE,
}

_OPERATOR_TO_GLYPH: dict[Operator, str] = {
    op: glyph for glyph, op in _GLYPH_TO_OPERATOR.items()
}

OPERATOR_GLYPHS: tuple[str, ...] = tuple(_GLYPH_TO_OPERATOR)


def to_internal(symbol: str) -> Operator:
    """Map a keypad glyph to its operator token."""
    return _GLYPH_TO_OPERATOR[symbol]


def to_display_symbol(token: Operator) -> str:
    """Map an operator token to the glyph shown on the keypad."""
    return _OPERATOR_TO_GLYPH[token]


# ---------------------------------------------------------------------------
# Key events
# ---------------------------------------------------------------------------

class KeyKind(Enum):
    DIGIT = auto()
    DECIMAL_POINT = auto()
    OPERATOR = auto()
    EQUALS = auto()
    CLEAR_ALL = auto()
    CLEAR_ENTRY = auto()
    BACKSPACE = auto()
    TOGGLE_SIGN = auto()
    PERCENT = auto()


DIGITS = "0123456789"

# Labels for the payload-free kinds.
_PLAIN_LABELS: dict[KeyKind, str] = {
    KeyKind.DECIMAL_POINT: ".",
    KeyKind.EQUALS: "=",
    KeyKind.CLEAR_ALL: "AC",
    KeyKind.CLEAR_ENTRY: "C",
    KeyKind.BACKSPACE: "⌫",
    KeyKind.TOGGLE_SIGN: "+/-",
    KeyKind.PERCENT: "%",
}

_LABEL_TO_PLAIN_KIND: dict[str, KeyKind] = {
    label: kind for kind, label in _PLAIN_LABELS.items()
}


class UnknownKeyError(ValueError):
    """Raised when a label is not part of the symbolic key vocabulary."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Unknown key: {label!r}")


@dataclass(frozen=True)
class KeyEvent:
    """One key press.

    ``digit`` is set only for ``KeyKind.DIGIT`` and ``operator`` only for
    ``KeyKind.OPERATOR``; every other kind carries no payload.
    """

    kind: KeyKind
    digit: str | None = None
    operator: Operator | None = None

    def __post_init__(self) -> None:
        if self.kind == KeyKind.DIGIT:
            if self.digit is None or len(self.digit) != 1 or self.digit not in DIGITS:
                raise ValueError(f"Digit key needs a single digit, got {self.digit!r}")
        elif self.digit is not None:
            raise ValueError(f"{self.kind.name} key takes no digit")

        if self.kind == KeyKind.OPERATOR:
            if not isinstance(self.operator, Operator):
                raise ValueError(f"Operator key needs an Operator, got {self.operator!r}")
        elif self.operator is not None:
            raise ValueError(f"{self.kind.name} key takes no operator")

    @classmethod
    def of_digit(cls, digit: str) -> KeyEvent:
        return cls(KeyKind.DIGIT, digit=digit)

    @classmethod
    def of_operator(cls, operator: Operator) -> KeyEvent:
        return cls(KeyKind.OPERATOR, operator=operator)

    @property
    def label(self) -> str:
        """The symbolic label that produces this event."""
        if self.kind == KeyKind.DIGIT:
            return self.digit  # type: ignore[return-value]
        if self.kind == KeyKind.OPERATOR:
            return to_display_symbol(self.operator)  # type: ignore[arg-type]
        return _PLAIN_LABELS[self.kind]

    def __str__(self) -> str:
        return self.label


DECIMAL_POINT = KeyEvent(KeyKind.DECIMAL_POINT)
EQUALS = KeyEvent(KeyKind.EQUALS)
CLEAR_ALL = KeyEvent(KeyKind.CLEAR_ALL)
CLEAR_ENTRY = KeyEvent(KeyKind.CLEAR_ENTRY)
BACKSPACE = KeyEvent(KeyKind.BACKSPACE)
TOGGLE_SIGN = KeyEvent(KeyKind.TOGGLE_SIGN)
PERCENT = KeyEvent(KeyKind.PERCENT)

KEY_LABELS: tuple[str, ...] = (
    tuple(DIGITS) + OPERATOR_GLYPHS + tuple(_LABEL_TO_PLAIN_KIND)
)


def parse_key(label: str) -> KeyEvent:
    """Turn a symbolic key label into a ``KeyEvent``.

    Raises ``UnknownKeyError`` for labels outside the vocabulary.
    """
    if len(label) == 1 and label in DIGITS:
        return KeyEvent.of_digit(label)
    if label in _GLYPH_TO_OPERATOR:
        return KeyEvent.of_operator(_GLYPH_TO_OPERATOR[label])
    try:
        return KeyEvent(_LABEL_TO_PLAIN_KIND[label])
    except KeyError:
        raise UnknownKeyError(label) from None
