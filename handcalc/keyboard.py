"""Physical keyboard translation.

Maps key names as reported by a keyboard (``"Enter"``, ``"Escape"``,
``"*"`` ...) onto the symbolic labels understood by ``parse_key``.  Keys
with no calculator meaning translate to None and are ignored by callers.
"""
from __future__ import annotations

_KEYBOARD_TO_LABEL: dict[str, str] = {
    ".": ".",
    "+": "+",
    "-": "−",
    "*": "×",
    "/": "÷",
    "Enter": "=",
    "=": "=",
    "Backspace": "⌫",
    "Escape": "AC",
    "%": "%",
}


def translate(key: str) -> str | None:
    """Return the symbolic label for a keyboard key, or None."""
    if len(key) == 1 and "0" <= key <= "9":
        return key
    return _KEYBOARD_TO_LABEL.get(key)
