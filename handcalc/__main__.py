"""Drive the calculator from the command line.

Usage::

    python -m handcalc 2 + 3 × 4 =
    python -m handcalc --verbose 5 ÷ 0 =

Each argument is one symbolic key label.  ASCII stand-ins from the
keyboard ("*", "/", "-", "Enter", "Escape", "Backspace") are accepted
too.  The display is printed after every key, with the pending
operator in brackets.
"""
from __future__ import annotations

import logging
import sys

from handcalc.calculator import Calculator
from handcalc.keyboard import translate
from handcalc.keys import KEY_LABELS, UnknownKeyError


def _label(arg: str) -> str:
    if arg in KEY_LABELS:
        return arg
    label = translate(arg)
    if label is None:
        raise UnknownKeyError(arg)
    return label


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if "--verbose" in args:
        args.remove("--verbose")
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args:
        print(__doc__.strip())
        return 2

    try:
        labels = [_label(arg) for arg in args]
    except UnknownKeyError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    calc = Calculator()
    for label in labels:
        view = calc.press(label)
        pending = f"  [{view.pending_operator}]" if view.pending_operator else ""
        print(f"{label:>4}  {view.display}{pending}")

    return 1 if calc.state.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
