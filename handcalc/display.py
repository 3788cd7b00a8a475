"""Display formatting.

``format_display`` turns either the raw entry buffer or a computed value
into the string shown on the calculator's display.  Raw entries that are
not yet numbers ("-", "12.") are passed through so the user sees what
they typed; everything else is parsed and rendered with bounded width.
"""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from handcalc.evaluator import EvaluationError
from handcalc.numeric import parse_number

ERROR_TEXT = "Error"

MAX_DISPLAY_LEN = 16
FIXED_DIGITS = 10
EXPONENT_DIGITS = 6

# Nonzero magnitudes below SMALL_LIMIT or at/above LARGE_LIMIT are shown
# in exponential form.
SMALL_LIMIT = 1e-6
LARGE_LIMIT = 1e10

_TRAILING_ZEROS = re.compile(r"\.?0+$")


def to_fixed(value: float, digits: int = FIXED_DIGITS) -> str:
    """Fixed-point rendering, rounding half away from zero."""
    if value == 0:
        value = 0.0
    q = Decimal(value).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    return f"{q:f}"


def to_exponential(value: float, digits: int = EXPONENT_DIGITS) -> str:
    """Exponential rendering with an unpadded, signed exponent.

    ``to_exponential(12345678901)`` is "1.234568e+10".
    """
    d = Decimal(value)
    exponent = d.adjusted() if value != 0 else 0
    q = d.quantize(Decimal(1).scaleb(exponent - digits), rounding=ROUND_HALF_UP)
    if q.adjusted() > exponent:
        # 9.9999995 rounded up to 10.000000
        exponent += 1
        q = q.quantize(Decimal(1).scaleb(exponent - digits))

    coefficient = "".join(str(c) for c in q.as_tuple().digits).rjust(digits + 1, "0")
    mantissa = coefficient[0] + ("." + coefficient[1:] if digits else "")
    sign = "-" if value < 0 else ""
    return f"{sign}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"


def format_display(value: str | float | EvaluationError | None) -> str:
    """Render a buffer or a value for the display."""
    if isinstance(value, EvaluationError) or value == ERROR_TEXT:
        return ERROR_TEXT
    if value is None or value == "":
        return "0"

    if isinstance(value, str):
        if value == "-" or value.endswith("."):
            return value
        # The buffer keeps "-0" so the next digit stays negative.
        if value == "-0":
            return "0"

    num = parse_number(value)
    if num is None:
        return ERROR_TEXT

    magnitude = abs(num)
    if (magnitude != 0 and magnitude < SMALL_LIMIT) or magnitude >= LARGE_LIMIT:
        # Already compact; never truncated.
        return to_exponential(num)

    out = _TRAILING_ZEROS.sub("", to_fixed(num), count=1)
    if len(out) > MAX_DISPLAY_LEN:
        out = out[:MAX_DISPLAY_LEN]
    return out
