"""Conversions between entry text and floats.

Operands travel through the calculator as text and only become numbers
at the moment they are evaluated or formatted.
"""
from __future__ import annotations

import math
from decimal import Decimal


def parse_number(text: str | float) -> float | None:
    """Parse ``text`` as a double; return None unless the result is finite."""
    if isinstance(text, float):
        value = text
    else:
        try:
            value = float(text)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(value):
        return None
    return value


def number_to_string(value: float) -> str:
    """Render ``value`` as the shortest decimal that round-trips.

    Integral values have no fractional part and negative zero is "0".
    Magnitudes in [1e-7, 1e21) use plain decimal notation, anything
    outside that range uses exponential notation such as "1e-7" or
    "1.5e+21".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)

    k = len(digits)
    n = k + exponent            # position of the decimal point

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * (-n) + digits

    e = n - 1
    mantissa = digits[0] if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
