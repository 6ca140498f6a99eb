"""Text helpers for the payload serialization.

The byte budget of an EPC payload is measured after character-to-byte
expansion. Readers of the format historically count bytes with a simple
per-code-point rule that only compares against upper bounds, so a code
point of exactly 0x80 counts as a single byte. That rule is reproduced here
as-is so that the budget matches other implementations.
"""
from decimal import Decimal
from typing import Any

MAX_PAYLOAD_BYTES = 328


def approximate_utf8_length(text: str) -> int:
    """Counts the bytes of `text` using the upper-bound per-code-point rule.

    Args:
        text (str): The text to measure.

    Returns:
        int: 1 byte for code points up to 0x80, 2 up to 0x800, 3 up to
        0x10000 and 4 above.
    """
    count = 0
    for char in text:
        code = ord(char)
        if code > 0x10000:
            count += 4
        elif code > 0x800:
            count += 3
        elif code > 0x80:
            count += 2
        else:
            count += 1
    return count


def format_amount(value: Any) -> str:
    """Renders an amount the way it appears after the "EUR" prefix.

    Floats use their shortest round-trip representation, so `12.3` stays
    `12.3` and integral values drop the fractional part.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def format_field(value: Any) -> str:
    """Renders a plain field; integers (including IntEnum members) as digits."""
    if value is None:
        return ""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(int(value))
    return str(value)
