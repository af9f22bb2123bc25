"""Input normalization shared by every codec.

Query string parsers hand decoders one of three shapes: nothing, a single
string, or a list of strings for a repeated key.  These helpers reduce that
union to the one shape each decoder works with, and provide the default
value-to-text and text-to-number conversions the wire format relies on.
"""

import math
import re
from typing import Any

from querycodec._internal.types import UNDEFINED, EncodedInput

_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_RADIX_RE = re.compile(r"0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))")
_INFINITIES: dict[str, float] = {
    "Infinity": math.inf,
    "+Infinity": math.inf,
    "-Infinity": -math.inf,
}


def get_encoded_value(input: EncodedInput, allow_empty_string: bool = False) -> Any:
    """Reduce *input* to a single string, ``None`` or ``UNDEFINED``.

    Only the first entry of a list is considered.  Empty strings become
    ``None`` unless *allow_empty_string* is set; an empty list is always
    ``None``.
    """
    if input is None or input is UNDEFINED:
        return input

    if isinstance(input, str):
        if input == "" and not allow_empty_string:
            return None
        return input

    # '' or []
    if len(input) == 0:
        return None

    first = input[0]
    if first is None or first is UNDEFINED:
        return first
    if first == "" and not allow_empty_string:
        return None
    return first


def get_encoded_value_array(input: EncodedInput) -> Any:
    """Reduce *input* to a list of entries, ``None`` or ``UNDEFINED``."""
    if input is None or input is UNDEFINED:
        return input
    if isinstance(input, str):
        return [] if input == "" else [input]
    return list(input)


def format_number(num: Any) -> str:
    """Render a number the way a browser would put it in a URL.

    Integral floats drop their fraction (``3.0`` -> ``"3"``); non-finite
    values become ``NaN`` / ``Infinity`` / ``-Infinity``.
    """
    if isinstance(num, bool):
        return str(int(num))
    if isinstance(num, int):
        return str(num)
    if isinstance(num, float):
        if math.isnan(num):
            return "NaN"
        if math.isinf(num):
            return "Infinity" if num > 0 else "-Infinity"
        if num.is_integer() and abs(num) < 1e21:
            return str(int(num))
        return repr(num)
    return str(num)


def to_text(value: Any) -> str:
    """Default conversion of any value to its query string text."""
    if value is None or value is UNDEFINED:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    return str(value)


def to_number(text: str) -> int | float:
    """Coerce *text* to a number, returning ``nan`` when it is not numeric.

    Blank text is ``0``.  Integer literals stay ``int``; decimal and
    exponent forms become ``float``.  ``0x``/``0o``/``0b`` prefixes and
    signed ``Infinity`` are recognized.
    """
    stripped = str(text).strip()
    if not stripped:
        return 0

    if _INTEGER_RE.fullmatch(stripped):
        try:
            return int(stripped)
        except ValueError:
            # more digits than int() will parse
            return float(stripped)

    if _DECIMAL_RE.fullmatch(stripped):
        return float(stripped)

    match = _RADIX_RE.fullmatch(stripped)
    if match is not None:
        if match["hex"] is not None:
            return int(match["hex"], 16)
        if match["oct"] is not None:
            return int(match["oct"], 8)
        return int(match["bin"], 2)

    return _INFINITIES.get(stripped, math.nan)
