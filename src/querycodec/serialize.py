"""Primitive encode/decode functions for query string values.

One pair per supported value shape.  Every function is pure and total:
it never raises for inputs of the declared shapes.

Decoders accept the raw value of one query parameter -- ``UNDEFINED``,
``None``, a string, or a list of strings for a repeated key -- and apply
the same normalization:

- absent input (``None`` / ``UNDEFINED``) is returned unchanged
- a list contributes only its first entry
- an empty string is ``None``, except for the string, delimited-array and
  object decoders, which keep it

Encoders return ``None`` / ``UNDEFINED`` unchanged and otherwise produce a
string (or, for the array codecs, a list of strings emitted as repeated
keys).

Usage::

    from querycodec.serialize import decode_date, encode_delimited_array

    decode_date("2015-10")               # date(2015, 10, 1)
    encode_delimited_array(["a", "b"])   # "a_b"
"""

import json
import math
import re
from collections.abc import Collection, Mapping, Sequence
from datetime import UTC, date, datetime, time, timedelta
from email.utils import parsedate_to_datetime
from typing import Any

from querycodec._internal.normalize import (
    format_number,
    get_encoded_value,
    get_encoded_value_array,
    to_number,
    to_text,
)
from querycodec._internal.types import INVALID, UNDEFINED, EncodedInput

_DATE_ONLY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _absent(value: Any) -> bool:
    return value is None or value is UNDEFINED


def _split(text: str, separator: str) -> list[str]:
    if not separator:
        return list(text)
    return text.split(separator)


def _coerce_numeric(entries: list[Any]) -> list[int | float | None]:
    return [None if entry == "" or _absent(entry) else to_number(entry) for entry in entries]


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def encode_date(value: date | None) -> str | None:
    """Encode a date (or datetime) as ``YYYY-MM-DD`` from its own calendar fields."""
    if _absent(value):
        return value
    return f"{value.year}-{value.month:02d}-{value.day:02d}"


def decode_date(input: EncodedInput) -> date | None:
    """Decode a ``YYYY-MM-DD`` date, where month and day are optional.

    ``"2015"`` is 2015-01-01 and ``"2015-10"`` is 2015-10-01.  Components
    outside their range carry over like a calendar would (month ``13`` is
    January of the next year).  Two-digit years are in the 1900s.  Text
    that does not describe a date decodes to ``None``.

    If a list is provided, only the first entry is used.
    """
    date_string = get_encoded_value(input)
    if _absent(date_string):
        return date_string

    parts = str(date_string).split("-")
    year = to_number(parts[0])
    if len(parts) > 1:
        month = to_number(parts[1]) - 1  # zero-based from here on
        day = to_number(parts[2]) if len(parts) > 2 else 1
    else:
        # just a year
        month, day = 0, 1
    clock = [to_number(part) for part in parts[3:7]]
    return _make_date(year, month, day, *clock)


def _make_date(year: float, month: float, day: float, *clock: float) -> date | None:
    try:
        if not all(math.isfinite(value) for value in (year, month, day, *clock)):
            return None
        y, m, d = math.trunc(year), math.trunc(month), math.trunc(day)
        hours, minutes, seconds, millis = [math.trunc(v) for v in clock] + [0] * (4 - len(clock))
        if 0 <= y <= 99:
            y += 1900
        y, m = y + m // 12, m % 12
        moment = datetime(y, m + 1, 1) + timedelta(
            days=d - 1,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            milliseconds=millis,
        )
    except (ValueError, OverflowError):
        return None
    return moment.date()


def encode_date_time(value: datetime | date | None) -> str | None:
    """Encode as ISO 8601 in UTC with millisecond precision (``...T10:58:40.000Z``).

    Naive datetimes are taken as local time, plain dates as local midnight.
    A moment that falls outside the representable range once shifted to UTC
    encodes to ``None``.
    """
    if _absent(value):
        return value
    moment = value if isinstance(value, datetime) else datetime.combine(value, time())
    try:
        utc = moment.astimezone(UTC)
    except OverflowError:
        return None
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"
        f"T{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}.{utc.microsecond // 1000:03d}Z"
    )


def decode_date_time(input: EncodedInput) -> datetime | None:
    """Decode an ISO 8601 or RFC 2822 date-time.

    A bare ``YYYY-MM-DD`` is midnight UTC; a date-time without an offset
    stays naive (local).  Unparseable text decodes to ``None``.

    If a list is provided, only the first entry is used.
    """
    date_string = get_encoded_value(input)
    if _absent(date_string):
        return date_string

    text = str(date_string).strip()
    try:
        decoded = datetime.fromisoformat(text)
    except ValueError:
        pass
    else:
        if _DATE_ONLY_RE.fullmatch(text):
            return decoded.replace(tzinfo=UTC)
        return decoded

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def encode_boolean(value: bool | None) -> str | None:
    """``True`` -> ``"1"``, ``False`` -> ``"0"``."""
    if _absent(value):
        return value
    return "1" if value else "0"


def decode_boolean(input: EncodedInput) -> bool | None:
    """``"1"`` -> ``True``, ``"0"`` -> ``False``, anything else -> ``None``."""
    bool_str = get_encoded_value(input)
    if _absent(bool_str):
        return bool_str
    if bool_str == "1":
        return True
    if bool_str == "0":
        return False
    return None


def encode_number(value: int | float | None) -> str | None:
    if _absent(value):
        return value
    return format_number(value)


def decode_number(input: EncodedInput) -> int | float | None:
    """Decode a number.

    Empty text is ``None``.  Non-numeric text decodes to ``nan`` rather
    than ``None`` so callers can tell "missing" from "malformed".

    If a list is provided, only the first entry is used.
    """
    num_str = get_encoded_value(input)
    if _absent(num_str):
        return num_str
    if num_str == "":
        return None
    return to_number(num_str)


def encode_string(value: Any) -> str | None:
    if _absent(value):
        return value
    return to_text(value)


def decode_string(input: EncodedInput) -> str | None:
    """Decode a string, keeping ``""`` distinct from a missing parameter."""
    value = get_encoded_value(input, allow_empty_string=True)
    if _absent(value):
        return value
    return str(value)


encode_enum = encode_string


def decode_enum(input: EncodedInput, enum_values: Collection[str]) -> Any:
    """Decode a string that must be one of *enum_values*.

    Returns ``INVALID`` when the value is present but not allowed.
    """
    value = decode_string(input)
    if _absent(value):
        return value
    return value if value in enum_values else INVALID


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _reject_constant(name: str) -> Any:
    msg = f"Non-standard JSON constant {name!r}"
    raise ValueError(msg)


def encode_json(value: Any) -> str | None:
    """Encode anything as compact JSON.  Unknown objects are rendered with ``str``."""
    if _absent(value):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def decode_json(input: EncodedInput) -> Any:
    """Decode a JSON string.  Malformed JSON decodes to ``None``."""
    json_str = get_encoded_value(input)
    if _absent(json_str):
        return json_str
    try:
        return json.loads(json_str, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None


# ---------------------------------------------------------------------------
# Repeated-key arrays
# ---------------------------------------------------------------------------


def encode_array(values: Sequence[str | None] | None) -> Sequence[str | None] | None:
    """Arrays are emitted as repeated query keys, so they pass through unchanged."""
    return values


def decode_array(input: EncodedInput) -> list[str | None] | None:
    """Decode a repeated key (or a single value) as a list.

    ``""`` is an empty list and a single string is a one-element list.
    """
    return get_encoded_value_array(input)


def encode_numeric_array(values: Sequence[int | float | None] | None) -> list[str | None] | None:
    if _absent(values):
        return values
    return [None if _absent(value) else format_number(value) for value in values]


def decode_numeric_array(input: EncodedInput) -> list[int | float | None] | None:
    """Like :func:`decode_array`, with every entry coerced to a number.

    Empty and missing entries become ``None``; malformed ones ``nan``.
    """
    values = decode_array(input)
    if _absent(values):
        return values
    return _coerce_numeric(values)


def decode_enum_array(input: EncodedInput, enum_values: Collection[str]) -> Any:
    """Decode an array whose entries must all be in *enum_values*, else ``INVALID``."""
    values = decode_array(input)
    if _absent(values):
        return values
    return values if all(value in enum_values for value in values) else INVALID


# ---------------------------------------------------------------------------
# Delimited arrays
# ---------------------------------------------------------------------------


def encode_delimited_array(
    values: Sequence[Any] | None,
    entry_separator: str = "_",
) -> str | None:
    """Join *values* into one string, e.g. ``["a", "b"]`` -> ``"a_b"``."""
    if _absent(values):
        return values
    return entry_separator.join(to_text(value) for value in values)


def decode_delimited_array(input: EncodedInput, entry_separator: str = "_") -> list[str] | None:
    """Split one delimited string, e.g. ``"a_b"`` -> ``["a", "b"]``.

    ``""`` is an empty list.  If a list is provided, only the first entry
    is used.
    """
    array_str = get_encoded_value(input, allow_empty_string=True)
    if _absent(array_str):
        return array_str
    if array_str == "":
        return []
    return _split(str(array_str), entry_separator)


encode_delimited_numeric_array = encode_delimited_array


def decode_delimited_numeric_array(
    input: EncodedInput,
    entry_separator: str = "_",
) -> list[int | float | None] | None:
    values = decode_delimited_array(input, entry_separator)
    if _absent(values):
        return values
    return _coerce_numeric(values)


def decode_enum_delimited_array(
    input: EncodedInput,
    enum_values: Collection[str],
    entry_separator: str = "_",
) -> Any:
    values = decode_delimited_array(input, entry_separator)
    if _absent(values):
        return values
    return values if all(value in enum_values for value in values) else INVALID


# ---------------------------------------------------------------------------
# Flat objects
# ---------------------------------------------------------------------------


def encode_object(
    obj: Mapping[str, Any] | None,
    key_value_separator: str = "-",
    entry_separator: str = "_",
) -> str | None:
    """Encode a flat mapping, e.g. ``{"foo": "bar", "boo": "baz"}`` -> ``"foo-bar_boo-baz"``.

    Only flat mappings of strings or numbers survive a round trip, and
    neither keys nor values may contain the separators.
    """
    if _absent(obj):
        return obj
    if not obj:
        return ""
    return entry_separator.join(
        f"{to_text(key)}{key_value_separator}{to_text(value)}" for key, value in obj.items()
    )


def decode_object(
    input: EncodedInput,
    key_value_separator: str = "-",
    entry_separator: str = "_",
) -> dict[str, str | None] | None:
    """Decode a flat mapping, e.g. ``"foo-bar_boo-baz"`` -> ``{"foo": "bar", "boo": "baz"}``.

    Each entry is split on the first key/value separator only, so values
    may contain it.  An entry without a separator maps to ``None``.

    If a list is provided, only the first entry is used.
    """
    obj_str = get_encoded_value(input, allow_empty_string=True)
    if _absent(obj_str):
        return obj_str
    if obj_str == "":
        return {}

    obj: dict[str, str | None] = {}
    for entry in _split(str(obj_str), entry_separator):
        if key_value_separator:
            key, sep, value = entry.partition(key_value_separator)
        else:
            key, sep, value = entry, "", ""
        obj[key] = value if sep else None
    return obj


encode_numeric_object = encode_object


def decode_numeric_object(
    input: EncodedInput,
    key_value_separator: str = "-",
    entry_separator: str = "_",
) -> dict[str, int | float | None] | None:
    """Like :func:`decode_object`, with every value run through :func:`decode_number`."""
    decoded = decode_object(input, key_value_separator, entry_separator)
    if _absent(decoded):
        return decoded
    return {key: decode_number(value) for key, value in decoded.items()}
