"""Query string tokenizing -- the boundary between search strings and encoded queries.

``parse_query`` turns ``a=1&b=2&b=3`` into ``{"a": "1", "b": ["2", "3"]}``
and ``stringify_query`` does the reverse.  Neither coerces types: all type
conversion belongs to the codecs.  Percent-encoding is handled by stdlib
``urllib.parse``.

``QueryParams`` wraps a raw query string as an immutable mapping that can
be handed straight to ``decode_query_params``.
"""

from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import quote, unquote_plus

from querycodec._internal.normalize import to_text
from querycodec._internal.types import UNDEFINED, EncodedInput, EncodedOutput


def parse_query(search: str, *, sort: bool = True) -> dict[str, EncodedInput]:
    """Parse a search string into an encoded query.

    A leading ``?`` is ignored.  A key without ``=`` maps to ``None``; a
    repeated key maps to a list of its values in order.
    """
    text = search.strip().lstrip("?#&")
    parsed: dict[str, Any] = {}

    for part in text.split("&"):
        if not part:
            continue
        raw_key, sep, raw_value = part.partition("=")
        key = unquote_plus(raw_key)
        value = unquote_plus(raw_value) if sep else None

        if key not in parsed:
            parsed[key] = value
        elif isinstance(parsed[key], list):
            parsed[key].append(value)
        else:
            parsed[key] = [parsed[key], value]

    if sort:
        return dict(sorted(parsed.items()))
    return parsed


def _format_pair(key: str, value: Any) -> str:
    if value is None:
        return quote(key, safe="")
    text = value if isinstance(value, str) else to_text(value)
    return f"{quote(key, safe='')}={quote(text, safe='')}"


def _skipped(value: Any, skip_none: bool, skip_empty_string: bool) -> bool:
    if value is UNDEFINED:
        return True
    if value is None:
        return skip_none
    return skip_empty_string and value == ""


def stringify_query(
    encoded_query: Mapping[str, EncodedOutput],
    *,
    sort: bool = True,
    skip_none: bool = False,
    skip_empty_string: bool = False,
) -> str:
    """Build a search string (without ``?``) from an encoded query.

    ``UNDEFINED`` values are left out, ``None`` becomes a bare key, and a
    list becomes one repeated key per entry.  Other scalars (numbers,
    booleans) are written as their text.
    """
    keys = sorted(encoded_query) if sort else list(encoded_query)
    pairs: list[str] = []

    for key in keys:
        value = encoded_query[key]
        if _skipped(value, skip_none, skip_empty_string):
            continue
        if not isinstance(value, (list, tuple)):
            pairs.append(_format_pair(key, value))
            continue
        pairs.extend(
            _format_pair(key, item)
            for item in value
            if not _skipped(item, skip_none, skip_empty_string)
        )

    return "&".join(pairs)


class QueryParams(Mapping[str, EncodedInput]):
    """Immutable encoded query parsed from a raw query string.

    Attributes:
        _data: Parsed query as field name -> string, list of strings, or None.
        _raw: Raw query string.

    ``__getitem__`` returns a string for single keys and a list for
    repeated keys, the shape every decoder accepts.
    ``get_list`` always returns a list.
    """

    _data: dict[str, EncodedInput]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        raw = query_string.decode("latin-1") if isinstance(query_string, bytes) else query_string
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_data", parse_query(raw, sort=False))

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> QueryParams:
        """Build from an ASGI scope's ``query_string``."""
        return cls(scope.get("query_string", b""))

    def __getitem__(self, key: str) -> EncodedInput:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    @property
    def raw(self) -> str:
        return self._raw

    def get_list(self, key: str) -> list[str | None]:
        """Return all values for *key*."""
        if key not in self._data:
            return []
        value = self._data[key]
        if isinstance(value, list):
            return list(value)
        return [value]

