"""Apply an encoded query to a location.

A ``Location`` is an immutable snapshot of a URL: its ``href``, its
``search`` string and the encoded ``query`` behind it.  Updates never
mutate the source; they return a new ``Location`` carrying a fresh
``key`` so routers can tell the two apart.

Usage::

    from querycodec.location import Location, update_in_location

    here = Location.from_url("https://example.com/items?page=2")
    there = update_in_location({"page": "3"}, here)
    there.href  # "https://example.com/items?page=3"
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from urllib.parse import quote, urlsplit

from querycodec._internal.types import EncodedInput, EncodedOutput
from querycodec.config import StringifyOptions
from querycodec.query import parse_query, stringify_query

# Characters that are legal in a query string and make JSON values unreadable when escaped
_JSON_SAFE_CHARS: tuple[tuple[str, str], ...] = tuple(
    (char, quote(char, safe="")) for char in '{}[],":'
)


@dataclass(frozen=True, slots=True)
class Location:
    """An immutable URL snapshot."""

    href: str = ""
    search: str = ""
    query: Mapping[str, EncodedInput] = field(default_factory=dict)
    key: str | None = None

    @classmethod
    def from_url(cls, href: str) -> Location:
        """Build a location from a full or relative URL."""
        raw_query = urlsplit(href).query
        return cls(
            href=href,
            search=f"?{raw_query}" if raw_query else "",
            query=parse_query(raw_query),
        )


def transform_search_string_json_safe(search_string: str) -> str:
    """Undo percent-encoding of ``{}[],":`` so JSON parameters stay readable.

    Meant for ``StringifyOptions(transform_search_string=...)``.
    """
    for char, code in _JSON_SAFE_CHARS:
        search_string = search_string.replace(code, char)
    return search_string


def _base_url(href: str) -> str:
    return href.split("#", 1)[0].split("?", 1)[0]


def _fresh_key() -> str:
    return str(time.time_ns() // 1_000_000)


def update_location(
    encoded_query: Mapping[str, EncodedOutput],
    location: Location,
    options: StringifyOptions | None = None,
) -> Location:
    """Return *location* with its query replaced by *encoded_query*.

    Parameters not in *encoded_query* are dropped from the URL, as are
    parameters set to ``UNDEFINED``.  Any fragment is dropped too.
    """
    options = options or StringifyOptions()
    search_string = stringify_query(
        encoded_query,
        sort=options.sort,
        skip_none=options.skip_none,
        skip_empty_string=options.skip_empty_string,
    )
    if options.transform_search_string is not None:
        search_string = options.transform_search_string(search_string)

    search = f"?{search_string}" if search_string else ""
    return replace(
        location,
        key=_fresh_key(),
        href=_base_url(location.href) + search,
        search=search,
        query=dict(encoded_query),
    )


def update_in_location(
    encoded_query_replacements: Mapping[str, EncodedOutput],
    location: Location,
    options: StringifyOptions | None = None,
) -> Location:
    """Return *location* with *encoded_query_replacements* merged into its query.

    Existing parameters are kept unless replaced.  Setting a parameter to
    ``UNDEFINED`` removes it from the URL.
    """
    current = parse_query(location.search)
    return update_location({**current, **encoded_query_replacements}, location, options)
