"""Codec configuration.

QueryConfig is a frozen dataclass -- immutable after creation, shared
freely between config maps and threads.
"""

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class StringifyOptions:
    """How an encoded query becomes a search string.

    Override what you need::

        options = StringifyOptions(skip_none=True)
    """

    sort: bool = True  # Emit keys in sorted order
    skip_none: bool = False  # Drop keys whose value is None instead of emitting a bare key
    skip_empty_string: bool = False
    # Post-processing hook applied to the search string (without the leading "?")
    transform_search_string: Callable[[str], str] | None = None


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Configuration carried by a ``ParamConfigMap``. Immutable after creation.

    ``debug`` turns on the advisory warnings for parameters that have no
    configured codec::

        config = QueryConfig(debug=True)
    """

    debug: bool = False
    stringify: StringifyOptions = field(default_factory=StringifyOptions)
