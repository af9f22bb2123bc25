"""Param-map engine -- bulk encode/decode of a query through per-key codecs.

A param config map maps each query parameter name to a ``Codec``.  The two
directions deliberately cover different key sets:

- **encode** touches only the keys the caller supplied, so it never invents
  query string entries for fields nobody asked to set
- **decode** covers every configured key plus any unconfigured key found in
  the query, so every field the application knows about is present in the
  result (decoded from ``UNDEFINED`` when the URL omits it)

Unconfigured keys fall back to plain text on encode and pass through
untouched on decode.  Each fallback reports an advisory message to the
diagnostic sink, if one is given.  Diagnostics never change the result and
never raise.
"""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from querycodec._internal.normalize import to_text
from querycodec._internal.types import UNDEFINED, DiagnosticSink, EncodedInput, EncodedOutput
from querycodec.config import QueryConfig
from querycodec.errors import ConfigurationError
from querycodec.location import Location
from querycodec.location import update_in_location as _update_in_location
from querycodec.location import update_location as _update_location
from querycodec.params import Codec, get_codec

logger = logging.getLogger("querycodec.engine")


def log_diagnostic(message: str) -> None:
    """Diagnostic sink that logs to ``querycodec.engine`` at WARNING."""
    logger.warning(message)


def _report(warn: DiagnosticSink | None, message: str) -> None:
    if warn is None:
        return
    try:
        warn(message)
    except Exception:
        logger.exception("Diagnostic sink raised while reporting: %s", message)


def encode_query_params(
    config_map: Mapping[str, Codec[Any]],
    query: Mapping[str, Any],
    *,
    warn: DiagnosticSink | None = None,
) -> dict[str, EncodedOutput]:
    """Convert the values in *query* to strings via the codecs in *config_map*.

    Args:
        config_map: Parameter name -> codec.
        query: Parameter name -> decoded value.  Only these keys are encoded.
        warn: Receives an advisory message for each unconfigured key.

    Returns:
        A new dict with exactly the keys of *query*.
    """
    encoded: dict[str, EncodedOutput] = {}

    for name, value in query.items():
        codec = config_map.get(name)
        if codec is None:
            _report(warn, f"Encoding parameter {name} as string since it was not configured.")
            encoded[name] = value if value is None or value is UNDEFINED else to_text(value)
        else:
            encoded[name] = codec.encode(value)

    return encoded


def decode_query_params(
    config_map: Mapping[str, Codec[Any]],
    encoded_query: Mapping[str, EncodedInput],
    *,
    warn: DiagnosticSink | None = None,
) -> dict[str, Any]:
    """Convert the values in *encoded_query* to typed values via *config_map*.

    Every configured key appears in the result, in config order, followed
    by unconfigured keys of *encoded_query* passed through as-is.

    Args:
        config_map: Parameter name -> codec.
        encoded_query: Parameter name -> raw value from a parsed query string.
        warn: Receives an advisory message for each unconfigured key.
    """
    decoded: dict[str, Any] = {}

    for name, codec in config_map.items():
        decoded[name] = codec.decode(encoded_query.get(name, UNDEFINED))

    for name, value in encoded_query.items():
        if name in config_map:
            continue
        _report(warn, f"Passing through parameter {name} during decoding since it was not configured.")
        decoded[name] = value

    return decoded


class ParamConfigMap(Mapping[str, Codec[Any]]):
    """Immutable mapping from query parameter name to codec.

    Values may be ``Codec`` objects or registered codec names::

        params = ParamConfigMap(page="number", tags=DELIMITED_ARRAY)
        params.decode({"page": "2", "tags": "a_b"})
        # {"page": 2, "tags": ["a", "b"]}

    Pass names that clash with keyword arguments (``config``) through the
    positional mapping instead.

    Raises ``ConfigurationError`` for values that are neither.
    """

    __slots__ = ("_codecs", "_config")

    _codecs: Mapping[str, Codec[Any]]
    _config: QueryConfig

    def __init__(
        self,
        params: Mapping[str, Codec[Any] | str] | None = None,
        /,
        *,
        config: QueryConfig | None = None,
        **codecs: Codec[Any] | str,
    ) -> None:
        resolved: dict[str, Codec[Any]] = {}
        for name, codec in {**(params or {}), **codecs}.items():
            resolved[name] = _resolve_codec(name, codec)
        object.__setattr__(self, "_codecs", MappingProxyType(resolved))
        object.__setattr__(self, "_config", config or QueryConfig())

    def __getitem__(self, name: str) -> Codec[Any]:
        return self._codecs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._codecs)

    def __len__(self) -> int:
        return len(self._codecs)

    def __repr__(self) -> str:
        items = ", ".join(f"{name!r}: {codec!r}" for name, codec in self._codecs.items())
        return f"ParamConfigMap({{{items}}})"

    @property
    def config(self) -> QueryConfig:
        return self._config

    @property
    def diagnostic_sink(self) -> DiagnosticSink | None:
        """``log_diagnostic`` in debug mode, otherwise no sink."""
        return log_diagnostic if self._config.debug else None

    def encode(self, query: Mapping[str, Any]) -> dict[str, EncodedOutput]:
        """Encode *query* with this map (see :func:`encode_query_params`)."""
        return encode_query_params(self, query, warn=self.diagnostic_sink)

    def decode(self, encoded_query: Mapping[str, EncodedInput]) -> dict[str, Any]:
        """Decode *encoded_query* with this map (see :func:`decode_query_params`)."""
        return decode_query_params(self, encoded_query, warn=self.diagnostic_sink)

    def update_location(self, query: Mapping[str, Any], location: Location) -> Location:
        """Encode *query* and make it the whole query of *location*.

        The search string is built with ``config.stringify``.
        """
        return _update_location(self.encode(query), location, self._config.stringify)

    def update_in_location(self, replacements: Mapping[str, Any], location: Location) -> Location:
        """Encode *replacements* and merge them into the query of *location*."""
        return _update_in_location(self.encode(replacements), location, self._config.stringify)

    def merge(self, other: Mapping[str, Codec[Any] | str]) -> ParamConfigMap:
        """Return a new map with *other*'s codecs added or replacing ours."""
        return ParamConfigMap({**self._codecs, **other}, config=self._config)

    def with_config(self, config: QueryConfig) -> ParamConfigMap:
        return ParamConfigMap(self._codecs, config=config)


def _resolve_codec(name: str, codec: object) -> Codec[Any]:
    if isinstance(codec, Codec):
        return codec
    if isinstance(codec, str):
        return get_codec(codec)
    msg = f"Parameter {name!r} must map to a Codec or a codec name, got {type(codec).__name__}"
    raise ConfigurationError(msg)
