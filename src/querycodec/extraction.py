"""Typed extraction of query parameters into dataclasses.

Derives a ``ParamConfigMap`` from a dataclass's field annotations, so the
set of known parameters and their codecs is declared once, as a class::

    @dataclass(frozen=True, slots=True)
    class SearchParams:
        q: str = ""
        page: int = 1
        tags: list[str] = field(default_factory=list)
        since: date | None = None
        order: Literal["asc", "desc"] = "asc"

    params = extract_dataclass(SearchParams, QueryParams(b"q=owl&page=3"))

Annotation -> codec:

- ``str`` -> string, ``int`` / ``float`` -> number, ``bool`` -> boolean
- ``date`` -> date, ``datetime`` -> date-time
- ``list[str]`` -> array, ``list[int]`` / ``list[float]`` -> numeric array
- ``dict[str, str]`` -> object, ``dict[str, int]`` / ``dict[str, float]``
  -> numeric object, ``dict[str, Any]`` / ``Any`` -> JSON
- ``Literal["a", "b"]`` -> enum, ``Literal[1, 2]`` -> enum decoding to the
  literal values, ``list[Literal["a", "b"]]`` -> enum array,
  ``enum.Enum`` subclasses -> enum on member values
- ``X | None`` is treated as ``X``

A field can name its own codec with ``field(metadata={"codec": ...})``.
Values that decode to nothing (missing, empty, invalid or ``nan``) leave
the field at its default.
"""

import dataclasses
import enum
import math
import types
import typing
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any, Literal, get_args, get_origin

from querycodec._internal.types import UNDEFINED, EncodedInput, EncodedOutput, is_missing
from querycodec.config import QueryConfig
from querycodec.engine import ParamConfigMap
from querycodec.errors import ConfigurationError
from querycodec.params import (
    ARRAY,
    BOOLEAN,
    DATE,
    DATE_TIME,
    JSON,
    NUMBER,
    NUMERIC_ARRAY,
    NUMERIC_OBJECT,
    OBJECT,
    STRING,
    Codec,
    enum_array_codec,
    enum_class_codec,
    enum_codec,
    literal_codec,
)

_SCALARS: dict[Any, Codec[Any]] = {
    str: STRING,
    int: NUMBER,
    float: NUMBER,
    bool: BOOLEAN,
    datetime: DATE_TIME,
    date: DATE,
    Any: JSON,
    object: JSON,
}


def config_from_dataclass[T](cls: type[T], *, config: QueryConfig | None = None) -> ParamConfigMap:
    """Build a ``ParamConfigMap`` with one codec per field of *cls*.

    Raises ``ConfigurationError`` if *cls* is not a dataclass or a field
    annotation has no matching codec.
    """
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        msg = f"{cls!r} is not a dataclass type"
        raise ConfigurationError(msg)

    hints = typing.get_type_hints(cls)
    codecs: dict[str, Codec[Any]] = {}
    for f in dataclasses.fields(cls):
        override = f.metadata.get("codec")
        if override is not None:
            codecs[f.name] = override
            continue
        try:
            codecs[f.name] = codec_for_annotation(hints[f.name])
        except ConfigurationError as exc:
            msg = f"{cls.__name__}.{f.name}: {exc}"
            raise ConfigurationError(msg) from None

    return ParamConfigMap(codecs, config=config)


def codec_for_annotation(annotation: Any) -> Codec[Any]:
    """Pick the codec for a single type annotation.

    Raises ``ConfigurationError`` for unsupported annotations.
    """
    annotation = _unwrap_optional(annotation)

    if annotation in _SCALARS:
        return _SCALARS[annotation]

    if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        return enum_class_codec(annotation)

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Literal:
        if all(isinstance(arg, str) for arg in args):
            return enum_codec(args)
        return literal_codec(args)

    if origin in (list, tuple, Sequence):
        item = _unwrap_optional(args[0]) if args else str
        if item is str:
            return ARRAY
        if item in (int, float):
            return NUMERIC_ARRAY
        if get_origin(item) is Literal:
            choices = get_args(item)
            if not all(isinstance(arg, str) for arg in choices):
                msg = f"Array of non-string literals is not supported: {annotation!r}"
                raise ConfigurationError(msg)
            return enum_array_codec(choices)

    if origin in (dict, Mapping):
        value = _unwrap_optional(args[1]) if len(args) == 2 else Any
        if value is str:
            return OBJECT
        if value in (int, float):
            return NUMERIC_OBJECT
        return JSON

    if annotation in (list, dict):
        return ARRAY if annotation is list else JSON

    msg = f"No codec for annotation {annotation!r}"
    raise ConfigurationError(msg)


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (typing.Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def _is_unset(value: Any) -> bool:
    if is_missing(value):
        return True
    return isinstance(value, float) and math.isnan(value)


def extract_dataclass[T](
    cls: type[T],
    encoded_query: Mapping[str, EncodedInput],
    config_map: ParamConfigMap | None = None,
) -> T:
    """Create a dataclass instance from an encoded query.

    Args:
        cls: A dataclass type to instantiate.
        encoded_query: Parameter name -> raw value, e.g. a ``QueryParams``.
        config_map: Codecs to decode with.  Derived from *cls* when omitted.

    Returns:
        A new instance of *cls*.  Fields whose parameter is missing or does
        not decode to a usable value keep their default.
    """
    config_map = config_map if config_map is not None else config_from_dataclass(cls)
    known = {f.name for f in dataclasses.fields(cls) if f.init}
    # Only the fields matter; extra parameters are not this class's concern
    relevant = {name: value for name, value in encoded_query.items() if name in known}
    decoded = config_map.decode(relevant)

    kwargs: dict[str, Any] = {}
    for name in known:
        value = decoded.get(name, UNDEFINED)
        if not _is_unset(value):
            kwargs[name] = value

    return cls(**kwargs)


def encode_dataclass(
    instance: Any,
    config_map: ParamConfigMap | None = None,
) -> dict[str, EncodedOutput]:
    """Encode every field of a dataclass instance."""
    if config_map is None:
        config_map = config_from_dataclass(type(instance))
    values = {f.name: getattr(instance, f.name) for f in dataclasses.fields(instance)}
    return config_map.encode(values)
