"""Codec objects pairing an encoder with its decoder.

A ``Codec`` is what a param config map holds for each query parameter.
Ready-made codecs cover every shape in :mod:`querycodec.serialize`;
factories build parameterized ones (custom separators, enums, defaults).

Usage::

    from querycodec.params import NUMBER, enum_codec, with_default

    config = {
        "page": with_default(NUMBER, 1),
        "sort": enum_codec(["asc", "desc"]),
    }
"""

import enum
from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import Any

from querycodec import serialize
from querycodec._internal.types import INVALID, UNDEFINED, EncodedInput, EncodedOutput
from querycodec.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class Codec[T]:
    """Paired encode/decode functions for one value shape.

    Codecs are stateless and immutable, so one instance can be shared by
    any number of config maps and threads.
    """

    encode: Callable[[T | None], EncodedOutput]
    decode: Callable[[EncodedInput], T | None]
    name: str = "custom"

    def __repr__(self) -> str:
        return f"Codec({self.name!r})"


STRING: Codec[str] = Codec(serialize.encode_string, serialize.decode_string, "string")
NUMBER: Codec[int | float] = Codec(serialize.encode_number, serialize.decode_number, "number")
BOOLEAN: Codec[bool] = Codec(serialize.encode_boolean, serialize.decode_boolean, "boolean")
DATE = Codec(serialize.encode_date, serialize.decode_date, "date")
DATE_TIME = Codec(serialize.encode_date_time, serialize.decode_date_time, "datetime")
JSON: Codec[Any] = Codec(serialize.encode_json, serialize.decode_json, "json")
ARRAY = Codec(serialize.encode_array, serialize.decode_array, "array")
NUMERIC_ARRAY = Codec(
    serialize.encode_numeric_array, serialize.decode_numeric_array, "numeric_array"
)
DELIMITED_ARRAY = Codec(
    serialize.encode_delimited_array, serialize.decode_delimited_array, "delimited_array"
)
DELIMITED_NUMERIC_ARRAY = Codec(
    serialize.encode_delimited_numeric_array,
    serialize.decode_delimited_numeric_array,
    "delimited_numeric_array",
)
OBJECT = Codec(serialize.encode_object, serialize.decode_object, "object")
NUMERIC_OBJECT = Codec(
    serialize.encode_numeric_object, serialize.decode_numeric_object, "numeric_object"
)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def enum_codec(values: Collection[str]) -> Codec[str]:
    """String codec that decodes to ``INVALID`` unless the value is in *values*."""
    allowed = frozenset(values)
    return Codec(
        serialize.encode_enum,
        lambda input: serialize.decode_enum(input, allowed),
        "enum",
    )


def enum_array_codec(values: Collection[str]) -> Codec[list[str]]:
    """Repeated-key array whose entries must all be in *values*."""
    allowed = frozenset(values)
    return Codec(
        serialize.encode_array,
        lambda input: serialize.decode_enum_array(input, allowed),
        "enum_array",
    )


def enum_delimited_array_codec(values: Collection[str], entry_separator: str = "_") -> Codec[list[str]]:
    allowed = frozenset(values)
    return Codec(
        lambda value: serialize.encode_delimited_array(value, entry_separator),
        lambda input: serialize.decode_enum_delimited_array(input, allowed, entry_separator),
        "enum_delimited_array",
    )


def enum_class_codec[E: enum.Enum](enum_cls: type[E]) -> Codec[E]:
    """Codec for an ``enum.Enum`` subclass, keyed on the members' values.

    Decodes to the member itself, or ``INVALID`` for unknown values.
    """
    by_text = {serialize.encode_string(member.value): member for member in enum_cls}

    def encode(member: E | None) -> str | None:
        if member is None or member is UNDEFINED:
            return member
        return serialize.encode_string(member.value)

    def decode(input: EncodedInput) -> Any:
        text = serialize.decode_enum(input, by_text)
        if text is None or text is UNDEFINED or text is INVALID:
            return text
        return by_text[text]

    return Codec(encode, decode, f"enum:{enum_cls.__name__}")


def literal_codec(values: Collection[Any]) -> Codec[Any]:
    """Enum codec over arbitrary scalars, e.g. the arguments of ``Literal[1, 2]``.

    Values are matched on their query string text and decode to the
    original object, so ``"1"`` decodes to ``1``.
    """
    by_text = {serialize.encode_string(value): value for value in values}

    def encode(value: Any) -> Any:
        if value is None or value is UNDEFINED:
            return value
        return serialize.encode_string(value)

    def decode(input: EncodedInput) -> Any:
        text = serialize.decode_enum(input, by_text)
        if text is None or text is UNDEFINED or text is INVALID:
            return text
        return by_text[text]

    return Codec(encode, decode, "literal")


def delimited_array_codec(entry_separator: str = "_") -> Codec[list[str]]:
    return Codec(
        lambda value: serialize.encode_delimited_array(value, entry_separator),
        lambda input: serialize.decode_delimited_array(input, entry_separator),
        "delimited_array",
    )


def delimited_numeric_array_codec(entry_separator: str = "_") -> Codec[list[int | float | None]]:
    return Codec(
        lambda value: serialize.encode_delimited_numeric_array(value, entry_separator),
        lambda input: serialize.decode_delimited_numeric_array(input, entry_separator),
        "delimited_numeric_array",
    )


def object_codec(key_value_separator: str = "-", entry_separator: str = "_") -> Codec[dict[str, Any]]:
    return Codec(
        lambda value: serialize.encode_object(value, key_value_separator, entry_separator),
        lambda input: serialize.decode_object(input, key_value_separator, entry_separator),
        "object",
    )


def numeric_object_codec(
    key_value_separator: str = "-",
    entry_separator: str = "_",
) -> Codec[dict[str, Any]]:
    return Codec(
        lambda value: serialize.encode_numeric_object(value, key_value_separator, entry_separator),
        lambda input: serialize.decode_numeric_object(input, key_value_separator, entry_separator),
        "numeric_object",
    )


def with_default[T](codec: Codec[T], default: T, *, include_none: bool = True) -> Codec[T]:
    """Wrap *codec* so a missing decoded value becomes *default*.

    ``UNDEFINED`` and ``INVALID`` always fall back; ``None`` does too unless
    *include_none* is false.  Encoding is unchanged.
    """

    def decode(input: EncodedInput) -> T | None:
        value = codec.decode(input)
        if value is UNDEFINED or value is INVALID:
            return default
        if include_none and value is None:
            return default
        return value

    return Codec(codec.encode, decode, f"{codec.name}?default")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

# Short names accepted wherever a config map takes a codec
CODECS: dict[str, Codec[Any]] = {
    "str": STRING,
    "string": STRING,
    "number": NUMBER,
    "bool": BOOLEAN,
    "boolean": BOOLEAN,
    "date": DATE,
    "datetime": DATE_TIME,
    "json": JSON,
    "array": ARRAY,
    "numeric_array": NUMERIC_ARRAY,
    "delimited_array": DELIMITED_ARRAY,
    "delimited_numeric_array": DELIMITED_NUMERIC_ARRAY,
    "object": OBJECT,
    "numeric_object": NUMERIC_OBJECT,
}


def get_codec(name: str) -> Codec[Any]:
    """Look up a registered codec by name.

    Raises ``ConfigurationError`` if *name* is not registered.
    """
    try:
        return CODECS[name]
    except KeyError:
        known = ", ".join(sorted(CODECS))
        msg = f"Unknown codec {name!r}. Known codecs: {known}"
        raise ConfigurationError(msg) from None
