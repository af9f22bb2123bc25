"""Shared type aliases and absent-value sentinels used across querycodec modules.

Python has a single ``None``; query parameters need more than one kind of
"no value":

- ``UNDEFINED`` -- the parameter was not provided at all
- ``None`` -- the parameter was provided but is explicitly empty, or could
  not be parsed in a recoverable way
- ``INVALID`` -- the parameter was provided but is not a permitted value
  (enum decoders)

Both sentinels are falsy singletons that survive ``copy`` and ``pickle``.
"""

from collections.abc import Callable, Sequence
from typing import Any, Final, final


@final
class _Sentinel:
    __slots__ = ("_name",)

    _instances: dict[str, _Sentinel] = {}

    def __new__(cls, name: str) -> _Sentinel:
        existing = cls._instances.get(name)
        if existing is not None:
            return existing
        instance = super().__new__(cls)
        instance._name = name
        cls._instances[name] = instance
        return instance

    def __repr__(self) -> str:
        return self._name

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple[Any, ...]:
        return (_Sentinel, (self._name,))

    def __copy__(self) -> _Sentinel:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Sentinel:
        return self


UNDEFINED: Final = _Sentinel("UNDEFINED")
INVALID: Final = _Sentinel("INVALID")

type Undefined = _Sentinel

# Raw value for one parameter as it arrives from a parsed query string
type EncodedInput = str | Sequence[str | None] | None | Undefined

# Value produced by an encoder, ready for the query string tokenizer
type EncodedOutput = str | Sequence[str | None] | None | Undefined

type Encoder = Callable[[Any], EncodedOutput]
type Decoder = Callable[[EncodedInput], Any]

# Receives one advisory message per unconfigured parameter
type DiagnosticSink = Callable[[str], None]


def is_missing(value: object) -> bool:
    """Return True for ``None``, ``UNDEFINED`` and ``INVALID``."""
    return value is None or value is UNDEFINED or value is INVALID
