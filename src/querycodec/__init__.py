"""querycodec -- typed query string parameters.

Converts between in-memory values (dates, booleans, numbers, strings,
enums, arrays, JSON, flat objects) and query string text, one codec per
parameter.

Basic usage::

    from querycodec import ParamConfigMap, QueryParams, NUMBER, DELIMITED_ARRAY

    params = ParamConfigMap(page=NUMBER, tags=DELIMITED_ARRAY)

    params.decode(QueryParams(b"page=2&tags=a_b"))
    # {"page": 2, "tags": ["a", "b"]}

    params.encode({"page": 3})
    # {"page": "3"}

Into a dataclass::

    from querycodec import extract_dataclass

    search = extract_dataclass(SearchParams, QueryParams(b"q=owl"))
"""

import importlib

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "ARRAY",
    "BOOLEAN",
    "DATE",
    "DATE_TIME",
    "DELIMITED_ARRAY",
    "DELIMITED_NUMERIC_ARRAY",
    "INVALID",
    "JSON",
    "NUMBER",
    "NUMERIC_ARRAY",
    "NUMERIC_OBJECT",
    "OBJECT",
    "STRING",
    "UNDEFINED",
    "Codec",
    "ConfigurationError",
    "Location",
    "ParamConfigMap",
    "QueryCodecError",
    "QueryConfig",
    "QueryParams",
    "StringifyOptions",
    "decode_query_params",
    "encode_query_params",
    "extract_dataclass",
    "is_missing",
    "update_in_location",
    "update_location",
    "with_default",
]

# Public name -> defining module, resolved on first access
_LAZY_IMPORTS: dict[str, str] = {
    "ARRAY": "querycodec.params",
    "BOOLEAN": "querycodec.params",
    "DATE": "querycodec.params",
    "DATE_TIME": "querycodec.params",
    "DELIMITED_ARRAY": "querycodec.params",
    "DELIMITED_NUMERIC_ARRAY": "querycodec.params",
    "JSON": "querycodec.params",
    "NUMBER": "querycodec.params",
    "NUMERIC_ARRAY": "querycodec.params",
    "NUMERIC_OBJECT": "querycodec.params",
    "OBJECT": "querycodec.params",
    "STRING": "querycodec.params",
    "Codec": "querycodec.params",
    "with_default": "querycodec.params",
    "INVALID": "querycodec._internal.types",
    "UNDEFINED": "querycodec._internal.types",
    "is_missing": "querycodec._internal.types",
    "ParamConfigMap": "querycodec.engine",
    "decode_query_params": "querycodec.engine",
    "encode_query_params": "querycodec.engine",
    "QueryParams": "querycodec.query",
    "Location": "querycodec.location",
    "update_location": "querycodec.location",
    "update_in_location": "querycodec.location",
    "QueryConfig": "querycodec.config",
    "StringifyOptions": "querycodec.config",
    "extract_dataclass": "querycodec.extraction",
    "QueryCodecError": "querycodec.errors",
    "ConfigurationError": "querycodec.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import querycodec`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_name), name)
