"""querycodec exception hierarchy.

Codecs and the param-map engine never raise on query data; these errors
are reserved for misconfiguration detected when a config map is built.
"""


class QueryCodecError(Exception):
    """Base for all querycodec-specific errors."""


class ConfigurationError(QueryCodecError):
    """Raised when a param config map or codec lookup is invalid.

    Typically raised while building a ``ParamConfigMap`` or deriving one
    from a dataclass, before any query is processed.
    """
