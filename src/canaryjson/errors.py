"""Exception hierarchy for canaryjson.

Every failure raised by the codec derives from :class:`CanaryJSONError`.
Where a primitive (orjson, json, gzip) raised first, its exception is kept
as ``__cause__``.
"""

from __future__ import annotations


class CanaryJSONError(Exception):
    """Base class for all canaryjson errors."""


class InvalidInputError(CanaryJSONError, ValueError):
    """A required argument was None/empty or of an unsupported kind."""


class EncodingError(CanaryJSONError, TypeError):
    """The JSON serializer rejected the value."""


class DecodingError(CanaryJSONError, ValueError):
    """The JSON parser rejected the bytes, or they did not fit the destination."""


class CompressionError(CanaryJSONError):
    """The gzip compressor failed."""


class DecompressionError(CanaryJSONError):
    """A payload carrying the gzip canary could not be decompressed."""


__all__ = [
    "CanaryJSONError",
    "CompressionError",
    "DecodingError",
    "DecompressionError",
    "EncodingError",
    "InvalidInputError",
]
