"""canaryjson — JSON codec with transparent, self-describing gzip compression.

Quick start:

    from canaryjson import decompress_and_decode_json, encode_json_and_compress

    blob = encode_json_and_compress({"id": 9223372036854775807, "tags": ["a"]})
    record = decompress_and_decode_json(blob, dict)

The decompressing reader also accepts plain JSON, so stored records keep
decoding after a writer switches between compressed and plain output.

Numbers decode exactly: integers as ``int``, everything else as ``Decimal``.
"""

from __future__ import annotations

from typing import Any

from canaryjson._logging import set_tracer
from canaryjson.codec import (
    decode_json,
    decode_json_from_reader,
    decompress_and_decode_json,
    encode_json,
    encode_json_and_compress,
)
from canaryjson.compress import (
    BEST_COMPRESSION,
    BEST_SPEED,
    DEFAULT_COMPRESSION,
    GZIP_CANARY,
    CompressionConfig,
    compress,
    decompress,
    is_compressed,
)
from canaryjson.errors import (
    CanaryJSONError,
    CompressionError,
    DecodingError,
    DecompressionError,
    EncodingError,
    InvalidInputError,
)


def configure(*, tracer: Any = None) -> None:
    """Configure canaryjson with optional integrations.

    Args:
        tracer: OpenTelemetry-compatible tracer for span creation.
                Should support tracer.start_as_current_span(name, attributes={}).
                None removes a previously configured tracer.
    """
    set_tracer(tracer)


__version__ = "0.1.0"

__all__ = [
    # Configuration
    "configure",
    # Codec
    "decode_json",
    "decode_json_from_reader",
    "decompress_and_decode_json",
    "encode_json",
    "encode_json_and_compress",
    # Compression
    "BEST_COMPRESSION",
    "BEST_SPEED",
    "DEFAULT_COMPRESSION",
    "GZIP_CANARY",
    "CompressionConfig",
    "compress",
    "decompress",
    "is_compressed",
    # Errors
    "CanaryJSONError",
    "CompressionError",
    "DecodingError",
    "DecompressionError",
    "EncodingError",
    "InvalidInputError",
]
