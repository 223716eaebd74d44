"""gzip compression with canary detection.

A compressed payload is a plain gzip member. Its two magic bytes (``1f 8b``)
double as the canary: :func:`decompress` looks at them to tell a compressed
payload apart from raw bytes that were never compressed. Raw JSON text can
never start with ``0x1f`` since control characters are not valid JSON.

Usage:

    blob = compress(b'{"a":1}')
    payload, not_compressed = decompress(blob)   # (b'{"a":1}', False)
    payload, not_compressed = decompress(b"{}")  # (b"", True)
"""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass

from canaryjson._logging import get_logger
from canaryjson.errors import CompressionError, DecompressionError, InvalidInputError

log = get_logger(__name__)

GZIP_CANARY = b"\x1f\x8b"

BEST_SPEED = 1
DEFAULT_COMPRESSION = 6
BEST_COMPRESSION = 9


@dataclass(frozen=True, slots=True)
class CompressionConfig:
    """Compression settings. Decompression does not need any."""

    level: int = BEST_COMPRESSION

    def __post_init__(self) -> None:
        if type(self.level) is not int or not 0 <= self.level <= 9:
            raise InvalidInputError(f"gzip compression level must be an int in 0..9, got {self.level!r}")


_DEFAULT_CONFIG = CompressionConfig()


def is_compressed(data: bytes | bytearray | memoryview) -> bool:
    """Return True if ``data`` starts with the gzip canary."""
    return bytes(data[: len(GZIP_CANARY)]) == GZIP_CANARY


def compress(data: bytes | bytearray | memoryview, config: CompressionConfig | None = None) -> bytes:
    """Compress ``data`` into a single gzip member.

    The header timestamp is zeroed, so equal input and level give equal output.

    Raises:
        InvalidInputError: ``data`` is None
        CompressionError: the gzip codec failed
    """
    if data is None:
        raise InvalidInputError("'data' to compress is None")
    config = config or _DEFAULT_CONFIG
    try:
        return gzip.compress(data, compresslevel=config.level, mtime=0)
    except (TypeError, ValueError, OSError, zlib.error) as e:
        raise CompressionError(f"failed to compress data: {e}") from e


def decompress(data: bytes | bytearray | memoryview) -> tuple[bytes, bool]:
    """Decompress ``data`` if it carries the gzip canary.

    Returns:
        (payload, not_compressed). When the canary is missing the payload is
        empty and ``not_compressed`` is True; the caller should use the
        original bytes as they are.

    Raises:
        InvalidInputError: ``data`` is None or empty
        DecompressionError: the canary is present but the member is corrupt
    """
    if data is None or len(data) == 0:
        raise InvalidInputError("'data' to decompress is empty")

    if not is_compressed(data):
        return b"", True

    try:
        payload = gzip.decompress(data)
    except (EOFError, OSError, zlib.error) as e:
        log.warning("Rejected corrupt gzip payload", extra={"size": len(data), "error": str(e)})
        raise DecompressionError(f"failed to decompress data: {e}") from e
    return payload, False


__all__ = [
    "BEST_COMPRESSION",
    "BEST_SPEED",
    "DEFAULT_COMPRESSION",
    "GZIP_CANARY",
    "CompressionConfig",
    "compress",
    "decompress",
    "is_compressed",
]
