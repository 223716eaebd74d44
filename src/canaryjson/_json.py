"""JSON primitives.

Encoding goes through orjson. Decoding goes through the stdlib parser, which
is the one that can hand number literals to a precise constructor: integers
stay ``int`` and every other number becomes ``Decimal``.

:func:`read_document` pulls one document off a byte or text stream and stops
as soon as that document is complete, so anything after it stays unread
beyond the last chunk.
"""

from __future__ import annotations

import codecs
import json as _json
import re
from decimal import Decimal
from typing import Any

import orjson

JSONEncodeError = orjson.JSONEncodeError
JSONDecodeError = _json.JSONDecodeError

CHUNK_SIZE = 64 * 1024

_WHITESPACE = " \t\n\r"
_STRING_SPECIAL = re.compile(r'["\\]')
_STRUCTURAL = re.compile(r'["\[\]{}]')
_SCALAR_END = re.compile(r'[ \t\n\r\[\]{},:"]')


def _default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise TypeError(f"Decimal {obj} is not a JSON number")
        # Emitted verbatim so the digits survive the round trip
        return orjson.Fragment(str(obj).encode("ascii"))
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


_decoder = _json.JSONDecoder(parse_float=Decimal, parse_constant=_reject_constant)


def dumps_bytes(obj: Any) -> bytes:
    return orjson.dumps(obj, default=_default)


def loads(data: str | bytes | bytearray) -> Any:
    return _json.loads(data, parse_float=Decimal, parse_constant=_reject_constant)


# =============================================================================
# Stream decoding
# =============================================================================


class _Chunks:
    """Text pulled from a reader that returns bytes (UTF-8) or str."""

    def __init__(self, reader: Any, size: int) -> None:
        # read1 returns what is buffered instead of waiting for a full chunk
        self._read = getattr(reader, "read1", None) or reader.read
        self._size = size
        self._decoder: codecs.IncrementalDecoder | None = None
        self.eof = False

    def pull(self) -> str:
        chunk = self._read(self._size)
        if not chunk:
            self.eof = True
            return self._decoder.decode(b"", final=True) if self._decoder else ""
        if isinstance(chunk, str):
            return chunk
        if self._decoder is None:
            self._decoder = codecs.getincrementaldecoder("utf-8")()
        return self._decoder.decode(chunk)


class _Boundary:
    """Finds where the first top-level value ends without parsing it.

    Scans incrementally: each call resumes where the previous one stopped.
    """

    def __init__(self) -> None:
        self._pos = 0
        self._depth = 0
        self._in_string = False
        self._kind: str | None = None

    def find(self, buf: str) -> int | None:
        pos, n = self._pos, len(buf)

        if self._kind is None:
            while pos < n and buf[pos] in _WHITESPACE:
                pos += 1
            if pos == n:
                self._pos = pos
                return None
            c = buf[pos]
            if c == '"':
                self._kind, self._in_string = "string", True
            elif c in "[{":
                self._kind, self._depth = "container", 1
            else:
                self._kind = "scalar"
            pos += 1

        while True:
            if self._kind == "scalar":
                m = _SCALAR_END.search(buf, pos)
                if m is None:
                    self._pos = n
                    return None
                return m.start()

            if self._in_string:
                m = _STRING_SPECIAL.search(buf, pos)
                if m is None:
                    self._pos = n
                    return None
                if m.group() == "\\":
                    if m.end() >= n:
                        # Escape split across chunks
                        self._pos = m.start()
                        return None
                    pos = m.end() + 1
                    continue
                self._in_string = False
                pos = m.end()
                if self._kind == "string":
                    return pos
                continue

            m = _STRUCTURAL.search(buf, pos)
            if m is None:
                self._pos = n
                return None
            c, pos = m.group(), m.end()
            if c == '"':
                self._in_string = True
            elif c in "[{":
                self._depth += 1
            else:
                self._depth -= 1
                if self._depth == 0:
                    return pos


def read_document(reader: Any, *, allow_trailing: bool = True, chunk_size: int = CHUNK_SIZE) -> Any:
    """Read and parse the first JSON document from ``reader``.

    Reading stops once the document is complete. With ``allow_trailing``
    False the stream is drained and anything but whitespace after the
    document is an error.

    Raises:
        JSONDecodeError / ValueError: malformed, truncated or empty input
    """
    chunks = _Chunks(reader, chunk_size)
    boundary = _Boundary()
    buf, end = "", None
    while end is None and not chunks.eof:
        buf += chunks.pull()
        end = boundary.find(buf)
    if end is None:
        end = len(buf)

    start = len(buf) - len(buf.lstrip(_WHITESPACE))
    value, parsed = _decoder.raw_decode(buf[:end], start)
    if parsed != end:
        raise JSONDecodeError("Extra data", buf, parsed)

    if not allow_trailing:
        while not chunks.eof:
            buf += chunks.pull()
        rest = buf[end:]
        if rest.strip(_WHITESPACE):
            raise JSONDecodeError("Extra data", buf, end + len(rest) - len(rest.lstrip(_WHITESPACE)))
    return value
