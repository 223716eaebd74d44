"""JSON codec with transparent, self-describing compression.

Two pipelines share one decoder:

    # Plain
    data = encode_json({"id": 9223372036854775807})
    decode_json(data)                          # {'id': 9223372036854775807}

    # Compressed. The reader does not need to know which side was used.
    blob = encode_json_and_compress(record)
    decompress_and_decode_json(blob, dict)
    decompress_and_decode_json(data, dict)     # plain bytes work too

Decoded numbers are exact: integers come back as ``int`` and every other
number as ``Decimal``. A ``float`` therefore does not round-trip to an equal
``float``: ``{"x": 0.1}`` decodes to ``{"x": Decimal("0.1")}``, which compares
unequal to the input. Pass ``float`` as ``out`` (or convert) when a float is
wanted back.

``decode_json_from_reader`` stops reading once the first document is
complete, so a stream may carry several documents back to back.
``decode_json`` takes a whole buffer and rejects anything after the document.

The ``out`` argument names the destination of a decode:

    decode_json(data)                # any JSON value
    decode_json(data, dict)          # must be an object
    decode_json(data, Point)         # dataclass (or pydantic model) built from the object
    decode_json(data, existing_map)  # merged into a dict in place
    decode_json(data, existing_list) # replaces a list's contents in place

A destination is only written once the whole payload has parsed and matched
its shape.
"""

from __future__ import annotations

import dataclasses
import io
import math
import typing
from decimal import Decimal
from typing import Any, Protocol

from canaryjson._json import JSONEncodeError, dumps_bytes, read_document
from canaryjson._logging import get_logger, span
from canaryjson.compress import CompressionConfig, compress, decompress
from canaryjson.errors import DecodingError, EncodingError, InvalidInputError

log = get_logger(__name__)


class SupportsRead(Protocol):
    def read(self, size: int = -1, /) -> bytes | str: ...


# Targets that accept any JSON number
_NUMERIC_TARGETS = (float, Decimal)


# =============================================================================
# Destination binding
# =============================================================================


def _check_destination(out: Any) -> Any:
    """Validate ``out`` up front and normalize generic aliases to their origin."""
    if out is None:
        raise InvalidInputError("output parameter 'out' is None")
    if out is object or out is Any:
        return out
    if (origin := typing.get_origin(out)) is not None:
        out = origin
    if isinstance(out, type):
        return out
    if isinstance(out, (dict, list)):
        return out
    if dataclasses.is_dataclass(out):
        if type(out).__dataclass_params__.frozen:  # type: ignore[attr-defined]
            raise InvalidInputError(f"cannot decode into frozen dataclass instance {type(out).__name__}")
        return out
    raise InvalidInputError(f"unsupported decode destination: {type(out).__name__}")


def _mismatch(value: Any, expected: str) -> DecodingError:
    return DecodingError(f"cannot decode JSON {_json_kind(value)} into {expected}")


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _build_dataclass(cls: type, value: Any) -> Any:
    if not isinstance(value, dict):
        raise _mismatch(value, cls.__name__)
    kwargs = {f.name: value[f.name] for f in dataclasses.fields(cls) if f.init and f.name in value}
    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        raise DecodingError(f"cannot decode JSON object into {cls.__name__}: {e}") from e


def _bind_type(value: Any, out: type) -> Any:
    if dataclasses.is_dataclass(out):
        return _build_dataclass(out, value)

    if hasattr(out, "model_validate"):
        try:
            return out.model_validate(value)  # type: ignore[attr-defined]
        except (ValueError, TypeError) as e:
            raise DecodingError(f"cannot decode JSON into {out.__name__}: {e}") from e

    if out in _NUMERIC_TARGETS:
        if not isinstance(value, (int, Decimal)) or isinstance(value, bool):
            raise _mismatch(value, out.__name__)
        try:
            result = out(value)
        except (OverflowError, ValueError) as e:
            raise DecodingError(f"JSON number {value} is out of range for {out.__name__}") from e
        if out is float and math.isinf(result):
            raise DecodingError(f"JSON number {value} is out of range for float")
        return result

    # bool is an int subclass, but JSON keeps them apart
    if isinstance(value, bool) and out is not bool and issubclass(out, int):
        raise _mismatch(value, out.__name__)

    if isinstance(value, out):
        return value
    raise _mismatch(value, out.__name__)


def _bind(value: Any, out: Any) -> Any:
    if out is object or out is Any:
        return value

    if isinstance(out, type):
        return _bind_type(value, out)

    if isinstance(out, dict):
        if not isinstance(value, dict):
            raise _mismatch(value, "dict")
        out.update(value)
        return out

    if isinstance(out, list):
        if not isinstance(value, list):
            raise _mismatch(value, "list")
        out[:] = value
        return out

    # Dataclass instance: assign the fields present in the object
    if not isinstance(value, dict):
        raise _mismatch(value, type(out).__name__)
    for f in dataclasses.fields(out):
        if f.name in value:
            setattr(out, f.name, value[f.name])
    return out


# =============================================================================
# Plain pipeline
# =============================================================================


def encode_json(value: Any) -> bytes:
    """Encode ``value`` into compact JSON bytes.

    Raises:
        InvalidInputError: ``value`` is None
        EncodingError: the value cannot be represented as JSON
    """
    if value is None:
        raise InvalidInputError("input for encoding is None")
    try:
        return dumps_bytes(value)
    except JSONEncodeError as e:
        raise EncodingError(f"failed to encode JSON: {e}") from e


def decode_json(data: bytes | bytearray | memoryview | str, out: Any = object) -> Any:
    """Decode JSON ``data`` into ``out`` and return the bound value."""
    if data is None or len(data) == 0:
        raise InvalidInputError("'data' being decoded is None or empty")
    if out is None:
        raise InvalidInputError("output parameter 'out' is None")

    reader = io.StringIO(data) if isinstance(data, str) else io.BytesIO(data)
    return _decode_stream(reader, out, allow_trailing=False)


def decode_json_from_reader(reader: SupportsRead, out: Any = object) -> Any:
    """Decode the next JSON document read from ``reader`` into ``out``.

    ``reader`` is anything with a ``read(size)`` returning bytes (UTF-8) or
    str; a ``read1`` method is preferred when present. Reading stops at the
    end of the first document, so a socket ``makefile()`` does not have to
    be closed by the peer first.

    Raises:
        InvalidInputError: ``reader`` or ``out`` is None, or ``out`` is not a
            supported destination
        DecodingError: the input is empty, malformed, or does not fit ``out``
    """
    return _decode_stream(reader, out, allow_trailing=True)


def _decode_stream(reader: SupportsRead, out: Any, *, allow_trailing: bool) -> Any:
    if reader is None:
        raise InvalidInputError("'reader' being decoded is None")
    if not callable(getattr(reader, "read", None)):
        raise InvalidInputError(f"'reader' of type {type(reader).__name__} has no read() method")
    out = _check_destination(out)

    try:
        value = read_document(reader, allow_trailing=allow_trailing)
    except (ValueError, TypeError, RecursionError) as e:
        raise DecodingError(f"failed to decode JSON: {e}") from e
    return _bind(value, out)


# =============================================================================
# Compressed pipeline
# =============================================================================


def encode_json_and_compress(value: Any, config: CompressionConfig | None = None) -> bytes:
    """Encode ``value`` to JSON and gzip it (best compression by default).

    The gzip magic header at the front of the result is what
    :func:`decompress_and_decode_json` uses to recognize it.

    Raises:
        InvalidInputError: ``value`` is None
        EncodingError: the value cannot be represented as JSON
        CompressionError: the gzip codec failed
    """
    if value is None:
        raise InvalidInputError("input for encoding is None")

    with span("canaryjson.encode_and_compress") as s:
        encoded = encode_json(value)
        compressed = compress(encoded, config)
        s.set_attribute("encoded_size", len(encoded))
        s.set_attribute("compressed_size", len(compressed))

    log.debug("Encoded and compressed JSON", extra={"encoded_size": len(encoded), "compressed_size": len(compressed)})
    return compressed


def decompress_and_decode_json(data: bytes | bytearray | memoryview, out: Any = object) -> Any:
    """Decode ``data`` into ``out``, decompressing first if it is gzipped.

    Payloads without the gzip canary are decoded as they are, so plain
    :func:`encode_json` output is accepted as well. A payload that carries
    the canary but fails to decompress is an error, never decoded as plain
    JSON.

    Raises:
        InvalidInputError: ``data`` is None/empty or ``out`` is None
        DecompressionError: the gzip member is corrupt or truncated
        DecodingError: the JSON is invalid, empty, or does not fit ``out``
    """
    if data is None or len(data) == 0:
        raise InvalidInputError("'data' being decoded is invalid")
    if out is None:
        raise InvalidInputError("output parameter 'out' is None")

    with span("canaryjson.decompress_and_decode", size=len(data)) as s:
        payload, not_compressed = decompress(data)
        s.set_attribute("compressed", not not_compressed)

        if not_compressed:
            log.debug("No gzip canary, decoding as plain JSON", extra={"size": len(data)})
            return decode_json(data, out)

        if not payload:
            raise DecodingError("decompressed data being decoded is invalid")

        log.debug("Decoding decompressed JSON", extra={"size": len(data), "decompressed_size": len(payload)})
        return decode_json(payload, out)


__all__ = [
    "SupportsRead",
    "decode_json",
    "decode_json_from_reader",
    "decompress_and_decode_json",
    "encode_json",
    "encode_json_and_compress",
]
