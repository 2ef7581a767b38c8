"""Little-endian binary helpers shared by the bank and package readers."""

from __future__ import annotations

import struct
from functools import lru_cache
from typing import BinaryIO, Callable

_BYTE_ORDER_CHARS = "<>!=@"


@lru_cache(maxsize=None)
def _compiled(fmt: str) -> struct.Struct:
    if not fmt or fmt[0] not in _BYTE_ORDER_CHARS:
        fmt = "<" + fmt
    return struct.Struct(fmt)


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes, raising EOFError if the stream ends early."""
    if size < 0:
        raise ValueError(f"cannot read a negative number of bytes: {size}")
    chunks = []
    remaining = size
    while remaining:
        chunk = stream.read(remaining)
        if not chunk:
            got = size - remaining
            raise EOFError(f"expected {size} bytes, got {got}")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_struct(stream: BinaryIO, fmt: str) -> tuple:
    """Unpack one ``struct`` format from the stream; little-endian unless stated."""
    layout = _compiled(fmt)
    return layout.unpack(read_exact(stream, layout.size))


def write_struct(stream: BinaryIO, fmt: str, *args) -> int:
    """Pack ``args`` with ``fmt`` (little-endian unless stated) and return the byte count."""
    data = _compiled(fmt).pack(*args)
    stream.write(data)
    return len(data)


def read_utf16_string(stream: BinaryIO) -> str:
    """Read a null-terminated UTF-16LE string."""
    units = bytearray()
    while True:
        unit = read_exact(stream, 2)
        if unit == b"\x00\x00":
            break
        units += unit
    return bytes(units).decode("utf-16-le")


def utf16_string_bytes(text: str) -> bytes:
    """Encode ``text`` as UTF-16LE followed by a null code unit."""
    return text.encode("utf-16-le") + b"\x00\x00"


def read_null_string(stream: BinaryIO) -> str:
    """Read a null-terminated byte string.

    Bytes that are not valid UTF-8 are kept as surrogate escapes so that
    :func:`null_string_bytes` reproduces them exactly.
    """
    data = bytearray()
    while True:
        byte = read_exact(stream, 1)
        if byte == b"\x00":
            break
        data += byte
    return bytes(data).decode("utf-8", errors="surrogateescape")


def null_string_bytes(text: str) -> bytes:
    """Encode ``text`` as UTF-8 followed by a null byte."""
    return text.encode("utf-8", errors="surrogateescape") + b"\x00"


def measure_written(stream: BinaryIO, func: Callable[[BinaryIO], object]) -> int:
    """Call ``func(stream)`` and return how far the stream position advanced."""
    start = stream.tell()
    func(stream)
    return stream.tell() - start