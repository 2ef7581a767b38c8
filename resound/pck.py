"""Reading and writing of AKPK sound package headers."""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar, Optional

from .binio import (
    measure_written,
    read_exact,
    read_struct,
    read_utf16_string,
    utf16_string_bytes,
    write_struct,
)

MAGIC = b"AKPK"
_U32_SIZE = 4
_STRING_ENTRY_SIZE = 8
# unk2 plus the four section lengths
_FIXED_HEADER_FIELDS_SIZE = 5 * _U32_SIZE


class PckError(Exception):
    """Base class for package errors."""


class InvalidMagicError(PckError):
    """The stream does not start with the package magic."""

    def __init__(self, magic: bytes) -> None:
        self.magic = magic
        shown = ", ".join(f"{byte:X}" for byte in magic)
        super().__init__(f"Invalid magic of PCK file: [{shown}]")


class PckAssertionError(PckError):
    """A consistency check on the package header failed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Assertion failed: {message}")


@dataclass
class PckWemEntry:
    """Location of one embedded audio file."""

    id: int
    one: int
    length: int
    offset: int
    language_id: int

    SIZE: ClassVar[int] = 20
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<5I")

    @classmethod
    def read(cls, stream: BinaryIO) -> "PckWemEntry":
        return cls(*cls._LAYOUT.unpack(read_exact(stream, cls.SIZE)))

    def to_bytes(self) -> bytes:
        return self._LAYOUT.pack(
            self.id, self.one, self.length, self.offset, self.language_id
        )


@dataclass
class PckString:
    """An entry of the language string table."""

    index: int
    value: str


@dataclass
class PckHeader:
    """The header of a package: string table, bank table and audio entries."""

    header_length: int = 0
    unk2: int = 0
    string_table: list[PckString] = field(default_factory=list)
    bnk_table_data: list[int] = field(default_factory=list)
    wem_entries: list[PckWemEntry] = field(default_factory=list)
    unk_struct_data: list[int] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "PckHeader":
        magic = read_exact(stream, 4)
        if magic != MAGIC:
            raise InvalidMagicError(magic)
        (
            header_length,
            unk2,
            language_length,
            bnk_table_length,
            _wem_table_length,
            unk_struct_length,
        ) = read_struct(stream, "6I")

        string_start = stream.tell()
        (string_count,) = read_struct(stream, "I")
        string_entries = [read_struct(stream, "2I") for _ in range(string_count)]
        string_table = []
        for offset, index in string_entries:
            stream.seek(string_start + offset)
            string_table.append(PckString(index, read_utf16_string(stream)))
        stream.seek(string_start + language_length)

        bnk_table_data = list(read_struct(stream, f"{bnk_table_length // 4}I"))

        (wem_count,) = read_struct(stream, "I")
        wem_entries = []
        for _ in range(wem_count):
            entry = PckWemEntry.read(stream)
            if entry.one != 1:
                raise PckAssertionError("PckWemEntry.one != 1")
            wem_entries.append(entry)

        unk_struct_data = list(read_struct(stream, f"{unk_struct_length // 4}I"))

        return cls(
            header_length=header_length,
            unk2=unk2,
            string_table=string_table,
            bnk_table_data=bnk_table_data,
            wem_entries=wem_entries,
            unk_struct_data=unk_struct_data,
        )

    def wem_reader(self, stream: BinaryIO, index: int) -> Optional["PckWemReader"]:
        """Return a reader over the audio file at ``index``, or None if there is none."""
        if not 0 <= index < len(self.wem_entries):
            return None
        return PckWemReader(stream, self.wem_entries[index])

    def write(self, stream: BinaryIO) -> None:
        """Write the header, recomputing every length field."""
        base = stream.tell()
        stream.write(MAGIC)
        write_struct(stream, "6I", 0, self.unk2, 0, 0, 0, 0)

        language_size = measure_written(stream, self._write_strings)

        write_struct(stream, f"{len(self.bnk_table_data)}I", *self.bnk_table_data)
        write_struct(stream, "I", len(self.wem_entries))
        for entry in self.wem_entries:
            stream.write(entry.to_bytes())
        write_struct(stream, f"{len(self.unk_struct_data)}I", *self.unk_struct_data)

        bnk_table_size = self.bnk_table_size()
        wem_table_size = self.wem_table_size()
        unk_struct_size = self.unk_struct_size()
        header_size = (
            _FIXED_HEADER_FIELDS_SIZE
            + language_size
            + bnk_table_size
            + wem_table_size
            + unk_struct_size
        )
        end = stream.tell()

        stream.seek(base + 4)
        write_struct(stream, "I", header_size)
        stream.seek(base + 12)
        write_struct(
            stream, "4I", language_size, bnk_table_size, wem_table_size, unk_struct_size
        )
        stream.seek(end)

    def _write_strings(self, stream: BinaryIO) -> None:
        encoded = [utf16_string_bytes(string.value) for string in self.string_table]
        write_struct(stream, "I", len(self.string_table))
        offset = _U32_SIZE + _STRING_ENTRY_SIZE * len(self.string_table)
        for data, string in zip(encoded, self.string_table):
            write_struct(stream, "2I", offset, string.index)
            offset += len(data)
        for data in encoded:
            stream.write(data)

    def wem_offset_start(self) -> int:
        """Offset of the first byte after the header (magic and length included)."""
        return self.header_size() + 8

    def header_size(self) -> int:
        return (
            self.bnk_table_size()
            + self.wem_table_size()
            + self.unk_struct_size()
            + self.language_size()
            + _FIXED_HEADER_FIELDS_SIZE
        )

    def bnk_table_size(self) -> int:
        return len(self.bnk_table_data) * _U32_SIZE

    def wem_table_size(self) -> int:
        return _U32_SIZE + len(self.wem_entries) * PckWemEntry.SIZE

    def unk_struct_size(self) -> int:
        return len(self.unk_struct_data) * _U32_SIZE

    def language_size(self) -> int:
        strings = sum(len(utf16_string_bytes(s.value)) for s in self.string_table)
        return strings + _U32_SIZE + len(self.string_table) * _STRING_ENTRY_SIZE


class PckWemReader(io.RawIOBase):
    """A readable stream over one audio file embedded in a package."""

    def __init__(self, stream: BinaryIO, entry: PckWemEntry) -> None:
        super().__init__()
        self._stream = stream
        self.entry = entry
        self._read_size = 0

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        if self._read_size == 0:
            self._stream.seek(self.entry.offset)
        available = self.entry.length - self._read_size
        if available == 0:
            return 0
        if len(view) > available:
            data = read_exact(self._stream, available)
        else:
            data = self._stream.read(len(view))
        size = len(data)
        view[:size] = data
        self._read_size += size
        return size