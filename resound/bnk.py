"""Reading and writing of sound bank files made of tagged sections."""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar, Optional, Union

from .binio import read_exact, read_struct, write_struct
from .errors import BnkError, MissingDidxError
from .hirc import HircEntry

DATA_MAGIC = b"DATA"
_MAGIC_SIZE = 4


@dataclass
class DidxEntry:
    """Location of one embedded media file inside the DATA section."""

    id: int
    offset: int
    length: int

    SIZE: ClassVar[int] = 12
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<3I")

    @classmethod
    def read(cls, stream: BinaryIO) -> "DidxEntry":
        return cls(*cls._LAYOUT.unpack(read_exact(stream, cls.SIZE)))

    def to_bytes(self) -> bytes:
        return self._LAYOUT.pack(self.id, self.offset, self.length)


@dataclass
class BkhdPayload:
    """Bank header: version, bank id and the remaining bytes kept as is."""

    version: int = 0
    id: int = 0
    unknown: bytes = b""


@dataclass
class DidxPayload:
    """Media index."""

    entries: list[DidxEntry] = field(default_factory=list)


@dataclass
class HircPayload:
    """Hierarchy objects."""

    entries: list[HircEntry] = field(default_factory=list)


@dataclass
class DataPayload:
    """Media data, one item per index entry."""

    data_list: list[bytes] = field(default_factory=list)


@dataclass
class UnknownPayload:
    """A section whose content is kept as raw bytes."""

    data: bytes = b""


SectionPayload = Union[
    BkhdPayload, DidxPayload, HircPayload, DataPayload, UnknownPayload
]


@dataclass
class Section:
    """A tagged section of a bank."""

    magic: bytes
    section_length: int
    payload: SectionPayload

    @classmethod
    def read(cls, stream: BinaryIO, magic: bytes) -> "Section":
        """Read a section whose magic has already been consumed.

        DATA sections depend on the media index and are read by :class:`Bnk`.
        """
        magic = bytes(magic)
        if magic == DATA_MAGIC:
            raise ValueError("DATA sections must be read through Bnk.read")
        (section_length,) = read_struct(stream, "I")
        payload: SectionPayload
        if magic == b"BKHD":
            version, bank_id = read_struct(stream, "2I")
            payload = BkhdPayload(
                version, bank_id, read_exact(stream, section_length - 8)
            )
        elif magic == b"DIDX":
            count = section_length // DidxEntry.SIZE
            payload = DidxPayload([DidxEntry.read(stream) for _ in range(count)])
        elif magic == b"HIRC":
            (count,) = read_struct(stream, "I")
            entries = []
            for _ in range(count):
                (entry_type,) = read_struct(stream, "B")
                entries.append(HircEntry.read(stream, entry_type))
            payload = HircPayload(entries)
        else:
            payload = UnknownPayload(read_exact(stream, section_length))
        return cls(magic, section_length, payload)


def _first_didx(sections: list[Section]) -> list[DidxEntry]:
    for section in sections:
        if isinstance(section.payload, DidxPayload):
            return section.payload.entries
    raise MissingDidxError()


@dataclass
class Bnk:
    """A sound bank: an ordered list of sections."""

    sections: list[Section] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "Bnk":
        sections: list[Section] = []
        while True:
            magic = stream.read(_MAGIC_SIZE)
            if len(magic) < _MAGIC_SIZE:
                break
            if magic == DATA_MAGIC:
                sections.append(cls._read_data(stream, magic, sections))
            else:
                sections.append(Section.read(stream, magic))
        return cls(sections)

    @staticmethod
    def _read_data(
        stream: BinaryIO, magic: bytes, sections: list[Section]
    ) -> Section:
        (total_length,) = read_struct(stream, "I")
        entries = _first_didx(sections)
        start = stream.tell()
        data_list = []
        for entry in entries:
            stream.seek(start + entry.offset)
            data_list.append(read_exact(stream, entry.length))
        stream.seek(start + total_length)
        return Section(magic, total_length, DataPayload(data_list))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Bnk":
        return cls.read(io.BytesIO(data))

    def write(self, stream: BinaryIO) -> None:
        """Write every section, recomputing section and entry lengths."""
        didx_entries: Optional[list[DidxEntry]] = None
        for section in self.sections:
            stream.write(section.magic)
            write_struct(stream, "I", 0)
            start = stream.tell()
            payload = section.payload
            if isinstance(payload, BkhdPayload):
                write_struct(stream, "2I", payload.version, payload.id)
                stream.write(payload.unknown)
            elif isinstance(payload, DidxPayload):
                didx_entries = payload.entries
                for entry in payload.entries:
                    stream.write(entry.to_bytes())
            elif isinstance(payload, HircPayload):
                write_struct(stream, "I", len(payload.entries))
                for hirc_entry in payload.entries:
                    hirc_entry.write(stream)
            elif isinstance(payload, DataPayload):
                if didx_entries is None:
                    raise MissingDidxError()
                if len(payload.data_list) > len(didx_entries):
                    raise BnkError(
                        f"DATA section holds {len(payload.data_list)} items "
                        f"but the index has only {len(didx_entries)} entries"
                    )
                for data, entry in zip(payload.data_list, didx_entries):
                    stream.seek(start + entry.offset)
                    stream.write(data)
                # skip to the end of the trailing padding
                stream.seek(start + section.section_length)
            else:
                stream.write(payload.data)
            end = stream.tell()
            section.section_length = end - start
            stream.seek(start - 4)
            write_struct(stream, "I", section.section_length)
            stream.seek(end)

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.write(buffer)
        return buffer.getvalue()