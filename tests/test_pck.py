import io
import struct

import pytest

from resound.pck import (
    InvalidMagicError,
    PckAssertionError,
    PckError,
    PckHeader,
    PckString,
    PckWemEntry,
    PckWemReader,
)


def _wem_payload(i):
    return b"RIFF" + bytes([i % 256]) * (i % 7 + 4)


def _build_header(wem_count, strings=None):
    strings = strings if strings is not None else [PckString(0, "sfx")]
    payloads = [_wem_payload(i) for i in range(wem_count)]
    entries = [
        PckWemEntry(id=1000 + i, one=1, length=len(p), offset=0, language_id=0)
        for i, p in enumerate(payloads)
    ]
    header = PckHeader(
        header_length=0,
        unk2=1,
        string_table=strings,
        bnk_table_data=[0],
        wem_entries=entries,
        unk_struct_data=[0],
    )
    offset = header.wem_offset_start()
    for entry, payload in zip(entries, payloads):
        entry.offset = offset
        offset += len(payload)
    return header, payloads


def _build_file(wem_count=333, strings=None):
    header, payloads = _build_header(wem_count, strings)
    stream = io.BytesIO()
    header.write(stream)
    for entry, payload in zip(header.wem_entries, payloads):
        stream.seek(entry.offset)
        stream.write(payload)
    return stream.getvalue(), header, payloads


def test_pck_from_reader():
    data, _, _ = _build_file()
    pck = PckHeader.read(io.BytesIO(data))
    assert len(pck.wem_entries) == 333
    assert pck.language_size() == 20
    assert pck.bnk_table_size() == 4
    assert pck.wem_table_size() == 6664
    assert pck.unk_struct_size() == 4
    assert pck.header_size() == 6712
    assert pck.wem_offset_start() == 6720
    assert pck.header_length == 6712
    for i, entry in enumerate(pck.wem_entries):
        reader = pck.wem_reader(io.BytesIO(data), i)
        buf = reader.read()
        assert len(buf) == entry.length
        assert buf[:4] == b"RIFF"


def test_written_header_ends_at_wem_offset_start():
    header, _ = _build_header(5)
    stream = io.BytesIO()
    header.write(stream)
    written = stream.getvalue()
    assert len(written) == header.wem_offset_start()
    assert written[:4] == b"AKPK"
    (header_length,) = struct.unpack_from("<I", written, 4)
    assert header_length == header.header_size()
    assert stream.tell() == len(written)


def test_length_fields_match_sections():
    header, _ = _build_header(3)
    stream = io.BytesIO()
    header.write(stream)
    fields = struct.unpack_from("<6I", stream.getvalue(), 4)
    assert fields == (
        header.header_size(),
        header.unk2,
        header.language_size(),
        header.bnk_table_size(),
        header.wem_table_size(),
        header.unk_struct_size(),
    )


def test_header_round_trip():
    strings = [PckString(0, "sfx"), PckString(3, "日本語"), PckString(7, "")]
    data, header, payloads = _build_file(12, strings)
    parsed = PckHeader.read(io.BytesIO(data))
    assert parsed.string_table == strings
    assert parsed.wem_entries == header.wem_entries
    assert parsed.bnk_table_data == header.bnk_table_data
    assert parsed.unk_struct_data == header.unk_struct_data
    rewritten = io.BytesIO()
    parsed.write(rewritten)
    assert rewritten.getvalue() == data[: parsed.wem_offset_start()]
    for i, payload in enumerate(payloads):
        assert parsed.wem_reader(io.BytesIO(data), i).read() == payload


def test_wem_entry_bytes_round_trip():
    entry = PckWemEntry(id=7, one=1, length=99, offset=4096, language_id=2)
    raw = entry.to_bytes()
    assert len(raw) == PckWemEntry.SIZE
    assert PckWemEntry.read(io.BytesIO(raw)) == entry


def test_wem_reader_out_of_range_is_none():
    header, _ = _build_header(2)
    assert header.wem_reader(io.BytesIO(), 2) is None
    assert header.wem_reader(io.BytesIO(), -1) is None


def test_wem_reader_small_chunks_stop_at_length():
    data = b"xxxxRIFFabcdefyyyy"
    entry = PckWemEntry(id=1, one=1, length=10, offset=4, language_id=0)
    reader = PckWemReader(io.BytesIO(data), entry)
    chunks = []
    while chunk := reader.read(3):
        chunks.append(chunk)
    assert b"".join(chunks) == b"RIFFabcdef"
    assert reader.read(3) == b""


def test_wem_reader_large_buffer_reads_only_entry():
    data = b"RIFF1234" + b"trailing"
    entry = PckWemEntry(id=1, one=1, length=8, offset=0, language_id=0)
    reader = PckWemReader(io.BytesIO(data), entry)
    assert reader.read(100) == b"RIFF1234"
    assert reader.read(100) == b""


def test_wem_reader_truncated_data_raises():
    entry = PckWemEntry(id=1, one=1, length=50, offset=0, language_id=0)
    reader = PckWemReader(io.BytesIO(b"RIFF"), entry)
    with pytest.raises(EOFError):
        reader.read(100)


def test_invalid_magic():
    with pytest.raises(InvalidMagicError) as info:
        PckHeader.read(io.BytesIO(b"BKHD" + bytes(64)))
    assert info.value.magic == b"BKHD"
    assert isinstance(info.value, PckError)


def test_entry_with_wrong_one_field():
    header, _ = _build_header(1)
    header.wem_entries[0].one = 2
    stream = io.BytesIO()
    header.write(stream)
    with pytest.raises(PckAssertionError) as info:
        PckHeader.read(io.BytesIO(stream.getvalue()))
    assert "PckWemEntry.one != 1" in str(info.value)


def test_truncated_header_raises_eof():
    data, _, _ = _build_file(4)
    with pytest.raises(EOFError):
        PckHeader.read(io.BytesIO(data[:40]))


def test_empty_header_sizes():
    header = PckHeader()
    assert header.language_size() == 4
    assert header.wem_table_size() == 4
    assert header.header_size() == 28
    stream = io.BytesIO()
    header.write(stream)
    assert len(stream.getvalue()) == header.wem_offset_start()
    parsed = PckHeader.read(io.BytesIO(stream.getvalue()))
    assert parsed.string_table == []
    assert parsed.wem_entries == []