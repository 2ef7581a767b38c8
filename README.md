# resound

A small pure-Python library for reading and writing Wwise audio containers:

- **BNK** sound banks (`resound.bnk`): `BKHD`, `DIDX`, `DATA` and `HIRC`
  sections are parsed, and any other section is kept as raw bytes.
- **PCK** packages (`resound.pck`): the `AKPK` header with its language string
  table, bank table and the table of embedded WEM entries.

Inside a `HIRC` section, sounds, events, event actions, music segments, music
tracks and music random/sequence containers are parsed into dataclasses
(`resound.hirc`, `resound.music_segment`, `resound.music_track`,
`resound.music_ran_seq_cntr`, with shared node parameters in
`resound.hirc_common`). Every other object type, and any unknown type value,
is kept as an `HircUnmanagedEntry` holding its raw bytes.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

## Reading and rewriting a sound bank

```python
from resound.bnk import Bnk, HircPayload

with open("bank.bnk", "rb") as f:
    bank = Bnk.read(f)

print(bank.sections[0].magic)   # e.g. b"BKHD"

for section in bank.sections:
    if isinstance(section.payload, HircPayload):
        for entry in section.payload.entries:
            print(entry.entry_type, entry.id, type(entry.payload).__name__)

data = bank.to_bytes()
```

A `Bnk` is a list of `Section` objects, each with its `magic`,
`section_length` and a payload: `BkhdPayload`, `DidxPayload` (a list of
`DidxEntry`), `HircPayload` (a list of `HircEntry`), `DataPayload` (one
`bytes` item per index entry) or `UnknownPayload`.

`Bnk.from_bytes(data)` parses a bank held in memory, and `Bnk.write(stream)`
writes to any seekable binary stream. When writing, section lengths and HIRC
entry lengths are recalculated, as are derived counts such as an event
action's parameter count and a music container's recursive playlist item
count. Media in a `DATA` section is placed at the offsets given by the
preceding `DIDX` index, and the section keeps its recorded length, so padding
is preserved.

### Errors

Problems in bank data raise exceptions from `resound.errors`, all derived
from `BnkError`:

- `MissingDidxError` when a `DATA` section comes before any `DIDX` index;
- `UnknownEventActionScopeError` for an event action with an unknown scope;
- `BadDataSizeError` when a parsed music object does not take up exactly the
  length its entry declares;
- `FormatAssertionError` for other failed consistency checks, such as an
  unknown enumeration value or a playlist item count that does not add up.

A stream that ends in the middle of a structure raises `EOFError`.

## Extracting WEM files from a package

```python
from resound.pck import PckHeader

with open("sounds.pck", "rb") as f:
    header = PckHeader.read(f)
    for index, entry in enumerate(header.wem_entries):
        reader = header.wem_reader(f, index)
        with open(f"{entry.id}.wem", "wb") as out:
            out.write(reader.read())
```

`PckHeader.wem_reader` returns `None` for an index outside the entry table.
The `PckWemReader` it returns is a standard readable binary stream limited to
that entry's bytes. `PckHeader.write(stream)` writes the header with all its
length fields recalculated, and `PckHeader.wem_offset_start()` gives the
offset just past the header.

A file that does not start with `AKPK` raises `InvalidMagicError`, and an
entry that fails the header's consistency check raises `PckAssertionError`;
both derive from `PckError`.

## Lower-level helpers

`resound.binio` holds the little-endian helpers the readers are built on:
`read_exact`, `read_struct`, `write_struct`, `read_utf16_string`,
`utf16_string_bytes`, `read_null_string`, `null_string_bytes` and
`measure_written`.

## What it does not do

- There is no command-line tool; the package is a library only.
- WEM audio is extracted as stored bytes; it is not decoded or converted.
- `PckHeader.write` writes only the header, not the WEM data that follows it.
- HIRC object types other than those listed above are not interpreted.

## Running the tests

```
pip install .[test]
pytest
```