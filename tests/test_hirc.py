import io
import struct

import pytest

from resound.errors import FormatAssertionError, UnknownEventActionScopeError
from resound.hirc import (
    HircEntry,
    HircEntryType,
    HircEvent,
    HircEventAction,
    HircEventActionParameterType,
    HircEventActionScope,
    HircEventActionType,
    HircSound,
    HircSoundType,
    HircUnmanagedEntry,
    entry_type_from_value,
)
from resound.music_ran_seq_cntr import AkMusicRanSeqPlaylistItem, HircMusicRanSeqCntr
from resound.music_track import HircMusicTrack

EVENT_ACTION_DATA = bytes(
    [
        0x1D, 0x00, 0x00, 0x00, 0x7F, 0x75, 0x27, 0x37, 0x03, 0x13, 0xF8, 0x2D, 0x14, 0x12,
        0x00, 0x00, 0x00, 0x04, 0x00, 0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00,
    ]
)


def _write(entry):
    out = io.BytesIO()
    entry.write(out)
    return out.getvalue()


def _read_back(data):
    stream = io.BytesIO(data)
    (kind,) = stream.read(1)
    return HircEntry.read(stream, kind)


def test_event_action():
    entry = HircEntry.read(io.BytesIO(EVENT_ACTION_DATA), HircEntryType.EVENT_ACTION)
    assert entry.entry_type is HircEntryType.EVENT_ACTION
    assert entry.length == 0x1D
    assert entry.id == 0x3727757F
    action = entry.payload
    assert isinstance(action, HircEventAction)
    assert action.scope is HircEventActionScope.GAME_OBJECT
    assert action.action_type is HircEventActionType.SET_GAME_PARAMETER
    assert action.game_object_id == 0x12142DF8
    assert action.parameter_count == 0
    assert action.parameter_types == []
    assert action.data == bytes([0x04, 0x00, 0x01]) + bytes(13)


def test_event_action_round_trip():
    entry = HircEntry.read(io.BytesIO(EVENT_ACTION_DATA), HircEntryType.EVENT_ACTION)
    assert _write(entry) == bytes([3]) + EVENT_ACTION_DATA


def test_event_action_with_parameters_round_trip():
    action = HircEventAction(
        scope=HircEventActionScope.ALL,
        action_type=0x40,
        game_object_id=7,
        parameter_count=2,
        parameter_types=[HircEventActionParameterType.DELAY, 0x33],
        parameters=b"\x01\x02",
        data=b"\xaa\xbb",
    )
    entry = HircEntry(HircEntryType.EVENT_ACTION, 0, 9, action)
    data = _write(entry)
    assert entry.length == 13 + 4 + 2
    back = _read_back(data)
    assert back.payload == action
    assert back.payload.action_type == 0x40
    assert back.payload.parameter_types[1] == 0x33


def test_unknown_event_action_scope():
    data = bytearray(EVENT_ACTION_DATA)
    data[8] = 0x07
    with pytest.raises(UnknownEventActionScopeError) as info:
        HircEntry.read(io.BytesIO(bytes(data)), HircEntryType.EVENT_ACTION)
    assert info.value.value == 7
    assert info.value.offset == 9


def test_sound_round_trip():
    extra = b"\x10\x20\x30"
    body = struct.pack("<IB3IBIBI", 1, 2, 3, 4, 5, 1, 6, 7, 8) + extra
    raw = struct.pack("<II", 31 + len(extra), 0xABCD) + body
    entry = HircEntry.read(io.BytesIO(raw), 2)
    sound = entry.payload
    assert isinstance(sound, HircSound)
    assert sound.sound_type is HircSoundType.VOICE
    assert (sound.state, sound.audio_id, sound.source_id) == (3, 4, 5)
    assert sound.game_object_id == 8
    assert sound.data == extra
    assert _write(entry) == bytes([2]) + raw


def test_sound_unknown_type_raises():
    body = struct.pack("<IB3IBIBI", 0, 0, 0, 0, 0, 9, 0, 0, 0)
    raw = struct.pack("<II", 31, 1) + body
    with pytest.raises(FormatAssertionError):
        HircEntry.read(io.BytesIO(raw), HircEntryType.SOUND)


def test_event_round_trip():
    raw = struct.pack("<IIB3I", 4 + 1 + 12, 55, 3, 10, 20, 30)
    entry = HircEntry.read(io.BytesIO(raw), HircEntryType.EVENT)
    assert entry.payload == HircEvent([10, 20, 30])
    assert _write(entry) == bytes([4]) + raw


def test_unknown_type_is_kept_raw():
    raw = struct.pack("<II", 7, 99) + b"abc"
    entry = HircEntry.read(io.BytesIO(raw), 19)
    assert entry.entry_type == 19
    assert entry.payload == HircUnmanagedEntry(b"abc")
    assert _write(entry) == bytes([19]) + raw


def test_length_is_recomputed():
    entry = HircEntry(HircEntryType.ACTOR_MIXER, 0, 1, HircUnmanagedEntry(b"12345"))
    data = _write(entry)
    assert entry.length == 9
    assert struct.unpack_from("<I", data, 1)[0] == 9
    assert data[0] == 7


def test_entry_type_from_value():
    assert entry_type_from_value(20) is HircEntryType.AUXILIARY_BUS
    assert entry_type_from_value(19) == 19
    assert not isinstance(entry_type_from_value(19), HircEntryType)


def test_music_track_dispatch_round_trip():
    entry = HircEntry(HircEntryType.MUSIC_TRACK, 0, 77, HircMusicTrack())
    data = _write(entry)
    back = _read_back(data)
    assert isinstance(back.payload, HircMusicTrack)
    assert back == entry


def test_music_ran_seq_cntr_fix_values_on_write():
    container = HircMusicRanSeqCntr()
    item = AkMusicRanSeqPlaylistItem(play_list=[AkMusicRanSeqPlaylistItem()])
    container.initial_values.play_list_items = [item]
    entry = HircEntry(HircEntryType.MUSIC_RAN_SEQ_CNTR, 0, 5, container)
    data = _write(entry)
    assert container.initial_values.num_play_list_items == 2
    back = _read_back(data)
    assert isinstance(back.payload, HircMusicRanSeqCntr)
    assert back.payload.initial_values.num_play_list_items == 2
    assert back == entry