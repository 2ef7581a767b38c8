"""Hierarchy (HIRC) entries of a sound bank."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol, Union

from .binio import read_exact, read_struct, write_struct
from .errors import UnknownEventActionScopeError
from .hirc_common import _read_enum
from .music_ran_seq_cntr import HircMusicRanSeqCntr
from .music_segment import HircMusicSegment
from .music_track import HircMusicTrack

# Bytes of an entry counted by its length field before any payload: the id.
_ID_SIZE = 4
# id + scope + action type + game object id + unk1 + parameter count + unk2
_EVENT_ACTION_FIXED_SIZE = 13
# id + the fixed fields of a sound entry
_SOUND_FIXED_SIZE = 31


class HircEntryType(enum.IntEnum):
    SETTINGS = 1
    SOUND = 2
    EVENT_ACTION = 3
    EVENT = 4
    RANDOM_OR_SEQUENCE_CONTAINER = 5
    SWITCH_CONTAINER = 6
    ACTOR_MIXER = 7
    AUDIO_BUS = 8
    BLEND_CONTAINER = 9
    MUSIC_SEGMENT = 10
    MUSIC_TRACK = 11
    MUSIC_SWITCH_CONTAINER = 12
    MUSIC_RAN_SEQ_CNTR = 13
    ATTENUATION = 14
    DIALOGUE_EVENT = 15
    MOTION_BUS = 16
    MOTION_FX = 17
    EFFECT = 18
    AUXILIARY_BUS = 20


class HircSoundType(enum.IntEnum):
    SFX = 0
    VOICE = 1


class HircEventActionScope(enum.IntEnum):
    SWITCH_OR_TRIGGER = 1
    GLOBAL = 2
    GAME_OBJECT = 3
    STATE = 4
    ALL = 5
    ALL_EXCEPT = 6


class HircEventActionType(enum.IntEnum):
    STOP = 1
    PAUSE = 2
    RESUME = 3
    PLAY = 4
    TRIGGER = 5
    MUTE = 6
    UN_MUTE = 7
    SET_VOICE_PITCH = 8
    RESET_VOICE_PITCH = 9
    SET_VOICE_VOLUME = 10
    RESET_VOICE_VOLUME = 11
    SET_BUS_VOLUME = 12
    RESET_BUS_VOLUME = 13
    SET_VOICE_LOW_PASS_FILTER = 14
    RESET_VOICE_LOW_PASS_FILTER = 15
    ENABLE_STATE = 16
    DISABLE_STATE = 17
    SET_STATE = 18
    SET_GAME_PARAMETER = 19
    RESET_GAME_PARAMETER = 20
    SET_SWITCH = 21
    TOGGLE_BYPASS = 22
    RESET_BYPASS_EFFECT = 23
    BREAK = 24
    SEEK = 25


class HircEventActionParameterType(enum.IntEnum):
    DELAY = 0x0E
    PARAM_PLAY = 0x0F
    PROBABILITY = 0x10


def _known_or_raw(enum_type, value: int):
    try:
        return enum_type(value)
    except ValueError:
        return value


def entry_type_from_value(value: int) -> Union[HircEntryType, int]:
    """Return the known entry type for ``value``, or the raw value if unknown."""
    return _known_or_raw(HircEntryType, value)


class _Payload(Protocol):
    def write(self, stream: BinaryIO) -> None: ...

    def fix_values(self) -> None: ...


@dataclass
class HircUnmanagedEntry:
    """An entry payload kept as raw bytes."""

    data: bytes = b""

    @classmethod
    def read(cls, stream: BinaryIO, length: int) -> "HircUnmanagedEntry":
        return cls(read_exact(stream, length - _ID_SIZE))

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.data)

    def fix_values(self) -> None:
        """Store the raw data as immutable bytes."""
        self.data = bytes(self.data)


@dataclass
class HircSound:
    unk1: int = 0
    unk2: int = 0
    state: int = 0
    audio_id: int = 0
    source_id: int = 0
    sound_type: HircSoundType = HircSoundType.SFX
    unk3: int = 0
    unk4: int = 0
    game_object_id: int = 0
    data: bytes = b""

    @classmethod
    def read(cls, stream: BinaryIO, length: int) -> "HircSound":
        unk1, unk2, state, audio_id, source_id = read_struct(stream, "IB3I")
        sound_type = _read_enum(stream, HircSoundType)
        unk3, unk4, game_object_id = read_struct(stream, "IBI")
        data = read_exact(stream, length - _SOUND_FIXED_SIZE)
        return cls(
            unk1,
            unk2,
            state,
            audio_id,
            source_id,
            sound_type,
            unk3,
            unk4,
            game_object_id,
            data,
        )

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream,
            "IB3IBIBI",
            self.unk1,
            self.unk2,
            self.state,
            self.audio_id,
            self.source_id,
            self.sound_type,
            self.unk3,
            self.unk4,
            self.game_object_id,
        )
        stream.write(self.data)

    def fix_values(self) -> None:
        """Coerce the sound type to a known value and the data to bytes."""
        self.sound_type = HircSoundType(self.sound_type)
        self.data = bytes(self.data)


@dataclass
class HircEventAction:
    scope: HircEventActionScope = HircEventActionScope.GLOBAL
    action_type: Union[HircEventActionType, int] = HircEventActionType.PLAY
    game_object_id: int = 0
    unk1: int = 0
    parameter_count: int = 0
    parameter_types: list[Union[HircEventActionParameterType, int]] = field(
        default_factory=list
    )
    parameters: bytes = b""
    unk2: int = 0
    data: bytes = b""

    @classmethod
    def read(cls, stream: BinaryIO, length: int) -> "HircEventAction":
        (scope_value,) = read_struct(stream, "B")
        try:
            scope = HircEventActionScope(scope_value)
        except ValueError:
            raise UnknownEventActionScopeError(stream.tell(), scope_value) from None
        (action_value, game_object_id, unk1, count) = read_struct(stream, "BIBB")
        parameter_types = [
            _known_or_raw(HircEventActionParameterType, value)
            for value in read_exact(stream, count)
        ]
        parameters = read_exact(stream, count)
        (unk2,) = read_struct(stream, "B")
        data = read_exact(stream, length - _EVENT_ACTION_FIXED_SIZE - 2 * count)
        return cls(
            scope=scope,
            action_type=_known_or_raw(HircEventActionType, action_value),
            game_object_id=game_object_id,
            unk1=unk1,
            parameter_count=count,
            parameter_types=parameter_types,
            parameters=parameters,
            unk2=unk2,
            data=data,
        )

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream,
            "BBIBB",
            self.scope,
            int(self.action_type),
            self.game_object_id,
            self.unk1,
            self.parameter_count,
        )
        stream.write(bytes(int(kind) for kind in self.parameter_types))
        stream.write(self.parameters)
        write_struct(stream, "B", self.unk2)
        stream.write(self.data)

    def fix_values(self) -> None:
        """Derive the parameter count from the parameter types."""
        self.parameter_count = len(self.parameter_types)
        self.parameters = bytes(self.parameters)


@dataclass
class HircEvent:
    """An event: the list of actions it triggers."""

    action_ids: list[int] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO, length: int) -> "HircEvent":
        # Banks of version 134 and later store the count as one byte.
        (count,) = read_struct(stream, "B")
        return cls(list(read_struct(stream, f"{count}I")))

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "B", len(self.action_ids))
        write_struct(stream, f"{len(self.action_ids)}I", *self.action_ids)

    def fix_values(self) -> None:
        """Store the action ids as a plain list of integers."""
        self.action_ids = [int(action_id) for action_id in self.action_ids]


_PAYLOAD_TYPES = {
    HircEntryType.SOUND: HircSound,
    HircEntryType.EVENT_ACTION: HircEventAction,
    HircEntryType.EVENT: HircEvent,
    HircEntryType.MUSIC_SEGMENT: HircMusicSegment,
    HircEntryType.MUSIC_TRACK: HircMusicTrack,
    HircEntryType.MUSIC_RAN_SEQ_CNTR: HircMusicRanSeqCntr,
}

HircPayloadType = Union[
    HircUnmanagedEntry,
    HircSound,
    HircEventAction,
    HircEvent,
    HircMusicSegment,
    HircMusicTrack,
    HircMusicRanSeqCntr,
]


@dataclass
class HircEntry:
    """One hierarchy object: its type, declared length, id and payload."""

    entry_type: Union[HircEntryType, int]
    length: int
    id: int
    payload: HircPayloadType

    @classmethod
    def read(cls, stream: BinaryIO, entry_type) -> "HircEntry":
        """Read an entry whose type byte has already been consumed."""
        entry_type = entry_type_from_value(int(entry_type))
        length, entry_id = read_struct(stream, "2I")
        payload_type = _PAYLOAD_TYPES.get(entry_type, HircUnmanagedEntry)
        payload = payload_type.read(stream, length)
        return cls(entry_type, length, entry_id, payload)

    def write(self, stream: BinaryIO) -> None:
        """Write the entry, type byte included, recomputing its length."""
        write_struct(stream, "BI", int(self.entry_type), 0)
        start = stream.tell()
        write_struct(stream, "I", self.id)
        payload: _Payload = self.payload
        payload.fix_values()
        payload.write(stream)
        end = stream.tell()
        self.length = end - start
        stream.seek(start - 4)
        write_struct(stream, "I", self.length)
        stream.seek(end)