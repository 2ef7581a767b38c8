"""Music segment hierarchy objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar

from .binio import null_string_bytes, read_null_string, read_struct, write_struct
from .hirc_common import NodeBaseParams, _FixedLayout, _read_sized


@dataclass
class Children:
    children: list[int] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "Children":
        (count,) = read_struct(stream, "I")
        return cls(list(read_struct(stream, f"{count}I")))

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "I", len(self.children))
        write_struct(stream, f"{len(self.children)}I", *self.children)


@dataclass
class AkMeterInfo(_FixedLayout):
    grid_period: float = 0.0
    grid_offset: float = 0.0
    tempo: float = 0.0
    time_sig_num_beats_bar: int = 0
    time_sig_beat_value: int = 0

    _FORMAT: ClassVar[str] = "ddfBB"


@dataclass
class CAkStinger(_FixedLayout):
    trigger_id: int = 0
    segment_id: int = 0
    sync_play_at: int = 0
    cue_filter_hash: int = 0
    dont_repeat_time: int = 0
    num_segment_look_ahead: int = 0

    _FORMAT: ClassVar[str] = "4IiI"


@dataclass
class AkMusicMarkerWwise:
    id: int = 0
    position: float = 0.0
    marker_name: str = ""

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkMusicMarkerWwise":
        marker_id, position = read_struct(stream, "Id")
        return cls(marker_id, position, read_null_string(stream))

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "Id", self.id, self.position)
        stream.write(null_string_bytes(self.marker_name))


@dataclass
class MusicNodeParams:
    """Parameters common to all music nodes."""

    flags: int = 0
    node_base_params: NodeBaseParams = field(default_factory=NodeBaseParams)
    children: Children = field(default_factory=Children)
    meter_info: AkMeterInfo = field(default_factory=AkMeterInfo)
    meter_info_flag: int = 0
    stingers: list[CAkStinger] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "MusicNodeParams":
        (flags,) = read_struct(stream, "B")
        node_base_params = NodeBaseParams.read(stream)
        children = Children.read(stream)
        meter_info = AkMeterInfo.read(stream)
        meter_info_flag, count = read_struct(stream, "BI")
        stingers = [CAkStinger.read(stream) for _ in range(count)]
        return cls(
            flags, node_base_params, children, meter_info, meter_info_flag, stingers
        )

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "B", self.flags)
        self.node_base_params.write(stream)
        self.children.write(stream)
        self.meter_info.write(stream)
        write_struct(stream, "BI", self.meter_info_flag, len(self.stingers))
        for stinger in self.stingers:
            stinger.write(stream)


@dataclass
class MusicSegmentInitialValues:
    music_node_params: MusicNodeParams = field(default_factory=MusicNodeParams)
    duration: float = 0.0
    markers: list[AkMusicMarkerWwise] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "MusicSegmentInitialValues":
        params = MusicNodeParams.read(stream)
        duration, count = read_struct(stream, "dI")
        markers = [AkMusicMarkerWwise.read(stream) for _ in range(count)]
        return cls(params, duration, markers)

    def write(self, stream: BinaryIO) -> None:
        self.music_node_params.write(stream)
        write_struct(stream, "dI", self.duration, len(self.markers))
        for marker in self.markers:
            marker.write(stream)


@dataclass
class HircMusicSegment:
    """Payload of a music segment entry."""

    initial_values: MusicSegmentInitialValues = field(
        default_factory=MusicSegmentInitialValues
    )

    @classmethod
    def read(cls, stream: BinaryIO, length: int) -> "HircMusicSegment":
        """Read the payload; ``length`` counts the entry id as well."""
        values = _read_sized(
            stream, length, "MusicSegment", MusicSegmentInitialValues.read
        )
        return cls(values)

    def write(self, stream: BinaryIO) -> None:
        self.initial_values.write(stream)

    def fix_values(self) -> None:
        """Normalise the duration and marker positions to floats."""
        values = self.initial_values
        values.duration = float(values.duration)
        for marker in values.markers:
            marker.position = float(marker.position)