"""Music track hierarchy objects."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar, Optional

from .binio import read_struct, write_struct
from .hirc_common import (
    AkRTPCGraphPoint,
    NodeBaseParams,
    _FixedLayout,
    _read_enum,
    _read_sized,
)


class AkMusicTrackType(enum.IntEnum):
    NORMAL = 0x0
    RANDOM = 0x1
    SEQUENCE = 0x2
    SWITCH = 0x3


@dataclass
class AkMediaInformation(_FixedLayout):
    source_id: int = 0
    in_memory_media_size: int = 0
    source_bits: int = 0

    _FORMAT: ClassVar[str] = "IIB"


@dataclass
class AkBankSourceData:
    plugin_id: int = 0
    stream_type: int = 0
    media_information: AkMediaInformation = field(default_factory=AkMediaInformation)

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkBankSourceData":
        plugin_id, stream_type = read_struct(stream, "IB")
        return cls(plugin_id, stream_type, AkMediaInformation.read(stream))

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "IB", self.plugin_id, self.stream_type)
        self.media_information.write(stream)


@dataclass
class AkTrackSrcInfo(_FixedLayout):
    track_id: int = 0
    source_id: int = 0
    event_id: int = 0
    play_at: float = 0.0
    begin_trim_offset: float = 0.0
    end_trim_offset: float = 0.0
    src_duration: float = 0.0

    _FORMAT: ClassVar[str] = "3I4d"


@dataclass
class AkClipAutomation:
    clip_index: int = 0
    auto_type: int = 0
    graph_points: list[AkRTPCGraphPoint] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkClipAutomation":
        clip_index, auto_type, count = read_struct(stream, "3I")
        points = [AkRTPCGraphPoint.read(stream) for _ in range(count)]
        return cls(clip_index, auto_type, points)

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream, "3I", self.clip_index, self.auto_type, len(self.graph_points)
        )
        for point in self.graph_points:
            point.write(stream)


@dataclass
class TrackSwitchAssoc(_FixedLayout):
    switch_assoc: int = 0

    _FORMAT: ClassVar[str] = "I"


@dataclass
class SwitchParams:
    group_type: int = 0
    group_id: int = 0
    default_switch: int = 0
    switch_assoc: list[TrackSwitchAssoc] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "SwitchParams":
        group_type, group_id, default_switch, count = read_struct(stream, "BIII")
        assoc = [TrackSwitchAssoc.read(stream) for _ in range(count)]
        return cls(group_type, group_id, default_switch, assoc)

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream,
            "BIII",
            self.group_type,
            self.group_id,
            self.default_switch,
            len(self.switch_assoc),
        )
        for assoc in self.switch_assoc:
            assoc.write(stream)


@dataclass
class FadeParams(_FixedLayout):
    transition_time: int = 0
    fade_curve: int = 0
    fade_offset: int = 0

    _FORMAT: ClassVar[str] = "iIi"


@dataclass
class TransParams:
    src_fade_params: FadeParams = field(default_factory=FadeParams)
    sync_type: int = 0
    cue_filter_hash: int = 0
    dest_fade_params: FadeParams = field(default_factory=FadeParams)

    @classmethod
    def read(cls, stream: BinaryIO) -> "TransParams":
        src = FadeParams.read(stream)
        sync_type, cue_filter_hash = read_struct(stream, "2I")
        return cls(src, sync_type, cue_filter_hash, FadeParams.read(stream))

    def write(self, stream: BinaryIO) -> None:
        self.src_fade_params.write(stream)
        write_struct(stream, "2I", self.sync_type, self.cue_filter_hash)
        self.dest_fade_params.write(stream)


@dataclass
class MusicTrackInitialValues:
    """Track body; the sub-track count exists only when there is a playlist."""

    flags: int = 0
    sources: list[AkBankSourceData] = field(default_factory=list)
    playlist: list[AkTrackSrcInfo] = field(default_factory=list)
    num_sub_track: int = 0
    clip_automations: list[AkClipAutomation] = field(default_factory=list)
    node_base_params: NodeBaseParams = field(default_factory=NodeBaseParams)
    track_type: AkMusicTrackType = AkMusicTrackType.NORMAL
    switch_params: Optional[SwitchParams] = None
    trans_params: Optional[TransParams] = None
    look_ahead_time: int = 0

    @classmethod
    def read(cls, stream: BinaryIO) -> "MusicTrackInitialValues":
        flags, num_sources = read_struct(stream, "BI")
        sources = [AkBankSourceData.read(stream) for _ in range(num_sources)]
        (num_playlist,) = read_struct(stream, "I")
        playlist = [AkTrackSrcInfo.read(stream) for _ in range(num_playlist)]
        num_sub_track = read_struct(stream, "I")[0] if num_playlist > 0 else 0
        (num_clips,) = read_struct(stream, "I")
        clips = [AkClipAutomation.read(stream) for _ in range(num_clips)]
        node_base_params = NodeBaseParams.read(stream)
        track_type = _read_enum(stream, AkMusicTrackType)
        switch_params = trans_params = None
        if track_type is AkMusicTrackType.SWITCH:
            switch_params = SwitchParams.read(stream)
            trans_params = TransParams.read(stream)
        (look_ahead_time,) = read_struct(stream, "i")
        return cls(
            flags=flags,
            sources=sources,
            playlist=playlist,
            num_sub_track=num_sub_track,
            clip_automations=clips,
            node_base_params=node_base_params,
            track_type=track_type,
            switch_params=switch_params,
            trans_params=trans_params,
            look_ahead_time=look_ahead_time,
        )

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "BI", self.flags, len(self.sources))
        for source in self.sources:
            source.write(stream)
        write_struct(stream, "I", len(self.playlist))
        for item in self.playlist:
            item.write(stream)
        if self.playlist:
            write_struct(stream, "I", self.num_sub_track)
        write_struct(stream, "I", len(self.clip_automations))
        for clip in self.clip_automations:
            clip.write(stream)
        self.node_base_params.write(stream)
        write_struct(stream, "B", self.track_type)
        if self.track_type == AkMusicTrackType.SWITCH:
            if self.switch_params is not None:
                self.switch_params.write(stream)
            if self.trans_params is not None:
                self.trans_params.write(stream)
        write_struct(stream, "i", self.look_ahead_time)


@dataclass
class HircMusicTrack:
    """Payload of a music track entry."""

    initial_values: MusicTrackInitialValues = field(
        default_factory=MusicTrackInitialValues
    )

    @classmethod
    def read(cls, stream: BinaryIO, length: int) -> "HircMusicTrack":
        """Read the payload; ``length`` counts the entry id as well."""
        values = _read_sized(
            stream, length, "MusicTrackInitialValues", MusicTrackInitialValues.read
        )
        return cls(values)

    def write(self, stream: BinaryIO) -> None:
        self.initial_values.write(stream)

    def fix_values(self) -> None:
        """Coerce the track type and drop switch data a non-switch track lacks."""
        values = self.initial_values
        values.track_type = AkMusicTrackType(values.track_type)
        if values.track_type is not AkMusicTrackType.SWITCH:
            values.switch_params = None
            values.trans_params = None