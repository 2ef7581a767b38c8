"""Music random/sequence container hierarchy objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar

from .binio import read_struct, write_struct
from .errors import FormatAssertionError
from .hirc_common import _FixedLayout, _read_sized
from .music_segment import MusicNodeParams


@dataclass
class AkMusicTransSrcRule(_FixedLayout):
    transition_time: int = 0
    fade_curve: int = 0
    fade_offset: int = 0
    sync_type: int = 0
    cue_filter_hash: int = 0
    play_post_exit: int = 0

    _FORMAT: ClassVar[str] = "iIiIIB"


@dataclass
class AkMusicTransDstRule(_FixedLayout):
    transition_time: int = 0
    fade_curve: int = 0
    fade_offset: int = 0
    cue_filter_hash: int = 0
    jump_to_id: int = 0
    jump_to_type: int = 0
    entry_type: int = 0
    play_pre_entry: int = 0
    dest_match_source_cue_name: int = 0

    _FORMAT: ClassVar[str] = "iIiIIHHBB"


@dataclass
class AkMusicTransitionRule:
    num_src: int = 0
    src_id: int = 0
    num_dst: int = 0
    dst_id: int = 0
    src_rule: AkMusicTransSrcRule = field(default_factory=AkMusicTransSrcRule)
    dst_rule: AkMusicTransDstRule = field(default_factory=AkMusicTransDstRule)
    alloc_trans_object_flag: int = 0

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkMusicTransitionRule":
        ids = read_struct(stream, "4I")
        src_rule = AkMusicTransSrcRule.read(stream)
        dst_rule = AkMusicTransDstRule.read(stream)
        (flag,) = read_struct(stream, "B")
        return cls(*ids, src_rule, dst_rule, flag)

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream, "4I", self.num_src, self.src_id, self.num_dst, self.dst_id
        )
        self.src_rule.write(stream)
        self.dst_rule.write(stream)
        write_struct(stream, "B", self.alloc_trans_object_flag)


@dataclass
class MusicTransNodeParams:
    music_node_params: MusicNodeParams = field(default_factory=MusicNodeParams)
    rules: list[AkMusicTransitionRule] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "MusicTransNodeParams":
        params = MusicNodeParams.read(stream)
        (count,) = read_struct(stream, "I")
        return cls(params, [AkMusicTransitionRule.read(stream) for _ in range(count)])

    def write(self, stream: BinaryIO) -> None:
        self.music_node_params.write(stream)
        write_struct(stream, "I", len(self.rules))
        for rule in self.rules:
            rule.write(stream)


@dataclass
class AkMusicRanSeqPlaylistItem:
    """A playlist node; children follow their parent in the stream."""

    segment_id: int = 0
    play_list_item_id: int = 0
    rs_type: int = 0
    loop: int = 0
    loop_min: int = 0
    loop_max: int = 0
    weight: int = 0
    avoid_repeat_count: int = 0
    is_using_weight: int = 0
    is_shuffle: int = 0
    play_list: list["AkMusicRanSeqPlaylistItem"] = field(default_factory=list)

    _FORMAT: ClassVar[str] = "IiIIhhhIHBB"

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkMusicRanSeqPlaylistItem":
        (
            segment_id,
            item_id,
            num_children,
            rs_type,
            loop,
            loop_min,
            loop_max,
            weight,
            avoid_repeat_count,
            is_using_weight,
            is_shuffle,
        ) = read_struct(stream, cls._FORMAT)
        children = [cls.read(stream) for _ in range(num_children)]
        return cls(
            segment_id,
            item_id,
            rs_type,
            loop,
            loop_min,
            loop_max,
            weight,
            avoid_repeat_count,
            is_using_weight,
            is_shuffle,
            children,
        )

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream,
            self._FORMAT,
            self.segment_id,
            self.play_list_item_id,
            len(self.play_list),
            self.rs_type,
            self.loop,
            self.loop_min,
            self.loop_max,
            self.weight,
            self.avoid_repeat_count,
            self.is_using_weight,
            self.is_shuffle,
        )
        for child in self.play_list:
            child.write(stream)


def count_playlist_items(item: AkMusicRanSeqPlaylistItem) -> int:
    """Count ``item`` and all of its descendants."""
    return 1 + sum(count_playlist_items(child) for child in item.play_list)


@dataclass
class MusicRanSeqCntrInitialValues:
    music_trans_node_params: MusicTransNodeParams = field(
        default_factory=MusicTransNodeParams
    )
    # total number of playlist items, descendants included
    num_play_list_items: int = 0
    play_list_items: list[AkMusicRanSeqPlaylistItem] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "MusicRanSeqCntrInitialValues":
        params = MusicTransNodeParams.read(stream)
        (expected,) = read_struct(stream, "I")
        items = []
        while True:
            item = AkMusicRanSeqPlaylistItem.read(stream)
            count = count_playlist_items(item)
            items.append(item)
            if count == expected:
                break
            if count > expected:
                raise FormatAssertionError(
                    stream.tell(), "num_play_list_items is larger than expected"
                )
        return cls(params, expected, items)

    def write(self, stream: BinaryIO) -> None:
        self.music_trans_node_params.write(stream)
        write_struct(stream, "I", self.num_play_list_items)
        for item in self.play_list_items:
            item.write(stream)


@dataclass
class HircMusicRanSeqCntr:
    """Payload of a music random/sequence container entry."""

    initial_values: MusicRanSeqCntrInitialValues = field(
        default_factory=MusicRanSeqCntrInitialValues
    )

    @classmethod
    def read(cls, stream: BinaryIO, length: int) -> "HircMusicRanSeqCntr":
        """Read the payload; ``length`` counts the entry id as well."""
        values = _read_sized(
            stream,
            length,
            "MusicRanSeqCntrInitialValues",
            MusicRanSeqCntrInitialValues.read,
        )
        return cls(values)

    def write(self, stream: BinaryIO) -> None:
        self.initial_values.write(stream)

    def fix_values(self) -> None:
        """Recompute the recursive playlist item count."""
        self.initial_values.num_play_list_items = sum(
            count_playlist_items(item) for item in self.initial_values.play_list_items
        )