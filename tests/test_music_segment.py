import io

import pytest

from resound.errors import BadDataSizeError
from resound.hirc_common import NodeBaseParams
from resound.music_segment import (
    AkMeterInfo,
    AkMusicMarkerWwise,
    CAkStinger,
    Children,
    HircMusicSegment,
    MusicNodeParams,
    MusicSegmentInitialValues,
)


def _encode(obj):
    out = io.BytesIO()
    obj.write(out)
    return out.getvalue()


def _segment():
    params = MusicNodeParams(
        flags=2,
        node_base_params=NodeBaseParams(direct_parent_id=99),
        children=Children([10, 20, 30]),
        meter_info=AkMeterInfo(1000.0, 0.5, 120.0, 4, 4),
        meter_info_flag=1,
        stingers=[CAkStinger(1, 2, 3, 4, -5, 6)],
    )
    return MusicSegmentInitialValues(
        params,
        2500.25,
        [AkMusicMarkerWwise(1, 0.0, "Entry Cue"), AkMusicMarkerWwise(2, 1.5, "")],
    )


def test_marker_wire_bytes():
    data = _encode(AkMusicMarkerWwise(id=7, position=0.0, marker_name="A"))
    assert data == b"\x07\x00\x00\x00" + b"\x00" * 8 + b"A\x00"


def test_marker_roundtrip():
    marker = AkMusicMarkerWwise(3, 1.5, "Exit Cue")
    assert AkMusicMarkerWwise.read(io.BytesIO(_encode(marker))) == marker


def test_children_roundtrip():
    children = Children([1, 2, 3])
    data = _encode(children)
    assert Children.read(io.BytesIO(data)) == children
    assert data[:4] == len(children.children).to_bytes(4, "little")


def test_music_node_params_roundtrip():
    params = _segment().music_node_params
    stream = io.BytesIO(_encode(params))
    assert MusicNodeParams.read(stream) == params
    assert stream.read() == b""


def test_segment_initial_values_roundtrip():
    values = _segment()
    assert MusicSegmentInitialValues.read(io.BytesIO(_encode(values))) == values


def test_hirc_music_segment_read_and_write():
    data = _encode(_segment())
    segment = HircMusicSegment.read(io.BytesIO(data), len(data) + 4)
    assert segment.initial_values == _segment()
    segment.fix_values()
    assert _encode(segment) == data


def test_hirc_music_segment_size_mismatch():
    data = _encode(_segment())
    with pytest.raises(BadDataSizeError) as info:
        HircMusicSegment.read(io.BytesIO(data + b"\x00"), len(data) + 5)
    assert info.value.expected == len(data) + 1
    assert info.value.got == len(data)
    assert info.value.start == 0