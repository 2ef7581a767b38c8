"""Node parameter blocks shared by several hierarchy object types."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import BinaryIO, Callable, ClassVar, TypeVar

from .binio import read_struct, write_struct
from .errors import BadDataSizeError, FormatAssertionError

_T = TypeVar("_T")
_E = TypeVar("_E", bound=enum.IntEnum)

_HAS_AUX_IDS = 1 << 3


class _FixedLayout:
    """Mixin for records whose fields map one to one onto a struct format."""

    _FORMAT: ClassVar[str]

    @classmethod
    def read(cls, stream: BinaryIO):
        return cls(*read_struct(stream, cls._FORMAT))

    def write(self, stream: BinaryIO) -> None:
        values = (getattr(self, f.name) for f in fields(self))
        write_struct(stream, self._FORMAT, *values)


def _read_enum(stream: BinaryIO, enum_type: type[_E]) -> _E:
    position = stream.tell()
    (value,) = read_struct(stream, "B")
    try:
        return enum_type(value)
    except ValueError:
        raise FormatAssertionError(
            position, f"unknown {enum_type.__name__} value {value}"
        ) from None


def _read_sized(
    stream: BinaryIO, length: int, name: str, reader: Callable[[BinaryIO], _T]
) -> _T:
    """Run ``reader`` and check it consumed the payload size implied by ``length``."""
    start = stream.tell()
    value = reader(stream)
    got = stream.tell() - start
    expected = length - 4
    if got != expected:
        raise BadDataSizeError(name, expected, got, start)
    return value


class AkPathMode(enum.IntEnum):
    STEP_SEQUENCE = 0x0
    STEP_RANDOM = 0x1
    CONTINUOUS_SEQUENCE = 0x2
    CONTINUOUS_RANDOM = 0x3
    STEP_SEQUENCE_PICK_NEW_PATH = 0x4
    STEP_RANDOM_PICK_NEW_PATH = 0x5


@dataclass
class AkPropBundleElem(_FixedLayout):
    p_id: int = 0
    p_value: int = 0

    _FORMAT: ClassVar[str] = "BI"


@dataclass
class AkPropBundle:
    props: list[AkPropBundleElem] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkPropBundle":
        (count,) = read_struct(stream, "B")
        return cls([AkPropBundleElem.read(stream) for _ in range(count)])

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "B", len(self.props))
        for prop in self.props:
            prop.write(stream)


@dataclass
class NodeInitialFxParams(_FixedLayout):
    is_override_parent_fx: int = 0
    num_fx: int = 0

    _FORMAT: ClassVar[str] = "BB"


@dataclass
class NodeInitialParams:
    prop_bundle1: AkPropBundle = field(default_factory=AkPropBundle)
    prop_bundle2: AkPropBundle = field(default_factory=AkPropBundle)

    @classmethod
    def read(cls, stream: BinaryIO) -> "NodeInitialParams":
        return cls(AkPropBundle.read(stream), AkPropBundle.read(stream))

    def write(self, stream: BinaryIO) -> None:
        self.prop_bundle1.write(stream)
        self.prop_bundle2.write(stream)


@dataclass
class AkPathVertex(_FixedLayout):
    vertex_x: float = 0.0
    vertex_y: float = 0.0
    vertex_z: float = 0.0
    duration: int = 0

    _FORMAT: ClassVar[str] = "3fi"


@dataclass
class AkPathListItemOffset(_FixedLayout):
    vertices_offset: int = 0
    num_vertices: int = 0

    _FORMAT: ClassVar[str] = "2I"


@dataclass
class Ak3DAutomationParams(_FixedLayout):
    x_range: float = 0.0
    y_range: float = 0.0
    z_range: float = 0.0

    _FORMAT: ClassVar[str] = "3f"


@dataclass
class PositioningParams:
    """Positioning block; the path automation data is present only when flagged."""

    bits_positioning: int = 0
    bits_3d: int = 0
    is_dynamic: int = 0
    path_mode: AkPathMode = AkPathMode.STEP_SEQUENCE
    transition_time: int = 0
    vertices: list[AkPathVertex] = field(default_factory=list)
    play_list_items: list[AkPathListItemOffset] = field(default_factory=list)
    params: list[Ak3DAutomationParams] = field(default_factory=list)

    @staticmethod
    def _has_automation(bits: int) -> bool:
        return (bits >> 5) & 3 != 0

    @classmethod
    def read(cls, stream: BinaryIO) -> "PositioningParams":
        (bits,) = read_struct(stream, "B")
        has_positioning = bits & 1 != 0
        has_3d = (bits >> 1) & 1 != 0
        bits_3d = read_struct(stream, "B")[0] if has_positioning and has_3d else 0
        result = cls(bits_positioning=bits, bits_3d=bits_3d)
        if cls._has_automation(bits):
            result.path_mode = _read_enum(stream, AkPathMode)
            result.transition_time, num_vertices = read_struct(stream, "iI")
            result.vertices = [AkPathVertex.read(stream) for _ in range(num_vertices)]
            (num_items,) = read_struct(stream, "I")
            result.play_list_items = [
                AkPathListItemOffset.read(stream) for _ in range(num_items)
            ]
            result.params = [
                Ak3DAutomationParams.read(stream) for _ in range(num_items)
            ]
        return result

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "B", self.bits_positioning)
        if self.bits_positioning & 1:
            write_struct(stream, "B", self.bits_3d)
        if self._has_automation(self.bits_positioning):
            write_struct(
                stream, "BiI", self.path_mode, self.transition_time, len(self.vertices)
            )
            for vertex in self.vertices:
                vertex.write(stream)
            write_struct(stream, "I", len(self.play_list_items))
            for item in self.play_list_items:
                item.write(stream)
            for param in self.params:
                param.write(stream)


@dataclass
class AuxParams:
    by_bit_vector: int = 0
    aux_ids: tuple[int, int, int, int] = (0, 0, 0, 0)
    reflections_aux_bus: int = 0

    @classmethod
    def read(cls, stream: BinaryIO) -> "AuxParams":
        (bits,) = read_struct(stream, "B")
        aux_ids = read_struct(stream, "4I") if bits & _HAS_AUX_IDS else (0, 0, 0, 0)
        (reflections,) = read_struct(stream, "I")
        return cls(bits, tuple(aux_ids), reflections)

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "B", self.by_bit_vector)
        if self.by_bit_vector & _HAS_AUX_IDS:
            write_struct(stream, "4I", *self.aux_ids)
        write_struct(stream, "I", self.reflections_aux_bus)


@dataclass
class AdvSettingsParams(_FixedLayout):
    by_bit_vector: int = 0
    virtual_queue_behavior: int = 0
    max_num_instance: int = 0
    below_threshold_behavior: int = 0
    by_bit_vector2: int = 0

    _FORMAT: ClassVar[str] = "BBHBB"


@dataclass
class AkStatePropertyInfo(_FixedLayout):
    property_id: int = 0
    accum_type: int = 0
    in_db: int = 0

    _FORMAT: ClassVar[str] = "3B"


@dataclass
class AkState(_FixedLayout):
    state_id: int = 0
    state_instance_id: int = 0

    _FORMAT: ClassVar[str] = "2I"


@dataclass
class AkStateGroupChunk:
    state_group_id: int = 0
    state_sync_type: int = 0
    states: list[AkState] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkStateGroupChunk":
        group_id, sync_type, count = read_struct(stream, "IBB")
        return cls(group_id, sync_type, [AkState.read(stream) for _ in range(count)])

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream, "IBB", self.state_group_id, self.state_sync_type, len(self.states)
        )
        for state in self.states:
            state.write(stream)


@dataclass
class StateChunk:
    state_props: list[AkStatePropertyInfo] = field(default_factory=list)
    state_groups: list[AkStateGroupChunk] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "StateChunk":
        (num_props,) = read_struct(stream, "B")
        props = [AkStatePropertyInfo.read(stream) for _ in range(num_props)]
        (num_groups,) = read_struct(stream, "B")
        groups = [AkStateGroupChunk.read(stream) for _ in range(num_groups)]
        return cls(props, groups)

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "B", len(self.state_props))
        for prop in self.state_props:
            prop.write(stream)
        write_struct(stream, "B", len(self.state_groups))
        for group in self.state_groups:
            group.write(stream)


@dataclass
class AkRTPCGraphPoint:
    from_: float = 0.0
    to: float = 0.0
    interp: int = 0

    @classmethod
    def read(cls, stream: BinaryIO) -> "AkRTPCGraphPoint":
        return cls(*read_struct(stream, "ffI"))

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "ffI", self.from_, self.to, self.interp)


@dataclass
class InitialRTPCCurve:
    rtpc_id: int = 0
    rtpc_type: int = 0
    rtpc_accum: int = 0
    param_id: int = 0
    rtpc_curve_id: int = 0
    scaling: int = 0
    graph_points: list[AkRTPCGraphPoint] = field(default_factory=list)

    _HEAD: ClassVar[str] = "IBBBIBH"

    @classmethod
    def read(cls, stream: BinaryIO) -> "InitialRTPCCurve":
        *head, size = read_struct(stream, cls._HEAD)
        points = [AkRTPCGraphPoint.read(stream) for _ in range(size)]
        return cls(*head, points)

    def write(self, stream: BinaryIO) -> None:
        write_struct(
            stream,
            self._HEAD,
            self.rtpc_id,
            self.rtpc_type,
            self.rtpc_accum,
            self.param_id,
            self.rtpc_curve_id,
            self.scaling,
            len(self.graph_points),
        )
        for point in self.graph_points:
            point.write(stream)


@dataclass
class InitialRTPC:
    curves: list[InitialRTPCCurve] = field(default_factory=list)

    @classmethod
    def read(cls, stream: BinaryIO) -> "InitialRTPC":
        (count,) = read_struct(stream, "H")
        return cls([InitialRTPCCurve.read(stream) for _ in range(count)])

    def write(self, stream: BinaryIO) -> None:
        write_struct(stream, "H", len(self.curves))
        for curve in self.curves:
            curve.write(stream)


@dataclass
class NodeBaseParams:
    """The parameter block every hierarchy node starts with."""

    initial_fx_params: NodeInitialFxParams = field(default_factory=NodeInitialFxParams)
    is_override_parent_metadata: int = 0
    num_fx: int = 0
    override_attachment_params: int = 0
    override_bus_id: int = 0
    direct_parent_id: int = 0
    by_bit_vector: int = 0
    initial_params: NodeInitialParams = field(default_factory=NodeInitialParams)
    positioning_params: PositioningParams = field(default_factory=PositioningParams)
    aux_params: AuxParams = field(default_factory=AuxParams)
    adv_settings_params: AdvSettingsParams = field(default_factory=AdvSettingsParams)
    state_chunk: StateChunk = field(default_factory=StateChunk)
    initial_rtpc: InitialRTPC = field(default_factory=InitialRTPC)

    _SCALARS: ClassVar[str] = "3B2IB"

    @classmethod
    def read(cls, stream: BinaryIO) -> "NodeBaseParams":
        fx_params = NodeInitialFxParams.read(stream)
        scalars = read_struct(stream, cls._SCALARS)
        return cls(
            fx_params,
            *scalars,
            initial_params=NodeInitialParams.read(stream),
            positioning_params=PositioningParams.read(stream),
            aux_params=AuxParams.read(stream),
            adv_settings_params=AdvSettingsParams.read(stream),
            state_chunk=StateChunk.read(stream),
            initial_rtpc=InitialRTPC.read(stream),
        )

    def write(self, stream: BinaryIO) -> None:
        self.initial_fx_params.write(stream)
        write_struct(
            stream,
            self._SCALARS,
            self.is_override_parent_metadata,
            self.num_fx,
            self.override_attachment_params,
            self.override_bus_id,
            self.direct_parent_id,
            self.by_bit_vector,
        )
        self.initial_params.write(stream)
        self.positioning_params.write(stream)
        self.aux_params.write(stream)
        self.adv_settings_params.write(stream)
        self.state_chunk.write(stream)
        self.initial_rtpc.write(stream)