"""Wire structures of the display (HWC) vHAL protocol."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar


class GrallocMode(IntEnum):
    """Gralloc perform operations; VHAL_MODE selects 0 client, 1 server."""

    VHAL_MODE = 0x70000001


class DdEvent(IntEnum):
    """Display event types."""

    DISPINFO_REQ = 0x1000
    DISPINFO_ACK = 0x1001
    CREATE_BUFFER = 0x1002
    REMOVE_BUFFER = 0x1003
    DISPLAY_REQ = 0x1004
    DISPLAY_ACK = 0x1005
    SERVER_IP_REQ = 0x1006
    SERVER_IP_ACK = 0x1007
    SERVER_IP_SET = 0x1008
    DISPPORT_REQ = 0x1700
    DISPPORT_ACK = 0x1701
    SETUP_RESOLUTION = 0x1800
    SET_VIDEO_ALPHA_REQ = 0x1900


def _coerce(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _pack(layout: struct.Struct, *values) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(str(exc)) from None


def _unpack(layout: struct.Struct, data: bytes, name: str) -> tuple:
    if len(data) < layout.size:
        raise ValueError(f"{name} needs {layout.size} bytes, got {len(data)}")
    return layout.unpack_from(data)


_EVENT = struct.Struct("<4I")
_INFO = struct.Struct("<3I2i3f3i")
_PORT = struct.Struct("<2I")
_ALPHA = struct.Struct("<4I")
_CONTROL = struct.Struct("<I4h")


@dataclass
class DisplayEvent:
    """Common event header: type, payload size, instance id, render node."""

    SIZE: ClassVar[int] = _EVENT.size

    type: int = 0
    size: int = 0
    id: int = 0
    render_node: int = 0

    def pack(self) -> bytes:
        return _pack(_EVENT, self.type, self.size, self.id, self.render_node)

    @classmethod
    def unpack(cls, data: bytes) -> DisplayEvent:
        event_type, size, instance_id, render_node = _unpack(_EVENT, data, "DisplayEvent")
        return cls(_coerce(DdEvent, event_type), size, instance_id, render_node)


@dataclass
class DisplayInfo:
    """Display geometry and timing."""

    SIZE: ClassVar[int] = _INFO.size

    flags: int = 0
    width: int = 0
    height: int = 0
    stride: int = 0
    format: int = 0
    xdpi: float = 0.0
    ydpi: float = 0.0
    fps: float = 0.0
    min_swap_interval: int = 0
    max_swap_interval: int = 0
    num_framebuffers: int = 0

    def pack(self) -> bytes:
        return _pack(
            _INFO,
            self.flags,
            self.width,
            self.height,
            self.stride,
            self.format,
            self.xdpi,
            self.ydpi,
            self.fps,
            self.min_swap_interval,
            self.max_swap_interval,
            self.num_framebuffers,
        )

    @classmethod
    def unpack(cls, data: bytes) -> DisplayInfo:
        return cls(*_unpack(_INFO, data, "DisplayInfo"))


@dataclass
class DisplayInfoEvent:
    """Event header followed by display information."""

    SIZE: ClassVar[int] = _EVENT.size + _INFO.size

    event: DisplayEvent = field(default_factory=DisplayEvent)
    info: DisplayInfo = field(default_factory=DisplayInfo)

    def pack(self) -> bytes:
        return self.event.pack() + self.info.pack()

    @classmethod
    def unpack(cls, data: bytes) -> DisplayInfoEvent:
        if len(data) < cls.SIZE:
            raise ValueError(f"DisplayInfoEvent needs {cls.SIZE} bytes, got {len(data)}")
        return cls(DisplayEvent.unpack(data), DisplayInfo.unpack(data[_EVENT.size :]))


@dataclass
class DisplayPortEvent:
    """Event header followed by a display port."""

    SIZE: ClassVar[int] = _EVENT.size + _PORT.size

    event: DisplayEvent = field(default_factory=DisplayEvent)
    port: int = 0
    reserve: int = 0

    def pack(self) -> bytes:
        return self.event.pack() + _pack(_PORT, self.port, self.reserve)

    @classmethod
    def unpack(cls, data: bytes) -> DisplayPortEvent:
        if len(data) < cls.SIZE:
            raise ValueError(f"DisplayPortEvent needs {cls.SIZE} bytes, got {len(data)}")
        port, reserve = _PORT.unpack_from(data, _EVENT.size)
        return cls(DisplayEvent.unpack(data), port, reserve)


@dataclass
class SetVideoAlphaEvent:
    """Event header followed by the video alpha switch."""

    SIZE: ClassVar[int] = _EVENT.size + _ALPHA.size

    event: DisplayEvent = field(default_factory=DisplayEvent)
    enable: int = 0
    reserved: tuple[int, int, int] = (0, 0, 0)

    def pack(self) -> bytes:
        if len(self.reserved) != 3:
            raise ValueError("reserved must hold exactly 3 words")
        return self.event.pack() + _pack(_ALPHA, self.enable, *self.reserved)

    @classmethod
    def unpack(cls, data: bytes) -> SetVideoAlphaEvent:
        if len(data) < cls.SIZE:
            raise ValueError(f"SetVideoAlphaEvent needs {cls.SIZE} bytes, got {len(data)}")
        enable, *reserved = _ALPHA.unpack_from(data, _EVENT.size)
        return cls(DisplayEvent.unpack(data), enable, tuple(reserved))


@dataclass
class DisplayControl:
    """Per-frame display control flags and viewport (left, top, right, bottom)."""

    SIZE: ClassVar[int] = _CONTROL.size

    alpha: bool = False
    top_layer: bool = False
    rotation: int = 0
    reserved: int = 0
    viewport: tuple[int, int, int, int] = (0, 0, 0, 0)

    def pack(self) -> bytes:
        if not 0 <= self.rotation <= 0x3:
            raise ValueError(f"rotation out of range: {self.rotation}")
        if not 0 <= self.reserved < 1 << 28:
            raise ValueError(f"reserved out of range: {self.reserved}")
        if len(self.viewport) != 4:
            raise ValueError("viewport must hold exactly 4 values")
        word = (
            int(bool(self.alpha))
            | int(bool(self.top_layer)) << 1
            | self.rotation << 2
            | self.reserved << 4
        )
        return _pack(_CONTROL, word, *self.viewport)

    @classmethod
    def unpack(cls, data: bytes) -> DisplayControl:
        word, *viewport = _unpack(_CONTROL, data, "DisplayControl")
        return cls(
            alpha=bool(word & 0x1),
            top_layer=bool(word >> 1 & 0x1),
            rotation=word >> 2 & 0x3,
            reserved=word >> 4,
            viewport=tuple(viewport),
        )