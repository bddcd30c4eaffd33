"""Command channel, display receiver and input receiver messages."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import ClassVar

from .common import UnixConnectionInfo


class MsgType(IntEnum):
    """Services a command channel message is addressed to."""

    NONE = 0
    ACTIVITY_MONITOR = 1
    AIC_COMMAND = 2
    FILE_TRANSFER = 3


@dataclass
class CommandChannelMessage:
    """Message exchanged between the command channel client and server."""

    msg_type: int = MsgType.NONE
    data: bytes = b""

    def __post_init__(self) -> None:
        try:
            self.msg_type = MsgType(self.msg_type)
        except ValueError:
            pass
        self.data = bytes(self.data)

    @property
    def data_size(self) -> int:
        return len(self.data)

    def text(self) -> str:
        """The payload as text."""
        return self.data.decode("utf-8", errors="replace")


class CommandType(IntEnum):
    """Frame events reported by the display receiver."""

    FRAME_CREATE = 0
    FRAME_REMOVE = 1
    FRAME_DISPLAY = 2


@dataclass
class ConfigInfo:
    """Configuration of the display receiver."""

    unix_conn_info: UnixConnectionInfo = field(default_factory=UnixConnectionInfo)
    video_res_width: int = 0
    video_res_height: int = 0
    video_device: str = ""
    user_id: int = 0


_TOUCH = struct.Struct("<I5i")


@dataclass
class TouchInfo:
    """Touch device limits and the owning process id."""

    SIZE: ClassVar[int] = _TOUCH.size

    version: int = 0
    max_contacts: int = 0
    max_x: int = 0
    max_y: int = 0
    max_pressure: int = 0
    pid: int = 0

    def pack(self) -> bytes:
        try:
            return _TOUCH.pack(
                self.version,
                self.max_contacts,
                self.max_x,
                self.max_y,
                self.max_pressure,
                self.pid,
            )
        except struct.error as exc:
            raise ValueError(str(exc)) from None

    @classmethod
    def unpack(cls, data: bytes) -> TouchInfo:
        if len(data) < cls.SIZE:
            raise ValueError(f"TouchInfo needs {cls.SIZE} bytes, got {len(data)}")
        return cls(*_TOUCH.unpack_from(data))


class KeyStateMask(IntFlag):
    """Modifier key state bits, as in X11."""

    SHIFT = 1 << 0
    LOCK = 1 << 1
    CONTROL = 1 << 2
    MOD1 = 1 << 3
    MOD2 = 1 << 4
    MOD3 = 1 << 5
    MOD4 = 1 << 6
    MOD5 = 1 << 7