"""Audio formats and the control messages exchanged with the audio vHAL."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar


class AudioFormat(IntEnum):
    """Android PCM audio formats."""

    IEC61937 = 0x0D000000
    PCM_16_BIT = 0x1
    PCM_8_BIT = 0x2
    PCM_32_BIT = 0x3
    PCM_8_24_BIT = 0x4
    PCM_FLOAT = 0x5
    PCM_24_BIT_PACKED = 0x6


class Command(IntEnum):
    """Audio operation commands sent by the audio vHAL."""

    OPEN = 0
    CLOSE = 1
    DATA = 2
    START_STREAM = 3
    STOP_STREAM = 4
    USER_ID = 5
    NONE = 6


_SAMPLE_SIZES = {
    AudioFormat.PCM_32_BIT: 4,
    AudioFormat.PCM_8_24_BIT: 4,
    AudioFormat.PCM_24_BIT_PACKED: 3,
    AudioFormat.PCM_16_BIT: 2,
    AudioFormat.IEC61937: 2,
    AudioFormat.PCM_8_BIT: 1,
    AudioFormat.PCM_FLOAT: 4,
}


def audio_bytes_per_sample(audio_format: int) -> int:
    """Bytes per sample for an audio format; 0 for an unknown format."""
    return _SAMPLE_SIZES.get(audio_format, 0)


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


_CONFIG = struct.Struct("<4I")
_COMMAND = struct.Struct("<I")
_WORD_BODY = struct.Struct(f"<I{_CONFIG.size - 4}x")


@dataclass
class AudioConfig:
    """Stream configuration carried by an OPEN command."""

    SIZE: ClassVar[int] = _CONFIG.size

    sample_rate: int = 0
    channel_count: int = 0
    format: int = AudioFormat.PCM_16_BIT
    frame_count: int = 0

    def buffer_size(self) -> int:
        """Size in bytes of one buffer of ``frame_count`` frames."""
        return self.frame_count * self.channel_count * audio_bytes_per_sample(self.format)

    def pack(self) -> bytes:
        return _pack(
            _CONFIG, self.sample_rate, self.channel_count, self.format, self.frame_count
        )

    @classmethod
    def unpack(cls, data: bytes) -> AudioConfig:
        sample_rate, channel_count, fmt, frame_count = _unpack(_CONFIG, data, "AudioConfig")
        return cls(sample_rate, channel_count, _coerce(AudioFormat, fmt), frame_count)


@dataclass
class CtrlMessage:
    """Control message from the audio vHAL.

    The body is either a stream configuration (OPEN) or a single word such as
    a data size or a user id; both share the same bytes on the wire.
    """

    SIZE: ClassVar[int] = _COMMAND.size + _CONFIG.size

    cmd: int = Command.NONE
    config: AudioConfig | None = None
    data: int = 0

    def __post_init__(self) -> None:
        if self.config is not None:
            self.data = self.config.sample_rate

    @property
    def data_size(self) -> int:
        """Size of the payload announced by a DATA command."""
        return self.data

    def pack(self) -> bytes:
        if self.config is not None:
            body = self.config.pack()
        else:
            body = _pack(_WORD_BODY, self.data)
        return _pack(_COMMAND, self.cmd) + body

    @classmethod
    def unpack(cls, data: bytes) -> CtrlMessage:
        if len(data) < cls.SIZE:
            raise ValueError(f"CtrlMessage needs {cls.SIZE} bytes, got {len(data)}")
        (raw_cmd,) = _COMMAND.unpack_from(data)
        cmd = _coerce(Command, raw_cmd)
        body = data[_COMMAND.size : cls.SIZE]
        if cmd == Command.OPEN:
            return cls(cmd, AudioConfig.unpack(body))
        (word,) = _WORD_BODY.unpack(body)
        return cls(cmd, None, word)