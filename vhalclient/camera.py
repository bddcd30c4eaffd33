"""Wire structures of the camera vHAL protocol."""

from __future__ import annotations

import struct
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar


class CameraAck(IntEnum):
    """Acknowledgement flags of the capability negotiation."""

    NACK_CONFIG = 0
    ACK_CONFIG = 1


class CameraPacketType(IntEnum):
    """Packet types that tell what a header's payload holds."""

    REQUEST_CAPABILITY = 0
    CAPABILITY = 1
    CAMERA_CONFIG = 2
    CAMERA_DATA = 3
    ACK = 4
    CAMERA_INFO = 5
    CAMERA_USER_ID = 6


class VideoCodecType(IntEnum):
    """Codecs of the video fed to the camera vHAL."""

    H264 = 0x01
    H265 = 0x02
    I420 = 0x04


class FrameResolution(IntEnum):
    """Frame resolutions: 640x480, 1280x720 and 1920x1080."""

    RES_480P = 0x01
    RES_720P = 0x02
    RES_1080P = 0x04


class SensorOrientation(IntEnum):
    """Image sensor orientation in degrees."""

    ORIENTATION_0 = 0
    ORIENTATION_90 = 90
    ORIENTATION_180 = 180
    ORIENTATION_270 = 270


class CameraFacing(IntEnum):
    """Which way a camera faces."""

    BACK_FACING = 0
    FRONT_FACING = 1


class CameraCommand(IntEnum):
    """Camera operation commands sent by the camera vHAL."""

    OPEN = 11
    CLOSE = 12
    NONE = 15


class CameraVhalVersion(IntEnum):
    """Version 1 decodes outside the camera vHAL, version 2 inside it."""

    VERSION_1 = 0
    VERSION_2 = 1


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


def _unpack(layout: struct.Struct, data: bytes, name: str, offset: int = 0) -> tuple:
    if len(data) < offset + layout.size:
        raise ValueError(f"{name} needs {offset + layout.size} bytes, got {len(data)}")
    return layout.unpack_from(data, offset)


def _check_reserved(reserved: tuple[int, ...], count: int) -> None:
    if len(reserved) != count:
        raise ValueError(f"reserved must hold exactly {count} words")


_HEADER = struct.Struct("<2I")
_BLOCK = struct.Struct("<8I")
_CMD_PREFIX = struct.Struct("<2I")


@dataclass
class CameraHeader:
    """Packet header: payload type and payload size in bytes."""

    SIZE: ClassVar[int] = _HEADER.size

    type: int = CameraPacketType.REQUEST_CAPABILITY
    size: int = 0

    def pack(self) -> bytes:
        return _pack(_HEADER, self.type, self.size)

    @classmethod
    def unpack(cls, data: bytes) -> CameraHeader:
        packet_type, size = _unpack(_HEADER, data, "CameraHeader")
        return cls(_coerce(CameraPacketType, packet_type), size)


@dataclass
class CameraCapability:
    """Capabilities the camera vHAL shares with the client."""

    SIZE: ClassVar[int] = _BLOCK.size

    codec_type: int = VideoCodecType.H264
    resolution: int = FrameResolution.RES_480P
    max_number_of_cameras: int = 0
    reserved: tuple[int, ...] = (0,) * 5

    def pack(self) -> bytes:
        _check_reserved(self.reserved, 5)
        return _pack(
            _BLOCK,
            self.codec_type,
            self.resolution,
            self.max_number_of_cameras,
            *self.reserved,
        )

    @classmethod
    def unpack(cls, data: bytes) -> CameraCapability:
        codec, resolution, max_cameras, *reserved = _unpack(_BLOCK, data, "CameraCapability")
        return cls(
            _coerce(VideoCodecType, codec),
            _coerce(FrameResolution, resolution),
            max_cameras,
            tuple(reserved),
        )


@dataclass
class CameraInfo:
    """Capabilities of one remote camera, requested from the camera vHAL."""

    SIZE: ClassVar[int] = _BLOCK.size

    camera_id: int = 0
    codec_type: int = VideoCodecType.H264
    resolution: int = FrameResolution.RES_480P
    sensor_orientation: int = SensorOrientation.ORIENTATION_0
    facing: int = CameraFacing.BACK_FACING
    reserved: tuple[int, ...] = (0,) * 3

    def pack(self) -> bytes:
        _check_reserved(self.reserved, 3)
        return _pack(
            _BLOCK,
            self.camera_id,
            self.codec_type,
            self.resolution,
            self.sensor_orientation,
            self.facing,
            *self.reserved,
        )

    @classmethod
    def unpack(cls, data: bytes) -> CameraInfo:
        camera_id, codec, resolution, orientation, facing, *reserved = _unpack(
            _BLOCK, data, "CameraInfo"
        )
        return cls(
            camera_id,
            _coerce(VideoCodecType, codec),
            _coerce(FrameResolution, resolution),
            _coerce(SensorOrientation, orientation),
            _coerce(CameraFacing, facing),
            tuple(reserved),
        )


@dataclass
class CameraConfig:
    """Camera parameters passed by the vHAL on every camera open."""

    SIZE: ClassVar[int] = _BLOCK.size

    camera_id: int = 0
    codec_type: int = VideoCodecType.H264
    resolution: int = FrameResolution.RES_480P
    reserved: tuple[int, ...] = (0,) * 5

    def pack(self) -> bytes:
        _check_reserved(self.reserved, 5)
        return _pack(_BLOCK, self.camera_id, self.codec_type, self.resolution, *self.reserved)

    @classmethod
    def unpack(cls, data: bytes) -> CameraConfig:
        camera_id, codec, resolution, *reserved = _unpack(_BLOCK, data, "CameraConfig")
        return cls(
            camera_id,
            _coerce(VideoCodecType, codec),
            _coerce(FrameResolution, resolution),
            tuple(reserved),
        )


@dataclass
class CameraConfigCmd:
    """Command from the camera vHAL with the configuration it applies to."""

    SIZE: ClassVar[int] = _CMD_PREFIX.size + _BLOCK.size

    version: int = CameraVhalVersion.VERSION_2
    cmd: int = CameraCommand.NONE
    camera_config: CameraConfig = field(default_factory=CameraConfig)

    def pack(self) -> bytes:
        return _pack(_CMD_PREFIX, self.version, self.cmd) + self.camera_config.pack()

    @classmethod
    def unpack(cls, data: bytes) -> CameraConfigCmd:
        if len(data) < cls.SIZE:
            raise ValueError(f"CameraConfigCmd needs {cls.SIZE} bytes, got {len(data)}")
        version, cmd = _CMD_PREFIX.unpack_from(data)
        return cls(
            _coerce(CameraVhalVersion, version),
            _coerce(CameraCommand, cmd),
            CameraConfig.unpack(data[_CMD_PREFIX.size :]),
        )


def encode_camera_info_packet(camera_infos: Iterable[CameraInfo]) -> bytes:
    """A CAMERA_INFO header followed by the packed infos of every camera."""
    infos = list(camera_infos)
    if not infos:
        raise ValueError("at least one camera info is required")
    payload = b"".join(info.pack() for info in infos)
    header = CameraHeader(CameraPacketType.CAMERA_INFO, len(payload))
    return header.pack() + payload