"""Sensor types and the packets exchanged with the sensor vHAL."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

MAX_DATA_CNT = 6


class SensorType(IntEnum):
    """Android sensor types."""

    ACCELEROMETER = 1
    MAGNETIC_FIELD = 2
    ORIENTATION = 3
    GYROSCOPE = 4
    LIGHT = 5
    PRESSURE = 6
    TEMPERATURE = 7
    PROXIMITY = 8
    GRAVITY = 9
    LINEAR_ACCELERATION = 10
    ROTATION_VECTOR = 11
    RELATIVE_HUMIDITY = 12
    AMBIENT_TEMPERATURE = 13
    MAGNETIC_FIELD_UNCALIBRATED = 14
    GAME_ROTATION_VECTOR = 15
    GYROSCOPE_UNCALIBRATED = 16
    SIGNIFICANT_MOTION = 17
    STEP_DETECTOR = 18
    STEP_COUNTER = 19
    GEOMAGNETIC_ROTATION_VECTOR = 20
    HEART_RATE = 21
    TILT_DETECTOR = 22
    WAKE_GESTURE = 23
    GLANCE_GESTURE = 24
    PICK_UP_GESTURE = 25
    WRIST_TILT_GESTURE = 26
    DEVICE_ORIENTATION = 27
    POSE_6DOF = 28
    STATIONARY_DETECT = 29
    MOTION_DETECT = 30
    HEART_BEAT = 31
    DYNAMIC_SENSOR_META = 32
    ADDITIONAL_INFO = 33
    LOW_LATENCY_OFFBODY_DETECT = 34
    ACCELEROMETER_UNCALIBRATED = 35
    HINGE_ANGLE = 36


class VHalVersion(IntEnum):
    """Sensor vHAL version numbers."""

    V1 = 1
    V2 = 3


def sensor_type_mask(sensor_type: int) -> int:
    """The bit that stands for ``sensor_type`` in a 64-bit support mask."""
    if not 0 <= sensor_type < 64:
        raise ValueError(f"sensor type out of range: {sensor_type}")
    return 1 << sensor_type


def is_sensor_supported(mask: int, sensor_type: int) -> bool:
    """Whether ``mask`` has the bit for ``sensor_type`` set."""
    return bool(mask & sensor_type_mask(sensor_type))


def supported_sensors(mask: int) -> list[SensorType]:
    """The known sensor types whose bits are set in ``mask``, in type order."""
    return [sensor for sensor in SensorType if mask & sensor_type_mask(sensor)]


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


_CTRL = struct.Struct("<3i")
_DATA = struct.Struct(f"<I4xq{MAX_DATA_CNT}f")


@dataclass
class CtrlPacket:
    """Sensor configuration sent by the vHAL."""

    SIZE: ClassVar[int] = _CTRL.size

    type: int = SensorType.ACCELEROMETER
    enabled: int = 0
    sampling_period_ms: int = 0

    def pack(self) -> bytes:
        return _pack(_CTRL, self.type, self.enabled, self.sampling_period_ms)

    @classmethod
    def unpack(cls, data: bytes) -> CtrlPacket:
        sensor_type, enabled, period = _unpack(_CTRL, data, "CtrlPacket")
        return cls(_coerce(SensorType, sensor_type), enabled, period)


@dataclass
class SensorDataPacket:
    """One sensor reading; ``fdata`` is padded with zeros to six values."""

    SIZE: ClassVar[int] = _DATA.size

    type: int = SensorType.ACCELEROMETER
    timestamp_ns: int = 0
    fdata: tuple[float, ...] = (0.0,) * MAX_DATA_CNT

    def __post_init__(self) -> None:
        values = tuple(float(value) for value in self.fdata)
        if len(values) > MAX_DATA_CNT:
            raise ValueError(f"at most {MAX_DATA_CNT} data values, got {len(values)}")
        self.fdata = values + (0.0,) * (MAX_DATA_CNT - len(values))

    def pack(self) -> bytes:
        return _pack(_DATA, self.type, self.timestamp_ns, *self.fdata)

    @classmethod
    def unpack(cls, data: bytes) -> SensorDataPacket:
        sensor_type, timestamp, *values = _unpack(_DATA, data, "SensorDataPacket")
        return cls(_coerce(SensorType, sensor_type), timestamp, tuple(values))