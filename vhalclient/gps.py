"""GPS fixes for the virtual GPS receiver: parsing, NMEA GGA output and drift."""

from __future__ import annotations

import math
import re
import time
from dataclasses import dataclass
from enum import IntEnum

# Sentences are built in a fixed buffer of this size, terminator included.
SENTENCE_BUFFER_SIZE = 1024

# Values parsed from "geo fix": longitude, latitude, altitude, satellites and
# the second satellites slot kept for backwards compatibility.
_GEO_LONG, _GEO_LAT, _GEO_ALT, _GEO_SAT, _GEO_SAT2 = range(5)
_NUM_GEO_PARAMS = 5

_MIN_SATELLITES = 1
_MAX_SATELLITES = 12

_NUMBER = re.compile(
    r"[ \t\n\r\f\v]*"
    r"([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class GpsCommand(IntEnum):
    """Commands the GPS vHAL sends to the client."""

    QUIT = 20
    START = 21
    STOP = 22


@dataclass
class GeoFix:
    """A position fix: degrees of longitude and latitude, metres of altitude."""

    longitude: float
    latitude: float
    altitude: float | None = None
    satellites: int = 1


def parse_geo_fix(args: str | None) -> GeoFix:
    """Parse "<longitude> <latitude> [<altitude> [<satellites> [<satellites>]]]".

    Values are separated by blanks or tabs; anything after the fifth value is
    ignored. When five values are given the fifth is the satellite count.
    The satellite count must be an integer between 1 and 12.
    """
    if args is None:
        raise ValueError("geo fix argument is missing")

    params: list[float] = []
    pos = 0
    while pos < len(args):
        match = _NUMBER.match(args, pos)
        if match is None:
            raise ValueError(f"argument {args[pos:]!r} is not a number")
        params.append(float(match.group(1)))
        if len(params) == _NUM_GEO_PARAMS:
            break
        pos = match.end()
        while pos < len(args) and args[pos] in " \t":
            pos += 1

    top = len(params) - 1
    if top < _GEO_LAT:
        raise ValueError("not enough arguments: longitude and latitude are required")

    satellites = 1
    if top >= _GEO_SAT:
        value = params[_GEO_SAT2 if top >= _GEO_SAT2 else _GEO_SAT]
        if (
            not math.isfinite(value)
            or not value.is_integer()
            or not _MIN_SATELLITES <= value <= _MAX_SATELLITES
        ):
            raise ValueError(
                "invalid number of satellites: must be an integer between 1 and 12"
            )
        satellites = int(value)

    altitude = params[_GEO_ALT] if top >= _GEO_ALT else None
    return GeoFix(params[_GEO_LONG], params[_GEO_LAT], altitude, satellites)


def _coordinate(value: float, positive: str, negative: str) -> str:
    hemisphere = positive
    if value < 0:
        hemisphere = negative
        value = -value
    degrees = int(value)
    value = 60 * (value - degrees)
    minutes = int(value)
    value = 10000 * (value - minutes)
    return f",{degrees:02d}{minutes:02d}.{int(value):04d},{hemisphere}"


def format_gga(fix: GeoFix, now: float | None = None) -> str:
    """Build a GPGGA sentence, newline included, for ``fix`` at UTC time ``now``.

    ``now`` is seconds since the epoch and defaults to the current time.
    Fix quality, dilution and checksum are fixed placeholder values.
    """
    seconds = int(time.time() if now is None else now)
    hh = (seconds // 3600) % 24
    mm = (seconds // 60) % 60
    ss = seconds % 60

    parts = [f"$GPGGA,{hh:02d}{mm:02d}{ss:02d}"]
    parts.append(_coordinate(fix.latitude, "N", "S"))
    parts.append(_coordinate(fix.longitude, "E", "W"))
    parts.append(f",1,{fix.satellites:02d},")
    if fix.altitude is not None:
        parts.append(",%.1g,M,0.,M" % fix.altitude)
    else:
        parts.append(",,,,")
    parts.append(",,,*47\n")
    return "".join(parts)


def format_nmea(sentence: str | None) -> str:
    """Terminate a raw NMEA sentence with a newline, ready to be written."""
    if sentence is None:
        raise ValueError("NMEA sentence is missing")
    if len(sentence.encode("utf-8")) > SENTENCE_BUFFER_SIZE - 1:
        raise ValueError(
            f"NMEA sentence longer than {SENTENCE_BUFFER_SIZE - 1} bytes"
        )
    return f"{sentence}\n"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class GpsDrift:
    """A position that creeps north-east and upward, one step per second.

    Each coordinate stops at a ceiling fixed when the drift starts: one
    degree above the start for longitude and latitude, 1000 m for altitude,
    all kept within the planet's ranges.
    """

    LONGITUDE_STEP = 0.00001
    LATITUDE_STEP = 0.00001
    ALTITUDE_STEP = 1.0

    def __init__(self, longitude: float, latitude: float, altitude: float) -> None:
        self.longitude = float(longitude)
        self.latitude = float(latitude)
        self.altitude = float(altitude)
        self.longitude_max = _clamp(int(self.longitude + 1), -180, 180)
        self.latitude_max = _clamp(int(self.latitude + 1), -90, 90)
        self.altitude_max = _clamp(int(self.altitude + 1000), -400, 8848)

    def step(self) -> tuple[float, float, float]:
        """Advance one step and return longitude, latitude and altitude."""
        self.longitude = min(self.longitude + self.LONGITUDE_STEP, self.longitude_max)
        self.latitude = min(self.latitude + self.LATITUDE_STEP, self.latitude_max)
        self.altitude = min(self.altitude + self.ALTITUDE_STEP, self.altitude_max)
        return self.longitude, self.latitude, self.altitude

    def geo_fix_args(self) -> str:
        """The current position as "geo fix" arguments, with a satellite count."""
        return "%.5f %.5f %.1f 5 6" % (self.longitude, self.latitude, self.altitude)