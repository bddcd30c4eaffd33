"""Conversion of packed YUYV 4:2:2 camera frames to planar YUV 4:2:0."""

from __future__ import annotations

# Packed YUYV groups carry two pixels in four bytes: Y0, V, Y1, U.
_GROUP = 4
_BYTES_PER_PIXEL = 2


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"frame dimensions must be positive: {width}x{height}")


def yuv420_frame_size(width: int, height: int) -> int:
    """Size in bytes of one YUV 4:2:0 frame: a luma plane plus two quarter planes."""
    _check_dimensions(width, height)
    return width * height * 3 // 2


def yuyv422_to_yuv420sp(
    src: bytes | bytearray | memoryview,
    width: int,
    height: int,
    flipuv: bool = False,
) -> bytes:
    """Convert one packed YUYV 4:2:2 frame into a planar 4:2:0 frame.

    Luma goes to the first plane. Chroma is taken from every other row: the
    second plane receives V and the third U, or the other way round when
    ``flipuv`` is set. Luma is written in four-byte groups, so when the width
    is not a multiple of four each row starts two bytes before the end of the
    previous one.
    """
    _check_dimensions(width, height)
    if width % 2 or height % 2:
        raise ValueError(f"frame dimensions must be even: {width}x{height}")
    row_bytes = width * _BYTES_PER_PIXEL
    needed = row_bytes * height
    data = memoryview(src).cast("B")
    if len(data) < needed:
        raise ValueError(f"YUYV frame needs {needed} bytes, got {len(data)}")

    luma_size = width * height
    out = bytearray(yuv420_frame_size(width, height))
    first_chroma = luma_size
    second_chroma = luma_size + luma_size // 4
    luma_advance = width - width % _GROUP
    chroma_row = width // 2

    cursor = 0
    for row in range(height):
        line = bytes(data[row * row_bytes : (row + 1) * row_bytes])
        out[cursor : cursor + width] = line[0::2]
        cursor += luma_advance
        if row % 2 == 0:
            v_bytes = line[1::_GROUP]
            u_bytes = line[3::_GROUP]
            first, second = (u_bytes, v_bytes) if flipuv else (v_bytes, u_bytes)
            out[first_chroma : first_chroma + chroma_row] = first
            out[second_chroma : second_chroma + chroma_row] = second
            first_chroma += chroma_row
            second_chroma += chroma_row
    return bytes(out)