"""Stream an encoded video file to the camera vHAL over a Unix socket."""

from __future__ import annotations

import errno
import logging
import struct
import sys
import time
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, ClassVar

from .common import StreamSocketClient, VhalError
from .sockets import UnixStreamSocketClient

logger = logging.getLogger(__name__)

INBUF_SIZE = 4 * 1024
AV_INPUT_BUFFER_PADDING_SIZE = 64
CHUNK_SIZE = INBUF_SIZE + AV_INPUT_BUFFER_PADDING_SIZE
FRAME_INTERVAL = 0.033

_LENGTH = struct.Struct("<Q")
_INFO = struct.Struct("<8I")


class CameraSocketCommand(IntEnum):
    """Commands the camera vHAL sends on the socket."""

    OPEN_CAMERA = 11
    CLOSE_CAMERA = 12


def _coerce(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class CameraSocketInfo:
    """Command block: vHAL version, command and camera configuration.

    Version 0 decodes outside the camera vHAL, version 1 inside it.
    """

    SIZE: ClassVar[int] = _INFO.size

    version: int = 0
    cmd: int = CameraSocketCommand.OPEN_CAMERA
    codec_type: int = 0
    resolution: int = 0
    reserved: tuple[int, int, int, int] = (0, 0, 0, 0)

    def pack(self) -> bytes:
        if len(self.reserved) != 4:
            raise ValueError("reserved must hold exactly 4 words")
        try:
            return _INFO.pack(
                self.version, self.cmd, self.codec_type, self.resolution, *self.reserved
            )
        except struct.error as exc:
            raise ValueError(str(exc)) from None

    @classmethod
    def unpack(cls, data: bytes) -> CameraSocketInfo:
        if len(data) < cls.SIZE:
            raise ValueError(f"CameraSocketInfo needs {cls.SIZE} bytes, got {len(data)}")
        version, cmd, codec_type, resolution, *reserved = _INFO.unpack_from(data)
        return cls(
            version, _coerce(CameraSocketCommand, cmd), codec_type, resolution, tuple(reserved)
        )


def read_chunks(stream: BinaryIO, size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Read ``stream`` in chunks of ``size`` bytes, rewinding at end of file.

    Ends only when a whole pass over the stream yields nothing.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive: {size}")
    while True:
        produced = False
        while chunk := stream.read(size):
            produced = True
            yield chunk
        if not produced:
            return
        logger.info("end of file reached, restarting")
        stream.seek(0)


def send_frame(client: StreamSocketClient, chunk: bytes) -> int:
    """Send the chunk's length as a 64-bit word, then the chunk itself."""
    header = _LENGTH.pack(len(chunk))
    sent = client.send(header)
    if sent != len(header):
        raise VhalError(errno.EIO, f"short send of frame size: {sent} of {len(header)} bytes")
    sent = client.send(chunk)
    if sent != len(chunk):
        raise VhalError(errno.EIO, f"short send of frame: {sent} of {len(chunk)} bytes")
    return len(chunk)


def wait_for_command(client: StreamSocketClient) -> CameraSocketInfo:
    """Block until a full command block has arrived and decode it."""
    received = bytearray()
    while len(received) < CameraSocketInfo.SIZE:
        block = client.recv(CameraSocketInfo.SIZE - len(received))
        if not block:
            raise VhalError(errno.ECONNRESET, "connection closed before a command arrived")
        received += block
    return CameraSocketInfo.unpack(bytes(received))


def stream_file(
    client: StreamSocketClient,
    stream: BinaryIO,
    interval: float = FRAME_INTERVAL,
    limit: int | None = None,
) -> int:
    """Send the stream frame by frame, looping over it, and return frames sent.

    Stops after ``limit`` frames when given; a failed send raises VhalError.
    """
    frames = 0
    if limit is not None and limit <= 0:
        return frames
    for chunk in read_chunks(stream):
        send_frame(client, chunk)
        frames += 1
        logger.debug("sent %d bytes to the camera vHAL", len(chunk))
        if limit is not None and frames >= limit:
            break
        if interval > 0:
            time.sleep(interval)
    return frames


def _usage(program: str) -> str:
    return (
        f"\tUsage:   {program} <filename> <vhal-sock-path>\n"
        f"\tExample: {program} test.h265 /ipc/camdec-sock-0"
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Wait for the camera vHAL to open the camera, then stream a file to it."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print(_usage("camera-stream"), file=sys.stderr)
        return 1
    filename, socket_path = args[0], args[1]
    try:
        stream = open(filename, "rb")
    except OSError:
        print(f"Could not open {filename}", file=sys.stderr)
        return 1
    with stream:
        client = UnixStreamSocketClient(socket_path)
        try:
            client.connect()
        except VhalError as exc:
            print(f"Connect() failed due to {exc.strerror}")
            return 1
        with client:
            print("Waiting for CMD_OPEN_CAMERA")
            try:
                info = wait_for_command(client)
            except VhalError as exc:
                print(f"Recv() failed due to {exc.strerror}")
                return 1
            if info.cmd == CameraSocketCommand.OPEN_CAMERA:
                print("Received CMD_OPEN_CAMERA")
                print(">>>>>> Sending frames at 30fps...")
                try:
                    stream_file(client, stream)
                except VhalError as exc:
                    print(f"Send() failed due to {exc.strerror}")
            elif info.cmd == CameraSocketCommand.CLOSE_CAMERA:
                print("Received CMD_CLOSE_CAMERA, exit")
    return 0


if __name__ == "__main__":
    sys.exit(main())