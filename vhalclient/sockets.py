"""TCP, Unix domain and VSOCK stream socket clients."""

from __future__ import annotations

import errno
import os
import socket

from .common import StreamSocketClient, VhalError

DEFAULT_PORT_CAMERA = 1982

# sun_path holds 108 bytes including the terminating NUL.
_UNIX_PATH_MAX = 107


class TcpStreamSocketClient(StreamSocketClient):
    """Stream client over IPv4 TCP."""

    def __init__(self, remote_server_ip: str, port: int) -> None:
        super().__init__()
        try:
            socket.inet_pton(socket.AF_INET, remote_server_ip)
        except (OSError, TypeError):
            raise ValueError(f"invalid IPv4 address: {remote_server_ip!r}") from None
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        self.remote_server_ip = remote_server_ip
        self.port = port

    @property
    def address(self) -> tuple[str, int]:
        return (self.remote_server_ip, self.port)

    def connect(self) -> None:
        self._open(socket.AF_INET, self.address)

    def send(self, data: bytes) -> int:
        return self._send_once(data)

    def recv(self, size: int, flags: int = 0) -> bytes:
        """Read until ``size`` bytes arrive or the peer closes the stream."""
        sock = self._socket()
        received = bytearray()
        while len(received) < size:
            try:
                block = sock.recv(size - len(received), flags)
            except OSError as exc:
                raise VhalError.wrap(exc) from exc
            if not block:
                break
            received += block
        return bytes(received)

    def close(self) -> None:
        self._release()


class UnixStreamSocketClient(StreamSocketClient):
    """Stream client over a Unix domain socket path."""

    def __init__(self, remote_server_path: str) -> None:
        super().__init__()
        self.remote_server_path = remote_server_path
        self.address = os.fsencode(remote_server_path)[:_UNIX_PATH_MAX]

    def connect(self) -> None:
        self._open(socket.AF_UNIX, self.address)

    def send(self, data: bytes) -> int:
        return self._send_once(data)

    def recv(self, size: int, flags: int = 0) -> bytes:
        return self._recv_once(size, flags)

    def close(self) -> None:
        self._release()


class VsockStreamSocketClient(StreamSocketClient):
    """Stream client over VSOCK to an Android VM."""

    def __init__(self, android_vm_cid: int, port: int = DEFAULT_PORT_CAMERA) -> None:
        super().__init__()
        self.android_vm_cid = android_vm_cid
        self.port = port

    @property
    def address(self) -> tuple[int, int]:
        return (self.android_vm_cid, self.port)

    def connect(self) -> None:
        family = getattr(socket, "AF_VSOCK", None)
        if family is None:
            raise VhalError.from_errno(errno.EAFNOSUPPORT)
        self._open(family, self.address)

    def send(self, data: bytes) -> int:
        return self._send_once(data)

    def recv(self, size: int, flags: int = 0) -> bytes:
        return self._recv_once(size, flags)

    def close(self) -> None:
        self._release()