"""Connection descriptions and the stream socket client interface."""

from __future__ import annotations

import errno
import os
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import TracebackType


@dataclass
class TcpConnectionInfo:
    """TCP connection to the Android instance.

    Leave the service number at 0 to let the domain (input, audio, camera,
    ...) use its default.
    """

    ip_addr: str = ""
    port: int = 0
    status_dir: str = ""


@dataclass
class UnixConnectionInfo:
    """Unix domain socket connection to the Android instance.

    ``android_instance_id`` may stay -1 where one instance runs per pod.
    """

    socket_dir: str = ""
    android_instance_id: int = -1
    status_dir: str = ""


@dataclass
class VsockConnectionInfo:
    """VSOCK connection to the Android VM, identified by its context id."""

    android_vm_cid: int = -1


class VhalError(OSError):
    """A socket operation against a vHAL endpoint failed."""

    @classmethod
    def from_errno(cls, code: int) -> VhalError:
        return cls(code, os.strerror(code))

    @classmethod
    def wrap(cls, exc: OSError) -> VhalError:
        code = exc.errno if exc.errno is not None else errno.EIO
        return cls(code, exc.strerror or str(exc) or os.strerror(code))


class StreamSocketClient(ABC):
    """Connection-oriented socket client: connect, send, recv, close.

    Endpoint details (address, service number, path, cid) belong to the
    subclass.
    """

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._connected = False

    @abstractmethod
    def connect(self) -> None:
        """Connect to the remote endpoint; raise VhalError on failure."""

    def connected(self) -> bool:
        """Whether the last connect succeeded and the socket is still open."""
        return self._connected

    def fileno(self) -> int:
        """The native socket descriptor, or -1 when there is no socket."""
        return -1 if self._sock is None else self._sock.fileno()

    @abstractmethod
    def send(self, data: bytes) -> int:
        """Send raw data and return the number of bytes sent."""

    @abstractmethod
    def recv(self, size: int, flags: int = 0) -> bytes:
        """Receive up to ``size`` bytes from the server."""

    @abstractmethod
    def close(self) -> None:
        """Shut down and close the connection."""

    def __enter__(self) -> StreamSocketClient:
        if not self._connected:
            self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _open(self, family: int, address: object) -> None:
        if self._sock is not None:
            self._release()
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.connect(address)
        except OSError as exc:
            sock.close()
            raise VhalError.wrap(exc) from exc
        self._sock = sock
        self._connected = True

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise VhalError.from_errno(errno.EBADF)
        return self._sock

    def _send_once(self, data: bytes) -> int:
        sock = self._socket()
        try:
            return sock.send(data)
        except OSError as exc:
            raise VhalError.wrap(exc) from exc

    def _recv_once(self, size: int, flags: int = 0) -> bytes:
        sock = self._socket()
        try:
            return sock.recv(size, flags)
        except OSError as exc:
            raise VhalError.wrap(exc) from exc

    def _release(self) -> None:
        self._connected = False
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()