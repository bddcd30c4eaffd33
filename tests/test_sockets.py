import errno
import os
import shutil
import socket
import tempfile
import threading
import time

import pytest

from vhalclient.common import VhalError
from vhalclient.sockets import (
    DEFAULT_PORT_CAMERA,
    TcpStreamSocketClient,
    UnixStreamSocketClient,
    VsockStreamSocketClient,
)


def _serve_once(server, handler):
    server.settimeout(5)

    def run():
        conn, _ = server.accept()
        with conn:
            handler(conn)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread


@pytest.fixture
def tcp_server():
    server = socket.create_server(("127.0.0.1", 0))
    yield server
    server.close()


@pytest.fixture
def unix_server():
    directory = tempfile.mkdtemp(prefix="vh", dir="/tmp")
    path = os.path.join(directory, "s")
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    server.bind(path)
    server.listen(1)
    yield server, path
    server.close()
    shutil.rmtree(directory, ignore_errors=True)


def _drain(conn, sink):
    while True:
        block = conn.recv(1024)
        if not block:
            break
        sink.extend(block)


# Carried over from the source's own tests.
def test_unix_stream_socket_ctor():
    client = UnixStreamSocketClient("/ipc/mycamera-socket0")
    assert client.connected() is False
    assert client.fileno() == -1
    assert client.address == b"/ipc/mycamera-socket0"


def test_unix_connect_missing_path_raises():
    client = UnixStreamSocketClient("/ipc/mycamera-socket0")
    with pytest.raises(VhalError):
        client.connect()
    assert client.connected() is False


def test_unix_path_is_truncated():
    client = UnixStreamSocketClient("/" + "a" * 200)
    assert len(client.address) == 107
    assert client.remote_server_path == "/" + "a" * 200


def test_unix_send_and_recv(unix_server):
    server, path = unix_server
    thread = _serve_once(server, lambda conn: conn.sendall(conn.recv(64).upper()))
    with UnixStreamSocketClient(path) as client:
        assert client.connected() is True
        assert client.send(b"frame") == 5
        assert client.recv(64) == b"FRAME"
    thread.join(5)
    assert client.connected() is False


def test_unix_recv_returns_empty_on_eof(unix_server):
    server, path = unix_server
    thread = _serve_once(server, lambda conn: None)
    client = UnixStreamSocketClient(path)
    client.connect()
    thread.join(5)
    assert client.recv(16) == b""
    client.close()


def test_tcp_rejects_bad_address():
    with pytest.raises(ValueError):
        TcpStreamSocketClient("not-an-ip", 8766)


def test_tcp_rejects_bad_port():
    with pytest.raises(ValueError):
        TcpStreamSocketClient("172.100.0.2", 70000)


def test_tcp_address():
    client = TcpStreamSocketClient("172.100.0.2", 8766)
    assert client.address == ("172.100.0.2", 8766)
    assert client.connected() is False


def test_tcp_send(tcp_server):
    received = bytearray()
    thread = _serve_once(tcp_server, lambda conn: _drain(conn, received))
    client = TcpStreamSocketClient("127.0.0.1", tcp_server.getsockname()[1])
    client.connect()
    assert client.send(b"hello") == 5
    client.close()
    thread.join(5)
    assert bytes(received) == b"hello"


def test_tcp_recv_gathers_full_size(tcp_server):
    def handler(conn):
        conn.sendall(b"abc")
        time.sleep(0.05)
        conn.sendall(b"def")

    thread = _serve_once(tcp_server, handler)
    with TcpStreamSocketClient("127.0.0.1", tcp_server.getsockname()[1]) as client:
        assert client.recv(6) == b"abcdef"
    thread.join(5)


def test_tcp_recv_returns_partial_on_eof(tcp_server):
    thread = _serve_once(tcp_server, lambda conn: conn.sendall(b"xy"))
    client = TcpStreamSocketClient("127.0.0.1", tcp_server.getsockname()[1])
    client.connect()
    thread.join(5)
    assert client.recv(10) == b"xy"
    client.close()


def test_tcp_connect_refused():
    server = socket.create_server(("127.0.0.1", 0))
    port = server.getsockname()[1]
    server.close()
    client = TcpStreamSocketClient("127.0.0.1", port)
    with pytest.raises(VhalError) as info:
        client.connect()
    assert info.value.errno == errno.ECONNREFUSED
    assert client.connected() is False


def test_tcp_reconnect_replaces_socket(tcp_server):
    tcp_server.settimeout(5)
    client = TcpStreamSocketClient("127.0.0.1", tcp_server.getsockname()[1])
    client.connect()
    first, _ = tcp_server.accept()
    client.connect()
    second, _ = tcp_server.accept()
    with first, second:
        assert first.recv(8) == b""
        client.send(b"ok")
        assert second.recv(8) == b"ok"
    client.close()


def test_vsock_defaults():
    client = VsockStreamSocketClient(3)
    assert client.address == (3, DEFAULT_PORT_CAMERA)
    assert client.port == 1982
    assert client.connected() is False


def test_vsock_unconnected_send_raises():
    client = VsockStreamSocketClient(3)
    with pytest.raises(VhalError) as info:
        client.send(b"data")
    assert info.value.errno == errno.EBADF


def test_vsock_unconnected_recv_raises():
    client = VsockStreamSocketClient(3, 5000)
    with pytest.raises(VhalError) as info:
        client.recv(4, socket.MSG_PEEK)
    assert info.value.errno == errno.EBADF