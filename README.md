# vhalclient

`vhalclient` talks to the virtual hardware abstraction layers (vHALs) of an
Android instance that runs in a container or a VM. It has three parts:

- stream socket clients for TCP, Unix domain and vsock connections;
- the binary message formats of the camera, audio, sensor, display,
  command-channel, input and GPS vHALs;
- a few helpers built on top of these: a camera file streamer, a YUYV to
  YUV 4:2:0 converter and GPS sentence generation.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `vhalclient.common` | `TcpConnectionInfo`, `UnixConnectionInfo`, `VsockConnectionInfo`, the `VhalError` exception and the `StreamSocketClient` base class |
| `vhalclient.sockets` | `TcpStreamSocketClient`, `UnixStreamSocketClient`, `VsockStreamSocketClient` |
| `vhalclient.audio` | `AudioFormat`, `Command`, `AudioConfig`, `CtrlMessage`, `audio_bytes_per_sample` |
| `vhalclient.camera` | Camera vHAL enums and packets: `CameraHeader`, `CameraCapability`, `CameraInfo`, `CameraConfig`, `CameraConfigCmd`, `encode_camera_info_packet` |
| `vhalclient.camera_stream` | The camera socket command block (`CameraSocketInfo`, `CameraSocketCommand`) and `read_chunks`, `send_frame`, `wait_for_command`, `stream_file`, `main` |
| `vhalclient.display` | `GrallocMode`, `DdEvent`, `DisplayEvent`, `DisplayInfo`, `DisplayInfoEvent`, `DisplayPortEvent`, `SetVideoAlphaEvent`, `DisplayControl` |
| `vhalclient.sensor` | `SensorType`, `VHalVersion`, `CtrlPacket`, `SensorDataPacket` and the mask helpers `sensor_type_mask`, `is_sensor_supported`, `supported_sensors` |
| `vhalclient.messages` | `MsgType`, `CommandChannelMessage`, `CommandType`, `ConfigInfo`, `TouchInfo`, `KeyStateMask` |
| `vhalclient.gps` | `GpsCommand`, `GeoFix`, `parse_geo_fix`, `format_gga`, `format_nmea` and the `GpsDrift` position simulator |
| `vhalclient.yuv` | `yuyv422_to_yuv420sp` and `yuv420_frame_size` |
| `vhalclient.status` | `StatusProber`, which writes a status line to a file |

## Message formats

Each message class is a dataclass. `pack()` returns its little-endian wire
bytes and the `unpack(data)` class method parses them back. Both raise
`ValueError` for values that do not fit or for data that is too short.
Enum-typed fields are decoded into their enum where the value is known and
left as plain integers where it is not.

```python
from vhalclient.camera import CameraInfo, VideoCodecType, FrameResolution
from vhalclient.camera import encode_camera_info_packet

packet = encode_camera_info_packet(
    [CameraInfo(codec_type=VideoCodecType.H264, resolution=FrameResolution.RES_1080P)]
)
```

`audio_bytes_per_sample(format)` returns 0 for an unknown format, and
`AudioConfig.buffer_size()` multiplies that by the frame and channel counts.

## Sockets

All clients share the `StreamSocketClient` interface: `connect()`,
`connected()`, `fileno()`, `send(data)`, `recv(size, flags=0)` and `close()`.
Failures raise `VhalError`, a subclass of `OSError`. As a context manager, a
client connects on entry if it is not already connected and closes on exit.

```python
from vhalclient.sockets import UnixStreamSocketClient

with UnixStreamSocketClient("/ipc/camdec-sock-0") as client:
    client.send(b"\x00" * 8)
    reply = client.recv(4096)
```

- `TcpStreamSocketClient(ip, port)` checks the IPv4 address and port when it
  is created. Its `recv` keeps reading until `size` bytes have arrived or the
  peer closes the stream.
- `UnixStreamSocketClient(path)` limits the path to 107 bytes.
- `VsockStreamSocketClient(cid, port=1982)` raises `VhalError` on `connect()`
  when the platform has no `AF_VSOCK`.

## Streaming a file to the camera vHAL

```
vhal-camera-stream test.h265 /ipc/camdec-sock-0
```

The command connects to the socket and waits for a command block. On the
open-camera command it sends the file in chunks of 4160 bytes, each preceded
by its length as a 64-bit word, about every 33 ms. When it reaches the end of
the file it starts again from the beginning. On the close-camera command it
exits. It stops when a send fails, or when the file is empty. The same steps
are available as `wait_for_command` and `stream_file`; `stream_file` takes an
optional frame `limit`.

## GPS

`parse_geo_fix("121.38 31.07 4 5 6")` reads longitude, latitude, an optional
altitude and an optional satellite count (an integer from 1 to 12).
`format_gga(fix, now)` turns a fix into a `$GPGGA` sentence at UTC time `now`.
`GpsDrift` moves a position a little north-east and upward on each `step()`
and stops at a ceiling, and `geo_fix_args()` renders the current position for
`parse_geo_fix`.

## Camera frames

`yuyv422_to_yuv420sp(src, width, height, flipuv=False)` converts one packed
YUYV 4:2:2 frame into a planar frame of `yuv420_frame_size(width, height)`
bytes. The width and height must be even.

## What this package does not do

The package gives you sockets and message formats. It does not include
ready-made vHAL sessions. There is no audio sink or source, video sink, sensor
interface, command-channel interface, display receiver, input receiver or GPS
receiver object that connects, performs the handshake and runs callbacks for
you. Pair a socket client with the message classes yourself to build one. The
only complete program here is `vhal-camera-stream`.