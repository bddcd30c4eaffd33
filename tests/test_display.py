import pytest

from vhalclient.display import (
    DdEvent,
    DisplayControl,
    DisplayEvent,
    DisplayInfo,
    DisplayInfoEvent,
    DisplayPortEvent,
    SetVideoAlphaEvent,
)


def test_event_type_is_little_endian_on_the_wire() -> None:
    packed = DisplayEvent(DdEvent.DISPINFO_REQ).pack()
    assert packed[:4] == b"\x00\x10\x00\x00"


def test_event_round_trip() -> None:
    event = DisplayEvent(DdEvent.DISPPORT_ACK, 8, 3, 128)
    restored = DisplayEvent.unpack(event.pack())
    assert restored == event
    assert restored.type is DdEvent.DISPPORT_ACK


def test_unknown_event_type_is_kept() -> None:
    restored = DisplayEvent.unpack(DisplayEvent(0x1234).pack())
    assert restored.type == 0x1234


def test_display_info_round_trip() -> None:
    info = DisplayInfo(0, 1280, 720, 1280, 1, 160.0, 160.0, 60.0, 1, 1, 2)
    packed = info.pack()
    assert len(packed) == DisplayInfo.SIZE
    assert DisplayInfo.unpack(packed) == info


def test_display_info_event_round_trip() -> None:
    message = DisplayInfoEvent(
        DisplayEvent(DdEvent.DISPINFO_ACK, DisplayInfo.SIZE, 0, 128),
        DisplayInfo(0, 1920, 1080, 1920, 1, 240.0, 240.0, 30.0, 0, 1, 3),
    )
    packed = message.pack()
    assert len(packed) == DisplayEvent.SIZE + DisplayInfo.SIZE
    assert DisplayInfoEvent.unpack(packed) == message


def test_display_port_event_round_trip() -> None:
    message = DisplayPortEvent(DisplayEvent(DdEvent.DISPPORT_REQ), 6000, 0)
    packed = message.pack()
    assert len(packed) == DisplayPortEvent.SIZE
    assert DisplayPortEvent.unpack(packed) == message


def test_set_video_alpha_event_round_trip() -> None:
    message = SetVideoAlphaEvent(DisplayEvent(DdEvent.SET_VIDEO_ALPHA_REQ), 1, (4, 5, 6))
    assert SetVideoAlphaEvent.unpack(message.pack()) == message


def test_control_bits_layout() -> None:
    packed = DisplayControl(alpha=True, rotation=3).pack()
    assert packed[0] == 13
    assert len(packed) == DisplayControl.SIZE


def test_control_round_trip() -> None:
    control = DisplayControl(False, True, 2, 5, (-10, 0, 640, 480))
    assert DisplayControl.unpack(control.pack()) == control


def test_control_rejects_large_rotation() -> None:
    with pytest.raises(ValueError):
        DisplayControl(rotation=4).pack()


def test_short_buffers_are_rejected() -> None:
    with pytest.raises(ValueError):
        DisplayInfoEvent.unpack(DisplayEvent().pack())
    with pytest.raises(ValueError):
        DisplayEvent.unpack(b"\x00\x10")