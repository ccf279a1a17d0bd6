import pytest

from hoptrace.extension_header import ExtensionHeaderPacket
from hoptrace.packet import InsufficientPacketBuffer

SAMPLE = bytes([0x20, 0x00, 0x99, 0x3A, 0x00, 0x08, 0x01, 0x01, 0x04, 0xBB, 0x41, 0x01])


def new_header():
    return ExtensionHeaderPacket(bytearray(ExtensionHeaderPacket.MINIMUM_PACKET_SIZE))


def test_version():
    extension = new_header()
    extension.version = 0
    assert extension.version == 0
    assert extension.packet[0:1] == bytes([0x00])
    extension.version = 2
    assert extension.version == 2
    assert extension.packet[0:1] == bytes([0x20])
    extension.version = 15
    assert extension.version == 15
    assert extension.packet[0:1] == bytes([0xF0])


def test_checksum():
    extension = new_header()
    extension.checksum = 0
    assert extension.checksum == 0
    assert extension.packet[2:4] == bytes([0x00, 0x00])
    extension.checksum = 1999
    assert extension.checksum == 1999
    assert extension.packet[2:4] == bytes([0x07, 0xCF])
    extension.checksum = 39226
    assert extension.checksum == 39226
    assert extension.packet[2:4] == bytes([0x99, 0x3A])
    extension.checksum = 0xFFFF
    assert extension.checksum == 0xFFFF
    assert extension.packet[2:4] == bytes([0xFF, 0xFF])


def test_extension_header_view():
    extension = ExtensionHeaderPacket(SAMPLE)
    assert extension.version == 2
    assert extension.checksum == 0x993A


def test_version_does_not_touch_low_nibble():
    buf = bytearray([0x0F, 0, 0, 0])
    extension = ExtensionHeaderPacket(buf)
    extension.version = 2
    assert buf[0] == 0x2F


def test_writes_go_to_the_given_buffer():
    buf = bytearray(4)
    ExtensionHeaderPacket(buf).checksum = 0x993A
    assert buf[2:4] == bytearray([0x99, 0x3A])


def test_read_only_view_rejects_writes():
    extension = ExtensionHeaderPacket(SAMPLE)
    with pytest.raises(TypeError):
        extension.version = 1
    assert extension.version == 2
    assert extension.packet[0:1] == bytes([0x20])


def test_insufficient_buffer():
    with pytest.raises(InsufficientPacketBuffer) as info:
        ExtensionHeaderPacket(bytes(3))
    assert info.value.name == "ExtensionHeaderPacket"
    assert info.value.minimum == 4
    assert info.value.provided == 3


def test_repr():
    assert repr(ExtensionHeaderPacket(SAMPLE)) == "ExtensionHeader(version=2, checksum=39226)"