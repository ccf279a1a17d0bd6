import pytest

from hoptrace.mpls import MplsLabelStackMemberPacket, MplsLabelStackPacket
from hoptrace.packet import InsufficientPacketBuffer


def _new():
    return MplsLabelStackMemberPacket(
        bytearray(MplsLabelStackMemberPacket.MINIMUM_PACKET_SIZE)
    )


def test_label():
    member = _new()
    member.label = 0
    assert member.label == 0
    assert member.packet[0:3] == bytes([0x00, 0x00, 0x00])
    member.label = 19380
    assert member.label == 19380
    assert member.packet[0:3] == bytes([0x04, 0xBB, 0x40])
    member.label = 1_048_575
    assert member.label == 1_048_575
    assert member.packet[0:3] == bytes([0xFF, 0xFF, 0xF0])


def test_exp():
    member = _new()
    member.exp = 0
    assert member.exp == 0
    assert member.packet[2:3] == bytes([0x00])
    member.exp = 7
    assert member.exp == 7
    assert member.packet[2:3] == bytes([0x0E])


def test_bos():
    member = _new()
    member.bos = 0
    assert member.bos == 0
    assert member.packet[2:3] == bytes([0x00])
    member.bos = 1
    assert member.bos == 1
    assert member.packet[2:3] == bytes([0x01])


def test_ttl():
    member = _new()
    member.ttl = 0
    assert member.ttl == 0
    assert member.packet[3:4] == bytes([0x00])
    member.ttl = 1
    assert member.ttl == 1
    assert member.packet[3:4] == bytes([0x01])
    member.ttl = 255
    assert member.ttl == 255
    assert member.packet[3:4] == bytes([0xFF])


def test_combined():
    member = _new()
    member.label = 19380
    member.exp = 0
    member.bos = 1
    member.ttl = 1
    assert (member.label, member.exp, member.bos, member.ttl) == (19380, 0, 1, 1)
    assert member.packet == bytes([0x04, 0xBB, 0x41, 0x01])
    member.label = 1_048_575
    member.exp = 7
    member.bos = 1
    member.ttl = 255
    assert (member.label, member.exp, member.bos, member.ttl) == (1_048_575, 7, 1, 255)
    assert member.packet == bytes([0xFF, 0xFF, 0xFF, 0xFF])


def test_view():
    member = MplsLabelStackMemberPacket(bytes([0x04, 0xBB, 0x41, 0x01]))
    assert member.label == 19380
    assert member.exp == 0
    assert member.bos == 1
    assert member.ttl == 1


def test_member_insufficient_buffer():
    with pytest.raises(InsufficientPacketBuffer):
        MplsLabelStackMemberPacket(bytes(3))


def test_stack_member_iterator():
    stack = MplsLabelStackPacket(bytes([0x04, 0xBB, 0x41, 0x01]))
    members = list(stack.members())
    assert len(members) == 1
    member = MplsLabelStackMemberPacket(members[0])
    assert member.label == 19380
    assert member.exp == 0
    assert member.bos == 1
    assert member.ttl == 1


def test_stack_two_members():
    stack = MplsLabelStackPacket(
        bytes([0x06, 0x9F, 0x18, 0x01, 0x00, 0x00, 0x29, 0xFF])
    )
    it = stack.members()
    first = MplsLabelStackMemberPacket(next(it))
    assert (first.label, first.exp, first.bos, first.ttl) == (27121, 4, 0, 1)
    second = MplsLabelStackMemberPacket(next(it))
    assert (second.label, second.exp, second.bos, second.ttl) == (2, 4, 1, 255)
    assert next(it, None) is None


def test_stack_stops_without_full_member():
    stack = MplsLabelStackPacket(bytes([0x00, 0x00, 0x00, 0x01, 0x00, 0x00]))
    members = list(stack.members())
    assert members == [bytes([0x00, 0x00, 0x00, 0x01, 0x00, 0x00])]


def test_stack_insufficient_buffer():
    with pytest.raises(InsufficientPacketBuffer) as info:
        MplsLabelStackPacket(bytes(2))
    assert info.value.provided == 2