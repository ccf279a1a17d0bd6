"""MPLS label stack ICMP extension objects (RFC 4950)."""

from __future__ import annotations

from typing import Iterator

from hoptrace.packet import require_size

_LABEL_OFFSET = 0
_EXP_OFFSET = 2
_BOS_OFFSET = 2
_TTL_OFFSET = 3


class MplsLabelStackMemberPacket:
    """A view over one MPLS label stack entry held in network byte order.

    Passing a ``bytearray`` allows the fields to be written; ``bytes`` gives a
    read-only view.
    """

    MINIMUM_PACKET_SIZE = 4

    def __init__(self, buf) -> None:
        self._buf = require_size(
            "MplsLabelStackMemberPacket", buf, self.MINIMUM_PACKET_SIZE
        )

    @property
    def label(self) -> int:
        """The 20 bit label."""
        return int.from_bytes(self._buf[_LABEL_OFFSET:_LABEL_OFFSET + 3], "big") >> 4

    @label.setter
    def label(self, value: int) -> None:
        shifted = ((value << 4) & 0xFFFFFF).to_bytes(3, "big")
        self._buf[_LABEL_OFFSET] = shifted[0]
        self._buf[_LABEL_OFFSET + 1] = shifted[1]
        self._buf[_LABEL_OFFSET + 2] = (self._buf[_LABEL_OFFSET + 2] & 0x0F) | (
            shifted[2] & 0xF0
        )

    @property
    def exp(self) -> int:
        """The 3 bit experimental (traffic class) field."""
        return (self._buf[_EXP_OFFSET] & 0x0E) >> 1

    @exp.setter
    def exp(self, value: int) -> None:
        self._buf[_EXP_OFFSET] = (self._buf[_EXP_OFFSET] & 0xF1) | ((value << 1) & 0x0E)

    @property
    def bos(self) -> int:
        """The bottom of stack bit."""
        return self._buf[_BOS_OFFSET] & 0x01

    @bos.setter
    def bos(self, value: int) -> None:
        self._buf[_BOS_OFFSET] = (self._buf[_BOS_OFFSET] & 0xFE) | (value & 0x01)

    @property
    def ttl(self) -> int:
        """The time to live."""
        return self._buf[_TTL_OFFSET]

    @ttl.setter
    def ttl(self, value: int) -> None:
        self._buf[_TTL_OFFSET] = value

    @property
    def packet(self) -> bytes:
        """The bytes of the whole packet."""
        return bytes(self._buf)

    def __repr__(self) -> str:
        return (
            f"MplsLabelStackMember(label={self.label}, exp={self.exp}, "
            f"bos={self.bos}, ttl={self.ttl})"
        )


class MplsLabelStackPacket:
    """A view over an MPLS label stack, a sequence of stack entries."""

    MINIMUM_PACKET_SIZE = 4

    def __init__(self, buf) -> None:
        self._buf = require_size("MplsLabelStackPacket", buf, self.MINIMUM_PACKET_SIZE)

    def members(self) -> Iterator[bytes]:
        """Yield the bytes starting at each stack entry, up to the bottom of stack."""
        offset = 0
        bos = 0
        while bos == 0 and offset < len(self._buf):
            member_bytes = bytes(self._buf[offset:])
            if len(member_bytes) < MplsLabelStackMemberPacket.MINIMUM_PACKET_SIZE:
                return
            bos = MplsLabelStackMemberPacket(member_bytes).bos
            offset += MplsLabelStackMemberPacket.MINIMUM_PACKET_SIZE
            yield member_bytes

    @property
    def packet(self) -> bytes:
        """The bytes of the whole packet."""
        return bytes(self._buf)