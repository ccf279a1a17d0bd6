"""The ICMP extension structure header (RFC 4884)."""

from __future__ import annotations

from hoptrace.packet import require_size

_VERSION_OFFSET = 0
_CHECKSUM_OFFSET = 2


class ExtensionHeaderPacket:
    """A view over an ICMP extension header held in network byte order.

    Passing a ``bytearray`` allows the fields to be written; ``bytes`` gives a
    read-only view.
    """

    MINIMUM_PACKET_SIZE = 4

    def __init__(self, buf) -> None:
        self._buf = require_size("ExtensionHeaderPacket", buf, self.MINIMUM_PACKET_SIZE)

    @property
    def version(self) -> int:
        """The extension structure version (upper nibble of the first byte)."""
        return (self._buf[_VERSION_OFFSET] & 0xF0) >> 4

    @version.setter
    def version(self, value: int) -> None:
        current = self._buf[_VERSION_OFFSET]
        self._buf[_VERSION_OFFSET] = (current & 0x0F) | ((value & 0x0F) << 4)

    @property
    def checksum(self) -> int:
        """The extension structure checksum."""
        return int.from_bytes(self._buf[_CHECKSUM_OFFSET:_CHECKSUM_OFFSET + 2], "big")

    @checksum.setter
    def checksum(self, value: int) -> None:
        self._buf[_CHECKSUM_OFFSET:_CHECKSUM_OFFSET + 2] = value.to_bytes(2, "big")

    @property
    def packet(self) -> bytes:
        """The bytes of the whole packet."""
        return bytes(self._buf)

    def __repr__(self) -> str:
        return f"ExtensionHeader(version={self.version}, checksum={self.checksum})"