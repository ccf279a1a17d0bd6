"""The ICMP extension structure (RFC 4884): a header followed by objects."""

from __future__ import annotations

from typing import Iterator

from hoptrace.extension_object import ExtensionObjectPacket
from hoptrace.packet import require_size


class ExtensionsPacket:
    """A view over an ICMP extension structure held in network byte order."""

    MINIMUM_PACKET_SIZE = 4

    def __init__(self, buf) -> None:
        self._buf = require_size("ExtensionsPacket", buf, self.MINIMUM_PACKET_SIZE)

    @property
    def header(self) -> bytes:
        """The bytes of the extension header."""
        return bytes(self._buf[: self.MINIMUM_PACKET_SIZE])

    def objects(self) -> Iterator[bytes]:
        """Yield the bytes starting at each extension object.

        Iteration stops at the end of the buffer, at a truncated object, or at
        a malformed object whose length field is zero.
        """
        offset = self.MINIMUM_PACKET_SIZE
        while offset < len(self._buf):
            object_bytes = bytes(self._buf[offset:])
            if len(object_bytes) < ExtensionObjectPacket.MINIMUM_PACKET_SIZE:
                return
            length = ExtensionObjectPacket(object_bytes).length
            if length == 0:
                return
            offset += length
            yield object_bytes

    @property
    def packet(self) -> bytes:
        """The bytes of the whole packet."""
        return bytes(self._buf)