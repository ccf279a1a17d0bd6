"""Byte order of the IPv4 length and fragment fields when handed to the OS.

Some platforms expect the `total_length`, `flags` and `fragment_offset`
fields of a raw IPv4 header in host byte order, others in network byte order.
"""

from __future__ import annotations

import enum


class Ipv4FieldByteOrder(enum.Enum):
    """The byte order used for the IPv4 length and fragment fields."""

    HOST = "host"
    NETWORK = "network"

    def adjust_length(self, total_length: int) -> int:
        """Adjust a 16 bit header value for this byte order."""
        if not 0 <= total_length <= 0xFFFF:
            raise ValueError(f"value does not fit in 16 bits: {total_length}")
        if self is Ipv4FieldByteOrder.HOST:
            return int.from_bytes(total_length.to_bytes(2, "big"), "little")
        return total_length