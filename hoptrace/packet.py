"""Shared packet primitives: IP protocol numbers, packet errors and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

_PROTOCOL_NAMES = {
    1: "Icmp",
    58: "IcmpV6",
    17: "Udp",
    6: "Tcp",
}


@dataclass(frozen=True)
class IpProtocol:
    """An IP protocol number, such as the `protocol` field of an IPv4 header."""

    number: int

    ICMP: ClassVar[IpProtocol]
    ICMPV6: ClassVar[IpProtocol]
    UDP: ClassVar[IpProtocol]
    TCP: ClassVar[IpProtocol]

    def __post_init__(self) -> None:
        if not 0 <= self.number <= 0xFF:
            raise ValueError(f"IP protocol number out of range: {self.number}")

    @classmethod
    def from_id(cls, value: int) -> IpProtocol:
        """Build the protocol for a wire protocol number."""
        return cls(value)

    def id(self) -> int:
        """The wire protocol number."""
        return self.number

    @property
    def name(self) -> str:
        """The protocol name, or ``"Other"`` for protocols without a name here."""
        return _PROTOCOL_NAMES.get(self.number, "Other")

    def __str__(self) -> str:
        if self.number in _PROTOCOL_NAMES:
            return self.name
        return f"Other({self.number})"


IpProtocol.ICMP = IpProtocol(1)
IpProtocol.ICMPV6 = IpProtocol(58)
IpProtocol.UDP = IpProtocol(17)
IpProtocol.TCP = IpProtocol(6)


class PacketError(Exception):
    """Base class for packet errors."""


class InsufficientPacketBuffer(PacketError):
    """A packet was created over a buffer that is too small for it."""

    def __init__(self, name: str, minimum: int, provided: int) -> None:
        self.name = name
        self.minimum = minimum
        self.provided = provided
        super().__init__(
            f"insufficient buffer for {name} packet, minimum={minimum}, provided={provided}"
        )


def fmt_payload(data: bytes) -> str:
    """Format bytes as space separated two digit lower case hex."""
    return " ".join(f"{b:02x}" for b in data)


def require_size(name: str, buf, minimum: int):
    """Return `buf` if it holds at least `minimum` bytes, else raise."""
    if len(buf) < minimum:
        raise InsufficientPacketBuffer(name, minimum, len(buf))
    return buf