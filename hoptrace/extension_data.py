"""Decoded ICMP extensions carried by probe responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from hoptrace.extension_header import ExtensionHeaderPacket
from hoptrace.extension_object import ClassNum, ExtensionObjectPacket
from hoptrace.extensions import ExtensionsPacket
from hoptrace.mpls import MplsLabelStackMemberPacket, MplsLabelStackPacket

# The supported ICMP extension version number.
ICMP_EXTENSION_VERSION = 2


@dataclass(frozen=True)
class MplsLabelStackMember:
    """One entry of an MPLS label stack."""

    label: int
    exp: int
    bos: int
    ttl: int

    @classmethod
    def from_packet(cls, packet: MplsLabelStackMemberPacket) -> MplsLabelStackMember:
        """Decode a label stack entry."""
        return cls(label=packet.label, exp=packet.exp, bos=packet.bos, ttl=packet.ttl)


@dataclass(frozen=True)
class MplsLabelStack:
    """An MPLS label stack extension."""

    members: list[MplsLabelStackMember] = field(default_factory=list)

    @classmethod
    def from_packet(cls, packet: MplsLabelStackPacket) -> MplsLabelStack:
        """Decode every entry of a label stack."""
        members = [
            MplsLabelStackMember.from_packet(MplsLabelStackMemberPacket(member))
            for member in packet.members()
            if len(member) >= MplsLabelStackMemberPacket.MINIMUM_PACKET_SIZE
        ]
        return cls(members=members)


@dataclass(frozen=True)
class UnknownExtension:
    """An extension object of a class that is not decoded further."""

    class_num: int
    class_subtype: int
    bytes: bytes

    @classmethod
    def from_packet(cls, packet: ExtensionObjectPacket) -> UnknownExtension:
        """Keep the class and raw payload of an extension object."""
        return cls(
            class_num=packet.class_num.id(),
            class_subtype=packet.class_subtype,
            bytes=packet.payload,
        )


Extension = Union[MplsLabelStack, UnknownExtension]


@dataclass(frozen=True)
class Extensions:
    """The ICMP extensions found in a response."""

    extensions: list[Extension] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> Extensions:
        """Decode an extension structure from its bytes."""
        return cls.from_packet(ExtensionsPacket(data))

    @classmethod
    def from_packet(cls, packet: ExtensionsPacket) -> Extensions:
        """Decode an extension structure; unsupported versions give no extensions."""
        header = ExtensionHeaderPacket(packet.header)
        if header.version != ICMP_EXTENSION_VERSION:
            return cls()
        extensions: list[Extension] = []
        for object_bytes in packet.objects():
            if len(object_bytes) < ExtensionObjectPacket.MINIMUM_PACKET_SIZE:
                continue
            obj = ExtensionObjectPacket(object_bytes)
            if obj.class_num == ClassNum.MPLS_LABEL_STACK:
                extensions.append(MplsLabelStack.from_packet(MplsLabelStackPacket(obj.payload)))
            else:
                extensions.append(UnknownExtension.from_packet(obj))
        return cls(extensions=extensions)