"""Internet checksums for ICMP and UDP over IPv4 and IPv6."""

from __future__ import annotations

import ipaddress
import struct

from hoptrace.packet import IpProtocol


def icmp_ipv4_checksum(data: bytes) -> int:
    """Checksum of an IPv4 ICMP packet, ignoring its checksum field."""
    if not data:
        return 0
    return _finalize(_sum_be_words(data, 1))


def icmp_ipv6_checksum(data: bytes, src_addr, dest_addr) -> int:
    """Checksum of an IPv6 ICMP packet, including the IPv6 pseudo header."""
    return _ipv6_checksum(data, 1, src_addr, dest_addr, IpProtocol.ICMPV6)


def udp_ipv4_checksum(data: bytes, src_addr, dest_addr) -> int:
    """Checksum of a UDP packet over IPv4, including the IPv4 pseudo header."""
    return _ipv4_checksum(data, 3, src_addr, dest_addr, IpProtocol.UDP)


def udp_ipv6_checksum(data: bytes, src_addr, dest_addr) -> int:
    """Checksum of a UDP packet over IPv6, including the IPv6 pseudo header."""
    return _ipv6_checksum(data, 3, src_addr, dest_addr, IpProtocol.UDP)


def _ipv4_checksum(data, ignore_word, source, destination, protocol: IpProtocol) -> int:
    total = (
        _address_word_sum(ipaddress.IPv4Address(source))
        + _address_word_sum(ipaddress.IPv4Address(destination))
        + protocol.id()
        + len(data)
        + _sum_be_words(data, ignore_word)
    )
    return _finalize(total)


def _ipv6_checksum(data, ignore_word, source, destination, protocol: IpProtocol) -> int:
    total = (
        _address_word_sum(ipaddress.IPv6Address(source))
        + _address_word_sum(ipaddress.IPv6Address(destination))
        + protocol.id()
        + len(data)
        + _sum_be_words(data, ignore_word)
    )
    return _finalize(total)


def _address_word_sum(addr) -> int:
    packed = addr.packed
    return sum(struct.unpack(f">{len(packed) // 2}H", packed))


def _sum_be_words(data: bytes, ignore_word: int) -> int:
    if not data:
        return 0
    count = len(data) // 2
    words = struct.unpack_from(f">{count}H", data)
    total = sum(word for index, word in enumerate(words) if index != ignore_word)
    if count != ignore_word and len(data) % 2:
        total += data[-1] << 8
    return total


def _finalize(total: int) -> int:
    while total >> 16:
        total = (total >> 16) + (total & 0xFFFF)
    return ~total & 0xFFFF