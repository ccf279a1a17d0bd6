"""Separation of an ICMP payload from its RFC 4884 extension structure."""

from __future__ import annotations

from hoptrace.extension_header import ExtensionHeaderPacket

_MIN_HEADER = ExtensionHeaderPacket.MINIMUM_PACKET_SIZE

# RFC 4884 section 3: when an extension structure is appended, the
# "original datagram" field must contain at least 128 octets.
_ICMP_ORIG_DATAGRAM_MIN_LENGTH = 128


def split(length: int, icmp_payload):
    """Split an ICMP payload into ``(original_datagram, extension_or_None)``.

    `length` is the RFC 4884 length of the original datagram in bytes. Applies
    to `TimeExceeded` and `DestinationUnreachable` messages only.
    """
    if length > len(icmp_payload):
        return icmp_payload, None
    if len(icmp_payload) <= _ICMP_ORIG_DATAGRAM_MIN_LENGTH:
        return icmp_payload, None
    if length > _ICMP_ORIG_DATAGRAM_MIN_LENGTH:
        # A compliant extension with an original datagram longer than 128 octets.
        boundary = length
        datagram_end = length
    elif length > 0:
        # A compliant extension, datagram padded to 128 octets and trimmed to length.
        boundary = _ICMP_ORIG_DATAGRAM_MIN_LENGTH
        datagram_end = length
    else:
        # A non-compliant extension, datagram padded to 128 octets.
        boundary = _ICMP_ORIG_DATAGRAM_MIN_LENGTH
        datagram_end = _ICMP_ORIG_DATAGRAM_MIN_LENGTH
    extension = icmp_payload[boundary:]
    if len(extension) < _MIN_HEADER:
        return icmp_payload, None
    return icmp_payload[:datagram_end], extension