# hoptrace

Building blocks for tracing the network path to a host: Internet
checksums, byte-level views over RFC 4884 ICMP extension structures and
MPLS label stacks, and socket wrappers for sending probes and receiving
their responses on Unix-like systems.

## Install

    pip install hoptrace

For running the test suite:

    pip install "hoptrace[test]"
    pytest

## Modules

- `hoptrace.checksum`: `icmp_ipv4_checksum(data)`,
  `icmp_ipv6_checksum(data, src_addr, dest_addr)`,
  `udp_ipv4_checksum(data, src_addr, dest_addr)` and
  `udp_ipv6_checksum(data, src_addr, dest_addr)`. One's-complement
  checksums that skip the packet's own checksum field and, except for
  ICMP over IPv4, include the IPv4 or IPv6 pseudo header.
- `hoptrace.packet`: `IpProtocol` (with `ICMP`, `ICMPV6`, `UDP`, `TCP`),
  the `PacketError` and `InsufficientPacketBuffer` exceptions,
  `fmt_payload` and `require_size`.
- `hoptrace.splitter.split(length, icmp_payload)`: separates the original
  datagram of an ICMP `TimeExceeded` or `DestinationUnreachable` payload
  from an RFC 4884 extension structure, returning
  `(datagram, extension_or_None)`. Payloads of 128 bytes or fewer, or with
  a length larger than the payload, have no extension; a zero length is
  treated as a datagram padded to 128 bytes.
- Packet views, each built over `bytes` (read only) or `bytearray`
  (writable fields) and raising `InsufficientPacketBuffer` if the buffer
  is shorter than 4 bytes:
  - `hoptrace.extensions.ExtensionsPacket`: `header`, `packet`, and
    `objects()` yielding the bytes at each extension object.
  - `hoptrace.extension_header.ExtensionHeaderPacket`: `version`,
    `checksum`, `packet`.
  - `hoptrace.extension_object.ExtensionObjectPacket`: `length`,
    `class_num` (a `ClassNum`), `class_subtype`, `payload`,
    `set_payload(data)`, `packet`.
  - `hoptrace.mpls.MplsLabelStackPacket` with `members()`, and
    `hoptrace.mpls.MplsLabelStackMemberPacket` with `label`, `exp`, `bos`,
    `ttl`.
- `hoptrace.extension_data`: `Extensions.from_bytes(data)` decodes a
  version 2 extension structure into `MplsLabelStack` and
  `UnknownExtension` values; other versions give an empty `Extensions`.
- `hoptrace.byte_order.Ipv4FieldByteOrder`: `HOST` or `NETWORK`, with
  `adjust_length(value)` swapping the bytes of a 16 bit value for `HOST`.
- `hoptrace.socket`: the abstract `Socket` interface (a context manager
  that closes on exit) and the errors `TracerError`, `SocketIoError`,
  `AddressNotAvailable`, `InvalidSourceAddr`, `UnknownInterface` and
  `MissingAddr`.
- `hoptrace.platform`: `SocketImpl`, the operating-system socket with
  constructors such as `new_icmp_send_socket_ipv4(raw)`,
  `new_recv_socket_ipv6(addr, raw)` and `new_stream_socket_ipv4()`;
  `for_address(addr)` to find the IPv4 length byte order;
  `lookup_interface_addr_ipv4(name)` / `lookup_interface_addr_ipv6(name)`;
  `discover_local_addr(target_addr, port)`; and the error-code checks
  `is_not_in_progress_error`, `is_conn_refused_error`,
  `is_host_unreachable_error`.
- `hoptrace.common.process_result(address, error)`: treats an "in
  progress" error as success and turns an address-in-use or
  address-not-available error into `AddressNotAvailable`.
- `hoptrace.source`: `discover_source_addr(target_addr, dest_port, interface)`,
  `validate_source_addr(source_addr)` and `udp_socket_for_addr_family(addr)`.

## Example

    from ipaddress import IPv4Address
    from hoptrace.checksum import udp_ipv4_checksum
    from hoptrace.extension_data import Extensions

    udp = bytes.fromhex("625781a8004087d4") + bytes(56)
    value = udp_ipv4_checksum(
        udp, IPv4Address("192.168.1.201"), IPv4Address("142.250.66.46")
    )
    # value == 34772

    extensions = Extensions.from_bytes(bytes.fromhex("2000993a0008010104bb4101"))
    print(extensions.extensions)
    # [MplsLabelStack(members=[MplsLabelStackMember(label=19380, exp=0, bos=1, ttl=1)])]

    from hoptrace.source import discover_source_addr
    print(discover_source_addr("192.0.2.1"))  # the local address the OS would use

Sending raw probes needs the privileges that raw sockets need on your
system.

## What this package does not do

There is no traceroute command and no tracing loop: nothing here sends
probes hop by hop, matches responses to probes or reports round-trip
times. There are no views over IPv4, IPv6, ICMP, UDP or TCP packets
themselves; only ICMP extension structures are parsed. The sockets are
written for Unix-like systems only.