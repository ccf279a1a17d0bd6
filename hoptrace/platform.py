"""Sockets and network helpers for Unix-like platforms."""

from __future__ import annotations

import errno
import ipaddress
import logging
import os
import select
import socket
import struct
import sys

import psutil

from hoptrace.byte_order import Ipv4FieldByteOrder
from hoptrace.checksum import icmp_ipv4_checksum
from hoptrace.packet import IpProtocol, fmt_payload
from hoptrace.socket import (
    IoOperation,
    MissingAddr,
    Socket,
    SocketIoError,
    UnknownInterface,
)

_log = logging.getLogger(__name__)

# Size of the packet sent when discovering the IPv4 length byte order.
_TEST_PACKET_LENGTH = 256

_ICMP_ECHO_REQUEST = 8
_IPPROTO_RAW = getattr(socket, "IPPROTO_RAW", 255)
_IPPROTO_ICMPV6 = getattr(socket, "IPPROTO_ICMPV6", 58)
_IP_HDRINCL = getattr(socket, "IP_HDRINCL", 3)
_IPV6_UNICAST_HOPS = getattr(socket, "IPV6_UNICAST_HOPS", 16)


def _to_sockaddr(address):
    host, port = address[0], address[1]
    ip = ipaddress.ip_address(host)
    if ip.version == 6:
        return (str(ip), port, 0, 0)
    return (str(ip), port)


def _from_sockaddr(raw):
    if isinstance(raw, tuple) and len(raw) >= 2:
        return ipaddress.ip_address(raw[0]), raw[1]
    return None


class SocketImpl(Socket):
    """A socket backed by the operating system."""

    def __init__(self, inner: socket.socket) -> None:
        self._inner = inner

    @classmethod
    def _new(cls, family: int, kind: int, proto: int) -> SocketImpl:
        try:
            inner = socket.socket(family, kind, proto)
        except OSError as err:
            raise SocketIoError(err, IoOperation.NEW_SOCKET) from err
        return cls(inner)

    def _set_nonblocking(self) -> None:
        try:
            self._inner.setblocking(False)
        except OSError as err:
            raise SocketIoError(err, IoOperation.SET_NON_BLOCKING) from err

    def _setsockopt(self, level: int, option: int, value: int, operation: IoOperation) -> None:
        try:
            self._inner.setsockopt(level, option, value)
        except OSError as err:
            raise SocketIoError(err, operation) from err

    @classmethod
    def new_icmp_send_socket_ipv4(cls, raw: bool) -> SocketImpl:
        """A socket for sending IPv4 ICMP probes with their IP header."""
        if raw:
            sock = cls._new(socket.AF_INET, socket.SOCK_RAW, _IPPROTO_RAW)
        else:
            sock = cls._new(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_ICMP)
        sock._set_nonblocking()
        sock.set_header_included(True)
        return sock

    @classmethod
    def new_icmp_send_socket_ipv6(cls, raw: bool) -> SocketImpl:
        """A socket for sending IPv6 ICMP probes."""
        kind = socket.SOCK_RAW if raw else socket.SOCK_DGRAM
        sock = cls._new(socket.AF_INET6, kind, _IPPROTO_ICMPV6)
        sock._set_nonblocking()
        return sock

    @classmethod
    def new_udp_send_socket_ipv4(cls, raw: bool) -> SocketImpl:
        """A socket for sending IPv4 UDP probes."""
        if raw:
            sock = cls._new(socket.AF_INET, socket.SOCK_RAW, _IPPROTO_RAW)
            sock._set_nonblocking()
            sock.set_header_included(True)
            return sock
        sock = cls._new(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        sock._set_nonblocking()
        return sock

    @classmethod
    def new_udp_send_socket_ipv6(cls, raw: bool) -> SocketImpl:
        """A socket for sending IPv6 UDP probes."""
        kind = socket.SOCK_RAW if raw else socket.SOCK_DGRAM
        sock = cls._new(socket.AF_INET6, kind, socket.IPPROTO_UDP)
        sock._set_nonblocking()
        return sock

    @classmethod
    def new_recv_socket_ipv4(cls, addr, raw: bool) -> SocketImpl:
        """A socket for receiving IPv4 ICMP responses."""
        if raw:
            sock = cls._new(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
            sock._set_nonblocking()
            sock.set_header_included(True)
            return sock
        sock = cls._new(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_ICMP)
        sock._set_nonblocking()
        return sock

    @classmethod
    def new_recv_socket_ipv6(cls, addr, raw: bool) -> SocketImpl:
        """A socket for receiving IPv6 ICMP responses."""
        kind = socket.SOCK_RAW if raw else socket.SOCK_DGRAM
        sock = cls._new(socket.AF_INET6, kind, _IPPROTO_ICMPV6)
        sock._set_nonblocking()
        return sock

    @classmethod
    def new_stream_socket_ipv4(cls) -> SocketImpl:
        """A non-blocking IPv4 TCP socket for TCP probes."""
        sock = cls._new(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        sock._set_nonblocking()
        sock.set_reuse_port(True)
        return sock

    @classmethod
    def new_stream_socket_ipv6(cls) -> SocketImpl:
        """A non-blocking IPv6 TCP socket for TCP probes."""
        sock = cls._new(socket.AF_INET6, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        sock._set_nonblocking()
        sock.set_reuse_port(True)
        return sock

    @classmethod
    def new_udp_dgram_socket_ipv4(cls) -> SocketImpl:
        """A plain IPv4 UDP socket."""
        return cls._new(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)

    @classmethod
    def new_udp_dgram_socket_ipv6(cls) -> SocketImpl:
        """A plain IPv6 UDP socket."""
        return cls._new(socket.AF_INET6, socket.SOCK_DGRAM, socket.IPPROTO_UDP)

    def local_addr(self):
        """The local ``(ip, port)`` address, or None."""
        try:
            raw = self._inner.getsockname()
        except OSError as err:
            raise SocketIoError(err, IoOperation.LOCAL_ADDR) from err
        return _from_sockaddr(raw)

    def bind(self, address) -> None:
        try:
            self._inner.bind(_to_sockaddr(address))
        except OSError as err:
            raise SocketIoError(err, IoOperation.BIND, address) from err

    def set_tos(self, tos: int) -> None:
        self._setsockopt(socket.IPPROTO_IP, socket.IP_TOS, tos, IoOperation.SET_TOS)

    def set_ttl(self, ttl: int) -> None:
        self._setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl, IoOperation.SET_TTL)

    def set_reuse_port(self, reuse: bool) -> None:
        option = getattr(socket, "SO_REUSEPORT", None)
        if option is None:
            err = OSError(errno.ENOPROTOOPT, os.strerror(errno.ENOPROTOOPT))
            raise SocketIoError(err, IoOperation.SET_REUSE_PORT)
        self._setsockopt(socket.SOL_SOCKET, option, int(reuse), IoOperation.SET_REUSE_PORT)

    def set_header_included(self, included: bool) -> None:
        self._setsockopt(
            socket.IPPROTO_IP, _IP_HDRINCL, int(included), IoOperation.SET_HEADER_INCLUDED
        )

    def set_unicast_hops_v6(self, hops: int) -> None:
        self._setsockopt(
            socket.IPPROTO_IPV6, _IPV6_UNICAST_HOPS, hops, IoOperation.SET_UNICAST_HOPS_V6
        )

    def connect(self, address) -> None:
        _log.debug("connect %s", address)
        try:
            self._inner.connect(_to_sockaddr(address))
        except OSError as err:
            raise SocketIoError(err, IoOperation.CONNECT, address) from err

    def send_to(self, data: bytes, address) -> None:
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug("send_to %s: %s", address, fmt_payload(data))
        try:
            self._inner.sendto(data, _to_sockaddr(address))
        except OSError as err:
            raise SocketIoError(err, IoOperation.SEND_TO, address) from err

    def _select(self, readable: bool, timeout: float) -> bool:
        watched = [self._inner]
        try:
            if readable:
                ready, _, _ = select.select(watched, [], [], timeout)
            else:
                _, ready, _ = select.select([], watched, [], timeout)
        except InterruptedError:
            return False
        except OSError as err:
            raise SocketIoError(err, IoOperation.SELECT) from err
        return len(ready) == 1

    def is_readable(self, timeout: float) -> bool:
        return self._select(True, max(timeout, 0.0))

    def is_writable(self) -> bool:
        return self._select(False, 0.0)

    def recv_from(self, bufsize: int):
        try:
            data, raw = self._inner.recvfrom(bufsize)
        except OSError as err:
            raise SocketIoError(err, IoOperation.RECV_FROM) from err
        address = _from_sockaddr(raw)
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug("recv_from %s: %s", address, fmt_payload(data))
        return data, address

    def read(self, bufsize: int) -> bytes:
        try:
            data = self._inner.recv(bufsize)
        except OSError as err:
            raise SocketIoError(err, IoOperation.READ) from err
        if _log.isEnabledFor(logging.DEBUG):
            _log.debug("read: %s", fmt_payload(data))
        return data

    def shutdown(self) -> None:
        try:
            self._inner.shutdown(socket.SHUT_RDWR)
        except OSError as err:
            raise SocketIoError(err, IoOperation.SHUTDOWN) from err

    def peer_addr(self):
        try:
            raw = self._inner.getpeername()
        except OSError as err:
            raise SocketIoError(err, IoOperation.PEER_ADDR) from err
        return _from_sockaddr(raw)

    def take_error(self) -> OSError | None:
        try:
            code = self._inner.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as err:
            raise SocketIoError(err, IoOperation.TAKE_ERROR) from err
        if code == 0:
            return None
        return OSError(code, os.strerror(code))

    def icmp_error_info(self):
        return ipaddress.IPv4Address("0.0.0.0")

    def close(self) -> None:
        try:
            self._inner.close()
        except OSError as err:
            raise SocketIoError(err, IoOperation.CLOSE) from err


def for_address(addr) -> Ipv4FieldByteOrder:
    """Discover the byte order the OS needs for the IPv4 length fields.

    Linux accepts either order, so network order is returned without a check.
    Elsewhere a test packet is sent to localhost with each order in turn.
    """
    if sys.platform.startswith("linux"):
        return Ipv4FieldByteOrder.NETWORK
    ip = ipaddress.ip_address(addr)
    if ip.version == 6:
        return Ipv4FieldByteOrder.NETWORK
    try:
        _test_send_local_ipv4_packet(ip, _TEST_PACKET_LENGTH)
    except SocketIoError as err:
        if err.errno != errno.EINVAL:
            raise
        swapped = Ipv4FieldByteOrder.HOST.adjust_length(_TEST_PACKET_LENGTH)
        _test_send_local_ipv4_packet(ip, swapped)
        return Ipv4FieldByteOrder.HOST
    return Ipv4FieldByteOrder.NETWORK


def _build_local_ipv4_packet(src_addr: ipaddress.IPv4Address, total_length: int) -> bytes:
    icmp = bytearray(struct.pack("!BBHHH", _ICMP_ECHO_REQUEST, 0, 0, 0, 0))
    icmp[2:4] = icmp_ipv4_checksum(bytes(icmp)).to_bytes(2, "big")
    packet = bytearray(_TEST_PACKET_LENGTH)
    struct.pack_into(
        "!BBHHHBBH4s4s",
        packet,
        0,
        0x45,
        0,
        total_length,
        0,
        0,
        255,
        IpProtocol.ICMP.id(),
        0,
        src_addr.packed,
        ipaddress.IPv4Address("127.0.0.1").packed,
    )
    packet[20:20 + len(icmp)] = icmp
    return bytes(packet)


def _test_send_local_ipv4_packet(src_addr, total_length: int) -> None:
    packet = _build_local_ipv4_packet(ipaddress.IPv4Address(src_addr), total_length)
    try:
        probe = SocketImpl._new(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_ICMP)
    except SocketIoError:
        probe = SocketImpl._new(socket.AF_INET, socket.SOCK_RAW, _IPPROTO_RAW)
    with probe:
        probe.set_header_included(True)
        probe.send_to(packet, ("127.0.0.1", 0))


def _lookup_interface_addr(name: str, family: int):
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, RuntimeError) as err:
        raise UnknownInterface(name) from err
    for entry in interfaces.get(name, ()):
        if entry.family == family:
            return ipaddress.ip_address(entry.address)
    raise UnknownInterface(name)


def lookup_interface_addr_ipv4(name: str):
    """The first IPv4 address of the named interface."""
    return _lookup_interface_addr(name, socket.AF_INET)


def lookup_interface_addr_ipv6(name: str):
    """The first IPv6 address of the named interface."""
    return _lookup_interface_addr(name, socket.AF_INET6)


def startup() -> None:
    """Prepare the platform for networking; nothing is needed here."""


def is_not_in_progress_error(code: int) -> bool:
    """True unless `code` says an operation is still in progress."""
    return code != errno.EINPROGRESS


def is_conn_refused_error(code: int) -> bool:
    """True if `code` says a connection was refused."""
    return code == errno.ECONNREFUSED


def is_host_unreachable_error(code: int) -> bool:
    """Host unreachable errors are not reported by TCP sockets here."""
    return False


def discover_local_addr(target_addr, port: int):
    """The local address used to reach `target_addr`; no packet is sent."""
    target = ipaddress.ip_address(target_addr)
    if target.version == 4:
        sock = SocketImpl.new_udp_dgram_socket_ipv4()
    else:
        sock = SocketImpl.new_udp_dgram_socket_ipv6()
    with sock:
        sock.connect((target, port))
        local = sock.local_addr()
    if local is None:
        raise MissingAddr()
    return local[0]