"""Discovery and validation of the local source address."""

from __future__ import annotations

import ipaddress

from hoptrace import platform
from hoptrace.platform import SocketImpl
from hoptrace.socket import InvalidSourceAddr, SocketIoError

# The port used for local address discovery if no destination port is given.
DISCOVERY_PORT = 80


def discover_source_addr(target_addr, dest_port=None, interface=None):
    """Find the source address for reaching `target_addr`.

    With an `interface` its address of the target's family is used; otherwise
    the OS routing decides, using `dest_port` or port 80.
    """
    target = ipaddress.ip_address(target_addr)
    port = DISCOVERY_PORT if dest_port is None else dest_port
    if interface is not None:
        if target.version == 4:
            return platform.lookup_interface_addr_ipv4(interface)
        return platform.lookup_interface_addr_ipv6(interface)
    return platform.discover_local_addr(target, port)


def validate_source_addr(source_addr):
    """Return `source_addr` if a socket can be bound to it, else raise."""
    source = ipaddress.ip_address(source_addr)
    with udp_socket_for_addr_family(source) as sock:
        try:
            sock.bind((source, 0))
        except SocketIoError as err:
            raise InvalidSourceAddr(source) from err
    return source


def udp_socket_for_addr_family(addr) -> SocketImpl:
    """A plain UDP socket of the same family as `addr`."""
    if ipaddress.ip_address(addr).version == 4:
        return SocketImpl.new_udp_dgram_socket_ipv4()
    return SocketImpl.new_udp_dgram_socket_ipv6()