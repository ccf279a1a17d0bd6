"""The socket interface used by the tracer, and the errors it raises."""

from __future__ import annotations

import abc
import enum
import errno as _errno
import ipaddress


class IoOperation(enum.Enum):
    """The socket operation that failed."""

    NEW_SOCKET = "create socket"
    BIND = "bind"
    CONNECT = "connect"
    SEND_TO = "send to"
    SET_NON_BLOCKING = "set non-blocking"
    SELECT = "select"
    RECV_FROM = "receive from"
    READ = "read"
    SHUTDOWN = "shutdown"
    LOCAL_ADDR = "get local address"
    PEER_ADDR = "get peer address"
    TAKE_ERROR = "take error"
    SET_TOS = "set TOS"
    SET_TTL = "set TTL"
    SET_REUSE_PORT = "set reuse port"
    SET_HEADER_INCLUDED = "set header included"
    SET_UNICAST_HOPS_V6 = "set IPv6 unicast hops"
    CLOSE = "close"


def _fmt_address(address) -> str:
    if isinstance(address, tuple):
        host, port = address[0], address[1]
        ip = ipaddress.ip_address(host)
        if ip.version == 6:
            return f"[{ip}]:{port}"
        return f"{ip}:{port}"
    return str(address)


class TracerError(Exception):
    """Base class for tracer errors."""


class SocketIoError(TracerError):
    """A socket operation failed with an operating system error."""

    def __init__(self, error: OSError, operation: IoOperation, address=None) -> None:
        self.error = error
        self.operation = operation
        self.address = address
        where = f" for {_fmt_address(address)}" if address is not None else ""
        super().__init__(f"{operation.value} failed{where}: {error}")

    @property
    def errno(self) -> int | None:
        """The operating system error code, if any."""
        return self.error.errno

    @property
    def would_block(self) -> bool:
        """True if the operation failed only because it would have blocked."""
        return self.error.errno in (_errno.EAGAIN, _errno.EWOULDBLOCK)


class AddressNotAvailable(TracerError):
    """The requested local address is in use or not available."""

    def __init__(self, address) -> None:
        self.address = address
        super().__init__(f"address not available: {_fmt_address(address)}")


class InvalidSourceAddr(TracerError):
    """The source address cannot be bound."""

    def __init__(self, address) -> None:
        self.address = address
        super().__init__(f"invalid source IP address: {address}")


class UnknownInterface(TracerError):
    """No usable address was found for the named interface."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown interface: {name}")


class MissingAddr(TracerError):
    """An expected address was not available."""

    def __init__(self) -> None:
        super().__init__("missing address")


class Socket(abc.ABC):
    """A network socket able to send probes and receive their responses.

    Addresses are ``(ip, port)`` tuples where ``ip`` is a string or an
    ``ipaddress`` object. Sockets are context managers that close on exit.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @abc.abstractmethod
    def bind(self, address) -> None:
        """Bind the socket to a local address."""

    @abc.abstractmethod
    def set_tos(self, tos: int) -> None:
        """Set the IPv4 type of service."""

    @abc.abstractmethod
    def set_ttl(self, ttl: int) -> None:
        """Set the IPv4 time to live."""

    @abc.abstractmethod
    def set_reuse_port(self, reuse: bool) -> None:
        """Allow or forbid the reuse of the local port."""

    @abc.abstractmethod
    def set_header_included(self, included: bool) -> None:
        """Declare whether sent data carries its own IP header."""

    @abc.abstractmethod
    def set_unicast_hops_v6(self, hops: int) -> None:
        """Set the IPv6 unicast hop limit."""

    @abc.abstractmethod
    def connect(self, address) -> None:
        """Connect the socket to a remote address."""

    @abc.abstractmethod
    def send_to(self, data: bytes, address) -> None:
        """Send `data` to `address`."""

    @abc.abstractmethod
    def is_readable(self, timeout: float) -> bool:
        """True if the socket becomes readable within `timeout` seconds."""

    @abc.abstractmethod
    def is_writable(self) -> bool:
        """True if the socket is writable now."""

    @abc.abstractmethod
    def recv_from(self, bufsize: int):
        """Receive up to `bufsize` bytes, returning ``(data, address_or_None)``."""

    @abc.abstractmethod
    def read(self, bufsize: int) -> bytes:
        """Read up to `bufsize` bytes."""

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Shut down both directions of a connection."""

    @abc.abstractmethod
    def peer_addr(self):
        """The remote address, or None."""

    @abc.abstractmethod
    def take_error(self) -> OSError | None:
        """Take and clear the pending socket error."""

    @abc.abstractmethod
    def icmp_error_info(self):
        """The address of the host that reported an ICMP error."""

    @abc.abstractmethod
    def close(self) -> None:
        """Close the socket."""