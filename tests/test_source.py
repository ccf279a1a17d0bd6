import ipaddress
import socket
from types import SimpleNamespace
from unittest import mock

import pytest

from hoptrace.socket import InvalidSourceAddr, UnknownInterface
from hoptrace.source import (
    discover_source_addr,
    udp_socket_for_addr_family,
    validate_source_addr,
)

LOOPBACK = ipaddress.IPv4Address("127.0.0.1")


def test_validate_loopback():
    assert validate_source_addr("127.0.0.1") == LOOPBACK


def test_validate_foreign_address_raises():
    with pytest.raises(InvalidSourceAddr) as info:
        validate_source_addr("192.0.2.1")
    assert info.value.address == ipaddress.IPv4Address("192.0.2.1")


def test_udp_socket_for_ipv4_binds():
    with udp_socket_for_addr_family("127.0.0.1") as sock:
        sock.bind(("127.0.0.1", 0))
        local = sock.local_addr()
    assert local[0] == LOOPBACK
    assert local[1] > 0


def test_discover_loopback_default_port():
    assert discover_source_addr("127.0.0.1") == LOOPBACK


def test_discover_loopback_given_port():
    assert discover_source_addr("127.0.0.1", 33434, None) == LOOPBACK


def test_discover_with_interface():
    entries = {
        "eth9": [
            SimpleNamespace(family=socket.AF_INET6, address="fe80::1"),
            SimpleNamespace(family=socket.AF_INET, address="10.1.2.3"),
        ]
    }
    with mock.patch("psutil.net_if_addrs", return_value=entries):
        found = discover_source_addr("8.8.8.8", None, "eth9")
    assert found == ipaddress.IPv4Address("10.1.2.3")


def test_discover_with_unknown_interface():
    with mock.patch("psutil.net_if_addrs", return_value={}):
        with pytest.raises(UnknownInterface) as info:
            discover_source_addr("8.8.8.8", None, "missing0")
    assert info.value.name == "missing0"