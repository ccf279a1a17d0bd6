import pytest

from hoptrace.byte_order import Ipv4FieldByteOrder


def test_network_order_leaves_value_alone():
    assert Ipv4FieldByteOrder.NETWORK.adjust_length(0x1234) == 0x1234


def test_host_order_swaps_bytes():
    assert Ipv4FieldByteOrder.HOST.adjust_length(0x1234) == 0x3412


def test_host_order_swap_is_an_involution():
    order = Ipv4FieldByteOrder.HOST
    for value in (0, 1, 256, 0x4000, 0xFFFF, 1024):
        assert order.adjust_length(order.adjust_length(value)) == value


def test_host_order_preserves_symmetric_values():
    assert Ipv4FieldByteOrder.HOST.adjust_length(0xFFFF) == 0xFFFF
    assert Ipv4FieldByteOrder.HOST.adjust_length(0) == 0


def test_host_order_out_of_range_value_rejected():
    with pytest.raises(ValueError):
        Ipv4FieldByteOrder.HOST.adjust_length(0x10000)


def test_network_order_out_of_range_value_rejected():
    with pytest.raises(ValueError):
        Ipv4FieldByteOrder.NETWORK.adjust_length(0x10000)