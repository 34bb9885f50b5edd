import pytest

from chatnet.net_utils import (
    MAX_RECV_BUF_SIZE,
    RECV_BUF_CLEAR_SIZE,
    NetAddress,
    RecvBuffer,
)


def test_address_round_trip():
    address = NetAddress("127.0.0.1", 6000)
    assert NetAddress.from_sockaddr(address.sockaddr()) == address
    assert address.sockaddr() == ("127.0.0.1", 6000)


def test_address_default():
    assert NetAddress().sockaddr() == ("0.0.0.0", 0)


def test_address_from_socket_tuple():
    address = NetAddress.from_sockaddr(("10.0.0.5", 1234))
    assert address.ip == "10.0.0.5"
    assert address.port == 1234


@pytest.mark.parametrize("ip", ["not-an-ip", "256.1.1.1", "::1"])
def test_address_invalid_ip(ip):
    with pytest.raises(ValueError):
        NetAddress(ip, 80)


@pytest.mark.parametrize("port", [-1, 0x10000])
def test_address_invalid_port(port):
    with pytest.raises(ValueError):
        NetAddress("127.0.0.1", port)


def test_recv_buffer_initial_state():
    buffer = RecvBuffer()
    assert buffer.use_size() == 0
    assert buffer.free_size() == MAX_RECV_BUF_SIZE
    assert len(buffer.write_view()) == MAX_RECV_BUF_SIZE


def test_recv_buffer_write_then_read():
    buffer = RecvBuffer()
    buffer.write_view()[:5] = b"hello"
    buffer.move_write_pos(5)
    assert bytes(buffer.read_view()) == b"hello"
    buffer.move_read_pos(2)
    assert bytes(buffer.read_view()) == b"llo"
    assert buffer.use_size() == 3


def test_recv_buffer_overread_and_overwrite():
    buffer = RecvBuffer()
    with pytest.raises(ValueError):
        buffer.move_read_pos(1)
    with pytest.raises(ValueError):
        buffer.move_write_pos(MAX_RECV_BUF_SIZE + 1)


def test_recv_buffer_reset_when_empty():
    buffer = RecvBuffer()
    buffer.move_write_pos(100)
    buffer.move_read_pos(100)
    buffer.reset()
    assert buffer.free_size() == MAX_RECV_BUF_SIZE
    assert buffer.use_size() == 0


def test_recv_buffer_reset_compacts_when_low():
    buffer = RecvBuffer()
    filled = MAX_RECV_BUF_SIZE - RECV_BUF_CLEAR_SIZE + 1
    buffer.move_write_pos(filled)
    buffer.move_read_pos(filled - 4)
    buffer.write_view()[:0] = b""
    tail = bytes(buffer.read_view())
    buffer.reset()
    assert bytes(buffer.read_view()) == tail
    assert buffer.free_size() == MAX_RECV_BUF_SIZE - 4


def test_recv_buffer_reset_keeps_layout_with_room():
    buffer = RecvBuffer()
    buffer.write_view()[:3] = b"abc"
    buffer.move_write_pos(3)
    buffer.move_read_pos(1)
    free_before = buffer.free_size()
    buffer.reset()
    assert buffer.free_size() == free_before
    assert bytes(buffer.read_view()) == b"bc"