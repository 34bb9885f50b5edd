import pytest

from chatnet.errors import NetworkError, NetworkErrorCode
from chatnet.packet_handler import (
    ClientPacketHandler,
    ServerPacketHandler,
    make_packet,
)
from chatnet.packets import (
    HEADER_SIZE,
    PACKET_SIZE_MAX,
    EchoPacket,
    PacketHeader,
    PacketType,
)
from chatnet.serialization import SerializationBuffer, SerializationError


def test_client_handler_dispatches_with_session_and_buffer():
    handler = ClientPacketHandler()
    calls = []

    def on_chat(session_id, buffer):
        calls.append((session_id, buffer.read_uint16()))
        return NetworkErrorCode.NONE

    handler.register(PacketType.CHAT_TO_ROOM_REQUEST_PACKET, on_chat)
    buffer = SerializationBuffer()
    buffer.write_uint16(42)
    result = handler.process_packet(9, PacketType.CHAT_TO_ROOM_REQUEST_PACKET, buffer)
    assert result == NetworkErrorCode.NONE
    assert calls == [(9, 42)]


def test_client_handler_accepts_plain_int_type():
    handler = ClientPacketHandler()
    handler.register(PacketType.ROOM_LIST_REQUEST_PACKET, lambda sid, buf: sid * 2)
    assert handler.process_packet(5, int(PacketType.ROOM_LIST_REQUEST_PACKET), None) == 10


def test_client_handler_unknown_type_raises():
    handler = ClientPacketHandler()
    with pytest.raises(NetworkError) as info:
        handler.process_packet(1, PacketType.LOG_IN_REQUEST_PACKET, SerializationBuffer())
    assert info.value.code == NetworkErrorCode.CANNOT_FIND_PACKET_FUNC


def test_register_returns_function():
    handler = ClientPacketHandler()

    def func(session_id, buffer):
        return session_id

    assert handler.register(PacketType.CHAT_TO_USER_REQUEST_PACKET, func) is func


def test_server_handler_dispatches_buffer_only():
    handler = ServerPacketHandler()
    handler.register(
        PacketType.CHAT_TO_USER_RESPONSE_PACKET, lambda buffer: buffer.read_uint32()
    )
    buffer = SerializationBuffer()
    buffer.write_uint32(123456)
    assert handler.process_packet(PacketType.CHAT_TO_USER_RESPONSE_PACKET, buffer) == 123456


def test_server_handler_unknown_type_raises():
    handler = ServerPacketHandler()
    with pytest.raises(NetworkError) as info:
        handler.process_packet(PacketType.CHAT_NOTIFY_PACKET, SerializationBuffer())
    assert info.value.code == NetworkErrorCode.CANNOT_FIND_PACKET_FUNC


def test_make_packet_prefixes_header():
    buffer = make_packet(PacketType.CHAT_NOTIFY_PACKET, b"hello")
    data = buffer.data()
    header = PacketHeader.unpack(data)
    assert header.size == len(b"hello")
    assert header.type == PacketType.CHAT_NOTIFY_PACKET
    assert data[HEADER_SIZE:] == b"hello"
    assert buffer.buffer_size() == PACKET_SIZE_MAX


def test_make_packet_uses_packed_object():
    packet = EchoPacket(7)
    buffer = make_packet(PacketType.ECHO_PACKET, packet)
    assert buffer.data() == packet.pack()
    assert EchoPacket.unpack(buffer.data()) == packet


def test_make_packet_too_large_raises():
    with pytest.raises(SerializationError):
        make_packet(PacketType.CHAT_NOTIFY_PACKET, bytes(PACKET_SIZE_MAX))