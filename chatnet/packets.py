"""Packet type numbers, sizes and the fixed packet layouts."""

import struct
from dataclasses import dataclass
from enum import IntEnum

SERVER_PORT = 6000
MAX_PACKET_SIZE = 1000
ROOM_NAME_MAX_LEN = 60

PACKET_SIZE_ECHO = 10
PACKET_SIZE_MAX = 500

_HEADER = struct.Struct("<HH")
_ECHO_BODY = struct.Struct("<q")
HEADER_SIZE = _HEADER.size


class PacketType(IntEnum):
    """Packet type numbers; REQUEST goes client to server, RESPONSE the other way."""

    LOG_IN_REQUEST_PACKET = 0
    LOG_IN_RESPONSE_PACKET = 1

    ROOM_LIST_REQUEST_PACKET = 2
    ROOM_LIST_RESPONSE_PACKET = 3

    ENTER_ROOM_REQUEST_PACKET = 4
    ENTER_ROOM_RESPONSE_PACKET = 5
    ENTER_ROOM_NOTIFY_PACKET = 6

    LEAVE_ROOM_REQUEST_PACKET = 7
    LEAVE_ROOM_RESPONSE_PACKET = 8
    LEAVE_ROOM_NOTIFY_PACKET = 9

    CLIENT_LOG_OUT_PACKET = 10

    CHAT_TO_ROOM_REQUEST_PACKET = 11
    CHAT_TO_USER_REQUEST_PACKET = 12
    CHAT_NOTIFY_PACKET = 13

    CHAT_TO_ROOM_RESPONSE_PACKET = 14
    CHAT_TO_USER_RESPONSE_PACKET = 15

    ECHO_PACKET = 65535


def _packet_type(value):
    try:
        return PacketType(value)
    except ValueError:
        return value


@dataclass
class PacketHeader:
    """Header preceding every payload; ``size`` is the payload length."""

    size: int = 0
    type: int = 0

    def pack(self):
        try:
            return _HEADER.pack(self.size, self.type)
        except struct.error as exc:
            raise ValueError(f"header field out of range: {exc}") from exc

    @staticmethod
    def unpack(data):
        """Read a header from the first HEADER_SIZE bytes of ``data``."""
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise ValueError(f"need {HEADER_SIZE} header bytes, got {len(data)}")
        size, packet_type = _HEADER.unpack_from(data)
        return PacketHeader(size, _packet_type(packet_type))


@dataclass
class EchoPacket:
    """Echo request/response carrying one signed 64-bit value."""

    data: int = 0

    @property
    def header(self):
        return PacketHeader(_ECHO_BODY.size, PacketType.ECHO_PACKET)

    def pack(self):
        try:
            body = _ECHO_BODY.pack(self.data)
        except struct.error as exc:
            raise ValueError(f"echo value out of range: {exc}") from exc
        return self.header.pack() + body

    @staticmethod
    def unpack(data):
        """Read a whole echo packet, header included."""
        data = bytes(data)
        header = PacketHeader.unpack(data)
        if header.type != PacketType.ECHO_PACKET:
            raise ValueError(f"not an echo packet: type {header.type}")
        if header.size != _ECHO_BODY.size:
            raise ValueError(f"echo payload must be {_ECHO_BODY.size} bytes")
        if len(data) < HEADER_SIZE + header.size:
            raise ValueError("echo packet is truncated")
        (value,) = _ECHO_BODY.unpack_from(data, HEADER_SIZE)
        return EchoPacket(value)