"""Dispatch tables mapping packet types to handler functions."""

from chatnet.errors import NetworkError, NetworkErrorCode
from chatnet.packets import PACKET_SIZE_MAX, PacketHeader
from chatnet.serialization import SerializationBuffer


def make_packet(packet_type, payload):
    """A send buffer holding one whole packet.

    ``payload`` is either an object with a ``pack()`` method that yields the
    complete packet (header included), or raw payload bytes, which get a
    header carrying their length and ``packet_type``.
    """
    if hasattr(payload, "pack"):
        data = payload.pack()
    else:
        body = bytes(payload)
        data = PacketHeader(len(body), packet_type).pack() + body
    buffer = SerializationBuffer(PACKET_SIZE_MAX)
    buffer.put_data(data)
    return buffer


class _PacketHandler:
    def __init__(self):
        self._funcs = {}

    def register(self, packet_type, func):
        """Route packets of ``packet_type`` to ``func``; return ``func``."""
        self._funcs[int(packet_type)] = func
        return func

    def _lookup(self, packet_type):
        func = self._funcs.get(int(packet_type))
        if func is None:
            raise NetworkError(
                NetworkErrorCode.CANNOT_FIND_PACKET_FUNC,
                f"no handler for packet type {int(packet_type)}",
            )
        return func


class ClientPacketHandler(_PacketHandler):
    """Handles packets that clients send to a server."""

    def __init__(self):
        super().__init__()

    def register(self, packet_type, func):
        """Route packets of ``packet_type`` to ``func(session_id, buffer)``."""
        return super().register(packet_type, func)

    def process_packet(self, session_id, packet_type, buffer):
        """Run the handler for ``packet_type`` and return its result."""
        return self._lookup(packet_type)(session_id, buffer)


class ServerPacketHandler(_PacketHandler):
    """Handles packets that a server sends to a client."""

    def __init__(self):
        super().__init__()

    def register(self, packet_type, func):
        """Route packets of ``packet_type`` to ``func(buffer)``."""
        return super().register(packet_type, func)

    def process_packet(self, packet_type, buffer):
        """Run the handler for ``packet_type`` and return its result."""
        return self._lookup(packet_type)(buffer)