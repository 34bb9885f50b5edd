"""Network addresses and a linear receive buffer."""

import ipaddress
from dataclasses import dataclass

RECV_BUF_CLEAR_SIZE = 0x1000
MAX_RECV_BUF_SIZE = 0x10000
MAX_SEND_BUF_SIZE = 4000


@dataclass(frozen=True)
class NetAddress:
    """An IPv4 endpoint."""

    ip: str = "0.0.0.0"
    port: int = 0

    def __post_init__(self):
        try:
            normalized = str(ipaddress.IPv4Address(self.ip))
        except ValueError as exc:
            raise ValueError(f"invalid IPv4 address: {self.ip!r}") from exc
        if not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"port out of range: {self.port}")
        object.__setattr__(self, "ip", normalized)

    @classmethod
    def from_sockaddr(cls, sockaddr):
        """Build from a ``(host, port)`` tuple as returned by the socket module."""
        host, port = sockaddr[0], sockaddr[1]
        return cls(host, port)

    def sockaddr(self):
        """The ``(host, port)`` tuple used by the socket module."""
        return (self.ip, self.port)

    def __str__(self):
        return f"{self.ip}:{self.port}"


class RecvBuffer:
    """Fixed-size linear buffer with read and write positions."""

    def __init__(self):
        self._buffer = bytearray(MAX_RECV_BUF_SIZE)
        self._read_pos = 0
        self._write_pos = 0

    def reset(self):
        """Rewind when empty; move data to the start when space runs low."""
        used = self.use_size()
        if used == 0:
            self._read_pos = self._write_pos = 0
            return
        if self.free_size() < RECV_BUF_CLEAR_SIZE:
            self._buffer[:used] = self._buffer[self._read_pos : self._write_pos]
            self._read_pos = 0
            self._write_pos = used

    def move_read_pos(self, size):
        if self.use_size() < size:
            raise ValueError(f"cannot consume {size} bytes, {self.use_size()} stored")
        self._read_pos += size

    def move_write_pos(self, size):
        if self.free_size() < size:
            raise ValueError(f"cannot commit {size} bytes, {self.free_size()} free")
        self._write_pos += size

    def use_size(self):
        return self._write_pos - self._read_pos

    def free_size(self):
        return MAX_RECV_BUF_SIZE - self._write_pos

    def read_view(self):
        """The unread bytes."""
        return memoryview(self._buffer)[self._read_pos : self._write_pos]

    def write_view(self):
        """The writable space after the stored bytes."""
        return memoryview(self._buffer)[self._write_pos :]