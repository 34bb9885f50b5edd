"""Linear serialization buffer for packing packet payloads."""

import struct

DEFAULT_CAPACITY = 100
MAX_CAPACITY = 1600

_UINT8 = struct.Struct("<B")
_INT8 = struct.Struct("<b")
_UINT16 = struct.Struct("<H")
_INT16 = struct.Struct("<h")
_UINT32 = struct.Struct("<I")
_INT32 = struct.Struct("<i")
_UINT64 = struct.Struct("<Q")
_INT64 = struct.Struct("<q")
_FLOAT = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")


class SerializationError(Exception):
    """Raised on overflow, underflow or an unrepresentable value."""


class SerializationBuffer:
    """Byte buffer written at the rear and read from the front (little-endian)."""

    def __init__(self, capacity=DEFAULT_CAPACITY):
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._buffer = bytearray(capacity)
        self._front = 0
        self._rear = 0

    def __len__(self):
        return self.data_size()

    def clear(self):
        self._front = 0
        self._rear = 0

    def resize(self):
        """Double the capacity, up to the maximum."""
        if len(self._buffer) >= MAX_CAPACITY:
            raise SerializationError(
                f"buffer already at maximum size {MAX_CAPACITY}"
            )
        self._buffer.extend(bytes(len(self._buffer)))

    def buffer_size(self):
        return len(self._buffer)

    def data_size(self):
        return self._rear - self._front

    def free_size(self):
        return len(self._buffer) - self._rear

    def data(self):
        """The unread bytes, without consuming them."""
        return bytes(self._buffer[self._front : self._rear])

    def get_data(self, size):
        """Remove and return exactly ``size`` bytes."""
        if size > self.data_size():
            raise SerializationError(
                f"need {size} bytes, {self.data_size()} available"
            )
        out = bytes(self._buffer[self._front : self._front + size])
        self._front += size
        return out

    def put_data(self, data):
        """Append ``data``; return the number of bytes written."""
        data = bytes(data)
        if len(data) > self.free_size():
            raise SerializationError(
                f"need {len(data)} bytes of space, {self.free_size()} free"
            )
        self._buffer[self._rear : self._rear + len(data)] = data
        self._rear += len(data)
        return len(data)

    def move_rear(self, size):
        """Mark up to ``size`` bytes as written; return the count moved."""
        if size <= 0:
            return 0
        count = min(size, self.free_size())
        self._rear += count
        return count

    def move_front(self, size):
        """Skip up to ``size`` unread bytes; return the count moved."""
        if size <= 0:
            return 0
        count = min(size, self.data_size())
        self._front += count
        return count

    def _write(self, fmt, value):
        if fmt.size > self.free_size():
            raise SerializationError(
                f"need {fmt.size} bytes of space, {self.free_size()} free"
            )
        try:
            fmt.pack_into(self._buffer, self._rear, value)
        except struct.error as exc:
            raise SerializationError(str(exc)) from exc
        self._rear += fmt.size
        return self

    def _read(self, fmt):
        if fmt.size > self.data_size():
            raise SerializationError(
                f"need {fmt.size} bytes, {self.data_size()} available"
            )
        (value,) = fmt.unpack_from(self._buffer, self._front)
        self._front += fmt.size
        return value

    def write_uint8(self, value):
        return self._write(_UINT8, value)

    def write_int8(self, value):
        return self._write(_INT8, value)

    def write_uint16(self, value):
        return self._write(_UINT16, value)

    def write_int16(self, value):
        return self._write(_INT16, value)

    def write_uint32(self, value):
        return self._write(_UINT32, value)

    def write_int32(self, value):
        return self._write(_INT32, value)

    def write_uint64(self, value):
        return self._write(_UINT64, value)

    def write_int64(self, value):
        return self._write(_INT64, value)

    def write_float(self, value):
        return self._write(_FLOAT, value)

    def write_double(self, value):
        return self._write(_DOUBLE, value)

    def read_uint8(self):
        return self._read(_UINT8)

    def read_int8(self):
        return self._read(_INT8)

    def read_uint16(self):
        return self._read(_UINT16)

    def read_int16(self):
        return self._read(_INT16)

    def read_uint32(self):
        return self._read(_UINT32)

    def read_int32(self):
        return self._read(_INT32)

    def read_uint64(self):
        return self._read(_UINT64)

    def read_int64(self):
        return self._read(_INT64)

    def read_float(self):
        return self._read(_FLOAT)

    def read_double(self):
        return self._read(_DOUBLE)