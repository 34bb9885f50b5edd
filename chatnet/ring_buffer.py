"""Fixed-capacity circular byte buffer with one reserved slot."""

DEFAULT_CAPACITY = 10000


class RingBufferError(Exception):
    """Raised when an exact-size operation cannot be satisfied."""


class RingBuffer:
    """Circular byte queue; holds at most ``capacity - 1`` bytes."""

    def __init__(self, capacity=DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._buffer = bytearray(capacity)
        self._front = 0
        self._rear = 0

    def __len__(self):
        return self.use_size()

    def resize(self, new_capacity):
        """Grow the buffer, keeping its contents. Shrinking is refused."""
        if new_capacity < self._capacity:
            raise RingBufferError(
                f"cannot shrink ring buffer from {self._capacity} to {new_capacity}"
            )
        data = self._read(self.use_size(), consume=True)
        self._buffer = bytearray(new_capacity)
        self._buffer[: len(data)] = data
        self._capacity = new_capacity
        self._front = 0
        self._rear = len(data)

    def capacity(self):
        return self._capacity

    def use_size(self):
        return (self._rear - self._front) % self._capacity

    def free_size(self):
        return self._capacity - 1 - self.use_size()

    def direct_enqueue_size(self):
        """Bytes writable at the rear without wrapping."""
        if self.is_full():
            return 0
        if self._rear >= self._front:
            if self._front == 0:
                return self._capacity - self._rear - 1
            return self._capacity - self._rear
        return self._front - self._rear - 1

    def direct_dequeue_size(self):
        """Bytes readable at the front without wrapping."""
        if self._rear >= self._front:
            return self._rear - self._front
        return self._capacity - self._front

    def _write(self, data):
        size = len(data)
        first = min(size, self._capacity - self._rear)
        self._buffer[self._rear : self._rear + first] = data[:first]
        if size > first:
            self._buffer[: size - first] = data[first:]
        self._rear = (self._rear + size) % self._capacity

    def _read(self, size, consume):
        first = min(size, self._capacity - self._front)
        out = bytes(self._buffer[self._front : self._front + first])
        if size > first:
            out += bytes(self._buffer[: size - first])
        if consume:
            self._front = (self._front + size) % self._capacity
        return out

    def enqueue_exact(self, data):
        """Append all of ``data`` or raise RingBufferError."""
        data = bytes(data)
        if self.free_size() < len(data):
            raise RingBufferError(
                f"need {len(data)} bytes of space, {self.free_size()} free"
            )
        self._write(data)

    def dequeue_exact(self, size):
        """Remove and return exactly ``size`` bytes or raise RingBufferError."""
        if self.use_size() < size:
            raise RingBufferError(f"need {size} bytes, {self.use_size()} stored")
        return self._read(size, consume=True)

    def peek_exact(self, size):
        """Return exactly ``size`` bytes without consuming them."""
        if self.use_size() < size:
            raise RingBufferError(f"need {size} bytes, {self.use_size()} stored")
        return self._read(size, consume=False)

    def enqueue(self, data):
        """Append as much of ``data`` as fits; return the count written."""
        data = bytes(data)
        count = min(len(data), self.free_size())
        self._write(data[:count])
        return count

    def dequeue(self, size):
        """Remove and return up to ``size`` bytes."""
        return self._read(min(size, self.use_size()), consume=True)

    def peek(self, size):
        """Return up to ``size`` bytes without consuming them."""
        return self._read(min(size, self.use_size()), consume=False)

    def move_rear(self, size):
        """Mark up to ``size`` bytes as written; return the count moved."""
        count = min(size, self.free_size())
        self._rear = (self._rear + count) % self._capacity
        return count

    def move_front(self, size):
        """Discard up to ``size`` bytes; return the count moved."""
        count = min(size, self.use_size())
        self._front = (self._front + count) % self._capacity
        return count

    def move_rear_exact(self, size):
        if self.free_size() < size:
            raise RingBufferError(
                f"cannot commit {size} bytes, {self.free_size()} free"
            )
        self._rear = (self._rear + size) % self._capacity

    def move_front_exact(self, size):
        if self.use_size() < size:
            raise RingBufferError(f"cannot skip {size} bytes, {self.use_size()} stored")
        self._front = (self._front + size) % self._capacity

    def clear(self):
        self._front = self._rear

    def free_views(self):
        """Writable memoryviews covering the free space, in order.

        Fill them, then commit the written count with ``move_rear_exact``.
        """
        direct = self.direct_enqueue_size()
        remainder = self.free_size() - direct
        whole = memoryview(self._buffer)
        views = []
        if direct > 0:
            views.append(whole[self._rear : self._rear + direct])
        if remainder > 0:
            views.append(whole[:remainder])
        return views

    def is_empty(self):
        return self._rear == self._front

    def is_full(self):
        return self._front == (self._rear + 1) % self._capacity