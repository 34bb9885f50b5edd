"""Size-class memory pools handing out guarded, reusable byte blocks."""

import struct
import threading
from collections import deque

NODE_ALIGN_SIZE = 16
POOL_ALIGN_SIZE = 32

POOL_SIZE_LEVEL_1 = 32
POOL_SIZE_LEVEL_2 = 128
POOL_SIZE_LEVEL_3 = 256

POOL_COUNT_LEVEL_1 = 1024 // POOL_SIZE_LEVEL_1
POOL_COUNT_LEVEL_2 = 1024 // POOL_SIZE_LEVEL_2
POOL_COUNT_LEVEL_3 = 2048 // POOL_SIZE_LEVEL_3

POOL_COUNT_TO_LEVEL_2 = POOL_COUNT_LEVEL_1 + POOL_COUNT_LEVEL_2
POOL_COUNT_TO_LEVEL_3 = POOL_COUNT_TO_LEVEL_2 + POOL_COUNT_LEVEL_3

EXTRA_CHUNK_MOVE_SIZE = 200
MEMORY_ALLOC_SIZE = 4000
MAX_ALLOC_SIZE = 4096

GUARD_VALUE = 0xAABBCCDD

POOL_SIZES = (
    tuple(POOL_SIZE_LEVEL_1 * i for i in range(1, POOL_COUNT_LEVEL_1 + 1))
    + tuple(1024 + POOL_SIZE_LEVEL_2 * i for i in range(1, POOL_COUNT_LEVEL_2 + 1))
    + tuple(2048 + POOL_SIZE_LEVEL_3 * i for i in range(1, POOL_COUNT_LEVEL_3 + 1))
)

_HEADER = struct.Struct("<II")  # size, front guard
_GUARD = struct.Struct("<I")
HEADER_SIZE = _HEADER.size
RIGHT_GUARD_SPACE = _GUARD.size + 8  # guard + next pointer slot


class GuardError(Exception):
    """Raised when a block's front or rear guard has been overwritten."""


def get_pool_index(size):
    """Index of the pool serving blocks of ``size`` bytes (header included)."""
    if size <= 1024:
        if size % POOL_SIZE_LEVEL_1 == 0:
            return size // POOL_SIZE_LEVEL_1
        return (size + POOL_SIZE_LEVEL_1) // POOL_SIZE_LEVEL_1 - 1

    size -= 1024
    if size <= 1024:
        if size % POOL_SIZE_LEVEL_2 == 0:
            return POOL_COUNT_LEVEL_1 + size // POOL_SIZE_LEVEL_2 - 1
        return POOL_COUNT_LEVEL_1 + (size + POOL_SIZE_LEVEL_2) // POOL_SIZE_LEVEL_2 - 1

    size -= 1024
    if size % POOL_SIZE_LEVEL_3 == 0:
        return POOL_COUNT_TO_LEVEL_2 + size // POOL_SIZE_LEVEL_3 - 1
    return POOL_COUNT_TO_LEVEL_2 + (size + POOL_SIZE_LEVEL_3) // POOL_SIZE_LEVEL_3 - 1


class Block:
    """A byte block laid out as [size][guard][data][guard][next]."""

    def __init__(self, size):
        if size < HEADER_SIZE + RIGHT_GUARD_SPACE:
            raise ValueError(
                f"block size must be at least {HEADER_SIZE + RIGHT_GUARD_SPACE}"
            )
        self._storage = bytearray(size)
        self._attach(size)

    def _attach(self, size):
        if size > len(self._storage):
            raise ValueError(
                f"block of {len(self._storage)} bytes cannot hold {size}"
            )
        self.size = size
        _HEADER.pack_into(self._storage, 0, size, GUARD_VALUE)
        _GUARD.pack_into(self._storage, size - RIGHT_GUARD_SPACE, GUARD_VALUE)

    @property
    def capacity(self):
        return len(self._storage)

    @property
    def raw(self):
        """The whole block, header and guards included."""
        return memoryview(self._storage)

    @property
    def data(self):
        """The writable payload between the guards."""
        return memoryview(self._storage)[HEADER_SIZE : self.size - RIGHT_GUARD_SPACE]

    def check_guards(self):
        """Raise GuardError if either guard no longer holds GUARD_VALUE."""
        _, front = _HEADER.unpack_from(self._storage, 0)
        if front != GUARD_VALUE:
            raise GuardError(f"left guard is {front:#x}, expected {GUARD_VALUE:#x}")
        (rear,) = _GUARD.unpack_from(self._storage, self.size - RIGHT_GUARD_SPACE)
        if rear != GUARD_VALUE:
            raise GuardError(f"right guard is {rear:#x}, expected {GUARD_VALUE:#x}")


class NodeChunk:
    """A LIFO stack of free nodes."""

    def __init__(self):
        self._nodes = []

    def size(self):
        return len(self._nodes)

    def export(self):
        """Pop a node, or return None when empty."""
        return self._nodes.pop() if self._nodes else None

    def register(self, node):
        self._nodes.append(node)


class ChunkRegistry:
    """Shared store of surplus chunks, one queue per size class."""

    _instance = None
    _instance_lock = threading.Lock()

    def __init__(self):
        self._lock = threading.Lock()
        self._queues = [deque() for _ in range(POOL_COUNT_TO_LEVEL_3)]

    @staticmethod
    def instance():
        with ChunkRegistry._instance_lock:
            if ChunkRegistry._instance is None:
                ChunkRegistry._instance = ChunkRegistry()
            return ChunkRegistry._instance

    def pool_size(self, alloc_size):
        """Number of chunks kept for blocks of ``alloc_size``."""
        with self._lock:
            return len(self._queues[get_pool_index(alloc_size)])

    def register_chunk(self, pool_size, chunk):
        with self._lock:
            self._queues[get_pool_index(pool_size)].append(chunk)

    def take_chunk(self, pool_size):
        """Remove and return the oldest kept chunk, or None."""
        with self._lock:
            queue = self._queues[get_pool_index(pool_size)]
            return queue.popleft() if queue else None


class MemoryPool:
    """Free list of blocks of one size class."""

    def __init__(self, alloc_size, managed_count=MEMORY_ALLOC_SIZE, registry=None):
        self.alloc_size = alloc_size
        self.managed_count = managed_count
        self._registry = registry if registry is not None else ChunkRegistry.instance()
        self._inner = NodeChunk()
        self._extra = NodeChunk()
        for _ in range(managed_count):
            self._inner.register(Block(alloc_size))

    @property
    def inner_size(self):
        return self._inner.size()

    @property
    def extra_size(self):
        return self._extra.size()

    def alloc(self):
        """Hand out a free block, creating one if every source is empty."""
        if self._inner.size() > 0:
            return self._inner.export()
        if self._extra.size() > 0:
            return self._extra.export()
        if self._registry.pool_size(self.alloc_size) > 0:
            chunk = self._registry.take_chunk(self.alloc_size)
            if chunk is not None:
                self._inner = chunk
                return self._inner.export()
        return Block(self.alloc_size)

    def free(self, node):
        """Take a block back; surplus chunks go to the shared registry."""
        if self._inner.size() < self.managed_count:
            self._inner.register(node)
            return
        self._extra.register(node)
        if self._extra.size() > EXTRA_CHUNK_MOVE_SIZE:
            self._registry.register_chunk(self.alloc_size, self._extra)
            self._extra = NodeChunk()


class PoolManager:
    """Routes allocations to the pool of the matching size class."""

    def __init__(self, managed_count=MEMORY_ALLOC_SIZE):
        self._pools = [MemoryPool(size, managed_count) for size in POOL_SIZES]

    def alloc(self, size):
        """A guarded block whose ``data`` holds exactly ``size`` bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        alloc_size = size + HEADER_SIZE + RIGHT_GUARD_SPACE
        if alloc_size > MAX_ALLOC_SIZE:
            return Block(alloc_size)
        block = self._pools[get_pool_index(alloc_size)].alloc()
        block._attach(alloc_size)
        return block

    def free(self, block):
        """Check the guards and return the block to its pool."""
        block.check_guards()
        if block.size > MAX_ALLOC_SIZE:
            return
        self._pools[get_pool_index(block.size)].free(block)