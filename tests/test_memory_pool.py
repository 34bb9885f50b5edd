import pytest

from chatnet.memory_pool import (
    EXTRA_CHUNK_MOVE_SIZE,
    GUARD_VALUE,
    HEADER_SIZE,
    MAX_ALLOC_SIZE,
    POOL_SIZES,
    RIGHT_GUARD_SPACE,
    Block,
    ChunkRegistry,
    GuardError,
    MemoryPool,
    NodeChunk,
    PoolManager,
    get_pool_index,
)


def test_pool_index_fits_every_size():
    for size in range(1, MAX_ALLOC_SIZE + 1):
        assert POOL_SIZES[get_pool_index(size)] >= size


def test_pool_index_is_monotonic():
    indexes = [get_pool_index(size) for size in range(1, MAX_ALLOC_SIZE + 1)]
    assert indexes == sorted(indexes)


def test_largest_size_maps_to_last_pool():
    assert get_pool_index(MAX_ALLOC_SIZE) == len(POOL_SIZES) - 1


def test_block_header_guard_bytes():
    block = Block(64)
    assert bytes(block.raw[4:8]) == GUARD_VALUE.to_bytes(4, "little")
    guard_at = 64 - RIGHT_GUARD_SPACE
    assert bytes(block.raw[guard_at : guard_at + 4]) == GUARD_VALUE.to_bytes(4, "little")
    assert len(block.data) == 64 - HEADER_SIZE - RIGHT_GUARD_SPACE


def test_block_front_guard_corruption():
    block = Block(64)
    block.raw[4] = 0
    with pytest.raises(GuardError):
        block.check_guards()


def test_block_rear_guard_corruption():
    block = Block(64)
    block.raw[64 - RIGHT_GUARD_SPACE] ^= 0xFF
    with pytest.raises(GuardError):
        block.check_guards()


def test_block_too_small():
    with pytest.raises(ValueError):
        Block(HEADER_SIZE)


def test_node_chunk_is_lifo():
    chunk = NodeChunk()
    first, second = object(), object()
    chunk.register(first)
    chunk.register(second)
    assert chunk.size() == 2
    assert chunk.export() is second
    assert chunk.export() is first
    assert chunk.export() is None
    assert chunk.size() == 0


def test_registry_singleton_and_empty():
    assert ChunkRegistry.instance() is ChunkRegistry.instance()
    registry = ChunkRegistry()
    assert registry.take_chunk(64) is None
    assert registry.pool_size(64) == 0


def test_memory_pool_reuses_inner_blocks():
    pool = MemoryPool(64, 2, ChunkRegistry())
    a = pool.alloc()
    b = pool.alloc()
    assert pool.inner_size == 0
    pool.free(a)
    pool.free(b)
    assert pool.inner_size == 2
    assert pool.alloc() is b


def test_memory_pool_creates_when_empty():
    pool = MemoryPool(64, 0, ChunkRegistry())
    block = pool.alloc()
    assert block.size == 64


def test_memory_pool_moves_surplus_to_registry():
    registry = ChunkRegistry()
    pool = MemoryPool(64, 1, registry)
    extras = [Block(64) for _ in range(EXTRA_CHUNK_MOVE_SIZE + 1)]
    for block in extras:
        pool.free(block)
    assert registry.pool_size(64) == 1
    assert pool.extra_size == 0

    pool.alloc()  # drain the inner chunk
    taken = pool.alloc()
    assert registry.pool_size(64) == 0
    assert any(taken is block for block in extras)


def test_pool_manager_payload_and_reuse():
    manager = PoolManager(1)
    block = manager.alloc(10)
    assert len(block.data) == 10
    block.data[:] = b"0123456789"
    assert bytes(block.data) == b"0123456789"
    manager.free(block)
    again = manager.alloc(10)
    assert again is block


def test_pool_manager_large_allocation():
    manager = PoolManager(1)
    block = manager.alloc(MAX_ALLOC_SIZE + 904)
    assert len(block.data) == MAX_ALLOC_SIZE + 904
    assert block.size > MAX_ALLOC_SIZE
    manager.free(block)
    assert manager.alloc(MAX_ALLOC_SIZE + 904) is not block


def test_pool_manager_free_detects_overrun():
    manager = PoolManager(1)
    block = manager.alloc(16)
    block.raw[HEADER_SIZE + 16] = 0
    with pytest.raises(GuardError):
        manager.free(block)


def test_pool_manager_negative_size():
    with pytest.raises(ValueError):
        PoolManager(0).alloc(-1)