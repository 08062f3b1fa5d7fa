import pytest

from fogtools.umalloc import HEADER_SIZE, Allocator, OutOfMemory


def test_blocks_do_not_overlap():
    alloc = Allocator()
    sizes = [1, 100, 17, 4000, 32, 0]
    spans = sorted((alloc.malloc(n), n) for n in sizes)
    for (a, n), (b, _) in zip(spans, spans[1:]):
        assert a + n <= b - HEADER_SIZE


def test_free_everything_coalesces():
    alloc = Allocator()
    addrs = [alloc.malloc(n) for n in (10, 200, 30, 4000, 5)]
    for addr in addrs[::2] + addrs[1::2]:
        alloc.free(addr)
    assert alloc.free_blocks() == [(HEADER_SIZE, alloc.heap_size)]


def test_freed_block_is_reused():
    alloc = Allocator()
    first = alloc.malloc(100)
    alloc.free(first)
    assert alloc.malloc(100) == first


def test_free_blocks_empty_before_use():
    assert Allocator().free_blocks() == []


def test_large_request_grows_heap():
    alloc = Allocator()
    alloc.malloc(5000 * HEADER_SIZE)
    assert alloc.heap_size >= 5000 * HEADER_SIZE


def test_limit_raises_out_of_memory():
    with pytest.raises(OutOfMemory):
        Allocator(limit=1024).malloc(1)


def test_heap_never_exceeds_limit():
    limit = 3 * 4096 * HEADER_SIZE
    alloc = Allocator(limit=limit)
    with pytest.raises(OutOfMemory):
        while True:
            alloc.malloc(10000)
    assert alloc.heap_size <= limit


def test_double_free_rejected():
    alloc = Allocator()
    addr = alloc.malloc(8)
    alloc.free(addr)
    with pytest.raises(ValueError):
        alloc.free(addr)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Allocator().malloc(-1)