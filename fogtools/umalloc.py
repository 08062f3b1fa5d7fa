"""A first-fit free-list allocator over a simulated, growable heap."""

HEADER_SIZE = 16
MIN_GROW_UNITS = 4096
_BASE = 0  # the sentinel header sits below the heap


class OutOfMemory(MemoryError):
    """The heap could not grow enough to satisfy a request."""


class Allocator:
    """Allocator handing out byte addresses from a heap grown in large steps."""

    def __init__(self, limit=None):
        self._limit = limit
        self._hdr = {}  # header unit -> [next header unit, size in units]
        self._freep = None
        self._brk = _BASE + 1
        self._live = set()

    @property
    def heap_size(self):
        """Bytes obtained from the heap so far."""
        return (self._brk - _BASE - 1) * HEADER_SIZE

    def _sbrk(self, nbytes):
        if self._limit is not None and self.heap_size + nbytes > self._limit:
            return None
        start = self._brk
        self._brk += nbytes // HEADER_SIZE
        return start

    def _morecore(self, nunits):
        nunits = max(nunits, MIN_GROW_UNITS)
        start = self._sbrk(nunits * HEADER_SIZE)
        if start is None:
            return None
        self._hdr[start] = [0, nunits]
        self._live.add(start)
        self.free((start + 1) * HEADER_SIZE)
        return self._freep

    def malloc(self, nbytes):
        """Return the address of a block of at least nbytes bytes."""
        if nbytes < 0:
            raise ValueError("negative allocation size")
        hdr = self._hdr
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            hdr[_BASE] = [_BASE, 0]
            self._freep = _BASE
        prevp = self._freep
        p = hdr[prevp][0]
        while True:
            size = hdr[p][1]
            if size >= nunits:
                if size == nunits:
                    hdr[prevp][0] = hdr[p][0]
                else:
                    hdr[p][1] -= nunits
                    p += hdr[p][1]
                    hdr[p] = [0, nunits]
                self._freep = prevp
                self._live.add(p)
                return (p + 1) * HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
                if p is None:
                    raise OutOfMemory(f"cannot allocate {nbytes} bytes")
            prevp, p = p, hdr[p][0]

    def free(self, addr):
        """Return a block obtained from malloc to the free list."""
        bp = addr // HEADER_SIZE - 1
        if addr % HEADER_SIZE or bp not in self._live:
            raise ValueError(f"address {addr:#x} was not allocated")
        self._live.discard(bp)
        hdr = self._hdr
        p = self._freep
        while not (p < bp < hdr[p][0]):
            nxt = hdr[p][0]
            if p >= nxt and (bp > p or bp < nxt):
                break
            p = nxt
        nxt = hdr[p][0]
        if bp + hdr[bp][1] == nxt:
            hdr[bp][1] += hdr[nxt][1]
            hdr[bp][0] = hdr[nxt][0]
            del hdr[nxt]
        else:
            hdr[bp][0] = nxt
        if p + hdr[p][1] == bp:
            hdr[p][1] += hdr[bp][1]
            hdr[p][0] = hdr[bp][0]
            del hdr[bp]
        else:
            hdr[p][0] = bp
        self._freep = p

    def free_blocks(self):
        """List the free blocks as (header address, size in bytes), by address."""
        if self._freep is None:
            return []
        blocks = []
        p = self._hdr[_BASE][0]
        while p != _BASE:
            blocks.append((p * HEADER_SIZE, self._hdr[p][1] * HEADER_SIZE))
            p = self._hdr[p][0]
        return sorted(blocks)