"""Sv39 page tables kept in a simulated physical memory."""

from enum import IntFlag

from fogtools.memlayout import KERNBASE, MAXVA, PGSHIFT, PGSIZE

_PTE_SIZE = 8
_NPTE = 512
_PXMASK = 0x1FF


class VmPanic(RuntimeError):
    """An invariant of the page tables was broken."""


class BadAddress(ValueError):
    """A user virtual address is not mapped for user access."""


class OutOfPages(MemoryError):
    """No free physical page was left."""


class PteFlag(IntFlag):
    """Bits of a page-table entry."""

    V = 1 << 0
    R = 1 << 1
    W = 1 << 2
    X = 1 << 3
    U = 1 << 4


def pgroundup(a):
    """Round a up to a page boundary."""
    return (a + PGSIZE - 1) & ~(PGSIZE - 1)


def pgrounddown(a):
    """Round a down to a page boundary."""
    return a & ~(PGSIZE - 1)


def _px(level, va):
    return (va >> (PGSHIFT + 9 * level)) & _PXMASK


def _pa2pte(pa):
    return (pa >> 12) << 10


def _pte2pa(pte):
    return (pte >> 10) << 12


def _pte_flags(pte):
    return pte & 0x3FF


class PhysicalMemory:
    """A run of page-sized physical memory with a page allocator."""

    def __init__(self, npages=1024, base=KERNBASE):
        if npages <= 0:
            raise ValueError("physical memory needs at least one page")
        if base % PGSIZE:
            raise ValueError("base must be page-aligned")
        self.base = base
        self.size = npages * PGSIZE
        self._data = bytearray(self.size)
        self._free = [base + i * PGSIZE for i in reversed(range(npages))]
        self._allocated = set()

    def kalloc(self):
        """Allocate one zeroed page and return its physical address."""
        if not self._free:
            raise OutOfPages("out of physical pages")
        pa = self._free.pop()
        self._allocated.add(pa)
        off = pa - self.base
        self._data[off:off + PGSIZE] = bytes(PGSIZE)
        return pa

    def kfree(self, pa):
        """Return a page obtained from kalloc."""
        if pa % PGSIZE or pa not in self._allocated:
            raise VmPanic("kfree")
        self._allocated.discard(pa)
        self._free.append(pa)

    def _offset(self, pa, n):
        if n < 0 or pa < self.base or pa + n > self.base + self.size:
            raise VmPanic(f"physical address {pa:#x} out of range")
        return pa - self.base

    def read(self, pa, n):
        """Read n bytes at physical address pa."""
        off = self._offset(pa, n)
        return bytes(self._data[off:off + n])

    def write(self, pa, data):
        """Write data at physical address pa."""
        off = self._offset(pa, len(data))
        self._data[off:off + len(data)] = data

    def free_pages(self):
        """Number of pages not allocated."""
        return len(self._free)


class PageTable:
    """A three-level page table rooted at a physical page."""

    def __init__(self, mem, root=None):
        self.mem = mem
        self.root = mem.kalloc() if root is None else root

    def _get(self, addr):
        return int.from_bytes(self.mem.read(addr, _PTE_SIZE), "little")

    def _set(self, addr, value):
        self.mem.write(addr, value.to_bytes(_PTE_SIZE, "little"))

    def walk(self, va, alloc=False):
        """Return the physical address of the PTE for va, or None if absent.

        With alloc, missing page-table pages are created.
        """
        if va >= MAXVA:
            raise VmPanic("walk")
        table = self.root
        for level in (2, 1):
            pte_addr = table + _PTE_SIZE * _px(level, va)
            pte = self._get(pte_addr)
            if pte & PteFlag.V:
                table = _pte2pa(pte)
            else:
                if not alloc:
                    return None
                table = self.mem.kalloc()
                self._set(pte_addr, _pa2pte(table) | PteFlag.V)
        return table + _PTE_SIZE * _px(0, va)

    def walkaddr(self, va):
        """Physical address of the user page at va, or None if not mapped."""
        if va >= MAXVA:
            return None
        pte_addr = self.walk(va)
        if pte_addr is None:
            return None
        pte = self._get(pte_addr)
        if not pte & PteFlag.V or not pte & PteFlag.U:
            return None
        return _pte2pa(pte)

    def mappages(self, va, size, pa, perm):
        """Map [va, va+size) to physical addresses starting at pa."""
        if size == 0:
            raise VmPanic("mappages: size")
        a = pgrounddown(va)
        last = pgrounddown(va + size - 1)
        while True:
            pte_addr = self.walk(a, True)
            if self._get(pte_addr) & PteFlag.V:
                raise VmPanic("mappages: remap")
            self._set(pte_addr, _pa2pte(pa) | int(perm) | PteFlag.V)
            if a == last:
                return
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va, npages, do_free):
        """Remove npages existing mappings from page-aligned va."""
        if va % PGSIZE:
            raise VmPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            pte_addr = self.walk(a)
            if pte_addr is None:
                raise VmPanic("uvmunmap: walk")
            pte = self._get(pte_addr)
            if not pte & PteFlag.V:
                raise VmPanic("uvmunmap: not mapped")
            if _pte_flags(pte) == PteFlag.V:
                raise VmPanic("uvmunmap: not a leaf")
            if do_free:
                self.mem.kfree(_pte2pa(pte))
            self._set(pte_addr, 0)

    def load_first(self, src):
        """Load src, less than a page, at address zero."""
        if len(src) >= PGSIZE:
            raise VmPanic("uvmfirst: more than a page")
        page = self.mem.kalloc()
        self.mappages(0, PGSIZE, page, PteFlag.W | PteFlag.R | PteFlag.X | PteFlag.U)
        self.mem.write(page, bytes(src))

    def grow(self, oldsz, newsz, xperm=0):
        """Allocate zeroed user pages from oldsz up to newsz; return the new size."""
        if newsz < oldsz:
            return oldsz
        oldsz = pgroundup(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                page = self.mem.kalloc()
            except OutOfPages:
                self.shrink(a, oldsz)
                raise
            try:
                self.mappages(a, PGSIZE, page, PteFlag.R | PteFlag.U | int(xperm))
            except OutOfPages:
                self.mem.kfree(page)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz, newsz):
        """Free user pages to bring the size from oldsz down to newsz."""
        if newsz >= oldsz:
            return oldsz
        if pgroundup(newsz) < pgroundup(oldsz):
            npages = (pgroundup(oldsz) - pgroundup(newsz)) // PGSIZE
            self.unmap(pgroundup(newsz), npages, True)
        return newsz

    def _freewalk(self, table):
        for i in range(_NPTE):
            pte_addr = table + _PTE_SIZE * i
            pte = self._get(pte_addr)
            if pte & PteFlag.V and not pte & (PteFlag.R | PteFlag.W | PteFlag.X):
                self._freewalk(_pte2pa(pte))
                self._set(pte_addr, 0)
            elif pte & PteFlag.V:
                raise VmPanic("freewalk: leaf")
        self.mem.kfree(table)

    def free(self, sz):
        """Free sz bytes of user memory, then every page-table page."""
        if sz > 0:
            self.unmap(0, pgroundup(sz) // PGSIZE, True)
        self._freewalk(self.root)

    def copy_to(self, new, sz):
        """Copy the first sz bytes of memory and mappings into page table new."""
        done = 0
        try:
            for i in range(0, sz, PGSIZE):
                pte_addr = self.walk(i)
                if pte_addr is None:
                    raise VmPanic("uvmcopy: pte should exist")
                pte = self._get(pte_addr)
                if not pte & PteFlag.V:
                    raise VmPanic("uvmcopy: page not present")
                page = new.mem.kalloc()
                new.mem.write(page, self.mem.read(_pte2pa(pte), PGSIZE))
                try:
                    new.mappages(i, PGSIZE, page, _pte_flags(pte))
                except OutOfPages:
                    new.mem.kfree(page)
                    raise
                done = i + PGSIZE
        except OutOfPages:
            new.unmap(0, done // PGSIZE, True)
            raise

    def clear_user(self, va):
        """Make the page at va inaccessible to user mode."""
        pte_addr = self.walk(va)
        if pte_addr is None:
            raise VmPanic("uvmclear")
        self._set(pte_addr, self._get(pte_addr) & ~PteFlag.U)

    def _user_page(self, va0):
        pa0 = self.walkaddr(va0)
        if pa0 is None:
            raise BadAddress(f"address {va0:#x} is not mapped for user access")
        return pa0

    def copyout(self, dstva, data):
        """Copy data to user virtual address dstva."""
        data = bytes(data)
        pos = 0
        while pos < len(data):
            va0 = pgrounddown(dstva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (dstva - va0), len(data) - pos)
            self.mem.write(pa0 + (dstva - va0), data[pos:pos + n])
            pos += n
            dstva = va0 + PGSIZE

    def copyin(self, srcva, n):
        """Copy n bytes from user virtual address srcva."""
        parts = []
        while n > 0:
            va0 = pgrounddown(srcva)
            pa0 = self._user_page(va0)
            count = min(PGSIZE - (srcva - va0), n)
            parts.append(self.mem.read(pa0 + (srcva - va0), count))
            n -= count
            srcva = va0 + PGSIZE
        return b"".join(parts)

    def copyinstr(self, srcva, max):
        """Copy a NUL-terminated string of at most max bytes; the NUL is dropped."""
        out = bytearray()
        while max > 0:
            va0 = pgrounddown(srcva)
            pa0 = self._user_page(va0)
            n = min(PGSIZE - (srcva - va0), max)
            chunk = self.mem.read(pa0 + (srcva - va0), n)
            nul = chunk.find(b"\0")
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            max -= n
            srcva = va0 + PGSIZE
        raise BadAddress("string is not terminated within the limit")