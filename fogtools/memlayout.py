"""Physical and virtual memory layout of the qemu virt machine.

The kernel uses physical memory thus:
  0x80000000 -- kernel text and data
  end        -- start of the page allocation area
  PHYSTOP    -- end of RAM used by the kernel
"""

# Sv39 paging: 12 bits of page offset and three 9-bit levels of index.
PGSHIFT = 12
PGSIZE = 1 << PGSHIFT
MAXVA = 1 << (9 + 9 + 9 + PGSHIFT)

# qemu puts UART registers here in physical memory.
UART0 = 0x10000000
UART0_IRQ = 10

# virtio mmio interface
VIRTIO0 = 0x10001000
VIRTIO0_IRQ = 1

# core local interruptor (CLINT), which contains the timer.
CLINT = 0x2000000
CLINT_MTIME = CLINT + 0xBFF8  # cycles since boot.

# platform-level interrupt controller (PLIC).
PLIC = 0x0C000000
PLIC_PRIORITY = PLIC + 0x0
PLIC_PENDING = PLIC + 0x1000

# RAM available to the kernel and user pages.
KERNBASE = 0x80000000
PHYSTOP = KERNBASE + 128 * 1024 * 1024

# The trampoline page sits at the highest address in both user and kernel space.
TRAMPOLINE = MAXVA - PGSIZE

# The trap frame page sits just beneath the trampoline in user space.
TRAPFRAME = TRAMPOLINE - PGSIZE


def clint_mtimecmp(hartid):
    """Address of the timer compare register for a hart."""
    return CLINT + 0x4000 + 8 * hartid


def plic_menable(hart):
    """Machine-mode interrupt enable bits for a hart."""
    return PLIC + 0x2000 + hart * 0x100


def plic_senable(hart):
    """Supervisor-mode interrupt enable bits for a hart."""
    return PLIC + 0x2080 + hart * 0x100


def plic_mpriority(hart):
    """Machine-mode priority threshold for a hart."""
    return PLIC + 0x200000 + hart * 0x2000


def plic_spriority(hart):
    """Supervisor-mode priority threshold for a hart."""
    return PLIC + 0x201000 + hart * 0x2000


def plic_mclaim(hart):
    """Machine-mode claim/complete register for a hart."""
    return PLIC + 0x200004 + hart * 0x2000


def plic_sclaim(hart):
    """Supervisor-mode claim/complete register for a hart."""
    return PLIC + 0x201004 + hart * 0x2000


def kstack(p):
    """Virtual address of process slot p's kernel stack, between guard pages."""
    return TRAMPOLINE - (p + 1) * 2 * PGSIZE