"""Virtio MMIO registers and the descriptor ring structures of a block device."""

import struct
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import ClassVar

# Number of virtio descriptors; must be a power of two.
NUM = 8

MAGIC_VALUE = 0x74726976
VENDOR_ID = 0x554D4551
VERSION = 2
DEVICE_ID_NET = 1
DEVICE_ID_DISK = 2


class MmioRegister(IntEnum):
    """Offsets of the virtio mmio control registers."""

    MAGIC_VALUE = 0x000
    VERSION = 0x004
    DEVICE_ID = 0x008
    VENDOR_ID = 0x00C
    DEVICE_FEATURES = 0x010
    DRIVER_FEATURES = 0x020
    QUEUE_SEL = 0x030
    QUEUE_NUM_MAX = 0x034
    QUEUE_NUM = 0x038
    QUEUE_READY = 0x044
    QUEUE_NOTIFY = 0x050
    INTERRUPT_STATUS = 0x060
    INTERRUPT_ACK = 0x064
    STATUS = 0x070
    QUEUE_DESC_LOW = 0x080
    QUEUE_DESC_HIGH = 0x084
    DRIVER_DESC_LOW = 0x090
    DRIVER_DESC_HIGH = 0x094
    DEVICE_DESC_LOW = 0x0A0
    DEVICE_DESC_HIGH = 0x0A4


class ConfigStatus(IntFlag):
    """Bits of the status register."""

    ACKNOWLEDGE = 1
    DRIVER = 2
    DRIVER_OK = 4
    FEATURES_OK = 8


class BlkFeature(IntEnum):
    """Bit numbers of device feature flags."""

    RO = 5
    SCSI = 7
    CONFIG_WCE = 11
    MQ = 12
    ANY_LAYOUT = 27
    RING_INDIRECT_DESC = 28
    RING_EVENT_IDX = 29

    @property
    def mask(self):
        """The feature as a bit mask."""
        return 1 << self.value


class DescFlag(IntFlag):
    """Descriptor flags."""

    NEXT = 1  # chained with another descriptor
    WRITE = 2  # device writes (vs read)


class BlkRequestType(IntEnum):
    """Kinds of block request."""

    IN = 0  # read the disk
    OUT = 1  # write the disk


def _pack(fmt, name, *values):
    try:
        return fmt.pack(*values)
    except struct.error as exc:
        raise ValueError(f"cannot pack {name}: {exc}") from exc


def _unpack(fmt, name, data):
    data = bytes(data)
    if len(data) != fmt.size:
        raise ValueError(f"{name} needs {fmt.size} bytes, got {len(data)}")
    return fmt.unpack(data)


@dataclass
class VirtqDesc:
    """A single descriptor."""

    addr: int = 0
    len: int = 0
    flags: int = 0
    next: int = 0

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<QIHH")

    def pack(self):
        """Encode as device bytes."""
        return _pack(self.FORMAT, "virtq_desc", self.addr, self.len, self.flags, self.next)

    @classmethod
    def unpack(cls, data):
        """Decode from device bytes."""
        addr, length, flags, nxt = _unpack(cls.FORMAT, "virtq_desc", data)
        return cls(addr, length, DescFlag(flags), nxt)


@dataclass
class VirtqAvail:
    """The available ring: descriptor numbers of chain heads."""

    flags: int = 0
    idx: int = 0
    ring: list = field(default_factory=lambda: [0] * NUM)
    unused: int = 0

    FORMAT: ClassVar[struct.Struct] = struct.Struct(f"<HH{NUM}HH")

    def pack(self):
        """Encode as device bytes."""
        if len(self.ring) != NUM:
            raise ValueError(f"avail ring must have {NUM} entries")
        return _pack(self.FORMAT, "virtq_avail", self.flags, self.idx, *self.ring, self.unused)

    @classmethod
    def unpack(cls, data):
        """Decode from device bytes."""
        flags, idx, *rest = _unpack(cls.FORMAT, "virtq_avail", data)
        return cls(flags, idx, list(rest[:NUM]), rest[NUM])


@dataclass
class VirtqUsedElem:
    """One completed request reported by the device."""

    id: int = 0
    len: int = 0

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<II")

    def pack(self):
        """Encode as device bytes."""
        return _pack(self.FORMAT, "virtq_used_elem", self.id, self.len)

    @classmethod
    def unpack(cls, data):
        """Decode from device bytes."""
        return cls(*_unpack(cls.FORMAT, "virtq_used_elem", data))


@dataclass
class VirtqUsed:
    """The used ring the device fills with completed requests."""

    flags: int = 0
    idx: int = 0
    ring: list = field(default_factory=lambda: [VirtqUsedElem() for _ in range(NUM)])

    FORMAT: ClassVar[struct.Struct] = struct.Struct(f"<HH{2 * NUM}I")

    def pack(self):
        """Encode as device bytes."""
        if len(self.ring) != NUM:
            raise ValueError(f"used ring must have {NUM} entries")
        values = [v for elem in self.ring for v in (elem.id, elem.len)]
        return _pack(self.FORMAT, "virtq_used", self.flags, self.idx, *values)

    @classmethod
    def unpack(cls, data):
        """Decode from device bytes."""
        flags, idx, *rest = _unpack(cls.FORMAT, "virtq_used", data)
        ring = [VirtqUsedElem(rest[i], rest[i + 1]) for i in range(0, 2 * NUM, 2)]
        return cls(flags, idx, ring)


@dataclass
class VirtioBlkReq:
    """The first descriptor of a disk request."""

    type: int = BlkRequestType.IN
    reserved: int = 0
    sector: int = 0

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<IIQ")

    def pack(self):
        """Encode as device bytes."""
        return _pack(self.FORMAT, "virtio_blk_req", self.type, self.reserved, self.sector)

    @classmethod
    def unpack(cls, data):
        """Decode from device bytes."""
        kind, reserved, sector = _unpack(cls.FORMAT, "virtio_blk_req", data)
        try:
            kind = BlkRequestType(kind)
        except ValueError:
            pass
        return cls(kind, reserved, sector)