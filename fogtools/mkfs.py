"""Build a file system image holding a root directory and a set of files."""

import os
import struct
import sys
from dataclasses import dataclass, field
from functools import cached_property

from fogtools.ls import FileType

NINODES = 200
_BOOT_AND_SUPER = 2


@dataclass(frozen=True)
class FsLayout:
    """Sizes that fix where everything lives on the disk.

    Disk layout:
    [ boot block | sb block | log | inode blocks | free bit map | data blocks ]
    """

    block_size: int = 1024
    size: int = 2000
    nlog: int = 30
    ninodes: int = NINODES
    ndirect: int = 12
    dirsiz: int = 14
    magic: int = 0x10203040
    rootino: int = 1

    def __post_init__(self):
        if self.block_size <= 0 or self.block_size % 4:
            raise ValueError("block size must be a positive multiple of 4")
        if self.block_size % self.dinode_size:
            raise ValueError("block size must hold a whole number of inodes")
        if self.block_size % self.dirent_size:
            raise ValueError("block size must hold a whole number of directory entries")
        if self.size <= self.nmeta:
            raise ValueError("file system too small for its metadata")

    @property
    def dinode_size(self):
        """Bytes in one on-disk inode."""
        return 12 + 4 * (self.ndirect + 1)

    @property
    def dirent_size(self):
        """Bytes in one directory entry."""
        return 2 + self.dirsiz

    @property
    def ipb(self):
        """Inodes per block."""
        return self.block_size // self.dinode_size

    @property
    def nindirect(self):
        """Block numbers held by the indirect block."""
        return self.block_size // 4

    @property
    def maxfile(self):
        """Largest file, in blocks."""
        return self.ndirect + self.nindirect

    @property
    def nbitmap(self):
        """Blocks of free bit map."""
        return self.size // (self.block_size * 8) + 1

    @property
    def ninodeblocks(self):
        """Blocks holding inodes."""
        return self.ninodes // self.ipb + 1

    @property
    def nmeta(self):
        """Blocks of boot, superblock, log, inodes and bit map."""
        return _BOOT_AND_SUPER + self.nlog + self.ninodeblocks + self.nbitmap

    @property
    def nblocks(self):
        """Data blocks."""
        return self.size - self.nmeta

    def superblock(self):
        """The superblock describing this layout."""
        return Superblock(
            magic=self.magic,
            size=self.size,
            nblocks=self.nblocks,
            ninodes=self.ninodes,
            nlog=self.nlog,
            logstart=_BOOT_AND_SUPER,
            inodestart=_BOOT_AND_SUPER + self.nlog,
            bmapstart=_BOOT_AND_SUPER + self.nlog + self.ninodeblocks,
        )


@dataclass
class Superblock:
    """Describes the disk layout."""

    magic: int = 0
    size: int = 0
    nblocks: int = 0
    ninodes: int = 0
    nlog: int = 0
    logstart: int = 0
    inodestart: int = 0
    bmapstart: int = 0

    _FORMAT = struct.Struct("<8I")

    def pack(self):
        """Encode as disk bytes."""
        return self._FORMAT.pack(
            self.magic, self.size, self.nblocks, self.ninodes,
            self.nlog, self.logstart, self.inodestart, self.bmapstart,
        )

    @classmethod
    def unpack(cls, data):
        """Decode from the start of data."""
        return cls(*cls._FORMAT.unpack_from(bytes(data)))


@dataclass
class Dinode:
    """An on-disk inode."""

    type: int = 0
    major: int = 0
    minor: int = 0
    nlink: int = 0
    size: int = 0
    addrs: list = field(default_factory=list)

    def pack(self):
        """Encode as disk bytes."""
        return struct.pack(
            f"<hhhhI{len(self.addrs)}I",
            self.type, self.major, self.minor, self.nlink, self.size, *self.addrs,
        )

    @classmethod
    def unpack(cls, data):
        """Decode; the number of addresses follows from the length of data."""
        data = bytes(data)
        if len(data) < 12 or (len(data) - 12) % 4:
            raise ValueError(f"bad inode length {len(data)}")
        naddrs = (len(data) - 12) // 4
        kind, major, minor, nlink, size, *addrs = struct.unpack(f"<hhhhI{naddrs}I", data)
        return cls(kind, major, minor, nlink, size, addrs)


@dataclass
class Dirent:
    """A directory entry: inode number and a NUL-padded name."""

    inum: int = 0
    name: bytes = b""
    dirsiz: int = 14

    def pack(self):
        """Encode as disk bytes, truncating the name to dirsiz."""
        name = self.name.encode() if isinstance(self.name, str) else bytes(self.name)
        return struct.pack("<H", self.inum) + name[: self.dirsiz].ljust(self.dirsiz, b"\0")

    @classmethod
    def unpack(cls, data):
        """Decode; the name length follows from the length of data."""
        data = bytes(data)
        if len(data) < 2:
            raise ValueError("directory entry too short")
        (inum,) = struct.unpack_from("<H", data)
        raw = data[2:]
        return cls(inum, raw.split(b"\0", 1)[0], len(raw))


class ImageBuilder:
    """Writes a fresh file system onto a seekable binary file."""

    def __init__(self, fsfd, layout=None, out=None):
        self.fsfd = fsfd
        self.layout = layout if layout is not None else FsLayout()
        self.out = out
        self.sb = self.layout.superblock()
        self.freeinode = 1
        self.freeblock = self.layout.nmeta
        zeroes = bytes(self.layout.block_size)
        for sec in range(self.layout.size):
            self.wsect(sec, zeroes)
        self.wsect(1, self.sb.pack().ljust(self.layout.block_size, b"\0"))
        self.rootino = self.ialloc(FileType.DIR)
        if self.rootino != self.layout.rootino:
            raise RuntimeError("root inode was not the first inode")
        self.iappend(self.rootino, self._dirent(self.rootino, b"."))
        self.iappend(self.rootino, self._dirent(self.rootino, b".."))

    @cached_property
    def _indirect_format(self):
        return struct.Struct(f"<{self.layout.nindirect}I")

    def _say(self, text):
        if self.out is not None:
            self.out.write(text)

    def _dirent(self, inum, name):
        return Dirent(inum, name, self.layout.dirsiz).pack()

    def _alloc_block(self):
        block = self.freeblock
        self.freeblock += 1
        return block

    def rsect(self, sec):
        """Read one sector."""
        bs = self.layout.block_size
        self.fsfd.seek(sec * bs)
        data = self.fsfd.read(bs)
        if len(data) != bs:
            raise OSError(f"read: short read at sector {sec}")
        return data

    def wsect(self, sec, data):
        """Write one whole sector."""
        bs = self.layout.block_size
        if len(data) != bs:
            raise ValueError(f"sector data must be {bs} bytes, got {len(data)}")
        self.fsfd.seek(sec * bs)
        if self.fsfd.write(bytes(data)) != bs:
            raise OSError(f"write: short write at sector {sec}")

    def _inode_place(self, inum):
        layout = self.layout
        bn = inum // layout.ipb + self.sb.inodestart
        return bn, (inum % layout.ipb) * layout.dinode_size

    def rinode(self, inum):
        """Read inode inum."""
        bn, off = self._inode_place(inum)
        buf = self.rsect(bn)
        return Dinode.unpack(buf[off:off + self.layout.dinode_size])

    def winode(self, inum, din):
        """Write inode inum."""
        bn, off = self._inode_place(inum)
        raw = din.pack()
        if len(raw) != self.layout.dinode_size:
            raise ValueError("inode does not match the layout")
        buf = bytearray(self.rsect(bn))
        buf[off:off + len(raw)] = raw
        self.wsect(bn, buf)

    def ialloc(self, type):
        """Allocate the next inode with the given type; return its number."""
        inum = self.freeinode
        self.freeinode += 1
        din = Dinode(type=int(type), nlink=1, size=0, addrs=[0] * (self.layout.ndirect + 1))
        self.winode(inum, din)
        return inum

    def iappend(self, inum, data):
        """Append data to the end of inode inum, allocating blocks as needed."""
        layout = self.layout
        bs, ndirect = layout.block_size, layout.ndirect
        data = bytes(data)
        din = self.rinode(inum)
        off = din.size
        pos = 0
        while pos < len(data):
            fbn = off // bs
            if fbn >= layout.maxfile:
                raise ValueError(f"inode {inum}: file larger than {layout.maxfile} blocks")
            if fbn < ndirect:
                if din.addrs[fbn] == 0:
                    din.addrs[fbn] = self._alloc_block()
                x = din.addrs[fbn]
            else:
                if din.addrs[ndirect] == 0:
                    din.addrs[ndirect] = self._alloc_block()
                ind_block = din.addrs[ndirect]
                indirect = list(self._indirect_format.unpack(self.rsect(ind_block)))
                if indirect[fbn - ndirect] == 0:
                    indirect[fbn - ndirect] = self._alloc_block()
                    self.wsect(ind_block, self._indirect_format.pack(*indirect))
                x = indirect[fbn - ndirect]
            n1 = min(len(data) - pos, (fbn + 1) * bs - off)
            start = off - fbn * bs
            buf = bytearray(self.rsect(x))
            buf[start:start + n1] = data[pos:pos + n1]
            self.wsect(x, buf)
            pos += n1
            off += n1
        din.size = off
        self.winode(inum, din)

    def add_file(self, path):
        """Copy the file at path into the root directory; return its inode number."""
        shortname = path[len("user/"):] if path.startswith("user/") else path
        if "/" in shortname:
            raise ValueError(f"{path}: name must not contain a directory")
        with open(path, "rb") as src:
            # A leading underscore keeps the host from running these binaries.
            if shortname.startswith("_"):
                shortname = shortname[1:]
            inum = self.ialloc(FileType.FILE)
            self.iappend(self.rootino, self._dirent(inum, os.fsencode(shortname)))
            while True:
                chunk = src.read(self.layout.block_size)
                if not chunk:
                    break
                self.iappend(inum, chunk)
        return inum

    def balloc(self, used):
        """Mark the first used blocks as allocated in the bit map."""
        bs = self.layout.block_size
        self._say(f"balloc: first {used} blocks have been allocated\n")
        if used >= bs * 8:
            raise ValueError(f"{used} blocks do not fit in one bit map block")
        bitmap = ((1 << used) - 1).to_bytes(bs, "little")
        self._say(f"balloc: write bitmap block at sector {self.sb.bmapstart}\n")
        self.wsect(self.sb.bmapstart, bitmap)

    def finish(self):
        """Round the root directory size up and write the bit map."""
        bs = self.layout.block_size
        din = self.rinode(self.rootino)
        din.size = (din.size // bs + 1) * bs
        self.winode(self.rootino, din)
        self.balloc(self.freeblock)


def _summary(layout):
    return (
        f"nmeta {layout.nmeta} (boot, super, log blocks {layout.nlog} "
        f"inode blocks {layout.ninodeblocks}, bitmap blocks {layout.nbitmap}) "
        f"blocks {layout.nblocks} total {layout.size}\n"
    )


def _build(image, files, layout, out):
    with open(image, "w+b") as fsfd:
        if out is not None:
            out.write(_summary(builder_layout := layout or FsLayout()))
        else:
            builder_layout = layout or FsLayout()
        builder = ImageBuilder(fsfd, builder_layout, out)
        for path in files:
            builder.add_file(path)
        builder.finish()
        return builder.sb


def make_image(image, files, layout=None):
    """Write a file system image at path image holding files; return its superblock."""
    return _build(image, files, layout, None)


def main(argv=None):
    """Run the command; return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("Usage: mkfs fs.img files...\n")
        return 1
    try:
        _build(args[0], args[1:], None, sys.stdout)
    except OSError as exc:
        name = exc.filename if exc.filename is not None else args[0]
        sys.stderr.write(f"{name}: {exc.strerror or exc}\n")
        return 1
    except ValueError as exc:
        sys.stderr.write(f"mkfs: {exc}\n")
        return 1
    return 0