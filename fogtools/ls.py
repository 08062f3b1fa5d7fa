"""List files and directories with their type, inode number and size."""

import os
import stat as statmod
import sys
from dataclasses import dataclass
from enum import IntEnum

from fogtools.printf import format_string

DIRSIZ = 14
_BUFSIZE = 512


class FileType(IntEnum):
    """Kinds of file system objects."""

    DIR = 1
    FILE = 2
    DEVICE = 3


@dataclass(frozen=True)
class Stat:
    """What is known about one file."""

    dev: int
    ino: int
    type: FileType
    nlink: int
    size: int


def stat_path(path):
    """Describe the file at path; raises OSError if it cannot be examined."""
    st = os.stat(path)
    if statmod.S_ISDIR(st.st_mode):
        kind = FileType.DIR
    elif statmod.S_ISREG(st.st_mode):
        kind = FileType.FILE
    else:
        kind = FileType.DEVICE
    return Stat(st.st_dev, st.st_ino, kind, st.st_nlink, st.st_size)


def fmtname(path):
    """Return the last path component, blank-padded to DIRSIZ if shorter."""
    name = path[path.rfind("/") + 1:]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def ls(path, out):
    """Write a listing of path to out."""
    try:
        st = stat_path(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    if st.type is not FileType.DIR:
        out.write(format_string("%s %d %d %l\n", fmtname(path), st.type, st.ino, st.size))
        return
    if len(path) + 1 + DIRSIZ + 1 > _BUFSIZE:
        out.write("ls: path too long\n")
        return
    try:
        names = sorted(os.listdir(path))
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    for name in [".", "..", *names]:
        entry = f"{path}/{name}"
        try:
            est = stat_path(entry)
        except OSError:
            out.write(f"ls: cannot stat {entry}\n")
            continue
        out.write(format_string("%s %d %d %d\n", fmtname(entry), est.type, est.ino, est.size))


def main(argv=None):
    """Run the command; return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    for path in args or ["."]:
        ls(path, sys.stdout)
    return 0