"""Small file commands: cat, echo, copy, move, ln, mkdir, rm and kill."""

import contextlib
import os
import signal
import sys

from fogtools.ulib import atoi

_CAT_CHUNK = 512
_COPY_CHUNK = 2048
_KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)


def _args(argv):
    return sys.argv[1:] if argv is None else list(argv)


def cat(stream, out):
    """Copy everything from a binary stream to out."""
    while True:
        try:
            chunk = stream.read(_CAT_CHUNK)
        except OSError as exc:
            raise OSError("cat: read error") from exc
        if not chunk:
            return
        try:
            written = out.write(chunk)
        except OSError as exc:
            raise OSError("cat: write error") from exc
        if written is not None and written != len(chunk):
            raise OSError("cat: write error")


def cat_main(argv=None):
    """Concatenate files, or standard input, to standard output."""
    args = _args(argv)
    out = sys.stdout.buffer
    try:
        if not args:
            cat(sys.stdin.buffer, out)
            return 0
        for name in args:
            try:
                stream = open(name, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {name}\n")
                return 1
            with stream:
                cat(stream, out)
    except OSError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    finally:
        out.flush()
    return 0


def echo_main(argv=None):
    """Print the arguments separated by spaces."""
    args = _args(argv)
    if args:
        sys.stdout.write(" ".join(args) + "\n")
    return 0


def copy_main(argv=None):
    """Copy a file's bytes over the start of an existing destination file."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: /copy file_source file_destination\n")
        return 1
    src = args[0]
    dst = args[1] if len(args) > 1 else None
    try:
        source = open(src, "rb")
    except OSError:
        sys.stderr.write(f"copy: unable to open source file: {src}")
        return 1
    with source:
        try:
            if dst is None:
                raise FileNotFoundError("no destination given")
            destination = os.fdopen(os.open(dst, os.O_WRONLY), "wb")
        except OSError:
            sys.stderr.write(f"copy: unable to open destination file: {dst}")
            return 1
        with destination:
            while True:
                try:
                    chunk = source.read(_COPY_CHUNK)
                except OSError:
                    sys.stderr.write("Unable to read source file")
                    return 1
                if not chunk:
                    break
                try:
                    destination.write(chunk)
                except OSError:
                    sys.stderr.write(
                        f"copy: unable to copy to destination file: {dst} from source file {src}"
                    )
                    return 1
    return 0


def move_main(argv=None):
    """Move a file into a directory by linking it there and unlinking the original."""
    args = _args(argv)
    if len(args) < 2:
        sys.stderr.write("Usage: /move file_source dir_destination...\n")
        return 1
    src, directory = args[0], args[1]
    try:
        with open(src, "rb"):
            pass
    except OSError:
        sys.stderr.write(f"move: Unable to open source file {src}\n")
        return 1
    destination = f"{directory}/{src}"
    try:
        os.link(src, destination)
    except OSError:
        sys.stderr.write(f"move: link failed {destination}\n")
        return 1
    with contextlib.suppress(OSError):
        os.unlink(src)
    return 0


def ln_main(argv=None):
    """Create a hard link new to old."""
    args = _args(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def mkdir_main(argv=None):
    """Create directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for name in args:
        try:
            os.mkdir(name)
        except OSError:
            sys.stderr.write(f"mkdir: {name} failed to create\n")
            break
    return 0


def _unlink(path):
    if os.path.isdir(path) and not os.path.islink(path):
        os.rmdir(path)
    else:
        os.unlink(path)


def rm_main(argv=None):
    """Remove files and empty directories, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for name in args:
        try:
            _unlink(name)
        except OSError:
            sys.stderr.write(f"rm: {name} failed to delete\n")
            break
    return 0


def kill_main(argv=None):
    """Kill each process named by a numeric argument."""
    args = _args(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    for arg in args:
        pid = atoi(arg)
        # No process has a number of zero or below.
        if pid <= 0:
            continue
        with contextlib.suppress(OSError):
            os.kill(pid, _KILL_SIGNAL)
    return 0