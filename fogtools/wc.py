"""Count lines, words and characters."""

import sys
from dataclasses import dataclass

_CHUNK = 512
# A NUL byte also ends a word.
_WHITESPACE = frozenset(" \r\t\n\v\0")


@dataclass
class Counts:
    """Line, word and character totals for one input."""

    lines: int = 0
    words: int = 0
    chars: int = 0


def wc(stream):
    """Count a binary or text stream; bytes are counted one by one."""
    counts = Counts()
    inword = False
    while True:
        chunk = stream.read(_CHUNK)
        if not chunk:
            break
        if isinstance(chunk, bytes):
            chunk = chunk.decode("latin-1")
        counts.chars += len(chunk)
        counts.lines += chunk.count("\n")
        for ch in chunk:
            if ch in _WHITESPACE:
                inword = False
            elif not inword:
                counts.words += 1
                inword = True
    return counts


def _report(stream, name):
    try:
        counts = wc(stream)
    except OSError:
        sys.stdout.write("wc: read error\n")
        return False
    sys.stdout.write(f"{counts.lines} {counts.words} {counts.chars} {name}\n")
    return True


def main(argv=None):
    """Run the command; return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        return 0 if _report(sys.stdin.buffer, "") else 1
    for name in args:
        try:
            stream = open(name, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {name}\n")
            return 1
        with stream:
            if not _report(stream, name):
                return 1
    return 0