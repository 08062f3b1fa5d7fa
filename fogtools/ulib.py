"""Small helpers from the user-space C library."""

_MASK32 = 0xFFFFFFFF


def atoi(s):
    """Parse leading decimal digits; no sign or whitespace is accepted."""
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + (ord(ch) - ord("0"))
    n &= _MASK32
    return n - (1 << 32) if n & 0x80000000 else n


def _is_line_end(ch):
    return ch in ("\n", "\r", b"\n", b"\r")


def fgets(stream, max):
    """Read at most max - 1 characters, stopping after a newline or carriage return."""
    empty = stream.read(0)
    parts = []
    while len(parts) + 1 < max:
        ch = stream.read(1)
        if not ch:
            break
        parts.append(ch)
        if _is_line_end(ch):
            break
    return empty.join(parts)


def getline(stream):
    """Read a whole line up to and including the newline; empty at end of input."""
    empty = stream.read(0)
    capacity = 128
    parts = []
    total = 0
    while True:
        piece = fgets(stream, capacity - total)
        if not piece:
            break
        parts.append(piece)
        total += len(piece)
        if piece[-1:] in ("\n", b"\n"):
            break
        capacity *= 2
    return empty.join(parts)