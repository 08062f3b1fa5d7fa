"""Minimal formatted output understanding %d, %l, %x, %p, %s and %c."""

import sys

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _to_int32(value):
    value = int(value) & _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _format_int(value, base, signed):
    xx = _to_int32(value)
    if signed and xx < 0:
        negative = True
        x = (-xx) & _MASK32
    else:
        negative = False
        x = xx & _MASK32
    digits = []
    while True:
        digits.append(_DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _format_ptr(value):
    return f"0x{int(value) & _MASK64:016X}"


def _format_str(value):
    if value is None:
        return "(null)"
    text = str(value)
    end = text.find("\0")
    return text if end < 0 else text[:end]


def _format_char(value):
    if isinstance(value, str):
        return value[:1]
    return chr(int(value) & 0xFF)


def format_string(fmt, *args):
    """Render fmt with args the way the console printf does."""
    pieces = []
    values = iter(args)

    def take():
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    pending = False
    for c in fmt:
        if not pending:
            if c == "%":
                pending = True
            else:
                pieces.append(c)
            continue
        if c == "d":
            pieces.append(_format_int(take(), 10, True))
        elif c == "l":
            pieces.append(_format_int(take(), 10, False))
        elif c == "x":
            pieces.append(_format_int(take(), 16, False))
        elif c == "p":
            pieces.append(_format_ptr(take()))
        elif c == "s":
            pieces.append(_format_str(take()))
        elif c == "c":
            pieces.append(_format_char(take()))
        elif c == "%":
            pieces.append("%")
        else:
            # Unknown sequence: print it to draw attention.
            pieces.append("%" + c)
        pending = False
    return "".join(pieces)


def fprintf(stream, fmt, *args):
    """Write formatted output to a text stream."""
    stream.write(format_string(fmt, *args))


def printf(fmt, *args):
    """Write formatted output to standard output."""
    fprintf(sys.stdout, fmt, *args)