"""Line filter supporting only the ^ . * $ operators."""

import sys

_BUFSIZE = 1024


def match(re, text):
    """Return True if re matches anywhere in text."""
    if re.startswith("^"):
        return _matchhere(re, 1, text, 0)
    return any(_matchhere(re, 0, text, i) for i in range(len(text) + 1))


def _matchhere(re, ri, text, ti):
    while True:
        if ri == len(re):
            return True
        if ri + 1 < len(re) and re[ri + 1] == "*":
            return _matchstar(re[ri], re, ri + 2, text, ti)
        if re[ri] == "$" and ri + 1 == len(re):
            return ti == len(text)
        if ti < len(text) and (re[ri] == "." or re[ri] == text[ti]):
            ri += 1
            ti += 1
            continue
        return False


def _matchstar(c, re, ri, text, ti):
    while True:
        if _matchhere(re, ri, text, ti):
            return True
        if ti < len(text) and (text[ti] == c or c == "."):
            ti += 1
            continue
        return False


def grep(pattern, stream, out):
    """Write to out every complete line of stream that matches pattern."""
    pending = ""
    while True:
        chunk = stream.read(_BUFSIZE - 1 - len(pending))
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                out.write(line + "\n")


def main(argv=None):
    """Run the command; return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    if not files:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for name in files:
        try:
            stream = open(name, encoding="utf-8", errors="surrogateescape", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {name}\n")
            return 1
        with stream:
            grep(pattern, stream, sys.stdout)
    return 0