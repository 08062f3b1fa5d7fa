"""Command-line parser for the shell: pipes, lists, background jobs and redirections."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import NamedTuple, Union

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
MAXARGS = 10


class OpenFlag(IntFlag):
    """Flags used when a redirection opens its file."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200
    TRUNC = 0x400


class ShellSyntaxError(ValueError):
    """The command line could not be parsed."""

    def __init__(self, message, leftovers=None):
        super().__init__(message)
        self.leftovers = leftovers


@dataclass
class ExecCmd:
    """Run a program with its arguments."""

    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run cmd with file descriptor fd reopened on file."""

    cmd: "Command"
    file: str
    mode: OpenFlag
    fd: int


@dataclass
class PipeCmd:
    """Connect the output of left to the input of right."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run left, wait for it, then run right."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run cmd without waiting for it."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class Token(NamedTuple):
    """One token: its kind, its text, and where scanning continues."""

    kind: str
    text: str
    pos: int


_REDIRECTIONS = {
    "<": (OpenFlag.RDONLY, 0),
    ">": (OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC, 1),
    "+": (OpenFlag.WRONLY | OpenFlag.CREATE, 1),
}


def _skip_space(s, pos):
    while pos < len(s) and s[pos] in WHITESPACE:
        pos += 1
    return pos


def gettoken(s, pos):
    """Scan one token of s starting at pos.

    The kind is "" at the end of input, "a" for a word, "+" for ">>",
    and the symbol itself otherwise.
    """
    pos = _skip_space(s, pos)
    start = pos
    if pos >= len(s):
        kind = ""
    else:
        c = s[pos]
        if c in "|();&<":
            kind = c
            pos += 1
        elif c == ">":
            kind = ">"
            pos += 1
            if pos < len(s) and s[pos] == ">":
                kind = "+"
                pos += 1
        else:
            kind = "a"
            while pos < len(s) and s[pos] not in WHITESPACE and s[pos] not in SYMBOLS:
                pos += 1
    return Token(kind, s[start:pos], _skip_space(s, pos))


class _Parser:
    def __init__(self, s):
        self.s = s
        self.pos = 0

    def peek(self, toks):
        self.pos = _skip_space(self.s, self.pos)
        return self.pos < len(self.s) and self.s[self.pos] in toks

    def take(self):
        token = gettoken(self.s, self.pos)
        self.pos = token.pos
        return token

    def line(self):
        cmd = self.pipe()
        while self.peek("&"):
            self.take()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.take()
            cmd = ListCmd(cmd, self.line())
        return cmd

    def pipe(self):
        cmd = self.exec()
        if self.peek("|"):
            self.take()
            cmd = PipeCmd(cmd, self.pipe())
        return cmd

    def redirs(self, cmd):
        while self.peek("<>"):
            kind = self.take().kind
            target = self.take()
            if target.kind != "a":
                raise ShellSyntaxError("missing file for redirection")
            mode, fd = _REDIRECTIONS[kind]
            cmd = RedirCmd(cmd, target.text, mode, fd)
        return cmd

    def block(self):
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.take()
        cmd = self.line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.take()
        return self.redirs(cmd)

    def exec(self):
        if self.peek("("):
            return self.block()
        ecmd = ExecCmd()
        cmd = self.redirs(ecmd)
        while not self.peek("|)&;"):
            token = self.take()
            if token.kind == "":
                break
            if token.kind != "a":
                raise ShellSyntaxError("syntax")
            ecmd.argv.append(token.text)
            if len(ecmd.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            cmd = self.redirs(cmd)
        return cmd


def parsecmd(s):
    """Parse a whole command line into a command tree."""
    end = s.find("\0")
    if end >= 0:
        s = s[:end]
    parser = _Parser(s)
    cmd = parser.line()
    parser.peek("")
    if parser.pos != len(s):
        rest = s[parser.pos:]
        raise ShellSyntaxError(f"syntax: leftovers: {rest}", leftovers=rest)
    return cmd