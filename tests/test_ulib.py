import io

import pytest

from fogtools.ulib import atoi, fgets, getline


@pytest.mark.parametrize("text, expected", [("123", 123), ("123abc", 123), ("0", 0)])
def test_atoi_leading_digits(text, expected):
    assert atoi(text) == expected


@pytest.mark.parametrize("text", ["", "-5", " 7", "abc"])
def test_atoi_rejects_non_digits(text):
    assert atoi(text) == 0


def test_fgets_stops_after_newline():
    stream = io.StringIO("hello\nworld")
    assert fgets(stream, 100) == "hello\n"
    assert fgets(stream, 100) == "world"
    assert fgets(stream, 100) == ""


def test_fgets_respects_max():
    stream = io.StringIO("abcdef")
    assert fgets(stream, 4) == "abc"
    assert fgets(stream, 4) == "def"


def test_fgets_stops_at_carriage_return():
    assert fgets(io.StringIO("a\rb"), 10) == "a\r"


def test_fgets_tiny_max_reads_nothing():
    stream = io.StringIO("abc")
    assert fgets(stream, 1) == ""
    assert stream.read() == "abc"


def test_fgets_binary_stream():
    assert fgets(io.BytesIO(b"x\ny"), 10) == b"x\n"


def test_getline_reads_long_line_whole():
    line = "z" * 1000 + "\n"
    stream = io.StringIO(line + "next\n")
    assert getline(stream) == line
    assert getline(stream) == "next\n"


def test_getline_continues_past_carriage_return():
    stream = io.StringIO("a\rb\nc")
    assert getline(stream) == "a\rb\n"
    assert getline(stream) == "c"
    assert getline(stream) == ""


def test_getline_binary():
    assert getline(io.BytesIO(b"one\ntwo")) == b"one\n"