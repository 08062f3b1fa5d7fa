import io

import pytest

from fogtools.grep import grep, main, match


@pytest.mark.parametrize(
    "re, text",
    [("a*b", "aaab"), ("b$", "ab"), ("^ab", "abc"), ("", "anything"), ("x*", ""),
     ("a.c", "zabcz"), (".*", "whatever"), ("^$", "")],
)
def test_matches(re, text):
    assert match(re, text) is True


@pytest.mark.parametrize(
    "re, text",
    [("^ab", "cab"), ("b$", "ba"), (".", ""), ("abc", "ab"), ("^a*$", "aab")],
)
def test_non_matches(re, text):
    assert match(re, text) is False


def test_long_text_does_not_recurse_deeply():
    assert match("z", "a" * 5000 + "z") is True


def test_grep_selects_lines():
    out = io.StringIO()
    grep("an", io.StringIO("apple\nbanana\ncherry\n"), out)
    assert out.getvalue() == "banana\n"


def test_grep_ignores_unterminated_last_line():
    out = io.StringIO()
    grep("a", io.StringIO("xa\nya"), out)
    assert out.getvalue() == "xa\n"


def test_grep_across_chunk_boundaries():
    lines = [f"line{i}\n" for i in range(400)]
    out = io.StringIO()
    grep("9$", io.StringIO("".join(lines)), out)
    assert out.getvalue() == "".join(l for l in lines if l.endswith("9\n"))


def test_main_reads_files(tmp_path, capsys):
    path = tmp_path / "data.txt"
    path.write_text("one\ntwo\nthree\n")
    assert main(["^t", str(path)]) == 0
    assert capsys.readouterr().out == "two\nthree\n"


def test_main_cannot_open(tmp_path, capsys):
    missing = str(tmp_path / "missing")
    assert main(["x", missing]) == 1
    assert capsys.readouterr().out == f"grep: cannot open {missing}\n"


def test_main_usage(capsys):
    assert main([]) == 1
    assert "usage: grep pattern" in capsys.readouterr().err