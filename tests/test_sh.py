import pytest

from fogtools.sh import (
    BackCmd,
    ExecCmd,
    ListCmd,
    OpenFlag,
    PipeCmd,
    RedirCmd,
    ShellSyntaxError,
    gettoken,
    parsecmd,
)


def test_simple_exec():
    assert parsecmd("echo hello world\n") == ExecCmd(["echo", "hello", "world"])


def test_empty_line():
    assert parsecmd("\n") == ExecCmd([])


def test_pipe_is_right_associative():
    assert parsecmd("a | b | c") == PipeCmd(
        ExecCmd(["a"]), PipeCmd(ExecCmd(["b"]), ExecCmd(["c"]))
    )


def test_list_is_right_associative():
    assert parsecmd("a ; b ; c") == ListCmd(
        ExecCmd(["a"]), ListCmd(ExecCmd(["b"]), ExecCmd(["c"]))
    )


def test_background():
    assert parsecmd("a &") == BackCmd(ExecCmd(["a"]))
    assert parsecmd("a &&") == BackCmd(BackCmd(ExecCmd(["a"])))


def test_background_pipeline():
    assert parsecmd("a | b &") == BackCmd(PipeCmd(ExecCmd(["a"]), ExecCmd(["b"])))


def test_background_then_list():
    assert parsecmd("a & ; b") == ListCmd(BackCmd(ExecCmd(["a"])), ExecCmd(["b"]))


def test_background_then_word_is_leftover():
    with pytest.raises(ShellSyntaxError) as info:
        parsecmd("a & b")
    assert info.value.leftovers == "b"


def test_redirections_nest_in_order():
    assert parsecmd("cat < in > out") == RedirCmd(
        RedirCmd(ExecCmd(["cat"]), "in", OpenFlag.RDONLY, 0),
        "out",
        OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC,
        1,
    )


def test_append_redirection():
    assert parsecmd("echo hi >> log") == RedirCmd(
        ExecCmd(["echo", "hi"]), "log", OpenFlag.WRONLY | OpenFlag.CREATE, 1
    )


def test_redirection_before_words():
    assert parsecmd("< in cat") == RedirCmd(ExecCmd(["cat"]), "in", OpenFlag.RDONLY, 0)


def test_block_with_redirection():
    assert parsecmd("(a ; b) > f") == RedirCmd(
        ListCmd(ExecCmd(["a"]), ExecCmd(["b"])),
        "f",
        OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC,
        1,
    )


@pytest.mark.parametrize(
    "line, mode, fd",
    [
        ("a < f", 0x000, 0),
        ("a > f", 0x601, 1),
        ("a >> f", 0x201, 1),
    ],
)
def test_redirection_open_mode_values(line, mode, fd):
    assert parsecmd(line) == RedirCmd(ExecCmd(["a"]), "f", mode, fd)


def test_missing_redirection_file():
    with pytest.raises(ShellSyntaxError, match="missing file for redirection"):
        parsecmd("echo <")


def test_missing_close_paren():
    with pytest.raises(ShellSyntaxError, match="missing"):
        parsecmd("(a ; b")


def test_stray_close_paren_is_leftover():
    with pytest.raises(ShellSyntaxError) as info:
        parsecmd("a )")
    assert info.value.leftovers == ")"


def test_open_paren_inside_words():
    with pytest.raises(ShellSyntaxError, match="syntax"):
        parsecmd("a (b")


def test_too_many_args():
    with pytest.raises(ShellSyntaxError, match="too many args"):
        parsecmd(" ".join(["x"] * 10))


def test_nine_args_allowed():
    assert parsecmd(" ".join(["x"] * 9)) == ExecCmd(["x"] * 9)


def test_gettoken_append_symbol():
    result = gettoken("  >> x", 0)
    assert result.kind == "+"
    assert result.text == ">>"
    assert "  >> x"[result.pos:] == "x"


def test_gettoken_word_stops_at_symbol():
    result = gettoken("abc|d", 0)
    assert (result.kind, result.text, result.pos) == ("a", "abc", 3)


def test_gettoken_end_of_input():
    result = gettoken("   ", 0)
    assert result.kind == ""
    assert result.pos == 3