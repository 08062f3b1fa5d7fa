import io
import os
import signal
from unittest import mock

import pytest

from fogtools.fileutils import (
    cat,
    cat_main,
    copy_main,
    echo_main,
    kill_main,
    ln_main,
    mkdir_main,
    move_main,
    rm_main,
)

KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)


class _ShortWriter:
    def write(self, data):
        return len(data) - 1


class _BrokenReader:
    def read(self, n):
        raise OSError("boom")


def test_cat_copies_all_bytes():
    data = bytes(range(256)) * 6
    out = io.BytesIO()
    cat(io.BytesIO(data), out)
    assert out.getvalue() == data


def test_cat_short_write():
    with pytest.raises(OSError, match="cat: write error"):
        cat(io.BytesIO(b"abc"), _ShortWriter())


def test_cat_read_error():
    with pytest.raises(OSError, match="cat: read error"):
        cat(_BrokenReader(), io.BytesIO())


def test_cat_main_concatenates(tmp_path, capsysbinary):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.write_bytes(b"one\n")
    second.write_bytes(b"two\n")
    assert cat_main([str(first), str(second)]) == 0
    assert capsysbinary.readouterr().out == b"one\ntwo\n"


def test_cat_main_missing(tmp_path, capsysbinary):
    missing = str(tmp_path / "missing")
    assert cat_main([missing]) == 1
    assert capsysbinary.readouterr().err == f"cat: cannot open {missing}\n".encode()


def test_echo_joins_arguments(capsys):
    assert echo_main(["hello", "world"]) == 0
    assert capsys.readouterr().out == "hello world\n"


def test_echo_without_arguments(capsys):
    assert echo_main([]) == 0
    assert capsys.readouterr().out == ""


def test_copy_overwrites_start_of_destination(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    src.write_bytes(b"abc")
    dst.write_bytes(b"X" * 10)
    assert copy_main([str(src), str(dst)]) == 0
    result = dst.read_bytes()
    assert result.startswith(b"abc")
    assert len(result) == 10


def test_copy_missing_source(tmp_path, capsys):
    dst = tmp_path / "dst"
    dst.write_bytes(b"")
    missing = str(tmp_path / "nope")
    assert copy_main([missing, str(dst)]) == 1
    assert capsys.readouterr().err == f"copy: unable to open source file: {missing}"


def test_copy_missing_destination(tmp_path):
    src = tmp_path / "src"
    src.write_bytes(b"abc")
    dst = tmp_path / "dst"
    assert copy_main([str(src), str(dst)]) == 1
    assert not dst.exists()


def test_copy_usage():
    assert copy_main([]) == 1


def test_move_into_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "f").write_bytes(b"content")
    (tmp_path / "d").mkdir()
    assert move_main(["f", "d"]) == 0
    assert not (tmp_path / "f").exists()
    assert (tmp_path / "d" / "f").read_bytes() == b"content"


def test_move_missing_source(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "d").mkdir()
    assert move_main(["f", "d"]) == 1
    assert capsys.readouterr().err == "move: Unable to open source file f\n"


def test_move_link_failure_keeps_source(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "f").write_bytes(b"x")
    assert move_main(["f", "nodir"]) == 1
    assert (tmp_path / "f").exists()
    assert capsys.readouterr().err == "move: link failed nodir/f\n"


def test_ln_creates_hard_link(tmp_path):
    old = tmp_path / "old"
    new = tmp_path / "new"
    old.write_bytes(b"data")
    assert ln_main([str(old), str(new)]) == 0
    assert os.stat(new).st_ino == os.stat(old).st_ino


def test_ln_failure_reports(tmp_path, capsys):
    old = str(tmp_path / "old")
    new = str(tmp_path / "new")
    assert ln_main([old, new]) == 0
    assert capsys.readouterr().err == f"link {old} {new}: failed\n"


def test_ln_usage():
    assert ln_main(["only"]) == 1


def test_mkdir_stops_at_first_failure(tmp_path, capsys):
    a, b, c = (str(tmp_path / n) for n in ("a", "b", "c"))
    os.mkdir(b)
    assert mkdir_main([a, b, c]) == 0
    assert os.path.isdir(a)
    assert not os.path.exists(c)
    assert capsys.readouterr().err == f"mkdir: {b} failed to create\n"


def test_mkdir_usage():
    assert mkdir_main([]) == 1


def test_rm_removes_files_and_empty_dirs(tmp_path):
    f = tmp_path / "f"
    d = tmp_path / "d"
    f.write_bytes(b"")
    d.mkdir()
    assert rm_main([str(f), str(d)]) == 0
    assert not f.exists()
    assert not d.exists()


def test_rm_stops_at_first_failure(tmp_path, capsys):
    missing = str(tmp_path / "missing")
    keep = tmp_path / "keep"
    keep.write_bytes(b"")
    assert rm_main([missing, str(keep)]) == 0
    assert keep.exists()
    assert capsys.readouterr().err == f"rm: {missing} failed to delete\n"


def test_rm_usage():
    assert rm_main([]) == 1


def test_kill_signals_numeric_pids():
    with mock.patch("os.kill") as fake:
        assert kill_main(["123", "abc", "45x"]) == 0
    assert fake.call_args_list == [mock.call(123, KILL_SIGNAL), mock.call(45, KILL_SIGNAL)]


def test_kill_ignores_missing_process():
    with mock.patch("os.kill", side_effect=ProcessLookupError) as fake:
        assert kill_main(["7"]) == 0
    assert fake.call_count == 1


def test_kill_usage(capsys):
    assert kill_main([]) == 1
    assert capsys.readouterr().err == "usage: kill pid...\n"