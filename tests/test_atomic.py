import os, stat
import pytest
from authkeys_core import AtomicWriteError, atomic_write_file, atomic_write_file_and_change


def test_write_new_file_with_perms(tmp_path):
    target = tmp_path / "config"
    atomic_write_file(target, b"hello\n", 0o600)
    assert target.read_bytes() == b"hello\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    assert os.listdir(tmp_path) == ["config"]


def test_replaces_existing_file(tmp_path):
    target = tmp_path / "config"
    target.write_text("old")
    atomic_write_file(target, "new", 0o644)
    assert target.read_text() == "new"


def test_change_runs_before_rename(tmp_path):
    target = tmp_path / "config"
    seen = []

    def change(f):
        seen.append(target.exists())
        with open(f.name, "rb") as fh:
            seen.append(fh.read())

    atomic_write_file_and_change(target, b"payload", change)
    assert seen == [False, b"payload"]
    assert target.read_bytes() == b"payload"


def test_failed_change_leaves_destination_untouched(tmp_path):
    target = tmp_path / "config"
    target.write_bytes(b"original")

    def change(f):
        raise RuntimeError("finalize failed")

    with pytest.raises(RuntimeError, match="finalize failed"):
        atomic_write_file_and_change(target, b"replacement", change)
    assert target.read_bytes() == b"original"
    assert os.listdir(tmp_path) == ["config"]


def test_failed_change_leaves_destination_absent(tmp_path):
    target = tmp_path / "config"

    def change(f):
        raise RuntimeError("finalize failed")

    with pytest.raises(RuntimeError):
        atomic_write_file_and_change(target, b"replacement", change)
    assert not target.exists()
    assert os.listdir(tmp_path) == []


def test_failed_write_leaves_destination_untouched(tmp_path, monkeypatch):
    target = tmp_path / "config"
    target.write_bytes(b"original")

    def broken_fsync(fd):
        raise OSError("disk full")

    monkeypatch.setattr(os, "fsync", broken_fsync)
    with pytest.raises(AtomicWriteError, match="disk full"):
        atomic_write_file(target, b"replacement", 0o644)
    assert target.read_bytes() == b"original"
    assert os.listdir(tmp_path) == ["config"]


def test_failed_rename_cleans_up(tmp_path):
    target = tmp_path / "config"
    target.mkdir()
    (target / "keep").write_text("x")

    with pytest.raises(AtomicWriteError):
        atomic_write_file(target, b"data", 0o644)
    assert sorted(os.listdir(tmp_path)) == ["config"]
    assert (target / "keep").read_text() == "x"


def test_missing_directory(tmp_path):
    with pytest.raises(AtomicWriteError, match="cannot create temp file"):
        atomic_write_file(tmp_path / "missing" / "config", b"data", 0o644)


def test_atomic_write_error_is_oserror(tmp_path):
    with pytest.raises(OSError):
        atomic_write_file(tmp_path / "missing" / "config", b"data", 0o644)
