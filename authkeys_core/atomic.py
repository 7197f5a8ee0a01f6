"""
authkeys_core.atomic
--------------------
Crash-safe file replacement. Content goes to a temp file next to the target,
a caller-supplied step runs on the still-open file, then the temp file is
renamed over the target. Readers see the old file or the new one, never a
partial write.
"""

from __future__ import annotations
from pathlib import Path
from typing import Callable, IO, Union
import os, tempfile
from .errors import AtomicWriteError
from .logger import get_logger

log = get_logger("authkeys.atomic")

PathLike = Union[str, os.PathLike]


def _discard(tmp_name: str) -> None:
    try:
        os.remove(tmp_name)
    except FileNotFoundError:
        pass


def atomic_write_file_and_change(filename: PathLike, contents: Union[bytes, str],
                                 change: Callable[[IO[bytes]], None]) -> None:
    """
    Atomically write `contents` to `filename`, calling `change(f)` after the
    contents are written but before the rename.

    Exceptions raised by `change` propagate unchanged; I/O failures raise
    AtomicWriteError. In both cases the temp file is removed and `filename`
    is left as it was.
    """
    path = Path(filename)
    if isinstance(contents, str):
        contents = contents.encode("utf-8")

    try:
        f = tempfile.NamedTemporaryFile(dir=path.parent, prefix=path.name, delete=False)
    except OSError as e:
        raise AtomicWriteError(f"cannot create temp file: {e}") from e

    try:
        try:
            f.write(contents)
            f.flush()
            os.fsync(f.fileno())
        except OSError as e:
            raise AtomicWriteError(f"cannot write {str(path)!r} contents: {e}") from e
        change(f)
    except BaseException:
        f.close()
        _discard(f.name)
        raise
    f.close()

    try:
        os.replace(f.name, path)
    except OSError as e:
        _discard(f.name)
        raise AtomicWriteError(f"cannot replace {str(path)!r} with {f.name!r}: {e}") from e
    log.debug(f"atomically replaced {path}")


def atomic_write_file(filename: PathLike, contents: Union[bytes, str], perms: int) -> None:
    """Atomically write `filename` with the given permission bits."""

    def _chmod(f: IO[bytes]) -> None:
        try:
            os.chmod(f.name, perms)
        except OSError as e:
            raise AtomicWriteError(f"cannot set permissions: {e}") from e

    atomic_write_file_and_change(filename, contents, _chmod)
