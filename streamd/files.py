"""File handles, file and directory helpers, and a key=value settings store."""

from __future__ import annotations

import os
import subprocess
from datetime import datetime
from enum import IntFlag
from pathlib import Path
from typing import Union

from streamd.strings import replace, trim

PathLike = Union[str, "os.PathLike[str]"]

_COPY_CHUNK = 1024
_REMOVE_ATTEMPTS = 3
_MIN_ENTRY_NAME = 5


class OpenMode(IntFlag):
    """Flags for :meth:`File.open`.

    READ is a private bit: alone it means read-only, and together with WRITE
    it means read-write.
    """

    READ = 4
    WRITE = os.O_WRONLY
    CREATE = os.O_CREAT
    TRUNCATE = os.O_TRUNC
    EXCLUDE = os.O_EXCL
    APPEND = os.O_APPEND
    RDWR = os.O_RDWR
    if hasattr(os, "O_SYNC"):
        SYNC = os.O_SYNC
    if hasattr(os, "O_DIRECT"):
        DIRECT = os.O_DIRECT


DEFAULT_MODE = OpenMode.READ | OpenMode.WRITE | OpenMode.CREATE
DEFAULT_ACCESS = 0o755


def _os_flags(mode: int) -> int:
    flags = int(mode)
    read = int(OpenMode.READ)
    write = int(OpenMode.WRITE)
    if flags & read and flags & write:
        return (flags & ~(read | write)) | os.O_RDWR
    if flags & read:
        return flags & ~read
    return flags


class File:
    """A low-level file descriptor with a remembered name."""

    def __init__(
        self,
        path: PathLike | None = None,
        mode: int = DEFAULT_MODE,
        access: int = DEFAULT_ACCESS,
    ) -> None:
        self._fd = -1
        self.filename = ""
        if path is not None:
            self.open(path, mode, access)

    def open(
        self, path: PathLike, mode: int = DEFAULT_MODE, access: int = DEFAULT_ACCESS
    ) -> None:
        """Open ``path``; raises RuntimeError if this handle is already open."""
        if self.is_opened():
            raise RuntimeError(f"file {self.filename!r} is already open")
        name = os.fspath(path)
        self._fd = os.open(name, _os_flags(mode), access)
        self.filename = name

    def close(self) -> None:
        if self.is_opened():
            os.close(self._fd)
            self._fd = -1
            self.filename = ""

    def _handle(self) -> int:
        if not self.is_opened():
            raise ValueError("file is not open")
        return self._fd

    def read(self, max_length: int) -> bytes:
        return os.read(self._handle(), max_length)

    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""
        return os.write(self._handle(), data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return os.lseek(self._handle(), offset, whence)

    def fsync(self) -> None:
        if self.is_opened():
            os.fsync(self._fd)

    def fdatasync(self) -> None:
        if self.is_opened():
            getattr(os, "fdatasync", os.fsync)(self._fd)

    def length(self) -> int:
        """Size of the open file in bytes; 0 when closed."""
        if not self.is_opened():
            return 0
        return os.fstat(self._fd).st_size

    def position(self) -> int:
        return os.lseek(self._handle(), 0, os.SEEK_CUR)

    def is_opened(self) -> bool:
        return self._fd >= 0

    def fileno(self) -> int:
        return self._handle()

    def last_access_time(self) -> datetime:
        return datetime.fromtimestamp(os.fstat(self._handle()).st_atime)

    def __enter__(self) -> File:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def file_length(path: PathLike) -> int:
    """Size of ``path`` in bytes, or 0 if it cannot be examined."""
    try:
        return os.stat(path).st_size
    except OSError:
        return 0


def file_exists(path: PathLike) -> bool:
    """Whether ``path`` is a regular file."""
    return os.path.isfile(path)


def remove_file(path: PathLike) -> None:
    """Remove ``path``, retrying while it still appears to exist."""
    for _ in range(_REMOVE_ATTEMPTS):
        os.remove(path)
        if not os.path.lexists(path):
            return
    raise OSError(f"{os.fspath(path)!r} still exists after removal")


def rename_path(old: PathLike, new: PathLike) -> None:
    os.rename(old, new)


def copy_file(src: PathLike, dst: PathLike) -> None:
    """Copy ``src`` to a fresh ``dst`` with the same mode and, if allowed, owner."""
    src_fd = os.open(src, os.O_RDONLY)
    try:
        info = os.fstat(src_fd)
        if os.path.lexists(dst):
            os.remove(dst)
        dst_fd = os.open(dst, os.O_WRONLY | os.O_CREAT, info.st_mode & 0o7777)
        try:
            while chunk := os.read(src_fd, _COPY_CHUNK):
                os.write(dst_fd, chunk)
            try:
                os.fchown(dst_fd, info.st_uid, info.st_gid)
            except (PermissionError, AttributeError):
                pass
        finally:
            os.close(dst_fd)
    finally:
        os.close(src_fd)


def file_n_copy(dst: PathLike, src: PathLike, block_size: int) -> int:
    """Copy ``src`` into the existing ``dst`` in whole blocks of ``block_size``.

    Each block is synced after it is written. Only complete blocks are
    copied: a trailing partial block is dropped. Returns the bytes written.
    """
    if block_size <= 0:
        raise ValueError("block size must be positive")
    written = 0
    with File(src, OpenMode.READ) as source, File(dst, OpenMode.WRITE) as target:
        pending = bytearray()
        while chunk := source.read(block_size - len(pending)):
            pending += chunk
            if len(pending) < block_size:
                continue
            view = memoryview(pending)
            while view:
                count = target.write(view)
                if count <= 0:
                    raise OSError(f"failed to write to {target.filename!r}")
                view = view[count:]
                written += count
            view.release()
            pending.clear()
            target.fsync()
    return written


def file_copy(dst: PathLike, src: PathLike) -> int:
    """Copy with the system ``cp`` command and return its exit status."""
    result = subprocess.run(["cp", os.fspath(src), os.fspath(dst)], check=False)
    return result.returncode


def trim_string(text: str) -> str:
    """Strip spaces, tabs, carriage returns and newlines from both ends."""
    return trim(text)


class KeyValueStore:
    """Settings read from ``key = value`` lines; ``;`` starts a comment.

    In values, ``[%C%R]`` stands for a carriage return and ``[%L%F]`` for a
    newline. When a key repeats, its first value is kept.
    """

    def __init__(self) -> None:
        self._table: dict[str, str] = {}

    def clear(self) -> None:
        self._table.clear()

    def load(self, path: PathLike) -> None:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            for line in handle:
                line = line.split(";", 1)[0]
                key, sep, value = line.partition("=")
                if not sep:
                    continue
                value = replace(trim_string(value), "[%C%R]", "\r")
                value = replace(value, "[%L%F]", "\n")
                self._table.setdefault(trim_string(key), value)

    def get(self, key: str) -> str | None:
        """The value for ``key``, or None if it was not loaded."""
        return self._table.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)


def create_directory(path: PathLike, mode: int = DEFAULT_ACCESS) -> None:
    os.mkdir(path, mode)


def directory_exists(path: PathLike) -> bool:
    return os.path.isdir(path)


def remove_directory(path: PathLike) -> None:
    """Remove an empty directory."""
    os.rmdir(path)


def remove_tree(path: PathLike) -> None:
    """Remove a directory and everything below it; symlinks are not followed."""
    root = Path(path)
    with os.scandir(root) as entries:
        children = sorted(entries, key=lambda entry: entry.name)
    for entry in children:
        child = root / entry.name
        try:
            if entry.is_dir(follow_symlinks=False):
                try:
                    os.rmdir(child)
                except OSError:
                    remove_tree(child)
            else:
                os.unlink(child)
        except OSError:
            pass
    os.rmdir(root)


def entry_count(path: PathLike) -> int:
    """Count entries whose names have at least five characters, less one.

    Entries with shorter names are removed where possible.
    """
    root = Path(path)
    count = -1
    with os.scandir(root) as entries:
        names = [entry.name for entry in entries]
    for name in names:
        if len(name) < _MIN_ENTRY_NAME:
            try:
                remove_file(root / name)
            except OSError:
                pass
        else:
            count += 1
    return count