"""
Argosy filesystem roots: resolve File/Folder argument paths into handles.

Contract
- A root is any object with two coroutine methods, open_file(path) and
  open_folder(path), returning a handle or raising. execute() re-raises
  whatever a root raises without wrapping it.

LocalRoot
- Resolves relative paths against a base directory (the current working
  directory by default); absolute paths are used as given.
- Runs the stat calls in a worker thread so concurrent opens do not block the
  event loop.
- A missing path raises FileNotFoundError; a path of the wrong kind raises
  IsADirectoryError / NotADirectoryError.

Handles only remember where the path lives; opening the underlying file (and
closing it) is left to the handler.
"""
import asyncio
import errno
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from .utils import Unset, coalesce


@runtime_checkable
class Root(Protocol):
    async def open_file(self, path, /): ...
    async def open_folder(self, path, /): ...


class FileHandle:
    """
    A resolved, existing regular file.
    """
    __slots__ = ("path",)

    def __init__(self, path, /):
        self.path = Path(path)

    def open(self, mode="r", **options):
        return self.path.open(mode, **options)

    def read_text(self, encoding="utf-8"):
        return self.path.read_text(encoding=encoding)

    def read_bytes(self):
        return self.path.read_bytes()

    def __fspath__(self):
        return os.fspath(self.path)

    def __eq__(self, other):
        if not isinstance(other, FileHandle):
            return NotImplemented
        return self.path == other.path

    def __hash__(self):
        return hash((FileHandle, self.path))

    def __repr__(self):
        return f"file({str(self.path)!r})"


class LocalRoot:
    """
    Root backed by the local filesystem under `base`.
    """

    def __init__(self, base=Unset, /):
        self.base = Path(coalesce(base, os.getcwd()))

    def _locate(self, path):
        path = Path(path)
        return path if path.is_absolute() else self.base / path

    @staticmethod
    def _stat_file(path):
        if not path.exists():
            raise FileNotFoundError(errno.ENOENT, "no such file", os.fspath(path))
        if path.is_dir():
            raise IsADirectoryError(errno.EISDIR, "expected a file, found a folder", os.fspath(path))
        return FileHandle(path)

    @staticmethod
    def _stat_folder(path):
        if not path.exists():
            raise FileNotFoundError(errno.ENOENT, "no such folder", os.fspath(path))
        if not path.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, "expected a folder, found a file", os.fspath(path))
        return FolderHandle(path)

    async def open_file(self, path, /):
        return await asyncio.to_thread(self._stat_file, self._locate(path))

    async def open_folder(self, path, /):
        return await asyncio.to_thread(self._stat_folder, self._locate(path))

    def __repr__(self):
        return f"local-root({str(self.base)!r})"


class FolderHandle(LocalRoot):
    """
    A resolved, existing folder. It is itself a root, so nested paths can be
    opened relative to it.
    """

    @property
    def path(self):
        return self.base

    def iterdir(self):
        return self.base.iterdir()

    def __fspath__(self):
        return os.fspath(self.base)

    def __eq__(self, other):
        if not isinstance(other, FolderHandle):
            return NotImplemented
        return self.base == other.base

    def __hash__(self):
        return hash((FolderHandle, self.base))

    def __repr__(self):
        return f"folder({str(self.base)!r})"


__all__ = (
    "Root",
    "LocalRoot",
    "FileHandle",
    "FolderHandle",
)
