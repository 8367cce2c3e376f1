"""Directory handles and the stat/readlink metadata provider."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from typing import Protocol

from dirlist.entry import FilesystemIdentity, Metadata

logger = logging.getLogger(__name__)

_OPEN_FLAGS = os.O_RDONLY | getattr(os, "O_DIRECTORY", 0) | getattr(os, "O_CLOEXEC", 0)


class DirectoryHandle:
    """An open directory, usable as a context manager.

    Children are stat'ed and read relative to the handle's file
    descriptor, so a concurrent rename of an ancestor cannot redirect
    their metadata.

    Attributes:
        path: Display path used for headers and diagnostics.
    """

    def __init__(self, fd: int, path: str) -> None:
        self._fd: int | None = fd
        self.path = path

    @classmethod
    def open(cls, path: str) -> DirectoryHandle:
        """Open the directory at *path*.

        Raises:
            OSError: If the directory cannot be opened.
        """
        fd = os.open(path, _OPEN_FLAGS)
        return cls(fd, path)

    def fileno(self) -> int:
        if self._fd is None:
            raise ValueError(f"directory handle closed: {self.path}")
        return self._fd

    @property
    def closed(self) -> bool:
        return self._fd is None

    def close(self) -> None:
        if self._fd is not None:
            fd, self._fd = self._fd, None
            os.close(fd)

    def __enter__(self) -> DirectoryHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def scandir(self) -> Iterator[os.DirEntry[str]]:
        """Yield the raw enumeration records of this directory."""
        with os.scandir(self.fileno()) as it:
            yield from it

    def identity(self) -> FilesystemIdentity:
        return FilesystemIdentity.from_stat(os.fstat(self.fileno()))

    def join(self, name: str) -> str:
        return os.path.join(self.path, name)


class MetadataProvider(Protocol):
    """Source of stat information and symlink targets for entries."""

    def stat(self, directory: DirectoryHandle, name: str, follow_symlinks: bool = False) -> Metadata: ...

    def read_link(self, directory: DirectoryHandle, name: str) -> str: ...


class OsMetadataProvider:
    """Default provider backed by ``os.stat``/``os.readlink`` with ``dir_fd``."""

    def stat(self, directory: DirectoryHandle, name: str, follow_symlinks: bool = False) -> Metadata:
        st = os.stat(name, dir_fd=directory.fileno(), follow_symlinks=follow_symlinks)
        return Metadata.from_stat(st)

    def read_link(self, directory: DirectoryHandle, name: str) -> str:
        return os.readlink(name, dir_fd=directory.fileno())
