"""Entry model: one filesystem object observed during a listing."""

from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass
from typing import Callable

from dirlist.vcs import GitStatus

EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class EntryKind(enum.Enum):
    """Closed set of filesystem object kinds."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    FIFO = "fifo"
    BLOCK_DEVICE = "block_device"
    CHAR_DEVICE = "char_device"
    SOCKET = "socket"
    UNKNOWN = "unknown"


_MODE_KINDS: tuple[tuple[Callable[[int], bool], EntryKind], ...] = (
    (stat.S_ISREG, EntryKind.FILE),
    (stat.S_ISDIR, EntryKind.DIRECTORY),
    (stat.S_ISLNK, EntryKind.SYMLINK),
    (stat.S_ISFIFO, EntryKind.FIFO),
    (stat.S_ISBLK, EntryKind.BLOCK_DEVICE),
    (stat.S_ISCHR, EntryKind.CHAR_DEVICE),
    (stat.S_ISSOCK, EntryKind.SOCKET),
)


def kind_from_mode(mode: int) -> EntryKind:
    """Return the kind encoded in an ``st_mode`` value."""
    for predicate, kind in _MODE_KINDS:
        if predicate(mode):
            return kind
    return EntryKind.UNKNOWN


def kind_from_dir_entry(dir_entry: os.DirEntry[str]) -> EntryKind:
    """Return the kind of a scandir record without following symlinks.

    ``is_symlink``/``is_dir``/``is_file`` are answered from ``d_type`` on
    most filesystems, so only the rarer kinds fall through to an ``lstat``.
    """
    try:
        if dir_entry.is_symlink():
            return EntryKind.SYMLINK
        if dir_entry.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if dir_entry.is_file(follow_symlinks=False):
            return EntryKind.FILE
        return kind_from_mode(dir_entry.stat(follow_symlinks=False).st_mode)
    except OSError:
        return EntryKind.UNKNOWN


@dataclass(frozen=True, slots=True)
class FilesystemIdentity:
    """A ``(device, inode)`` pair identifying one filesystem object."""

    device: int
    inode: int

    @classmethod
    def from_stat(cls, st: os.stat_result) -> FilesystemIdentity:
        return cls(device=st.st_dev, inode=st.st_ino)


@dataclass(frozen=True, slots=True)
class Metadata:
    """Fully populated stat information for one entry.

    Attributes:
        size: Size in bytes.
        mtime_ns: Modification time in nanoseconds since the epoch.
        atime_ns: Access time in nanoseconds since the epoch.
        mode: Raw ``st_mode`` (type and permission bits).
        uid: Owner user id.
        gid: Owner group id.
        nlink: Hard link count.
        inode: Inode number.
        device: Device identifier.
    """

    size: int
    mtime_ns: int
    atime_ns: int
    mode: int
    uid: int
    gid: int
    nlink: int
    inode: int
    device: int

    @classmethod
    def from_stat(cls, st: os.stat_result) -> Metadata:
        return cls(
            size=st.st_size,
            mtime_ns=st.st_mtime_ns,
            atime_ns=st.st_atime_ns,
            mode=st.st_mode,
            uid=st.st_uid,
            gid=st.st_gid,
            nlink=st.st_nlink,
            inode=st.st_ino,
            device=st.st_dev,
        )

    @property
    def identity(self) -> FilesystemIdentity:
        return FilesystemIdentity(device=self.device, inode=self.inode)


@dataclass(slots=True)
class Entry:
    """A single directory entry and whatever metadata has been attached.

    Attributes:
        name: Base name as returned by enumeration, never a path.
        kind: Object kind, known even before enhancement.
        metadata: Stat information, ``None`` until enhanced or when the
            stat call failed.
        symlink_target: Raw link target for symlinks when requested.
        vcs_status: Git classification used for decoration only.
        metadata_error: The error that prevented enhancement, if any.
    """

    name: str
    kind: EntryKind
    metadata: Metadata | None = None
    symlink_target: str | None = None
    vcs_status: GitStatus = GitStatus.NOT_TRACKED
    metadata_error: OSError | None = None

    def __post_init__(self) -> None:
        if not self.name or os.sep in self.name or (os.altsep and os.altsep in self.name):
            raise ValueError(f"entry name must be a bare file name: {self.name!r}")

    @property
    def is_enhanced(self) -> bool:
        return self.metadata is not None

    @property
    def identity(self) -> FilesystemIdentity | None:
        return self.metadata.identity if self.metadata is not None else None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK

    @property
    def is_executable(self) -> bool:
        """Regular file with any execute bit set; unknown without metadata."""
        if self.kind is not EntryKind.FILE or self.metadata is None:
            return False
        return bool(self.metadata.mode & EXECUTE_BITS)
