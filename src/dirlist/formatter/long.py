"""Long (``-l``) format: column-aligned detail table."""

from __future__ import annotations

import grp
import pwd
import stat
from dataclasses import dataclass
from functools import lru_cache

from dirlist.config import ListingConfig, SizeStyle
from dirlist.entry import Entry, EntryKind
from dirlist.formatter.names import NameOptions, decorate_name, display_width
from dirlist.formatter.timefmt import format_time

BLOCK_SIZE = 512
PLACEHOLDER = "?"

_TYPE_CHARS: dict[EntryKind, str] = {
    EntryKind.FILE: "-",
    EntryKind.DIRECTORY: "d",
    EntryKind.SYMLINK: "l",
    EntryKind.FIFO: "p",
    EntryKind.BLOCK_DEVICE: "b",
    EntryKind.CHAR_DEVICE: "c",
    EntryKind.SOCKET: "s",
}

_HUMAN_UNITS = ("", "K", "M", "G", "T", "P")


@dataclass(frozen=True, slots=True)
class Column:
    """One long-format column.

    Attributes:
        name: Column identifier.
        right: Right-align (numbers) instead of left-align.
    """

    name: str
    right: bool = False


INODE = Column("inode", right=True)
PERMISSIONS = Column("permissions")
LINKS = Column("links", right=True)
OWNER = Column("owner")
GROUP = Column("group")
SIZE = Column("size", right=True)
TIME = Column("time")


def permission_string(entry: Entry) -> str:
    """Return the ten-character ``drwxr-xr-x`` string for *entry*.

    Without metadata the type character is still known and the nine
    permission positions are ``?``.
    """
    type_char = _TYPE_CHARS.get(entry.kind, "?")
    if entry.metadata is None:
        return type_char + PLACEHOLDER * 9
    return type_char + stat.filemode(entry.metadata.mode)[1:]


def format_size(size: int, style: SizeStyle) -> str:
    """Render a byte count as raw bytes, 1K blocks or a scaled value."""
    if style is SizeStyle.KILOBYTES:
        return str((size + 1023) // 1024)
    if style is SizeStyle.BYTES:
        return str(size)

    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_HUMAN_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return str(size)
    if value >= 10.0:
        return f"{value:.0f}{_HUMAN_UNITS[unit]}"
    return f"{value:.1f}{_HUMAN_UNITS[unit]}"


@lru_cache(maxsize=256)
def user_name(uid: int) -> str:
    """Resolve *uid* to a login name, falling back to the number."""
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


@lru_cache(maxsize=256)
def group_name(gid: int) -> str:
    """Resolve *gid* to a group name, falling back to the number."""
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def total_blocks(entries: list[Entry]) -> int:
    """Sum of 512-byte blocks, each entry rounded up; unknown sizes count 0."""
    return sum(
        (entry.metadata.size + BLOCK_SIZE - 1) // BLOCK_SIZE
        for entry in entries
        if entry.metadata is not None
    )


def _columns(config: ListingConfig) -> list[Column]:
    columns = [PERMISSIONS, LINKS, OWNER, GROUP, SIZE, TIME]
    if config.show_inodes:
        columns.insert(0, INODE)
    return columns


def _cells(entry: Entry, config: ListingConfig, now_ns: int | None) -> dict[Column, str]:
    meta = entry.metadata
    cells = {PERMISSIONS: permission_string(entry)}
    if meta is None:
        for column in (INODE, LINKS, OWNER, GROUP, SIZE, TIME):
            cells[column] = PLACEHOLDER
        return cells

    cells[INODE] = str(meta.inode)
    cells[LINKS] = str(meta.nlink)
    if config.numeric_ids:
        cells[OWNER] = str(meta.uid)
        cells[GROUP] = str(meta.gid)
    else:
        cells[OWNER] = user_name(meta.uid)
        cells[GROUP] = group_name(meta.gid)
    cells[SIZE] = format_size(meta.size, config.size_style)
    cells[TIME] = format_time(meta.mtime_ns, config.time_style, now_ns)
    return cells


def _pad(text: str, width: int, right: bool) -> str:
    fill = " " * (width - display_width(text))
    return fill + text if right else text + fill


def format_long(
    entries: list[Entry],
    config: ListingConfig,
    name_options: NameOptions,
    *,
    now_ns: int | None = None,
    show_total: bool = True,
    labels: dict[int, str] | None = None,
) -> list[str]:
    """Render *entries* as an aligned detail table.

    Column widths are the widest cell of this call only, so each
    directory level of a recursive listing is aligned on its own.

    Args:
        entries: Sorted entries of one level.
        config: Listing configuration.
        name_options: Name decoration options.
        now_ns: Reference time for relative timestamps.
        show_total: Emit the leading ``total N`` line.
        labels: Optional display text per entry index (command-line operands).

    Returns:
        list[str]: Output lines.
    """
    if not entries:
        return ["total 0"] if show_total else []

    columns = _columns(config)
    rows = [_cells(entry, config, now_ns) for entry in entries]
    widths = {col: max(display_width(row[col]) for row in rows) for col in columns}

    lines: list[str] = []
    if show_total:
        lines.append(f"total {total_blocks(entries)}")

    for index, (entry, row) in enumerate(zip(entries, rows)):
        fields = [_pad(row[col], widths[col], col.right) for col in columns]
        label = labels.get(index) if labels else None
        name = decorate_name(entry, name_options, label)
        if entry.symlink_target is not None:
            name += f" -> {entry.symlink_target}"
        fields.append(name)
        lines.append(" ".join(fields))
    return lines
