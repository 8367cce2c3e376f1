"""Entry ordering: name, modification time or size, with grouping options."""

from __future__ import annotations

import os
from typing import Any, Callable

from dirlist.config import SortConfig, SortKey
from dirlist.entry import Entry


def _name_key(entry: Entry) -> bytes:
    # Byte order, no locale collation.
    return os.fsencode(entry.name)


def _time_key(entry: Entry) -> int:
    # Negated so the natural order is newest first.
    return -entry.metadata.mtime_ns if entry.metadata is not None else 0


def _size_key(entry: Entry) -> int:
    return -entry.metadata.size if entry.metadata is not None else 0


_KEY_FUNCTIONS: dict[SortKey, Callable[[Entry], Any]] = {
    SortKey.NAME: _name_key,
    SortKey.TIME: _time_key,
    SortKey.SIZE: _size_key,
}


def sort_entries(entries: list[Entry], config: SortConfig | None = None) -> list[Entry]:
    """Sort *entries* in place and return the same list.

    The sort is stable: entries that tie on the active key keep their
    collection order, whichever direction is requested. With
    ``dirs_first`` the directory/non-directory partition is never
    reversed; ``reverse`` only flips the order inside each partition.

    Args:
        entries: Entries of one directory level.
        config: Ordering options. Defaults to ``SortConfig()``.

    Returns:
        list[Entry]: *entries*, reordered.
    """
    sort_config = config or SortConfig()
    entries.sort(key=_KEY_FUNCTIONS[sort_config.key], reverse=sort_config.reverse)

    if sort_config.dirs_first:
        dirs = [e for e in entries if e.is_dir]
        others = [e for e in entries if not e.is_dir]
        entries[:] = dirs + others
    return entries
