"""Entry filtering: hidden-name rules and fnmatch-based exclusion."""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase
from typing import Protocol

from dirlist.config import ListingConfig

_DOT_NAMES = frozenset({".", ".."})


class EntryFilter(Protocol):
    """Protocol for entry filtering.

    Keeps the collector decoupled from the matching strategy.
    """

    def should_exclude(self, name: str, is_dir: bool) -> bool: ...


def is_visible_name(name: str, config: ListingConfig) -> bool:
    """Apply the hidden-file rules to one name.

    ``.`` and ``..`` are always excluded; other dot-files only appear
    with ``-a`` or ``-A``.
    """
    if name in _DOT_NAMES:
        return False
    if name.startswith("."):
        return config.includes_dotfiles
    return True


class PatternFilter:
    """Filter entries by fnmatch patterns.

    Implements ``-I PATTERN`` exclusion behavior.
    """

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        """Initialize pattern filter.

        Args:
            patterns: Optional fnmatch pattern list.
        """
        self._patterns: list[str] = list(patterns) if patterns else []

    def should_exclude(self, name: str, is_dir: bool) -> bool:
        """Return whether an entry should be excluded.

        Args:
            name: Entry name.
            is_dir: Whether the entry is a directory.

        Returns:
            bool: ``True`` when any configured pattern matches.
        """
        return any(fnmatchcase(name, pat) for pat in self._patterns)


class CombinedFilter:
    """Excludes an entry when any member filter does."""

    def __init__(self, filters: Iterable[EntryFilter]) -> None:
        self._filters = list(filters)

    def should_exclude(self, name: str, is_dir: bool) -> bool:
        return any(f.should_exclude(name, is_dir) for f in self._filters)


def build_pattern_filter(config: ListingConfig) -> EntryFilter | None:
    """Build the ``--ignore``/``--hide`` filter for *config*.

    ``--hide`` patterns stop applying once dot-files are requested,
    matching GNU ls.

    Returns:
        EntryFilter | None: Filter, or ``None`` when no pattern applies.
    """
    patterns = list(config.ignore_patterns)
    if not config.includes_dotfiles:
        patterns.extend(config.hide_patterns)
    return PatternFilter(patterns) if patterns else None
