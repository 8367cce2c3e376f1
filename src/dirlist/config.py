"""Listing configuration: one immutable value passed down every call."""

from __future__ import annotations

import enum
from dataclasses import dataclass

DEFAULT_TERMINAL_WIDTH = 80


class SortKey(enum.Enum):
    NAME = "name"
    TIME = "time"
    SIZE = "size"


class ColorMode(enum.Enum):
    ALWAYS = "always"
    AUTO = "auto"
    NEVER = "never"


class IconMode(enum.Enum):
    ALWAYS = "always"
    AUTO = "auto"
    NEVER = "never"


class TimeStyle(enum.Enum):
    RELATIVE = "relative"
    ISO = "iso"
    LONG_ISO = "long-iso"


class SizeStyle(enum.Enum):
    BYTES = "bytes"
    KILOBYTES = "kilobytes"
    HUMAN = "human"


class Layout(enum.Enum):
    ONE_PER_LINE = "one-per-line"
    COLUMNS = "columns"
    COMMAS = "commas"


@dataclass(frozen=True, slots=True)
class SortConfig:
    """Ordering options consumed by the sorter.

    Attributes:
        key: Primary sort key.
        reverse: Invert the key order (within each partition).
        dirs_first: Partition directories before everything else.
    """

    key: SortKey = SortKey.NAME
    reverse: bool = False
    dirs_first: bool = False


@dataclass(frozen=True, slots=True)
class ListingConfig:
    """Options controlling one listing.

    Attributes:
        show_hidden: Include dot-files (``-a``). ``.``/``..`` are never listed.
        almost_all: Include dot-files except ``.``/``..`` (``-A``).
        long_format: Render the detail table (``-l``).
        recursive: Descend into subdirectories (``-R``).
        reverse: Reverse the sort order (``-r``).
        sort_key: Primary sort key (``-t``/``-S``).
        dirs_first: Group directories before files.
        indicators: Append a type indicator to names (``-F``).
        numeric_ids: Show numeric owner/group ids (``-n``).
        color: When to emit ANSI colors.
        icons: When to prefix names with icon glyphs.
        vcs_status: Prefix names with their git status.
        time_style: Timestamp format in long format.
        size_style: Size format in long format (``-h``/``-k``).
        layout: Arrangement of names outside long format.
        show_inodes: Print inode numbers (``-i``).
        list_directory_itself: Treat directory operands as entries (``-d``).
        dereference: Follow symlinks when gathering metadata (``-L``).
        terminal_width: Width available to the column layout.
        ignore_patterns: fnmatch patterns that are never listed.
        hide_patterns: fnmatch patterns hidden unless ``-a``/``-A``.
        gitignore: Skip names matched by the root's ``.gitignore``.
    """

    show_hidden: bool = False
    almost_all: bool = False
    long_format: bool = False
    recursive: bool = False
    reverse: bool = False
    sort_key: SortKey = SortKey.NAME
    dirs_first: bool = False
    indicators: bool = False
    numeric_ids: bool = False
    color: ColorMode = ColorMode.NEVER
    icons: IconMode = IconMode.NEVER
    vcs_status: bool = False
    time_style: TimeStyle = TimeStyle.RELATIVE
    size_style: SizeStyle = SizeStyle.BYTES
    layout: Layout = Layout.ONE_PER_LINE
    show_inodes: bool = False
    list_directory_itself: bool = False
    dereference: bool = False
    terminal_width: int = DEFAULT_TERMINAL_WIDTH
    ignore_patterns: tuple[str, ...] = ()
    hide_patterns: tuple[str, ...] = ()
    gitignore: bool = False

    @property
    def sort_config(self) -> SortConfig:
        return SortConfig(key=self.sort_key, reverse=self.reverse, dirs_first=self.dirs_first)

    @property
    def includes_dotfiles(self) -> bool:
        return self.show_hidden or self.almost_all


def needs_metadata(config: ListingConfig) -> bool:
    """Return whether entries must be stat'ed for this configuration.

    Plain name listings skip every per-entry syscall.
    """
    return (
        config.long_format
        or config.sort_key is not SortKey.NAME
        or config.indicators
        or config.color is not ColorMode.NEVER
        or config.show_inodes
        or config.vcs_status
        or config.dereference
    )
