"""Decorated entry names: git marker, icon, color and type indicator."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field

from dirlist.config import ListingConfig
from dirlist.entry import Entry, EntryKind
from dirlist.icons import icon_for
from dirlist.style import Style
from dirlist.vcs import GitStatus

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

_KIND_INDICATORS: dict[EntryKind, str] = {
    EntryKind.DIRECTORY: "/",
    EntryKind.SYMLINK: "@",
    EntryKind.FIFO: "|",
    EntryKind.SOCKET: "=",
}


@dataclass(frozen=True, slots=True)
class NameOptions:
    """Options for name decoration.

    Attributes:
        style: Color negotiator; a disabled style emits plain text.
        indicators: Append the type indicator suffix.
        icons: Prefix the icon glyph.
        vcs_status: Prefix the git status marker.
    """

    style: Style = field(default_factory=lambda: Style(False))
    indicators: bool = False
    icons: bool = False
    vcs_status: bool = False

    @classmethod
    def from_config(cls, config: ListingConfig, style: Style, show_icons: bool) -> NameOptions:
        return cls(
            style=style,
            indicators=config.indicators,
            icons=show_icons,
            vcs_status=config.vcs_status,
        )


def indicator_for(entry: Entry) -> str:
    """Return the ``-F`` suffix for *entry* (empty for plain files)."""
    if entry.kind is EntryKind.FILE:
        return "*" if entry.is_executable else ""
    return _KIND_INDICATORS.get(entry.kind, "")


def char_width(ch: str) -> int:
    """Return terminal column width for one character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the visible width of *text*, ignoring ANSI escapes."""
    return sum(char_width(ch) for ch in ANSI_ESCAPE_RE.sub("", text))


def decorate_name(entry: Entry, options: NameOptions, label: str | None = None) -> str:
    """Render the name of *entry* with every enabled decoration.

    Args:
        entry: Entry to render.
        options: Decoration options.
        label: Text shown instead of ``entry.name`` (operands given on
            the command line are shown as typed).

    Returns:
        str: Decorated name, possibly containing ANSI escapes.
    """
    style = options.style
    parts: list[str] = []

    if options.vcs_status and entry.vcs_status is not GitStatus.NOT_TRACKED:
        marker_color = None if entry.vcs_status is GitStatus.CLEAN else style.status_color(entry.vcs_status)
        parts.append(style.paint(entry.vcs_status.indicator, marker_color) + " ")

    if options.icons:
        glyph = icon_for(entry.name, entry.is_dir, entry.is_symlink, entry.is_executable)
        parts.append(glyph + " ")

    parts.append(style.paint(label if label is not None else entry.name, style.color_for(entry.kind, entry.is_executable)))

    if options.indicators:
        parts.append(indicator_for(entry))

    return "".join(parts)
