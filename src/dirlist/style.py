"""ANSI color negotiation for decorated names."""

from __future__ import annotations

import os

from dirlist.config import ColorMode
from dirlist.entry import EntryKind
from dirlist.vcs import GitStatus

RESET = "\033[0m"

BLUE_BOLD = "\033[1;34m"
CYAN_BOLD = "\033[1;36m"
YELLOW_BOLD = "\033[1;33m"
GREEN_BOLD = "\033[1;32m"
YELLOW = "\033[33m"
MAGENTA = "\033[35m"
RED = "\033[31m"
GREEN = "\033[32m"
CYAN = "\033[36m"
GREY = "\033[90m"

_KIND_COLORS: dict[EntryKind, str] = {
    EntryKind.DIRECTORY: BLUE_BOLD,
    EntryKind.SYMLINK: CYAN_BOLD,
    EntryKind.BLOCK_DEVICE: YELLOW_BOLD,
    EntryKind.CHAR_DEVICE: YELLOW_BOLD,
    EntryKind.FIFO: YELLOW,
    EntryKind.SOCKET: MAGENTA,
}

_STATUS_COLORS: dict[GitStatus, str] = {
    GitStatus.UNTRACKED: RED,
    GitStatus.MODIFIED: YELLOW,
    GitStatus.ADDED: GREEN,
    GitStatus.DELETED: RED,
    GitStatus.RENAMED: CYAN,
    GitStatus.COPIED: CYAN,
    GitStatus.UPDATED: MAGENTA,
    GitStatus.IGNORED: GREY,
}


def stream_is_terminal(stream: object) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


class Style:
    """Decides whether and how to color output.

    Attributes:
        enabled: Whether escape sequences are emitted at all.
    """

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    @classmethod
    def negotiate(cls, mode: ColorMode, stream: object = None) -> Style:
        """Resolve *mode* against the destination stream.

        ``AUTO`` colors only terminals and honours ``NO_COLOR``.
        """
        if mode is ColorMode.ALWAYS:
            return cls(True)
        if mode is ColorMode.NEVER:
            return cls(False)
        return cls(stream_is_terminal(stream) and not os.environ.get("NO_COLOR"))

    def supports_color(self) -> bool:
        return self.enabled

    def color_for(self, kind: EntryKind, is_executable: bool) -> str | None:
        """Return the escape sequence for an entry, or ``None`` for plain."""
        if not self.enabled:
            return None
        if kind is EntryKind.FILE:
            return GREEN_BOLD if is_executable else None
        return _KIND_COLORS.get(kind)

    def status_color(self, status: GitStatus) -> str | None:
        if not self.enabled:
            return None
        return _STATUS_COLORS.get(status)

    def paint(self, text: str, color: str | None) -> str:
        if color is None:
            return text
        return f"{color}{text}{RESET}"
