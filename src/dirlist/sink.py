"""Output sinks: destinations accepting a stream of rendered lines."""

from __future__ import annotations

from typing import Protocol, TextIO

from dirlist import OutputClosedError


class OutputSink(Protocol):
    """Anything that accepts rendered lines, one call per line."""

    def write_line(self, line: str) -> None: ...


class StreamSink:
    """Writes lines to a text stream.

    Any failure of the stream (a closed pipe, a closed file) is raised as
    :class:`OutputClosedError`, which stops the whole listing.
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write_line(self, line: str) -> None:
        try:
            self.stream.write(line + "\n")
        except (OSError, ValueError) as exc:
            raise OutputClosedError(f"write error: {exc}") from exc

    def isatty(self) -> bool:
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False


class ListSink:
    """Collects lines in memory; used for tests and embedding."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)

    def getvalue(self) -> str:
        return "\n".join(self.lines)
