"""Traversal engine: turns one root path into rendered lines and a report.

Recursion is depth-first and pre-order, driven by an explicit stack of
pending directory paths so no entry list outlives its own level.
"""

from __future__ import annotations

import enum
import logging
import os
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path

from dirlist import EnumerationError, OutputClosedError
from dirlist.collector import collect_entries, enhance_entries
from dirlist.config import ListingConfig
from dirlist.cycle import CycleGuard
from dirlist.entry import Entry, Metadata, kind_from_mode
from dirlist.filter import CombinedFilter, EntryFilter, build_pattern_filter
from dirlist.formatter.long import format_long
from dirlist.formatter.names import NameOptions
from dirlist.formatter.short import format_names
from dirlist.fs import DirectoryHandle, MetadataProvider, OsMetadataProvider
from dirlist.gitignore import GitignoreFilter, load_gitignore_spec
from dirlist.icons import should_show_icons
from dirlist.sink import OutputSink
from dirlist.sorter import sort_entries
from dirlist.style import Style, stream_is_terminal
from dirlist.vcs import GitStatusProvider, StatusProvider

logger = logging.getLogger(__name__)

CYCLE_MESSAGE = "not following symlink cycle"


class DiagnosticKind(enum.Enum):
    PATH = "path"
    ENUMERATION = "enumeration"
    METADATA = "metadata"
    CYCLE = "cycle"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A recovered error: the listing went on without this piece.

    Attributes:
        kind: Error category.
        path: Path the error is about.
        message: Human-readable reason.
    """

    kind: DiagnosticKind
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class ListingReport:
    """Outcome of listing one root path.

    Attributes:
        path: The root path as given.
        diagnostics: Every recovered error, in the order encountered.
    """

    path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def cycles(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is DiagnosticKind.CYCLE]

    def add(self, kind: DiagnosticKind, path: str, message: str) -> None:
        logger.debug("%s error: %s: %s", kind.value, path, message)
        self.diagnostics.append(Diagnostic(kind=kind, path=path, message=message))


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)


@dataclass(frozen=True, slots=True)
class _PendingDirectory:
    path: str
    gitignore: GitignoreFilter | None = None


class Lister:
    """Lists root paths into one sink with shared collaborators.

    Args:
        config: Listing configuration.
        sink: Destination of rendered lines.
        provider: Stat/readlink source. Defaults to the OS provider.
        status_provider: Git status source. Discovered per root when
            ``config.vcs_status`` is set and none is given.
        style: Color negotiator. Negotiated against *sink* by default.
        now_ns: Reference time for relative timestamps.
    """

    def __init__(
        self,
        config: ListingConfig,
        sink: OutputSink,
        *,
        provider: MetadataProvider | None = None,
        status_provider: StatusProvider | None = None,
        style: Style | None = None,
        now_ns: int | None = None,
    ) -> None:
        self.config = config
        self.sink = sink
        self.provider = provider or OsMetadataProvider()
        self._status_override = status_provider
        self.status_provider: StatusProvider | None = status_provider
        self.now_ns = now_ns
        active_style = style or Style.negotiate(config.color, sink)
        show_icons = should_show_icons(config.icons, stream_is_terminal(sink))
        self.name_options = NameOptions.from_config(config, active_style, show_icons)

    def _write(self, line: str) -> None:
        try:
            self.sink.write_line(line)
        except (OSError, ValueError) as exc:
            raise OutputClosedError(f"write error: {exc}") from exc

    def _render(self, entries: list[Entry], *, single: bool = False, labels: dict[int, str] | None = None) -> None:
        if self.config.long_format:
            lines = format_long(
                entries,
                self.config,
                self.name_options,
                now_ns=self.now_ns,
                show_total=not single,
                labels=labels,
            )
        else:
            lines = format_names(entries, self.config, self.name_options, labels)
        for line in lines:
            self._write(line)

    def run(self, path: str) -> ListingReport:
        """List one root path.

        Args:
            path: Root path as given by the caller.

        Returns:
            ListingReport: Recovered errors for this root.

        Raises:
            OutputClosedError: If the sink stops accepting data.
        """
        report = ListingReport(path=path)
        if self.now_ns is None:
            self.now_ns = time.time_ns()
        self.status_provider = self._status_override
        if self.config.vcs_status and self.status_provider is None:
            self.status_provider = GitStatusProvider.discover(Path(path))

        try:
            st = os.stat(path)
        except OSError as exc:
            report.add(DiagnosticKind.PATH, path, _reason(exc))
            return report

        if not stat.S_ISDIR(st.st_mode) or self.config.list_directory_itself:
            self._render_single(path, report)
            return report

        try:
            handle = DirectoryHandle.open(path)
        except OSError as exc:
            report.add(DiagnosticKind.PATH, path, _reason(exc))
            return report

        gitignore_spec = load_gitignore_spec(Path(path)) if self.config.gitignore else None
        root_gitignore = GitignoreFilter(gitignore_spec) if gitignore_spec is not None else None
        guard = CycleGuard()
        stack: list[_PendingDirectory] = []

        with handle:
            try:
                guard.check_and_mark(handle.identity())
            except OSError as exc:
                report.add(DiagnosticKind.ENUMERATION, path, _reason(exc))
                return report
            if self.config.recursive:
                self._write(f"{path}:")
            children = self._list_level(handle, root_gitignore, report)
        stack.extend(reversed(children))

        while stack:
            pending = stack.pop()
            self._write("")
            self._write(f"{pending.path}:")
            try:
                handle = DirectoryHandle.open(pending.path)
            except OSError as exc:
                report.add(DiagnosticKind.ENUMERATION, pending.path, _reason(exc))
                continue

            with handle:
                try:
                    is_cycle = guard.check_and_mark(handle.identity())
                except OSError as exc:
                    report.add(DiagnosticKind.ENUMERATION, pending.path, _reason(exc))
                    continue
                if is_cycle:
                    report.add(DiagnosticKind.CYCLE, pending.path, CYCLE_MESSAGE)
                    continue
                children = self._list_level(handle, pending.gitignore, report)
            stack.extend(reversed(children))

        return report

    def _level_filter(self, gitignore: GitignoreFilter | None) -> EntryFilter | None:
        filters: list[EntryFilter] = []
        pattern_filter = build_pattern_filter(self.config)
        if pattern_filter is not None:
            filters.append(pattern_filter)
        if gitignore is not None:
            filters.append(gitignore)
        if not filters:
            return None
        return filters[0] if len(filters) == 1 else CombinedFilter(filters)

    def _list_level(
        self,
        handle: DirectoryHandle,
        gitignore: GitignoreFilter | None,
        report: ListingReport,
    ) -> list[_PendingDirectory]:
        """Collect, enhance, sort and render one level.

        Returns:
            list[_PendingDirectory]: Subdirectories to visit, in sorted
            order; empty unless the listing is recursive.
        """
        try:
            entries = collect_entries(handle, self.config, self._level_filter(gitignore))
        except EnumerationError as exc:
            report.add(DiagnosticKind.ENUMERATION, exc.path, _reason(exc.cause))
            return []

        for failure in enhance_entries(entries, handle, self.config, self.provider, self.status_provider):
            report.add(DiagnosticKind.METADATA, handle.join(failure.entry.name), _reason(failure.error))

        sort_entries(entries, self.config.sort_config)
        self._render(entries)

        if not self.config.recursive:
            return []
        return [
            _PendingDirectory(
                path=handle.join(entry.name),
                gitignore=gitignore.scoped(entry.name) if gitignore is not None else None,
            )
            for entry in entries
            if entry.is_dir
        ]

    def _render_single(self, path: str, report: ListingReport) -> None:
        """Render a root that is shown as one entry rather than listed."""
        name = os.path.basename(os.path.normpath(path)) or "."
        try:
            st = os.stat(path) if self.config.dereference else os.lstat(path)
        except OSError as exc:
            report.add(DiagnosticKind.PATH, path, _reason(exc))
            return

        entry = Entry(name=name, kind=kind_from_mode(st.st_mode))
        entry.metadata = Metadata.from_stat(st)
        if self.config.long_format and entry.is_symlink:
            try:
                entry.symlink_target = os.readlink(path)
            except OSError as exc:
                report.add(DiagnosticKind.METADATA, path, _reason(exc))
        if self.config.vcs_status and self.status_provider is not None:
            entry.vcs_status = self.status_provider.status_for(Path(path).absolute())

        self._render([entry], single=True, labels={0: path})


def list_path(
    path: str,
    config: ListingConfig,
    sink: OutputSink,
    *,
    provider: MetadataProvider | None = None,
    status_provider: StatusProvider | None = None,
    style: Style | None = None,
    now_ns: int | None = None,
) -> ListingReport:
    """List *path* into *sink*.

    A fresh cycle guard is used for every call, so separate roots never
    influence each other.

    Args:
        path: File or directory to list.
        config: Listing configuration.
        sink: Destination of rendered lines.
        provider: Optional stat/readlink source.
        status_provider: Optional git status source.
        style: Optional color negotiator.
        now_ns: Optional reference time for relative timestamps.

    Returns:
        ListingReport: Recovered errors; ``report.ok`` is ``False`` if any
        occurred even though output was produced.

    Raises:
        OutputClosedError: If the sink stops accepting data.
    """
    lister = Lister(
        config,
        sink,
        provider=provider,
        status_provider=status_provider,
        style=style,
        now_ns=now_ns,
    )
    return lister.run(path)
