"""Entry collection for one directory level and lazy metadata enhancement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dirlist import EnumerationError
from dirlist.config import ListingConfig, needs_metadata
from dirlist.entry import Entry, EntryKind, Metadata, kind_from_dir_entry, kind_from_mode
from dirlist.filter import EntryFilter, is_visible_name
from dirlist.fs import DirectoryHandle, MetadataProvider, OsMetadataProvider
from dirlist.vcs import StatusProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MetadataFailure:
    """A stat or readlink failure recorded during enhancement.

    Attributes:
        entry: The entry left without metadata (or without a link target).
        error: The underlying error.
    """

    entry: Entry
    error: OSError


def collect_entries(
    directory: DirectoryHandle,
    config: ListingConfig,
    entry_filter: EntryFilter | None = None,
) -> list[Entry]:
    """List the immediate children of *directory* in enumeration order.

    No per-entry stat is issued here; kinds come from the enumeration
    record itself.

    Args:
        directory: Open directory to enumerate.
        config: Listing configuration (hidden-file rules).
        entry_filter: Optional exclude filter applied after the hidden rules.

    Returns:
        list[Entry]: Unsorted, unenhanced entries.

    Raises:
        EnumerationError: If the directory cannot be read. Entries gathered
            before the failure are discarded.
    """
    result: list[Entry] = []
    try:
        for dir_entry in directory.scandir():
            name = dir_entry.name
            if not is_visible_name(name, config):
                continue

            kind = kind_from_dir_entry(dir_entry)
            if entry_filter is not None and entry_filter.should_exclude(name, kind is EntryKind.DIRECTORY):
                continue

            result.append(Entry(name=name, kind=kind))
    except OSError as exc:
        raise EnumerationError(directory.path, exc) from exc
    return result


def enhance_entries(
    entries: list[Entry],
    directory: DirectoryHandle,
    config: ListingConfig,
    provider: MetadataProvider | None = None,
    status_provider: StatusProvider | None = None,
) -> list[MetadataFailure]:
    """Attach metadata, link targets and git status to *entries* in place.

    Does nothing unless :func:`needs_metadata` says the configuration
    requires it. A failure on one entry leaves that entry unenhanced and
    never stops the others.

    Args:
        entries: Entries collected from *directory*.
        directory: The handle the entries came from.
        config: Listing configuration.
        provider: Stat/readlink source. Defaults to the OS provider.
        status_provider: Git status source, consulted when
            ``config.vcs_status`` is set.

    Returns:
        list[MetadataFailure]: One record per failed stat or readlink.
    """
    if not entries or not needs_metadata(config):
        return []

    active_provider = provider or OsMetadataProvider()
    failures: list[MetadataFailure] = []

    for entry in entries:
        try:
            entry.metadata = _stat_entry(entry, directory, config, active_provider)
        except OSError as exc:
            logger.debug("Cannot stat %s: %s", directory.join(entry.name), exc)
            entry.metadata = None
            entry.metadata_error = exc
            failures.append(MetadataFailure(entry=entry, error=exc))

        if config.long_format and entry.is_symlink:
            try:
                entry.symlink_target = active_provider.read_link(directory, entry.name)
            except OSError as exc:
                logger.debug("Cannot read link %s: %s", directory.join(entry.name), exc)
                failures.append(MetadataFailure(entry=entry, error=exc))

        if config.vcs_status and status_provider is not None:
            entry.vcs_status = status_provider.status_for(Path(directory.join(entry.name)).absolute())

    return failures


def _stat_entry(
    entry: Entry,
    directory: DirectoryHandle,
    config: ListingConfig,
    provider: MetadataProvider,
) -> Metadata:
    if not (config.dereference and entry.is_symlink):
        return provider.stat(directory, entry.name, follow_symlinks=False)

    try:
        metadata = provider.stat(directory, entry.name, follow_symlinks=True)
    except OSError as exc:
        # Dangling link: describe the link itself.
        logger.debug("Cannot follow %s: %s", directory.join(entry.name), exc)
        return provider.stat(directory, entry.name, follow_symlinks=False)
    entry.kind = kind_from_mode(metadata.mode)
    return metadata
