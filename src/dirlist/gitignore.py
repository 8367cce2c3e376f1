"""Root ``.gitignore`` support for ``--gitignore``, compiled with pathspec."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from pathspec import GitIgnoreSpec

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"


def load_gitignore_spec(directory: Path) -> GitIgnoreSpec | None:
    """Compile the ``.gitignore`` found directly in *directory*.

    Only the listed root's file is read; nested ``.gitignore`` files are
    not consulted.

    Returns:
        GitIgnoreSpec | None: ``None`` when the file is missing, unreadable
        or not UTF-8.
    """
    source = directory / GITIGNORE_NAME
    try:
        with source.open(encoding="utf-8") as fh:
            spec = GitIgnoreSpec.from_lines(fh)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping %s: %s", source, exc)
        return None
    return spec


class GitignoreFilter:
    """Excludes names of one directory that the root ``.gitignore`` matches.

    Attributes:
        spec: Compiled patterns of the listing root.
        relative_dir: Directory being collected, relative to the root.
    """

    def __init__(self, spec: GitIgnoreSpec, relative_dir: PurePosixPath | None = None) -> None:
        self.spec = spec
        self.relative_dir = relative_dir or PurePosixPath()

    def scoped(self, name: str) -> GitignoreFilter:
        """Return the filter for the child directory *name*."""
        return GitignoreFilter(self.spec, self.relative_dir / name)

    def should_exclude(self, name: str, is_dir: bool) -> bool:
        rel = (self.relative_dir / name).as_posix()
        if is_dir:
            rel += "/"
        return self.spec.match_file(rel)
