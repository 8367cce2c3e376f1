"""Git status lookup for entry decoration.

The repository root is resolved once per listing and ``git status`` is run
lazily on the first query; every later query is a dictionary lookup.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 2.0


class GitStatus(enum.Enum):
    """Per-file classification reported by ``git status --porcelain``."""

    UNTRACKED = "untracked"
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UPDATED = "updated"
    IGNORED = "ignored"
    CLEAN = "clean"
    NOT_TRACKED = "not-tracked"

    @property
    def indicator(self) -> str:
        """Two-column marker printed in front of a decorated name."""
        return _INDICATORS[self]


_INDICATORS: dict[GitStatus, str] = {
    GitStatus.UNTRACKED: "??",
    GitStatus.MODIFIED: "M ",
    GitStatus.ADDED: "A ",
    GitStatus.DELETED: "D ",
    GitStatus.RENAMED: "R ",
    GitStatus.COPIED: "C ",
    GitStatus.UPDATED: "U ",
    GitStatus.IGNORED: "!!",
    GitStatus.CLEAN: "  ",
    GitStatus.NOT_TRACKED: "  ",
}

_WORKTREE_CODES: dict[str, GitStatus] = {
    "M": GitStatus.MODIFIED,
    "D": GitStatus.DELETED,
    "?": GitStatus.UNTRACKED,
    "!": GitStatus.IGNORED,
}

_INDEX_CODES: dict[str, GitStatus] = {
    "A": GitStatus.ADDED,
    "M": GitStatus.MODIFIED,
    "D": GitStatus.DELETED,
    "R": GitStatus.RENAMED,
    "C": GitStatus.COPIED,
    "U": GitStatus.UPDATED,
}


def parse_status_code(code: str) -> GitStatus:
    """Map a porcelain ``XY`` code to a :class:`GitStatus`.

    The worktree column wins over the index column because it is what the
    user sees on disk.

    Args:
        code: Two-character status code such as ``" M"`` or ``"??"``.

    Returns:
        GitStatus: Matching classification, ``CLEAN`` for anything unknown.
    """
    if len(code) != 2:
        return GitStatus.CLEAN
    index_code, worktree_code = code
    if worktree_code in _WORKTREE_CODES:
        return _WORKTREE_CODES[worktree_code]
    return _INDEX_CODES.get(index_code, GitStatus.CLEAN)


def iter_porcelain_records(output: str) -> list[tuple[str, str]]:
    """Split ``git status --porcelain=v1 -z`` output into ``(code, path)``."""
    records: list[tuple[str, str]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if len(token) < 4 or token[2] != " ":
            continue

        code = token[:2]
        records.append((code, token[3:]))

        # Renames and copies carry the source path as an extra token.
        if "R" in code or "C" in code:
            index += 1

    return records


class StatusProvider(Protocol):
    """Version-control status source consumed by metadata enhancement."""

    def status_for(self, path: Path) -> GitStatus: ...


class NullStatusProvider:
    """Provider used outside a repository: nothing is tracked."""

    def status_for(self, path: Path) -> GitStatus:
        return GitStatus.NOT_TRACKED


def _run_git(cwd: Path, args: list[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=False,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git %s failed in %s: %s", args[0], cwd, exc)
        return None


def find_repository_root(path: Path) -> Path | None:
    """Return the work-tree root containing *path*, or ``None``."""
    start = path if path.is_dir() else path.parent
    proc = _run_git(start, ["rev-parse", "--show-toplevel"])
    if proc is None or proc.returncode != 0:
        return None
    top = proc.stdout.strip()
    return Path(top).resolve() if top else None


class GitStatusProvider:
    """Answers status queries for files below one repository root."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root
        self._statuses: dict[str, GitStatus] | None = None
        self._directories: dict[str, GitStatus] = {}

    @classmethod
    def discover(cls, path: Path) -> StatusProvider:
        """Build a provider for the repository containing *path*.

        Falls back to :class:`NullStatusProvider` when *path* is not inside
        a git work tree or git is unavailable.
        """
        root = find_repository_root(path.resolve())
        if root is None:
            logger.debug("Not inside a git repository: %s", path)
            return NullStatusProvider()
        return cls(root)

    def _load(self) -> dict[str, GitStatus]:
        if self._statuses is not None:
            return self._statuses

        self._statuses = {}
        proc = _run_git(
            self.repo_root,
            ["status", "--porcelain=v1", "-z", "--ignored", "--untracked-files=normal"],
        )
        if proc is None or proc.returncode != 0:
            return self._statuses

        for code, rel_path in iter_porcelain_records(proc.stdout):
            status = parse_status_code(code)
            if rel_path.endswith("/"):
                # Untracked or ignored directory: applies to everything below.
                self._directories[rel_path.rstrip("/")] = status
            self._statuses[rel_path.rstrip("/")] = status
        return self._statuses

    def status_for(self, path: Path) -> GitStatus:
        """Return the status of *path* (absolute, or relative to the root)."""
        statuses = self._load()
        try:
            if path.is_absolute():
                # Resolve the parent only so a symlink is reported as itself.
                rel = (path.parent.resolve() / path.name).relative_to(self.repo_root)
            else:
                rel = path
        except ValueError:
            return GitStatus.NOT_TRACKED
        key = rel.as_posix()
        if key == ".git" or key.startswith(".git/"):
            return GitStatus.NOT_TRACKED
        if key in statuses:
            return statuses[key]
        for parent in rel.parents:
            status = self._directories.get(parent.as_posix())
            if status is not None:
                return status
        return GitStatus.CLEAN
