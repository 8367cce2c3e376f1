"""Shared fixtures for dirlist tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dirlist.config import ListingConfig
from dirlist.engine import ListingReport, list_path
from dirlist.entry import Entry, EntryKind, Metadata
from dirlist.sink import ListSink

needs_symlinks = pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="POSIX symlinks required")
needs_non_root = pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission checks are bypassed for root",
)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a standard test directory tree.

    Structure::

        root/
        ├── .hidden
        ├── README.md
        ├── docs/
        │   └── guide.md
        ├── run.sh          (executable)
        └── src/
            ├── api/
            │   └── auth.py
            └── main.py
    """
    (tmp_path / ".hidden").write_text("secret")
    (tmp_path / "README.md").write_text("readme")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text("guide")
    (tmp_path / "run.sh").write_text("#!/bin/sh\n")
    (tmp_path / "run.sh").chmod(0o755)
    (tmp_path / "src" / "api").mkdir(parents=True)
    (tmp_path / "src" / "api" / "auth.py").write_text("auth")
    (tmp_path / "src" / "main.py").write_text("main")
    return tmp_path


@pytest.fixture
def gitignore_tree(tmp_path: Path) -> Path:
    """Tree with .gitignore for gitignore-integration testing.

    Structure::

        root/
        ├── .gitignore          (*.pyc, node_modules/, dist/)
        ├── dist/
        │   └── bundle.js
        ├── node_modules/
        │   └── pkg/
        │       └── index.js
        ├── src/
        │   ├── app.py
        │   └── app.pyc
        └── README.md
    """
    (tmp_path / ".gitignore").write_text("*.pyc\nnode_modules/\ndist/\n")
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "bundle.js").write_text("bundle")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("js")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("app")
    (tmp_path / "src" / "app.pyc").write_bytes(b"\x00")
    (tmp_path / "README.md").write_text("readme")
    return tmp_path


def make_metadata(size: int = 0, mtime_ns: int = 0, mode: int = 0o100644, inode: int = 1) -> Metadata:
    """Build metadata without touching the filesystem."""
    return Metadata(
        size=size,
        mtime_ns=mtime_ns,
        atime_ns=mtime_ns,
        mode=mode,
        uid=1000,
        gid=1000,
        nlink=1,
        inode=inode,
        device=1,
    )


def make_entry(
    name: str,
    kind: EntryKind = EntryKind.FILE,
    *,
    size: int | None = None,
    mtime_ns: int | None = None,
    mode: int | None = None,
) -> Entry:
    """Build an entry; metadata is attached when any stat field is given."""
    entry = Entry(name=name, kind=kind)
    if size is not None or mtime_ns is not None or mode is not None:
        default_mode = 0o040755 if kind is EntryKind.DIRECTORY else 0o100644
        entry.metadata = make_metadata(size=size or 0, mtime_ns=mtime_ns or 0, mode=mode or default_mode)
    return entry


def run_listing(path: Path | str, config: ListingConfig | None = None, **kwargs: object) -> tuple[list[str], ListingReport]:
    """List *path* into memory and return the lines with the report."""
    sink = ListSink()
    report = list_path(str(path), config or ListingConfig(), sink, **kwargs)  # type: ignore[arg-type]
    return sink.lines, report
