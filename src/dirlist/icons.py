"""Nerd Font icon lookup for decorated names."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dirlist.config import IconMode

ICONS_ENV_VAR: Final = "LS_ICONS"

DIRECTORY: Final = "\uf07b"
SYMLINK: Final = "\uf481"
FILE: Final = "\uf15b"
EXECUTABLE: Final = "\uf489"

_C: Final = "\ue61e"
_CPP: Final = "\ue61d"
_RUST: Final = "\ue7a8"
_GO: Final = "\ue626"
_PYTHON: Final = "\ue73c"
_JAVASCRIPT: Final = "\ue74e"
_TYPESCRIPT: Final = "\ue628"
_ZIG: Final = "\u26a1"
_JAVA: Final = "\ue738"
_RUBY: Final = "\ue791"
_PERL: Final = "\ue769"
_TEXT: Final = "\uf15c"
_MARKDOWN: Final = "\uf48a"
_PDF: Final = "\uf1c1"
_ARCHIVE: Final = "\uf1c6"
_IMAGE: Final = "\uf1c5"
_AUDIO: Final = "\uf1c7"
_VIDEO: Final = "\uf1c8"
_CONFIG: Final = "\ue615"
_JSON: Final = "\ue60b"
_GIT: Final = "\uf1d3"
_LICENSE: Final = "\uf718"
_DOCKER: Final = "\uf308"

_EXTENSION_ICONS: Final[Mapping[str, str]] = {
    "7z": _ARCHIVE,
    "aac": _AUDIO,
    "avi": _VIDEO,
    "bmp": _IMAGE,
    "bz2": _ARCHIVE,
    "c": _C,
    "cc": _CPP,
    "cfg": _CONFIG,
    "class": _JAVA,
    "conf": _CONFIG,
    "cpp": _CPP,
    "cxx": _CPP,
    "flac": _AUDIO,
    "flv": _VIDEO,
    "gif": _IMAGE,
    "go": _GO,
    "gz": _ARCHIVE,
    "h": _C,
    "hpp": _CPP,
    "ico": _IMAGE,
    "ini": _CONFIG,
    "java": _JAVA,
    "jpeg": _IMAGE,
    "jpg": _IMAGE,
    "js": _JAVASCRIPT,
    "json": _JSON,
    "m4a": _AUDIO,
    "markdown": _MARKDOWN,
    "md": _MARKDOWN,
    "mjs": _JAVASCRIPT,
    "mkv": _VIDEO,
    "mov": _VIDEO,
    "mp3": _AUDIO,
    "mp4": _VIDEO,
    "ogg": _AUDIO,
    "pdf": _PDF,
    "perl": _PERL,
    "pl": _PERL,
    "pm": _PERL,
    "png": _IMAGE,
    "py": _PYTHON,
    "pyc": _PYTHON,
    "rar": _ARCHIVE,
    "rb": _RUBY,
    "rs": _RUST,
    "svg": _IMAGE,
    "tar": _ARCHIVE,
    "toml": _CONFIG,
    "ts": _TYPESCRIPT,
    "tsx": _TYPESCRIPT,
    "txt": _TEXT,
    "wav": _AUDIO,
    "webm": _VIDEO,
    "webp": _IMAGE,
    "xz": _ARCHIVE,
    "yaml": _JSON,
    "yml": _JSON,
    "zig": _ZIG,
    "zip": _ARCHIVE,
}

_NAME_ICONS: Final[Mapping[str, str]] = {
    ".gitignore": _GIT,
    ".gitattributes": _GIT,
    "makefile": EXECUTABLE,
    "dockerfile": _DOCKER,
}

_PREFIX_ICONS: Final[tuple[tuple[str, str], ...]] = (
    ("readme", _MARKDOWN),
    ("license", _LICENSE),
)


def icon_for(name: str, is_dir: bool, is_link: bool, is_exec: bool) -> str:
    """Return the glyph for one entry.

    Links, directories and executables win over name-based matches.
    """
    if is_link:
        return SYMLINK
    if is_dir:
        return DIRECTORY
    if is_exec:
        return EXECUTABLE

    lower = name.lower()
    if lower in _NAME_ICONS:
        return _NAME_ICONS[lower]
    for prefix, glyph in _PREFIX_ICONS:
        if lower.startswith(prefix):
            return glyph

    _, dot, ext = lower.rpartition(".")
    if dot:
        return _EXTENSION_ICONS.get(ext, FILE)
    return FILE


def icon_mode_from_env(default: IconMode = IconMode.AUTO) -> IconMode:
    """Read the default icon mode from ``LS_ICONS``; unknown values are ignored."""
    value = os.environ.get(ICONS_ENV_VAR, "").strip().lower()
    try:
        return IconMode(value)
    except ValueError:
        return default


def should_show_icons(mode: IconMode, is_terminal: bool) -> bool:
    if mode is IconMode.AUTO:
        return is_terminal
    return mode is IconMode.ALWAYS
