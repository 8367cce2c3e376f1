"""CLI entry point for dlist: I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from typing import TextIO

from dirlist import DirlistError, OutputClosedError, __version__
from dirlist.config import (
    ColorMode,
    IconMode,
    Layout,
    ListingConfig,
    SizeStyle,
    SortKey,
    TimeStyle,
)
from dirlist.engine import CYCLE_MESSAGE, Diagnostic, DiagnosticKind, Lister
from dirlist.icons import icon_mode_from_env, should_show_icons
from dirlist.sink import StreamSink
from dirlist.style import Style, stream_is_terminal

PROG = "dlist"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    ``-h`` means human-readable sizes, as in ls, so help is ``--help`` only.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``dlist`` command.
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="list directory contents",
        add_help=False,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files or directories to list (default: current directory)",
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # filtering
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        dest="show_hidden",
        help="Do not ignore entries starting with .",
    )
    parser.add_argument(
        "-A",
        "--almost-all",
        action="store_true",
        dest="almost_all",
        help="Like -a; . and .. are never listed either way",
    )
    parser.add_argument(
        "-I",
        "--ignore",
        action="append",
        default=[],
        dest="ignore_patterns",
        metavar="PATTERN",
        help="Do not list entries matching shell PATTERN (can be specified multiple times)",
    )
    parser.add_argument(
        "--hide",
        action="append",
        default=[],
        dest="hide_patterns",
        metavar="PATTERN",
        help="Do not list entries matching PATTERN unless -a or -A is given",
    )
    parser.add_argument(
        "--gitignore",
        action="store_true",
        help="Skip entries matched by the .gitignore of the listed directory",
    )

    # layout (the last of -1, -C, -m wins)
    parser.add_argument(
        "-l",
        action="store_true",
        dest="long_format",
        help="Use a long listing format",
    )
    parser.add_argument(
        "-1",
        action="store_const",
        const=Layout.ONE_PER_LINE,
        dest="layout",
        help="List one entry per line",
    )
    parser.add_argument(
        "-C",
        action="store_const",
        const=Layout.COLUMNS,
        dest="layout",
        help="List entries by columns",
    )
    parser.add_argument(
        "-m",
        action="store_const",
        const=Layout.COMMAS,
        dest="layout",
        help="Fill width with a comma separated list of entries",
    )
    parser.add_argument(
        "-w",
        "--width",
        type=int,
        default=None,
        metavar="COLS",
        help="Assume screen width COLS instead of the terminal width",
    )

    # ordering
    parser.add_argument(
        "-t",
        action="store_const",
        const=SortKey.TIME,
        dest="sort_key",
        help="Sort by modification time, newest first",
    )
    parser.add_argument(
        "-S",
        action="store_const",
        const=SortKey.SIZE,
        dest="sort_key",
        help="Sort by file size, largest first",
    )
    parser.add_argument(
        "-r",
        "--reverse",
        action="store_true",
        help="Reverse order while sorting",
    )
    parser.add_argument(
        "--group-directories-first",
        action="store_true",
        dest="dirs_first",
        help="Group directories before files",
    )

    # traversal
    parser.add_argument(
        "-R",
        "--recursive",
        action="store_true",
        help="List subdirectories recursively",
    )
    parser.add_argument(
        "-d",
        "--directory",
        action="store_true",
        dest="list_directory_itself",
        help="List directories themselves, not their contents",
    )
    parser.add_argument(
        "-L",
        "--dereference",
        action="store_true",
        help="Show information for the file symbolic links point to",
    )

    # long format details
    parser.add_argument(
        "-h",
        "--human-readable",
        action="store_const",
        const=SizeStyle.HUMAN,
        dest="size_style",
        help="With -l, print sizes like 1K 234M 2G",
    )
    parser.add_argument(
        "-k",
        "--kibibytes",
        action="store_const",
        const=SizeStyle.KILOBYTES,
        dest="size_style",
        help="With -l, print sizes in 1024-byte blocks",
    )
    parser.add_argument(
        "-n",
        "--numeric-uid-gid",
        action="store_true",
        dest="numeric_ids",
        help="Like -l, but list numeric user and group IDs",
    )
    parser.add_argument(
        "-i",
        "--inode",
        action="store_true",
        dest="show_inodes",
        help="Print the index number of each file",
    )
    parser.add_argument(
        "--time-style",
        choices=[style.value for style in TimeStyle],
        default=TimeStyle.RELATIVE.value,
        help="Timestamp format with -l (default: relative)",
    )

    # decoration
    parser.add_argument(
        "-F",
        "--classify",
        action="store_true",
        dest="indicators",
        help="Append indicator (one of */=@|) to entries",
    )
    parser.add_argument(
        "--color",
        nargs="?",
        choices=[mode.value for mode in ColorMode],
        const=ColorMode.ALWAYS.value,
        default=ColorMode.AUTO.value,
        help="Colorize names: always, auto (default) or never",
    )
    parser.add_argument(
        "--icons",
        choices=[mode.value for mode in IconMode],
        default=None,
        help="Show file type icons: always, auto or never (default: $LS_ICONS or auto)",
    )
    parser.add_argument(
        "--git",
        action="store_true",
        dest="vcs_status",
        help="Show git status markers",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug messages to stderr",
    )
    return parser


def _terminal_width(args: argparse.Namespace) -> int:
    """Resolve the width available to the column layouts.

    Raises:
        DirlistError: If ``--width`` is not a positive integer.
    """
    if args.width is not None:
        if args.width < 1:
            raise DirlistError(f"invalid line width: {args.width}")
        return args.width
    return shutil.get_terminal_size().columns


def build_config(args: argparse.Namespace, stdout: TextIO) -> ListingConfig:
    """Translate parsed arguments into a :class:`ListingConfig`.

    ``auto`` color and icon modes are resolved against *stdout* here, so
    a piped plain listing never pays for metadata it will not show.

    Args:
        args: Parsed CLI namespace.
        stdout: Destination stream of the listing.

    Returns:
        ListingConfig: Immutable listing configuration.

    Raises:
        DirlistError: On an invalid option value.
    """
    is_terminal = stream_is_terminal(stdout)

    color = ColorMode.ALWAYS if Style.negotiate(ColorMode(args.color), stdout).enabled else ColorMode.NEVER
    icon_mode = IconMode(args.icons) if args.icons else icon_mode_from_env(IconMode.AUTO)
    icons = IconMode.ALWAYS if should_show_icons(icon_mode, is_terminal) else IconMode.NEVER

    long_format = args.long_format or args.numeric_ids
    layout = args.layout
    if layout is None:
        layout = Layout.COLUMNS if is_terminal else Layout.ONE_PER_LINE

    return ListingConfig(
        show_hidden=args.show_hidden,
        almost_all=args.almost_all,
        long_format=long_format,
        recursive=args.recursive,
        reverse=args.reverse,
        sort_key=args.sort_key or SortKey.NAME,
        dirs_first=args.dirs_first,
        indicators=args.indicators,
        numeric_ids=args.numeric_ids,
        color=color,
        icons=icons,
        vcs_status=args.vcs_status,
        time_style=TimeStyle(args.time_style),
        size_style=args.size_style or SizeStyle.BYTES,
        layout=layout,
        show_inodes=args.show_inodes,
        list_directory_itself=args.list_directory_itself,
        dereference=args.dereference,
        terminal_width=_terminal_width(args),
        ignore_patterns=tuple(args.ignore_patterns),
        hide_patterns=tuple(args.hide_patterns),
        gitignore=args.gitignore,
    )


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render one recovered error as a stderr line."""
    if diagnostic.kind is DiagnosticKind.CYCLE:
        return f"{PROG}: {diagnostic.path}: {CYCLE_MESSAGE}"
    return f"{PROG}: {diagnostic}"


def _run_with_args(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """List every operand and report diagnostics.

    Returns:
        int: ``0`` when every root listed cleanly, ``1`` otherwise.

    Raises:
        DirlistError: On invalid option values.
        OutputClosedError: If *stdout* stops accepting data.
    """
    config = build_config(args, stdout)
    paths: list[str] = args.paths or ["."]
    sink = StreamSink(stdout)
    lister = Lister(config, sink)
    many = len(paths) > 1

    ok = True
    for index, path in enumerate(paths):
        if index:
            sink.write_line("")
        # Recursive listings print their own root header.
        if many and not config.recursive and not config.list_directory_itself and os.path.isdir(path):
            sink.write_line(f"{path}:")
        report = lister.run(path)
        for diagnostic in report.diagnostics:
            stderr.write(format_diagnostic(diagnostic) + "\n")
        ok = ok and report.ok
    return 0 if ok else 1


def run_dlist(
    argv: list[str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run dlist with provided CLI args and return the exit status.

    This function is the primary test target for CLI behavior; it never
    calls :func:`sys.exit` itself, except through argparse on usage errors.

    Args:
        argv: Command-line argument list without program name.
        stdout: Listing destination. Defaults to ``sys.stdout``.
        stderr: Diagnostic destination. Defaults to ``sys.stderr``.

    Returns:
        int: Process exit status.
    """
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    args = build_parser().parse_args(argv)
    if args.debug:
        logging.basicConfig(stream=err, level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        return _run_with_args(args, out, err)
    except OutputClosedError as exc:
        logger.debug("Output closed: %s", exc)
        return 1
    except DirlistError as exc:
        err.write(f"{PROG}: {exc}\n")
        return 1


def main() -> None:
    """Run the CLI entry point with process arguments.

    Exits with the status of :func:`run_dlist`.
    """
    status = run_dlist()
    try:
        sys.stdout.flush()
    except BrokenPipeError:
        # Python flushes stdout again at exit; point it at devnull so a
        # closed pipe does not print a second traceback.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        status = 1
    sys.exit(status)
