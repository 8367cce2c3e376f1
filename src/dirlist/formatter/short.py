"""Name-only layouts: one per line, packed columns, comma-separated."""

from __future__ import annotations

from dirlist.config import Layout, ListingConfig
from dirlist.entry import Entry
from dirlist.formatter.names import NameOptions, decorate_name, display_width

COLUMN_PADDING = 2


def _cell(entry: Entry, config: ListingConfig, name_options: NameOptions, label: str | None) -> str:
    name = decorate_name(entry, name_options, label)
    if not config.show_inodes:
        return name
    inode = str(entry.metadata.inode) if entry.metadata is not None else "?"
    return f"{inode} {name}"


def format_columns(cells: list[str], width: int) -> list[str]:
    """Pack *cells* column-major into rows no wider than *width*.

    Args:
        cells: Rendered names, possibly containing ANSI escapes.
        width: Available terminal width.

    Returns:
        list[str]: Rows, without trailing padding.
    """
    if not cells:
        return []

    widths = [display_width(cell) for cell in cells]
    col_width = max(widths) + COLUMN_PADDING
    num_cols = max(1, width // col_width)
    num_rows = (len(cells) + num_cols - 1) // num_cols
    # Drop columns that would stay empty after the row count rounds up.
    num_cols = (len(cells) + num_rows - 1) // num_rows

    lines: list[str] = []
    for row in range(num_rows):
        parts: list[str] = []
        for col in range(num_cols):
            idx = col * num_rows + row
            if idx >= len(cells):
                break
            is_last = col == num_cols - 1 or (col + 1) * num_rows + row >= len(cells)
            if is_last:
                parts.append(cells[idx])
            else:
                parts.append(cells[idx] + " " * (col_width - widths[idx]))
        lines.append("".join(parts))
    return lines


def format_commas(cells: list[str], width: int) -> list[str]:
    """Join *cells* with ``", "``, wrapping lines at *width*."""
    lines: list[str] = []
    current = ""
    current_width = 0
    for index, cell in enumerate(cells):
        piece = cell + ("," if index < len(cells) - 1 else "")
        piece_width = display_width(piece)
        if current and current_width + 1 + piece_width > width:
            lines.append(current)
            current, current_width = "", 0
        if current:
            current += " "
            current_width += 1
        current += piece
        current_width += piece_width
    if current:
        lines.append(current)
    return lines


def format_names(
    entries: list[Entry],
    config: ListingConfig,
    name_options: NameOptions,
    labels: dict[int, str] | None = None,
) -> list[str]:
    """Render *entries* in the configured name-only layout.

    Args:
        entries: Sorted entries of one level.
        config: Listing configuration (layout, width, inodes).
        name_options: Name decoration options.
        labels: Optional display text per entry index.

    Returns:
        list[str]: Output lines.
    """
    cells = [
        _cell(entry, config, name_options, labels.get(index) if labels else None)
        for index, entry in enumerate(entries)
    ]
    if config.layout is Layout.COLUMNS:
        return format_columns(cells, config.terminal_width)
    if config.layout is Layout.COMMAS:
        return format_commas(cells, config.terminal_width)
    return cells
