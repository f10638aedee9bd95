"""Table parsing: cell splitting, nested tables, colors and split cells.

A run of ``[`` characters followed by ``{`` opens a cell at the level given by
the run length, and ``}`` followed by a run of ``]`` closes one. Every scan in
this module walks the same token stream produced by `iter_bracket_tokens`.
"""

from __future__ import annotations

import html
from collections.abc import Iterator

from .constants import (
    CELL_CLOSE_BRACE,
    CELL_CLOSE_BRACKET,
    CELL_COLOR_PATTERN,
    CELL_OPEN_BRACE,
    CELL_OPEN_BRACKET,
    MAX_TABLE_NESTING,
    SPLIT_CELL_SEPARATOR,
)
from .inline import format_inline
from .models import TableCell

OPEN = "open"
CLOSE = "close"
TEXT = "text"


def iter_bracket_tokens(text: str) -> Iterator[tuple[str, int, str]]:
    """Tokenize `text` into cell openers, cell closers and plain text.

    Yields:
        tuple[str, int, str]: ``(kind, level, raw)`` where `kind` is ``"open"``,
            ``"close"`` or ``"text"``, `level` is the bracket run length (zero
            for text) and `raw` is the exact source slice.

    Examples:
        list(iter_bracket_tokens("[[{a}]]"))
        # [("open", 2, "[[{"), ("text", 0, "a"), ("close", 2, "}]]")]
    """
    i = 0
    text_start = 0
    length = len(text)

    while i < length:
        char = text[i]
        if char == CELL_OPEN_BRACKET:
            j = i
            while j < length and text[j] == CELL_OPEN_BRACKET:
                j += 1
            if j < length and text[j] == CELL_OPEN_BRACE:
                if text_start < i:
                    yield TEXT, 0, text[text_start:i]
                yield OPEN, j - i, text[i : j + 1]
                i = j + 1
                text_start = i
                continue
            i = j
            continue

        if char == CELL_CLOSE_BRACE:
            j = i + 1
            while j < length and text[j] == CELL_CLOSE_BRACKET:
                j += 1
            if j > i + 1:
                if text_start < i:
                    yield TEXT, 0, text[text_start:i]
                yield CLOSE, j - i - 1, text[i:j]
                i = j
                text_start = i
                continue

        i += 1

    if text_start < length:
        yield TEXT, 0, text[text_start:]


def split_cells(text: str, level: int = 1) -> list[str]:
    """Extract the cells delimited at `level` from a row.

    Delimiters of other levels are kept verbatim inside the enclosing cell, as
    are same-level delimiters nested inside an open cell. Text outside any
    cell and unmatched closers are dropped; a cell left open at the end of the
    text is discarded.

    Args:
        text: Row text.
        level: Bracket run length of the delimiters that separate cells.

    Returns:
        list[str]: Raw cell contents in order.

    Examples:
        split_cells("[{a}][{b}]")  # ["a", "b"]
        split_cells("[{x[[{i}]]}]")  # ["x[[{i}]]"]
        split_cells("[[{a}]][[{b}]]", level=2)  # ["a", "b"]
    """
    cells: list[str] = []
    current: list[str] = []
    depth = 0

    for kind, token_level, raw in iter_bracket_tokens(text):
        if kind == OPEN and token_level == level:
            if depth > 0:
                current.append(raw)
            depth += 1
            continue
        if kind == CLOSE and token_level == level:
            if depth == 0:
                continue
            depth -= 1
            if depth == 0:
                cells.append("".join(current))
                current = []
            else:
                current.append(raw)
            continue
        if depth > 0:
            current.append(raw)

    return cells


def count_table_cells(line: str) -> int:
    """Count the top-level cells on a table row."""
    return len(split_cells(line, 1))


def split_top_level(text: str, separator: str = SPLIT_CELL_SEPARATOR) -> list[str]:
    """Split `text` on `separator` wherever no cell delimiter of any level is open.

    Examples:
        split_top_level("a||b")  # ["a", "b"]
        split_top_level("a[[{x||y}]]||b")  # ["a[[{x||y}]]", "b"]
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0

    for kind, _level, raw in iter_bracket_tokens(text):
        if kind == OPEN:
            depth += 1
            current.append(raw)
            continue
        if kind == CLOSE:
            depth = max(depth - 1, 0)
            current.append(raw)
            continue
        if depth != 0:
            current.append(raw)
            continue

        pieces = raw.split(separator)
        current.append(pieces[0])
        for piece in pieces[1:]:
            parts.append("".join(current))
            current = [piece]

    parts.append("".join(current))
    return parts


def parse_cell(raw: str, level: int = 1) -> TableCell:
    """Interpret one extracted cell.

    A leading ``[color]`` (but not ``[[``) sets the background color. Content
    starting with the opener of the next level is a nested table; anything
    else is split into ``||`` regions.

    Examples:
        parse_cell("[yellow]warm")  # TableCell("warm", color="yellow", regions=["warm"])
        parse_cell("[[{a}]][[{b}]]").nested_level  # 2
    """
    content = raw
    color = None
    if content.startswith(CELL_OPEN_BRACKET) and not content.startswith(CELL_OPEN_BRACKET * 2):
        match = CELL_COLOR_PATTERN.match(content)
        if match:
            color = match.group("color")
            content = match.group("content")

    nested_opener = CELL_OPEN_BRACKET * (level + 1) + CELL_OPEN_BRACE
    if content.strip().startswith(nested_opener):
        return TableCell(content=content, color=color, nested_level=level + 1)

    return TableCell(content=content, color=color, regions=split_top_level(content))


def render_cell_content(cell: TableCell) -> str:
    """Render a cell's inline content, flexing split regions side by side."""
    if len(cell.regions) > 1:
        regions = "".join(f"<div>{format_inline(region.strip())}</div>" for region in cell.regions)
        return f'<div class="snail-split-cell">{regions}</div>'
    return format_inline(cell.content)


def render_cell(cell: TableCell) -> str:
    style = ""
    if cell.color is not None:
        style = f' style="background-color: {html.escape(cell.color, quote=True)};"'

    if cell.nested_level is not None:
        if cell.nested_level > MAX_TABLE_NESTING:
            body = format_inline(cell.content)
        else:
            body = render_nested_table(cell.content, cell.nested_level)
    else:
        body = render_cell_content(cell)
    return f"<td{style}>{body}</td>"


def render_row(text: str, level: int = 1) -> str:
    cells = "".join(render_cell(parse_cell(raw, level)) for raw in split_cells(text, level))
    return f"<tr>{cells}</tr>"


def render_nested_table(text: str, level: int) -> str:
    """Render cell content holding a nested table delimited at `level`."""
    return f'<table class="snail-table nested">{render_row(text, level)}</table>'


def group_rows_by_cell_count(lines: list[str]) -> list[list[str]]:
    """Partition rows into contiguous groups sharing a top-level cell count.

    Examples:
        group_rows_by_cell_count(["[{a}][{b}]", "[{c}][{d}]", "[{e}]"])
        # [["[{a}][{b}]", "[{c}][{d}]"], ["[{e}]"]]
    """
    groups: list[list[str]] = []
    current_count = None
    for line in lines:
        count = count_table_cells(line)
        if not groups or count != current_count:
            groups.append([])
            current_count = count
        groups[-1].append(line)
    return groups


def render_table_run(lines: list[str]) -> str:
    """Render a run of table rows.

    Each change in cell count starts a new table element; the tables are
    stacked inside one wrapper.

    Args:
        lines: Table-row lines, already isolated by the block parser.

    Returns:
        str: HTML for the wrapper and its tables.
    """
    tables = []
    for group in group_rows_by_cell_count([line.strip() for line in lines]):
        rows = "".join(render_row(line) for line in group)
        tables.append(f'<table class="snail-table">{rows}</table>')
    return f'<div class="snail-table-wrapper">{"".join(tables)}</div>'
