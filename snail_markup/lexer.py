"""Line classification for the block parser.

Brackets open headers, table rows, cell colors and nested tables, so every
block-level ambiguity is resolved here, from the line alone, before any
structural parsing happens.
"""

from __future__ import annotations

from .constants import (
    BOX_POSITIONS,
    BOX_START_PATTERN,
    CALLOUT_DELIMITERS,
    CATEGORY_DELIMITERS,
    COLORED_RULE_PATTERN,
    DEFAULT_BOX_POSITION,
    HEADER_OPEN_CHAR,
    HTML_BLOCK_START,
    MAX_HEADER_DEPTH,
    ORDERED_ITEM_PATTERN,
    QUOTE_FENCE,
    RAW_CLOSE,
    RAW_OPEN,
    RULE_LINE,
    TABLE_ROW_OPENER,
    TITLE_DELIMITERS,
    UNORDERED_ITEM_PATTERN,
)
from .models import BoxSpec, LineKind, LineToken, ListItem, ListKind


def header_depth(text: str) -> int | None:
    """Return the depth of a header opener, or None when the line is not one.

    A header opener is a run of 1-12 ``[`` characters followed by a character
    other than ``[`` or ``{``; the ``{`` case is a table cell opener.

    Args:
        text: Line with surrounding whitespace removed.

    Returns:
        int | None: Number of opening brackets, or None.

    Examples:
        header_depth("[[Install]]")  # 2
        header_depth("[{cell}]")  # None
    """
    run = len(text) - len(text.lstrip(HEADER_OPEN_CHAR))
    if run == 0 or run > MAX_HEADER_DEPTH or run == len(text):
        return None
    if text[run] == "{":
        return None
    return run


def header_title(text: str, depth: int) -> str:
    """Extract a header title, dropping a matching run of closing brackets."""
    title = text[depth:]
    closing = "]" * depth
    if title.endswith(closing):
        title = title[: -len(closing)]
    return title.strip()


def is_single_line_raw(text: str) -> bool:
    """Whether `text` holds a complete ``{|...|}`` raw block on one line."""
    return text.startswith(RAW_OPEN) and text.endswith(RAW_CLOSE) and len(text) >= 4


def opens_raw_span(text: str) -> bool:
    """Whether `text` opens a raw block that continues on later lines."""
    return text.startswith(RAW_OPEN) and not is_single_line_raw(text)


def closes_raw_span(text: str) -> bool:
    return text.endswith(RAW_CLOSE)


def _strip_delimiters(text: str, delimiters: tuple[str, str]) -> str | None:
    start, end = delimiters
    if len(text) < len(start) + len(end):
        return None
    if text.startswith(start) and text.endswith(end):
        return text[len(start) : len(text) - len(end)]
    return None


def parse_box_opener(text: str) -> BoxSpec | None:
    """Parse a ``%%[w,h]{pos}%%`` opener.

    Unknown positions fall back to ``left``.

    Examples:
        parse_box_opener("%%[200,auto]{right}%%")
    """
    match = BOX_START_PATTERN.match(text)
    if not match:
        return None
    position = match.group("position") or DEFAULT_BOX_POSITION
    if position not in BOX_POSITIONS:
        position = DEFAULT_BOX_POSITION
    return BoxSpec(
        width=match.group("width"),
        height=match.group("height"),
        position=position,
        rest=match.group("rest"),
    )


def parse_list_item(text: str) -> ListItem | None:
    """Split a list line into kind, depth and content.

    Examples:
        parse_list_item("-- nested")  # ListItem(UNORDERED, 2, "nested")
        parse_list_item("+. first")  # ListItem(ORDERED, 1, "first")
    """
    text = text.strip()
    match = UNORDERED_ITEM_PATTERN.match(text)
    if match:
        return ListItem(ListKind.UNORDERED, len(match.group("marker")), match.group("content"))
    match = ORDERED_ITEM_PATTERN.match(text)
    if match:
        return ListItem(ListKind.ORDERED, len(match.group("marker")), match.group("content"))
    return None


def classify_line(line: str) -> LineToken:
    """Classify one source line by the block it opens or represents.

    Checks run in block dispatch order and the first match wins.

    Args:
        line: Raw source line; surrounding whitespace is ignored.

    Returns:
        LineToken: The line's kind plus any payload extracted while matching.

    Examples:
        classify_line("[[Setup]]").kind  # LineKind.HEADER
        classify_line("[{a}][{b}]").kind  # LineKind.TABLE_ROW
        classify_line("plain words").kind  # LineKind.TEXT
    """
    text = line.strip()

    if text == HTML_BLOCK_START:
        return LineToken(LineKind.HTML_BLOCK, text)

    box = parse_box_opener(text)
    if box is not None:
        return LineToken(LineKind.BOX, text, box=box)

    depth = header_depth(text)
    if depth is not None:
        return LineToken(LineKind.HEADER, text, depth=depth, value=header_title(text, depth))

    for kind, delimiters in (
        (LineKind.TITLE, TITLE_DELIMITERS),
        (LineKind.CATEGORY, CATEGORY_DELIMITERS),
        (LineKind.CALLOUT, CALLOUT_DELIMITERS),
    ):
        inner = _strip_delimiters(text, delimiters)
        if inner is not None:
            return LineToken(kind, text, value=inner)

    item = parse_list_item(text)
    if item is not None:
        return LineToken(
            LineKind.LIST_ITEM, text, depth=item.depth, value=item.content, list_kind=item.kind
        )

    if text.startswith(TABLE_ROW_OPENER):
        return LineToken(LineKind.TABLE_ROW, text)

    if text == RULE_LINE:
        return LineToken(LineKind.RULE, text)

    rule_match = COLORED_RULE_PATTERN.match(text)
    if rule_match:
        return LineToken(LineKind.COLORED_RULE, text, value=rule_match.group("color"))

    if text == QUOTE_FENCE:
        return LineToken(LineKind.QUOTE, text)

    if is_single_line_raw(text):
        return LineToken(LineKind.RAW_LINE, text, value=text[len(RAW_OPEN) : -len(RAW_CLOSE)])
    if text.startswith(RAW_OPEN):
        return LineToken(LineKind.RAW_OPEN, text, value=text[len(RAW_OPEN) :])

    if not text:
        return LineToken(LineKind.BLANK, text)

    return LineToken(LineKind.TEXT, text)
