"""Nested list rendering for runs of list-item lines."""

from __future__ import annotations

from .inline import format_inline
from .lexer import parse_list_item
from .models import ListFrame, ListItem


def parse_list_items(lines: list[str]) -> list[ListItem]:
    """Parse list lines, skipping any line that is not a list item."""
    items = []
    for line in lines:
        item = parse_list_item(line)
        if item is not None:
            items.append(item)
    return items


def build_list(lines: list[str]) -> str:
    """Render a contiguous run of list lines as nested ``ul``/``ol`` elements.

    The marker run length is the item depth and the marker character is the
    list kind (``-`` unordered, ``+.`` ordered). A jump of several depths opens
    a single container at the new depth, and a kind change at the same depth
    closes the container and opens one of the new kind.

    Args:
        lines: List-item lines, already isolated by the block parser.

    Returns:
        str: HTML for the whole list tree.

    Examples:
        build_list(["- a", "-- b", "-- c", "- d"])
        # '<ul><li>a<ul><li>b</li><li>c</li></ul></li><li>d</li></ul>'
    """
    parts: list[str] = []
    stack: list[ListFrame] = []

    for item in parse_list_items(lines):
        while stack and stack[-1].depth > item.depth:
            closed = stack.pop()
            parts.append(f"</li></{closed.kind.tag}>")

        if stack and stack[-1].depth == item.depth:
            parts.append("</li>")
            if stack[-1].kind is not item.kind:
                parts.append(f"</{stack[-1].kind.tag}><{item.kind.tag}>")
                stack[-1].kind = item.kind
        else:
            parts.append(f"<{item.kind.tag}>")
            stack.append(ListFrame(item.kind, item.depth))

        parts.append(f"<li>{format_inline(item.content)}")

    while stack:
        closed = stack.pop()
        parts.append(f"</li></{closed.kind.tag}>")

    return "".join(parts)
