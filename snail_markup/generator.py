"""Table of contents generation for rendered documents."""

from __future__ import annotations

import re

from .config import SnailConfig, validate_config
from .inline import escape_text, format_inline
from .models import TocEntry

TAG_PATTERN = re.compile(r"<[^<>]*>")


def plain_title(title: str) -> str:
    """Reduce a header title to escaped text without inline markup.

    Inline markup is rendered and its tags dropped, so ``!!Bold!! intro``
    lists as ``Bold intro`` while escaped characters stay escaped.

    Examples:
        plain_title("!!Bold!! intro")  # "Bold intro"
        plain_title("a < b")  # "a &lt; b"
    """
    return TAG_PATTERN.sub("", format_inline(title)).strip()


def generate_toc(
    entries: list[TocEntry], base_level: int | None = None, config: SnailConfig | None = None
) -> str:
    """Render recorded headers as a nested-list table of contents.

    Nesting follows header depth relative to `base_level`: each unit deeper
    opens a list, each unit shallower closes one. The outermost list is never
    closed early, even for entries shallower than the base level.

    Args:
        entries: Headers in discovery order.
        base_level: Depth of the document's first header; defaults to 1.
        config: Configuration supplying the TOC heading and anchor prefix.
            Defaults to a new `SnailConfig` when omitted.

    Returns:
        str: The TOC fragment, or an empty string when `entries` is empty.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        generate_toc([TocEntry(1, "Intro", "1.", 1)], base_level=1)
    """
    if not entries:
        return ""

    config = config or SnailConfig()
    validate_config(config)

    parts = [f'<div class="snail-toc"><h3>{escape_text(config.toc_title)}</h3><ul>']
    current_depth = base_level or 1
    open_lists = 0

    for entry in entries:
        if entry.depth > current_depth:
            steps = entry.depth - current_depth
            parts.append("<ul>" * steps)
            open_lists += steps
        elif entry.depth < current_depth:
            steps = min(current_depth - entry.depth, open_lists)
            parts.append("</ul>" * steps)
            open_lists -= steps

        parts.append(
            f'<li><a href="#{config.anchor_prefix}{entry.anchor_id}">'
            f'<span class="snail-number">{entry.number}</span> {plain_title(entry.title)}</a></li>'
        )
        current_depth = entry.depth

    parts.append("</ul>" * open_lists)
    parts.append("</ul></div>")
    return "".join(parts)
