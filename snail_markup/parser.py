"""Block-level parsing of markup documents."""

from __future__ import annotations

import html
import logging

from .config import SnailConfig
from .constants import (
    BOX_END_MARKER,
    HEADER_END_MARKER,
    HTML_BLOCK_END,
    HTML_HEADING_MAX_DEPTH,
    MAX_BLOCK_NESTING,
    MAX_HEADER_DEPTH,
    QUOTE_FENCE,
    RAW_CLOSE,
    TOC_PLACEHOLDER,
)
from .inline import escape_text, format_inline
from .lexer import classify_line, closes_raw_span, opens_raw_span, parse_box_opener
from .lists import build_list
from .models import METADATA_KINDS, LineKind, LineToken, RenderState, TocEntry
from .tables import render_table_run

logger = logging.getLogger(__name__)

BOX_POSITION_STYLES = {
    "left": " float: left; margin-right: 10px;",
    "right": " float: right; margin-left: 10px;",
    "center": " margin: 0 auto;",
}


def advance_section_number(state: RenderState, depth: int) -> str:
    """Advance the section counters for a header and return its number.

    The first header fixes the base level. Counters deeper than `depth` are
    reset so that ``1.2.1`` rolls over to ``1.3``.

    Args:
        state: Render state holding the counters.
        depth: Depth of the header being emitted.

    Returns:
        str: Dot-joined counters from the base level to `depth` with a
            trailing dot, or an empty string when `depth` is shallower than
            the base level.

    Examples:
        state = RenderState()
        advance_section_number(state, 1)  # "1."
        advance_section_number(state, 2)  # "1.1."
    """
    if state.base_level is None:
        state.base_level = depth

    for deeper in range(depth + 1, MAX_HEADER_DEPTH + 1):
        state.counters[deeper] = 0
    state.counters[depth] = state.counters.get(depth, 0) + 1

    if depth < state.base_level:
        return ""
    numbers = (str(state.counters.get(level, 0)) for level in range(state.base_level, depth + 1))
    return ".".join(numbers) + "."


def register_header(state: RenderState, depth: int, title: str) -> TocEntry:
    """Number a header and record it for the table of contents."""
    number = advance_section_number(state, depth)
    entry = TocEntry(depth=depth, title=title, number=number, anchor_id=len(state.toc) + 1)
    state.toc.append(entry)
    return entry


def box_style(width: str, height: str, position: str) -> str:
    width = width if width == "auto" else f"{width}px"
    height = height if height == "auto" else f"{height}px"
    style = f"width: {width}; height: {height}; overflow: auto; border: 1px solid #ccc; padding: 10px;"
    return style + BOX_POSITION_STYLES.get(position, BOX_POSITION_STYLES["left"])


def render_raw_text(text: str) -> str:
    """Escape raw text and turn its line breaks into ``<br>`` markers."""
    escaped = escape_text(text).replace("\n", "<br>")
    return f"<div>{escaped}</div>"


class BlockParser:
    """Recursive walker turning a line range into HTML.

    One parser serves one render: it owns the `RenderState` that numbering,
    TOC collection and placeholder insertion write to across every nested
    call.

    Args:
        state: Render state to write to; a fresh one is created when omitted.
        config: Rendering options; defaults to a new `SnailConfig`.

    Examples:
        parser = BlockParser()
        body = parser.parse_block(["[Intro]", "text", "]END["], is_root=True)
        parser.state.toc[0].number  # "1."
    """

    def __init__(self, state: RenderState | None = None, config: SnailConfig | None = None):
        self.state = state if state is not None else RenderState()
        self.config = config or SnailConfig()
        self._handlers = {
            LineKind.HTML_BLOCK: self._parse_html_block,
            LineKind.BOX: self._parse_box,
            LineKind.HEADER: self._parse_header,
            LineKind.TITLE: self._parse_metadata,
            LineKind.CATEGORY: self._parse_metadata,
            LineKind.CALLOUT: self._parse_metadata,
            LineKind.LIST_ITEM: self._parse_list,
            LineKind.TABLE_ROW: self._parse_table,
            LineKind.RULE: self._parse_rule,
            LineKind.COLORED_RULE: self._parse_rule,
            LineKind.QUOTE: self._parse_quote,
            LineKind.RAW_LINE: self._parse_raw_line,
            LineKind.RAW_OPEN: self._parse_raw_block,
            LineKind.BLANK: self._parse_blank,
            LineKind.TEXT: self._parse_paragraph,
        }

    def parse_block(self, lines: list[str], is_root: bool = False, nesting: int = 0) -> str:
        """Render `lines` as a sequence of blocks.

        Args:
            lines: Source lines without line terminators.
            is_root: Whether this is the top-level document; only the root
                call emits the TOC placeholder.
            nesting: Recursion depth of this call.

        Returns:
            str: HTML for every block in the range.
        """
        if nesting > MAX_BLOCK_NESTING:
            logger.debug("Nesting limit reached; rendering %d lines as raw text", len(lines))
            return render_raw_text("\n".join(lines))

        parts: list[str] = []
        i = 0
        while i < len(lines):
            token = classify_line(lines[i])

            if is_root and not self.state.toc_inserted and self._anchors_toc(token):
                parts.append(TOC_PLACEHOLDER)
                self.state.toc_inserted = True

            fragment, i = self._handlers[token.kind](lines, i, token, nesting)
            parts.append(fragment)

        return "".join(parts)

    @staticmethod
    def _anchors_toc(token: LineToken) -> bool:
        return token.kind is not LineKind.BLANK and token.kind not in METADATA_KINDS

    def _parse_html_block(self, lines, i, token, nesting):
        j = i + 1
        while j < len(lines) and lines[j].strip() != HTML_BLOCK_END:
            j += 1
        if j >= len(lines):
            logger.debug("Unterminated HTML block closed at end of input")
        return "".join(f"{line}\n" for line in lines[i + 1 : j]), j + 1

    def _parse_box(self, lines, i, token, nesting):
        box = token.box
        rest = box.rest

        if BOX_END_MARKER in rest:
            inner = rest[: rest.index(BOX_END_MARKER)]
            content = [inner] if inner else []
            j = i + 1
        else:
            content = [rest] if rest.strip() else []
            content, j = self._collect_box_content(lines, i + 1, content)

        body = self.parse_block(content, nesting=nesting + 1)
        style = box_style(box.width, box.height, box.position)
        return f'<div style="{style}" class="snail-box">{body}</div>', j

    def _collect_box_content(self, lines, start, content):
        depth = 1
        j = start
        while j < len(lines):
            line = lines[j]
            text = line.strip()

            if parse_box_opener(text) is not None:
                depth += 1

            if text == BOX_END_MARKER:
                depth -= 1
                if depth == 0:
                    return content, j + 1
            elif BOX_END_MARKER in text:
                position = line.find(BOX_END_MARKER)
                while position != -1:
                    depth -= 1
                    if depth == 0:
                        break
                    position = line.find(BOX_END_MARKER, position + len(BOX_END_MARKER))
                if depth == 0:
                    before = line[:position]
                    if before.strip():
                        content.append(before)
                    return content, j + 1

            content.append(line)
            j += 1

        logger.debug("Unterminated box closed at end of input")
        return content, j

    def _parse_header(self, lines, i, token, nesting):
        depth = token.depth
        entry = register_header(self.state, depth, token.value)
        content, j = self._collect_section_content(lines, i + 1, depth)

        anchor = f"{self.config.anchor_prefix}{entry.anchor_id}"
        if depth <= HTML_HEADING_MAX_DEPTH:
            tag = f"h{depth}"
            classes = "snail-header"
        else:
            tag = "div"
            classes = f"snail-header snail-h{depth}"
        toggle = ""
        if self.config.collapsible:
            toggle = " onclick=\"this.parentElement.classList.toggle('snail-collapsed')\""

        heading = (
            f'<{tag} class="{classes}" id="{anchor}"{toggle}>'
            f'<span class="snail-number">{entry.number}</span> {format_inline(entry.title)}'
            f"</{tag}>"
        )
        body = self.parse_block(content, nesting=nesting + 1)
        section = (
            f'<div class="snail-section snail-level-{depth}">'
            f'{heading}<div class="snail-content">{body}</div></div>'
        )
        return section, j

    def _collect_section_content(self, lines, start, depth):
        """Collect a section's lines up to its terminator.

        A header of depth <= `depth` ends the section and is left for the
        parent. Deeper headers open nested sections, each of which needs its
        own ``]END[`` before this section's terminator is reached. Lines
        inside a multi-line raw block are never treated as boundaries.
        """
        content: list[str] = []
        open_sections = 1
        in_raw = False
        j = start

        while j < len(lines):
            line = lines[j]
            text = line.strip()

            if opens_raw_span(text):
                in_raw = True
            elif in_raw and closes_raw_span(text):
                in_raw = False

            if not in_raw:
                token = classify_line(text)
                if token.kind is LineKind.HEADER:
                    if token.depth <= depth:
                        return content, j
                    open_sections += 1
                elif text.endswith(HEADER_END_MARKER):
                    open_sections -= 1
                    if open_sections == 0:
                        before = text[: -len(HEADER_END_MARKER)]
                        if before.strip():
                            content.append(before)
                        return content, j + 1

            content.append(line)
            j += 1

        logger.debug("Unterminated section closed at end of input")
        return content, j

    def _parse_metadata(self, lines, i, token, nesting):
        text = format_inline(token.value)
        if token.kind is LineKind.TITLE:
            return f'<h1 class="snail-doc-title">{text}</h1>', i + 1
        if token.kind is LineKind.CATEGORY:
            return f'<div class="snail-category">{text}</div>', i + 1
        return f'<div class="snail-big-box">{text}</div>', i + 1

    def _collect_run(self, lines, i, kind):
        j = i
        while j < len(lines) and classify_line(lines[j]).kind is kind:
            j += 1
        return lines[i:j], j

    def _parse_list(self, lines, i, token, nesting):
        items, j = self._collect_run(lines, i, LineKind.LIST_ITEM)
        return build_list(items), j

    def _parse_table(self, lines, i, token, nesting):
        rows, j = self._collect_run(lines, i, LineKind.TABLE_ROW)
        return render_table_run(rows), j

    def _parse_rule(self, lines, i, token, nesting):
        if token.kind is LineKind.COLORED_RULE:
            color = html.escape(token.value, quote=True)
            return f'<hr style="border-color: {color};">', i + 1
        return "<hr>", i + 1

    def _parse_quote(self, lines, i, token, nesting):
        j = i + 1
        while j < len(lines) and lines[j].strip() != QUOTE_FENCE:
            j += 1
        if j >= len(lines):
            logger.debug("Unterminated quote closed at end of input")
        body = self.parse_block(lines[i + 1 : j], nesting=nesting + 1)
        return f"<blockquote>{body}</blockquote>", j + 1

    def _parse_raw_line(self, lines, i, token, nesting):
        return f"<div>{escape_text(token.value)}</div>", i + 1

    def _parse_raw_block(self, lines, i, token, nesting):
        raw = f"{token.value}\n" if token.value else ""
        j = i + 1
        while j < len(lines):
            line = lines[j]
            j += 1
            if closes_raw_span(line.strip()):
                raw += line[: line.rfind(RAW_CLOSE)]
                break
            raw += f"{line}\n"
        else:
            logger.debug("Unterminated raw block closed at end of input")
        return render_raw_text(raw), j

    def _parse_blank(self, lines, i, token, nesting):
        return "<br>", i + 1

    def _parse_paragraph(self, lines, i, token, nesting):
        return f"<p>{format_inline(lines[i])}</p>", i + 1
