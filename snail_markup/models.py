"""Data models for snail-markup."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class LineKind(Enum):
    """Block-level classification of a single source line.

    Attributes:
        HTML_BLOCK: ``<<html>>`` opener of a verbatim HTML block.
        BOX: ``%%[w,h]{pos}%%`` box opener, same-line or multi-line.
        HEADER: Section header opened by 1-12 ``[`` characters.
        TITLE: ``*|*text*|*`` document title.
        CATEGORY: ``?!|text|!?`` category caption.
        CALLOUT: ``*!!|text|!!*`` emphasized callout box.
        LIST_ITEM: Unordered (``-``) or ordered (``+.``) list item.
        TABLE_ROW: Line starting with the ``[{`` cell opener.
        RULE: ``----`` horizontal rule.
        COLORED_RULE: ``--[color]--`` horizontal rule.
        QUOTE: ``""`` quote fence.
        RAW_LINE: Raw text block opened and closed on the same line.
        RAW_OPEN: Opener of a multi-line raw text block.
        BLANK: Empty or whitespace-only line.
        TEXT: Anything else; rendered as a paragraph.
    """

    HTML_BLOCK = auto()
    BOX = auto()
    HEADER = auto()
    TITLE = auto()
    CATEGORY = auto()
    CALLOUT = auto()
    LIST_ITEM = auto()
    TABLE_ROW = auto()
    RULE = auto()
    COLORED_RULE = auto()
    QUOTE = auto()
    RAW_LINE = auto()
    RAW_OPEN = auto()
    BLANK = auto()
    TEXT = auto()


METADATA_KINDS = frozenset({LineKind.TITLE, LineKind.CATEGORY, LineKind.CALLOUT})


class ListKind(Enum):
    """List container kinds and the HTML tag each one renders as."""

    UNORDERED = "ul"
    ORDERED = "ol"

    @property
    def tag(self) -> str:
        return self.value


@dataclass
class BoxSpec:
    """Geometry parsed from a box opener.

    Attributes:
        width: Pixel width as digits, or ``"auto"``.
        height: Pixel height as digits, or ``"auto"``.
        position: One of ``left``, ``right`` or ``center``.
        rest: Text following the opener on the same line.
    """

    width: str
    height: str
    position: str
    rest: str


@dataclass
class LineToken:
    """A classified source line.

    Attributes:
        kind: Block kind the line opens or represents.
        text: The line with surrounding whitespace removed.
        depth: Header depth or list depth; zero for other kinds.
        value: Kind-specific payload (header title, metadata text, rule color,
            raw text, or list item content).
        box: Box geometry when `kind` is `LineKind.BOX`.
        list_kind: List kind when `kind` is `LineKind.LIST_ITEM`.
    """

    kind: LineKind
    text: str
    depth: int = 0
    value: str | None = None
    box: BoxSpec | None = None
    list_kind: ListKind | None = None


@dataclass
class ListItem:
    """A single list line split into marker kind, depth and content."""

    kind: ListKind
    depth: int
    content: str


@dataclass
class ListFrame:
    """An open list container on the list builder stack."""

    kind: ListKind
    depth: int


@dataclass
class TocEntry:
    """A header recorded for the table of contents.

    Attributes:
        depth: Header depth (1-12).
        title: Header title as written, markup included.
        number: Displayed section number such as ``"1.2."``; empty when the
            header is shallower than the document's base level.
        anchor_id: One-based discovery index of the header within the render.
    """

    depth: int
    title: str
    number: str
    anchor_id: int


@dataclass
class TableCell:
    """A parsed table cell.

    Attributes:
        content: Cell text after any color annotation was removed.
        color: Background color annotation, if present.
        nested_level: Delimiter level of the nested table the cell holds, or
            None when the cell holds inline content.
        regions: Inline regions produced by splitting on ``||``; empty for
            nested-table cells.
    """

    content: str
    color: str | None = None
    nested_level: int | None = None
    regions: list[str] = field(default_factory=list)


@dataclass
class RenderState:
    """Mutable state shared by every recursive call of one render.

    A fresh instance is created for each `render` call and never outlives it.

    Attributes:
        base_level: Depth of the first header seen; numbering is relative to it.
        counters: Current count per header depth.
        toc: Headers in discovery (pre-order) order.
        toc_inserted: Whether the TOC placeholder has been emitted.
    """

    base_level: int | None = None
    counters: dict[int, int] = field(default_factory=dict)
    toc: list[TocEntry] = field(default_factory=list)
    toc_inserted: bool = False
