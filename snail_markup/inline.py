"""Inline formatting for a single logical text span.

Rules run in a fixed order and each one rewrites the whole span. Later rules
must never see delimiters produced by earlier ones, which is why sized text
runs before bold, and why links and media match the escaped ``&amp;`` form of
their ampersand delimiters.

Attribute arguments (colors, link targets, media sources) are stashed behind
placeholders before any rule runs, so a ``//`` inside a URL is never read as
italics, and they are restored attribute-escaped.
"""

from __future__ import annotations

import math
import re

from .constants import MAX_SIZED_BANGS, MIN_PIPELESS_SIZED_BANGS

RAW_SPAN_PATTERN = re.compile(r"\{\|(.*?)\|\}")
RAW_PLACEHOLDER_PATTERN = re.compile(r"\x00RAW_(\d+)\x00")
ARG_PLACEHOLDER_PATTERN = re.compile(r"\x00ARG_(\d+)\x00")

# Placeholders are delimited by NUL, which is never let through from the source
NUL_REPLACEMENT = "\ufffd"

# (prefix, argument, suffix) for every construct with an attribute argument
ATTRIBUTE_ARGUMENT_PATTERNS = [
    re.compile(r"(\?\?\[)(.*?)(\].*?\?\?)"),
    re.compile(r"(&amp;&amp;\[)(.*?)(\].*?&amp;&amp;)"),
    re.compile(r"(!&amp;(?:\[\d+,\s*\d+\])?)(.*?)(&amp;!)"),
    re.compile(r"(\?&amp;(?:\[\d+,\s*\d+\])?)(.*?)(&amp;\?)"),
]


def escape_text(text: str) -> str:
    """Escape the three HTML metacharacters, leaving quotes alone."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(text: str) -> str:
    """Finish escaping `escape_text` output for use inside a quoted attribute."""
    return text.replace('"', "&quot;").replace("'", "&#x27;")


def sized_text_em(bangs: int) -> float:
    """Font size in ``em`` for text wrapped in `bangs` exclamation marks.

    Examples:
        sized_text_em(1)  # 2.0
        sized_text_em(4)  # 1.0
        sized_text_em(12)  # 0.21
    """
    return round(2.0 - 0.5 * math.log2(bangs), 2)


def _sized_rules() -> list[tuple[re.Pattern, str]]:
    rules = []
    for bangs in range(MAX_SIZED_BANGS, 0, -1):
        run = "!" * bangs
        replacement = rf'<span style="font-size: {sized_text_em(bangs)}em;">\1</span>'
        rules.append((re.compile(rf"{run}\|(.*?)\|{run}"), replacement))
        if bangs >= MIN_PIPELESS_SIZED_BANGS:
            rules.append((re.compile(rf"{run}(.+?){run}"), replacement))
    return rules


SIZED_RULES = _sized_rules()

STYLE_RULES = [
    # Bold, italic, strikethrough, underline
    (re.compile(r"!!(.*?)!!"), r"<b>\1</b>"),
    (re.compile(r"//(.*?)//"), r"<i>\1</i>"),
    (re.compile(r"--(.*?)--"), r"<strike>\1</strike>"),
    (re.compile(r"__(.*?)__"), r"<u>\1</u>"),
    # Overline, superscript, subscript
    (re.compile(r"_\^(.*?)_\^"), r'<span style="text-decoration: overline;">\1</span>'),
    (re.compile(r"\+\^(.*?)\^\+"), r"<sup>\1</sup>"),
    (re.compile(r"\+_(.*?)_\+"), r"<sub>\1</sub>"),
    # Wavy underline, horizontal flip, hidden until hover
    (re.compile(r"~~(.*?)~~"), r'<span style="text-decoration: wavy underline;">\1</span>'),
    (
        re.compile(r"@@(.*?)@@"),
        r'<span style="display: inline-block; transform: scaleX(-1);">\1</span>',
    ),
    (re.compile(r"::(.*?)::"), r'<span class="snail-hidden">\1</span>'),
]

ARGUMENT_RULES = [
    (re.compile(r"\?\?\[(.*?)\](.*?)\?\?"), r'<span style="color: \1;">\2</span>'),
    (re.compile(r"&amp;&amp;\[(.*?)\](.*?)&amp;&amp;"), r'<a href="\1">\2</a>'),
    (re.compile(r"``(.*?)``"), r"<code>\1</code>"),
    (re.compile(r"`\[(.*?)\]`"), r"<kbd>\1</kbd>"),
    # Media: explicit size first, then the plain form
    (
        re.compile(r"!&amp;\[(\d+),\s*(\d+)\](.*?)&amp;!"),
        r'<img src="\3" width="\1" height="\2">',
    ),
    (re.compile(r"!&amp;(.*?)&amp;!"), r'<img src="\1">'),
    (
        re.compile(r"\?&amp;\[(\d+),\s*(\d+)\](.*?)&amp;\?"),
        r'<video src="\3" width="\1" height="\2" controls></video>',
    ),
    (re.compile(r"\?&amp;(.*?)&amp;\?"), r'<video src="\1" controls></video>'),
    (
        re.compile(r"\|=\[(.*?)\](.*?)=\|"),
        r'<span class="snail-tooltip"><sup class="snail-tooltip-trigger">[\2]</sup>'
        r'<span class="snail-tooltip-content">\1</span></span>',
    ),
]


def protect_raw_spans(text: str) -> tuple[str, list[str]]:
    """Replace ``{|...|}`` spans with numbered placeholders.

    Args:
        text: Escaped text that may contain raw spans.

    Returns:
        tuple[str, list[str]]: Text with placeholders and the span contents,
            indexed by placeholder number.

    Examples:
        protect_raw_spans("a {|!!b!!|} c")  # ("a \\x00RAW_0\\x00 c", ["!!b!!"])
    """
    raw_spans: list[str] = []

    def _stash(match: re.Match) -> str:
        raw_spans.append(match.group(1))
        return f"\x00RAW_{len(raw_spans) - 1}\x00"

    return RAW_SPAN_PATTERN.sub(_stash, text), raw_spans


def protect_arguments(text: str, raw_spans: list[str]) -> tuple[str, list[str]]:
    """Replace attribute arguments with numbered placeholders.

    Raw spans and earlier arguments inside an argument are folded back in
    first, so every stashed value is complete and already attribute-escaped.

    Args:
        text: Escaped text with raw spans already protected.
        raw_spans: Span contents from `protect_raw_spans`.

    Returns:
        tuple[str, list[str]]: Text with placeholders and the escaped
            arguments, indexed by placeholder number.

    Examples:
        protect_arguments("&amp;&amp;[https://a.com]A&amp;&amp;", [])
        # ("&amp;&amp;[\\x00ARG_0\\x00]A&amp;&amp;", ["https://a.com"])
    """
    arguments: list[str] = []

    def _stash(match: re.Match) -> str:
        prefix, argument, suffix = match.groups()
        argument = _restore(ARG_PLACEHOLDER_PATTERN, argument, arguments)
        arguments.append(escape_attribute(restore_raw_spans(argument, raw_spans)))
        return f"{prefix}\x00ARG_{len(arguments) - 1}\x00{suffix}"

    for pattern in ATTRIBUTE_ARGUMENT_PATTERNS:
        text = pattern.sub(_stash, text)
    return text, arguments


def _restore(pattern: re.Pattern, text: str, values: list[str]) -> str:
    def _replace(match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(values):
            return values[index]
        return match.group(0)

    return pattern.sub(_replace, text)


def restore_raw_spans(text: str, raw_spans: list[str]) -> str:
    """Put stashed raw span contents back in place of their placeholders.

    Placeholders without a stashed span are left untouched.
    """
    return _restore(RAW_PLACEHOLDER_PATTERN, text, raw_spans)


def format_inline(text: str) -> str:
    """Render inline markup in `text` to HTML.

    The span is HTML-escaped first, so everything the rules leave alone stays
    literal. NUL characters become U+FFFD so source text can never forge a
    placeholder. Raw spans are restored last, escaped but otherwise untouched.

    Args:
        text: A single line or table cell.

    Returns:
        str: HTML-safe inline markup.

    Examples:
        format_inline("!!bold!! and //italic//")
        format_inline("{|!!not bold!!|}")  # "!!not bold!!"
        format_inline("&&[https://example.com]home&&")
    """
    if not text:
        return ""

    formatted = escape_text(text.replace("\x00", NUL_REPLACEMENT))
    formatted, raw_spans = protect_raw_spans(formatted)
    formatted, arguments = protect_arguments(formatted, raw_spans)

    for pattern, replacement in (*SIZED_RULES, *STYLE_RULES, *ARGUMENT_RULES):
        formatted = pattern.sub(replacement, formatted)

    formatted = _restore(ARG_PLACEHOLDER_PATTERN, formatted, arguments)
    return restore_raw_spans(formatted, raw_spans)
