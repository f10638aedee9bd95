"""Constants used across the snail-markup package."""

from __future__ import annotations

import re

# Header depth range, encoded by the number of opening brackets
MAX_HEADER_DEPTH = 12
HTML_HEADING_MAX_DEPTH = 6

# Block delimiters
HEADER_OPEN_CHAR = "["
HEADER_END_MARKER = "]END["
HTML_BLOCK_START = "<<html>>"
HTML_BLOCK_END = ">>END<<"
BOX_END_MARKER = "%%END%%"
QUOTE_FENCE = '""'
RAW_OPEN = "{|"
RAW_CLOSE = "|}"
RULE_LINE = "----"
TABLE_ROW_OPENER = "[{"

# Single-line metadata forms: (start, end)
TITLE_DELIMITERS = ("*|*", "*|*")
CATEGORY_DELIMITERS = ("?!|", "|!?")
CALLOUT_DELIMITERS = ("*!!|", "|!!*")

# Table cells
CELL_OPEN_BRACKET = "["
CELL_OPEN_BRACE = "{"
CELL_CLOSE_BRACE = "}"
CELL_CLOSE_BRACKET = "]"
SPLIT_CELL_SEPARATOR = "||"

# Block patterns
BOX_START_PATTERN = re.compile(
    r"^%%\[(?P<width>\d+|auto),\s*(?P<height>\d+|auto)\](?:\{(?P<position>\w+)\})?%%(?P<rest>.*)$"
)
COLORED_RULE_PATTERN = re.compile(r"^--\[(?P<color>.*?)\]--$")
UNORDERED_ITEM_PATTERN = re.compile(r"^(?P<marker>-+) (?P<content>.*)$")
ORDERED_ITEM_PATTERN = re.compile(r"^(?P<marker>\++)\. (?P<content>.*)$")
CELL_COLOR_PATTERN = re.compile(r"^\[(?P<color>[^\[\]]*?)\](?P<content>.*)$", re.DOTALL)

BOX_POSITIONS = ("left", "right", "center")
DEFAULT_BOX_POSITION = "left"

# Placeholder emitted where the rendered TOC is spliced in
TOC_PLACEHOLDER = "<!--TOC-->"

# Recursion limits for adversarial nesting
MAX_BLOCK_NESTING = 64
MAX_TABLE_NESTING = 64

# Sized text runs, tried longest first
MAX_SIZED_BANGS = 12
MIN_PIPELESS_SIZED_BANGS = 3

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
MARKUP_EXTENSIONS = (".snail", ".txt", ".wiki")
