"""
snail-markup: compiler for a bracket-and-symbol wiki markup dialect.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    snail-markup manual.snail --standalone -o manual.html

Library Usage:
    from snail_markup import STYLE_SHEET, render

    html = render("*|*Manual*|*\\n[Intro]\\nHello !!world!!\\n]END[")
"""

from .config import ConfigError, SnailConfig
from .exceptions import DocumentTooLargeError, MarkupError
from .generator import generate_toc
from .inline import format_inline
from .lexer import classify_line
from .lists import build_list
from .models import LineKind, RenderState, TocEntry
from .parser import BlockParser
from .renderer import RenderFileError, render, render_file
from .styles import STYLE_SHEET, build_standalone_document
from .tables import render_table_run

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "render",
    "render_file",
    "BlockParser",
    "format_inline",
    "build_list",
    "render_table_run",
    "generate_toc",
    "classify_line",
    # Data models
    "LineKind",
    "RenderState",
    "TocEntry",
    "SnailConfig",
    # Style sheet collaborator
    "STYLE_SHEET",
    "build_standalone_document",
    # Exceptions
    "ConfigError",
    "DocumentTooLargeError",
    "MarkupError",
    "RenderFileError",
    # Version
    "__version__",
]
