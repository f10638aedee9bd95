"""Render entry points."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import ConfigError, SnailConfig, validate_config
from .constants import TOC_PLACEHOLDER
from .exceptions import DocumentTooLargeError, MarkupError
from .filesystem import read_markup
from .generator import generate_toc
from .models import RenderState
from .parser import BlockParser

logger = logging.getLogger(__name__)


def split_document(document: str) -> list[str]:
    """Normalize line endings to ``\\n`` and split into lines."""
    return document.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def render(document: str, config: SnailConfig | None = None) -> str:
    """Compile a markup document to HTML.

    Every call starts from a fresh `RenderState`, so calls never share
    numbering or TOC state. Malformed markup never raises: unterminated blocks
    close at the end of the input.

    Args:
        document: Full document text.
        config: Rendering options. Defaults to a new `SnailConfig` when omitted.

    Returns:
        str: The HTML body, stripped of surrounding whitespace. The table of
            contents replaces the placeholder emitted before the first
            non-metadata line, or is prepended when no placeholder was emitted
            but headers exist.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        render("*|*Manual*|*\\n[Intro]\\nHello\\n]END[")
    """
    config = config or SnailConfig()
    validate_config(config)

    lines = split_document(document)
    state = RenderState()
    body = BlockParser(state, config).parse_block(lines, is_root=True)

    toc = ""
    if config.include_toc:
        toc = generate_toc(state.toc, state.base_level, config)

    if TOC_PLACEHOLDER in body:
        body = body.replace(TOC_PLACEHOLDER, toc, 1)
    elif toc:
        body = toc + body

    logger.debug("Rendered %d lines with %d headers", len(lines), len(state.toc))
    return body.strip()


def enforce_document_size(document: str, limit: int) -> None:
    """Raise `DocumentTooLargeError` when `document` is longer than `limit` characters."""
    if len(document) > limit:
        raise DocumentTooLargeError(len(document), limit)


class RenderFileError(Exception):
    """Raised when rendering a markup file fails."""


def render_file(filepath: Path, config: SnailConfig | None = None) -> str:
    """Read and render a markup file.

    Args:
        filepath: Path to the UTF-8 markup file.
        config: Rendering options; defaults to a new `SnailConfig` when omitted.

    Returns:
        str: Rendered HTML body.

    Raises:
        RenderFileError: If the configuration is invalid, the file cannot be
            read or decoded, or the document exceeds `config.max_file_size`.

    Examples:
        html = render_file(Path("manual.snail"))
    """
    config = config or SnailConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise RenderFileError(str(error)) from error

    try:
        content = read_markup(filepath)
    except (MarkupError, IOError) as error:
        raise RenderFileError(str(error)) from error

    try:
        enforce_document_size(content, config.max_file_size)
    except DocumentTooLargeError as error:
        error_message = f"{filepath} is too large to render: {error}"
        raise RenderFileError(error_message) from error

    return render(content, config)
