"""Reading markup sources and writing rendered pages.

Sources are only ever read, so any readable markup file is accepted wherever it
lives. The output side is stricter: a rendered page replaces its destination
atomically and never writes through a symlink or over its own source.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import MARKUP_EXTENSIONS
from .exceptions import MarkupError


def resolve_markup_path(raw_path: str | Path) -> Path:
    """Resolve a user-supplied path to an existing markup source.

    Args:
        raw_path: Absolute or relative path; ``~`` is expanded.

    Returns:
        Path: Absolute path with symlinks resolved.

    Raises:
        ValueError: If the path does not exist, is not a regular file, or does
            not use one of the markup extensions.

    Examples:
        resolve_markup_path("../docs/manual.snail")
    """
    path = Path(raw_path).expanduser()
    try:
        resolved = path.resolve(strict=True)
    except OSError as error:
        raise ValueError(f"{path} does not exist.") from error

    if not resolved.is_file():
        raise ValueError(f"{path} is not a regular file.")

    if resolved.suffix.lower() not in MARKUP_EXTENSIONS:
        raise ValueError(
            f"{path} is not a markup file. Supported extensions are: "
            f"{', '.join(MARKUP_EXTENSIONS)}"
        )
    return resolved


def check_source_size(filepath: Path, max_size: int) -> int:
    """Return the size of `filepath` in bytes, refusing files above `max_size`.

    Checked before reading so oversized sources are never loaded.

    Raises:
        IOError: If the file cannot be inspected or is too large.
    """
    try:
        size = filepath.stat().st_size
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if size > max_size:
        raise IOError(f"{filepath} is {size} bytes, over the {max_size} byte limit.")
    return size


def read_markup(filepath: Path) -> str:
    """Read a UTF-8 markup source.

    Args:
        filepath: Path to the source.

    Returns:
        str: Document text.

    Raises:
        MarkupError: If the file is not valid UTF-8.
        IOError: If the file cannot be read.

    Examples:
        document = read_markup(Path("manual.snail"))
    """
    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as file:
            return file.read()
    except UnicodeDecodeError as error:
        raise MarkupError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise IOError(f"Error reading {filepath}: {error}") from error


def check_output_path(filepath: Path, source: Path | None = None) -> None:
    """Refuse destinations that would clobber something other than a page.

    Raises:
        ValueError: If `filepath` is a symlink, a directory, has no existing
            parent directory, or is the markup `source` itself.
    """
    if filepath.is_symlink():
        raise ValueError(f"Refusing to write through symlink {filepath}.")
    if filepath.is_dir():
        raise ValueError(f"{filepath} is a directory.")
    if not filepath.parent.is_dir():
        raise ValueError(f"Directory {filepath.parent} does not exist.")
    if source is not None and filepath.resolve() == source.resolve():
        raise ValueError(f"Refusing to overwrite the source file {source}.")


def write_output(filepath: Path, content: str) -> None:
    """Atomically replace `filepath` with `content`.

    The page is written to a temporary file beside the destination, synced and
    moved into place. An existing destination keeps its permission bits; a
    new one gets ``0o644``.

    Raises:
        IOError: If the destination is refused or the write fails.

    Examples:
        write_output(Path("manual.html"), page)
    """
    try:
        check_output_path(filepath)
    except ValueError as error:
        raise IOError(str(error)) from error

    mode = stat.S_IMODE(filepath.stat().st_mode) if filepath.exists() else 0o644

    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="UTF-8", dir=filepath.parent, prefix=".snail-", delete=False
        ) as page:
            temp_name = page.name
            page.write(content)
            page.flush()
            os.fsync(page.fileno())
        os.chmod(temp_name, mode)
        os.replace(temp_name, filepath)
        temp_name = None
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)
