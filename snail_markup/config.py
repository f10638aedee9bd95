"""Configuration loading and management."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE

ANCHOR_PREFIX_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_:.-]*$")


@dataclass
class SnailConfig:
    """Configuration for rendering markup documents.

    Attributes:
        toc_title: Heading shown inside the table of contents.
        anchor_prefix: Prefix of header element ids; the full id is the prefix
            followed by the header's one-based discovery index.
        include_toc: Whether to emit the table of contents at all.
        collapsible: Whether headers carry the click hook that toggles their
            section's collapsed state.
        max_file_size: Maximum document size, in characters, accepted when
            rendering from a file.

    Examples:
        SnailConfig(toc_title="Contents", include_toc=True)
    """

    # Table of contents
    toc_title: str = "Table of Contents"
    anchor_prefix: str = "snail-section-"
    include_toc: bool = True

    # Sections
    collapsible: bool = True

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`toc_title` must not be empty")
    """


def load_config(search_path: Path) -> SnailConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.snail-markup]`` table from `pyproject.toml` and the
    ``[snail-markup]`` or ``[tool.snail-markup]`` table from
    `.snail-markup.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        SnailConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a matching table is present but not a mapping or
            contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "snail-markup")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".snail-markup.toml",
            table_paths=[("snail-markup",), ("tool", "snail-markup")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return SnailConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> SnailConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> SnailConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return SnailConfig()

    # TOML keys are conventionally dashed
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return SnailConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: SnailConfig) -> None:
    """Validate a `SnailConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If text fields are empty or not strings, the anchor
            prefix cannot start an HTML id, flags are not booleans, or the
            size limit is not a positive integer.

    Examples:
        validate_config(SnailConfig(toc_title="Contents"))
    """
    if not isinstance(config.toc_title, str) or not config.toc_title.strip():
        raise ConfigError("`toc_title` must not be empty")

    if not isinstance(config.anchor_prefix, str) or not config.anchor_prefix:
        raise ConfigError("`anchor_prefix` must not be empty")
    if not ANCHOR_PREFIX_PATTERN.match(config.anchor_prefix):
        raise ConfigError(
            "`anchor_prefix` must start with a letter and contain only letters, digits, "
            "'-', '_', ':' or '.'"
        )

    for key in ("include_toc", "collapsible"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    _ensure_integers({"max_file_size": config.max_file_size})
    _ensure_positive({"max_file_size": config.max_file_size})


def apply_overrides(config: SnailConfig, **overrides: object) -> SnailConfig:
    """Apply override values to a `SnailConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        SnailConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `SnailConfig`.

    Examples:
        updated = apply_overrides(config, toc_title="Contents", include_toc=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> SnailConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        SnailConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), toc_title="Contents")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
