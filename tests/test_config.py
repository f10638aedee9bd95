from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from snail_markup.config import (
    ConfigError,
    SnailConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".snail-markup.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "Contents"
        anchor-prefix = "sec-"
        include-toc = false
        collapsible = false
        max-file-size = 1
        """,
    )

    config = load_config(tmp_path)

    assert config == SnailConfig(
        toc_title="Contents",
        anchor_prefix="sec-",
        include_toc=False,
        collapsible=False,
        max_file_size=1,
    )


def test_underscored_keys_are_accepted(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc_title = "Overview"
        """,
    )

    assert load_config(tmp_path).toc_title == "Overview"


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [snail-markup]
        toc-title = "Dotfile"
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.toc_title == "Dotfile"


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.snail-markup]
        anchor-prefix = "part-"
        """,
    )

    assert load_config(tmp_path).anchor_prefix == "part-"


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "Root"
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    config = load_config(nested)

    assert config.toc_title == "Root"


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "Root"
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "unrelated"
        """,
    )

    assert load_config(child).toc_title == "Root"


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "Root"
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.snail-markup]
        """,
    )

    config = load_config(child)

    assert config.toc_title == SnailConfig().toc_title


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    assert load_config(tmp_path) == SnailConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "From Parent"
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()
    config = load_config(nested)

    assert config.toc_title == "From Parent"


def test_load_config_errors_on_unknown_key(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "OK"
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        snail-markup = 3
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "config",
    [
        SnailConfig(toc_title=""),
        SnailConfig(toc_title="   "),
        SnailConfig(anchor_prefix=""),
        SnailConfig(anchor_prefix="1st-"),
        SnailConfig(anchor_prefix="has space"),
        SnailConfig(anchor_prefix='q"uote'),
        SnailConfig(include_toc="yes"),  # type: ignore[arg-type]
        SnailConfig(collapsible=1),  # type: ignore[arg-type]
        SnailConfig(max_file_size=0),
        SnailConfig(max_file_size=-5),
        SnailConfig(max_file_size="big"),  # type: ignore[arg-type]
        SnailConfig(max_file_size=True),  # type: ignore[arg-type]
    ],
)
def test_validate_config_rejects_invalid_values(config: SnailConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(SnailConfig())


def test_apply_overrides_ignores_none():
    config = SnailConfig()

    assert apply_overrides(config, toc_title=None) is config
    assert apply_overrides(config, include_toc=False).include_toc is False


def test_build_config_applies_overrides_over_files(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "From File"
        anchor-prefix = "file-"
        """,
    )

    config = build_config(tmp_path, toc_title="From Flag", anchor_prefix=None)

    assert config.toc_title == "From Flag"
    assert config.anchor_prefix == "file-"


def test_build_config_validates(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, anchor_prefix="9")
