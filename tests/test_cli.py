from __future__ import annotations

import os
import textwrap
from pathlib import Path

import pytest

from snail_markup.cli import cli, document_title
from snail_markup.styles import STYLE_ELEMENT_ID


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_html(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "doc.snail",
        """
        *|*Manual*|*
        [Intro]
        Hello !!world!!
        ]END[
        """,
    )

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output.startswith('<h1 class="snail-doc-title">Manual</h1><div class="snail-toc">')
    assert "<p>Hello <b>world</b></p>" in result.output


def test_cli_writes_output_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.snail", "[Intro]\n")
    output = tmp_path / "doc.html"

    result = cli_runner.invoke(cli, [str(target), "--output", str(output)])

    assert result.exit_code == 0
    contents = output.read_text(encoding="utf-8")
    assert 'id="snail-section-1"' in contents
    assert contents.endswith("\n")


def test_cli_standalone_page(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.snail", "*|*A & B*|*\ntext\n")

    result = cli_runner.invoke(cli, ["--standalone", str(target)])

    assert result.exit_code == 0
    assert result.output.startswith("<!DOCTYPE html>")
    assert "<title>A &amp; B</title>" in result.output
    assert result.output.count(f'<style id="{STYLE_ELEMENT_ID}">') == 1


def test_document_title_falls_back_to_stem(tmp_path):
    target = _write(tmp_path, "notes.snail", "no title here\n")

    assert document_title(target) == "notes"


def test_cli_flags_override_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "From File"
        """,
    )
    target = _write(tmp_path, "doc.snail", "[Intro]\n")

    result = cli_runner.invoke(
        cli, ["--toc-title", "Contents", "--anchor-prefix", "part-", str(target)]
    )

    assert result.exit_code == 0
    assert "<h3>Contents</h3>" in result.output
    assert 'id="part-1"' in result.output


def test_cli_uses_config_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        toc-title = "From File"
        collapsible = false
        """,
    )
    target = _write(tmp_path, "doc.snail", "[Intro]\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert "<h3>From File</h3>" in result.output
    assert "onclick" not in result.output


def test_cli_no_toc_and_no_collapse(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.snail", "[Intro]\n")

    result = cli_runner.invoke(cli, ["--no-toc", "--no-collapse", str(target)])

    assert result.exit_code == 0
    assert "snail-toc" not in result.output
    assert "onclick" not in result.output


def test_cli_rejects_invalid_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.snail", "[Intro]\n")

    result = cli_runner.invoke(cli, ["--anchor-prefix", "1bad", str(target)])

    assert result.exit_code == 2
    assert "anchor_prefix" in result.output


def test_cli_rejects_unsupported_extension(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "doc.md", "[Intro]\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "not a markup file" in result.output


def test_cli_rejects_missing_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, [str(tmp_path / "missing.snail")])

    assert result.exit_code == 2


def test_cli_rejects_large_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.snail-markup]
        max-file-size = 4
        """,
    )
    target = _write(tmp_path, "doc.snail", "[Intro]\nlonger than four\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "over the 4 byte limit" in result.output


def test_cli_rejects_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "bad.snail"
    target.write_bytes(b"\xff\xfe\xfa")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "Invalid UTF-8" in result.output


def test_cli_renders_file_outside_working_directory(cli_runner, tmp_path, monkeypatch):
    _write(tmp_path, "doc.snail", "[Intro]\n")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    result = cli_runner.invoke(cli, ["../doc.snail"])

    assert result.exit_code == 0
    assert 'id="snail-section-1"' in result.output


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_cli_renders_symlinked_source(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "source.snail", "[Intro]\n")
    link = tmp_path / "alias.snail"
    try:
        os.symlink(source, link)
    except (OSError, NotImplementedError):
        pytest.skip("Symlinks are not supported on this platform")

    result = cli_runner.invoke(cli, [str(link)])

    assert result.exit_code == 0
    assert 'id="snail-section-1"' in result.output


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_cli_refuses_symlinked_output(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "doc.snail", "[Intro]\n")
    real = tmp_path / "real.html"
    real.write_text("keep", encoding="utf-8")
    link = tmp_path / "doc.html"
    try:
        os.symlink(real, link)
    except (OSError, NotImplementedError):
        pytest.skip("Symlinks are not supported on this platform")

    result = cli_runner.invoke(cli, [str(source), "--output", str(link)])

    assert result.exit_code == 2
    assert "Refusing to write through symlink" in result.output
    assert real.read_text(encoding="utf-8") == "keep"


def test_cli_refuses_to_overwrite_source(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "doc.snail", "[Intro]\n")

    result = cli_runner.invoke(cli, [str(source), "--output", str(source)])

    assert result.exit_code == 2
    assert "Refusing to overwrite the source file" in result.output
    assert source.read_text(encoding="utf-8") == "[Intro]\n"
