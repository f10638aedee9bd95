"""
Renders a markup file to HTML.
Prints the HTML to stdout, or writes it to the file given with --output.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, build_config
from .exceptions import MarkupError
from .filesystem import (
    check_output_path,
    check_source_size,
    read_markup,
    resolve_markup_path,
    write_output,
)
from .lexer import classify_line
from .models import LineKind
from .renderer import RenderFileError, render_file
from .styles import build_standalone_document

__all__ = ["cli"]


def document_title(filepath: Path) -> str:
    """Return the first ``*|*title*|*`` text in the file, or the file stem."""
    for line in read_markup(filepath).splitlines():
        token = classify_line(line)
        if token.kind is LineKind.TITLE and token.value.strip():
            return token.value.strip()
    return filepath.stem


@click.command()
@click.version_option(package_name="snail-markup")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the HTML to this file instead of stdout",
)
@click.option("--standalone", is_flag=True, help="Emit a full HTML page with the style sheet")
@click.option("--toc-title", help="Heading of the table of contents")
@click.option("--anchor-prefix", help="Prefix for header element ids")
@click.option("--no-toc", "no_toc", is_flag=True, help="Do not emit a table of contents")
@click.option("--no-collapse", "no_collapse", is_flag=True, help="Do not make sections collapsible")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    output: Path | None = None,
    standalone: bool = False,
    toc_title: str | None = None,
    anchor_prefix: str | None = None,
    no_toc: bool = False,
    no_collapse: bool = False,
):
    """
    Entry point for rendering a markup file to HTML.

    Args:
        filepath: Path to the markup file to render.
        output: Destination file; stdout is used when omitted.
        standalone: Wrap the fragment in a full page carrying the style sheet.
        toc_title: Replacement heading for the table of contents.
        anchor_prefix: Replacement prefix for header ids.
        no_toc: Skip the table of contents.
        no_collapse: Omit the collapse hook on headers.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is rejected or configuration values are
            invalid.
        click.ClickException: If the file cannot be read or rendered, or the
            output cannot be written.

    Examples:
        snail-markup manual.snail --standalone -o manual.html
    """
    try:
        filepath = resolve_markup_path(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error), param_hint="'FILEPATH'") from error
    if output is not None:
        try:
            check_output_path(output, source=filepath)
        except ValueError as error:
            raise click.BadParameter(str(error), param_hint="'--output'") from error
    try:
        config = build_config(
            filepath.parent,
            toc_title=toc_title,
            anchor_prefix=anchor_prefix,
            include_toc=False if no_toc else None,
            collapsible=False if no_collapse else None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        check_source_size(filepath, config.max_file_size)
        body = render_file(filepath, config)
    except (IOError, RenderFileError) as error:
        raise click.ClickException(str(error)) from error

    if standalone:
        try:
            title = document_title(filepath)
        except (IOError, MarkupError) as error:
            raise click.ClickException(str(error)) from error
        body = build_standalone_document(body, title)

    if output is None:
        click.echo(body)
        return

    try:
        write_output(output, body if body.endswith("\n") else f"{body}\n")
    except IOError as error:
        raise click.ClickException(str(error)) from error
    click.echo(f"Wrote {output}", err=True)


if __name__ == "__main__":
    cli()
