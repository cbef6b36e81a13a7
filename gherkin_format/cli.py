"""
Formats Gherkin feature files in place.
With --check it only reports files that would change; with --tokens or
--highlight it prints the classified token stream instead.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from . import __version__
from .config import ConfigError, build_config
from .filesystem import get_max_file_size, normalize_filepath, read_document, write_document
from .formatter import reindent_and_align
from .highlight import describe_tokens, render_tokens
from .lexer import tokenize
from .logger import configure_logging, get_logger

__all__ = ["cli"]

logger = get_logger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="gherkin-format")
@click.option("--check", is_flag=True, help="Report files that would be reformatted; write nothing")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print formatted text instead of rewriting")
@click.option("--tokens", "show_tokens", is_flag=True, help="Print the classified token stream")
@click.option("--highlight", is_flag=True, help="Print the document with syntax highlighting")
@click.option("--indent-width", type=int, help="Spaces per nesting level")
@click.option("--table-indent-level", type=int, help="Nesting level of table rows")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.argument(
    "filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
def cli(
    filepaths: tuple[str, ...],
    check: bool = False,
    to_stdout: bool = False,
    show_tokens: bool = False,
    highlight: bool = False,
    indent_width: int | None = None,
    table_indent_level: int | None = None,
    verbose: bool = False,
):
    """
    Entry point for formatting feature files.

    Args:
        filepaths: Paths to the `.feature` / `.gherkin` files to process.
        check: Only report files whose formatting would change.
        to_stdout: Print the formatted documents instead of rewriting them.
        show_tokens: Print one row per classified token.
        highlight: Print each document with ANSI syntax highlighting.
        indent_width: Override for the number of spaces per nesting level.
        table_indent_level: Override for the nesting level of table rows.
        verbose: Emit debug logging on stderr.

    Returns:
        None. Exits with status 1 in `--check` mode when any file would change.

    Raises:
        click.UsageError: If more than one output mode is requested.
        click.BadParameter: If a path is unsupported or the configuration is
            invalid.
        click.ClickException: If a file cannot be read, is too large, or
            changes while being processed.

    Examples:
        gherkin-format features/login.feature --check
    """
    configure_logging(verbose)

    if sum((check, to_stdout, show_tokens, highlight)) > 1:
        raise click.UsageError("--check, --stdout, --tokens and --highlight are mutually exclusive")

    base_dir = Path.cwd().resolve()
    would_change: list[Path] = []

    for raw_path in filepaths:
        try:
            config = build_config(
                Path(raw_path).expanduser().parent,
                indent_width=indent_width,
                table_indent_level=table_indent_level,
            )
        except ConfigError as error:
            raise click.BadParameter(str(error)) from error

        try:
            filepath = normalize_filepath(raw_path, base_dir, config.extensions)
        except ValueError as error:
            raise click.BadParameter(str(error)) from error

        try:
            max_file_size = get_max_file_size(default=config.max_file_size)
        except ValueError as error:
            raise click.ClickException(str(error)) from error

        try:
            snapshot = read_document(filepath, max_file_size)
        except IOError as error:
            raise click.ClickException(str(error)) from error
        content = snapshot.text

        if show_tokens:
            for row in describe_tokens(tokenize(content)):
                click.echo(row)
            continue

        if highlight:
            click.echo(render_tokens(tokenize(content)), nl=False)
            continue

        formatted = reindent_and_align(content, config)

        if check:
            if formatted != content:
                would_change.append(filepath)
                click.echo(f"would reformat {filepath.relative_to(base_dir)}")
            continue

        if to_stdout:
            click.echo(formatted, nl=False)
            continue

        if formatted == content:
            logger.debug("%s already formatted", filepath)
            continue

        try:
            write_document(snapshot, formatted)
        except IOError as error:
            raise click.ClickException(str(error)) from error
        click.echo(f"reformatted {filepath.relative_to(base_dir)}", err=True)

    if would_change:
        click.echo(f"{len(would_change)} file(s) would be reformatted", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
