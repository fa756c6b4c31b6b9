"""
Formats JSP files.
Prints the formatted document to stdout, rewrites files in place with --write,
or reports files that would change with --check.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from .config import ConfigError, FormatOptions, build_options
from .exceptions import FormatFileError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    safe_read,
    write_formatted,
)
from .formatter import format_jsp

__all__ = ["cli"]

logger = logging.getLogger(__name__)


def format_file(filepath: Path, options: FormatOptions, max_file_size: int):
    """Read and format one JSP file.

    Args:
        filepath: Validated path to the JSP file.
        options: Formatting options.
        max_file_size: Maximum allowed size in bytes.

    Returns:
        tuple[str, str, os.stat_result]: Original text, formatted text, and the
            stat captured before reading.

    Raises:
        FormatFileError: If the file is too large, unreadable, or not UTF-8.
    """
    try:
        initial_stat = collect_file_stat(filepath)
        enforce_file_size(initial_stat, max_file_size, filepath)
        with safe_read(filepath) as file:
            original = file.read()
    except UnicodeDecodeError as error:
        raise FormatFileError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except IOError as error:
        raise FormatFileError(str(error)) from error

    return original, format_jsp(original, options), initial_stat


@click.command()
@click.version_option()
@click.option("--tab-size", type=int, help="Columns per indentation level")
@click.option("--use-tabs/--use-spaces", "use_tabs", default=None, help="Indent with tabs")
@click.option(
    "--preserve-newlines/--no-preserve-newlines",
    default=None,
    help="Keep blank-line runs (capped by --max-preserve-newlines)",
)
@click.option("--max-preserve-newlines", type=int, help="Maximum consecutive blank lines")
@click.option("--wrap-line-length", type=int, help="Soft wrap hint (advisory)")
@click.option("-w", "--write", is_flag=True, help="Rewrite files in place")
@click.option("--check", is_flag=True, help="Exit with status 1 if any file would change")
@click.option("-v", "--verbose", is_flag=True, help="Log formatting details to stderr")
@click.argument(
    "filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
def cli(
    filepaths: tuple[str, ...],
    tab_size: int | None = None,
    use_tabs: bool | None = None,
    preserve_newlines: bool | None = None,
    max_preserve_newlines: int | None = None,
    wrap_line_length: int | None = None,
    write: bool = False,
    check: bool = False,
    verbose: bool = False,
):
    """
    Entry point for formatting JSP files.

    Args:
        filepaths: Paths of the JSP files to format.
        tab_size: Override for the indentation width.
        use_tabs: Override for tab indentation.
        preserve_newlines: Override for blank-line preservation.
        max_preserve_newlines: Override for the blank-line cap.
        wrap_line_length: Override for the wrap hint.
        write: Rewrite files in place instead of printing them.
        check: Only report files that would change.
        verbose: Enable debug logging.

    Raises:
        click.BadParameter: If paths or configuration values are invalid.
        click.ClickException: If a file cannot be read or written.

    Examples:
        jsp-format --tab-size 2 --write src/main/webapp/index.jsp
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )

    base_dir = Path.cwd().resolve()
    try:
        paths = [normalize_filepath(filepath, base_dir) for filepath in filepaths]
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        options = build_options(
            paths[0].parent,
            tab_size=tab_size,
            insert_spaces=None if use_tabs is None else not use_tabs,
            preserve_newlines=preserve_newlines,
            max_preserve_newlines=max_preserve_newlines,
            wrap_line_length=wrap_line_length,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size()
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    changed: list[Path] = []
    for path in paths:
        try:
            original, formatted, initial_stat = format_file(path, options, max_file_size)
        except FormatFileError as error:
            raise click.ClickException(str(error)) from error

        if formatted == original:
            logger.debug("%s already formatted", path)
        else:
            changed.append(path)

        if check:
            continue

        if write:
            if formatted != original:
                try:
                    write_formatted(path, formatted, initial_stat)
                except IOError as error:
                    raise click.ClickException(str(error)) from error
        else:
            click.echo(formatted, nl=False)

    if check and changed:
        for path in changed:
            click.echo(f"would reformat {path.relative_to(base_dir)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
