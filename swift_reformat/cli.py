"""
Reformats Swift source files.
Prints the formatted text to stdout, rewrites files in place, or checks
whether files are already formatted.
"""

from __future__ import annotations

import click

from . import log
from .config import ConfigError, build_config
from .filesystem import resolve_source_path, stat_source, write_formatted
from .formatter import FormatFileError, format_file

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="swift-reformat")
@click.option("--indent-chars", help="Indentation characters per level")
@click.option("--indent-spaces", type=int, help="Number of spaces per indentation level")
@click.option("-i", "--in-place", is_flag=True, help="Rewrite files that need formatting")
@click.option("--check", is_flag=True, help="Report files that need formatting and exit 1")
@click.option("-v", "--verbose", is_flag=True, help="Print debug messages")
@click.argument("filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def cli(
    filepaths: tuple[str, ...],
    indent_chars: str | None = None,
    indent_spaces: int | None = None,
    in_place: bool = False,
    check: bool = False,
    verbose: bool = False,
):
    """
    Entry point for reformatting Swift source files.

    Args:
        filepaths: Paths to the source files to process.
        indent_chars: Override for the indentation unit.
        indent_spaces: Override for the indentation unit, as a number of spaces.
        in_place: Rewrite changed files instead of printing them.
        check: Only report files whose formatting would change.
        verbose: Enable debug logging on stderr.

    Returns:
        None.

    Raises:
        click.UsageError: If `--check` and `--in-place` are combined.
        click.BadParameter: If a path is invalid or the configuration holds
            unsupported values.
        click.ClickException: If reading, formatting or writing a file fails.

    Examples:
        swift-reformat Sources/App.swift --indent-spaces 2 --in-place
    """
    if check and in_place:
        raise click.UsageError("--check and --in-place are mutually exclusive")
    if verbose:
        log.debug()

    unformatted: list[str] = []

    for raw_path in filepaths:
        try:
            filepath = resolve_source_path(raw_path)
        except ValueError as error:
            raise click.BadParameter(str(error)) from error
        try:
            config = build_config(
                filepath.parent,
                indent_chars=indent_chars,
                indent_spaces=indent_spaces,
            )
        except ConfigError as error:
            raise click.BadParameter(str(error)) from error

        try:
            snapshot = stat_source(filepath)
            original, result = format_file(filepath, config)
        except (IOError, FormatFileError) as error:
            raise click.ClickException(str(error)) from error

        if result.unbalanced_brackets:
            click.echo(
                f"Warning: {raw_path} has {result.unbalanced_brackets} unmatched closing bracket(s)",
                err=True,
            )

        formatted = f"{result.text}\n" if result.text else ""

        if check:
            if formatted != original:
                unformatted.append(raw_path)
                click.echo(f"Would reformat {raw_path}")
            continue

        # Prints formatted text
        if not in_place:
            click.echo(formatted, nl=False)
            continue

        # Rewrites file
        if formatted == original:
            continue
        try:
            write_formatted(filepath, formatted, snapshot)
        except IOError as error:
            raise click.ClickException(str(error)) from error
        click.echo(f"Reformatted {raw_path}", err=True)

    if unformatted:
        raise click.exceptions.Exit(1)


if __name__ == "__main__":
    cli()
