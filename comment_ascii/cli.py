import logging
import sys

import click

from .normalize import normalize_tree
from .rules import DEFAULT_EXTENSIONS

_logger = logging.getLogger(__name__)


class _ClickHandler(logging.Handler):
    def emit(self, record):
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.INFO
    handler = _ClickHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger = logging.getLogger("comment_ascii")
    logger.handlers[:] = [handler]
    logger.setLevel(level)


@click.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False, dir_okay=True))
@click.option(
    "--ext",
    "extensions",
    multiple=True,
    metavar="PATTERN",
    envvar="COMMENT_ASCII_EXTENSIONS",
    help="File name pattern to process, e.g. '*.cpp'. Repeatable. "
    f"[default: {' '.join(DEFAULT_EXTENSIONS)}]",
)
@click.option(
    "--exclude",
    multiple=True,
    metavar="DIR",
    envvar="COMMENT_ASCII_EXCLUDE",
    help="Directory name to skip in addition to VCS and tool directories. Repeatable.",
)
@click.option("--dry-run", is_flag=True, help="Report what would change without writing.")
@click.option(
    "--sniff-encoding",
    is_flag=True,
    help="Guess the encoding of files without a BOM instead of assuming Windows-1252.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the run summary as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Log every file, including unchanged ones.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
def cli(root, extensions, exclude, dry_run, sniff_encoding, as_json, verbose, quiet):
    """
    Replace non-ASCII characters inside // and /* */ comments of the source
    files under ROOT. Changed files are rewritten as UTF-8 with BOM.
    """
    _configure_logging(verbose, quiet)
    _logger.debug("scanning %s", root)

    summary = normalize_tree(
        root,
        extensions=extensions or DEFAULT_EXTENSIONS,
        exclude_dirs=exclude,
        dry_run=dry_run,
        sniff_encoding=sniff_encoding,
    )

    if as_json:
        click.echo(summary.model_dump_json(indent=2))
    else:
        verb = "Would change" if dry_run else "Changed"
        click.echo(f"Examined: {summary.examined}")
        click.echo(f"{verb}: {summary.changed}")
        if summary.failed:
            click.echo(f"Failed: {summary.failed}")

    if summary.failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
