"""
Command line interface for gitmap.

This module defines the ``main`` function which is used as the entry
point when executing the ``gitmap`` command. It builds the file map for a
repository and writes it as JSON (or as a short summary). Status
messages go to standard error so that standard output stays machine
readable.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import click

from gitmap import __version__
from gitmap.history.models import RepositoryMap
from gitmap.history.record_builder import LogParseError
from gitmap.mapper import map_repository
from gitmap.options import MapOptions
from gitmap.vcs.git_client import GitCommandError, GitNotFoundError

# Create a module-level logger. Records from every gitmap module reach the
# handler configured in ``main``.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_GIT_NOT_FOUND = 3
EXIT_GIT_FAILURE = 6
EXIT_MALFORMED_LOG = 7


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=True)


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=True)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def configure_logging(verbose: bool) -> None:
    """Send gitmap log records to standard error.

    Uses force=True so handlers are reconfigured on subsequent invocations
    (important for tests, where standard error is swapped per run).
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    package_logger = logging.getLogger("gitmap")
    package_logger.setLevel(level)
    package_logger.propagate = True


def format_summary(repo_map: RepositoryMap) -> str:
    """Return one line per file: path, last update, creation year, author."""
    lines = []
    for path in sorted(repo_map.files):
        record = repo_map.files[path]
        lines.append(
            f"{path}\t{record.merge_update_date:%Y-%m-%d}\t{record.year}\t{record.author_name}"
        )
    return "\n".join(lines)


@click.command()
@click.argument("repository", default=".", type=click.Path(file_okay=False))
@click.option("--revision", "-r", default="", help="Revision or range to map (default: HEAD).")
@click.option(
    "--git-executable",
    envvar="GITMAP_GIT",
    default="git",
    show_default=True,
    help="Git executable to run.",
)
@click.option(
    "--content-info",
    "content_info",
    envvar="GITMAP_CONTENT_INFO",
    type=click.Path(dir_okay=False),
    help="Content-info JSON document (default: <parent>/assets/git-info/contentGitInfo.json).",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), help="Write JSON to this file.")
@click.option("--summary", is_flag=True, help="Print one line per file instead of JSON.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="gitmap")
def main(
    repository: str,
    revision: str,
    git_executable: str,
    content_info: Optional[str],
    output: Optional[str],
    summary: bool,
    verbose: bool,
) -> None:
    """Map the files of a Git repository to their last commit.

    REPOSITORY is a path inside the repository (default: current directory).
    """
    configure_logging(verbose)

    options = MapOptions(
        repository=repository,
        revision=revision,
        git_executable=git_executable,
        content_info_path=content_info,
    )
    logger.debug("Mapping with options: %s", options)

    try:
        repo_map = map_repository(options)
    except GitNotFoundError as exc:
        print_error(str(exc))
        print_info("Install Git or point --git-executable at it", indent=1)
        raise click.exceptions.Exit(EXIT_GIT_NOT_FOUND)
    except GitCommandError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_GIT_FAILURE)
    except LogParseError as exc:
        print_error(f"Could not parse git log output: {exc}")
        raise click.exceptions.Exit(EXIT_MALFORMED_LOG)
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)

    if summary:
        text = format_summary(repo_map)
    else:
        text = json.dumps(repo_map.to_dict(), indent=2, ensure_ascii=False)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print_success(f"Wrote {len(repo_map.files)} file record(s) to {output}")
    else:
        click.echo(text)
        print_success(f"Mapped {len(repo_map.files)} file(s) in {repo_map.top_level_abs_path}")
