"""
Map a Git repository's files to their revision information.

:func:`map_repository` is the entry point used by the CLI and by library
callers. It reads the optional content-info document, asks Git for the
top-level directory and the file log, and folds the log into a
:class:`gitmap.history.models.RepositoryMap`.
"""

from __future__ import annotations

import logging
from typing import Dict

from gitmap.content_info.loader import (
    ContentInfoError,
    default_content_info_path,
    load_content_info,
)
from gitmap.history.models import FileRecord, RepositoryMap
from gitmap.history.record_builder import build_file_map
from gitmap.options import MapOptions
from gitmap.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def _read_content_info(options: MapOptions) -> Dict[str, FileRecord]:
    target_path = options.content_info_path or default_content_info_path(options.repository)
    try:
        return load_content_info(target_path)
    except ContentInfoError as exc:
        logger.warning("Content info not used (%s): %s", target_path, exc)
        return {}


def map_repository(options: MapOptions) -> RepositoryMap:
    """Create a :class:`RepositoryMap` for the repository in ``options``.

    Raises
    ------
    GitNotFoundError
        If the Git executable is not installed.
    GitCommandError
        If Git reports a failure, e.g. the path is not a repository.
    LogParseError
        If the log output is malformed.
    """
    content_info = _read_content_info(options)

    client = GitClient(
        options.repository,
        git_executable=options.git_executable,
        runner=options.runner,
    )
    top_level_path = client.top_level_path()
    raw_log = client.log(options.revision)
    files = build_file_map(raw_log, content_info)

    logger.debug("Mapped %d file(s) in %s", len(files), top_level_path)
    return RepositoryMap(top_level_abs_path=top_level_path, files=files)
