"""
Top-level package for gitmap.

gitmap maps the files of a Git repository to the commit that last touched
them, with creation dates, for static-site generators and similar tools.
The main entry point is :func:`gitmap.mapper.map_repository`; the
``gitmap`` command is defined in :mod:`gitmap.cli`.
"""

__all__ = [
    "__version__",
    "MapOptions",
    "map_repository",
    "FileRecord",
    "RepositoryMap",
    "GitError",
    "GitNotFoundError",
    "GitCommandError",
    "LogParseError",
]

__version__ = "0.1.0"

from gitmap.history.models import FileRecord, RepositoryMap  # noqa: E402
from gitmap.history.record_builder import LogParseError  # noqa: E402
from gitmap.mapper import map_repository  # noqa: E402
from gitmap.options import MapOptions  # noqa: E402
from gitmap.vcs.git_client import GitCommandError, GitError, GitNotFoundError  # noqa: E402
