"""
Version control system (VCS) integration.

This package contains the :class:`GitClient` used to locate the top-level
directory of a repository and to produce the machine-readable file log,
together with the errors it raises.
"""

from .git_client import (  # noqa: F401
    GitClient,
    GitCommandError,
    GitError,
    GitNotFoundError,
)
