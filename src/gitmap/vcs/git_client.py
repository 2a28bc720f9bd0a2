"""
Git client implementation for gitmap.

This module wraps the two Git invocations the file map needs: locating the
top-level directory of the repository and producing the machine-readable
log. All subprocess calls go through an injectable runner so that unit tests
can substitute a fake process without touching the parser.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Any, Callable, List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler so library use stays quiet until the root logger is
# configured. Records propagate to the handlers installed by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Control characters framing the custom log format.
RECORD_SEPARATOR = "\x1e"
UNIT_SEPARATOR = "\x1f"
GROUP_SEPARATOR = "\x1d"

LOG_FORMAT = (
    "format:%x1e%H%x1f%h%x1f%s%x1f%aN%x1f%aE%x1f%ai%x1f%ci%x1f%b%x1d"
)

# A runner receives the full argument list (executable first) and returns an
# object exposing ``returncode``, ``stdout`` and ``stderr``.
Runner = Callable[[List[str]], Any]


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitNotFoundError(GitError):
    """Raised when the Git executable cannot be found on the search path."""

    def __init__(self, executable: str = "git") -> None:
        super().__init__(f"{executable} executable not found in $PATH")
        self.executable = executable


class GitCommandError(GitError):
    """Raised when Git runs but exits with a non-zero status."""

    def __init__(self, message: str, returncode: int) -> None:
        super().__init__(message)
        self.returncode = returncode


def subprocess_runner(args: List[str]) -> subprocess.CompletedProcess:
    """Run ``args`` with both output streams captured as text."""
    return subprocess.run(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",  # Replace invalid characters instead of failing
    )


class GitClient:
    """Client for reading history from a Git repository."""

    def __init__(
        self,
        repository: str,
        git_executable: str = "git",
        runner: Optional[Runner] = None,
    ) -> None:
        self.repository = str(repository)
        self.git_executable = git_executable
        self.runner = runner or subprocess_runner

    # ------------------------------------------------------------------
    # Command execution
    # ------------------------------------------------------------------
    def _run(self, args: List[str]) -> str:
        """Run a Git command and return its standard output.

        Raises
        ------
        GitNotFoundError
            If the Git executable does not exist.
        GitCommandError
            If the command exits with a non-zero status.
        """
        full_cmd = [self.git_executable] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = self.runner(full_cmd)
        except FileNotFoundError as exc:
            logger.error("Git executable not found: %s", self.git_executable)
            raise GitNotFoundError(self.git_executable) from exc

        if result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stderr,
            )
            message = (result.stderr or "").strip() or (result.stdout or "").strip()
            raise GitCommandError(message, result.returncode)
        return result.stdout

    # ------------------------------------------------------------------
    # Argument construction
    # ------------------------------------------------------------------
    def log_args(self, revision: str = "") -> List[str]:
        """Return the arguments (without the executable) for the file log.

        Rename detection and signature output are disabled so every entry
        reports plain paths. ``revision`` is split on whitespace and passed
        through, so ranges and several refs work as they do on the command
        line; blank means the current branch.
        """
        return [
            "-c", "diff.renames=0",
            "-c", "log.showSignature=0",
            "-C", self.repository,
            "log",
            "--name-only",
            "--no-merges",
            f"--format={LOG_FORMAT}",
        ] + revision.split()

    # ------------------------------------------------------------------
    # Git commands
    # ------------------------------------------------------------------
    def log(self, revision: str = "") -> str:
        """Return the raw custom-format log text for ``revision``."""
        return self._run(self.log_args(revision))

    def top_level_path(self) -> str:
        """Return the absolute top-level directory with forward slashes.

        Uses ``rev-parse --show-cdup`` relative to the absolute repository
        path, so symbolic links in the given path are not resolved.
        """
        out = self._run(["-C", self.repository, "rev-parse", "--show-cdup"])
        cd_up = out.strip()
        abs_path = os.path.abspath(self.repository)
        top_level = os.path.normpath(os.path.join(abs_path, cd_up))
        return top_level.replace(os.sep, "/")
