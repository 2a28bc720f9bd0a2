"""
Options for :func:`gitmap.mapper.map_repository`.

All settings that the mapper needs are carried explicitly in a
:class:`MapOptions` value; there is no module-level state to patch.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from gitmap.vcs.git_client import Runner


@dataclass
class MapOptions:
    """Settings for building a repository file map.

    Attributes
    ----------
    repository : str
        Path to the repository (or a directory inside it) to map.
    revision : str
        Blank or ``HEAD`` for the currently active revision; anything else
        is passed to ``git log`` as-is (ranges, refs).
    git_executable : str
        Name or path of the Git executable.
    runner : Runner, optional
        Replacement for the subprocess runner, mainly for tests.
    content_info_path : str or Path, optional
        Location of the content-info document. Derived from the repository
        path when not given.
    """

    repository: str = "."
    revision: str = ""
    git_executable: str = "git"
    runner: Optional[Runner] = None
    content_info_path: Optional[Union[str, Path]] = None
