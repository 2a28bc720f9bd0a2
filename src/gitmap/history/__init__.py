"""
History parsing and record merging.

This package turns raw ``git log`` output into per-file records. See
:mod:`gitmap.history.record_builder` for the parsing and merge rules and
:mod:`gitmap.history.models` for the records themselves.
"""

from .models import CommitRecord, FileRecord, RepositoryMap  # noqa: F401
from .record_builder import LogParseError, build_file_map, parse_log  # noqa: F401
