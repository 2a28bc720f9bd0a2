"""
Content-info loader for gitmap.

Some sites keep a JSON document next to the repository that records
commit information gathered elsewhere, for example before content was
migrated into Git. It lives at ``assets/git-info/contentGitInfo.json``
under the repository's parent directory and maps file paths to records
with at least ``createDate`` and ``authorDate`` (ISO-8601 timestamps).

If the document is missing, malformed, or has records without the
required dates, a :class:`ContentInfoError` is raised. Callers treat
that as "no extra information" rather than as a failure.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

from gitmap.history.models import FileRecord


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where the root logger is not configured.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONTENT_INFO_RELATIVE_PATH = os.path.join("assets", "git-info", "contentGitInfo.json")


class ContentInfoError(Exception):
    """Raised when the content-info document is missing or invalid."""

    pass


def default_content_info_path(repository: Union[str, Path]) -> Path:
    """Return where the content-info document for ``repository`` lives.

    The document sits under the parent directory of the repository path
    as given, so ``site/content`` looks in ``site/assets/git-info``.
    """
    parent_dir = os.path.dirname(str(repository))
    return Path(parent_dir, CONTENT_INFO_RELATIVE_PATH)


def load_content_info(path: Union[str, Path]) -> Dict[str, FileRecord]:
    """Load the content-info document at ``path``.

    Returns:
        A dictionary mapping file path to the :class:`FileRecord` built
        from its entry.

    Raises:
        ContentInfoError: If the file does not exist, cannot be read, is
            not a JSON object of objects, or an entry lacks a valid
            ``createDate`` or ``authorDate``.
    """
    content_path = Path(path)

    if not content_path.exists():
        raise ContentInfoError(f"Content-info file does not exist: {content_path}")

    try:
        content = content_path.read_text(encoding="utf-8")
        data: Any = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse content-info file: %s", exc)
        raise ContentInfoError(
            f"Invalid JSON in {content_path.name}: {exc}"
        ) from exc

    if not isinstance(data, dict):
        raise ContentInfoError(
            f"Content-info file must contain a JSON object, got {type(data).__name__}"
        )

    records: Dict[str, FileRecord] = {}
    for filename, entry in data.items():
        if not isinstance(entry, dict):
            raise ContentInfoError(f"Entry for '{filename}' must be an object")
        try:
            records[filename] = FileRecord.from_dict(entry)
        except KeyError as exc:
            raise ContentInfoError(
                f"Entry for '{filename}' is missing required key {exc}"
            ) from exc
        except ValueError as exc:
            raise ContentInfoError(f"Entry for '{filename}' has an invalid date: {exc}") from exc

    logger.debug("Loaded %d content-info record(s) from: %s", len(records), content_path)
    return records
