"""
Build the per-file history map from raw ``git log`` output.

The log is produced with a custom format (see
:data:`gitmap.vcs.git_client.LOG_FORMAT`) in which every commit starts with
a record separator, its header fields are separated by unit separators, and
the header is terminated by a group separator followed by the touched paths,
one per line.

Entries are folded into a mapping in the order Git emits them (newest
first by default). The first entry seen for a path provides the record;
every later entry for the same path only moves its creation dates. When a
content-info document is available, its dates may refine the merged
creation and update dates.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from gitmap.history.models import CommitRecord, FileRecord
from gitmap.vcs.git_client import GROUP_SEPARATOR, RECORD_SEPARATOR, UNIT_SEPARATOR


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


GIT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"

HEADER_FIELDS = 8


class LogParseError(Exception):
    """Raised when the log output does not have the expected structure."""

    pass


def _parse_date(value: str, field_name: str) -> datetime:
    try:
        return datetime.strptime(value, GIT_DATE_FORMAT)
    except ValueError as exc:
        raise LogParseError(f"Invalid {field_name} {value!r}: {exc}") from exc


def parse_header(header: str, files: Optional[List[str]] = None) -> CommitRecord:
    """Parse one unit-separated commit header.

    Parameters
    ----------
    header : str
        Hash, abbreviated hash, subject, author name, author email, author
        date, commit date and body. A missing body is treated as empty.
    files : List[str], optional
        Paths touched by the commit.

    Raises
    ------
    LogParseError
        If the field count is wrong or a date cannot be parsed.
    """
    items = header.split(UNIT_SEPARATOR)
    if len(items) == HEADER_FIELDS - 1:
        items.append("")
    if len(items) != HEADER_FIELDS:
        raise LogParseError(
            f"Expected {HEADER_FIELDS} header fields, got {len(items)}: {header!r}"
        )

    return CommitRecord(
        hash=items[0],
        abbreviated_hash=items[1],
        subject=items[2],
        author_name=items[3],
        author_email=items[4],
        author_date=_parse_date(items[5], "author date"),
        commit_date=_parse_date(items[6], "commit date"),
        body=items[7].strip(),
        files=list(files or []),
    )


def parse_log(raw_text: str) -> List[CommitRecord]:
    """Split raw log output into commit records, in emitted order.

    Raises
    ------
    LogParseError
        If any entry is malformed. Nothing is returned in that case.
    """
    entries_str = raw_text.strip("\n" + RECORD_SEPARATOR + "'")
    commits: List[CommitRecord] = []
    for entry in entries_str.split(RECORD_SEPARATOR):
        if not entry.strip():
            continue
        parts = entry.split(GROUP_SEPARATOR)
        if len(parts) != 2:
            raise LogParseError(
                f"Expected header and file list in log entry, got {len(parts)} part(s): {entry!r}"
            )
        header, file_list = parts
        files = [name.strip() for name in file_list.split("\n") if name.strip()]
        commits.append(parse_header(header, files))
    logger.debug("Parsed %d commit(s) from log output", len(commits))
    return commits


def _reconcile(record: FileRecord, external: FileRecord) -> None:
    """Refine the merged dates of ``record`` with content-info evidence.

    An older external creation date and a newer external update date win.
    """
    record.from_content_info = external
    if external.create_date < record.create_date:
        record.merge_create_date = external.create_date
    if external.author_date > record.author_date:
        record.merge_update_date = external.author_date


def build_file_map(
    raw_text: str,
    content_info: Optional[Dict[str, FileRecord]] = None,
) -> Dict[str, FileRecord]:
    """Fold raw log output into a mapping of path to :class:`FileRecord`.

    For a path seen again in a later entry only ``create_date`` and
    ``merge_create_date`` are moved to that entry's author date; the hash,
    author and subject stay those of the first entry. Under Git's default
    newest-first order this makes the record show the last update and the
    oldest commit seen so far as creation.

    Parameters
    ----------
    raw_text : str
        Output of :meth:`gitmap.vcs.git_client.GitClient.log`.
    content_info : Dict[str, FileRecord], optional
        Side-channel records keyed by path.

    Raises
    ------
    LogParseError
        If the output is malformed. No partial map is returned.
    """
    commits = parse_log(raw_text)
    content_info = content_info or {}

    files: Dict[str, FileRecord] = {}
    for commit in commits:
        for filename in commit.files:
            record = files.get(filename)
            if record is None:
                record = FileRecord.from_commit(commit)
                files[filename] = record
            else:
                record.create_date = commit.author_date
                record.merge_create_date = commit.author_date

            external = content_info.get(filename)
            if external is not None:
                _reconcile(record, external)
            record.update_year()

    logger.debug("Built history for %d file(s)", len(files))
    return files
