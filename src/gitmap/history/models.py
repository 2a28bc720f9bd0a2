"""
Data models for the file history map.

A :class:`CommitRecord` is one commit as reported by ``git log``. A
:class:`FileRecord` is the per-file result: the fields of the commit that
first touched the file in log order, plus creation and update dates that
may be refined by a side-channel content-info document. The
:class:`RepositoryMap` bundles the records with the repository's top-level
path.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp that carries a UTC offset.

    A trailing ``Z`` is accepted for UTC and fractional seconds of any
    length (Go writes up to nine digits) are cut to microseconds. Naive
    timestamps are rejected because they cannot be compared with commit
    dates.
    """
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes three or six fraction digits.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {value!r} has no UTC offset")
    return parsed


def format_timestamp(value: datetime) -> str:
    text = value.isoformat()
    # Git and the content-info producers write UTC as "Z".
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


@dataclass(frozen=True)
class CommitRecord:
    """Representation of a single commit from the log.

    Attributes
    ----------
    hash : str
        Full commit hash.
    abbreviated_hash : str
        Abbreviated commit hash.
    subject : str
        The first line of the commit message.
    author_name : str
        Author name, respecting ``.mailmap``.
    author_email : str
        Author email address, respecting ``.mailmap``.
    author_date : datetime
        When the change was authored.
    commit_date : datetime
        When the change was committed.
    body : str
        The commit message body without the subject.
    files : List[str]
        Paths touched by the commit, in the order Git reported them.
    """

    hash: str
    abbreviated_hash: str
    subject: str
    author_name: str
    author_email: str
    author_date: datetime
    commit_date: datetime
    body: str = ""
    files: List[str] = field(default_factory=list)


@dataclass
class FileRecord:
    """Git revision information for one file."""

    hash: str
    abbreviated_hash: str
    subject: str
    author_name: str
    author_email: str
    author_date: datetime
    commit_date: datetime
    create_date: datetime
    merge_create_date: datetime
    merge_update_date: datetime
    year: str = ""
    body: str = ""
    from_content_info: Optional["FileRecord"] = None

    def __post_init__(self) -> None:
        if not self.year:
            self.update_year()

    @classmethod
    def from_commit(cls, commit: CommitRecord) -> "FileRecord":
        """Seed a record entirely from ``commit``."""
        return cls(
            hash=commit.hash,
            abbreviated_hash=commit.abbreviated_hash,
            subject=commit.subject,
            author_name=commit.author_name,
            author_email=commit.author_email,
            author_date=commit.author_date,
            commit_date=commit.commit_date,
            create_date=commit.author_date,
            merge_create_date=commit.author_date,
            merge_update_date=commit.author_date,
            body=commit.body,
        )

    def update_year(self) -> None:
        """Recompute ``year`` from ``merge_create_date``."""
        self.year = f"{self.merge_create_date.year:04d}"

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable dictionary.

        Keys follow the content-info document so that output can be fed
        back as a side-channel document.
        """
        return {
            "hash": self.hash,
            "abbreviatedHash": self.abbreviated_hash,
            "subject": self.subject,
            "authorName": self.author_name,
            "authorEmail": self.author_email,
            "authorDate": format_timestamp(self.author_date),
            "commitDate": format_timestamp(self.commit_date),
            "createDate": format_timestamp(self.create_date),
            "FromGetJson": (
                self.from_content_info.to_dict() if self.from_content_info else None
            ),
            "mergeCreateDate": format_timestamp(self.merge_create_date),
            "mergeUpdateDate": format_timestamp(self.merge_update_date),
            "year": self.year,
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRecord":
        """Build a record from a content-info entry.

        ``createDate`` and ``authorDate`` are required. Missing optional
        dates fall back to ``authorDate``; missing text fields are empty.

        Raises
        ------
        KeyError
            If a required key is missing.
        ValueError
            If a timestamp cannot be parsed.
        """
        create_date = parse_timestamp(data["createDate"])
        author_date = parse_timestamp(data["authorDate"])

        def optional_date(key: str, default: datetime) -> datetime:
            value = data.get(key)
            return parse_timestamp(value) if value else default

        return cls(
            hash=str(data.get("hash") or ""),
            abbreviated_hash=str(data.get("abbreviatedHash") or ""),
            subject=str(data.get("subject") or ""),
            author_name=str(data.get("authorName") or ""),
            author_email=str(data.get("authorEmail") or ""),
            author_date=author_date,
            commit_date=optional_date("commitDate", author_date),
            create_date=create_date,
            merge_create_date=optional_date("mergeCreateDate", create_date),
            merge_update_date=optional_date("mergeUpdateDate", author_date),
            year=str(data.get("year") or ""),
            body=str(data.get("body") or ""),
        )


@dataclass(frozen=True)
class RepositoryMap:
    """The files of a Git repository and where the repository lives.

    ``top_level_abs_path`` follows Git's path conventions: forward slashes
    on every platform, symbolic links in the given path left unresolved.
    """

    top_level_abs_path: str
    files: Dict[str, FileRecord] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topLevelAbsPath": self.top_level_abs_path,
            "files": {path: record.to_dict() for path, record in self.files.items()},
        }
