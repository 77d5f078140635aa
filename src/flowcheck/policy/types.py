"""Commit policy types."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_message(raw: str) -> str:
    """Trim a commit message and collapse every whitespace run to one space."""
    return _WHITESPACE_RUN.sub(" ", raw.strip())


@dataclass(frozen=True)
class CommitRecord:
    """A commit identifier paired with its raw message."""

    sha: str
    message: str

    @property
    def normalized_message(self) -> str:
        return normalize_message(self.message)


CandidateSequence = tuple[CommitRecord, ...]


@dataclass(frozen=True)
class ReferenceSet:
    """Commit identifiers reachable from one reference."""

    ref: str
    members: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def empty(cls, ref: str = "") -> ReferenceSet:
        return cls(ref=ref, members=frozenset())

    def __contains__(self, sha: object) -> bool:
        return sha in self.members

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class PolicyPattern:
    """Compiled whole-string commit message pattern."""

    source: str
    regex: re.Pattern[str]
    is_default: bool = False


class VerdictStatus(str, Enum):
    """Classification of a single candidate commit."""

    LINEAGE_EXCLUDED = "lineage_excluded"
    EXEMPT = "exempt"
    CONFORMING = "conforming"
    VIOLATING = "violating"


@dataclass(frozen=True)
class CommitVerdict:
    """Per-commit evaluation outcome."""

    position: int  # 1-based, newest-first
    sha: str
    message: str  # normalized; empty for lineage-excluded commits
    status: VerdictStatus
    reason: str | None = None


@dataclass(frozen=True)
class Violation:
    """A candidate commit whose message fails the pattern."""

    position: int
    sha: str
    message: str


@dataclass(frozen=True)
class ConformanceReport:
    """Aggregate verdict over a candidate sequence."""

    verdicts: tuple[CommitVerdict, ...]
    violations: tuple[Violation, ...]
    squash_depth: int | None
    pattern_source: str

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def examined(self) -> int:
        return len(self.verdicts)

    def count(self, status: VerdictStatus) -> int:
        return sum(1 for verdict in self.verdicts if verdict.status is status)
