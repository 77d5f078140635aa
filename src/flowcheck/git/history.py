"""Candidate commit range resolution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flowcheck.errors import HistoryResolutionError, ShallowHistoryError
from flowcheck.git.exec import ExecError, run_git
from flowcheck.policy.types import CandidateSequence, CommitRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_full_history(*, repo_root: Path) -> None:
    """Refuse shallow clones, whose ancestry walks stop at the graft point."""
    try:
        result = run_git(["rev-parse", "--is-shallow-repository"], repo_root=repo_root)
    except ExecError as exc:
        raise HistoryResolutionError(f"Unable to inspect repository at {repo_root}: {exc}") from exc
    if result.stdout.strip() == "true":
        raise ShallowHistoryError(
            "Repository is a shallow clone; commit ancestry is incomplete. "
            "Fetch full history (e.g. `git fetch --unshallow`, or `fetch-depth: 0` "
            "for actions/checkout) and retry."
        )


def read_commit_message(sha: str, *, repo_root: Path) -> str:
    """Return the raw message body of one commit."""
    try:
        result = run_git(["log", "--format=%B", "-n", "1", sha], repo_root=repo_root)
    except ExecError as exc:
        raise HistoryResolutionError(f"Unable to read message of commit {sha}: {exc}") from exc
    return result.stdout


def list_candidate_ids(candidate_ref: str, merge_target_ref: str, *, repo_root: Path) -> list[str]:
    """Commits reachable from ``candidate_ref`` but not ``merge_target_ref``, newest first."""
    try:
        result = run_git(["rev-list", candidate_ref, f"^{merge_target_ref}"], repo_root=repo_root)
    except ExecError as exc:
        raise HistoryResolutionError(
            f"Unable to compute commits on `{candidate_ref}` not on `{merge_target_ref}`: {exc}"
        ) from exc
    return result.lines()


def resolve_candidate_sequence(
    candidate_ref: str,
    merge_target_ref: str,
    *,
    repo_root: Path,
) -> CandidateSequence:
    """Build the newest-first candidate sequence with commit messages."""
    ensure_full_history(repo_root=repo_root)
    shas = list_candidate_ids(candidate_ref, merge_target_ref, repo_root=repo_root)
    logger.debug("candidates %s ^%s: %d commits", candidate_ref, merge_target_ref, len(shas))
    return tuple(
        CommitRecord(sha=sha, message=read_commit_message(sha, repo_root=repo_root))
        for sha in shas
    )
