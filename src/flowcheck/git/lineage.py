"""Reference lineage sets built from git ancestry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flowcheck.errors import ReferenceResolutionError
from flowcheck.git.exec import ExecError, run_git
from flowcheck.policy.types import ReferenceSet

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def fetch_remote(remote: str, *, repo_root: Path) -> None:
    """Refresh remote-tracking refs for ``remote``."""
    try:
        run_git(["fetch", remote], repo_root=repo_root)
    except ExecError as exc:
        raise ReferenceResolutionError(f"Unable to fetch remote `{remote}`: {exc}") from exc


def resolve_ref(ref: str, *, repo_root: Path) -> str:
    """Return the commit id a reference points at."""
    try:
        result = run_git(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], repo_root=repo_root)
    except ExecError as exc:
        raise ReferenceResolutionError(f"Unknown reference `{ref}`") from exc
    sha = result.stdout.strip()
    if not sha:
        raise ReferenceResolutionError(f"Unknown reference `{ref}`")
    return sha


def build_reference_set(ref: str, *, repo_root: Path) -> ReferenceSet:
    """Collect every commit reachable from ``ref``."""
    resolve_ref(ref, repo_root=repo_root)
    try:
        result = run_git(["rev-list", ref], repo_root=repo_root)
    except ExecError as exc:
        raise ReferenceResolutionError(f"Unable to traverse ancestry of `{ref}`: {exc}") from exc
    members = frozenset(result.lines())
    logger.debug("lineage %s: %d commits", ref, len(members))
    return ReferenceSet(ref=ref, members=members)
