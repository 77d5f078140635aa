"""Git history queries for the commit-message gate."""

from flowcheck.git.history import resolve_candidate_sequence
from flowcheck.git.lineage import build_reference_set, fetch_remote

__all__ = ["build_reference_set", "fetch_remote", "resolve_candidate_sequence"]
