"""Error taxonomy for the commit-message gate.

A policy violation is never raised; it is reported through
``ConformanceReport``. Everything here aborts the run.
"""

from __future__ import annotations

POLICY_CONFIG_PARSE_ERROR = "POLICY_CONFIG_PARSE_ERROR"
POLICY_CONFIG_INVALID = "POLICY_CONFIG_INVALID"
MERGE_TARGET_MISSING = "MERGE_TARGET_MISSING"
POLICY_CONFIG_MISSING = "POLICY_CONFIG_MISSING"


class PatternCompileError(ValueError):
    """Raised when an override commit pattern is not a valid regex."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"Invalid commit pattern {source!r}: {detail}")
        self.source = source
        self.detail = detail


class ReferenceResolutionError(RuntimeError):
    """Raised when a reference cannot be fetched, resolved or traversed."""


class HistoryResolutionError(RuntimeError):
    """Raised when the candidate commit range cannot be computed."""


class ShallowHistoryError(HistoryResolutionError):
    """Raised when the clone is shallow and ancestry is incomplete."""


class PolicyConfigError(ValueError):
    """Gate configuration validation error."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = POLICY_CONFIG_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code
