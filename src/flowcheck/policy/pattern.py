"""Commit message pattern compilation and matching."""

from __future__ import annotations

import re

from flowcheck.errors import PatternCompileError
from flowcheck.policy.types import PolicyPattern

CHANGE_TYPES: tuple[str, ...] = (
    "feat",
    "fix",
    "build",
    "breaking",
    "chore",
    "ci",
    "docs",
    "perf",
    "refactor",
    "revert",
    "test",
)

DEFAULT_PATTERN_SOURCE = (
    r"^(" + "|".join(CHANGE_TYPES) + r")/([\w-]+)?(:\s+)?(.+)?$"
)


def compile_pattern(source: str | None = None) -> PolicyPattern:
    """Compile an override pattern, or the default grammar when none is given.

    Raises:
        PatternCompileError: If ``source`` is not a valid regular expression.
    """
    if not source:
        return PolicyPattern(
            source=DEFAULT_PATTERN_SOURCE,
            regex=re.compile(DEFAULT_PATTERN_SOURCE),
            is_default=True,
        )
    try:
        regex = re.compile(source)
    except re.error as exc:
        raise PatternCompileError(source, str(exc)) from exc
    return PolicyPattern(source=source, regex=regex, is_default=False)


def matches(pattern: PolicyPattern, normalized_message: str) -> bool:
    """Return True when the whole normalized message matches the pattern."""
    return pattern.regex.fullmatch(normalized_message) is not None
