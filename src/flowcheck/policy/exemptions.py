"""Structural exemptions from the commit message policy."""

from __future__ import annotations

from dataclasses import dataclass

RELEASE_MARKER = "chore(release)"
MERGE_MARKER = "Merge"
DEPENDENCY_BUMP_MARKER = "Bump the"


@dataclass(frozen=True)
class ExemptionRules:
    """Markers that excuse a commit regardless of the pattern.

    ``contains`` markers exempt a message anywhere in its text; ``prefixes``
    exempt only when the message starts with them.
    """

    contains: tuple[str, ...] = (RELEASE_MARKER,)
    prefixes: tuple[str, ...] = (MERGE_MARKER, DEPENDENCY_BUMP_MARKER)


DEFAULT_EXEMPTIONS = ExemptionRules()


def exemption_reason(
    normalized_message: str,
    rules: ExemptionRules = DEFAULT_EXEMPTIONS,
) -> str | None:
    """Return a description of the matching marker, or None."""
    for marker in rules.contains:
        if marker and marker in normalized_message:
            return f"contains {marker!r}"
    for marker in rules.prefixes:
        if marker and normalized_message.startswith(marker):
            return f"starts with {marker!r}"
    return None


def is_exempt(normalized_message: str, rules: ExemptionRules = DEFAULT_EXEMPTIONS) -> bool:
    return exemption_reason(normalized_message, rules) is not None
