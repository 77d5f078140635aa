"""Classify candidate commits and locate the oldest violation."""

from __future__ import annotations

from collections.abc import Sequence

from flowcheck.policy.exemptions import DEFAULT_EXEMPTIONS, ExemptionRules, exemption_reason
from flowcheck.policy.pattern import matches
from flowcheck.policy.types import (
    CommitRecord,
    CommitVerdict,
    ConformanceReport,
    PolicyPattern,
    ReferenceSet,
    VerdictStatus,
    Violation,
)


def evaluate(
    candidates: Sequence[CommitRecord],
    base_set: ReferenceSet,
    main_set: ReferenceSet,
    pattern: PolicyPattern,
    *,
    exemptions: ExemptionRules = DEFAULT_EXEMPTIONS,
) -> ConformanceReport:
    """Evaluate a newest-first candidate sequence against the policy.

    Commits already reachable from either reference are skipped even if the
    caller's sequence was computed without that exclusion. The squash depth
    is the 1-based position of the structurally oldest violation, i.e. the
    last one met while walking from the tip.
    """
    verdicts: list[CommitVerdict] = []
    violations: list[Violation] = []
    oldest_violation_position: int | None = None

    for position, record in enumerate(candidates, start=1):
        if record.sha in base_set or record.sha in main_set:
            verdicts.append(
                CommitVerdict(
                    position=position,
                    sha=record.sha,
                    message="",
                    status=VerdictStatus.LINEAGE_EXCLUDED,
                    reason=base_set.ref if record.sha in base_set else main_set.ref,
                )
            )
            continue

        message = record.normalized_message
        reason = exemption_reason(message, exemptions)
        if reason is not None:
            verdicts.append(
                CommitVerdict(
                    position=position,
                    sha=record.sha,
                    message=message,
                    status=VerdictStatus.EXEMPT,
                    reason=reason,
                )
            )
            continue

        if matches(pattern, message):
            verdicts.append(
                CommitVerdict(
                    position=position,
                    sha=record.sha,
                    message=message,
                    status=VerdictStatus.CONFORMING,
                )
            )
            continue

        verdicts.append(
            CommitVerdict(
                position=position,
                sha=record.sha,
                message=message,
                status=VerdictStatus.VIOLATING,
            )
        )
        violations.append(Violation(position=position, sha=record.sha, message=message))
        oldest_violation_position = position

    return ConformanceReport(
        verdicts=tuple(verdicts),
        violations=tuple(violations),
        squash_depth=oldest_violation_position,
        pattern_source=pattern.source,
    )
