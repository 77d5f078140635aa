"""Commit message policy pipeline: exemptions, pattern, evaluation, remediation."""

from flowcheck.policy.evaluator import evaluate
from flowcheck.policy.exemptions import DEFAULT_EXEMPTIONS, ExemptionRules, is_exempt
from flowcheck.policy.pattern import DEFAULT_PATTERN_SOURCE, compile_pattern, matches
from flowcheck.policy.remediation import RemediationPlan, plan_remediation
from flowcheck.policy.types import (
    CommitRecord,
    ConformanceReport,
    PolicyPattern,
    ReferenceSet,
    Violation,
    normalize_message,
)

__all__ = [
    "DEFAULT_EXEMPTIONS",
    "DEFAULT_PATTERN_SOURCE",
    "CommitRecord",
    "ConformanceReport",
    "ExemptionRules",
    "PolicyPattern",
    "ReferenceSet",
    "RemediationPlan",
    "Violation",
    "compile_pattern",
    "evaluate",
    "is_exempt",
    "matches",
    "normalize_message",
    "plan_remediation",
]
