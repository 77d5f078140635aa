"""Tests for remediation plans built from conformance reports."""

from __future__ import annotations

import pytest

from flowcheck.policy.evaluator import evaluate
from flowcheck.policy.pattern import compile_pattern
from flowcheck.policy.remediation import DEFAULT_EXAMPLE_MESSAGE, NO_REMEDIATION, plan_remediation
from flowcheck.policy.types import CommitRecord, ConformanceReport, ReferenceSet


def _report(*messages: str) -> ConformanceReport:
    records = tuple(CommitRecord(sha=f"sha{i}", message=m) for i, m in enumerate(messages, start=1))
    return evaluate(records, ReferenceSet.empty("b"), ReferenceSet.empty("m"), compile_pattern())


def test_passing_report_needs_no_remediation() -> None:
    plan = plan_remediation(_report("feat/a: one", "fix/b: two"))
    assert plan is NO_REMEDIATION
    assert not plan.required
    assert plan.render() == ""


def test_plan_lists_every_violation_in_order() -> None:
    plan = plan_remediation(_report("oops", "feat/a: fine", "another  oops"))

    assert plan.required
    assert plan.squash_depth == 3
    assert plan.violation_lines == (
        '- Commit sha1 does not follow the required format. Message: "oops"',
        '- Commit sha3 does not follow the required format. Message: "another oops"',
    )


def test_rendered_text_is_parameterized_by_depth() -> None:
    text = plan_remediation(_report("feat/a: ok", "bad one")).render()

    assert text.startswith("ERROR: Some commits do not follow the required format.")
    assert "Please squash the last 2 commits into a single commit" in text
    assert "1. git rebase -i HEAD~2" in text
    assert "1. git reset --soft HEAD~2" in text
    assert "6. git push --force" in text
    assert f'"{DEFAULT_EXAMPLE_MESSAGE}"' in text
    assert "Method 2 (if you don't want to squash commits):" in text


def test_plan_notes_clean_commits_inside_squash_range() -> None:
    plan = plan_remediation(_report("feat/a: ok", "fix/b: ok", "bad"))
    assert plan.notes
    assert "2 other commit(s)" in plan.notes[0]

    contiguous = plan_remediation(_report("bad", "worse"))
    assert contiguous.notes == ()


def test_custom_example_message_is_used() -> None:
    plan = plan_remediation(_report("bad"), example_message="fix/PROJ-1: summary")
    assert 'git commit -m "fix/PROJ-1: summary"' in plan.render()


def test_failing_report_without_depth_is_rejected() -> None:
    broken = ConformanceReport(
        verdicts=(),
        violations=_report("bad").violations,
        squash_depth=None,
        pattern_source="x",
    )
    with pytest.raises(ValueError, match="no squash depth"):
        plan_remediation(broken)
