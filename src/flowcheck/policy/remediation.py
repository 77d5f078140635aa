"""Turn a failing conformance report into squash instructions."""

from __future__ import annotations

from dataclasses import dataclass

from flowcheck.policy.types import ConformanceReport

DEFAULT_EXAMPLE_MESSAGE = "feat/test: Combined commit message for feature progress"


@dataclass(frozen=True)
class RemediationPlan:
    """Squash depth plus the steps an author follows to fix the branch."""

    required: bool
    squash_depth: int = 0
    violation_lines: tuple[str, ...] = ()
    rebase_steps: tuple[str, ...] = ()
    reset_steps: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()

    def render(self) -> str:
        """Render the single user-facing failure message."""
        if not self.required:
            return ""
        lines = [
            "ERROR: Some commits do not follow the required format. "
            "The following commits need to be fixed:",
            *self.violation_lines,
            f"Please squash the last {self.squash_depth} commits into a single commit "
            "with a proper commit message.",
            "Method 1 (in case during rebase you encounter difficulty please abort and follow method 2):",
            *self.rebase_steps,
            "Please ensure your commit messages follow the required pattern.",
            "Method 2 (if you don't want to squash commits):",
            *self.reset_steps,
            *self.notes,
        ]
        return "\n".join(lines) + "\n"


NO_REMEDIATION = RemediationPlan(required=False)


def _rebase_steps(depth: int, example_message: str) -> tuple[str, ...]:
    return (
        f"1. git rebase -i HEAD~{depth}",
        f"2. Your default text editor will open with a list of the last {depth} commits, "
        'each starting with the word "pick".',
        '   Leave the first commit as "pick" (this is the one you\'re squashing into).',
        '   Change the word "pick" to "squash" for the next commits.',
        "3. Save and close the editor.",
        "4. After closing the editor, another editor window will open for you to combine "
        "the commit messages or write a new one.",
        "   Write your new commit message according to the desired format. For example:",
        f'   "{example_message}"',
        "5. Save and close the editor. Git will now squash the commits into a single commit "
        "with your new message.",
        "6. git push --force",
    )


def _reset_steps(depth: int, example_message: str) -> tuple[str, ...]:
    return (
        f"1. git reset --soft HEAD~{depth}",
        f'2. commit with proper format such as git commit -m "{example_message}"',
        "3. git push --force",
    )


def plan_remediation(
    report: ConformanceReport,
    *,
    example_message: str = DEFAULT_EXAMPLE_MESSAGE,
) -> RemediationPlan:
    """Build the remediation plan for a report; passing reports need none."""
    if report.passed:
        return NO_REMEDIATION

    depth = report.squash_depth
    if depth is None:
        raise ValueError("Failing conformance report carries no squash depth")

    violation_lines = tuple(
        f'- Commit {violation.sha} does not follow the required format. Message: "{violation.message}"'
        for violation in report.violations
    )
    notes: tuple[str, ...] = ()
    if depth > len(report.violations):
        notes = (
            f"Note: {depth - len(report.violations)} other commit(s) sit between "
            "the tip and the oldest offending commit and are included in the squash.",
        )
    return RemediationPlan(
        required=True,
        squash_depth=depth,
        violation_lines=violation_lines,
        rebase_steps=_rebase_steps(depth, example_message),
        reset_steps=_reset_steps(depth, example_message),
        notes=notes,
    )
