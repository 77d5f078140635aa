"""Commit message gate: lineage, candidates, evaluation, remediation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from flowcheck.artifacts import write_report_artifacts
from flowcheck.config import GateConfig
from flowcheck.git.history import resolve_candidate_sequence
from flowcheck.git.lineage import build_reference_set, fetch_remote
from flowcheck.policy.evaluator import evaluate
from flowcheck.policy.pattern import compile_pattern
from flowcheck.policy.remediation import RemediationPlan, plan_remediation
from flowcheck.policy.types import ConformanceReport
from flowcheck.reporting import StatusReporter

logger = logging.getLogger(__name__)

PASS_MESSAGE = "All commit messages follow the required pattern."


@dataclass(frozen=True)
class GateResult:
    """Outcome of one gate run."""

    config: GateConfig
    report: ConformanceReport
    plan: RemediationPlan
    artifacts: tuple[Path, ...] = ()

    @property
    def passed(self) -> bool:
        return self.report.passed


def run_commit_message_gate(config: GateConfig, *, reporter: StatusReporter) -> GateResult:
    """Check every commit new to the candidate branch against the message policy.

    Args:
        config: Resolved gate configuration
        reporter: Receives the violation count and the final verdict

    Returns:
        GateResult with the conformance report and remediation plan

    Raises:
        PatternCompileError: Before any git query, if the override pattern is invalid
        ReferenceResolutionError: If fetching or resolving a reference fails
        HistoryResolutionError: If the candidate range cannot be computed
    """
    pattern = compile_pattern(config.pattern_source)
    repo_root = config.repo_root

    if config.fetch and config.remote:
        logger.debug("fetching %s", config.remote)
        fetch_remote(config.remote, repo_root=repo_root)

    base_set = build_reference_set(config.merge_target_ref, repo_root=repo_root)
    main_set = build_reference_set(config.trunk_target_ref, repo_root=repo_root)
    candidates = resolve_candidate_sequence(
        config.candidate_ref,
        config.merge_target_ref,
        repo_root=repo_root,
    )

    report = evaluate(candidates, base_set, main_set, pattern, exemptions=config.exemptions)
    plan = plan_remediation(report, example_message=config.example_message)
    result = GateResult(config=config, report=report, plan=plan)

    if config.out_dir is not None:
        paths = write_report_artifacts(result, config.out_dir)
        result = GateResult(config=config, report=report, plan=plan, artifacts=paths)

    reporter.info(
        f"Number of commits which do not follow the proper format: {len(report.violations)}"
    )
    if plan.required:
        reporter.fail(plan.render())
    else:
        reporter.info(PASS_MESSAGE)
    return result
