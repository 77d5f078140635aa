"""JSON and Markdown report artifacts for gate runs."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TextIO

from flowcheck.policy.types import VerdictStatus

if TYPE_CHECKING:
    from pathlib import Path

    from flowcheck.gate import GateResult

REPORT_JSON_FILENAME = "COMMIT_MESSAGE_REPORT.json"
REPORT_MD_FILENAME = "COMMIT_MESSAGE_REPORT.md"
SCHEMA_VERSION = "1.0"


def canonical_dumps(obj: Any) -> str:
    """Serialize a JSON-compatible object with stable canonical formatting."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def result_to_dict(result: GateResult) -> dict[str, Any]:
    report = result.report
    return {
        "schema_version": SCHEMA_VERSION,
        "status": "passed" if report.passed else "failed",
        "refs": {
            "candidate": result.config.candidate_ref,
            "merge_target": result.config.merge_target_ref,
            "trunk": result.config.trunk_target_ref,
        },
        "pattern": {
            "source": report.pattern_source,
            "default": result.config.pattern_source is None,
        },
        "counts": {
            "examined": report.examined,
            "lineage_excluded": report.count(VerdictStatus.LINEAGE_EXCLUDED),
            "exempt": report.count(VerdictStatus.EXEMPT),
            "conforming": report.count(VerdictStatus.CONFORMING),
            "violating": len(report.violations),
        },
        "squash_depth": report.squash_depth,
        "violations": [
            {"position": v.position, "sha": v.sha, "message": v.message}
            for v in report.violations
        ],
        "verdicts": [
            {
                "position": verdict.position,
                "sha": verdict.sha,
                "status": verdict.status.value,
                "message": verdict.message,
                "reason": verdict.reason,
            }
            for verdict in report.verdicts
        ],
        "remediation": result.plan.render() or None,
    }


def _write_markdown(f: TextIO, result: GateResult) -> None:
    report = result.report
    status_emoji = "✅" if report.passed else "❌"
    f.write("# Commit Message Report\n\n")
    f.write(f"**Status**: {status_emoji} {'PASSED' if report.passed else 'FAILED'}\n\n")
    f.write(f"**Candidate**: `{result.config.candidate_ref}`\n")
    f.write(f"**Merge target**: `{result.config.merge_target_ref}`\n")
    f.write(f"**Trunk**: `{result.config.trunk_target_ref}`\n")
    f.write(f"**Pattern**: `{report.pattern_source}`\n\n")

    f.write("## Commits\n\n")
    if not report.verdicts:
        f.write("No commits to check.\n\n")
    else:
        f.write("| # | Commit | Status | Message |\n")
        f.write("|---|--------|--------|---------|\n")
        for verdict in report.verdicts:
            message = verdict.message.replace("|", "\\|")
            f.write(f"| {verdict.position} | `{verdict.sha[:12]}` | {verdict.status.value} | {message} |\n")
        f.write("\n")

    if result.plan.required:
        f.write("## Remediation\n\n")
        f.write(f"**Squash depth**: {result.plan.squash_depth}\n\n")
        f.write("```text\n")
        f.write(result.plan.render())
        f.write("```\n")


def write_report_artifacts(result: GateResult, out_dir: Path) -> tuple[Path, Path]:
    """Write the JSON and Markdown reports; return their paths."""
    out_dir.mkdir(parents=True, exist_ok=True)
    json_path = out_dir / REPORT_JSON_FILENAME
    json_path.write_text(f"{canonical_dumps(result_to_dict(result))}\n", encoding="utf-8")

    md_path = out_dir / REPORT_MD_FILENAME
    with open(md_path, "w", encoding="utf-8") as f:
        _write_markdown(f, result)
    return json_path, md_path
