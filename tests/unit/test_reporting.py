"""Tests for gate status reporters."""

from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from flowcheck.reporting import ConsoleReporter, GitHubActionsReporter, escape_workflow_data


def test_escape_workflow_data() -> None:
    assert escape_workflow_data("100% done\r\nnext") == "100%25 done%0D%0Anext"


def test_github_reporter_emits_single_error_command(tmp_path: Path) -> None:
    stream = io.StringIO()
    summary = tmp_path / "summary.md"
    reporter = GitHubActionsReporter(stream, summary_path=summary)

    reporter.info("Number of commits which do not follow the proper format: 1")
    reporter.fail("ERROR: bad\n- Commit abc\n")

    lines = stream.getvalue().splitlines()
    assert lines[0] == "Number of commits which do not follow the proper format: 1"
    assert lines[1] == "::error::ERROR: bad%0A- Commit abc"
    assert len(lines) == 2
    assert reporter.failure == "ERROR: bad\n- Commit abc\n"
    assert "- Commit abc" in summary.read_text(encoding="utf-8")


def test_github_reporter_without_summary(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_STEP_SUMMARY", raising=False)
    reporter = GitHubActionsReporter.from_environment(io.StringIO())
    assert reporter.summary_path is None


def test_console_reporter_records_failure() -> None:
    buffer = io.StringIO()
    reporter = ConsoleReporter(Console(file=buffer, width=200, color_system=None))

    reporter.info("All commit messages follow the required pattern.")
    reporter.fail("ERROR: [brackets] survive markup")

    output = buffer.getvalue()
    assert "All commit messages follow the required pattern." in output
    assert "ERROR: [brackets] survive markup" in output
    assert reporter.failure == "ERROR: [brackets] survive markup"
