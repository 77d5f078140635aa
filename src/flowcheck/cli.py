"""flowcheck CLI - commit message gate commands."""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from flowcheck import __version__
from flowcheck.config import ensure_default_policy, resolve_gate_config, resolve_message_policy
from flowcheck.errors import (
    HistoryResolutionError,
    PatternCompileError,
    PolicyConfigError,
    ReferenceResolutionError,
)
from flowcheck.gate import run_commit_message_gate
from flowcheck.policy.exemptions import exemption_reason
from flowcheck.policy.pattern import compile_pattern, matches
from flowcheck.policy.types import normalize_message
from flowcheck.reporting import ConsoleReporter, GitHubActionsReporter, StatusReporter

EXIT_POLICY_VIOLATION = 2

cli = typer.Typer(
    name="flowcheck",
    help="flowcheck - commit message conformance gate for pull request branches",
    no_args_is_help=True,
)
console = Console()


class ReporterFormat(str, Enum):
    """Output format for gate status."""

    AUTO = "auto"
    CONSOLE = "console"
    GITHUB = "github"


def _version_option_callback(value: bool) -> None:
    if value:
        typer.echo(f"flowcheck {__version__}")
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_option_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every git query.",
    ),
) -> None:
    """Commit message conformance gate."""
    _ = version
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
    )


def _make_reporter(output_format: ReporterFormat) -> StatusReporter:
    if output_format is ReporterFormat.AUTO:
        github = os.environ.get("GITHUB_ACTIONS", "").lower() == "true"
        output_format = ReporterFormat.GITHUB if github else ReporterFormat.CONSOLE
    if output_format is ReporterFormat.GITHUB:
        return GitHubActionsReporter.from_environment(sys.stdout)
    return ConsoleReporter(console)


@cli.command("check")
def check_cmd(
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        help="Repository path (defaults to current working directory).",
    ),
    base_ref: str | None = typer.Option(
        None,
        "--base-ref",
        help="Merge-target branch (default: GITHUB_BASE_REF or the pull request event payload).",
    ),
    trunk_ref: str | None = typer.Option(
        None,
        "--trunk-ref",
        help="Trunk branch whose history is never re-checked (default: main).",
    ),
    remote: str | None = typer.Option(
        None,
        "--remote",
        help="Remote that branch names are qualified with (default: origin).",
    ),
    candidate_ref: str | None = typer.Option(
        None,
        "--candidate-ref",
        help="Tip of the branch under review (default: HEAD).",
    ),
    pattern: str | None = typer.Option(
        None,
        "--pattern",
        help="Override commit message regex (default: INPUT_COMMIT-PATTERN or built-in grammar).",
    ),
    no_fetch: bool = typer.Option(
        False,
        "--no-fetch",
        help="Skip fetching the remote before resolving references.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Policy file (default: .flowcheck/commit-policy.yaml).",
    ),
    out: Path | None = typer.Option(
        None,
        "--out",
        "-o",
        help="Directory for COMMIT_MESSAGE_REPORT.json/.md.",
    ),
    output_format: ReporterFormat = typer.Option(
        ReporterFormat.AUTO,
        "--format",
        help="Status output: auto, console, or github.",
    ),
) -> None:
    """Check commit messages on the current branch that are new to the merge target.

    Exit codes:
      0 - All new commits conform
      1 - Configuration, pattern, or history error
      2 - Policy violation (remediation printed)
    """
    reporter = _make_reporter(output_format)
    try:
        gate_config = resolve_gate_config(
            repo,
            base_ref=base_ref,
            trunk_ref=trunk_ref,
            remote=remote,
            candidate_ref=candidate_ref,
            pattern=pattern,
            fetch=False if no_fetch else None,
            config_path=config,
            out_dir=out,
        )
        result = run_commit_message_gate(gate_config, reporter=reporter)
    except (
        PatternCompileError,
        PolicyConfigError,
        ReferenceResolutionError,
        HistoryResolutionError,
    ) as exc:
        reporter.fail(str(exc))
        raise typer.Exit(1) from exc

    for path in result.artifacts:
        console.print(f"[cyan]Artifact:[/cyan] {path}")
    if not result.passed:
        raise typer.Exit(EXIT_POLICY_VIOLATION)


@cli.command("lint-message")
def lint_message_cmd(
    message: str = typer.Argument(..., help="Commit message to test."),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        help="Repository whose policy file applies (defaults to current working directory).",
    ),
    pattern: str | None = typer.Option(
        None,
        "--pattern",
        help="Override commit message regex (default: INPUT_COMMIT-PATTERN or policy file).",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Policy file (default: .flowcheck/commit-policy.yaml).",
    ),
) -> None:
    """Test a single message against the repository policy without touching git."""
    try:
        policy = resolve_message_policy(repo, pattern=pattern, config_path=config)
        policy_pattern = compile_pattern(policy.pattern_source)
    except (PatternCompileError, PolicyConfigError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    normalized = normalize_message(message)
    console.print(f"[cyan]Normalized:[/cyan] {escape(normalized)}", emoji=False)
    reason = exemption_reason(normalized, policy.exemptions)
    if reason is not None:
        console.print(f"[green]✓ Exempt[/green] ({escape(reason)})")
        return
    if matches(policy_pattern, normalized):
        console.print("[green]✓ Conforms[/green]")
        return
    console.print("[bold red]✗ Does not match[/bold red]")
    console.print(f"[dim]Pattern: {escape(policy_pattern.source)}[/dim]")
    raise typer.Exit(EXIT_POLICY_VIOLATION)


@cli.command("init-config")
def init_config_cmd(
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        help="Repository path (defaults to current working directory).",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing policy file.",
    ),
) -> None:
    """Write the default .flowcheck/commit-policy.yaml."""
    try:
        path = ensure_default_policy(repo, force=force)
    except FileExistsError as exc:
        console.print(f"[bold red]Refused:[/bold red] {escape(str(exc))}")
        console.print("Use --force to overwrite.")
        raise typer.Exit(1) from exc
    console.print(f"[green]✓ Policy written[/green] {path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
