"""Status reporting for gate runs: ``info`` lines and one terminal ``fail``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol, TextIO

from rich.console import Console
from rich.markup import escape


class StatusReporter(Protocol):
    """Collaborator that surfaces gate progress and the final verdict."""

    failure: str | None

    def info(self, text: str) -> None: ...

    def fail(self, text: str) -> None: ...


class ConsoleReporter:
    """Render status through a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.failure: str | None = None

    def info(self, text: str) -> None:
        self.console.print(f"[cyan]i[/cyan] {escape(text)}", soft_wrap=True, emoji=False)

    def fail(self, text: str) -> None:
        self.failure = text
        self.console.print(f"[bold red]✗[/bold red] {escape(text)}", soft_wrap=True, emoji=False)


def escape_workflow_data(text: str) -> str:
    """Escape a workflow command payload (``%``, CR and LF)."""
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GitHubActionsReporter:
    """Emit GitHub Actions workflow commands.

    ``fail`` writes an ``::error::`` annotation and, when the runner provides
    ``GITHUB_STEP_SUMMARY``, appends the full text to the job summary.
    """

    def __init__(self, stream: TextIO, *, summary_path: Path | None = None) -> None:
        self.stream = stream
        self.summary_path = summary_path
        self.failure: str | None = None

    @classmethod
    def from_environment(cls, stream: TextIO) -> GitHubActionsReporter:
        summary = os.environ.get("GITHUB_STEP_SUMMARY", "").strip()
        return cls(stream, summary_path=Path(summary) if summary else None)

    def info(self, text: str) -> None:
        self.stream.write(f"{text}\n")

    def fail(self, text: str) -> None:
        self.failure = text
        self.stream.write(f"::error::{escape_workflow_data(text.rstrip())}\n")
        if self.summary_path is not None:
            with self.summary_path.open("a", encoding="utf-8") as handle:
                handle.write("## Commit message check failed\n\n```text\n")
                handle.write(text.rstrip())
                handle.write("\n```\n")
