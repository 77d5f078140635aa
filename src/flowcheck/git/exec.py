"""Run git queries against an explicit repository root."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecResult:
    """Captured output of one git query."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str

    def lines(self) -> list[str]:
        """Return non-empty stdout lines."""
        return [line for line in self.stdout.splitlines() if line.strip()]


class ExecError(RuntimeError):
    """Raised when a git query exits non-zero."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


def run_git(args: list[str], *, repo_root: Path) -> ExecResult:
    """Run ``git <args>`` inside ``repo_root``; raise ``ExecError`` on failure."""
    argv = ("git", *args)
    logger.debug("git %s (repo=%s)", " ".join(args), repo_root)
    completed = subprocess.run(argv, cwd=repo_root, capture_output=True, text=True, check=False)
    result = ExecResult(
        argv=argv,
        cwd=repo_root,
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if result.returncode != 0:
        raise ExecError(result)
    return result
