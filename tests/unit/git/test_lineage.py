"""Unit tests for reference lineage sets."""

from __future__ import annotations

from pathlib import Path

import pytest

from flowcheck.errors import ReferenceResolutionError
from flowcheck.git.exec import ExecError, ExecResult
from flowcheck.git.lineage import build_reference_set, fetch_remote, resolve_ref


class _GitStub:
    def __init__(self, outputs: dict[tuple[str, ...], ExecResult]):
        self.outputs = outputs
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, args: list[str], *, repo_root: Path) -> ExecResult:
        _ = repo_root
        key = tuple(args)
        self.calls.append(key)
        if key not in self.outputs:
            raise AssertionError(f"missing stub for args: {args}")
        result = self.outputs[key]
        if result.returncode != 0:
            raise ExecError(result)
        return result


def _result(args: list[str], stdout: str = "", stderr: str = "", code: int = 0) -> ExecResult:
    return ExecResult(argv=tuple(["git", *args]), cwd=Path("/repo"), returncode=code, stdout=stdout, stderr=stderr)


VERIFY_MAIN = ("rev-parse", "--verify", "--quiet", "origin/main^{commit}")


def test_build_reference_set_collects_rev_list(monkeypatch: pytest.MonkeyPatch) -> None:
    outputs = {
        VERIFY_MAIN: _result(list(VERIFY_MAIN), stdout="c3\n"),
        ("rev-list", "origin/main"): _result(["rev-list", "origin/main"], stdout="c3\nc2\n\nc1\n"),
    }
    monkeypatch.setattr("flowcheck.git.lineage.run_git", _GitStub(outputs))

    lineage = build_reference_set("origin/main", repo_root=Path("/repo"))

    assert lineage.ref == "origin/main"
    assert lineage.members == frozenset({"c1", "c2", "c3"})
    assert "c2" in lineage
    assert "c9" not in lineage
    assert len(lineage) == 3


def test_unknown_reference_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    outputs = {VERIFY_MAIN: _result(list(VERIFY_MAIN), code=1)}
    monkeypatch.setattr("flowcheck.git.lineage.run_git", _GitStub(outputs))

    with pytest.raises(ReferenceResolutionError, match="Unknown reference `origin/main`"):
        build_reference_set("origin/main", repo_root=Path("/repo"))


def test_traversal_failure_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    outputs = {
        VERIFY_MAIN: _result(list(VERIFY_MAIN), stdout="c3\n"),
        ("rev-list", "origin/main"): _result(["rev-list", "origin/main"], stderr="fatal: bad object", code=128),
    }
    monkeypatch.setattr("flowcheck.git.lineage.run_git", _GitStub(outputs))

    with pytest.raises(ReferenceResolutionError, match="Unable to traverse ancestry"):
        build_reference_set("origin/main", repo_root=Path("/repo"))


def test_resolve_ref_returns_sha(monkeypatch: pytest.MonkeyPatch) -> None:
    outputs = {VERIFY_MAIN: _result(list(VERIFY_MAIN), stdout="abc123\n")}
    monkeypatch.setattr("flowcheck.git.lineage.run_git", _GitStub(outputs))

    assert resolve_ref("origin/main", repo_root=Path("/repo")) == "abc123"


def test_fetch_failure_is_reference_resolution_error(monkeypatch: pytest.MonkeyPatch) -> None:
    outputs = {
        ("fetch", "origin"): _result(
            ["fetch", "origin"],
            stderr="fatal: unable to access remote: Could not resolve host",
            code=128,
        ),
    }
    monkeypatch.setattr("flowcheck.git.lineage.run_git", _GitStub(outputs))

    with pytest.raises(ReferenceResolutionError, match="Unable to fetch remote `origin`"):
        fetch_remote("origin", repo_root=Path("/repo"))
