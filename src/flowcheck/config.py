"""Load and merge commit-message gate configuration.

Settings are resolved in priority order: explicit CLI value, CI
environment, repository policy file, built-in default.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from flowcheck.errors import (
    MERGE_TARGET_MISSING,
    POLICY_CONFIG_INVALID,
    POLICY_CONFIG_MISSING,
    POLICY_CONFIG_PARSE_ERROR,
    PolicyConfigError,
)
from flowcheck.policy.exemptions import DEFAULT_EXEMPTIONS, ExemptionRules
from flowcheck.policy.remediation import DEFAULT_EXAMPLE_MESSAGE

DEFAULT_TRUNK_REF = "main"
DEFAULT_REMOTE = "origin"
DEFAULT_CANDIDATE_REF = "HEAD"

PATTERN_INPUT_ENV = "INPUT_COMMIT-PATTERN"
BASE_REF_ENV = "GITHUB_BASE_REF"
EVENT_PATH_ENV = "GITHUB_EVENT_PATH"

_ALLOWED_KEYS = frozenset(
    {"commit_pattern", "trunk_ref", "remote", "fetch", "exemptions", "example_message"}
)

# Keep this literal deterministic and sorted in write path.
POLICY_CONFIG_TEMPLATE: dict[str, Any] = {
    "commit_pattern": None,
    "trunk_ref": DEFAULT_TRUNK_REF,
    "remote": DEFAULT_REMOTE,
    "fetch": True,
    "exemptions": {
        "contains": list(DEFAULT_EXEMPTIONS.contains),
        "prefixes": list(DEFAULT_EXEMPTIONS.prefixes),
    },
    "example_message": DEFAULT_EXAMPLE_MESSAGE,
}


@dataclass(frozen=True)
class PolicyFile:
    """Validated contents of the repository policy file."""

    commit_pattern: str | None = None
    trunk_ref: str | None = None
    remote: str | None = None
    fetch: bool | None = None
    exemptions: ExemptionRules | None = None
    example_message: str | None = None


@dataclass(frozen=True)
class GateConfig:
    """Fully resolved inputs for one gate run."""

    repo_root: Path
    base_ref: str
    trunk_ref: str = DEFAULT_TRUNK_REF
    remote: str = DEFAULT_REMOTE
    candidate_ref: str = DEFAULT_CANDIDATE_REF
    pattern_source: str | None = None
    fetch: bool = True
    exemptions: ExemptionRules = DEFAULT_EXEMPTIONS
    example_message: str = DEFAULT_EXAMPLE_MESSAGE
    out_dir: Path | None = None

    @property
    def merge_target_ref(self) -> str:
        return qualify_ref(self.base_ref, self.remote)

    @property
    def trunk_target_ref(self) -> str:
        return qualify_ref(self.trunk_ref, self.remote)


def qualify_ref(branch: str, remote: str) -> str:
    """Prefix a bare branch name with its remote (``main`` -> ``origin/main``)."""
    if not remote or branch.startswith(f"{remote}/") or branch.startswith("refs/"):
        return branch
    return f"{remote}/{branch}"


def policy_path_for_repo(repo_root: Path) -> Path:
    """Return canonical policy file path for a repository."""
    return repo_root.resolve() / ".flowcheck" / "commit-policy.yaml"


def ensure_default_policy(repo_root: Path, *, force: bool = False) -> Path:
    """Create default policy YAML deterministically."""
    output_path = policy_path_for_repo(repo_root)
    if output_path.exists() and not force:
        raise FileExistsError(f"Policy file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    rendered = yaml.safe_dump(POLICY_CONFIG_TEMPLATE, sort_keys=True)
    output_path.write_text(rendered, encoding="utf-8")
    return output_path


def _optional_string(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise PolicyConfigError(f"`{key}` must be a string, got {type(value).__name__}")
    return value


def _string_tuple(value: Any, label: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise PolicyConfigError(f"`{label}` must be a list of strings")
    return tuple(item for item in value if item)


def _parse_exemptions(raw: Any) -> ExemptionRules | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise PolicyConfigError("`exemptions` must be a mapping")
    unknown = sorted(set(raw) - {"contains", "prefixes"})
    if unknown:
        raise PolicyConfigError(f"`exemptions` has unknown keys: {unknown}")
    contains = (
        _string_tuple(raw["contains"], "exemptions.contains")
        if "contains" in raw
        else DEFAULT_EXEMPTIONS.contains
    )
    prefixes = (
        _string_tuple(raw["prefixes"], "exemptions.prefixes")
        if "prefixes" in raw
        else DEFAULT_EXEMPTIONS.prefixes
    )
    return ExemptionRules(contains=contains, prefixes=prefixes)


def load_policy_file(path: Path, *, required: bool = False) -> PolicyFile:
    """Load and validate a policy file.

    A missing file yields empty settings unless ``required`` is set.
    """
    if not path.exists():
        if required:
            raise PolicyConfigError(f"Policy file not found: {path}", POLICY_CONFIG_MISSING)
        return PolicyFile()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise PolicyConfigError(
            f"{path.name} parse error: {exc}",
            POLICY_CONFIG_PARSE_ERROR,
        ) from exc
    if raw is None:
        return PolicyFile()
    if not isinstance(raw, dict):
        raise PolicyConfigError(
            f"{path.name} parse error: expected mapping at top level",
            POLICY_CONFIG_PARSE_ERROR,
        )

    unknown = sorted(set(raw) - _ALLOWED_KEYS)
    if unknown:
        raise PolicyConfigError(f"{path.name} has unknown keys: {unknown}", POLICY_CONFIG_INVALID)

    fetch = raw.get("fetch")
    if fetch is not None and not isinstance(fetch, bool):
        raise PolicyConfigError("`fetch` must be a boolean")

    return PolicyFile(
        commit_pattern=_optional_string(raw, "commit_pattern"),
        trunk_ref=_optional_string(raw, "trunk_ref"),
        remote=_optional_string(raw, "remote"),
        fetch=fetch,
        exemptions=_parse_exemptions(raw.get("exemptions")),
        example_message=_optional_string(raw, "example_message"),
    )


def merge_target_from_environment(environ: Mapping[str, str]) -> str | None:
    """Read the pull request base branch provided by the CI runner."""
    base_ref = environ.get(BASE_REF_ENV, "").strip()
    if base_ref:
        return base_ref

    event_path = environ.get(EVENT_PATH_ENV, "").strip()
    if not event_path:
        return None
    path = Path(event_path)
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PolicyConfigError(
            f"Malformed event payload at {path}: {exc}",
            POLICY_CONFIG_PARSE_ERROR,
        ) from exc
    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
    base = pull_request.get("base") if isinstance(pull_request, dict) else None
    ref = base.get("ref") if isinstance(base, dict) else None
    if isinstance(ref, str) and ref.strip():
        return ref.strip()
    return None


def pattern_from_environment(environ: Mapping[str, str]) -> str | None:
    """Read the ``commit-pattern`` action input; blank means no override."""
    value = environ.get(PATTERN_INPUT_ENV, "").strip()
    return value or None


@dataclass(frozen=True)
class MessagePolicy:
    """Pattern and exemption rules that judge a single message."""

    pattern_source: str | None = None
    exemptions: ExemptionRules = DEFAULT_EXEMPTIONS


def _load_repo_policy(repo_root: Path, config_path: Path | None) -> PolicyFile:
    if config_path is not None:
        return load_policy_file(config_path, required=True)
    return load_policy_file(policy_path_for_repo(repo_root))


def _select_pattern(pattern: str | None, env: Mapping[str, str], policy: PolicyFile) -> str | None:
    return pattern or pattern_from_environment(env) or policy.commit_pattern or None


def resolve_message_policy(
    repo_root: Path,
    *,
    pattern: str | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> MessagePolicy:
    """Resolve the pattern and exemptions ``check`` would apply, without git.

    Raises:
        PolicyConfigError: If the policy file is invalid, or ``config_path``
            names a file that does not exist.
    """
    env = os.environ if environ is None else environ
    policy = _load_repo_policy(repo_root.resolve(), config_path)
    return MessagePolicy(
        pattern_source=_select_pattern(pattern, env, policy),
        exemptions=policy.exemptions or DEFAULT_EXEMPTIONS,
    )


def resolve_gate_config(
    repo_root: Path,
    *,
    base_ref: str | None = None,
    trunk_ref: str | None = None,
    remote: str | None = None,
    candidate_ref: str | None = None,
    pattern: str | None = None,
    fetch: bool | None = None,
    config_path: Path | None = None,
    out_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> GateConfig:
    """Merge CLI values, environment and policy file into a ``GateConfig``.

    Raises:
        PolicyConfigError: If the policy file is invalid, an explicit
            ``config_path`` is missing, or no merge target can be determined.
    """
    env = os.environ if environ is None else environ
    resolved_root = repo_root.resolve()
    policy = _load_repo_policy(resolved_root, config_path)

    merge_target = base_ref or merge_target_from_environment(env)
    if not merge_target:
        raise PolicyConfigError(
            "No merge-target branch: pass --base-ref or run inside a pull request "
            f"workflow ({BASE_REF_ENV} / {EVENT_PATH_ENV}).",
            MERGE_TARGET_MISSING,
        )

    pattern_source = _select_pattern(pattern, env, policy)

    return GateConfig(
        repo_root=resolved_root,
        base_ref=merge_target,
        trunk_ref=trunk_ref or policy.trunk_ref or DEFAULT_TRUNK_REF,
        remote=remote if remote is not None else (policy.remote or DEFAULT_REMOTE),
        candidate_ref=candidate_ref or DEFAULT_CANDIDATE_REF,
        pattern_source=pattern_source,
        fetch=fetch if fetch is not None else (policy.fetch if policy.fetch is not None else True),
        exemptions=policy.exemptions or DEFAULT_EXEMPTIONS,
        example_message=policy.example_message or DEFAULT_EXAMPLE_MESSAGE,
        out_dir=out_dir,
    )
