"""Pytest configuration and fixtures for flowcheck tests."""
from pathlib import Path

import pytest


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    Catches runs that import the source tree instead of the installed package
    and end up with 0% coverage without failing.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'flowcheck' (the package) not 'src/flowcheck'.",
            returncode=1,
        )
