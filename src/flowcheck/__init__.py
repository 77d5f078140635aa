"""flowcheck - commit message conformance gate for pull request branches."""

__version__ = "0.1.0"
