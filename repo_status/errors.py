"""
Custom exception types used across repo-status-check.

Every failure a run can hit is one of these, so the checker can turn
them into logged issues instead of letting them reach the scheduler.
"""

from __future__ import annotations


class RepoStatusError(Exception):
    """Base class for all repo-status-check specific errors."""


class CommandError(RepoStatusError):
    """Raised when an external command cannot be launched at all."""


class PorcelainParseError(RepoStatusError):
    """Raised when command output does not match the expected grammar."""


class BranchParseError(PorcelainParseError):
    """Raised when the `## branch...remote/branch` header cannot be parsed."""


class OwnerParseError(PorcelainParseError):
    """Raised when a directory listing does not name an owner."""


class ConfigError(RepoStatusError):
    """Raised when settings cannot be turned into a RunConfig."""
